from django.contrib import admin
from .models import Notification

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('event_type', 'recipient_type', 'recipient_id', 'is_read', 'created_at')
    list_filter = ('event_type', 'recipient_type', 'is_read')
    search_fields = ('title', 'message')
