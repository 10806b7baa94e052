from django.contrib import admin
from .models import Earning, Withdrawal

@admin.register(Earning)
class EarningAdmin(admin.ModelAdmin):
    list_display = ('worker', 'job', 'amount', 'date')
    search_fields = ('worker__name', 'description')

@admin.register(Withdrawal)
class WithdrawalAdmin(admin.ModelAdmin):
    list_display = ('worker', 'amount', 'method', 'status', 'date')
    list_filter = ('status', 'method')
