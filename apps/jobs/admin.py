from django.contrib import admin
from .models import Job, JobApplication, ApplicationStatusChange, WorkerReview

class ApplicationStatusChangeInline(admin.TabularInline):
    model = ApplicationStatusChange
    extra = 0
    readonly_fields = ('status', 'changed_at', 'note')
    can_delete = False

@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'employer', 'category', 'city', 'state', 'salary', 'status', 'created_at')
    list_filter = ('status', 'category', 'state')
    search_fields = ('title', 'description', 'city')

@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ('job', 'worker', 'status', 'payment_status', 'applied_at')
    list_filter = ('status', 'payment_status')
    readonly_fields = ('worker_details', 'payment_status', 'payment_amount', 'payment_date')
    inlines = [ApplicationStatusChangeInline]

@admin.register(WorkerReview)
class WorkerReviewAdmin(admin.ModelAdmin):
    list_display = ('worker', 'employer', 'application', 'rating', 'created_at')
    list_filter = ('rating',)
    readonly_fields = ('application', 'worker', 'employer', 'rating', 'created_at')
