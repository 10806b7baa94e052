from django.contrib import admin
from .models import User, Worker, Employer

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'phone_number', 'is_employer', 'is_worker', 'is_superuser')
    list_filter = ('is_superuser',)
    search_fields = ('username', 'email', 'phone_number')

@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'district', 'state', 'is_available', 'shakti_score', 'balance')
    list_filter = ('state', 'is_available')
    search_fields = ('name', 'phone', 'aadhaar_number')
    readonly_fields = ('balance', 'shakti_score', 'profile_completion')

@admin.register(Employer)
class EmployerAdmin(admin.ModelAdmin):
    list_display = ('name', 'company_name', 'phone', 'city', 'state')
    search_fields = ('name', 'company_name', 'phone')
