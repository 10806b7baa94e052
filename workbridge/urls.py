from django.contrib import admin
from django.urls import path, include
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="WorkBridge API",
        default_version='v1',
        description="API for the WorkBridge labour marketplace",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    path('', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('admin/', admin.site.urls),
    path('users/', include('apps.users.urls')),
    path('workers/', include('apps.users.worker_urls')),
    path('workers/', include('apps.payments.urls')),
    path('employers/', include('apps.users.employer_urls')),
    path('jobs/', include('apps.jobs.urls')),
    path('job-applications/', include('apps.jobs.application_urls')),
    path('notifications/', include('apps.notifications.urls')),
    path('', include('apps.recommendations.urls')),
]
