from django.urls import path
from .views import WorkerRegisterView, EmployerRegisterView, AuthLoginView

urlpatterns = [
    path('auth/login/', AuthLoginView.as_view(), name='auth_login'),
    path('workers/register/', WorkerRegisterView.as_view(), name='worker_register'),
    path('employers/register/', EmployerRegisterView.as_view(), name='employer_register'),
]
