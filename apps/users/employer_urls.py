from django.urls import path
from .views import EmployerDetailView
from apps.jobs.views import EmployerJobsView, EmployerStatsView

urlpatterns = [
    path('<int:employer_id>/', EmployerDetailView.as_view(), name='employer_detail'),
    path('<int:employer_id>/jobs/', EmployerJobsView.as_view(), name='employer_jobs'),
    path('<int:employer_id>/stats/', EmployerStatsView.as_view(), name='employer_stats'),
]
