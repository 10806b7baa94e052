from django.urls import path
from .views import JobListCreateView, JobDetailView, JobApplicationsForJobView

urlpatterns = [
    path('', JobListCreateView.as_view(), name='job_list_create'),
    path('<int:job_id>/', JobDetailView.as_view(), name='job_detail'),
    path('<int:job_id>/applications/', JobApplicationsForJobView.as_view(), name='job_applications'),
]
