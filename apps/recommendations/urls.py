from django.urls import path
from . import views

urlpatterns = [
    path('jobs/<int:job_id>/workers/', views.JobWorkerMatchView.as_view(), name='job-worker-matches'),
    path('workers/<int:worker_id>/jobs/', views.WorkerJobMatchView.as_view(), name='worker-job-matches'),
]
