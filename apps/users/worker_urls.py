from django.urls import path
from .views import WorkerDetailView, WorkerAvailabilityView
from apps.jobs.views import WorkerApplicationsView

urlpatterns = [
    path('<int:worker_id>/', WorkerDetailView.as_view(), name='worker_detail'),
    path('<int:worker_id>/availability/', WorkerAvailabilityView.as_view(), name='worker_availability'),
    path('<int:worker_id>/applications/', WorkerApplicationsView.as_view(), name='worker_applications'),
]
