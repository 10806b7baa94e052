from django.urls import path
from .views import ApplicationCreateView, ApplicationDetailView, ApplicationStatusView, ApplicationReviewView
from apps.payments.views import ProcessPaymentView

urlpatterns = [
    path('', ApplicationCreateView.as_view(), name='application_create'),
    path('<int:application_id>/', ApplicationDetailView.as_view(), name='application_detail'),
    path('<int:application_id>/status/', ApplicationStatusView.as_view(), name='application_status'),
    path('<int:application_id>/review/', ApplicationReviewView.as_view(), name='application_review'),
    path('<int:application_id>/process-payment/', ProcessPaymentView.as_view(), name='application_process_payment'),
]
