from django.urls import path
from .views import WorkerBalanceView, WorkerWalletView, WorkerWithdrawView, WorkerSyncBalanceView

urlpatterns = [
    path('<int:worker_id>/balance/', WorkerBalanceView.as_view(), name='worker_balance'),
    path('<int:worker_id>/wallet/', WorkerWalletView.as_view(), name='worker_wallet'),
    path('<int:worker_id>/withdraw/', WorkerWithdrawView.as_view(), name='worker_withdraw'),
    path('<int:worker_id>/sync-balance/', WorkerSyncBalanceView.as_view(), name='worker_sync_balance'),
]
