from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.utils import IsEmployer
from apps.users.views import get_worker, ensure_worker_owner
from apps.jobs.models import JobApplication
from .serializers import (
    EarningSerializer, WithdrawalSerializer, WithdrawalRequestSerializer,
    ProcessPaymentSerializer, WalletSerializer
)
from .settlement import settle_application, reconcile_balance, request_withdrawal, wallet_summary
import logging

logger = logging.getLogger(__name__)

balance_response = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'worker_id': openapi.Schema(type=openapi.TYPE_INTEGER),
        'balance': openapi.Schema(type=openapi.TYPE_STRING, format='decimal'),
    }
)


class WorkerBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Current wallet balance of the worker.",
        responses={200: openapi.Response('Balance', balance_response), 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        return Response({'worker_id': worker.id, 'balance': str(worker.balance)})


class WorkerWalletView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Balance, totals and the merged earning/withdrawal history, newest first.",
        responses={200: WalletSerializer, 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        return Response(WalletSerializer(wallet_summary(worker)).data)


class WorkerWithdrawView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Request a withdrawal from the worker's wallet.",
        request_body=WithdrawalRequestSerializer,
        responses={
            201: openapi.Response('Withdrawal requested', openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    'withdrawal': openapi.Schema(type=openapi.TYPE_OBJECT),
                    'balance': openapi.Schema(type=openapi.TYPE_STRING, format='decimal'),
                }
            )),
            400: 'Invalid amount or insufficient balance',
            403: 'Forbidden',
            404: 'Not Found'
        }
    )
    def post(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        serializer = WithdrawalRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal, balance = request_withdrawal(
            worker, serializer.validated_data['amount'], serializer.validated_data['method']
        )
        return Response({
            'withdrawal': WithdrawalSerializer(withdrawal).data,
            'balance': str(balance),
        }, status=status.HTTP_201_CREATED)


class WorkerSyncBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Rebuild missing earnings from paid applications and recompute the balance.",
        responses={200: openapi.Response('Synced', openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'balance': openapi.Schema(type=openapi.TYPE_STRING, format='decimal'),
                'earnings_created': openapi.Schema(type=openapi.TYPE_INTEGER),
                'earnings': openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_OBJECT)),
            }
        )), 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        worker, created = reconcile_balance(worker)
        return Response({
            'balance': str(worker.balance),
            'earnings_created': created,
            'earnings': EarningSerializer(worker.earnings.select_related('job'), many=True).data,
        })


class ProcessPaymentView(APIView):
    permission_classes = [IsAuthenticated, IsEmployer]

    @swagger_auto_schema(
        operation_description=(
            "Settle a completed application. Safe to retry: an application whose job "
            "is already credited to the worker is left unchanged."
        ),
        request_body=ProcessPaymentSerializer,
        responses={
            200: openapi.Response('Settled', openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    'created': openapi.Schema(type=openapi.TYPE_BOOLEAN),
                    'earning': openapi.Schema(type=openapi.TYPE_OBJECT),
                    'balance': openapi.Schema(type=openapi.TYPE_STRING, format='decimal'),
                }
            )),
            403: 'Forbidden',
            404: 'Not Found',
            409: 'Application not completed'
        }
    )
    def patch(self, request, application_id):
        try:
            application = JobApplication.objects.select_related('job', 'worker').get(pk=application_id)
        except JobApplication.DoesNotExist:
            raise NotFound("Application not found")
        if application.employer_id != request.user.employer.id:
            raise PermissionDenied("Only the employer who posted this job can process its payment")

        serializer = ProcessPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        earning, created = settle_application(application, serializer.validated_data.get('amount'))
        application.worker.refresh_from_db(fields=['balance'])
        return Response({
            'created': created,
            'earning': EarningSerializer(earning).data,
            'balance': str(application.worker.balance),
        })
