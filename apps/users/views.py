from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from .models import Worker, Employer
from .serializers import (
    UserSerializer, WorkerProfileSerializer, WorkerRegistrationSerializer,
    EmployerSerializer, EmployerRegistrationSerializer, LoginSerializer,
    AvailabilitySerializer
)
import logging

logger = logging.getLogger(__name__)

token_response = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'token': openapi.Schema(type=openapi.TYPE_STRING),
        'user': openapi.Schema(type=openapi.TYPE_OBJECT),
        'profile': openapi.Schema(type=openapi.TYPE_OBJECT),
    }
)


def get_worker(worker_id):
    try:
        return Worker.objects.get(pk=worker_id)
    except Worker.DoesNotExist:
        raise NotFound("Worker not found")


def get_employer(employer_id):
    try:
        return Employer.objects.get(pk=employer_id)
    except Employer.DoesNotExist:
        raise NotFound("Employer not found")


def ensure_worker_owner(request, worker):
    if getattr(request.user, 'worker', None) != worker:
        raise PermissionDenied("Not authorized to act for this worker")


class WorkerRegisterView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Register a worker profile and return an API token.",
        request_body=WorkerRegistrationSerializer,
        responses={201: openapi.Response('Registered', token_response), 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = WorkerRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        worker = serializer.save()
        token, _ = Token.objects.get_or_create(user=worker.user)
        return Response({
            "token": token.key,
            "user": UserSerializer(worker.user).data,
            "profile": WorkerProfileSerializer(worker).data
        }, status=status.HTTP_201_CREATED)


class EmployerRegisterView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Register an employer profile and return an API token.",
        request_body=EmployerRegistrationSerializer,
        responses={201: openapi.Response('Registered', token_response), 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = EmployerRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        employer = serializer.save()
        token, _ = Token.objects.get_or_create(user=employer.user)
        return Response({
            "token": token.key,
            "user": UserSerializer(employer.user).data,
            "profile": EmployerSerializer(employer).data
        }, status=status.HTTP_201_CREATED)


class AuthLoginView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        request_body=LoginSerializer,
        responses={200: openapi.Response('Login successful', token_response), 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        return Response({
            "token": token.key,
            "user": UserSerializer(user).data
        }, status=status.HTTP_200_OK)


class WorkerDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve a worker profile.",
        responses={200: WorkerProfileSerializer, 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        worker = get_worker(worker_id)
        return Response(WorkerProfileSerializer(worker).data)

    @swagger_auto_schema(
        operation_description="Update the authenticated worker's own profile.",
        request_body=WorkerProfileSerializer,
        responses={200: WorkerProfileSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        serializer = WorkerProfileSerializer(worker, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class WorkerAvailabilityView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Toggle whether the worker is available for new jobs.",
        request_body=AvailabilitySerializer,
        responses={200: WorkerProfileSerializer, 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        serializer = AvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        worker.is_available = serializer.validated_data['is_available']
        worker.save(update_fields=['is_available', 'updated_at'])
        logger.info(f"Worker {worker.id} availability set to {worker.is_available}")
        return Response(WorkerProfileSerializer(worker).data)


class EmployerDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve an employer profile.",
        responses={200: EmployerSerializer, 404: 'Not Found'}
    )
    def get(self, request, employer_id):
        return Response(EmployerSerializer(get_employer(employer_id)).data)
