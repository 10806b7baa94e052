from decimal import Decimal, InvalidOperation
from django.db import transaction
from django.db.models import Q, Count
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.utils import IsEmployer, IsWorker
from apps.users.views import get_worker, get_employer, ensure_worker_owner
from apps.recommendations.utils import MatchEngine
from .models import Job, JobApplication
from .serializers import (
    JobSerializer, JobApplicationSerializer, ApplicationCreateSerializer,
    ApplicationStatusSerializer, EmployerStatsSerializer, ReviewCreateSerializer,
    WorkerReviewSerializer
)
from .lifecycle import apply_to_job, transition, cancel_application, delete_job, review_worker
import logging

logger = logging.getLogger(__name__)

CURRENT_APPLICATION_STATUSES = ('pending', 'accepted', 'in-progress')
PAST_APPLICATION_STATUSES = ('completed', 'rejected')


def get_job(job_id):
    try:
        return Job.objects.select_related('employer').get(pk=job_id)
    except Job.DoesNotExist:
        raise NotFound("Job not found")


def get_application(application_id):
    try:
        return JobApplication.objects.select_related('job', 'worker', 'employer').get(pk=application_id)
    except JobApplication.DoesNotExist:
        raise NotFound("Application not found")


def ensure_job_owner(request, job):
    if getattr(request.user, 'employer', None) != job.employer:
        raise PermissionDenied("Not authorized to manage this job")


def parse_decimal_param(params, name):
    value = params.get(name)
    if value in (None, ''):
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise ValidationError({name: "Must be a number."})
    if not number.is_finite():
        raise ValidationError({name: "Must be a number."})
    return number


class JobListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated(), IsEmployer()]
        return super().get_permissions()

    @swagger_auto_schema(
        operation_description="List jobs. `location` matches city or state, `skills` is comma separated.",
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('state', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('location', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('skills', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('category', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('min_salary', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('max_salary', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
        ],
        responses={200: JobSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        params = request.query_params
        queryset = Job.objects.select_related('employer')
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('state'):
            queryset = queryset.filter(state__iexact=params['state'])
        if params.get('category'):
            queryset = queryset.filter(category=params['category'])
        if params.get('location'):
            location = params['location']
            queryset = queryset.filter(Q(city__icontains=location) | Q(state__icontains=location))
        min_salary = parse_decimal_param(params, 'min_salary')
        if min_salary is not None:
            queryset = queryset.filter(salary__gte=min_salary)
        max_salary = parse_decimal_param(params, 'max_salary')
        if max_salary is not None:
            queryset = queryset.filter(salary__lte=max_salary)

        jobs = list(queryset)
        if params.get('skills'):
            wanted = {s.strip().lower() for s in params['skills'].split(',') if s.strip()}
            jobs = [
                job for job in jobs
                if wanted & {s.lower() for s in job.skills_required or []}
            ]
        return Response(JobSerializer(jobs, many=True).data)

    @swagger_auto_schema(
        operation_description="Post a new job. Workers in the same state with a strong match are notified.",
        request_body=JobSerializer,
        responses={201: JobSerializer, 400: 'Bad Request', 403: 'Forbidden'}
    )
    def post(self, request):
        employer = request.user.employer
        serializer = JobSerializer(data=request.data, context={'employer': employer})
        serializer.is_valid(raise_exception=True)
        job = serializer.save()
        logger.info(f"Job {job.id} posted by employer {employer.id}: {job.title}")
        transaction.on_commit(lambda: MatchEngine.notify_matching_workers(job))
        return Response(JobSerializer(job).data, status=status.HTTP_201_CREATED)


class JobDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve a job.",
        responses={200: JobSerializer, 404: 'Not Found'}
    )
    def get(self, request, job_id):
        return Response(JobSerializer(get_job(job_id)).data)

    @swagger_auto_schema(
        operation_description="Update a job (owning employer only).",
        request_body=JobSerializer,
        responses={200: JobSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, job_id):
        job = get_job(job_id)
        ensure_job_owner(request, job)
        serializer = JobSerializer(job, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(f"Job {job.id} updated")
        return Response(serializer.data)

    @swagger_auto_schema(
        operation_description="Delete a job that has no applications (owning employer only).",
        responses={204: 'Deleted', 403: 'Forbidden', 404: 'Not Found', 409: 'Job has applications'}
    )
    def delete(self, request, job_id):
        job = get_job(job_id)
        ensure_job_owner(request, job)
        delete_job(job)
        return Response(status=status.HTTP_204_NO_CONTENT)


class JobApplicationsForJobView(APIView):
    permission_classes = [IsAuthenticated, IsEmployer]

    @swagger_auto_schema(
        operation_description="List applications received for a job (owning employer only).",
        manual_parameters=[openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING)],
        responses={200: JobApplicationSerializer(many=True), 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, job_id):
        job = get_job(job_id)
        ensure_job_owner(request, job)
        queryset = job.applications.select_related('worker', 'job__employer').prefetch_related('status_history')
        if request.query_params.get('status'):
            queryset = queryset.filter(status=request.query_params['status'])
        return Response(JobApplicationSerializer(queryset, many=True).data)


class ApplicationCreateView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Apply to an active job as the authenticated worker.",
        request_body=ApplicationCreateSerializer,
        responses={
            201: JobApplicationSerializer,
            400: 'Job not accepting applications',
            404: 'Not Found',
            409: 'Already applied'
        }
    )
    def post(self, request):
        serializer = ApplicationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = get_job(serializer.validated_data['job_id'])
        application = apply_to_job(job, request.user.worker, serializer.validated_data['notes'])
        return Response(JobApplicationSerializer(application).data, status=status.HTTP_201_CREATED)


class ApplicationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve an application with its status history.",
        responses={200: JobApplicationSerializer, 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, application_id):
        application = get_application(application_id)
        user = request.user
        if getattr(user, 'worker', None) != application.worker and getattr(user, 'employer', None) != application.employer:
            raise PermissionDenied("Not authorized to view this application")
        return Response(JobApplicationSerializer(application).data)

    @swagger_auto_schema(
        operation_description="Withdraw a pending or accepted application (applicant only).",
        responses={204: 'Withdrawn', 400: 'Not cancellable', 403: 'Forbidden', 404: 'Not Found'}
    )
    def delete(self, request, application_id):
        application = get_application(application_id)
        ensure_worker_owner(request, application.worker)
        cancel_application(application)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ApplicationStatusView(APIView):
    permission_classes = [IsAuthenticated, IsEmployer]

    @swagger_auto_schema(
        operation_description=(
            "Move an application along pending -> accepted|rejected, accepted -> in-progress, "
            "in-progress -> completed. Completing settles the worker's payment."
        ),
        request_body=ApplicationStatusSerializer,
        responses={
            200: JobApplicationSerializer,
            400: 'Bad Request',
            403: 'Forbidden',
            404: 'Not Found',
            409: 'Invalid transition'
        }
    )
    def patch(self, request, application_id):
        application = get_application(application_id)
        serializer = ApplicationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        transition(
            application,
            data['status'],
            request.user.employer,
            note=data['note'],
            payment_amount=data.get('payment_amount'),
        )
        application.refresh_from_db()
        return Response(JobApplicationSerializer(application).data)


class ApplicationReviewView(APIView):
    permission_classes = [IsAuthenticated, IsEmployer]

    @swagger_auto_schema(
        operation_description="Rate the worker 1-5 on a completed application. One review per application.",
        request_body=ReviewCreateSerializer,
        responses={
            201: WorkerReviewSerializer,
            400: 'Bad Request',
            403: 'Forbidden',
            404: 'Not Found',
            409: 'Already reviewed'
        }
    )
    def post(self, request, application_id):
        application = get_application(application_id)
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = review_worker(
            application,
            request.user.employer,
            serializer.validated_data['rating'],
            serializer.validated_data['comment'],
        )
        return Response(WorkerReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class WorkerApplicationsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the worker's own applications. scope=current (default) or past.",
        manual_parameters=[
            openapi.Parameter('scope', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['current', 'past']),
        ],
        responses={200: JobApplicationSerializer(many=True), 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        worker = get_worker(worker_id)
        ensure_worker_owner(request, worker)
        scope = request.query_params.get('scope', 'current')
        if scope not in ('current', 'past'):
            raise ValidationError({'scope': "Must be 'current' or 'past'."})
        statuses = CURRENT_APPLICATION_STATUSES if scope == 'current' else PAST_APPLICATION_STATUSES
        queryset = worker.applications.filter(status__in=statuses).select_related(
            'job__employer', 'worker'
        ).prefetch_related('status_history')
        return Response(JobApplicationSerializer(queryset, many=True).data)


class EmployerJobsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List jobs posted by an employer.",
        manual_parameters=[openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING)],
        responses={200: JobSerializer(many=True), 404: 'Not Found'}
    )
    def get(self, request, employer_id):
        employer = get_employer(employer_id)
        queryset = employer.jobs.select_related('employer')
        if request.query_params.get('status'):
            queryset = queryset.filter(status=request.query_params['status'])
        return Response(JobSerializer(queryset, many=True).data)


class EmployerStatsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Job and application counts for an employer.",
        responses={200: EmployerStatsSerializer, 404: 'Not Found'}
    )
    def get(self, request, employer_id):
        employer = get_employer(employer_id)
        jobs = employer.jobs.annotate(application_total=Count('applications'))
        total_jobs = jobs.count()
        total_applications = sum(job.application_total for job in jobs)
        stats = {
            'total_jobs': total_jobs,
            'active_jobs': jobs.filter(status__in=('active', 'in-progress')).count(),
            'completed_jobs': jobs.filter(status='completed').count(),
            'total_applications': total_applications,
            'average_applications_per_job': total_applications / total_jobs if total_jobs else 0.0,
        }
        return Response(EmployerStatsSerializer(stats).data)
