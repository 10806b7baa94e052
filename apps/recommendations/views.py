from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from apps.users.views import get_worker
from apps.jobs.views import get_job
from .serializers import JobMatchSerializer, WorkerMatchSerializer
from .utils import MatchEngine
import logging

logger = logging.getLogger(__name__)

match_parameters = [
    openapi.Parameter('min_score', openapi.IN_QUERY, type=openapi.TYPE_NUMBER, description='Defaults to 0.6'),
    openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
]


def match_options(params):
    try:
        min_score = float(params['min_score']) if params.get('min_score') else None
        limit = int(params['limit']) if params.get('limit') else None
    except ValueError:
        raise ValidationError("min_score must be a number and limit an integer.")
    if min_score is not None and not 0 <= min_score <= 1:
        raise ValidationError({'min_score': "Must be between 0 and 1."})
    if limit is not None and limit < 1:
        raise ValidationError({'limit': "Must be a positive integer."})
    return min_score, limit


class WorkerJobMatchView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Active jobs in the worker's state ranked by match score.",
        manual_parameters=match_parameters,
        responses={200: JobMatchSerializer(many=True), 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        worker = get_worker(worker_id)
        min_score, limit = match_options(request.query_params)
        matches = MatchEngine.find_matching_jobs(worker, min_score=min_score, limit=limit)
        logger.debug(f"Worker {worker.id}: {len(matches)} matching jobs")
        return Response(JobMatchSerializer(matches, many=True).data)


class JobWorkerMatchView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Available workers in the job's state ranked by match score.",
        manual_parameters=match_parameters,
        responses={200: WorkerMatchSerializer(many=True), 404: 'Not Found'}
    )
    def get(self, request, job_id):
        job = get_job(job_id)
        min_score, limit = match_options(request.query_params)
        matches = MatchEngine.find_matching_workers(job, min_score=min_score, limit=limit)
        logger.debug(f"Job {job.id}: {len(matches)} matching workers")
        return Response(WorkerMatchSerializer(matches, many=True).data)
