from rest_framework import serializers
from apps.users.serializers import WorkerSummarySerializer
from apps.jobs.serializers import JobSerializer


class JobMatchSerializer(serializers.Serializer):
    job = JobSerializer(read_only=True)
    score = serializers.FloatField(read_only=True)


class WorkerMatchSerializer(serializers.Serializer):
    worker = WorkerSummarySerializer(read_only=True)
    score = serializers.FloatField(read_only=True)
