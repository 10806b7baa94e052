from datetime import timedelta
from django.conf import settings
from django.utils import timezone
from rest_framework import serializers
from core.constants import JOB_APPLICATION_STATUS_CHOICES
from apps.users.serializers import WorkerSummarySerializer
from .models import Job, JobApplication, ApplicationStatusChange, WorkerReview

import logging

logger = logging.getLogger(__name__)


class JobSerializer(serializers.ModelSerializer):
    employer_name = serializers.CharField(source='employer.name', read_only=True)
    company_name = serializers.CharField(source='employer.company_name', read_only=True)
    skills_required = serializers.ListField(
        child=serializers.CharField(max_length=50), allow_empty=True, required=False
    )
    application_count = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'employer', 'employer_name', 'company_name', 'title', 'description',
            'category', 'location_type', 'street', 'city', 'state', 'pincode',
            'employment_type', 'skills_required', 'salary', 'status', 'application_count',
            'completed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'employer', 'completed_at', 'created_at', 'updated_at']

    def get_application_count(self, obj):
        return obj.applications.count()

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Job title is required.")
        return value

    def validate_status(self, value):
        # completed is reached through the application lifecycle only
        if value == 'completed' and (self.instance is None or self.instance.status != 'completed'):
            raise serializers.ValidationError("A job is completed automatically when its work is done.")
        return value

    def validate_skills_required(self, value):
        return [skill.strip() for skill in value if skill.strip()]

    def validate(self, data):
        if self.instance is not None:
            return data
        employer = self.context['employer']
        window = timezone.now() - timedelta(minutes=settings.DUPLICATE_JOB_WINDOW_MINUTES)
        duplicate = Job.objects.filter(
            employer=employer,
            title=data.get('title'),
            city=data.get('city'),
            created_at__gt=window,
        ).exists()
        if duplicate:
            logger.warning(f"Duplicate job posting by employer {employer.id}: {data.get('title')}")
            raise serializers.ValidationError(
                f"A similar job was already posted in the last {settings.DUPLICATE_JOB_WINDOW_MINUTES} minutes."
            )
        return data

    def create(self, validated_data):
        validated_data['employer'] = self.context['employer']
        return super().create(validated_data)


class ApplicationStatusChangeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ApplicationStatusChange
        fields = ['status', 'changed_at', 'note']


class JobApplicationSerializer(serializers.ModelSerializer):
    job = JobSerializer(read_only=True)
    worker = WorkerSummarySerializer(read_only=True)
    status_history = ApplicationStatusChangeSerializer(many=True, read_only=True)

    class Meta:
        model = JobApplication
        fields = [
            'id', 'job', 'worker', 'employer', 'status', 'worker_details', 'notes',
            'payment_status', 'payment_amount', 'payment_date', 'applied_at',
            'accepted_at', 'started_at', 'completed_at', 'updated_at', 'status_history'
        ]
        read_only_fields = fields


class ApplicationCreateSerializer(serializers.Serializer):
    job_id = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JOB_APPLICATION_STATUS_CHOICES)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    payment_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class WorkerReviewSerializer(serializers.ModelSerializer):
    worker_rating = serializers.FloatField(source='worker.rating', read_only=True)
    worker_rating_count = serializers.IntegerField(source='worker.rating_count', read_only=True)

    class Meta:
        model = WorkerReview
        fields = [
            'id', 'application', 'worker', 'employer', 'rating', 'comment', 'created_at',
            'worker_rating', 'worker_rating_count'
        ]
        read_only_fields = fields


class EmployerStatsSerializer(serializers.Serializer):
    total_jobs = serializers.IntegerField()
    active_jobs = serializers.IntegerField()
    completed_jobs = serializers.IntegerField()
    total_applications = serializers.IntegerField()
    average_applications_per_job = serializers.FloatField()
