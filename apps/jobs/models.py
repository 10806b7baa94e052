from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.utils import timezone
from core.constants import (
    JOB_STATUS_CHOICES, JOB_APPLICATION_STATUS_CHOICES, PAYMENT_STATUS_CHOICES,
    JOB_CATEGORY_CHOICES, EMPLOYMENT_TYPE_CHOICES, LOCATION_TYPE_CHOICES,
    APPLICATION_TRANSITIONS, CANCELLABLE_APPLICATION_STATUSES
)
from apps.users.models import Worker, Employer


class Job(models.Model):
    employer = models.ForeignKey(Employer, on_delete=models.CASCADE, related_name='jobs')
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    category = models.CharField(max_length=30, choices=JOB_CATEGORY_CHOICES)
    location_type = models.CharField(max_length=10, choices=LOCATION_TYPE_CHOICES, default='onsite')
    street = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, db_index=True)
    pincode = models.CharField(
        max_length=6, blank=True,
        validators=[RegexValidator(r'^\d{6}$', 'Please provide a valid 6-digit pincode.')]
    )
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, default='Full-time')
    skills_required = models.JSONField(default=list, blank=True)
    salary = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(100), MaxValueValidator(100000)]
    )
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default='active', db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} - {self.city}, {self.state}"

    @property
    def is_accepting_applications(self):
        return self.status == 'active'


class JobApplication(models.Model):
    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name='applications')
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='applications')
    employer = models.ForeignKey(Employer, on_delete=models.CASCADE, related_name='applications')
    status = models.CharField(max_length=20, choices=JOB_APPLICATION_STATUS_CHOICES, default='pending')
    # Snapshot of the worker taken when applying; never refreshed afterwards
    worker_details = models.JSONField(default=dict, editable=False)
    notes = models.TextField(blank=True)

    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending')
    payment_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_date = models.DateTimeField(null=True, blank=True)

    applied_at = models.DateTimeField(default=timezone.now)
    accepted_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-applied_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'worker'], name='unique_application_per_worker_job'),
        ]

    def __str__(self):
        return f"{self.worker.name} applied to {self.job.title} ({self.status})"

    def can_transition_to(self, target):
        return target in APPLICATION_TRANSITIONS.get(self.status, ())

    @property
    def is_cancellable(self):
        return self.status in CANCELLABLE_APPLICATION_STATUSES

    @staticmethod
    def snapshot_worker(worker):
        return {
            'name': worker.name,
            'phone': worker.phone,
            'skills': list(worker.skills or []),
            'experience_years': worker.experience_years,
            'rating': worker.rating,
        }


class ApplicationStatusChange(models.Model):
    """Append-only audit trail of application status changes."""
    application = models.ForeignKey(JobApplication, on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=JOB_APPLICATION_STATUS_CHOICES)
    changed_at = models.DateTimeField(default=timezone.now)
    note = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ['changed_at', 'id']

    def __str__(self):
        return f"Application {self.application_id} -> {self.status}"


class WorkerReview(models.Model):
    """An employer's rating of the worker on a completed application, one per application."""
    application = models.OneToOneField(JobApplication, on_delete=models.CASCADE, related_name='review')
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='reviews')
    employer = models.ForeignKey(Employer, on_delete=models.CASCADE, related_name='reviews_given')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(max_length=1000, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Review for {self.worker.name} on application {self.application_id} ({self.rating}/5)"
