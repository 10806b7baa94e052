from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from core.constants import WITHDRAWAL_METHOD_CHOICES, WITHDRAWAL_STATUS_CHOICES
from apps.users.models import Worker
from apps.jobs.models import Job, JobApplication


class Earning(models.Model):
    """Credit to a worker's wallet for one completed job."""
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='earnings')
    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name='earnings')
    application = models.OneToOneField(
        JobApplication, on_delete=models.SET_NULL, null=True, blank=True, related_name='earning'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.CharField(max_length=255)
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date', '-id']
        constraints = [
            # One credit per job per worker; makes settlement idempotent
            models.UniqueConstraint(fields=['worker', 'job'], name='unique_earning_per_worker_job'),
        ]

    def __str__(self):
        return f"Earning of {self.amount} for {self.worker.name} ({self.description})"


class Withdrawal(models.Model):
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='withdrawals')
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0.01)])
    method = models.CharField(max_length=20, choices=WITHDRAWAL_METHOD_CHOICES, default='bank_transfer')
    date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=10, choices=WITHDRAWAL_STATUS_CHOICES, default='pending')

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f"Withdrawal of {self.amount} by {self.worker.name} ({self.status})"
