"""
Worker wallet bookkeeping.

A worker's balance is always derived from the ledger: the sum of their
Earning rows minus the sum of their Withdrawal rows. Every write that
changes the ledger locks the worker row first, so concurrent completions or
withdrawals for the same worker are serialized, and the (worker, job)
unique constraint on Earning guarantees a job is credited at most once.
"""
import logging
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from core.constants import ENGAGED_APPLICATION_STATUSES
from core.exceptions import InvalidTransition, InsufficientBalance
from apps.users.models import Worker
from apps.jobs.models import Job, JobApplication
from apps.notifications.utils import notify
from .models import Earning, Withdrawal

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def to_amount(value):
    try:
        amount = Decimal(str(value)).quantize(Decimal('0.01'))
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError({"amount": "A valid amount is required."})
    if not amount.is_finite():
        raise ValidationError({"amount": "A valid amount is required."})
    return amount


def resolve_payment_amount(application, amount=None):
    """Explicit amount first, then the job salary, then the configured default."""
    if amount is not None:
        return to_amount(amount)
    if application.job.salary:
        return to_amount(application.job.salary)
    return to_amount(settings.DEFAULT_PAYMENT_AMOUNT)


def compute_balance(worker):
    earned = Earning.objects.filter(worker=worker).aggregate(total=Sum('amount'))['total'] or ZERO
    withdrawn = Withdrawal.objects.filter(worker=worker).aggregate(total=Sum('amount'))['total'] or ZERO
    return (earned - withdrawn).quantize(Decimal('0.01'))


def lock_worker(worker_id):
    return Worker.objects.select_for_update().get(pk=worker_id)


def _store_balance(worker):
    worker.balance = compute_balance(worker)
    worker.save(update_fields=['balance', 'updated_at'])
    return worker.balance


def complete_job_if_done(job):
    """Move the job to completed once every application taken on for it is completed."""
    engaged = JobApplication.objects.filter(job_id=job.pk, status__in=ENGAGED_APPLICATION_STATUSES)
    if not engaged.exists() or engaged.exclude(status='completed').exists():
        return False
    now = timezone.now()
    updated = Job.objects.filter(pk=job.pk).exclude(status='completed').update(
        status='completed', completed_at=now, updated_at=now
    )
    if updated:
        job.status = 'completed'
        job.completed_at = now
        logger.info(f"Job {job.pk} auto-completed: all accepted applications are completed")
    return bool(updated)


@transaction.atomic
def settle_application(application, amount=None):
    """
    Credit the worker for a completed application.

    Returns ``(earning, created)``. Settling an application whose job is
    already credited to the worker is a no-op and returns the existing
    earning with ``created=False``.
    """
    if application.status != 'completed':
        raise InvalidTransition(
            f"Only completed applications can be settled (application is {application.status})."
        )
    value = resolve_payment_amount(application, amount)
    if value < ZERO:
        raise ValidationError({"amount": "Payment amount cannot be negative."})

    worker = lock_worker(application.worker_id)
    existing = Earning.objects.filter(worker=worker, job_id=application.job_id).first()
    if existing is not None:
        logger.info(f"Application {application.pk} already settled, skipping")
        return existing, False

    job = application.job
    now = timezone.now()
    earning = Earning.objects.create(
        worker=worker,
        job=job,
        application=application,
        amount=value,
        description=f"Payment for: {job.title}",
        date=now,
    )
    JobApplication.objects.filter(pk=application.pk).update(
        payment_status='paid', payment_amount=value, payment_date=now, updated_at=now
    )
    application.payment_status = 'paid'
    application.payment_amount = value
    application.payment_date = now

    balance = _store_balance(worker)
    logger.info(f"Settled application {application.pk}: credited {value} to worker {worker.pk}, balance {balance}")

    notify(worker.pk, 'worker', 'payment_received', {
        'job_id': job.pk,
        'job_title': job.title,
        'application_id': application.pk,
        'amount': str(value),
    })
    complete_job_if_done(job)
    return earning, True


@transaction.atomic
def reconcile_balance(worker):
    """
    Rebuild missing earnings from completed, paid applications and
    recompute the balance. Returns ``(worker, created_count)``.
    """
    worker = lock_worker(worker.pk)
    settled_jobs = set(Earning.objects.filter(worker=worker).values_list('job_id', flat=True))
    created = 0
    paid = JobApplication.objects.filter(
        worker=worker, status='completed', payment_status='paid'
    ).select_related('job')
    for application in paid:
        if application.job_id in settled_jobs:
            continue
        amount = application.payment_amount or application.job.salary or settings.DEFAULT_PAYMENT_AMOUNT
        Earning.objects.create(
            worker=worker,
            job=application.job,
            application=application,
            amount=to_amount(amount),
            description=f"Payment for: {application.job.title}",
            date=application.payment_date or application.updated_at,
        )
        settled_jobs.add(application.job_id)
        created += 1

    balance = _store_balance(worker)
    logger.info(f"Synced balance for worker {worker.pk}: {balance} ({created} earnings rebuilt)")
    return worker, created


@transaction.atomic
def request_withdrawal(worker, amount, method='bank_transfer'):
    value = to_amount(amount)
    if value <= ZERO:
        raise ValidationError({"amount": "Withdrawal amount must be positive."})

    worker = lock_worker(worker.pk)
    balance = compute_balance(worker)
    if value > balance:
        raise InsufficientBalance(f"Insufficient balance: available {balance}, requested {value}.")

    withdrawal = Withdrawal.objects.create(worker=worker, amount=value, method=method)
    new_balance = _store_balance(worker)
    logger.info(f"Withdrawal {withdrawal.pk} of {value} by worker {worker.pk}, balance {new_balance}")

    notify(worker.pk, 'worker', 'withdrawal_requested', {
        'withdrawal_id': withdrawal.pk,
        'amount': str(value),
        'method': withdrawal.get_method_display(),
    })
    return withdrawal, new_balance


def wallet_summary(worker):
    earnings = list(Earning.objects.filter(worker=worker).select_related('job'))
    withdrawals = list(Withdrawal.objects.filter(worker=worker))
    total_earned = sum((e.amount for e in earnings), ZERO)
    total_withdrawn = sum((w.amount for w in withdrawals), ZERO)
    balance = total_earned - total_withdrawn
    if worker.balance != balance:
        logger.warning(f"Stored balance {worker.balance} for worker {worker.pk} differs from ledger {balance}")

    transactions = [
        {
            'id': f"earning_{e.pk}",
            'type': 'earning',
            'amount': e.amount,
            'description': e.description,
            'date': e.date,
            'status': 'completed',
            'job_id': e.job_id,
            'job_title': e.job.title,
        }
        for e in earnings
    ] + [
        {
            'id': f"withdrawal_{w.pk}",
            'type': 'withdrawal',
            'amount': w.amount,
            'description': f"Withdrawal to {w.get_method_display()}",
            'date': w.date,
            'status': w.status,
        }
        for w in withdrawals
    ]
    transactions.sort(key=lambda t: t['date'], reverse=True)

    return {
        'balance': balance,
        'total_earned': total_earned,
        'total_withdrawn': total_withdrawn,
        'transactions': transactions,
    }
