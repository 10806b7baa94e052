import logging
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError
from core.exceptions import (
    DuplicateApplication, JobNotAcceptingApplications, InvalidTransition,
    InvalidCancellationState, JobHasApplications, DuplicateReview
)
from core.constants import CANCELLABLE_APPLICATION_STATUSES
from apps.notifications.utils import notify
from apps.payments.settlement import settle_application, complete_job_if_done, lock_worker
from .models import JobApplication, ApplicationStatusChange, WorkerReview

logger = logging.getLogger(__name__)

# target status -> (timestamp field, event sent to the worker)
TRANSITION_EFFECTS = {
    'accepted': ('accepted_at', 'application_accepted'),
    'rejected': (None, 'application_rejected'),
    'in-progress': ('started_at', 'job_started'),
    'completed': ('completed_at', 'job_completed'),
}


def record_status(application, status, note=''):
    return ApplicationStatusChange.objects.create(application=application, status=status, note=note or '')


def apply_to_job(job, worker, notes=''):
    if not job.is_accepting_applications:
        raise JobNotAcceptingApplications(f"Job {job.pk} is {job.status} and not accepting applications.")
    if JobApplication.objects.filter(job=job, worker=worker).exists():
        raise DuplicateApplication()

    try:
        with transaction.atomic():
            application = JobApplication.objects.create(
                job=job,
                worker=worker,
                employer_id=job.employer_id,
                notes=notes or '',
                worker_details=JobApplication.snapshot_worker(worker),
            )
            record_status(application, 'pending', 'Application submitted')
    except IntegrityError:
        # Lost a race against a concurrent apply for the same pair
        raise DuplicateApplication()

    logger.info(f"Worker {worker.pk} applied to job {job.pk} (application {application.pk})")
    notify(job.employer_id, 'employer', 'new_application', {
        'job_id': job.pk,
        'job_title': job.title,
        'application_id': application.pk,
        'worker_id': worker.pk,
        'worker_name': worker.name,
    })
    return application


@transaction.atomic
def transition(application, target, employer, note='', payment_amount=None):
    """
    Move an application to ``target`` on behalf of its employer.

    The update only applies if the row still holds the status it was read
    with, so of two concurrent transitions at most one succeeds. Entering
    ``completed`` settles the application inside the same transaction.
    """
    if employer is None or application.employer_id != employer.pk:
        raise PermissionDenied("Only the employer who posted this job can update the application.")

    current = application.status
    if not application.can_transition_to(target):
        raise InvalidTransition(f"Cannot move application from {current} to {target}.")

    now = timezone.now()
    timestamp_field, event_type = TRANSITION_EFFECTS[target]
    changes = {'status': target, 'updated_at': now}
    if timestamp_field:
        changes[timestamp_field] = now

    updated = JobApplication.objects.filter(pk=application.pk, status=current).update(**changes)
    if not updated:
        application.refresh_from_db(fields=['status'])
        raise InvalidTransition(
            f"Application {application.pk} changed concurrently (now {application.status})."
        )
    for field, value in changes.items():
        setattr(application, field, value)

    record_status(application, target, note)
    logger.info(f"Application {application.pk} moved {current} -> {target}")

    job = application.job
    notify(application.worker_id, 'worker', event_type, {
        'job_id': job.pk,
        'job_title': job.title,
        'application_id': application.pk,
    })

    if target == 'completed':
        settle_application(application, payment_amount)
    return application


@transaction.atomic
def cancel_application(application):
    if not application.is_cancellable:
        raise InvalidCancellationState(
            f"Cannot cancel an application that is {application.status}."
        )
    job = application.job
    payload = {
        'job_id': job.pk,
        'job_title': job.title,
        'application_id': application.pk,
        'worker_id': application.worker_id,
        'worker_name': application.worker.name,
    }
    deleted, _ = JobApplication.objects.filter(
        pk=application.pk, status__in=CANCELLABLE_APPLICATION_STATUSES
    ).delete()
    if not deleted:
        raise InvalidCancellationState("Application is no longer cancellable.")

    logger.info(f"Application {payload['application_id']} withdrawn by worker {payload['worker_id']}")
    notify(application.employer_id, 'employer', 'application_withdrawn', payload)
    if application.status == 'accepted':
        # The withdrawn worker may have been the last one still holding the job open
        complete_job_if_done(job)


@transaction.atomic
def review_worker(application, employer, rating, comment=''):
    """
    Record the employer's 1-5 rating of the worker on a completed application
    and fold it into the worker's running average.
    """
    if employer is None or application.employer_id != employer.pk:
        raise PermissionDenied("Only the employer who posted this job can review the worker.")
    if application.status != 'completed':
        raise ValidationError({"status": "Only completed applications can be reviewed."})
    if WorkerReview.objects.filter(application_id=application.pk).exists():
        raise DuplicateReview()

    worker = lock_worker(application.worker_id)
    try:
        with transaction.atomic():
            review = WorkerReview.objects.create(
                application=application,
                worker=worker,
                employer=employer,
                rating=rating,
                comment=comment or '',
            )
    except IntegrityError:
        raise DuplicateReview()

    count = worker.rating_count + 1
    worker.rating = round((worker.rating * worker.rating_count + rating) / count, 2)
    worker.rating_count = count
    worker.save(update_fields=['rating', 'rating_count', 'updated_at'])
    logger.info(
        f"Employer {employer.pk} rated worker {worker.pk} {rating}/5 on application {application.pk}, "
        f"average now {worker.rating} over {count}"
    )
    return review


def delete_job(job):
    if job.applications.exists():
        raise JobHasApplications(f"Job {job.pk} has applications and cannot be deleted.")
    job_id = job.pk
    job.delete()
    logger.info(f"Job {job_id} deleted")
