import logging
import re
from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient
from apps.users.models import Worker, Employer
from .models import Notification

logger = logging.getLogger(__name__)

# event_type -> (title, message); placeholders are filled from the payload
NOTIFICATION_TEMPLATES = {
    'new_job_match': (
        "New job near you: {job_title}",
        "New job alert! {job_title} in {city}. Salary: Rs.{salary}. Open WorkBridge to apply.",
    ),
    'new_application': (
        "New application for {job_title}",
        "New application! {worker_name} has applied for your job: {job_title}.",
    ),
    'application_accepted': (
        "Application accepted: {job_title}",
        "Congratulations! You've been selected for the job: {job_title}.",
    ),
    'application_rejected': (
        "Application update: {job_title}",
        "Your application for {job_title} was not selected this time. Keep applying!",
    ),
    'application_withdrawn': (
        "Application withdrawn: {job_title}",
        "{worker_name} has withdrawn their application for {job_title}.",
    ),
    'job_started': (
        "Job started: {job_title}",
        "Your job {job_title} has been marked as started by the employer.",
    ),
    'job_completed': (
        "Job completed: {job_title}",
        "Job {job_title} has been marked as completed.",
    ),
    'payment_received': (
        "Payment received for {job_title}",
        "Rs.{amount} for {job_title} has been added to your wallet.",
    ),
    'withdrawal_requested': (
        "Withdrawal requested",
        "Your withdrawal of Rs.{amount} via {method} is being processed.",
    ),
}


class _Blank(dict):
    def __missing__(self, key):
        return ''


def render_notification(event_type, payload):
    title, message = NOTIFICATION_TEMPLATES.get(event_type, (event_type.replace('_', ' ').title(), ''))
    context = _Blank(payload or {})
    return title.format_map(context), message.format_map(context)


def get_recipient(recipient_id, recipient_type):
    model = Worker if recipient_type == 'worker' else Employer
    return model.objects.filter(pk=recipient_id).first()


def normalize_phone(phone):
    digits = re.sub(r'[^\d+]', '', phone or '')
    if re.match(r'^[6-9]\d{9}$', digits):
        return f"+91{digits}"
    if re.match(r'^\+\d{9,15}$', digits):
        return digits
    return None


def send_sms(phone, message):
    """Send an SMS through Twilio. Returns False when SMS is not configured."""
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE_NUMBER):
        logger.debug(f"SMS disabled, skipping message to {phone}")
        return False
    to = normalize_phone(phone)
    if not to:
        logger.warning(f"Invalid phone number format: {phone}")
        return False
    twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
    twilio_client.messages.create(body=message, from_=settings.TWILIO_PHONE_NUMBER, to=to)
    logger.info(f"SMS notification sent to {to}")
    return True


def dispatch(recipient_id, recipient_type, event_type, payload=None):
    """
    Deliver a notification: store it in-app, then push SMS and email when the
    recipient has them.

    Never raises; a failed delivery is logged and reported as False so it can
    never undo the business operation that triggered it.
    """
    payload = payload or {}
    try:
        title, message = render_notification(event_type, payload)
        Notification.objects.create(
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            event_type=event_type,
            title=title,
            message=message,
            payload=payload,
        )
        recipient = get_recipient(recipient_id, recipient_type)
        if recipient is None:
            logger.warning(f"Notification {event_type} stored for missing {recipient_type} {recipient_id}")
            return True

        try:
            send_sms(recipient.phone, message)
        except TwilioRestException as e:
            logger.error(f"Failed to send SMS to {recipient.phone}: {str(e)}")

        if recipient.email:
            send_mail(
                subject=title,
                message=message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[recipient.email],
                fail_silently=True,
            )
        logger.info(f"Notification {event_type} sent to {recipient_type} {recipient_id}")
        return True
    except Exception as e:
        logger.error(f"Failed to dispatch {event_type} to {recipient_type} {recipient_id}: {str(e)}")
        return False


def notify(recipient_id, recipient_type, event_type, payload=None):
    """Schedule a notification for after the current transaction commits."""
    transaction.on_commit(lambda: dispatch(recipient_id, recipient_type, event_type, payload))
