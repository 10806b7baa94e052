"""Tests for notification delivery and the notifications API."""

import pytest
from django.core import mail
from twilio.base.exceptions import TwilioRestException

from apps.notifications import utils
from apps.notifications.models import Notification
from apps.notifications.utils import dispatch, notify, render_notification, normalize_phone

pytestmark = pytest.mark.django_db


def test_render_fills_payload_and_blanks_missing_keys():
    title, message = render_notification('payment_received', {'job_title': 'Mason', 'amount': '15000.00'})
    assert title == 'Payment received for Mason'
    assert 'Rs.15000.00' in message

    title, _ = render_notification('new_application', {})
    assert title == 'New application for '


@pytest.mark.parametrize('raw,expected', [
    ('9876543210', '+919876543210'),
    ('98765 43210', '+919876543210'),
    ('+919876543210', '+919876543210'),
    ('12345', None),
    ('', None),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_dispatch_stores_notification_and_emails(make_worker):
    worker = make_worker(email='sita@example.com')
    assert dispatch(worker.id, 'worker', 'application_accepted', {'job_title': 'Mason'}) is True

    notification = Notification.objects.get()
    assert notification.recipient_id == worker.id
    assert notification.title == 'Application accepted: Mason'
    assert notification.is_read is False
    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == ['sita@example.com']


def test_dispatch_sends_sms_when_configured(worker, settings, monkeypatch):
    settings.TWILIO_ACCOUNT_SID = 'AC123'
    settings.TWILIO_AUTH_TOKEN = 'secret'
    settings.TWILIO_PHONE_NUMBER = '+15005550006'
    sent = []

    class FakeMessages:
        def create(self, **kwargs):
            sent.append(kwargs)

    class FakeClient:
        def __init__(self, sid, token):
            self.messages = FakeMessages()

    monkeypatch.setattr(utils, 'TwilioClient', FakeClient)
    assert dispatch(worker.id, 'worker', 'job_started', {'job_title': 'Mason'}) is True
    assert sent[0]['to'] == f"+91{worker.phone}"
    assert sent[0]['from_'] == '+15005550006'


def test_sms_failure_is_logged_not_raised(worker, settings, monkeypatch):
    settings.TWILIO_ACCOUNT_SID = 'AC123'
    settings.TWILIO_AUTH_TOKEN = 'secret'
    settings.TWILIO_PHONE_NUMBER = '+15005550006'

    def fail(phone, message):
        raise TwilioRestException(500, 'https://api.twilio.com', msg='gateway down')

    monkeypatch.setattr(utils, 'send_sms', fail)
    assert dispatch(worker.id, 'worker', 'job_started', {'job_title': 'Mason'}) is True
    assert Notification.objects.count() == 1


def test_dispatch_failure_returns_false(worker, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError('database is locked')

    monkeypatch.setattr(Notification.objects, 'create', broken)
    assert dispatch(worker.id, 'worker', 'job_started', {}) is False


def test_notify_waits_for_commit(worker, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        notify(worker.id, 'worker', 'job_started', {'job_title': 'Mason'})
    assert len(callbacks) == 1
    assert not Notification.objects.exists()

    callbacks[0]()
    assert Notification.objects.filter(event_type='job_started').exists()


def test_failed_notification_does_not_fail_request(
    job, worker_client, monkeypatch, django_capture_on_commit_callbacks
):
    monkeypatch.setattr(Notification.objects, 'create', lambda **kwargs: 1 / 0)

    with django_capture_on_commit_callbacks(execute=True):
        response = worker_client.post('/job-applications/', {'job_id': job.id}, format='json')

    assert response.status_code == 201
    assert response.data['status'] == 'pending'


def test_list_and_mark_read(worker, worker_client):
    for event in ('job_started', 'job_completed'):
        dispatch(worker.id, 'worker', event, {'job_title': 'Mason'})
    dispatch(worker.id + 1000, 'worker', 'job_started', {'job_title': 'Other'})

    response = worker_client.get('/notifications/')
    assert response.status_code == 200
    assert response.data['unread_count'] == 2
    assert len(response.data['notifications']) == 2

    first_id = response.data['notifications'][0]['id']
    response = worker_client.patch(f'/notifications/{first_id}/read/')
    assert response.status_code == 200
    assert response.data['is_read'] is True

    response = worker_client.get('/notifications/', {'unread': 'true'})
    assert response.data['unread_count'] == 1
    assert len(response.data['notifications']) == 1

    response = worker_client.patch('/notifications/read-all/')
    assert response.data == {'updated': 1}


def test_cannot_read_someone_elses_notification(worker, make_worker, worker_client):
    other = make_worker()
    dispatch(other.id, 'worker', 'job_started', {'job_title': 'Mason'})
    notification = Notification.objects.get()

    response = worker_client.patch(f'/notifications/{notification.id}/read/')
    assert response.status_code == 404
    assert response.data['code'] == 'not_found'
