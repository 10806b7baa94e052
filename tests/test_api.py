"""End-to-end tests of the HTTP API."""

import pytest
from decimal import Decimal
from rest_framework.test import APIClient

from apps.jobs.lifecycle import apply_to_job, transition
from apps.jobs.models import Job, JobApplication
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


def client_for(profile):
    client = APIClient()
    client.force_authenticate(user=profile.user)
    return client


JOB_PAYLOAD = {
    'title': 'Farm hand for harvest',
    'description': 'Wheat harvest, two weeks, meals provided.',
    'category': 'Agriculture',
    'city': 'Mumbai',
    'state': 'Maharashtra',
    'salary': '15000.00',
    'skills_required': ['harvesting'],
}


class TestRegistrationAndLogin:
    def test_worker_registers_and_logs_in(self, api_client):
        response = api_client.post('/users/workers/register/', {
            'name': 'Ramesh Kumar',
            'phone': '9876501234',
            'password': 'Harvest#2024',
            'aadhaar_number': '123456789012',
            'skills': ['masonry', 'plastering'],
            'languages': ['Hindi', 'English'],
            'experience_years': 4,
            'district': 'Pune',
            'state': 'Maharashtra',
        }, format='json')
        assert response.status_code == 201
        assert response.data['token']
        assert response.data['user']['role'] == 'worker'
        assert response.data['profile']['shakti_score'] > 0

        response = api_client.post('/users/auth/login/', {
            'identifier': '9876501234', 'password': 'Harvest#2024'
        }, format='json')
        assert response.status_code == 200
        assert response.data['token']

    def test_phone_cannot_register_twice(self, api_client):
        payload = {'name': 'Anita Desai', 'phone': '8765409876', 'password': 'Harvest#2024'}
        assert api_client.post('/users/employers/register/', payload, format='json').status_code == 201
        response = api_client.post('/users/employers/register/', payload, format='json')
        assert response.status_code == 400
        assert 'phone' in response.data['error']

    def test_bad_credentials(self, api_client, worker):
        response = api_client.post('/users/auth/login/', {
            'identifier': worker.user.username, 'password': 'wrong-password'
        }, format='json')
        assert response.status_code == 400
        assert 'error' in response.data

    def test_anonymous_requests_are_refused(self, api_client):
        response = api_client.get('/jobs/')
        assert response.status_code in (401, 403)
        assert set(response.data) == {'error', 'code'}


class TestJobs:
    def test_employer_posts_job_and_matching_workers_are_notified(
        self, employer_client, make_worker, django_capture_on_commit_callbacks
    ):
        strong = make_worker(district='Mumbai')
        make_worker(skills=[], experience_years=0)

        with django_capture_on_commit_callbacks(execute=True):
            response = employer_client.post('/jobs/', JOB_PAYLOAD, format='json')

        assert response.status_code == 201
        assert response.data['status'] == 'active'
        assert response.data['application_count'] == 0
        notified = Notification.objects.filter(event_type='new_job_match').values_list('recipient_id', flat=True)
        assert list(notified) == [strong.id]

    def test_duplicate_posting_within_window_is_rejected(self, employer_client):
        assert employer_client.post('/jobs/', JOB_PAYLOAD, format='json').status_code == 201
        response = employer_client.post('/jobs/', JOB_PAYLOAD, format='json')
        assert response.status_code == 400
        assert Job.objects.count() == 1

    def test_same_title_in_another_city_is_allowed(self, employer_client):
        employer_client.post('/jobs/', JOB_PAYLOAD, format='json')
        response = employer_client.post('/jobs/', dict(JOB_PAYLOAD, city='Nagpur'), format='json')
        assert response.status_code == 201

    def test_salary_out_of_range(self, employer_client):
        response = employer_client.post('/jobs/', dict(JOB_PAYLOAD, salary='50'), format='json')
        assert response.status_code == 400
        assert 'salary' in response.data['error']

    def test_worker_cannot_post_job(self, worker_client):
        response = worker_client.post('/jobs/', JOB_PAYLOAD, format='json')
        assert response.status_code == 403

    def test_list_filters(self, worker_client, employer, make_job):
        mumbai = make_job(employer, city='Mumbai', skills_required=['Masonry'])
        make_job(employer, title='Driver', city='Jaipur', state='Rajasthan',
                 category='Transportation', skills_required=['driving'], salary=Decimal('9000'))
        make_job(employer, title='Old job', status='closed')

        def ids(**params):
            return [job['id'] for job in worker_client.get('/jobs/', params).data]

        assert len(ids()) == 3
        assert ids(status='active', location='mum') == [mumbai.id]
        assert len(ids(state='rajasthan')) == 1
        assert ids(skills='masonry,welding', status='active') == [mumbai.id]
        assert len(ids(category='Transportation')) == 1
        assert len(ids(min_salary='10000')) == 2
        assert len(ids(max_salary='9000')) == 1

    @pytest.mark.parametrize('param', ['min_salary', 'max_salary'])
    @pytest.mark.parametrize('value', ['lots', 'nan', 'inf', '-Infinity'])
    def test_bad_salary_filter(self, worker_client, job, param, value):
        response = worker_client.get('/jobs/', {param: value})
        assert response.status_code == 400
        assert param in response.data['error']

    def test_salary_filter_bounds(self, worker_client, job):
        assert len(worker_client.get('/jobs/', {'min_salary': '15000'}).data) == 1
        assert len(worker_client.get('/jobs/', {'min_salary': '15000.01'}).data) == 0

    def test_owner_updates_job(self, employer_client, job):
        response = employer_client.patch(f'/jobs/{job.id}/', {'salary': '16000.00'}, format='json')
        assert response.status_code == 200
        assert response.data['salary'] == '16000.00'

    def test_status_cannot_be_set_to_completed_by_hand(self, employer_client, job):
        response = employer_client.patch(f'/jobs/{job.id}/', {'status': 'completed'}, format='json')
        assert response.status_code == 400

    def test_other_employer_cannot_update_or_delete(self, job, make_employer):
        intruder = client_for(make_employer())
        assert intruder.patch(f'/jobs/{job.id}/', {'title': 'Mine'}, format='json').status_code == 403
        assert intruder.delete(f'/jobs/{job.id}/').status_code == 403

    def test_delete_rejected_while_applications_exist(self, employer_client, worker_client, job, make_job):
        worker_client.post('/job-applications/', {'job_id': job.id}, format='json')
        response = employer_client.delete(f'/jobs/{job.id}/')
        assert response.status_code == 409
        assert response.data['code'] == 'job_has_applications'

        unused = make_job(job.employer, title='Painter')
        assert employer_client.delete(f'/jobs/{unused.id}/').status_code == 204

    def test_missing_job_is_404(self, worker_client):
        response = worker_client.get('/jobs/999999/')
        assert response.status_code == 404
        assert response.data == {'error': 'Job not found', 'code': 'not_found'}


class TestApplicationFlow:
    def test_full_flow_pays_worker(self, worker, employer, job, worker_client, employer_client):
        response = worker_client.post('/job-applications/', {'job_id': job.id, 'notes': 'Can start tomorrow'}, format='json')
        assert response.status_code == 201
        application_id = response.data['id']
        assert response.data['status'] == 'pending'
        assert response.data['worker_details']['name'] == worker.name

        for target in ('accepted', 'in-progress', 'completed'):
            response = employer_client.patch(
                f'/job-applications/{application_id}/status/', {'status': target, 'note': f'to {target}'}, format='json'
            )
            assert response.status_code == 200, response.data
            assert response.data['status'] == target

        assert response.data['payment_status'] == 'paid'
        assert [h['status'] for h in response.data['status_history']] == [
            'pending', 'accepted', 'in-progress', 'completed'
        ]
        worker.refresh_from_db()
        assert worker.balance == Decimal('15000.00')
        job.refresh_from_db()
        assert job.status == 'completed'

        response = employer_client.patch(f'/job-applications/{application_id}/process-payment/', {}, format='json')
        assert response.status_code == 200
        assert response.data['created'] is False
        assert response.data['balance'] == '15000.00'

    def test_employer_reviews_completed_application(self, job, worker, employer, worker_client, employer_client):
        application = apply_to_job(job, worker)
        for target in ('accepted', 'in-progress', 'completed'):
            transition(application, target, employer)

        response = employer_client.post(
            f'/job-applications/{application.id}/review/', {'rating': 4, 'comment': 'Good work'}, format='json'
        )
        assert response.status_code == 201, response.data
        assert response.data['rating'] == 4
        assert response.data['worker_rating'] == 4.0
        assert response.data['worker_rating_count'] == 1

        response = employer_client.post(f'/job-applications/{application.id}/review/', {'rating': 5}, format='json')
        assert response.status_code == 409
        assert response.data['code'] == 'duplicate_review'

        assert worker_client.post(
            f'/job-applications/{application.id}/review/', {'rating': 5}, format='json'
        ).status_code == 403

    @pytest.mark.parametrize('rating', [0, 6, 'great'])
    def test_review_rating_must_be_one_to_five(self, job, worker, employer, employer_client, rating):
        application = apply_to_job(job, worker)
        for target in ('accepted', 'in-progress', 'completed'):
            transition(application, target, employer)

        response = employer_client.post(
            f'/job-applications/{application.id}/review/', {'rating': rating}, format='json'
        )
        assert response.status_code == 400

    def test_pending_application_cannot_be_reviewed(self, job, worker, employer_client):
        application = apply_to_job(job, worker)
        response = employer_client.post(f'/job-applications/{application.id}/review/', {'rating': 5}, format='json')
        assert response.status_code == 400
        worker.refresh_from_db()
        assert worker.rating_count == 0

    def test_duplicate_application_is_409(self, job, worker_client):
        worker_client.post('/job-applications/', {'job_id': job.id}, format='json')
        response = worker_client.post('/job-applications/', {'job_id': job.id}, format='json')
        assert response.status_code == 409
        assert response.data['code'] == 'duplicate_application'

    def test_closed_job_is_400(self, employer, make_job, worker_client):
        job = make_job(employer, status='closed')
        response = worker_client.post('/job-applications/', {'job_id': job.id}, format='json')
        assert response.status_code == 400
        assert response.data['code'] == 'job_not_accepting_applications'

    def test_employer_cannot_apply(self, job, employer_client):
        response = employer_client.post('/job-applications/', {'job_id': job.id}, format='json')
        assert response.status_code == 403

    def test_skipping_states_is_409(self, job, worker_client, employer_client):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        response = employer_client.patch(
            f'/job-applications/{application_id}/status/', {'status': 'completed'}, format='json'
        )
        assert response.status_code == 409
        assert response.data['code'] == 'invalid_transition'

    def test_unknown_status_is_400(self, job, worker_client, employer_client):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        response = employer_client.patch(
            f'/job-applications/{application_id}/status/', {'status': 'finished'}, format='json'
        )
        assert response.status_code == 400
        assert 'status' in response.data['error']

    def test_other_employer_cannot_transition(self, job, worker_client, make_employer):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        response = client_for(make_employer()).patch(
            f'/job-applications/{application_id}/status/', {'status': 'accepted'}, format='json'
        )
        assert response.status_code == 403

    def test_worker_withdraws_pending_application(self, job, worker_client):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        assert worker_client.delete(f'/job-applications/{application_id}/').status_code == 204
        assert not JobApplication.objects.filter(pk=application_id).exists()
        assert worker_client.get(f'/job-applications/{application_id}/').status_code == 404

    def test_rejected_application_cannot_be_withdrawn(self, job, worker_client, employer_client):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        employer_client.patch(f'/job-applications/{application_id}/status/', {'status': 'rejected'}, format='json')
        response = worker_client.delete(f'/job-applications/{application_id}/')
        assert response.status_code == 400
        assert response.data['code'] == 'invalid_cancellation_state'

    def test_only_parties_can_view_application(self, job, worker_client, employer_client, make_worker):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        assert employer_client.get(f'/job-applications/{application_id}/').status_code == 200
        assert client_for(make_worker()).get(f'/job-applications/{application_id}/').status_code == 403

    def test_process_payment_requires_completed_application(self, job, worker_client, employer_client):
        application_id = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        response = employer_client.patch(f'/job-applications/{application_id}/process-payment/', {}, format='json')
        assert response.status_code == 409

    def test_job_applications_and_worker_scopes(self, worker, job, worker_client, employer_client, make_job):
        other_job = make_job(job.employer, title='Painter')
        first = worker_client.post('/job-applications/', {'job_id': job.id}, format='json').data['id']
        second = worker_client.post('/job-applications/', {'job_id': other_job.id}, format='json').data['id']
        employer_client.patch(f'/job-applications/{second}/status/', {'status': 'rejected'}, format='json')

        response = employer_client.get(f'/jobs/{job.id}/applications/')
        assert [a['id'] for a in response.data] == [first]

        current = worker_client.get(f'/workers/{worker.id}/applications/')
        past = worker_client.get(f'/workers/{worker.id}/applications/', {'scope': 'past'})
        assert [a['id'] for a in current.data] == [first]
        assert [a['id'] for a in past.data] == [second]
        assert worker_client.get(f'/workers/{worker.id}/applications/', {'scope': 'all'}).status_code == 400


class TestWorkersAndEmployers:
    def test_profile_update_is_owner_only(self, worker, worker_client, make_worker):
        response = worker_client.patch(f'/workers/{worker.id}/', {'bio': 'Experienced mason'}, format='json')
        assert response.status_code == 200
        assert response.data['bio'] == 'Experienced mason'

        other = make_worker()
        assert worker_client.patch(f'/workers/{other.id}/', {'bio': 'x'}, format='json').status_code == 403

    def test_balance_cannot_be_written_through_profile(self, worker, worker_client):
        worker_client.patch(f'/workers/{worker.id}/', {'balance': '99999.00'}, format='json')
        worker.refresh_from_db()
        assert worker.balance == Decimal('0.00')

    def test_availability_toggle_hides_worker_from_matches(self, worker, worker_client, employer_client, job):
        response = worker_client.patch(f'/workers/{worker.id}/availability/', {'is_available': False}, format='json')
        assert response.status_code == 200
        assert response.data['is_available'] is False

        response = employer_client.get(f'/jobs/{job.id}/workers/')
        assert response.data == []

    def test_match_endpoints(self, worker, job, worker_client, employer_client):
        response = worker_client.get(f'/workers/{worker.id}/jobs/')
        assert response.status_code == 200
        assert response.data[0]['job']['id'] == job.id
        assert response.data[0]['score'] == 0.88

        response = employer_client.get(f'/jobs/{job.id}/workers/', {'min_score': '0.9'})
        assert response.data == []
        response = employer_client.get(f'/jobs/{job.id}/workers/', {'limit': '0'})
        assert response.status_code == 400

    def test_employer_jobs_and_stats(self, employer, make_job, worker, employer_client):
        job = make_job(employer)
        make_job(employer, title='Closed job', status='closed')
        employer_client.post('/jobs/', JOB_PAYLOAD, format='json')
        client_for(worker).post('/job-applications/', {'job_id': job.id}, format='json')

        response = employer_client.get(f'/employers/{employer.id}/jobs/')
        assert len(response.data) == 3

        response = employer_client.get(f'/employers/{employer.id}/stats/')
        assert response.data == {
            'total_jobs': 3,
            'active_jobs': 2,
            'completed_jobs': 0,
            'total_applications': 1,
            'average_applications_per_job': pytest.approx(1 / 3),
        }


class TestWallet:
    @pytest.fixture
    def paid_worker(self, worker, job, employer):
        application = apply_to_job(job, worker)
        for status in ('accepted', 'in-progress', 'completed'):
            transition(application, status, employer)
        worker.refresh_from_db()
        return worker

    def test_balance_and_wallet(self, paid_worker, worker_client):
        response = worker_client.get(f'/workers/{paid_worker.id}/balance/')
        assert response.data == {'worker_id': paid_worker.id, 'balance': '15000.00'}

        response = worker_client.get(f'/workers/{paid_worker.id}/wallet/')
        assert response.data['total_earned'] == '15000.00'
        assert response.data['transactions'][0]['type'] == 'earning'
        assert 'job_title' in response.data['transactions'][0]

    def test_withdraw(self, paid_worker, worker_client):
        response = worker_client.post(
            f'/workers/{paid_worker.id}/withdraw/', {'amount': '4000', 'method': 'upi'}, format='json'
        )
        assert response.status_code == 201
        assert response.data['balance'] == '11000.00'
        assert response.data['withdrawal']['status'] == 'pending'

        response = worker_client.post(f'/workers/{paid_worker.id}/withdraw/', {'amount': '20000'}, format='json')
        assert response.status_code == 400
        assert response.data['code'] == 'insufficient_balance'

        response = worker_client.post(f'/workers/{paid_worker.id}/withdraw/', {'amount': '0'}, format='json')
        assert response.status_code == 400

    def test_sync_balance(self, paid_worker, worker_client):
        response = worker_client.post(f'/workers/{paid_worker.id}/sync-balance/')
        assert response.status_code == 200
        assert response.data['balance'] == '15000.00'
        assert response.data['earnings_created'] == 0
        assert len(response.data['earnings']) == 1

    def test_wallet_is_private(self, paid_worker, make_worker):
        response = client_for(make_worker()).get(f'/workers/{paid_worker.id}/wallet/')
        assert response.status_code == 403
