"""Tests for match scoring and the job/worker finders."""

import pytest
from decimal import Decimal
from hypothesis import given, strategies as st

from apps.users.models import Worker
from apps.jobs.models import Job
from apps.notifications.models import Notification
from apps.recommendations.utils import MatchEngine

REACHABLE_SCORES = {0.0, 0.18, 0.3, 0.4, 0.48, 0.58, 0.6, 0.7, 0.88, 1.0}

places = st.sampled_from(['Maharashtra', 'Rajasthan', 'Bihar', ''])
towns = st.sampled_from(['Pune', 'Mumbai', 'Jaipur', 'pune', ''])


@st.composite
def worker_strategy(draw):
    return Worker(
        name='Sita',
        skills=draw(st.lists(st.sampled_from(['masonry', 'plumbing', 'driving']), max_size=3)),
        experience_years=draw(st.integers(min_value=0, max_value=40)),
        state=draw(places),
        district=draw(towns),
        village=draw(towns),
    )


@st.composite
def job_strategy(draw):
    return Job(
        title='Helper',
        state=draw(places),
        city=draw(towns),
        salary=Decimal('500.00'),
    )


@given(worker=worker_strategy(), job=job_strategy())
def test_score_is_in_reachable_set_and_deterministic(worker, job):
    score = MatchEngine.calculate_match_score(worker, job)
    assert score in REACHABLE_SCORES
    assert MatchEngine.calculate_match_score(worker, job) == score


@given(worker=worker_strategy(), job=job_strategy())
def test_score_is_bounded(worker, job):
    assert 0.0 <= MatchEngine.calculate_match_score(worker, job) <= 1.0


def test_same_state_different_city_scores_088():
    worker = Worker(skills=['masonry'], experience_years=2, state='Rajasthan', district='Ajmer')
    job = Job(state='Rajasthan', city='Jaipur', salary=Decimal('15000'))
    assert MatchEngine.calculate_match_score(worker, job) == 0.88


def test_full_location_match_scores_one():
    worker = Worker(skills=['masonry'], experience_years=2, state='Rajasthan', district='Jaipur')
    job = Job(state='Rajasthan', city='Jaipur', salary=Decimal('15000'))
    assert MatchEngine.calculate_match_score(worker, job) == 1.0


def test_other_state_ignores_city():
    worker = Worker(skills=[], experience_years=0, state='Bihar', district='Jaipur')
    job = Job(state='Rajasthan', city='Jaipur', salary=Decimal('15000'))
    assert MatchEngine.calculate_match_score(worker, job) == 0.0


def test_city_comparison_is_literal_by_default():
    worker = Worker(skills=['masonry'], experience_years=2, state='Rajasthan', district='jaipur')
    job = Job(state='Rajasthan', city='Jaipur', salary=Decimal('15000'))
    assert MatchEngine.calculate_match_score(worker, job) == 0.88


def test_relaxed_city_comparison_checks_village(settings):
    settings.MATCH_LOCATION_FIELD_COMPAT = False
    worker = Worker(skills=['masonry'], experience_years=2, state='Rajasthan', district='Ajmer', village=' jaipur ')
    job = Job(state='Rajasthan', city='Jaipur', salary=Decimal('15000'))
    assert MatchEngine.calculate_match_score(worker, job) == 1.0


@pytest.mark.django_db
def test_find_matching_jobs_filters_state_status_and_score(make_worker, employer, make_job):
    worker = make_worker(district='Pune')
    best = make_job(employer, city='Pune')
    good = make_job(employer, title='Plasterer', city='Mumbai')
    make_job(employer, title='Closed job', city='Pune', status='closed')
    make_job(employer, title='Far away', state='Rajasthan', city='Jaipur')

    matches = MatchEngine.find_matching_jobs(worker)

    assert [(m['job'].id, m['score']) for m in matches] == [(best.id, 1.0), (good.id, 0.88)]


@pytest.mark.django_db
def test_find_matching_jobs_respects_min_score_and_limit(make_worker, employer, make_job):
    worker = make_worker(district='Pune')
    make_job(employer, city='Pune')
    make_job(employer, title='Plasterer', city='Mumbai')

    assert len(MatchEngine.find_matching_jobs(worker, min_score=0.9)) == 1
    assert len(MatchEngine.find_matching_jobs(worker, limit=1)) == 1


@pytest.mark.django_db
def test_find_matching_workers_skips_unavailable_and_weak(make_worker, job):
    strong = make_worker(district='Mumbai')
    medium = make_worker(district='Pune')
    make_worker(district='Mumbai', is_available=False)
    make_worker(skills=[], experience_years=0)
    make_worker(state='Rajasthan')

    matches = MatchEngine.find_matching_workers(job)

    assert [(m['worker'].id, m['score']) for m in matches] == [(strong.id, 1.0), (medium.id, 0.88)]


@pytest.mark.django_db
def test_notify_matching_workers_only_notifies_strong_matches(
    make_worker, job, django_capture_on_commit_callbacks
):
    strong = make_worker(district='Mumbai')
    make_worker(skills=[], experience_years=2)

    with django_capture_on_commit_callbacks(execute=True):
        considered = MatchEngine.notify_matching_workers(job)

    assert considered == 1
    notifications = Notification.objects.filter(event_type='new_job_match')
    assert [n.recipient_id for n in notifications] == [strong.id]
    assert job.title in notifications[0].title


@pytest.mark.django_db
def test_notify_matching_workers_logs_and_swallows_errors(job, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(MatchEngine, 'find_matching_workers', boom)
    assert MatchEngine.notify_matching_workers(job) == 0
