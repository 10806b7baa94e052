"""
Pytest configuration and shared fixtures.
"""

import itertools
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.users.models import User, Worker, Employer
from apps.jobs.models import Job

_sequence = itertools.count(1)


@pytest.fixture
def make_worker(db):
    """Factory for saved workers in Pune, Maharashtra with one skill."""
    def factory(**overrides):
        n = next(_sequence)
        user = User.objects.create_user(username=f"worker{n}", password="Str0ng-pass!")
        fields = {
            'name': f"Worker {n}",
            'phone': f"98{n:08d}",
            'aadhaar_number': f"{n:012d}",
            'skills': ['masonry'],
            'experience_years': 2,
            'district': 'Pune',
            'state': 'Maharashtra',
        }
        fields.update(overrides)
        return Worker.objects.create(user=user, **fields)
    return factory


@pytest.fixture
def make_employer(db):
    def factory(**overrides):
        n = next(_sequence)
        user = User.objects.create_user(username=f"employer{n}", password="Str0ng-pass!")
        fields = {
            'name': f"Employer {n}",
            'company_name': f"Builders {n}",
            'phone': f"87{n:08d}",
            'city': 'Pune',
            'state': 'Maharashtra',
        }
        fields.update(overrides)
        return Employer.objects.create(user=user, **fields)
    return factory


@pytest.fixture
def make_job(db):
    def factory(employer, **overrides):
        fields = {
            'title': 'Mason for house extension',
            'description': 'Brick and plaster work for a two room extension.',
            'category': 'Construction',
            'city': 'Mumbai',
            'state': 'Maharashtra',
            'salary': Decimal('15000.00'),
            'skills_required': ['masonry'],
        }
        fields.update(overrides)
        return Job.objects.create(employer=employer, **fields)
    return factory


@pytest.fixture
def worker(make_worker):
    return make_worker()


@pytest.fixture
def employer(make_employer):
    return make_employer()


@pytest.fixture
def job(make_job, employer):
    return make_job(employer)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def worker_client(worker):
    client = APIClient()
    client.force_authenticate(user=worker.user)
    return client


@pytest.fixture
def employer_client(employer):
    client = APIClient()
    client.force_authenticate(user=employer.user)
    return client
