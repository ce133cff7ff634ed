# backend/conftest.py
from datetime import date

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bh_core.bhps.models import BHPProfile
from bh_core.facilities.models import Employee, Facility
from bh_core.iam.actors import resolve_actor
from bh_core.iam.models import Role, UserProfile


def _make_user(username, *, role, bhp=None, facility=None, is_superuser=False):
    User = get_user_model()
    if is_superuser:
        return User.objects.create_superuser(username=username, password="testpass", email=f"{username}@example.com")
    user = User.objects.create_user(username=username, password="testpass", is_active=True)
    UserProfile.objects.create(user=user, role=role, bhp=bhp, facility=facility, is_active=True)
    return user


def _client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


# -----------------------------
# Entities
# -----------------------------

@pytest.fixture
def bhp(db):
    return BHPProfile.objects.create(name="Desert Oversight BHP", requires_record_review=True)


@pytest.fixture
def facility(db, bhp):
    return Facility.objects.create(bhp=bhp, name="Sunrise House", address="1 Main St")


@pytest.fixture
def other_bhp(db):
    return BHPProfile.objects.create(name="Other BHP", requires_record_review=True)


@pytest.fixture
def other_facility(db, other_bhp):
    return Facility.objects.create(bhp=other_bhp, name="Elsewhere Home")


@pytest.fixture
def employee(db, facility):
    return Employee.objects.create(facility=facility, full_name="Jamie Rivera", position="BHT")


# -----------------------------
# Users / actors
# -----------------------------

@pytest.fixture
def admin_user(db):
    return _make_user("admin", role=Role.ADMIN, is_superuser=True)


@pytest.fixture
def bhp_user(db, bhp):
    return _make_user("bhp", role=Role.BHP, bhp=bhp)


@pytest.fixture
def bhrf_user(db, facility):
    return _make_user("staff", role=Role.BHRF, facility=facility)


@pytest.fixture
def other_bhp_user(db, other_bhp):
    return _make_user("other-bhp", role=Role.BHP, bhp=other_bhp)


@pytest.fixture
def other_bhrf_user(db, other_facility):
    return _make_user("other-staff", role=Role.BHRF, facility=other_facility)


@pytest.fixture
def admin_actor(admin_user):
    return resolve_actor(admin_user)


@pytest.fixture
def bhp_actor(bhp_user):
    return resolve_actor(bhp_user)


@pytest.fixture
def bhrf_actor(bhrf_user):
    return resolve_actor(bhrf_user)


@pytest.fixture
def other_bhp_actor(other_bhp_user):
    return resolve_actor(other_bhp_user)


@pytest.fixture
def other_bhrf_actor(other_bhrf_user):
    return resolve_actor(other_bhrf_user)


# -----------------------------
# API clients
# -----------------------------

@pytest.fixture
def admin_client(admin_user):
    return _client(admin_user)


@pytest.fixture
def bhp_client(bhp_user):
    return _client(bhp_user)


@pytest.fixture
def bhrf_client(bhrf_user):
    return _client(bhrf_user)


@pytest.fixture
def other_bhrf_client(other_bhrf_user):
    return _client(other_bhrf_user)


# -----------------------------
# Content
# -----------------------------

@pytest.fixture
def intake_content():
    return {
        "resident_name": "Alex Morgan",
        "date_of_birth": "1990-04-12",
        "religion": "None",
        "admission_date": date(2025, 3, 1).isoformat(),
    }


@pytest.fixture
def asam_content():
    return {
        "patient_name": "Sam Lee",
        "date_of_birth": "1985-09-30",
        "reason_for_treatment": "Alcohol use disorder",
    }
