# backend/bh_core/iam/tests/test_auth_and_me.py
import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.test import APIClient

from bh_core.iam.actors import can_access_facility, resolve_actor
from bh_core.iam.models import Role, UserProfile

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_token_login_then_me(bhrf_user, facility):
    c = APIClient()
    res = c.post("/api/v1/auth/token/", {"username": "staff", "password": "testpass"}, format="json")
    assert res.status_code == 200
    access = res.json()["access"]

    c.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    body = res.json()
    assert body["user_id"] == bhrf_user.id
    assert body["role"] == "BHRF"
    assert body["facility_id"] == facility.id
    assert body["bhp_id"] is None


def test_me_for_superuser_is_admin(admin_client):
    res = admin_client.get("/api/v1/me/")
    assert res.json()["role"] == "ADMIN"


def test_user_without_profile_is_forbidden():
    user = get_user_model().objects.create_user(username="nobody", password="testpass")
    with pytest.raises(PermissionDenied):
        resolve_actor(user)

    c = APIClient()
    c.force_authenticate(user=user)
    assert c.get("/api/v1/facilities/").status_code == 403


def test_inactive_profile_is_forbidden(bhp_user):
    UserProfile.objects.filter(user=bhp_user).update(is_active=False)
    with pytest.raises(PermissionDenied):
        resolve_actor(bhp_user)


def test_anonymous_is_not_authenticated():
    with pytest.raises(NotAuthenticated):
        resolve_actor(None)


def test_profile_requires_linked_entity():
    user = get_user_model().objects.create_user(username="loose", password="testpass")
    with pytest.raises(DjangoValidationError):
        UserProfile(user=user, role=Role.BHP).clean()
    with pytest.raises(DjangoValidationError):
        UserProfile(user=user, role=Role.BHRF).clean()


def test_facility_reach_per_role(admin_actor, bhp_actor, bhrf_actor, facility, other_facility):
    assert can_access_facility(admin_actor, other_facility)
    assert can_access_facility(bhp_actor, facility)
    assert not can_access_facility(bhp_actor, other_facility)
    assert can_access_facility(bhrf_actor, facility)
    assert not can_access_facility(bhrf_actor, other_facility)
