# backend/bh_core/facilities/selectors.py
from __future__ import annotations

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied

from bh_core.facilities.models import Employee, Facility
from bh_core.iam.actors import Actor, can_access_facility


def facilities_for_actor(*, actor: Actor, active_only: bool = True) -> QuerySet[Facility]:
    qs = Facility.objects.select_related("bhp")
    if actor.is_bhp:
        qs = qs.filter(bhp_id=actor.bhp_id)
    elif actor.is_bhrf:
        qs = qs.filter(id=actor.facility_id)
    elif not actor.is_admin:
        qs = qs.none()

    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by("name")


def facility_for_actor(*, actor: Actor, facility_id: int) -> Facility:
    """
    404 when the facility does not exist, 403 when it exists but is outside the actor's reach.
    """
    facility = Facility.objects.select_related("bhp").filter(id=facility_id).first()
    if facility is None:
        raise NotFound("Facility not found.")
    if not can_access_facility(actor, facility):
        raise PermissionDenied("You do not have access to this facility.")
    return facility


def employees_for_facility(*, facility_id: int, active_only: bool = True) -> QuerySet[Employee]:
    qs = Employee.objects.filter(facility_id=facility_id)
    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by("full_name")
