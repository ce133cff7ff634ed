# backend/bh_core/obligations/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from bh_core.facilities.selectors import facilities_for_actor
from bh_core.iam.actors import Actor
from bh_core.obligations.models import ObligationRecord


def records_for_actor(*, actor: Actor) -> QuerySet[ObligationRecord]:
    facility_ids = facilities_for_actor(actor=actor, active_only=False).values("id")
    return ObligationRecord.objects.filter(facility_id__in=facility_ids).select_related("facility")
