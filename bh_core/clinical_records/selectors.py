# backend/bh_core/clinical_records/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from bh_core.clinical_records.models import ClinicalRecord, RecordStatus
from bh_core.facilities.selectors import facilities_for_actor
from bh_core.iam.actors import Actor


def records_for_actor(*, actor: Actor) -> QuerySet[ClinicalRecord]:
    """
    Facility staff see all of their facility's records, drafts included.
    A BHP never sees another facility's drafts.
    """
    facility_ids = facilities_for_actor(actor=actor, active_only=False).values("id")
    qs = ClinicalRecord.objects.filter(facility_id__in=facility_ids)
    if actor.is_bhp:
        qs = qs.exclude(status=RecordStatus.DRAFT)
    return qs.select_related("facility")


def pending_review_count(*, actor: Actor) -> int:
    return records_for_actor(actor=actor).filter(status=RecordStatus.PENDING).count()
