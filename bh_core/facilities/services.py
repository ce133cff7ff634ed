# backend/bh_core/facilities/services.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

import structlog
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from bh_core.bhps.models import BHPProfile
from bh_core.common.api.exceptions import ConflictError
from bh_core.facilities.models import Facility

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FacilityUpdate:
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None

    def changes(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _locked(facility_id: int) -> Facility:
    facility = Facility.objects.select_for_update().filter(id=facility_id).first()
    if facility is None:
        raise NotFound("Facility not found.")
    return facility


class FacilityService:
    """
    Facilities are never deleted: obligation records, documents and clinical
    records all hang off them. Closing one is a deactivation.
    """

    @staticmethod
    @transaction.atomic
    def create(*, bhp_id: int, name: str, address: str = "", phone: str = "") -> Facility:
        if not BHPProfile.objects.filter(id=bhp_id).exists():
            raise ValidationError({"bhp_id": ["BHP not found."]})
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["This field may not be blank."]})

        facility = Facility.objects.create(bhp_id=bhp_id, name=name, address=address or "", phone=phone or "")
        logger.info("facility.created", facility_id=facility.id, bhp_id=bhp_id)
        return facility

    @staticmethod
    @transaction.atomic
    def update(*, facility_id: int, patch: FacilityUpdate) -> Facility:
        facility = _locked(facility_id)
        changes = patch.changes()
        if "name" in changes and not changes["name"].strip():
            raise ValidationError({"name": ["This field may not be blank."]})
        if not changes:
            return facility

        for field, value in changes.items():
            setattr(facility, field, value)
        facility.save(update_fields=[*changes, "updated_at"])
        logger.info("facility.updated", facility_id=facility.id, fields=sorted(changes))
        return facility

    @staticmethod
    @transaction.atomic
    def deactivate(*, facility_id: int, reason: str = "") -> Facility:
        facility = _locked(facility_id)
        if not facility.is_active:
            raise ConflictError("Facility is already inactive.")

        facility.is_active = False
        facility.deactivated_at = timezone.now()
        facility.deactivation_reason = (reason or "").strip()
        facility.save(update_fields=["is_active", "deactivated_at", "deactivation_reason", "updated_at"])
        logger.info("facility.deactivated", facility_id=facility.id)
        return facility
