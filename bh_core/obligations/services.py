# backend/bh_core/obligations/services.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

import structlog
from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from bh_core.common.api.exceptions import ConflictError
from bh_core.compliance.periods import resolve_period
from bh_core.facilities.models import Facility
from bh_core.iam.actors import Actor
from bh_core.obligations.models import SHIFTLESS_KINDS, ObligationKind, ObligationRecord, Quarter, Shift

logger = structlog.get_logger(__name__)

QUARTER_KINDS = frozenset({ObligationKind.EVACUATION_DRILL, ObligationKind.DISASTER_DRILL})

# Which period columns identify the reporting window for each kind.
PERIOD_KEYS = {
    ObligationKind.FIRE_DRILL: ("month", "year"),
    ObligationKind.EVACUATION_DRILL: ("quarter", "year"),
    ObligationKind.DISASTER_DRILL: ("quarter", "year"),
    ObligationKind.OVERSIGHT_TRAINING: ("bi_week", "year"),
}


def period_fields_for(
    *,
    kind: str,
    performed_on: date,
    quarter: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Stamp the period columns a record is evaluated against.
    Evacuation/disaster reports may name their quarter explicitly (both quarter and year).
    """
    period = resolve_period(performed_on)

    if kind == ObligationKind.FIRE_DRILL:
        return {"month": period.month, "quarter": None, "bi_week": None, "year": period.year}

    if kind in QUARTER_KINDS:
        if (quarter is None) != (year is None):
            raise ValidationError({"quarter": ["quarter and year must be provided together."]})
        if quarter is not None and quarter not in Quarter.values:
            raise ValidationError({"quarter": ["Invalid quarter."]})
        return {
            "month": None,
            "quarter": quarter or period.quarter,
            "bi_week": None,
            "year": year if year is not None else period.year,
        }

    if kind == ObligationKind.OVERSIGHT_TRAINING:
        return {"month": None, "quarter": None, "bi_week": period.bi_week, "year": period.bi_week_year}

    raise ValidationError({"kind": ["Invalid kind."]})


def _validate_shift(kind: str, shift: Optional[str]) -> Optional[str]:
    if kind in SHIFTLESS_KINDS:
        if shift:
            raise ValidationError({"shift": ["Shift does not apply to oversight training."]})
        return None
    if shift not in Shift.values:
        raise ValidationError({"shift": ["Shift must be AM or PM."]})
    return shift


def _assert_not_duplicate(*, facility_id: int, kind: str, shift: Optional[str], fields: Dict[str, Any], exclude_id=None) -> None:
    lookup = {k: fields[k] for k in PERIOD_KEYS[kind]}
    qs = ObligationRecord.objects.filter(facility_id=facility_id, kind=kind, shift=shift, **lookup)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        window = "/".join(str(lookup[k]) for k in PERIOD_KEYS[kind])
        suffix = f" for the {shift} shift" if shift else ""
        raise ConflictError(f"A {kind.lower().replace('_', ' ')} record already exists{suffix} in {window}.")


class ObligationService:
    @staticmethod
    @transaction.atomic
    def submit(
        *,
        actor: Actor,
        facility_id: int,
        kind: str,
        performed_on: date,
        shift: Optional[str] = None,
        quarter: Optional[str] = None,
        year: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ObligationRecord:
        if not (actor.is_admin or actor.is_bhrf):
            raise PermissionDenied("Only facility staff can submit obligation records.")

        # Lock the facility so concurrent submissions for the same window serialize on the duplicate check.
        facility = Facility.objects.select_for_update().filter(id=facility_id).first()
        if facility is None:
            raise NotFound("Facility not found.")
        if actor.is_bhrf and actor.facility_id != facility.id:
            raise PermissionDenied("You can only submit records for your own facility.")
        if not facility.is_active:
            raise ConflictError("Facility is inactive.")

        if kind not in ObligationKind.values:
            raise ValidationError({"kind": ["Invalid kind."]})
        shift = _validate_shift(kind, shift)
        fields = period_fields_for(kind=kind, performed_on=performed_on, quarter=quarter, year=year)

        _assert_not_duplicate(facility_id=facility.id, kind=kind, shift=shift, fields=fields)

        record = ObligationRecord.objects.create(
            facility=facility,
            kind=kind,
            shift=shift,
            performed_on=performed_on,
            details=details or {},
            submitted_by_id=actor.user_id,
            **fields,
        )
        logger.info(
            "obligation.submitted",
            record_id=record.id,
            facility_id=facility.id,
            kind=kind,
            shift=shift,
            year=record.year,
        )
        return record

    @staticmethod
    @transaction.atomic
    def correct(
        *,
        actor: Actor,
        record_id: int,
        shift: Optional[str] = None,
        month: Optional[int] = None,
        quarter: Optional[str] = None,
        bi_week: Optional[int] = None,
        year: Optional[int] = None,
    ) -> ObligationRecord:
        """
        Administrative correction of shift/period columns. Nothing else on a record is mutable.
        """
        if not actor.is_admin:
            raise PermissionDenied("Only administrators can correct obligation records.")

        record = ObligationRecord.objects.select_for_update().filter(id=record_id).first()
        if record is None:
            raise NotFound("Obligation record not found.")

        changed: Dict[str, Any] = {}
        if shift is not None:
            changed["shift"] = _validate_shift(record.kind, shift)
        if month is not None:
            if record.kind != ObligationKind.FIRE_DRILL or not 1 <= month <= 12:
                raise ValidationError({"month": ["Invalid month for this record."]})
            changed["month"] = month
        if quarter is not None:
            if record.kind not in QUARTER_KINDS or quarter not in Quarter.values:
                raise ValidationError({"quarter": ["Invalid quarter for this record."]})
            changed["quarter"] = quarter
        if bi_week is not None:
            if record.kind != ObligationKind.OVERSIGHT_TRAINING or not 1 <= bi_week <= 27:
                raise ValidationError({"bi_week": ["Invalid bi_week for this record."]})
            changed["bi_week"] = bi_week
        if year is not None:
            changed["year"] = year

        if not changed:
            raise ValidationError("Nothing to correct.")

        for k, v in changed.items():
            setattr(record, k, v)

        fields = {k: getattr(record, k) for k in PERIOD_KEYS[record.kind]}
        _assert_not_duplicate(
            facility_id=record.facility_id,
            kind=record.kind,
            shift=record.shift,
            fields=fields,
            exclude_id=record.id,
        )

        record.save(update_fields=[*changed.keys(), "updated_at"])
        logger.info("obligation.corrected", record_id=record.id, fields=sorted(changed))
        return record
