# backend/bh_core/clinical_records/services.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import APIException, NotFound, PermissionDenied, ValidationError

from bh_core.audit.services import AuditEntry, AuditService
from bh_core.clinical_records.lifecycle import NEW, Action, require_role, resolve_target
from bh_core.clinical_records.models import ClinicalRecord, RecordKind, RecordStatus
from bh_core.clinical_records.validation import (
    DecisionSerializer,
    reject_decision_fields,
    reject_non_decision_fields,
    subject_name_for,
    validate_content_shape,
    validate_draft_step,
    validate_submission,
)
from bh_core.common.api.exceptions import ConflictError
from bh_core.facilities.models import Facility
from bh_core.iam.actors import Actor, can_access_facility

logger = structlog.get_logger(__name__)

ENTITY_TYPE = "ClinicalRecord"

_EVENT_SUFFIX = {
    Action.SAVE_DRAFT: "draft_saved",
    Action.SUBMIT: "submitted",
    Action.EDIT: "updated",
}


def _event_code(kind: str, action: str, target: str) -> str:
    suffix = target.lower() if action == Action.DECIDE else _EVENT_SUFFIX[action]
    return f"{kind.lower()}.{suffix}"


def _assert_owner(actor: Actor, facility: Facility) -> None:
    if not can_access_facility(actor, facility):
        raise PermissionDenied("You do not have access to records of this facility.")


def commit_decision(
    *,
    record_id: int,
    outcome: str,
    reason: str,
    decided_by_id: int,
    now: datetime,
) -> None:
    """
    Write-once decision: only a row still PENDING is updated.
    Zero rows updated means another decision won.
    """
    updated = ClinicalRecord.objects.filter(id=record_id, status=RecordStatus.PENDING).update(
        status=outcome,
        decision_reason=reason,
        decided_at=now,
        decided_by_id=decided_by_id,
        updated_at=now,
    )
    if updated != 1:
        raise ConflictError("Record already has a decision.")


class ClinicalRecordService:
    """
    Every create/update/decision on a clinical record goes through here.
    One committed transition == one AuditEvent, in the same transaction.
    """

    @staticmethod
    @transaction.atomic
    def start(
        *,
        actor: Actor,
        facility_id: int,
        kind: str,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ClinicalRecord:
        """
        First transition of a record that does not exist yet (SAVE_DRAFT or SUBMIT from NEW).
        """
        payload = payload or {}
        if kind not in RecordKind.values:
            raise ValidationError({"kind": ["Must be INTAKE or ASAM."]})

        facility = Facility.objects.select_related("bhp").filter(id=facility_id).first()
        if facility is None:
            raise NotFound("Facility not found.")

        try:
            require_role(action=action, role=actor.role)
            _assert_owner(actor, facility)
            target = resolve_target(
                state=NEW,
                action=action,
                role=actor.role,
                requires_review=facility.bhp.requires_record_review,
            )
            if not facility.is_active:
                raise ConflictError("Facility is inactive.")

            record = ClinicalRecord(facility=facility, kind=kind, authored_by_id=actor.user_id, content={})
            return ClinicalRecordService._apply(
                record=record,
                actor=actor,
                action=action,
                target=target,
                payload=payload,
            )
        except APIException as exc:
            logger.warning(
                "clinical_record.transition_rejected",
                record_id=None,
                facility_id=facility_id,
                action=action,
                role=actor.role,
                code=exc.default_code,
            )
            raise

    @staticmethod
    @transaction.atomic
    def apply_transition(
        *,
        record_id: int,
        actor: Actor,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ClinicalRecord:
        payload = payload or {}

        record = (
            ClinicalRecord.objects.select_for_update(of=("self",))
            .select_related("facility__bhp")
            .filter(id=record_id)
            .first()
        )
        if record is None:
            raise NotFound("Clinical record not found.")

        try:
            require_role(action=action, role=actor.role)
            _assert_owner(actor, record.facility)
            target = resolve_target(
                state=record.status,
                action=action,
                role=actor.role,
                requires_review=record.facility.bhp.requires_record_review,
                outcome=payload.get("outcome"),
            )

            return ClinicalRecordService._apply(
                record=record,
                actor=actor,
                action=action,
                target=target,
                payload=payload,
            )
        except APIException as exc:
            logger.warning(
                "clinical_record.transition_rejected",
                record_id=record_id,
                from_status=record.status,
                action=action,
                role=actor.role,
                code=exc.default_code,
            )
            raise

    # -----------------------
    # Per-action mutation
    # -----------------------
    @staticmethod
    def _apply(
        *,
        record: ClinicalRecord,
        actor: Actor,
        action: str,
        target: str,
        payload: Dict[str, Any],
    ) -> ClinicalRecord:
        from_status = NEW if record.pk is None else record.status
        now = timezone.now()
        metadata: Dict[str, Any] = {}

        if action == Action.SAVE_DRAFT:
            content = validate_content_shape(payload.get("content"))
            reject_decision_fields(payload, content)
            record.draft_step = validate_draft_step(record.kind, payload.get("draft_step", record.draft_step or 1))
            record.content = {**(record.content or {}), **content}
            record.subject_name = subject_name_for(record.kind, record.content)
            record.status = target
            record.save()
            metadata["draft_step"] = record.draft_step

        elif action == Action.SUBMIT:
            content = validate_content_shape(payload.get("content"))
            reject_decision_fields(payload, content)
            merged = {**(record.content or {}), **content}
            validate_submission(record.kind, merged)
            record.content = merged
            record.subject_name = subject_name_for(record.kind, merged)
            record.draft_step = None
            record.submitted_at = now
            record.status = target
            record.save()

        elif action == Action.DECIDE:
            reject_non_decision_fields(payload)
            s = DecisionSerializer(data=payload)
            s.is_valid(raise_exception=True)
            reason = s.validated_data["reason"]
            commit_decision(
                record_id=record.id,
                outcome=target,
                reason=reason,
                decided_by_id=actor.user_id,
                now=now,
            )
            record.refresh_from_db()
            metadata["decision"] = target
            metadata["reason"] = reason

        elif action == Action.EDIT:
            content = validate_content_shape(payload.get("content"))
            reject_decision_fields(payload, content)
            if not content:
                raise ValidationError({"content": ["Nothing to update."]})
            merged = {**(record.content or {}), **content}
            validate_submission(record.kind, merged)
            record.content = merged
            record.subject_name = subject_name_for(record.kind, merged)
            # status and decision_* are never written by an edit
            record.save(update_fields=["content", "subject_name", "updated_at"])
            metadata["updated_fields"] = sorted(content)

        event_code = _event_code(record.kind, action, target)
        AuditService.append(
            AuditEntry(
                event_code=event_code,
                entity_type=ENTITY_TYPE,
                entity_id=record.id,
                facility_id=record.facility_id,
                actor_user_id=actor.user_id,
                metadata={
                    "subject_name": record.subject_name,
                    "from_status": from_status,
                    "to_status": record.status,
                    **metadata,
                },
            )
        )

        logger.info(
            "clinical_record.transition",
            record_id=record.id,
            facility_id=record.facility_id,
            event_code=event_code,
            from_status=from_status,
            to_status=record.status,
            actor_user_id=actor.user_id,
        )
        return record


def start_record(*, actor: Actor, facility_id: int, kind: str, action: str, payload=None) -> ClinicalRecord:
    return ClinicalRecordService.start(actor=actor, facility_id=facility_id, kind=kind, action=action, payload=payload)


def apply_transition(*, record_id: int, actor: Actor, action: str, payload=None) -> ClinicalRecord:
    return ClinicalRecordService.apply_transition(record_id=record_id, actor=actor, action=action, payload=payload)
