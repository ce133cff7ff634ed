# backend/bh_core/clinical_records/validation.py
from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers
from rest_framework.exceptions import ValidationError

from bh_core.clinical_records.models import MAX_DRAFT_STEP, RecordKind, RecordStatus

MIN_DECISION_REASON = 10

# Never accepted in an EDIT payload or inside content.
DECISION_FIELDS = frozenset({"status", "decision_reason", "decided_at", "decided_by", "outcome"})

# The only keys a DECIDE payload may carry.
DECISION_PAYLOAD_KEYS = frozenset({"outcome", "reason"})


class IntakeSubmissionSerializer(serializers.Serializer):
    resident_name = serializers.CharField(min_length=2, max_length=255)
    date_of_birth = serializers.DateField()
    religion = serializers.CharField(min_length=1, max_length=128)


class AsamSubmissionSerializer(serializers.Serializer):
    patient_name = serializers.CharField(min_length=2, max_length=255)
    date_of_birth = serializers.DateField()


SUBMISSION_SERIALIZERS = {
    RecordKind.INTAKE: IntakeSubmissionSerializer,
    RecordKind.ASAM: AsamSubmissionSerializer,
}

SUBJECT_FIELD = {
    RecordKind.INTAKE: "resident_name",
    RecordKind.ASAM: "patient_name",
}


class DecisionSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(
        choices=[RecordStatus.APPROVED, RecordStatus.CONDITIONAL, RecordStatus.DENIED],
    )
    reason = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        reason = (attrs.get("reason") or "").strip()
        if attrs["outcome"] != RecordStatus.APPROVED and len(reason) < MIN_DECISION_REASON:
            raise ValidationError(
                {"reason": [f"A reason of at least {MIN_DECISION_REASON} characters is required for {attrs['outcome']}."]}
            )
        attrs["reason"] = reason
        return attrs


def validate_content_shape(content: Any) -> Dict[str, Any]:
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValidationError({"content": ["Expected an object."]})
    return content


def validate_draft_step(kind: str, draft_step: Any) -> int:
    try:
        step = int(draft_step)
    except (TypeError, ValueError):
        raise ValidationError({"draft_step": ["A valid integer is required."]}) from None
    if not 1 <= step <= MAX_DRAFT_STEP[kind]:
        raise ValidationError({"draft_step": [f"Must be between 1 and {MAX_DRAFT_STEP[kind]}."]})
    return step


def validate_submission(kind: str, content: Dict[str, Any]) -> Dict[str, Any]:
    """
    Required-field check for a non-draft record. Per-field errors are nested under "content".
    """
    s = SUBMISSION_SERIALIZERS[kind](data=content)
    if not s.is_valid():
        raise ValidationError({"content": s.errors})
    return s.validated_data


def reject_decision_fields(*dicts: Dict[str, Any]) -> None:
    offending = sorted({k for d in dicts for k in d if k in DECISION_FIELDS})
    if offending:
        raise ValidationError({f: ["Decision fields can only change through a decision."] for f in offending})


def reject_non_decision_fields(payload: Dict[str, Any]) -> None:
    extra = sorted(k for k in payload if k not in DECISION_PAYLOAD_KEYS)
    if extra:
        raise ValidationError({f: ["Not accepted with a decision."] for f in extra})


def subject_name_for(kind: str, content: Dict[str, Any]) -> str:
    value = content.get(SUBJECT_FIELD[kind]) or ""
    return str(value).strip()[:255]
