# backend/bh_core/clinical_records/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from bh_core.clinical_records.lifecycle import Action, allowed_actions
from bh_core.clinical_records.models import ClinicalRecord, RecordKind, RecordStatus


class ClinicalRecordSerializer(serializers.ModelSerializer):
    authored_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    decided_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    allowed_actions = serializers.SerializerMethodField()

    class Meta:
        model = ClinicalRecord
        fields = [
            "id",
            "facility_id",
            "kind",
            "status",
            "draft_step",
            "subject_name",
            "content",
            "authored_by_id",
            "submitted_at",
            "decision_reason",
            "decided_at",
            "decided_by_id",
            "allowed_actions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_allowed_actions(self, obj) -> list[str]:
        actor = self.context.get("actor")
        if actor is None:
            return []
        return [str(a) for a in allowed_actions(state=obj.status, role=actor.role)]


class ClinicalRecordListSerializer(ClinicalRecordSerializer):
    class Meta(ClinicalRecordSerializer.Meta):
        # clinical content stays out of list payloads
        fields = [f for f in ClinicalRecordSerializer.Meta.fields if f != "content"]
        read_only_fields = fields


class RecordStartSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField(required=False)
    kind = serializers.ChoiceField(choices=RecordKind.choices)
    action = serializers.ChoiceField(choices=[Action.SAVE_DRAFT, Action.SUBMIT])
    draft_step = serializers.IntegerField(required=False)
    content = serializers.JSONField(required=False)


class TransitionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=Action.choices)
    draft_step = serializers.IntegerField(required=False)
    content = serializers.JSONField(required=False)
    outcome = serializers.ChoiceField(
        choices=[RecordStatus.APPROVED, RecordStatus.CONDITIONAL, RecordStatus.DENIED],
        required=False,
    )
    reason = serializers.CharField(required=False, allow_blank=True)
