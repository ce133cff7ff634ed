# backend/bh_core/audit/api/serializers.py
from rest_framework import serializers

from bh_core.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    actor_user_id = serializers.IntegerField(read_only=True, allow_null=True)
    transition = serializers.SerializerMethodField()

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "facility_id",
            "event_code",
            "entity_type",
            "entity_id",
            "actor_user_id",
            "occurred_at",
            "transition",
            "metadata",
        ]
        read_only_fields = fields

    def get_transition(self, obj) -> str | None:
        meta = obj.metadata or {}
        if "from_status" not in meta or "to_status" not in meta:
            return None
        return f"{meta['from_status']} -> {meta['to_status']}"
