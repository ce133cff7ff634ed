# backend/bh_core/obligations/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from bh_core.obligations.models import ObligationKind, ObligationRecord, Quarter, Shift


class ObligationRecordSerializer(serializers.ModelSerializer):
    submitted_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ObligationRecord
        fields = [
            "id",
            "facility_id",
            "kind",
            "shift",
            "performed_on",
            "month",
            "quarter",
            "bi_week",
            "year",
            "details",
            "submitted_by_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ObligationSubmitSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField(required=False)
    kind = serializers.ChoiceField(choices=ObligationKind.choices)
    performed_on = serializers.DateField()
    shift = serializers.ChoiceField(choices=Shift.choices, required=False, allow_null=True)
    quarter = serializers.ChoiceField(choices=Quarter.choices, required=False, allow_null=True)
    year = serializers.IntegerField(required=False, allow_null=True, min_value=2000, max_value=2100)
    details = serializers.JSONField(required=False)


class ObligationCorrectSerializer(serializers.Serializer):
    shift = serializers.ChoiceField(choices=Shift.choices, required=False)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    quarter = serializers.ChoiceField(choices=Quarter.choices, required=False)
    bi_week = serializers.IntegerField(required=False, min_value=1, max_value=27)
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
