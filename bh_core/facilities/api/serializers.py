# backend/bh_core/facilities/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from bh_core.facilities.models import Facility


class FacilitySerializer(serializers.ModelSerializer):
    bhp_id = serializers.IntegerField(read_only=True)
    bhp_name = serializers.CharField(source="bhp.name", read_only=True)

    class Meta:
        model = Facility
        fields = [
            "id",
            "bhp_id",
            "bhp_name",
            "name",
            "address",
            "phone",
            "is_active",
            "deactivated_at",
            "deactivation_reason",
        ]
        read_only_fields = fields


class FacilityCreateSerializer(serializers.Serializer):
    bhp_id = serializers.IntegerField()
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")


class FacilityUpdateSerializer(serializers.Serializer):
    # is_active is not patchable; closing a facility goes through /deactivate/
    name = serializers.CharField(max_length=255, required=False)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)


class FacilityDeactivateSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
