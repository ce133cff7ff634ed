# backend/bh_core/documents/api/serializers.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from bh_core.compliance.expiration import classify_artifact
from bh_core.documents.models import Document, OwnerType


class DocumentSerializer(serializers.ModelSerializer):
    expiration_status = serializers.SerializerMethodField()

    class Meta:
        model = Document
        fields = [
            "id",
            "facility_id",
            "owner_type",
            "employee_id",
            "resident_id",
            "name",
            "doc_type",
            "status",
            "expires_at",
            "expiration_status",
            "storage_key",
            "uploaded_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_expiration_status(self, obj) -> str:
        now = self.context.get("now") or timezone.now()
        return classify_artifact(obj, now).value


class DocumentRequestSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField(required=False)
    owner_type = serializers.ChoiceField(choices=OwnerType.choices, default=OwnerType.FACILITY)
    employee_id = serializers.IntegerField(required=False, allow_null=True)
    resident_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255)
    doc_type = serializers.CharField(max_length=64)
    expires_at = serializers.DateField(required=False, allow_null=True)


class DocumentUploadSerializer(serializers.Serializer):
    storage_key = serializers.CharField(max_length=512)
    expires_at = serializers.DateField(required=False, allow_null=True)
