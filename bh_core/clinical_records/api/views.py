# backend/bh_core/clinical_records/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from bh_core.clinical_records.api.serializers import (
    ClinicalRecordListSerializer,
    ClinicalRecordSerializer,
    RecordStartSerializer,
    TransitionSerializer,
)
from bh_core.clinical_records.models import ClinicalRecord
from bh_core.clinical_records.permissions import ClinicalRecordPermission
from bh_core.clinical_records.selectors import records_for_actor
from bh_core.clinical_records.services import ClinicalRecordService
from bh_core.common.permissions import get_actor


def _payload(validated: dict, *, drop: tuple[str, ...]) -> dict:
    return {k: v for k, v in validated.items() if k not in drop}


class ClinicalRecordViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Thin API layer over ClinicalRecordService:
    - create  = first transition (SAVE_DRAFT or SUBMIT)
    - transition = every later transition (SAVE_DRAFT, SUBMIT, DECIDE, EDIT)
    """
    permission_classes = [ClinicalRecordPermission]
    serializer_class = ClinicalRecordSerializer
    queryset = ClinicalRecord.objects.none()
    lookup_value_regex = r"\d+"
    filterset_fields = ["kind", "status", "facility"]
    ordering_fields = ["updated_at", "submitted_at", "decided_at"]

    def get_queryset(self):
        return records_for_actor(actor=get_actor(self.request))

    def get_serializer_class(self):
        if self.action == "list":
            return ClinicalRecordListSerializer
        return ClinicalRecordSerializer

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["actor"] = get_actor(self.request)
        return ctx

    @extend_schema(tags=["Clinical records"], request=RecordStartSerializer, responses={201: ClinicalRecordSerializer})
    def create(self, request):
        s = RecordStartSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        actor = get_actor(request)
        facility_id = d.get("facility_id") or actor.facility_id
        if not facility_id:
            raise ValidationError({"facility_id": ["This field is required."]})

        record = ClinicalRecordService.start(
            actor=actor,
            facility_id=facility_id,
            kind=d["kind"],
            action=d["action"],
            payload=_payload(d, drop=("facility_id", "kind", "action")),
        )
        return Response(
            ClinicalRecordSerializer(record, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Clinical records"], request=TransitionSerializer, responses={200: ClinicalRecordSerializer})
    @action(detail=True, methods=["post"], url_path="transition")
    def transition(self, request, pk=None):
        s = TransitionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        record = ClinicalRecordService.apply_transition(
            record_id=int(pk),
            actor=get_actor(request),
            action=d["action"],
            payload=_payload(d, drop=("action",)),
        )
        return Response(
            ClinicalRecordSerializer(record, context=self.get_serializer_context()).data,
            status=status.HTTP_200_OK,
        )
