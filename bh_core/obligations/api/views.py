# backend/bh_core/obligations/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from bh_core.common.permissions import get_actor
from bh_core.obligations.api.serializers import (
    ObligationCorrectSerializer,
    ObligationRecordSerializer,
    ObligationSubmitSerializer,
)
from bh_core.obligations.models import ObligationRecord
from bh_core.obligations.permissions import ObligationPermission
from bh_core.obligations.selectors import records_for_actor
from bh_core.obligations.services import ObligationService


class ObligationRecordViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Drill and oversight-training reports.
    - list/retrieve: scoped to the facilities the actor can see
    - create: BHRF submits for its own facility (ADMIN must name facility_id)
    - correct: ADMIN fixes shift/period columns
    """
    permission_classes = [ObligationPermission]
    serializer_class = ObligationRecordSerializer
    queryset = ObligationRecord.objects.none()
    lookup_value_regex = r"\d+"
    filterset_fields = ["kind", "year", "facility", "shift", "quarter"]
    ordering_fields = ["performed_on", "year", "created_at"]

    def get_queryset(self):
        return records_for_actor(actor=get_actor(self.request))

    @extend_schema(
        tags=["Obligations"],
        request=ObligationSubmitSerializer,
        responses={201: ObligationRecordSerializer},
    )
    def create(self, request):
        s = ObligationSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        actor = get_actor(request)
        facility_id = d.get("facility_id") or actor.facility_id
        if not facility_id:
            raise ValidationError({"facility_id": ["This field is required."]})

        record = ObligationService.submit(
            actor=actor,
            facility_id=facility_id,
            kind=d["kind"],
            performed_on=d["performed_on"],
            shift=d.get("shift"),
            quarter=d.get("quarter"),
            year=d.get("year"),
            details=d.get("details"),
        )
        return Response(ObligationRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Obligations"],
        request=ObligationCorrectSerializer,
        responses={200: ObligationRecordSerializer},
    )
    @action(detail=True, methods=["post"], url_path="correct")
    def correct(self, request, pk=None):
        s = ObligationCorrectSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        record = ObligationService.correct(
            actor=get_actor(request),
            record_id=int(pk),
            **s.validated_data,
        )
        return Response(ObligationRecordSerializer(record).data, status=status.HTTP_200_OK)
