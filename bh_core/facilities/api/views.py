# backend/bh_core/facilities/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from bh_core.common.permissions import get_actor
from bh_core.compliance.api.serializers import ComplianceStatusSerializer, EmployeeComplianceSerializer
from bh_core.compliance.api.views import AS_OF_PARAMETER, evaluation_instant
from bh_core.compliance.engine import ComplianceEngine
from bh_core.facilities.api.serializers import (
    FacilityCreateSerializer,
    FacilityDeactivateSerializer,
    FacilitySerializer,
    FacilityUpdateSerializer,
)
from bh_core.facilities.permissions import FacilityPermission
from bh_core.facilities.selectors import facilities_for_actor, facility_for_actor
from bh_core.facilities.services import FacilityService, FacilityUpdate


class FacilityViewSet(viewsets.ViewSet):
    permission_classes = [FacilityPermission]
    lookup_value_regex = r"\d+"

    @extend_schema(tags=["Facilities"], responses={200: FacilitySerializer(many=True)})
    def list(self, request):
        active_only = request.query_params.get("active_only", "1").strip().lower() in {"1", "true", "yes", "y", "on"}
        qs = facilities_for_actor(actor=get_actor(request), active_only=active_only)
        return Response(FacilitySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], responses={200: FacilitySerializer})
    def retrieve(self, request, pk=None):
        obj = facility_for_actor(actor=get_actor(request), facility_id=int(pk))
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], request=FacilityCreateSerializer, responses={201: FacilitySerializer})
    def create(self, request):
        s = FacilityCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = FacilityService.create(**s.validated_data)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Facilities"], request=FacilityUpdateSerializer, responses={200: FacilitySerializer})
    def partial_update(self, request, pk=None):
        facility = facility_for_actor(actor=get_actor(request), facility_id=int(pk))

        s = FacilityUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = FacilityService.update(facility_id=facility.id, patch=FacilityUpdate(**s.validated_data))
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], request=FacilityDeactivateSerializer, responses={200: FacilitySerializer})
    @action(detail=True, methods=["post"], url_path="deactivate")
    def deactivate(self, request, pk=None):
        facility = facility_for_actor(actor=get_actor(request), facility_id=int(pk))
        s = FacilityDeactivateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        obj = FacilityService.deactivate(facility_id=facility.id, reason=s.validated_data["reason"])
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    # ----------------------------
    # Compliance (recomputed on every read)
    # ----------------------------
    @extend_schema(tags=["Compliance"], parameters=[AS_OF_PARAMETER], responses={200: ComplianceStatusSerializer})
    @action(detail=True, methods=["get"], url_path="compliance")
    def compliance(self, request, pk=None):
        facility = facility_for_actor(actor=get_actor(request), facility_id=int(pk))
        result = ComplianceEngine.get_compliance_status(facility_id=facility.id, now=evaluation_instant(request))
        return Response(ComplianceStatusSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Compliance"], parameters=[AS_OF_PARAMETER], responses={200: EmployeeComplianceSerializer})
    @action(detail=True, methods=["get"], url_path="employee-compliance")
    def employee_compliance(self, request, pk=None):
        facility = facility_for_actor(actor=get_actor(request), facility_id=int(pk))
        result = ComplianceEngine.employee_compliance(facility_id=facility.id, now=evaluation_instant(request))
        return Response(EmployeeComplianceSerializer(result).data, status=status.HTTP_200_OK)
