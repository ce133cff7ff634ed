# backend/bh_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from bh_core.audit.api.serializers import AuditEventSerializer
from bh_core.audit.models import AuditEvent
from bh_core.audit.selectors import list_audit_events
from bh_core.common.api.pagination import TimelinePagination, paginate
from bh_core.common.permissions import BaseRolePermission, get_actor

# query param -> (type, help)
AUDIT_FILTERS = {
    "facility_id": (OpenApiTypes.INT, "Only events of this facility."),
    "entity_type": (OpenApiTypes.STR, "Entity type, e.g. ClinicalRecord."),
    "entity_id": (OpenApiTypes.INT, "Events of a single record."),
    "event_code": (OpenApiTypes.STR, "e.g. intake.submitted, asam.denied."),
    "actor_user_id": (OpenApiTypes.INT, "Events performed by this user."),
}


def _filter_values(request) -> dict:
    values = {}
    for name, (kind, _) in AUDIT_FILTERS.items():
        raw = (request.query_params.get(name) or "").strip()
        if not raw:
            continue
        if kind == OpenApiTypes.INT:
            try:
                values[name] = int(raw)
            except ValueError:
                raise ValidationError({name: ["Invalid integer."]}) from None
        else:
            values[name] = raw
    return values


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    Read-only timeline of clinical-record transitions, scoped to the actor's facilities.
    """
    permission_classes = [BaseRolePermission]
    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False, description=text)
            for name, (kind, text) in AUDIT_FILTERS.items()
        ],
    )
    def list(self, request):
        qs = list_audit_events(actor=get_actor(request), **_filter_values(request))
        return paginate(request, qs, AuditEventSerializer, paginator=TimelinePagination())
