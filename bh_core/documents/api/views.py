# backend/bh_core/documents/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from bh_core.common.permissions import get_actor
from bh_core.documents.api.serializers import (
    DocumentRequestSerializer,
    DocumentSerializer,
    DocumentUploadSerializer,
)
from bh_core.documents.models import Document
from bh_core.documents.permissions import DocumentPermission
from bh_core.documents.selectors import documents_for_actor
from bh_core.documents.services import DocumentService


class DocumentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    permission_classes = [DocumentPermission]
    serializer_class = DocumentSerializer
    queryset = Document.objects.none()
    lookup_value_regex = r"\d+"
    filterset_fields = ["facility", "owner_type", "status", "employee", "resident", "doc_type"]
    ordering_fields = ["expires_at", "name", "created_at"]

    def get_queryset(self):
        return documents_for_actor(actor=get_actor(self.request))

    @extend_schema(tags=["Documents"], request=DocumentRequestSerializer, responses={201: DocumentSerializer})
    def create(self, request):
        s = DocumentRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        actor = get_actor(request)
        facility_id = d.get("facility_id") or actor.facility_id
        if not facility_id:
            raise ValidationError({"facility_id": ["This field is required."]})

        doc = DocumentService.request(
            actor=actor,
            facility_id=facility_id,
            owner_type=d["owner_type"],
            employee_id=d.get("employee_id"),
            resident_id=d.get("resident_id"),
            name=d["name"],
            doc_type=d["doc_type"],
            expires_at=d.get("expires_at"),
        )
        return Response(DocumentSerializer(doc).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Documents"], request=DocumentUploadSerializer, responses={200: DocumentSerializer})
    @action(detail=True, methods=["post"], url_path="upload")
    def upload(self, request, pk=None):
        s = DocumentUploadSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        doc = DocumentService.upload(
            actor=get_actor(request),
            document_id=int(pk),
            storage_key=s.validated_data["storage_key"],
            expires_at=s.validated_data.get("expires_at"),
        )
        return Response(DocumentSerializer(doc).data, status=status.HTTP_200_OK)
