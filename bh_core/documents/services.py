# backend/bh_core/documents/services.py
from __future__ import annotations

from datetime import date
from typing import Optional

import structlog
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from bh_core.documents.models import Document, DocumentStatus, OwnerType
from bh_core.facilities.models import Employee, Resident
from bh_core.facilities.selectors import facility_for_actor
from bh_core.iam.actors import Actor, can_access_facility

logger = structlog.get_logger(__name__)


class DocumentService:
    @staticmethod
    @transaction.atomic
    def request(
        *,
        actor: Actor,
        facility_id: int,
        owner_type: str,
        name: str,
        doc_type: str,
        employee_id: Optional[int] = None,
        resident_id: Optional[int] = None,
        expires_at: Optional[date] = None,
    ) -> Document:
        """
        Create a document slot in REQUESTED state (no file yet).
        """
        facility = facility_for_actor(actor=actor, facility_id=facility_id)

        employee = resident = None
        if owner_type == OwnerType.EMPLOYEE:
            employee = Employee.objects.filter(id=employee_id, facility_id=facility.id).first() if employee_id else None
            if employee is None:
                raise ValidationError({"employee_id": ["Employee not found in this facility."]})
        elif owner_type == OwnerType.RESIDENT:
            resident = Resident.objects.filter(id=resident_id, facility_id=facility.id).first() if resident_id else None
            if resident is None:
                raise ValidationError({"resident_id": ["Resident not found in this facility."]})
        elif owner_type != OwnerType.FACILITY:
            raise ValidationError({"owner_type": ["Invalid owner_type."]})

        doc = Document.objects.create(
            facility=facility,
            owner_type=owner_type,
            employee=employee,
            resident=resident,
            name=name,
            doc_type=doc_type,
            status=DocumentStatus.REQUESTED,
            expires_at=expires_at,
            requested_by_id=actor.user_id,
        )
        logger.info("document.requested", document_id=doc.id, facility_id=facility.id, owner_type=owner_type)
        return doc

    @staticmethod
    @transaction.atomic
    def upload(
        *,
        actor: Actor,
        document_id: int,
        storage_key: str,
        expires_at: Optional[date] = None,
    ) -> Document:
        """
        Attach a file that already lives in the external store.
        Re-uploading an EXPIRED document replaces the file and its expiry.
        """
        doc = Document.objects.select_for_update().select_related("facility").filter(id=document_id).first()
        if doc is None:
            raise NotFound("Document not found.")
        if not can_access_facility(actor, doc.facility):
            raise PermissionDenied("You do not have access to this document.")
        if actor.is_bhp:
            raise PermissionDenied("Only facility staff can upload documents.")
        if not (storage_key or "").strip():
            raise ValidationError({"storage_key": ["This field may not be blank."]})

        doc.storage_key = storage_key.strip()
        doc.expires_at = expires_at
        doc.status = DocumentStatus.UPLOADED
        doc.uploaded_at = timezone.now()
        doc.save(update_fields=["storage_key", "expires_at", "status", "uploaded_at", "updated_at"])
        logger.info("document.uploaded", document_id=doc.id, facility_id=doc.facility_id)
        return doc
