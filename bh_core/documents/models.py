# backend/bh_core/documents/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from bh_core.common.models import TimeStampedModel


class OwnerType(models.TextChoices):
    FACILITY = "FACILITY", "Facility"
    EMPLOYEE = "EMPLOYEE", "Employee"
    RESIDENT = "RESIDENT", "Resident"


class DocumentStatus(models.TextChoices):
    REQUESTED = "REQUESTED", "Requested"
    UPLOADED = "UPLOADED", "Uploaded"
    EXPIRED = "EXPIRED", "Expired"


class Document(TimeStampedModel):
    """
    A dated artifact owned by a facility, one of its employees, or one of its residents.

    ``facility`` is always set (scope) even for employee/resident documents.
    REQUESTED means no file exists yet; that alone is a compliance failure.
    Files live in an external store; only the key is kept here.
    """
    facility = models.ForeignKey("facilities.Facility", on_delete=models.PROTECT, related_name="documents")
    owner_type = models.CharField(max_length=16, choices=OwnerType.choices, db_index=True)
    employee = models.ForeignKey(
        "facilities.Employee",
        on_delete=models.PROTECT,
        related_name="documents",
        null=True,
        blank=True,
    )
    resident = models.ForeignKey(
        "facilities.Resident",
        on_delete=models.PROTECT,
        related_name="documents",
        null=True,
        blank=True,
    )

    name = models.CharField(max_length=255)
    doc_type = models.CharField(max_length=64, db_index=True)
    status = models.CharField(
        max_length=16,
        choices=DocumentStatus.choices,
        default=DocumentStatus.REQUESTED,
        db_index=True,
    )
    expires_at = models.DateField(null=True, blank=True, db_index=True)

    storage_key = models.CharField(max_length=512, blank=True, default="")
    uploaded_at = models.DateTimeField(null=True, blank=True)

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="requested_documents",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "documents_document"
        indexes = [
            models.Index(fields=["facility", "owner_type", "status"]),
            models.Index(fields=["facility", "expires_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(owner_type=OwnerType.FACILITY, employee__isnull=True, resident__isnull=True)
                    | models.Q(owner_type=OwnerType.EMPLOYEE, employee__isnull=False, resident__isnull=True)
                    | models.Q(owner_type=OwnerType.RESIDENT, resident__isnull=False, employee__isnull=True)
                ),
                name="ck_document_owner_matches_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} [{self.status}]"
