# backend/bh_core/clinical_records/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from bh_core.common.models import TimeStampedModel


class RecordKind(models.TextChoices):
    INTAKE = "INTAKE", "Intake assessment"
    ASAM = "ASAM", "ASAM level-of-care assessment"


class RecordStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    PENDING = "PENDING", "Pending review"
    APPROVED = "APPROVED", "Approved"
    CONDITIONAL = "CONDITIONAL", "Conditional"
    DENIED = "DENIED", "Denied"


DECIDED_STATUSES = frozenset({RecordStatus.APPROVED, RecordStatus.CONDITIONAL, RecordStatus.DENIED})

# Multi-step forms: intake has 17 steps, ASAM 8.
MAX_DRAFT_STEP = {
    RecordKind.INTAKE: 17,
    RecordKind.ASAM: 8,
}


class ClinicalRecord(TimeStampedModel):
    """
    Intake or ASAM assessment authored by facility staff and decided by the facility's BHP.

    Status only moves through ClinicalRecordService.apply_transition / start.
    draft_step is meaningful only while DRAFT; decision_* only once decided.
    """
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="clinical_records",
    )
    kind = models.CharField(max_length=8, choices=RecordKind.choices, db_index=True)
    status = models.CharField(max_length=16, choices=RecordStatus.choices, default=RecordStatus.DRAFT, db_index=True)
    draft_step = models.PositiveSmallIntegerField(null=True, blank=True)

    subject_name = models.CharField(max_length=255, blank=True, default="")
    content = models.JSONField(default=dict, blank=True)

    authored_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="authored_clinical_records",
        null=True,
        blank=True,
    )
    submitted_at = models.DateTimeField(null=True, blank=True)

    decision_reason = models.TextField(blank=True, default="")
    decided_at = models.DateTimeField(null=True, blank=True)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="decided_clinical_records",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "clinical_records_clinical_record"
        indexes = [
            models.Index(fields=["facility", "kind", "status"]),
        ]
        ordering = ["-updated_at", "-id"]

    def __str__(self) -> str:
        return f"{self.kind}#{self.pk} {self.status}"
