# backend/bh_core/audit/models.py
from django.conf import settings
from django.db import models

from bh_core.common.models import FacilityScopedModel


class AuditImmutableError(Exception):
    pass


class AuditEventQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AuditImmutableError("Audit events are append-only.")

    def delete(self):
        raise AuditImmutableError("Audit events are append-only.")


class AuditEvent(FacilityScopedModel):
    """
    Immutable audit record: one row per committed clinical-record transition.
    Written only through AuditService.append.
    """
    event_code = models.CharField(max_length=128, db_index=True)  # e.g. "intake.approved"
    entity_type = models.CharField(max_length=128, db_index=True)  # e.g. "ClinicalRecord"
    entity_id = models.BigIntegerField(db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict)

    objects = AuditEventQuerySet.as_manager()

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["facility_id", "occurred_at"]),
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["facility_id", "event_code"]),
        ]

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise AuditImmutableError("Audit events are append-only.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AuditImmutableError("Audit events are append-only.")
