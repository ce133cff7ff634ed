# backend/bh_core/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from bh_core.audit.models import AuditEvent
from bh_core.facilities.selectors import facilities_for_actor
from bh_core.iam.actors import Actor


def list_audit_events(
    *,
    actor: Actor,
    facility_id: int | None = None,
    entity_type: str | None = None,
    entity_id: int | None = None,
    event_code: str | None = None,
    actor_user_id: int | None = None,
) -> QuerySet[AuditEvent]:
    """
    Newest first. Deactivated facilities stay visible: their history does not go away.
    """
    visible = facilities_for_actor(actor=actor, active_only=False).values("id")
    filters = {
        "facility_id": facility_id,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "event_code": event_code,
        "actor_user_id": actor_user_id,
    }
    return (
        AuditEvent.objects.filter(facility_id__in=visible)
        .filter(**{k: v for k, v in filters.items() if v is not None})
        .order_by("-occurred_at", "-id")
    )
