# backend/bh_core/audit/services.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from django.db import transaction

from bh_core.audit.models import AuditEvent

# Clinical content never reaches the audit log, only its shape.
REDACTED_KEYS = frozenset({"content"})


@dataclass(frozen=True)
class AuditEntry:
    """
    One committed state change, as handed to the sink.
    ``metadata`` carries identifiers and field names, never clinical content.
    """
    event_code: str
    entity_type: str
    entity_id: int
    facility_id: int
    actor_user_id: int | None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def redacted_metadata(self) -> Dict[str, Any]:
        return {k: v for k, v in self.metadata.items() if k not in REDACTED_KEYS}


class AuditService:
    """
    Append-only audit sink. ``append`` is the only write path.
    It joins the caller's transaction: if the append fails, the caller's change rolls back with it.
    """

    @staticmethod
    @transaction.atomic
    def append(entry: AuditEntry) -> AuditEvent:
        return AuditEvent.objects.create(
            facility_id=entry.facility_id,
            event_code=entry.event_code,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            actor_user_id=entry.actor_user_id,
            metadata=entry.redacted_metadata(),
        )
