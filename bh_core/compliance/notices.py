# backend/bh_core/compliance/notices.py
from __future__ import annotations

from dataclasses import dataclass

from django.utils import timezone

from bh_core.bhps.selectors import credentials_for_bhp
from bh_core.clinical_records.selectors import pending_review_count
from bh_core.compliance.engine import ComplianceEngine
from bh_core.compliance.expiration import (
    EXPIRING_SOON_DAYS,
    URGENT_DAYS,
    ExpirationStatus,
    classify_artifact,
)
from bh_core.compliance.obligations import STRATEGY_BY_KIND
from bh_core.compliance.periods import Instant
from bh_core.documents.models import Document, DocumentStatus
from bh_core.facilities.selectors import facilities_for_actor
from bh_core.iam.actors import Actor

INFO = "info"
WARNING = "warning"
URGENT = "urgent"


@dataclass(frozen=True)
class Notice:
    code: str
    severity: str
    message: str
    count: int


def _plural(n: int, word: str, plural: str | None = None) -> str:
    return f"{n} {word if n == 1 else (plural or word + 's')}"


def _facility_notices(actor: Actor, now: Instant) -> list[Notice]:
    notices: list[Notice] = []
    docs = Document.objects.filter(facility_id=actor.facility_id)

    requested = docs.filter(status=DocumentStatus.REQUESTED).count()
    if requested:
        notices.append(Notice(
            code="documents.requested",
            severity=WARNING,
            message=f"{_plural(requested, 'document')} awaiting upload.",
            count=requested,
        ))

    urgent = soon = 0
    for d in docs.filter(status=DocumentStatus.UPLOADED, expires_at__isnull=False):
        if classify_artifact(d, now, horizon_days=URGENT_DAYS) == ExpirationStatus.EXPIRING_SOON:
            urgent += 1
        elif classify_artifact(d, now) == ExpirationStatus.EXPIRING_SOON:
            soon += 1

    if urgent:
        notices.append(Notice(
            code="documents.expiring_urgent",
            severity=URGENT,
            message=f"{_plural(urgent, 'document')} expiring within {URGENT_DAYS} days.",
            count=urgent,
        ))
    if soon:
        notices.append(Notice(
            code="documents.expiring_soon",
            severity=INFO,
            message=f"{_plural(soon, 'document')} expiring within {EXPIRING_SOON_DAYS} days.",
            count=soon,
        ))

    status = ComplianceEngine.get_compliance_status(facility_id=actor.facility_id, now=now)
    for verdict in status.obligations:
        if verdict.satisfied:
            continue
        label = STRATEGY_BY_KIND[verdict.kind].label
        notices.append(Notice(
            code=f"obligations.{verdict.kind.lower()}",
            severity=WARNING,
            message=f"{label} due for {verdict.window}.",
            count=1,
        ))
    return notices


def _bhp_notices(actor: Actor, now: Instant) -> list[Notice]:
    notices: list[Notice] = []

    expired = expiring = 0
    for cred in credentials_for_bhp(bhp_id=actor.bhp_id):
        verdict = classify_artifact(cred, now, horizon_days=EXPIRING_SOON_DAYS)
        if verdict == ExpirationStatus.EXPIRED:
            expired += 1
        elif verdict == ExpirationStatus.EXPIRING_SOON:
            expiring += 1

    if expired:
        notices.append(Notice(
            code="credentials.expired",
            severity=URGENT,
            message=f"{_plural(expired, 'credential')} expired.",
            count=expired,
        ))
    if expiring:
        notices.append(Notice(
            code="credentials.expiring_soon",
            severity=WARNING,
            message=f"{_plural(expiring, 'credential')} expiring within {EXPIRING_SOON_DAYS} days.",
            count=expiring,
        ))

    pending = pending_review_count(actor=actor)
    if pending:
        notices.append(Notice(
            code="clinical_records.pending_review",
            severity=WARNING,
            message=f"{_plural(pending, 'record')} awaiting your decision.",
            count=pending,
        ))

    out_of_compliance = sum(
        1
        for f in facilities_for_actor(actor=actor)
        if not ComplianceEngine.get_compliance_status(facility_id=f.id, now=now).in_compliance
    )
    if out_of_compliance:
        notices.append(Notice(
            code="facilities.out_of_compliance",
            severity=WARNING,
            message=f"{_plural(out_of_compliance, 'facility', 'facilities')} out of compliance.",
            count=out_of_compliance,
        ))
    return notices


def notices_for_actor(actor: Actor, now: Instant | None = None) -> list[Notice]:
    """
    Classify what the actor should be told about. Delivery is someone else's job.
    """
    now = now or timezone.now()
    if actor.is_bhrf and actor.facility_id:
        return _facility_notices(actor, now)
    if actor.is_bhp and actor.bhp_id:
        return _bhp_notices(actor, now)
    return []
