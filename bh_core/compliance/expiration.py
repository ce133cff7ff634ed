# backend/bh_core/compliance/expiration.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from django.db import models

from bh_core.compliance.periods import Instant, reporting_timezone, to_reporting_date

EXPIRING_SOON_DAYS = 30
URGENT_DAYS = 7


class ExpirationStatus(models.TextChoices):
    VALID = "valid", "Valid"
    EXPIRING_SOON = "expiring_soon", "Expiring soon"
    EXPIRED = "expired", "Expired"
    AWAITING_UPLOAD = "awaiting_upload", "Awaiting upload"


# Stored artifact statuses that short-circuit date math.
STATUS_REQUESTED = "REQUESTED"
STATUS_EXPIRED = "EXPIRED"

FAILING = frozenset({ExpirationStatus.EXPIRED, ExpirationStatus.AWAITING_UPLOAD})


def as_instant(value: Instant) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=reporting_timezone())
        return value
    return datetime.combine(value, datetime.min.time(), tzinfo=reporting_timezone())


def classify_expiration(
    *,
    expires_at: Optional[Instant],
    status: Optional[str],
    now: Instant,
    horizon_days: int = EXPIRING_SOON_DAYS,
) -> ExpirationStatus:
    """
    Classify one dated artifact (document or credential).

    Priority:
      1. requested (no file yet)  -> awaiting_upload, whatever the date
      2. stored status EXPIRED    -> expired
      3. no expiry date           -> valid
      4. expires_at < now         -> expired
      5. expires_at <= now + N d  -> expiring_soon (boundary inclusive)
      6. otherwise                -> valid

    ``date`` expiries are compared to the calendar date of ``now``;
    ``datetime`` expiries are compared as instants.
    """
    normalized = (status or "").upper()
    if normalized == STATUS_REQUESTED:
        return ExpirationStatus.AWAITING_UPLOAD
    if normalized == STATUS_EXPIRED:
        return ExpirationStatus.EXPIRED
    if expires_at is None:
        return ExpirationStatus.VALID

    horizon = timedelta(days=horizon_days)
    if isinstance(expires_at, datetime):
        reference = as_instant(now)
        expiry = as_instant(expires_at)
    else:
        reference = to_reporting_date(now)
        expiry = expires_at

    if expiry < reference:
        return ExpirationStatus.EXPIRED
    if expiry <= reference + horizon:
        return ExpirationStatus.EXPIRING_SOON
    return ExpirationStatus.VALID


def classify_artifact(artifact, now: Instant, *, horizon_days: int = EXPIRING_SOON_DAYS) -> ExpirationStatus:
    """
    Convenience wrapper for model rows exposing ``expires_at`` and (optionally) ``status``.
    Credentials have no status field; their row only exists once uploaded.
    """
    return classify_expiration(
        expires_at=getattr(artifact, "expires_at", None),
        status=getattr(artifact, "status", None),
        now=now,
        horizon_days=horizon_days,
    )
