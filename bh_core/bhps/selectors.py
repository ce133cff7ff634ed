# backend/bh_core/bhps/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from bh_core.bhps.models import Credential


def credentials_for_bhp(*, bhp_id: int) -> QuerySet[Credential]:
    return Credential.objects.filter(bhp_id=bhp_id).order_by("expires_at", "name")
