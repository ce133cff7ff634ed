# backend/bh_core/documents/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from bh_core.documents.models import Document
from bh_core.facilities.selectors import facilities_for_actor
from bh_core.iam.actors import Actor


def documents_for_actor(*, actor: Actor) -> QuerySet[Document]:
    facility_ids = facilities_for_actor(actor=actor, active_only=False).values("id")
    return Document.objects.filter(facility_id__in=facility_ids).order_by("expires_at", "name")
