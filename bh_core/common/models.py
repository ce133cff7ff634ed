# backend/bh_core/common/models.py
from __future__ import annotations

from django.db import models


class TimeStampedModel(models.Model):
    """
    Standard timestamps for all entities.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class FacilityScopedModel(TimeStampedModel):
    """
    Rows that belong to exactly one facility.
    Stored as a plain id so audit/compliance rows survive facility renames and soft deactivation.
    """
    facility_id = models.BigIntegerField(db_index=True)

    class Meta:
        abstract = True
