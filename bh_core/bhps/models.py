# backend/bh_core/bhps/models.py
from __future__ import annotations

from django.db import models

from bh_core.common.models import TimeStampedModel


class BHPProfile(TimeStampedModel):
    """
    The managing/oversight authority for one or more facilities.
    Decides clinical records and receives compliance notices.
    """
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")

    # When False, BHRF submissions are approved on submit; when True they wait in PENDING.
    requires_record_review = models.BooleanField(default=False)

    class Meta:
        db_table = "bhps_bhp_profile"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Credential(TimeStampedModel):
    """
    Professional credential held by a BHP (license, certification, CPR card...).
    A row only exists once the file is in the external store.
    """
    bhp = models.ForeignKey(BHPProfile, on_delete=models.PROTECT, related_name="credentials")

    name = models.CharField(max_length=255)
    credential_type = models.CharField(max_length=64, db_index=True)
    storage_key = models.CharField(max_length=512)
    expires_at = models.DateField(null=True, blank=True, db_index=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bhps_credential"
        indexes = [
            models.Index(fields=["bhp", "expires_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.credential_type})"
