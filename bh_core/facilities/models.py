# backend/bh_core/facilities/models.py
from __future__ import annotations

from django.db import models

from bh_core.bhps.models import BHPProfile
from bh_core.common.models import TimeStampedModel


class Facility(TimeStampedModel):
    """
    A behavioral-health residential facility (BHRF) under one BHP.

    Soft lifecycle only: facilities are deactivated, never deleted, because
    obligation records, documents, clinical records and audit rows point at them.
    """
    bhp = models.ForeignKey(BHPProfile, on_delete=models.PROTECT, related_name="facilities")

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="")

    # Lifecycle
    is_active = models.BooleanField(default=True, db_index=True)
    deactivated_at = models.DateTimeField(null=True, blank=True)
    deactivation_reason = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "facilities_facility"
        indexes = [
            models.Index(fields=["bhp", "is_active"]),
        ]

    def __str__(self) -> str:
        return self.name


class Employee(TimeStampedModel):
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="employees")
    full_name = models.CharField(max_length=255)
    position = models.CharField(max_length=128, blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "facilities_employee"
        ordering = ["full_name"]

    def __str__(self) -> str:
        return self.full_name


class Resident(TimeStampedModel):
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="residents")
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "facilities_resident"
        ordering = ["full_name"]

    def __str__(self) -> str:
        return self.full_name
