# backend/bh_core/iam/models.py
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from bh_core.common.models import TimeStampedModel


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Administrator"
    BHP = "BHP", "Behavioral Health Professional"
    BHRF = "BHRF", "Facility staff"


class UserProfile(TimeStampedModel):
    """
    Binds a Django auth user to exactly one role and the entity that role acts for:
      - BHP users act for a BHPProfile
      - BHRF users act for a single Facility
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bh_profile")
    role = models.CharField(max_length=8, choices=Role.choices, db_index=True)

    bhp = models.ForeignKey(
        "bhps.BHPProfile",
        on_delete=models.PROTECT,
        related_name="users",
        null=True,
        blank=True,
    )
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="staff",
        null=True,
        blank=True,
    )

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "iam_user_profile"

    def clean(self) -> None:
        if self.role == Role.BHP and not self.bhp_id:
            raise ValidationError({"bhp": "BHP users must be linked to a BHP profile."})
        if self.role == Role.BHRF and not self.facility_id:
            raise ValidationError({"facility": "Facility staff must be linked to a facility."})

    def __str__(self) -> str:
        return f"{self.user_id}:{self.role}"
