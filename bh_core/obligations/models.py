# backend/bh_core/obligations/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from bh_core.common.models import TimeStampedModel


class ObligationKind(models.TextChoices):
    FIRE_DRILL = "FIRE_DRILL", "Fire drill"
    EVACUATION_DRILL = "EVACUATION_DRILL", "Evacuation drill"
    DISASTER_DRILL = "DISASTER_DRILL", "Disaster drill"
    OVERSIGHT_TRAINING = "OVERSIGHT_TRAINING", "Oversight training"


class Shift(models.TextChoices):
    AM = "AM", "AM"
    PM = "PM", "PM"


class Quarter(models.TextChoices):
    Q1 = "Q1", "Q1 (Jan-Mar)"
    Q2 = "Q2", "Q2 (Apr-Jun)"
    Q3 = "Q3", "Q3 (Jul-Sep)"
    Q4 = "Q4", "Q4 (Oct-Dec)"


SHIFTLESS_KINDS = frozenset({ObligationKind.OVERSIGHT_TRAINING})


class ObligationRecord(TimeStampedModel):
    """
    Proof that a recurring obligation was performed.

    Period fields are stamped at creation from performed_on (or, for evacuation/
    disaster drills, from an explicit quarter/year on the report). Only the fields
    relevant to the kind are read by the evaluator:
      fire drill          -> month, year
      evacuation/disaster -> quarter, year
      oversight training  -> bi_week, year (ISO week-year)

    Append-only apart from administrative correction.
    """
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="obligation_records",
    )
    kind = models.CharField(max_length=24, choices=ObligationKind.choices, db_index=True)
    shift = models.CharField(max_length=2, choices=Shift.choices, null=True, blank=True)

    performed_on = models.DateField()

    month = models.PositiveSmallIntegerField(null=True, blank=True)
    quarter = models.CharField(max_length=2, choices=Quarter.choices, null=True, blank=True)
    bi_week = models.PositiveSmallIntegerField(null=True, blank=True)
    year = models.PositiveSmallIntegerField(db_index=True)

    # Report body (participants, observations, signatures...). Not interpreted.
    details = models.JSONField(default=dict, blank=True)

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="submitted_obligation_records",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "obligations_obligation_record"
        indexes = [
            models.Index(fields=["facility", "kind", "year"]),
        ]
        ordering = ["-year", "-performed_on", "-id"]

    def __str__(self) -> str:
        return f"{self.kind} {self.performed_on} {self.shift or ''}".strip()
