# backend/bh_core/compliance/periods.py
"""
Calendar period resolution for compliance windows.

Every instant is first reduced to a calendar date in the reporting timezone;
all month / quarter / half / bi-week math happens on that date only, so an
evaluation never flaps around midnight UTC.

Bi-weeks are ISO-8601 week pairs (weeks 1-2 -> 1, 3-4 -> 2, ... 53 -> 27)
anchored to the ISO week-year, which differs from the calendar year for a few
days around January 1st. That anchor is carried as ``bi_week_year``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union
from zoneinfo import ZoneInfo

from django.conf import settings

DEFAULT_REPORTING_TIMEZONE = "America/Phoenix"

QUARTERS = ("Q1", "Q2", "Q3", "Q4")

# Evacuation drills are reported per quarter but evaluated per half-year.
QUARTERS_BY_HALF = {
    "H1": frozenset({"Q1", "Q2"}),
    "H2": frozenset({"Q3", "Q4"}),
}

Instant = Union[date, datetime]


@dataclass(frozen=True)
class Period:
    year: int
    month: int
    quarter: str
    half: str
    bi_week: int
    bi_week_year: int


def reporting_timezone() -> ZoneInfo:
    return ZoneInfo(getattr(settings, "BH_REPORTING_TIMEZONE", DEFAULT_REPORTING_TIMEZONE))


def to_reporting_date(value: Instant) -> date:
    """
    Reduce a date/datetime to the calendar date used for all period math.
    Aware datetimes are converted to the reporting zone; naive ones are taken as local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(reporting_timezone())
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def quarter_for_month(month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return QUARTERS[(month - 1) // 3]


def half_for_quarter(quarter: str) -> str:
    for half, quarters in QUARTERS_BY_HALF.items():
        if quarter in quarters:
            return half
    raise ValueError(f"unknown quarter: {quarter!r}")


def bi_week_for_date(d: date) -> tuple[int, int]:
    """(bi_week, iso_week_year) for a calendar date."""
    iso_year, iso_week, _ = d.isocalendar()
    return (iso_week + 1) // 2, iso_year


def bi_week_date_range(bi_week: int, year: int) -> tuple[date, date]:
    """
    First and last calendar day of a bi-week in the given ISO week-year.
    """
    if bi_week < 1:
        raise ValueError(f"bi_week out of range: {bi_week}")
    start_week = (bi_week - 1) * 2 + 1
    start = date.fromisocalendar(year, start_week, 1)
    return start, start + timedelta(days=13)


def resolve_period(value: Instant) -> Period:
    d = to_reporting_date(value)
    quarter = quarter_for_month(d.month)
    bi_week, bi_week_year = bi_week_for_date(d)
    return Period(
        year=d.year,
        month=d.month,
        quarter=quarter,
        half=half_for_quarter(quarter),
        bi_week=bi_week,
        bi_week_year=bi_week_year,
    )
