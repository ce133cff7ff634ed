# backend/bh_core/compliance/obligations.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from bh_core.compliance.periods import QUARTERS_BY_HALF, Period
from bh_core.obligations.models import ObligationKind, Shift

REQUIRED_SHIFTS = (Shift.AM.value, Shift.PM.value)


@dataclass(frozen=True)
class ObligationVerdict:
    kind: str
    satisfied: bool
    window: str
    record_count: int = 0
    missing_shifts: tuple[str, ...] = field(default_factory=tuple)


class ObligationStrategy:
    """
    One recurring obligation. Records may contain other kinds and other
    facilities' periods; only matching (kind, window) rows count.
    """
    kind: str = ""
    label: str = ""

    def window(self, period: Period) -> str:
        raise NotImplementedError

    def in_window(self, record, period: Period) -> bool:
        raise NotImplementedError

    def relevant(self, records: Iterable, period: Period) -> list:
        return [r for r in records if r.kind == self.kind and self.in_window(r, period)]

    def evaluate(self, records: Iterable, period: Period) -> ObligationVerdict:
        matching = self.relevant(records, period)
        return ObligationVerdict(
            kind=self.kind,
            satisfied=bool(matching),
            window=self.window(period),
            record_count=len(matching),
        )

    def is_satisfied(self, records: Iterable, period: Period) -> bool:
        return self.evaluate(records, period).satisfied


class ShiftPairStrategy(ObligationStrategy):
    """Satisfied only when both AM and PM shifts have a record in the window."""

    def evaluate(self, records: Iterable, period: Period) -> ObligationVerdict:
        matching = self.relevant(records, period)
        seen = {r.shift for r in matching}
        missing = tuple(s for s in REQUIRED_SHIFTS if s not in seen)
        return ObligationVerdict(
            kind=self.kind,
            satisfied=not missing,
            window=self.window(period),
            record_count=len(matching),
            missing_shifts=missing,
        )


class FireDrillStrategy(ShiftPairStrategy):
    kind = ObligationKind.FIRE_DRILL.value
    label = "Fire drill"

    def window(self, period: Period) -> str:
        return f"{period.year}-{period.month:02d}"

    def in_window(self, record, period: Period) -> bool:
        return record.year == period.year and record.month == period.month


class EvacuationDrillStrategy(ShiftPairStrategy):
    # Reported per quarter, evaluated per half-year.
    kind = ObligationKind.EVACUATION_DRILL.value
    label = "Evacuation drill"

    def window(self, period: Period) -> str:
        return f"{period.year}-{period.half}"

    def in_window(self, record, period: Period) -> bool:
        return record.year == period.year and record.quarter in QUARTERS_BY_HALF[period.half]


class DisasterDrillStrategy(ShiftPairStrategy):
    kind = ObligationKind.DISASTER_DRILL.value
    label = "Disaster drill"

    def window(self, period: Period) -> str:
        return f"{period.year}-{period.quarter}"

    def in_window(self, record, period: Period) -> bool:
        return record.year == period.year and record.quarter == period.quarter


class OversightTrainingStrategy(ObligationStrategy):
    kind = ObligationKind.OVERSIGHT_TRAINING.value
    label = "Oversight training"

    def window(self, period: Period) -> str:
        return f"{period.bi_week_year}-BW{period.bi_week:02d}"

    def in_window(self, record, period: Period) -> bool:
        return record.year == period.bi_week_year and record.bi_week == period.bi_week


STRATEGIES: Sequence[ObligationStrategy] = (
    FireDrillStrategy(),
    EvacuationDrillStrategy(),
    DisasterDrillStrategy(),
    OversightTrainingStrategy(),
)

STRATEGY_BY_KIND = {s.kind: s for s in STRATEGIES}


def evaluate_obligations(records: Iterable, period: Period) -> list[ObligationVerdict]:
    records = list(records)
    return [s.evaluate(records, period) for s in STRATEGIES]


def is_satisfied(kind: str, records: Iterable, period: Period) -> bool:
    try:
        strategy = STRATEGY_BY_KIND[kind]
    except KeyError:
        raise ValueError(f"unknown obligation kind: {kind!r}") from None
    return strategy.is_satisfied(records, period)
