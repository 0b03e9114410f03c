"""
Penalty point table and sanction thresholds.

Pure functions only: no database or Flask access, so the sweep, the
penalty service and the tests all share one source of truth.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime

from council.models.enums import PenaltyType, SanctionType


PENALTY_RULES = {
    "OVERDUE_DAILY": 1,      # per overdue day
    "RETURN_DELAY": 2,       # per day, approved but not picked up
    "DAMAGE_MINOR": 5,
    "MULTIPLE_OVERDUE": 5,   # flat, once per sweep per borrower
    "DAMAGE_MAJOR": 15,
    "LOSS": 30,
}

PENALTY_THRESHOLDS = {
    "WARNING": 10,
    "SUSPENSION_1": 20,
    "SUSPENSION_3": 30,
    "PERMANENT_BAN": 50,
}

# evaluated top-down, first match wins: (threshold, tier, months of suspension or None)
_SANCTION_TABLE = (
    (PENALTY_THRESHOLDS["PERMANENT_BAN"], SanctionType.PERMANENT_BAN, None),
    (PENALTY_THRESHOLDS["SUSPENSION_3"], SanctionType.SUSPENSION_3_MONTHS, 3),
    (PENALTY_THRESHOLDS["SUSPENSION_1"], SanctionType.SUSPENSION_1_MONTH, 1),
    (PENALTY_THRESHOLDS["WARNING"], SanctionType.WARNING, None),
)

SANCTION_SEVERITY = {
    None: 0,
    SanctionType.WARNING: 1,
    SanctionType.SUSPENSION_1_MONTH: 2,
    SanctionType.SUSPENSION_3_MONTHS: 3,
    SanctionType.PERMANENT_BAN: 4,
}

_POINTS_BY_TYPE = {
    PenaltyType.OVERDUE: PENALTY_RULES["OVERDUE_DAILY"],
    PenaltyType.RETURN_DELAY: PENALTY_RULES["RETURN_DELAY"],
    PenaltyType.DAMAGE_MINOR: PENALTY_RULES["DAMAGE_MINOR"],
    PenaltyType.MULTIPLE_OVERDUE: PENALTY_RULES["MULTIPLE_OVERDUE"],
    PenaltyType.DAMAGE_MAJOR: PENALTY_RULES["DAMAGE_MAJOR"],
    PenaltyType.LOSS: PENALTY_RULES["LOSS"],
}

PER_DAY_TYPES = (PenaltyType.OVERDUE, PenaltyType.RETURN_DELAY)


@dataclass(frozen=True)
class SanctionDecision:
    tier: SanctionType | None
    end_date: datetime | None = None

    @property
    def tier_value(self):
        return self.tier.value if self.tier else None


def penalty_type_of(value) -> PenaltyType:
    """Accept a PenaltyType or its name in any case."""
    if isinstance(value, PenaltyType):
        return value
    return PenaltyType(str(value).strip().upper())


def points_for(event_type, magnitude: int = 1) -> int:
    """
    Points for one event. `magnitude` is a day count and only matters for
    the per-day types; flat events ignore it.
    """
    event_type = penalty_type_of(event_type)
    if event_type not in _POINTS_BY_TYPE:
        raise ValueError(f"No point rule for {event_type.value}")
    if magnitude < 0:
        raise ValueError("magnitude must not be negative")

    base = _POINTS_BY_TYPE[event_type]
    if event_type in PER_DAY_TYPES:
        return base * int(magnitude)
    return base


def elapsed_overdue_days(due_date: datetime, now: datetime) -> int:
    """Full 24-hour periods past the due timestamp, floored; never negative."""
    if not due_date:
        return 0
    seconds = (now - due_date).total_seconds()
    return max(0, int(seconds // 86400))


def add_months(dt: datetime, months: int) -> datetime:
    """Calendar-month addition; the day is clamped to the target month's length."""
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def classify_sanction(total_points: int, now: datetime) -> SanctionDecision:
    for threshold, tier, months in _SANCTION_TABLE:
        if total_points >= threshold:
            end_date = add_months(now, months) if months else None
            return SanctionDecision(tier=tier, end_date=end_date)
    return SanctionDecision(tier=None)


def severity(tier) -> int:
    if tier is not None and not isinstance(tier, SanctionType):
        tier = SanctionType(tier)
    return SANCTION_SEVERITY[tier]
