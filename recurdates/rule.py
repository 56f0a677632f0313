# rule.py
"""
Rule and query window value types consumed by the engine.

Public API:
  - RecurrenceRule, QueryWindow
  - DAILY, WEEKLY, MONTHLY, YEARLY, FREQUENCIES
  - SUNDAY .. SATURDAY weekday indices
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from .caldate import InvalidDateFormat

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
YEARLY = "yearly"

FREQUENCIES = frozenset({DAILY, WEEKLY, MONTHLY, YEARLY})

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

__all__ = [
    "DAILY", "WEEKLY", "MONTHLY", "YEARLY", "FREQUENCIES",
    "SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY",
    "InvalidDateFormat",
    "QueryWindow",
    "RecurrenceRule",
]


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: str                      # daily|weekly|monthly|yearly, anything else is unrecognized
    start_date: str                     # YYYY-MM-DD
    interval: int = 1
    end_date: Optional[str] = None      # inclusive, independent of the query window
    max_occurrences: Optional[int] = None
    excluded_dates: FrozenSet[str] = field(default_factory=frozenset)
    days_of_week: FrozenSet[int] = field(default_factory=frozenset)  # 0=Sun..6=Sat, weekly only
    day_of_month: Optional[int] = None  # 1..31, monthly only

    def __post_init__(self) -> None:
        if self.interval < 1:
            object.__setattr__(self, "interval", 1)
        object.__setattr__(self, "excluded_dates", _freeze(self.excluded_dates))
        object.__setattr__(self, "days_of_week", _freeze(self.days_of_week))

    @property
    def is_weekly_with_days(self) -> bool:
        return self.frequency == WEEKLY and bool(self.days_of_week)


@dataclass(frozen=True)
class QueryWindow:
    range_start: str
    range_end: str


def _freeze(values: Optional[Iterable]) -> frozenset:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        # a lone date string is one date, not a set of characters
        return frozenset([values])
    return frozenset(values)
