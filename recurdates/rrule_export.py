# rrule_export.py
"""
RecurrenceRule -> dateutil rrule / iCalendar RRULE text (export-only).

Public API:
  - to_rrule(rule) -> dateutil.rrule.rrule
  - to_rruleset(rule) -> dateutil.rrule.rruleset   (excluded dates as EXDATE)
  - to_rrule_string(rule) -> "DTSTART:...\\nRRULE:..."

Notes:
- Days past the 28th are written as BYMONTHDAY=28..N;BYSETPOS=-1 so short
  months clamp to their last day, like the engine does.
- COUNT counts from DTSTART while max_occurrences counts inside the query
  window; both agree when the window opens on or before the start date.
- A monthly day_of_month the start date does not land on starts the rule one
  interval later, where the engine emits its first occurrence.
- COUNT and UNTIL never appear together: with both set, UNTIL becomes the
  earlier of end_date and the last counted occurrence.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Tuple

from dateutil.rrule import (
    rrule, rruleset,
    DAILY as DU_DAILY, WEEKLY as DU_WEEKLY, MONTHLY as DU_MONTHLY, YEARLY as DU_YEARLY,
    MO, TU, WE, TH, FR, SA, SU,
)

from .caldate import add_months, days_in_month, format_date, parse_date
from .rule import DAILY, FREQUENCIES, MONTHLY, WEEKLY, YEARLY, RecurrenceRule

FREQ_MAP: Dict[str, int] = {
    DAILY: DU_DAILY,
    WEEKLY: DU_WEEKLY,
    MONTHLY: DU_MONTHLY,
    YEARLY: DU_YEARLY,
}

# Sunday-based index -> dateutil weekday
IDX_TO_DU = [SU, MO, TU, WE, TH, FR, SA]


def _to_datetime(text: str) -> datetime:
    y, m, d = parse_date(text)
    return datetime(y, m, d)


def _exdate(text: str) -> Optional[datetime]:
    # the engine matches exclusions as canonical text; anything else never applies
    try:
        dt = _to_datetime(text)
    except ValueError:
        return None
    return dt if format_date(dt.year, dt.month, dt.day) == text else None


def _clamped_monthday(day: int) -> Tuple[Tuple[int, ...], Optional[int]]:
    if day <= 28:
        return (day,), None
    return tuple(range(28, day + 1)), -1


def _first_monthly(dtstart: datetime, day_of_month: int, interval: int) -> datetime:
    # the engine only emits the start month when the start date is already on the clamped day
    if dtstart.day == min(day_of_month, days_in_month(dtstart.year, dtstart.month)):
        return dtstart
    y, m, _ = add_months(dtstart.year, dtstart.month, dtstart.day, max(interval, 1))
    return datetime(y, m, min(day_of_month, days_in_month(y, m)))


def to_rrule(rule: RecurrenceRule) -> rrule:
    if rule.frequency not in FREQUENCIES:
        raise ValueError(f"Unsupported frequency: {rule.frequency!r}")
    if rule.max_occurrences == 0:
        raise ValueError("max_occurrences=0 has no RRULE form")

    dtstart = _to_datetime(rule.start_date)
    until = _to_datetime(rule.end_date) if rule.end_date is not None else None

    byweekday = None
    bymonth = None
    bymonthday = None
    bysetpos = None

    if rule.is_weekly_with_days:
        byweekday = [IDX_TO_DU[i] for i in sorted(rule.days_of_week) if 0 <= i <= 6]
        if not byweekday:
            raise ValueError(f"No valid weekday in {sorted(rule.days_of_week)}")
    elif rule.frequency == MONTHLY:
        day = rule.day_of_month if rule.day_of_month is not None else dtstart.day
        bymonthday, bysetpos = _clamped_monthday(day)
        if rule.day_of_month is not None:
            dtstart = _first_monthly(dtstart, rule.day_of_month, rule.interval)
    elif rule.frequency == YEARLY:
        bymonth = dtstart.month
        bymonthday, bysetpos = _clamped_monthday(dtstart.day)

    kw = dict(
        dtstart=dtstart,
        interval=rule.interval,
        wkst=SU,
        bymonth=bymonth,
        bymonthday=bymonthday,
        bysetpos=bysetpos,
        byweekday=byweekday,
    )
    count = rule.max_occurrences
    if count is not None and until is not None:
        last = list(rrule(FREQ_MAP[rule.frequency], count=count, **kw))[-1]
        until, count = min(until, last), None

    return rrule(FREQ_MAP[rule.frequency], count=count, until=until, **kw)


def to_rruleset(rule: RecurrenceRule) -> rruleset:
    rs = rruleset()
    if rule.max_occurrences == 0:
        return rs
    rs.rrule(to_rrule(rule))
    for text in sorted(rule.excluded_dates):
        dt = _exdate(text)
        if dt is not None:
            rs.exdate(dt)
    return rs


def to_rrule_string(rule: RecurrenceRule) -> str:
    return str(to_rrule(rule))
