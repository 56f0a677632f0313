# engine.py
"""
Rule -> engine (occurrence expansion)

Depends on:
  - caldate.py (calendar arithmetic)
  - rule.py (RecurrenceRule, QueryWindow)

Public API:
  - expand(rule, window) -> list[str]           # malformed dates => []
  - expand_strict(rule, window) -> list[str]    # malformed dates => raises InvalidDateFormat
  - validate(rule, window) -> None | raises InvalidDateFormat
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from .caldate import (
    YMD,
    InvalidDateFormat,
    add_days,
    add_months,
    day_of_week,
    day_ordinal,
    days_in_month,
    format_date,
    parse_date,
)
from .rule import DAILY, MONTHLY, WEEKLY, YEARLY, QueryWindow, RecurrenceRule

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class _Bounds:
    start: YMD
    range_start: int
    range_end: int
    rule_end: Optional[int]
    limit: Optional[int]
    excluded: FrozenSet[str]

    def past_end(self, ordinal: int) -> bool:
        if ordinal > self.range_end:
            return True
        return self.rule_end is not None and ordinal > self.rule_end

    def full(self, out: List[str]) -> bool:
        return self.limit is not None and len(out) >= self.limit

def _parse_field(text: str, name: str) -> YMD:
    try:
        return parse_date(text)
    except InvalidDateFormat as e:
        raise InvalidDateFormat(e.text, field=name) from None

def _bounds(rule: RecurrenceRule, window: QueryWindow) -> _Bounds:
    start = _parse_field(rule.start_date, "start_date")
    rs = _parse_field(window.range_start, "range_start")
    re_ = _parse_field(window.range_end, "range_end")
    rule_end = None
    if rule.end_date is not None:
        rule_end = day_ordinal(*_parse_field(rule.end_date, "end_date"))
    return _Bounds(
        start=start,
        range_start=day_ordinal(*rs),
        range_end=day_ordinal(*re_),
        rule_end=rule_end,
        limit=rule.max_occurrences,
        excluded=rule.excluded_dates,
    )

def validate(rule: RecurrenceRule, window: QueryWindow) -> None:
    _bounds(rule, window)

# ------------------ weekly day-scan ------------------

def _expand_weekdays(rule: RecurrenceRule, b: _Bounds) -> List[str]:
    out: List[str] = []
    start_ord = day_ordinal(*b.start)
    step = max(rule.interval, 1) * 7

    # weeks run Sunday..Saturday, aligned on the start date's own week
    anchor = add_days(*b.start, -day_of_week(*b.start))
    while True:
        for offset in range(7):
            cand = add_days(*anchor, offset)
            dn = day_ordinal(*cand)
            if dn < start_ord:
                continue
            if b.past_end(dn) or b.full(out):
                return out
            if dn >= b.range_start and offset in rule.days_of_week:
                s = format_date(*cand)
                if s not in b.excluded:
                    out.append(s)
        anchor = add_days(*anchor, step)

# ------------------ single-date stepping ------------------

def _included(rule: RecurrenceRule, cur: YMD) -> bool:
    if rule.frequency == MONTHLY and rule.day_of_month is not None:
        y, m, d = cur
        return d == min(rule.day_of_month, days_in_month(y, m))
    return True

def _advance(rule: RecurrenceRule, cur: YMD, original_day: int) -> Optional[YMD]:
    interval = max(rule.interval, 1)
    if rule.frequency == DAILY:
        return add_days(*cur, interval)
    if rule.frequency == WEEKLY:
        return add_days(*cur, interval * 7)
    if rule.frequency == MONTHLY:
        target = rule.day_of_month if rule.day_of_month is not None else original_day
        y, m, _ = add_months(*cur, interval)
        return y, m, min(target, days_in_month(y, m))
    if rule.frequency == YEARLY:
        # re-clamp from the original day so a Feb 29 anchor comes back on leap years
        y, m, _ = add_months(*cur, interval * 12)
        return y, m, min(original_day, days_in_month(y, m))
    return None

def _expand_stepping(rule: RecurrenceRule, b: _Bounds) -> List[str]:
    out: List[str] = []
    original_day = b.start[2]
    cur: Optional[YMD] = b.start

    while cur is not None:
        dn = day_ordinal(*cur)
        if b.past_end(dn) or b.full(out):
            break
        if dn >= b.range_start and _included(rule, cur):
            s = format_date(*cur)
            if s not in b.excluded:
                out.append(s)
        cur = _advance(rule, cur, original_day)

    return out

# ------------------ entry points ------------------

def expand_strict(rule: RecurrenceRule, window: QueryWindow) -> List[str]:
    b = _bounds(rule, window)
    if rule.is_weekly_with_days:
        out = _expand_weekdays(rule, b)
        mode = "weekday-scan"
    else:
        out = _expand_stepping(rule, b)
        mode = "stepping"
    logger.debug("Expanded %s rule from %s (%s): %d occurrence(s)",
                 rule.frequency, rule.start_date, mode, len(out))
    return out

def expand(rule: RecurrenceRule, window: QueryWindow) -> List[str]:
    try:
        return expand_strict(rule, window)
    except InvalidDateFormat as e:
        logger.debug("No occurrences: %s", e)
        return []
