# en.py
"""
EN -> RecurrenceRule (parser only)

Public API:
  - parse_rule(text) -> RecurrenceRule

Grammar (best-effort, case-insensitive):
  every [N] day(s)|week(s)|month(s)|year(s) [on <weekdays> | on the <Nth> | on day <N>]
  every weekday | every weekend
  ... from YYYY-MM-DD [until YYYY-MM-DD] [for N times] [except YYYY-MM-DD, ...]

Notes:
- Suffix clauses may come in any order.
- Weekday indices are Sunday-based (sunday=0 .. saturday=6).
"""

from __future__ import annotations

import re
from typing import List, Optional

from .caldate import format_date, parse_date
from .rule import (
    DAILY, MONTHLY, WEEKLY, YEARLY,
    SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY,
    RecurrenceRule,
)

_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")
_DATE_TOKEN = r"(\d{4}-\d{2}-\d{2})"

WEEKDAY_MAP = {
    "sunday": SUNDAY,
    "monday": MONDAY,
    "tuesday": TUESDAY,
    "wednesday": WEDNESDAY,
    "thursday": THURSDAY,
    "friday": FRIDAY,
    "saturday": SATURDAY,
}
WEEKDAYS = set(WEEKDAY_MAP.keys())

UNIT_TO_FREQ = {
    "day": DAILY, "days": DAILY,
    "week": WEEKLY, "weeks": WEEKLY,
    "month": MONTHLY, "months": MONTHLY,
    "year": YEARLY, "years": YEARLY,
}

def parse_date_token(s: str) -> str:
    """Canonical YYYY-MM-DD text, so exclusions match the engine's output."""
    if not _DATE_RE.match(s):
        raise ValueError(f"Invalid date: {s!r} (expected YYYY-MM-DD)")
    return format_date(*parse_date(s.strip()))

def parse_weekday_list(text: str) -> List[int]:
    t = text.strip().lower().replace(",", " ")
    words = [w.rstrip("s") if w.rstrip("s") in WEEKDAYS else w for w in t.split() if w != "and"]
    if not words or not all(w in WEEKDAYS for w in words):
        raise ValueError(f"Invalid weekday list: {text!r}")
    return [WEEKDAY_MAP[w] for w in words]

# ------------------ EN -> RecurrenceRule parsing ------------------

def parse_rule(text: str) -> RecurrenceRule:
    s_lower = " ".join(text.strip().split()).lower()

    start: Optional[str] = None
    until: Optional[str] = None
    count: Optional[int] = None
    excluded: List[str] = []

    # ---- strip suffixes in ANY order (loop until nothing changes) ----
    while True:
        changed = False

        m = re.search(r"\s+except\s+(.+)$", s_lower)
        if m and all(_DATE_RE.match(tok) for tok in _except_tokens(m.group(1))):
            for tok in _except_tokens(m.group(1)):
                d = parse_date_token(tok)
                if d not in excluded:
                    excluded.append(d)
            s_lower = s_lower[: m.start()].strip()
            changed = True

        m = re.search(r"\s+for\s+(\d+)\s+(?:times|occurrences)\s*$", s_lower)
        if m:
            count = int(m.group(1))
            s_lower = s_lower[: m.start()].strip()
            changed = True

        m = re.search(r"\s+until\s+" + _DATE_TOKEN + r"\s*$", s_lower)
        if m:
            until = parse_date_token(m.group(1))
            s_lower = s_lower[: m.start()].strip()
            changed = True

        m = re.search(r"\s+(?:from|starting)\s+" + _DATE_TOKEN + r"\s*$", s_lower)
        if m:
            start = parse_date_token(m.group(1))
            s_lower = s_lower[: m.start()].strip()
            changed = True

        if not changed:
            break

    if start is None:
        raise ValueError(f"Missing start date ('from YYYY-MM-DD'): {text!r}")

    def build(freq: str, interval: int = 1, days=(), day_of_month: Optional[int] = None) -> RecurrenceRule:
        return RecurrenceRule(
            frequency=freq,
            interval=interval,
            start_date=start,
            end_date=until,
            max_occurrences=count,
            excluded_dates=frozenset(excluded),
            days_of_week=frozenset(days),
            day_of_month=day_of_month,
        )

    # ---- every weekday / every weekend ----
    if s_lower == "every weekday":
        return build(WEEKLY, days=[MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY])
    if s_lower == "every weekend":
        return build(WEEKLY, days=[SUNDAY, SATURDAY])

    # ---- every <weekday list> ----
    m = re.fullmatch(r"every\s+(.+)", s_lower)
    if m and re.split(r"[,\s]+", m.group(1))[0].rstrip("s") in WEEKDAYS:
        return build(WEEKLY, days=parse_weekday_list(m.group(1)))

    # ---- every [N] <unit> [on ...] ----
    m = re.fullmatch(r"every\s+(?:(\d+)\s+)?(days?|weeks?|months?|years?)(?:\s+on\s+(.+))?", s_lower)
    if not m:
        raise ValueError(f"Unsupported rule: {text!r}")

    n = int(m.group(1) or 1)
    freq = UNIT_TO_FREQ[m.group(2)]
    on_part = (m.group(3) or "").strip()

    if not on_part:
        return build(freq, interval=n)

    if freq == WEEKLY:
        return build(freq, interval=n, days=parse_weekday_list(on_part))

    if freq == MONTHLY:
        m2 = re.fullmatch(r"(?:the\s+(\d{1,2})(?:st|nd|rd|th)?|day\s+(\d{1,2}))", on_part)
        if m2:
            dom = int(m2.group(1) or m2.group(2))
            if 1 <= dom <= 31:
                return build(freq, interval=n, day_of_month=dom)

    raise ValueError(f"Unsupported rule: {text!r}")

def _except_tokens(ex_text: str) -> List[str]:
    return [t for t in re.split(r"[,\s]+", ex_text.strip()) if t and t != "and"]
