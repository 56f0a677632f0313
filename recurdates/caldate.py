# caldate.py
"""
Calendar arithmetic on plain (year, month, day) tuples.

Public API:
  - parse_date(text) -> (y, m, d) | raises InvalidDateFormat
  - format_date(y, m, d) -> "YYYY-MM-DD"
  - is_leap_year(y), days_in_month(y, m)
  - day_ordinal(y, m, d), day_of_week(y, m, d)
  - add_days(y, m, d, delta), add_months(y, m, d, delta)

Notes:
- Everything here is a pure function; no lookup is cached.
- Weekdays are Sunday-based: 0=Sunday .. 6=Saturday.
"""

from __future__ import annotations

from typing import Tuple

YMD = Tuple[int, int, int]

# 2000-01-01 was a Saturday.
REFERENCE_DATE: YMD = (2000, 1, 1)
REFERENCE_WEEKDAY = 6

_THIRTY_ONE = {1, 3, 5, 7, 8, 10, 12}
_THIRTY = {4, 6, 9, 11}

class InvalidDateFormat(ValueError):
    def __init__(self, text: object, field: str = "") -> None:
        self.text = text
        self.field = field
        where = f" for {field}" if field else ""
        super().__init__(f"Invalid date{where}: {text!r} (expected YYYY-MM-DD)")

def parse_date(text: str) -> YMD:
    if not isinstance(text, str):
        raise InvalidDateFormat(text)
    parts = text.split("-")
    if len(parts) != 3:
        raise InvalidDateFormat(text)
    try:
        y, m, d = (_parse_component(p) for p in parts)
    except ValueError:
        raise InvalidDateFormat(text) from None
    return y, m, d

def _parse_component(part: str) -> int:
    # int() tolerates surrounding whitespace and "_" separators; a date field does not
    if not part or part != part.strip() or "_" in part:
        raise ValueError(part)
    return int(part)

def format_date(y: int, m: int, d: int) -> str:
    return f"{y:04d}-{m:02d}-{d:02d}"

def is_leap_year(y: int) -> bool:
    return (y % 4 == 0 and y % 100 != 0) or y % 400 == 0

def days_in_month(y: int, m: int) -> int:
    if m in _THIRTY_ONE:
        return 31
    if m in _THIRTY:
        return 30
    if m == 2:
        return 29 if is_leap_year(y) else 28
    return 30

def day_ordinal(y: int, m: int, d: int) -> int:
    """Day number suitable for comparison and subtraction.

    January and February count as months 13 and 14 of the previous year, so
    the leap day is always the last day of the notional year.
    """
    a, b = (y - 1, m + 12) if m <= 2 else (y, m)
    return 365 * a + a // 4 - a // 100 + a // 400 + (153 * (b - 3) + 2) // 5 + d

def day_of_week(y: int, m: int, d: int) -> int:
    diff = day_ordinal(y, m, d) - day_ordinal(*REFERENCE_DATE)
    return ((diff % 7) + 7 + REFERENCE_WEEKDAY) % 7

def add_days(y: int, m: int, d: int, delta: int) -> YMD:
    d += delta
    while d > days_in_month(y, m):
        d -= days_in_month(y, m)
        m += 1
        if m > 12:
            m = 1
            y += 1
    while d < 1:
        m -= 1
        if m < 1:
            m = 12
            y -= 1
        d += days_in_month(y, m)
    return y, m, d

def add_months(y: int, m: int, d: int, delta: int) -> YMD:
    new_y, new_m0 = divmod(y * 12 + (m - 1) + delta, 12)
    new_m = new_m0 + 1
    return new_y, new_m, min(d, days_in_month(new_y, new_m))
