"""Input predicates and ISO date helpers.

Every function here is total: any input type yields a bool and nothing raises,
so callers can feed raw JSON values straight in.
"""

from __future__ import annotations

import math
import re
from typing import Any

ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# ECMAScript WhiteSpace + LineTerminator. str.strip() with no argument also
# drops the C0 separators U+001C..U+001F and U+0085, which count as content here.
WHITESPACE = (
    "\t\n\v\f\r \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def trim(value: str) -> str:
    return value.strip(WHITESPACE)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(trim(value)) > 0


def is_finite_number(value: Any) -> bool:
    # bool is an int subclass, but JSON true/false are not amounts.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def is_calendar_date(value: Any) -> bool:
    """Return True for a real Gregorian date written as YYYY-MM-DD.

    Out-of-range days are rejected rather than rolled over, so 2024-02-30 is
    invalid instead of being read as March 1st.
    """
    if not isinstance(value, str):
        return False
    match = ISO_DATE_RE.fullmatch(value)
    if not match:
        return False
    year, month, day = (int(part) for part in match.groups())
    if year < 1:
        # no year zero in the Gregorian calendar
        return False
    if not 1 <= month <= 12:
        return False
    if not 1 <= day <= 31:
        return False
    return day <= days_in_month(year, month)


def date_less_or_equal(a: str, b: str) -> bool:
    """Chronological a <= b for two strings already accepted by is_calendar_date."""
    return a <= b


__all__ = [
    "trim",
    "is_non_empty_string",
    "is_finite_number",
    "is_calendar_date",
    "is_leap_year",
    "days_in_month",
    "date_less_or_equal",
]
