"""Lenient parsing of user-entered dates and numbers.

Records keep whatever text the user typed. Consumers that need numbers
parse here and skip what does not parse.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional

from dateutil import parser as dateparser

# Tried in order before falling back to dateutil. %m/%d accept unpadded values.
DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d",
    "%Y/%m/%d",
)

_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a record date.

    Args:
        text: Date as stored, e.g. "2025-01-31" or "1/31/2025"

    Returns:
        The date, or None if it cannot be parsed

    Example:
        >>> parse_date("1/5/2025")
        datetime.date(2025, 1, 5)
        >>> parse_date("not a date") is None
        True
    """
    if text is None or not text.strip():
        return None
    s = text.strip()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    # Parse twice with different defaults; a field that differs was not in the
    # text. Bare numbers like "180.4" or "5" would otherwise become dates.
    try:
        first = dateparser.parse(s, default=_DEFAULT_A)
        second = dateparser.parse(s, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date()


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse a weight or calorie value.

    Comma thousands separators are tolerated. Underscores, NaN and
    infinities are rejected.

    Returns:
        The value, or None if it cannot be parsed
    """
    if text is None or not text.strip():
        return None
    s = text.strip()
    if "_" in s:
        return None
    try:
        value = float(s)
    except ValueError:
        try:
            value = float(s.replace(",", ""))
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value
