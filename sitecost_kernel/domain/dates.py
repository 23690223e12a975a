"""
Dates -- canonical ``yyyy-MM-dd`` boundary format.

Every date crossing the engine boundary is a plain ISO calendar date string
with no time of day and no offset.  Arithmetic happens on ``datetime.date``
(calendar-day addition) and is formatted back on the way out.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from sitecost_kernel.exceptions import InvalidDateError

_CANONICAL_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def is_canonical_date(value: object) -> bool:
    """True when ``value`` is a ``yyyy-MM-dd`` string naming a real day."""
    if not isinstance(value, str) or not _CANONICAL_DATE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_iso_date(value: date | str) -> date:
    """
    Parse a boundary date.

    Accepts a ``date`` (returned as-is) or a canonical string.  Looser ISO
    spellings such as ``20240401`` or ``2024-04-01T00:00`` are rejected.

    Raises:
        InvalidDateError: If the value is not a canonical date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not is_canonical_date(value):
        raise InvalidDateError(value)
    return date.fromisoformat(value)


def format_iso_date(value: date) -> str:
    """Format a ``date`` as ``yyyy-MM-dd``."""
    return value.isoformat()
