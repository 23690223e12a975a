"""
sitecost_engines.pay_period -- Bi-weekly pay-period window generation.

Responsibility:
    Produce the ordered calendar dates of a pay period from its start date,
    validate a caller-supplied window, and render the period header label.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitecost_kernel.

Invariants enforced:
    - A period is exactly ``PAY_PERIOD_DAYS`` consecutive calendar dates,
      ``result[i] == start + i days``.
    - Arithmetic is calendar-day addition on ``datetime.date``; there is no
      wall clock and no timezone involved.
    - Output dates are canonical ``yyyy-MM-dd`` strings.
    - Purity: identical inputs give identical outputs.

Failure modes:
    - InvalidDateError if the start date is not a canonical date.
    - MalformedDateWindowError from ``validate_date_window`` when any window
      element is not a canonical date string.
"""

from __future__ import annotations

from datetime import date, timedelta

from sitecost_kernel.domain.dates import (
    format_iso_date,
    is_canonical_date,
    parse_iso_date,
)
from sitecost_kernel.exceptions import MalformedDateWindowError
from sitecost_kernel.logging_config import get_logger

logger = get_logger("engines.pay_period")

PAY_PERIOD_DAYS = 14


def generate_pay_period(start_date: date | str) -> tuple[str, ...]:
    """
    Return the 14 ISO dates of the pay period starting at ``start_date``.

    Args:
        start_date: First day of the period (inclusive), as a ``date`` or a
            canonical ``yyyy-MM-dd`` string.

    Returns:
        Tuple of ``PAY_PERIOD_DAYS`` date strings, start first.

    Raises:
        InvalidDateError: If ``start_date`` is not a canonical date.
    """
    start = parse_iso_date(start_date)
    return tuple(
        format_iso_date(start + timedelta(days=offset))
        for offset in range(PAY_PERIOD_DAYS)
    )


def validate_date_window(current_dates: tuple[str, ...] | list[str]) -> frozenset[str]:
    """
    Check a window supplied by a caller and return it as a membership set.

    A malformed window is a caller programming error, not data drift, so it
    fails loudly.

    Raises:
        MalformedDateWindowError: Listing every non-canonical element.
    """
    invalid = tuple(d for d in current_dates if not is_canonical_date(d))
    if invalid:
        logger.error("date_window_malformed", extra={
            "invalid_values": [repr(v) for v in invalid],
            "window_size": len(current_dates),
        })
        raise MalformedDateWindowError(invalid)
    return frozenset(current_dates)


def period_label(start_date: date | str) -> str:
    """Header text for a period, e.g. ``"Apr 01 - Apr 14, 2024"``."""
    start = parse_iso_date(start_date)
    end = start + timedelta(days=PAY_PERIOD_DAYS - 1)
    return f"{start.strftime('%b %d')} - {end.strftime('%b %d, %Y')}"
