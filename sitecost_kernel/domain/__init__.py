"""
Sitecost Kernel Domain - pure value helpers, zero I/O.

Exports:
- values: Decimal coercion, two-place rounding, currency formatting
- dates: canonical ``yyyy-MM-dd`` parsing and formatting
"""

from sitecost_kernel.domain.dates import (
    format_iso_date,
    is_canonical_date,
    parse_iso_date,
)
from sitecost_kernel.domain.values import (
    MONEY_DECIMAL_PLACES,
    ZERO,
    format_amount,
    format_currency,
    round_money,
    to_decimal,
)

__all__ = [
    "MONEY_DECIMAL_PLACES",
    "ZERO",
    "format_amount",
    "format_currency",
    "format_iso_date",
    "is_canonical_date",
    "parse_iso_date",
    "round_money",
    "to_decimal",
]
