"""
Values -- Decimal money helpers for all cost and payroll arithmetic.

Responsibility:
    Coerces raw store values into ``Decimal``, rounds for display and
    formats currency strings.  Aggregation code keeps full precision and
    only rounds at the presentation edge through ``round_money``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by models, engines and billing.  No outward dependencies.

Invariants enforced:
    - Money amounts are ``Decimal``; floats are converted through ``str`` so
      ``125000.5`` becomes ``Decimal("125000.5")`` and not its binary
      expansion.
    - ``round_money`` is the only sanctioned rounding function
      (ROUND_HALF_UP, two places by default).

Failure modes:
    - ValueError from ``to_decimal`` for values that are not numbers
      (including booleans, NaN and infinities).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP
ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """
    Coerce a raw amount into a ``Decimal``.

    Preconditions: value is a Decimal, int, float, numeric string or None.
    Postconditions: Returns a finite Decimal.  None maps to zero (an unset
        rate or budget reads as zero).

    Raises:
        ValueError: If the value is not a finite number.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to ``decimal_places``.

    Only used when a value leaves the engine for display; accumulators are
    never rounded.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def format_amount(value: Decimal) -> str:
    """Two-decimal plain string, e.g. ``Decimal("200")`` -> ``"200.00"``."""
    return f"{round_money(value):f}"


def format_currency(
    value: Decimal,
    symbol: str = "R",
    thousands_separator: str = ",",
) -> str:
    """
    Display string with symbol and digit grouping, e.g. ``R 1,234.50``.

    Negative amounts keep the sign after the symbol: ``R -200.00``.
    """
    grouped = f"{round_money(value):,.2f}"
    if thousands_separator != ",":
        grouped = grouped.replace(",", thousands_separator)
    return f"{symbol} {grouped}"
