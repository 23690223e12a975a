"""
Configuration Validator (``sitecost_config.validator``).

Responsibility
--------------
Checks a raw configuration mapping before it is parsed into a
``DashboardConfig``, collecting every problem instead of stopping at the
first one.

Architecture position
---------------------
**Config layer**.  Called by ``get_active_config()`` between loading and
parsing.  Depends only on ``sitecost_kernel`` value helpers.

Invariants enforced
-------------------
* The document is a mapping.
* ``config_id`` is present and ``version`` is an integer.
* ``currency_symbol`` is a non-empty string.
* ``vat_rate`` is a decimal between 0 and 100.
* ``default_start_date`` is a canonical ``yyyy-MM-dd`` date.
* ``log_level`` names a standard logging level.
* ``store_path``, when set, is a string.

Failure modes
-------------
* Validation errors (``ConfigValidationResult.errors``)  -> the
  configuration MUST NOT be used.
* Warnings (unknown keys)  -> the configuration is used but should be
  reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sitecost_kernel.domain.dates import is_canonical_date
from sitecost_kernel.domain.values import to_decimal

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

KNOWN_KEYS = frozenset({
    "config_id",
    "version",
    "currency_symbol",
    "vat_rate",
    "default_start_date",
    "log_level",
    "store_path",
})


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def _validate_vat_rate(value: Any, result: ConfigValidationResult) -> None:
    try:
        rate = to_decimal(value)
    except (ArithmeticError, ValueError, TypeError):
        result.add_error(f"vat_rate is not a number: {value!r}")
        return
    if not Decimal("0") <= rate <= Decimal("100"):
        result.add_error(f"vat_rate must be between 0 and 100, got {rate}")


def _validate_version(value: Any, result: ConfigValidationResult) -> None:
    if isinstance(value, int) and not isinstance(value, bool):
        return
    if isinstance(value, str) and value.strip().isdigit():
        return
    result.add_error(f"version must be an integer, got {value!r}")


def validate_configuration(data: Any) -> ConfigValidationResult:
    """
    Validate a raw configuration mapping.

    Returns:
        ConfigValidationResult listing every error and warning found.
    """
    result = ConfigValidationResult()

    if not isinstance(data, dict):
        result.add_error(
            f"Configuration must be a mapping, got {type(data).__name__}"
        )
        return result

    for key in ("config_id", "version"):
        if data.get(key) in (None, ""):
            result.add_error(f"Missing required key: {key}")

    if data.get("version") not in (None, ""):
        _validate_version(data["version"], result)

    symbol = data.get("currency_symbol", "R")
    if not isinstance(symbol, str) or not symbol.strip():
        result.add_error(f"currency_symbol must be a non-empty string, got {symbol!r}")

    if "vat_rate" in data:
        _validate_vat_rate(data["vat_rate"], result)

    start = data.get("default_start_date", "2024-04-01")
    if not is_canonical_date(str(start)):
        result.add_error(
            f"default_start_date must be a yyyy-MM-dd date, got {start!r}"
        )

    level = data.get("log_level", "INFO")
    if str(level).upper() not in LOG_LEVELS:
        result.add_error(
            f"log_level must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
        )

    store_path = data.get("store_path")
    if store_path is not None and not isinstance(store_path, str):
        result.add_error(f"store_path must be a file path string, got {store_path!r}")

    for key in sorted(set(data) - KNOWN_KEYS):
        result.add_warning(f"Unknown configuration key ignored: {key}")

    return result
