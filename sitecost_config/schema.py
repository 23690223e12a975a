"""
DashboardConfig schema.

The frozen runtime configuration handed to the timesheet service, the
billing builders and the demo script.  YAML files are parsed into this
type by the loader after the validator has accepted them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path


@dataclass(frozen=True)
class DashboardConfig:
    """Resolved dashboard settings."""

    config_id: str
    version: int
    currency_symbol: str = "R"
    vat_rate: Decimal = Decimal("15")
    default_start_date: str = "2024-04-01"
    log_level: str = "INFO"
    store_path: Path | None = None  # None: bundled demo store
    checksum: str = ""
