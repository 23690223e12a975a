"""
Configuration Loader (``sitecost_config.loader``).

Responsibility
--------------
Loads a dashboard configuration YAML file and parses it into the frozen
``DashboardConfig``.  Runtime callers go through
``sitecost_config.get_active_config()``; the functions here are its
building blocks and are used directly only by tests.

Invariants enforced
-------------------
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed mapping, so reformatting a file without changing a value keeps
  its checksum.
* ``store_path`` is resolved relative to the configuration file.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates (run the validator
  first).
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from sitecost_config.schema import DashboardConfig
from sitecost_kernel.domain.values import to_decimal


def load_yaml_file(path: Path) -> Any:
    """
    Load a single YAML file and return its parsed contents.

    An empty file loads as ``{}``.  Any other top-level type is returned
    as-is for the validator to reject.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _date_string(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def parse_dashboard_config(
    data: dict[str, Any],
    base_dir: Path | None = None,
) -> DashboardConfig:
    """
    Parse a validated mapping into a ``DashboardConfig``.

    Args:
        data: Mapping loaded from YAML.
        base_dir: Directory that a relative ``store_path`` is resolved
            against.  Defaults to the current directory.
    """
    store_path = data.get("store_path")
    if store_path:
        store_path = Path(store_path)
        if not store_path.is_absolute() and base_dir is not None:
            store_path = base_dir / store_path
    else:
        store_path = None

    return DashboardConfig(
        config_id=str(data["config_id"]),
        version=int(data["version"]),
        currency_symbol=data.get("currency_symbol", "R"),
        vat_rate=to_decimal(data.get("vat_rate", "15")),
        default_start_date=_date_string(data.get("default_start_date", "2024-04-01")),
        log_level=str(data.get("log_level", "INFO")).upper(),
        store_path=store_path,
        checksum=compute_checksum(data),
    )
