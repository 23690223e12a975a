"""
sitecost_config -- single public entrypoint for dashboard configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files directly.  Returns a frozen ``DashboardConfig``.

Architecture position:
    Configuration -- YAML-driven settings, validated on load.  Sits above
    ``sitecost_kernel`` and is consumed by ``sitecost_modules`` services
    and scripts.  The kernel and the engines MUST NEVER import from
    ``sitecost_config``; configured values reach them as parameters.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation: a configuration with errors is never returned.
    - Deterministic checksum: same YAML values always give the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``InvalidConfigError`` -- validation failed; every error is listed.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``SITECOST_CONFIG_TRACE`` log entry with the config id, version,
    checksum and source path, tying every computed report back to the
    settings that produced it.
"""

from __future__ import annotations

from pathlib import Path

from sitecost_config.loader import load_yaml_file, parse_dashboard_config
from sitecost_config.schema import DashboardConfig
from sitecost_config.validator import validate_configuration
from sitecost_kernel.exceptions import InvalidConfigError
from sitecost_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
_DEFAULT_CONFIG_FILE = _DEFAULT_CONFIG_DIR / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> DashboardConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Configuration file.  Defaults to
            ``sitecost_config/sets/default.yaml``.

    Returns:
        The validated, frozen ``DashboardConfig``.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfigError: If configuration validation fails.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_FILE
    data = load_yaml_file(path)

    validation = validate_configuration(data)
    for warning in validation.warnings:
        _logger.warning("config_validation_warning", extra={
            "config_path": str(path),
            "warning": warning,
        })
    if not validation.is_valid:
        _logger.error("config_validation_failed", extra={
            "config_path": str(path),
            "errors": validation.errors,
        })
        raise InvalidConfigError(tuple(validation.errors))

    config = parse_dashboard_config(data, base_dir=path.parent)

    _logger.info(
        "SITECOST_CONFIG_TRACE",
        extra={
            "trace_type": "SITECOST_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path),
        },
    )
    return config


__all__ = [
    "DashboardConfig",
    "get_active_config",
]
