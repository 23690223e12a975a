"""
Structured logging for the sitecost packages.

Every logger lives under the ``sitecost`` namespace and, once
``configure_logging()`` has run, writes one JSON object per line:

    {"ts": "...", "level": "INFO", "logger": "sitecost.engines.timecard_rollup",
     "message": "time_card_rollup_completed", "project_id": "1", ...}

Fields passed through ``extra=`` are copied into the object, as are the
session fields held by ``LogContext`` (project, employee, correlation).
Decimals and dates serialize as strings, sets as sorted lists.  When a
record carries an exception, its type, message, ``code`` and public
attributes are added as ``exc_*`` fields.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, TextIO

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

ROOT_LOGGER = "sitecost"


# ---------------------------------------------------------------------------
# Session context
# ---------------------------------------------------------------------------


class LogContext:
    """
    Fields attached to every log line emitted in the current context.

    Values live in ``ContextVar``s, so they follow the thread or task that
    set them.
    """

    FIELDS = ("correlation_id", "actor_id", "project_id", "employee_id", "trace_id")

    _vars: dict[str, ContextVar[str | None]] = {
        name: ContextVar(f"sitecost_log_{name}", default=None) for name in FIELDS
    }

    @classmethod
    def _var(cls, name: str) -> ContextVar[str | None]:
        try:
            return cls._vars[name]
        except KeyError:
            raise TypeError(f"Unknown log context field: {name}") from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set the given fields; ``None`` values leave a field unchanged."""
        for name, value in fields.items():
            var = cls._var(name)
            if value is not None:
                var.set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return {
            name: value
            for name, var in cls._vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type[LogContext]]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens = []
        try:
            for name, value in fields.items():
                var = cls._var(name)
                if value is not None:
                    tokens.append((var, var.set(value)))
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else on a record came from extra=.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_") and name != "code":
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``sitecost.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Send ``sitecost`` logs through a JSON handler.

    Only the first call has an effect; later calls return without touching
    the level or handlers until ``reset_logging()`` runs.  ``level`` may be
    a number or a level name such as ``"debug"``.
    """
    global _installed_handler
    if _installed_handler is not None:
        return

    if isinstance(level, str):
        level = level.upper()
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)
    _installed_handler = handler


def reset_logging() -> None:
    """Remove the handler installed by ``configure_logging()``.  Tests only."""
    global _installed_handler
    root = logging.getLogger(ROOT_LOGGER)
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)
        _installed_handler = None
    root.setLevel(logging.WARNING)
