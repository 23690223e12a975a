"""
Module: sitecost_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``sitecost_modules`` and for scripts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitecost_kernel and the frozen record types of
    sitecost_modules.  MUST NOT import services.

Invariants enforced:
    - Purity: engines NEVER call ``date.today()``; dates are parameters.
    - Decimal-only arithmetic for money.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every rollup invocation is traced via ``@traced_engine`` (see
    ``sitecost_engines.tracer``), emitting SITECOST_ENGINE_TRACE records
    with engine name, version, input fingerprint and duration.

Usage:
    from sitecost_engines import calculate_time_card_rollup, generate_pay_period
"""

from sitecost_kernel.logging_config import get_logger

logger = get_logger("engines")

from sitecost_engines.pay_period import (
    PAY_PERIOD_DAYS,
    generate_pay_period,
    period_label,
    validate_date_window,
)
from sitecost_engines.timecard_rollup import (
    BudgetAlert,
    InvoiceLine,
    PayrollSummary,
    TaskCost,
    TimeCardRollup,
    budget_alert_message,
    calculate_time_card_rollup,
)

__all__ = [
    # Pay period
    "PAY_PERIOD_DAYS",
    "generate_pay_period",
    "period_label",
    "validate_date_window",
    # Time-card rollup
    "BudgetAlert",
    "InvoiceLine",
    "PayrollSummary",
    "TaskCost",
    "TimeCardRollup",
    "budget_alert_message",
    "calculate_time_card_rollup",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 2,
    "modules": ["pay_period", "timecard_rollup"],
})
