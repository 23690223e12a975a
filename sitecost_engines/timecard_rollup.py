"""
sitecost_engines.timecard_rollup -- Payroll and task labor-cost rollup.

Responsibility:
    Given employee time cards, the employees and tasks in scope and the
    active pay-period window, compute:

    * a payroll summary per employee (earned, borrowed, net, days worked),
    * a task cost map (each task enriched with its accrued labor cost),
    * budget alerts for tasks whose labor cost exceeds their budget,
    * invoice summary lines for tasks that accrued any labor cost.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports the frozen record types from ``sitecost_modules`` (data only)
    and value helpers from ``sitecost_kernel``.

Invariants enforced:
    - Windowing: entries dated outside ``current_dates`` never affect any
      output, although they stay on the time card.
    - Borrowed amounts accumulate whether or not the day was worked.
    - Full-precision Decimal accumulation; rounding happens only when the
      alert message is formatted.
    - A budget alert needs ``cost > budget`` AND ``budget > 0``; a cost
      exactly equal to the budget is not an alert.
    - Task iteration order (task map, alerts, invoice lines) follows the
      order of the ``tasks`` argument.
    - Inputs are never mutated; identical inputs give deep-equal outputs.

Failure modes:
    - MalformedDateWindowError if ``current_dates`` holds a non-canonical
      date string.  This is the only error the engine raises.
    - Time cards for employees not in ``employees`` are skipped silently,
      as are entries referencing tasks not in ``tasks``: the rollup is a
      best-effort report over possibly stale references.

Usage:
    from sitecost_engines.pay_period import generate_pay_period
    from sitecost_engines.timecard_rollup import calculate_time_card_rollup

    rollup = calculate_time_card_rollup(
        employee_time_cards=cards,
        employees=project_employees,
        tasks=project_tasks,
        current_dates=generate_pay_period("2024-04-01"),
    )
    rollup.payroll_summary[employee_id].net_pay
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from sitecost_engines.pay_period import validate_date_window
from sitecost_engines.tracer import traced_engine
from sitecost_kernel.domain.values import ZERO, format_amount
from sitecost_kernel.logging_config import get_logger
from sitecost_modules.payroll.models import Employee, EmployeeTimeCard
from sitecost_modules.project.models import Task

logger = get_logger("engines.timecard_rollup")


@dataclass(frozen=True)
class PayrollSummary:
    """Pay for one employee over the active window."""

    employee_id: int
    total_earned: Decimal
    total_borrowed: Decimal
    net_pay: Decimal
    total_days_worked: int


@dataclass(frozen=True)
class TaskCost:
    """
    A task enriched with the labor cost it accrued in the window.

    ``total_employee_pay`` tracks the same sum as ``actual_employee_cost``
    today; they are reported separately so a future burden or markup can
    be applied to cost without touching pay.
    """

    task: Task
    actual_employee_cost: Decimal = ZERO
    total_days_worked: int = 0
    total_employee_pay: Decimal = ZERO

    @property
    def task_id(self) -> int:
        return self.task.task_id

    @property
    def task_name(self) -> str:
        return self.task.name

    @property
    def task_budget(self) -> Decimal:
        return self.task.task_budget


@dataclass(frozen=True)
class BudgetAlert:
    """Raised for a budgeted task whose labor cost exceeds its budget."""

    task_id: int
    task_name: str
    message: str
    overage: Decimal
    budget: Decimal


@dataclass(frozen=True)
class InvoiceLine:
    """Per-task labor rollup eligible for client billing."""

    task_id: int
    task_name: str
    task_budget: Decimal
    employee_cost: Decimal
    total_days: int
    budget_variance: Decimal

    @property
    def is_over_budget(self) -> bool:
        return self.budget_variance < 0


@dataclass(frozen=True)
class TimeCardRollup:
    """The four aggregate outputs handed to the presentation layer."""

    payroll_summary: dict[int, PayrollSummary]
    task_map: dict[int, TaskCost]
    budget_alerts: tuple[BudgetAlert, ...]
    invoice_summary: tuple[InvoiceLine, ...]


@dataclass
class _TaskAccumulator:
    """Mutable running totals for one task; private to a single rollup."""

    task: Task
    actual_employee_cost: Decimal = ZERO
    total_days_worked: int = 0
    total_employee_pay: Decimal = ZERO

    def freeze(self) -> TaskCost:
        return TaskCost(
            task=self.task,
            actual_employee_cost=self.actual_employee_cost,
            total_days_worked=self.total_days_worked,
            total_employee_pay=self.total_employee_pay,
        )


def budget_alert_message(
    overage: Decimal,
    budget: Decimal,
    currency_symbol: str = "R",
) -> str:
    """Alert text with two-decimal amounts, e.g. ``... R200.00 over ... R800.00!``."""
    return (
        f"Labor cost is {currency_symbol}{format_amount(overage)} over the "
        f"allocated budget {currency_symbol}{format_amount(budget)}!"
    )


@traced_engine(
    "timecard_rollup",
    "1.0",
    fingerprint_fields=("employee_time_cards", "employees", "tasks", "current_dates"),
)
def calculate_time_card_rollup(
    employee_time_cards: Iterable[EmployeeTimeCard],
    employees: Iterable[Employee],
    tasks: Iterable[Task],
    current_dates: Sequence[str],
    currency_symbol: str = "R",
) -> TimeCardRollup:
    """
    Compute payroll, task costs, budget alerts and invoice lines for a window.

    Preconditions:
        ``employees`` and ``tasks`` are already narrowed by the caller to the
        project in view; the engine does not filter by project.
        ``current_dates`` is the window from ``generate_pay_period``.

    Postconditions:
        Every time card whose employee resolves gets a payroll summary, even
        when none of its entries fall in the window (all zeros).
        ``task_map`` holds every task in ``tasks``, in order, with zeroed
        totals for tasks nobody worked on.

    Args:
        employee_time_cards: Time cards, possibly including employees and
            entries outside the current scope.
        employees: Employees in scope.
        tasks: Tasks in scope.
        current_dates: Active window as canonical ``yyyy-MM-dd`` strings.
        currency_symbol: Prefix used in alert messages.

    Returns:
        TimeCardRollup with payroll_summary, task_map, budget_alerts and
        invoice_summary.

    Raises:
        MalformedDateWindowError: If ``current_dates`` is malformed.
    """
    t0 = time.monotonic()
    date_set = validate_date_window(current_dates)

    employee_map = {e.employee_id: e for e in employees}
    task_accumulators = {t.task_id: _TaskAccumulator(task=t) for t in tasks}

    logger.info("time_card_rollup_started", extra={
        "employee_count": len(employee_map),
        "task_count": len(task_accumulators),
        "window_start": min(date_set) if date_set else None,
        "window_end": max(date_set) if date_set else None,
    })

    payroll_summary: dict[int, PayrollSummary] = {}
    skipped_cards = 0

    for card in employee_time_cards:
        employee = employee_map.get(card.employee_id)
        if employee is None:
            skipped_cards += 1
            logger.debug("time_card_employee_out_of_scope", extra={
                "employee_id": card.employee_id,
            })
            continue

        rate = employee.daily_rate
        total_earned = ZERO
        total_borrowed = ZERO
        total_days_worked = 0

        for entry in card.entries:
            if entry.date not in date_set:
                continue

            # Advances are independent of attendance.
            total_borrowed += entry.borrowed

            if not entry.worked:
                continue

            total_earned += rate
            total_days_worked += 1

            if entry.task_id is None:
                continue
            accumulator = task_accumulators.get(entry.task_id)
            if accumulator is None:
                logger.debug("time_entry_task_out_of_scope", extra={
                    "employee_id": card.employee_id,
                    "task_id": entry.task_id,
                    "entry_date": entry.date,
                })
                continue
            accumulator.actual_employee_cost += rate
            accumulator.total_employee_pay += rate
            accumulator.total_days_worked += 1

        payroll_summary[card.employee_id] = PayrollSummary(
            employee_id=card.employee_id,
            total_earned=total_earned,
            total_borrowed=total_borrowed,
            net_pay=total_earned - total_borrowed,
            total_days_worked=total_days_worked,
        )

    task_map: dict[int, TaskCost] = {}
    budget_alerts: list[BudgetAlert] = []
    invoice_summary: list[InvoiceLine] = []

    for task_id, accumulator in task_accumulators.items():
        task_cost = accumulator.freeze()
        task_map[task_id] = task_cost

        budget = task_cost.task_budget
        cost = task_cost.actual_employee_cost

        if cost > budget and budget > 0:
            overage = cost - budget
            budget_alerts.append(BudgetAlert(
                task_id=task_id,
                task_name=task_cost.task_name,
                message=budget_alert_message(overage, budget, currency_symbol),
                overage=overage,
                budget=budget,
            ))
            logger.warning("budget_alert_raised", extra={
                "task_id": task_id,
                "task_budget": str(budget),
                "labor_cost": str(cost),
                "overage": str(overage),
            })

        if cost > 0:
            invoice_summary.append(InvoiceLine(
                task_id=task_id,
                task_name=task_cost.task_name,
                task_budget=budget,
                employee_cost=cost,
                total_days=task_cost.total_days_worked,
                budget_variance=budget - cost,
            ))

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("time_card_rollup_completed", extra={
        "payroll_count": len(payroll_summary),
        "skipped_card_count": skipped_cards,
        "budget_alert_count": len(budget_alerts),
        "invoice_line_count": len(invoice_summary),
        "duration_ms": duration_ms,
    })

    return TimeCardRollup(
        payroll_summary=payroll_summary,
        task_map=task_map,
        budget_alerts=tuple(budget_alerts),
        invoice_summary=tuple(invoice_summary),
    )
