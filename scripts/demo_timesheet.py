#!/usr/bin/env python3
"""
Timesheet rollup demo over the bundled reference store.

Loads the dashboard configuration and the YAML store, selects a project
and pay period through TimesheetService, and prints the payroll summary,
budget alerts and invoice summary the timesheet page shows, followed by
the project's quoted-versus-actual cost.

Usage:
    python3 scripts/demo_timesheet.py
    python3 scripts/demo_timesheet.py --project 3 --start 2024-07-01
    python3 scripts/demo_timesheet.py --config path/to/config.yaml --log
"""

import argparse
import sys
from pathlib import Path

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 78
AMT_W = 14  # amount column width


def _hdr(title: str, subtitle: str = "") -> str:
    lines = [
        "",
        "=" * W,
        title.center(W),
        subtitle.center(W) if subtitle else "",
        "=" * W,
    ]
    return "\n".join(lines)


def _fmt(v, symbol: str) -> str:
    from sitecost_kernel.domain.values import format_currency

    return format_currency(v, symbol=symbol)


def print_payroll(service, rollup, symbol: str) -> None:
    print(_hdr("EMPLOYEE PAYROLL SUMMARY", service.period_label))
    print(f"  {'Employee':<22}{'Days':>6}{'Earned':>{AMT_W}}{'Borrowed':>{AMT_W}}{'Net Pay':>{AMT_W}}")
    print(f"  {'-' * (22 + 6 + 3 * AMT_W)}")
    shown = 0
    for employee in service.project_employees:
        summary = rollup.payroll_summary.get(employee.employee_id)
        if summary is None or summary.total_days_worked == 0:
            continue
        shown += 1
        print(
            f"  {employee.name:<22}{summary.total_days_worked:>6}"
            f"{_fmt(summary.total_earned, symbol):>{AMT_W}}"
            f"{_fmt(summary.total_borrowed, symbol):>{AMT_W}}"
            f"{_fmt(summary.net_pay, symbol):>{AMT_W}}"
        )
    if not shown:
        print("  No time recorded for any employee in this project and period.")
    print()


def print_alerts(rollup) -> None:
    print(_hdr("BUDGET ALERTS"))
    if not rollup.budget_alerts:
        print("  [OK] All tasks within budget")
    for alert in rollup.budget_alerts:
        print(f"  [OVER] {alert.task_name}: {alert.message}")
    print()


def print_invoice_summary(rollup, symbol: str) -> None:
    print(_hdr("INVOICE SUMMARY"))
    print(f"  {'Task':<26}{'Days':>6}{'Budget':>{AMT_W}}{'Labor':>{AMT_W}}{'Variance':>{AMT_W}}")
    print(f"  {'-' * (26 + 6 + 3 * AMT_W)}")
    total = 0
    for line in rollup.invoice_summary:
        total += line.employee_cost
        print(
            f"  {line.task_name:<26}{line.total_days:>6}"
            f"{_fmt(line.task_budget, symbol):>{AMT_W}}"
            f"{_fmt(line.employee_cost, symbol):>{AMT_W}}"
            f"{_fmt(line.budget_variance, symbol):>{AMT_W}}"
        )
    print()
    print(f"  Total Labor Cost for Invoice: {_fmt(total, symbol)}")
    print()


def print_project_cost(cost, symbol: str) -> None:
    print(_hdr("PROJECT COST"))
    rows = [
        ("Quoted", cost.quoted_cost),
        ("Change orders", cost.change_order_total),
        ("Assigned labor", cost.actual_labor_cost),
        ("Recorded actuals", cost.recorded_actual_cost),
        ("Total actual", cost.total_actual_cost),
        ("Variance vs quote", cost.variance),
    ]
    for label, amount in rows:
        print(f"  {label:<26}{_fmt(amount, symbol):>{AMT_W + 4}}")
    print()


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a project's timesheet rollup.")
    parser.add_argument("--project", type=int, default=1, help="Project id (default: 1)")
    parser.add_argument("--start", help="Pay-period start date, yyyy-MM-dd")
    parser.add_argument("--config", type=Path, help="Configuration YAML file")
    parser.add_argument("--log", action="store_true", help="Emit JSON logs to stderr")
    args = parser.parse_args()

    from sitecost_config import get_active_config
    from sitecost_kernel.exceptions import SiteCostError
    from sitecost_kernel.logging_config import configure_logging
    from sitecost_modules.payroll.service import (
        ChangeStartDate,
        SelectProject,
        TimesheetService,
    )
    from sitecost_modules.project.selectors import project_cost_summary
    from sitecost_modules.reference import load_reference_data

    try:
        config = get_active_config(args.config)
        if args.log:
            configure_logging(level=config.log_level)
        reference = load_reference_data(config.store_path)

        service = TimesheetService(reference, config)
        service.dispatch(SelectProject(project_id=args.project))
        if args.start:
            service.dispatch(ChangeStartDate(start_date=args.start))
        rollup = service.rollup()
        cost = project_cost_summary(
            service.project,
            reference.jobs,
            reference.tasks,
            reference.employees,
            reference.resource_assignments,
            reference.task_actuals,
            reference.change_orders,
        )
    except (SiteCostError, OSError, yaml.YAMLError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    symbol = config.currency_symbol
    print(_hdr(service.project.name.upper(), f"Project {service.project.project_id}"))
    print_payroll(service, rollup, symbol)
    print_alerts(rollup)
    print_invoice_summary(rollup, symbol)
    print_project_cost(cost, symbol)
    return 0


if __name__ == "__main__":
    sys.exit(main())
