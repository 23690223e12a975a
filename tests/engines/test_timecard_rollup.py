"""
Tests for the time-card labor-cost rollup engine.

Covers:
- Payroll summary: earned, borrowed, net pay, days worked
- Task cost map and its ordering
- Budget alerts: strict overage, zero-budget exemption, message format
- Invoice summary lines and budget variance
- Windowing: out-of-window entries never affect any output
- Out-of-scope employees and tasks are skipped, not raised
- Idempotence and input immutability
- Engine trace and structured log events
"""

from decimal import Decimal

import pytest

from sitecost_engines.pay_period import generate_pay_period
from sitecost_engines.timecard_rollup import (
    BudgetAlert,
    InvoiceLine,
    PayrollSummary,
    budget_alert_message,
    calculate_time_card_rollup,
)
from sitecost_kernel.exceptions import MalformedDateWindowError
from sitecost_modules.payroll.models import DailyTimeEntry, Employee, EmployeeTimeCard
from sitecost_modules.project.models import Task

WINDOW = generate_pay_period("2024-04-01")

E1 = 1
T1 = 1001


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _employee(employee_id: int = E1, rate: str = "500") -> Employee:
    return Employee(employee_id=employee_id, name=f"Employee {employee_id}", daily_rate=Decimal(rate))


def _task(task_id: int = T1, budget: str = "800", name: str = "Install Main Panel") -> Task:
    return Task(task_id=task_id, job_id=101, name=name, task_budget=Decimal(budget))


def _entry(
    entry_date: str = "2024-04-01",
    worked: bool = True,
    task_id: int | None = T1,
    borrowed: str = "0",
) -> DailyTimeEntry:
    return DailyTimeEntry(date=entry_date, worked=worked, task_id=task_id, borrowed=Decimal(borrowed))


def _card(employee_id: int = E1, *entries: DailyTimeEntry) -> EmployeeTimeCard:
    return EmployeeTimeCard(employee_id=employee_id, entries=entries)


def _rollup(cards, employees=None, tasks=None, window=WINDOW):
    return calculate_time_card_rollup(
        employee_time_cards=cards,
        employees=employees if employees is not None else [_employee()],
        tasks=tasks if tasks is not None else [_task()],
        current_dates=window,
    )


# ===========================================================================
# End-to-end scenario
# ===========================================================================


class TestEndToEndScenario:
    """E1 at 500/day works T1 (budget 800) on two days and borrows 100."""

    @pytest.fixture
    def rollup(self):
        card = _card(
            E1,
            _entry("2024-04-01", borrowed="0"),
            _entry("2024-04-02", borrowed="100"),
        )
        return _rollup([card])

    def test_payroll_summary(self, rollup):
        assert rollup.payroll_summary[E1] == PayrollSummary(
            employee_id=E1,
            total_earned=Decimal("1000"),
            total_borrowed=Decimal("100"),
            net_pay=Decimal("900"),
            total_days_worked=2,
        )

    def test_task_cost(self, rollup):
        task_cost = rollup.task_map[T1]
        assert task_cost.actual_employee_cost == Decimal("1000")
        assert task_cost.total_employee_pay == Decimal("1000")
        assert task_cost.total_days_worked == 2
        assert task_cost.task_budget == Decimal("800")

    def test_one_budget_alert(self, rollup):
        assert rollup.budget_alerts == (
            BudgetAlert(
                task_id=T1,
                task_name="Install Main Panel",
                message="Labor cost is R200.00 over the allocated budget R800.00!",
                overage=Decimal("200"),
                budget=Decimal("800"),
            ),
        )

    def test_one_invoice_line(self, rollup):
        assert rollup.invoice_summary == (
            InvoiceLine(
                task_id=T1,
                task_name="Install Main Panel",
                task_budget=Decimal("800"),
                employee_cost=Decimal("1000"),
                total_days=2,
                budget_variance=Decimal("-200"),
            ),
        )
        assert rollup.invoice_summary[0].is_over_budget


# ===========================================================================
# Payroll
# ===========================================================================


class TestPayroll:

    def test_borrowed_counts_without_work(self):
        card = _card(E1, _entry("2024-04-03", worked=False, task_id=None, borrowed="50"))
        summary = _rollup([card]).payroll_summary[E1]
        assert summary.total_borrowed == Decimal("50")
        assert summary.total_earned == Decimal("0")
        assert summary.total_days_worked == 0
        assert summary.net_pay == Decimal("-50")

    def test_worked_without_task_still_paid(self):
        card = _card(E1, _entry("2024-04-01", task_id=None))
        rollup = _rollup([card])
        assert rollup.payroll_summary[E1].total_earned == Decimal("500")
        assert rollup.task_map[T1].actual_employee_cost == Decimal("0")
        assert rollup.invoice_summary == ()

    def test_card_with_no_window_entries_gets_zero_summary(self):
        card = _card(E1, _entry("2024-05-01"))
        summary = _rollup([card]).payroll_summary[E1]
        assert summary.total_earned == Decimal("0")
        assert summary.total_days_worked == 0

    def test_missing_employee_is_skipped(self):
        card = _card(99, _entry("2024-04-01"))
        rollup = _rollup([card])
        assert 99 not in rollup.payroll_summary
        assert rollup.task_map[T1].actual_employee_cost == Decimal("0")

    def test_employee_without_card_has_no_summary(self):
        rollup = _rollup([], employees=[_employee(E1), _employee(2)])
        assert rollup.payroll_summary == {}

    def test_net_pay_uses_full_precision(self):
        card = _card(
            E1,
            _entry("2024-04-01", borrowed="0.005"),
            _entry("2024-04-02", borrowed="0.005"),
        )
        summary = _rollup([card], employees=[_employee(rate="333.333")]).payroll_summary[E1]
        assert summary.total_earned == Decimal("666.666")
        assert summary.total_borrowed == Decimal("0.010")
        assert summary.net_pay == Decimal("666.656")


# ===========================================================================
# Task map
# ===========================================================================


class TestTaskMap:

    def test_every_task_present_in_input_order(self):
        tasks = [_task(3, name="C"), _task(1, name="A"), _task(2, name="B")]
        rollup = _rollup([], tasks=tasks)
        assert list(rollup.task_map) == [3, 1, 2]
        assert all(tc.actual_employee_cost == 0 for tc in rollup.task_map.values())

    def test_out_of_scope_task_is_skipped(self):
        card = _card(E1, _entry("2024-04-01", task_id=5555))
        rollup = _rollup([card])
        assert 5555 not in rollup.task_map
        assert rollup.payroll_summary[E1].total_earned == Decimal("500")

    def test_costs_accumulate_across_employees(self):
        cards = [
            _card(1, _entry("2024-04-01")),
            _card(2, _entry("2024-04-01"), _entry("2024-04-02")),
        ]
        employees = [_employee(1, "500"), _employee(2, "650")]
        rollup = _rollup(cards, employees=employees, tasks=[_task(budget="5000")])
        assert rollup.task_map[T1].actual_employee_cost == Decimal("1800")
        assert rollup.task_map[T1].total_days_worked == 3


# ===========================================================================
# Budget alerts
# ===========================================================================


class TestBudgetAlerts:

    def test_cost_equal_to_budget_is_not_an_alert(self):
        card = _card(E1, _entry("2024-04-01"))
        rollup = _rollup([card], employees=[_employee(rate="1000")], tasks=[_task(budget="1000")])
        assert rollup.budget_alerts == ()

    def test_one_cent_over_budget_alerts(self):
        card = _card(E1, _entry("2024-04-01"))
        rollup = _rollup([card], employees=[_employee(rate="1000.01")], tasks=[_task(budget="1000")])
        assert len(rollup.budget_alerts) == 1
        alert = rollup.budget_alerts[0]
        assert alert.overage == Decimal("0.01")
        assert alert.message == "Labor cost is R0.01 over the allocated budget R1000.00!"

    def test_zero_budget_never_alerts(self):
        card = _card(E1, _entry("2024-04-01"), _entry("2024-04-02"))
        rollup = _rollup([card], tasks=[_task(budget="0")])
        assert rollup.budget_alerts == ()
        line = rollup.invoice_summary[0]
        assert line.employee_cost == Decimal("1000")
        assert line.budget_variance == Decimal("-1000")

    def test_alert_order_follows_task_order(self):
        card = _card(
            E1,
            _entry("2024-04-01", task_id=2),
            _entry("2024-04-02", task_id=1),
        )
        tasks = [_task(2, budget="100", name="Second"), _task(1, budget="100", name="First")]
        rollup = _rollup([card], tasks=tasks)
        assert [a.task_id for a in rollup.budget_alerts] == [2, 1]

    def test_alert_logged_as_warning(self, captured_logs):
        card = _card(E1, _entry("2024-04-01"), _entry("2024-04-02"))
        _rollup([card])
        alerts = [r for r in captured_logs() if r["message"] == "budget_alert_raised"]
        assert len(alerts) == 1
        assert alerts[0]["level"] == "WARNING"
        assert alerts[0]["task_id"] == T1
        assert alerts[0]["overage"] == "200"


class TestBudgetAlertMessage:

    def test_two_decimal_amounts(self):
        assert budget_alert_message(Decimal("200"), Decimal("800")) == (
            "Labor cost is R200.00 over the allocated budget R800.00!"
        )

    def test_half_up_rounding(self):
        assert budget_alert_message(Decimal("0.005"), Decimal("1")) == (
            "Labor cost is R0.01 over the allocated budget R1.00!"
        )

    def test_currency_symbol(self):
        message = budget_alert_message(Decimal("5"), Decimal("10"), currency_symbol="$")
        assert message == "Labor cost is $5.00 over the allocated budget $10.00!"


# ===========================================================================
# Invoice summary
# ===========================================================================


class TestInvoiceSummary:

    def test_only_tasks_with_cost(self):
        card = _card(E1, _entry("2024-04-01", task_id=1))
        tasks = [_task(1, budget="5000"), _task(2, budget="5000")]
        rollup = _rollup([card], tasks=tasks)
        assert [line.task_id for line in rollup.invoice_summary] == [1]

    def test_under_budget_variance_positive(self):
        card = _card(E1, _entry("2024-04-01"))
        line = _rollup([card], tasks=[_task(budget="5000")]).invoice_summary[0]
        assert line.budget_variance == Decimal("4500")
        assert not line.is_over_budget


# ===========================================================================
# Windowing
# ===========================================================================


class TestWindowing:

    def test_out_of_window_entry_changes_nothing(self):
        base = _card(E1, _entry("2024-04-01"), _entry("2024-04-02", borrowed="100"))
        extended = _card(
            E1,
            _entry("2024-04-01"),
            _entry("2024-04-02", borrowed="100"),
            _entry("2024-04-15", borrowed="999"),
            _entry("2024-03-31", borrowed="999"),
        )
        assert _rollup([base]) == _rollup([extended])

    def test_window_moves_with_start_date(self):
        card = _card(E1, _entry("2024-04-01"), _entry("2024-04-15"))
        later = _rollup([card], window=generate_pay_period("2024-04-15"))
        assert later.payroll_summary[E1].total_days_worked == 1

    def test_empty_window_counts_nothing(self):
        card = _card(E1, _entry("2024-04-01", borrowed="10"))
        summary = _rollup([card], window=()).payroll_summary[E1]
        assert summary.total_borrowed == Decimal("0")
        assert summary.total_days_worked == 0

    def test_malformed_window_raises(self):
        with pytest.raises(MalformedDateWindowError):
            _rollup([], window=["2024-04-01", "April 2"])


# ===========================================================================
# Purity
# ===========================================================================


class TestPurity:

    def test_idempotent(self):
        card = _card(E1, _entry("2024-04-01"), _entry("2024-04-02", borrowed="100"))
        assert _rollup([card]) == _rollup([card])

    def test_inputs_untouched(self):
        card = _card(E1, _entry("2024-04-01"))
        cards = [card]
        employees = [_employee()]
        tasks = [_task()]
        _rollup(cards, employees=employees, tasks=tasks)
        assert cards == [card]
        assert tasks[0].task_budget == Decimal("800")

    def test_accepts_generators(self):
        card = _card(E1, _entry("2024-04-01"))
        rollup = calculate_time_card_rollup(
            employee_time_cards=(c for c in [card]),
            employees=(e for e in [_employee()]),
            tasks=(t for t in [_task()]),
            current_dates=WINDOW,
        )
        assert rollup.payroll_summary[E1].total_earned == Decimal("500")


# ===========================================================================
# Observability
# ===========================================================================


class TestObservability:

    def test_engine_trace_emitted(self, captured_logs):
        _rollup([_card(E1, _entry("2024-04-01"))])
        traces = [r for r in captured_logs() if r["message"] == "SITECOST_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "timecard_rollup"
        assert traces[0]["engine_version"] == "1.0"
        assert len(traces[0]["input_fingerprint"]) == 16

    def test_same_inputs_same_fingerprint(self, captured_logs):
        card = _card(E1, _entry("2024-04-01"))
        _rollup([card])
        _rollup([card])
        fingerprints = [
            r["input_fingerprint"]
            for r in captured_logs()
            if r["message"] == "SITECOST_ENGINE_TRACE"
        ]
        assert len(fingerprints) == 2
        assert fingerprints[0] == fingerprints[1]

    def test_started_and_completed_events(self, captured_logs):
        _rollup([_card(99, _entry("2024-04-01"))])
        logs = captured_logs()
        messages = [r["message"] for r in logs]
        assert "time_card_rollup_started" in messages
        assert "time_card_employee_out_of_scope" in messages
        completed = next(r for r in logs if r["message"] == "time_card_rollup_completed")
        assert completed["skipped_card_count"] == 1
        assert completed["payroll_count"] == 0
