"""
sitecost_modules.payroll.service -- Timesheet state and command dispatch.

Responsibility:
    Own the state behind the timesheet page: the selected project, the
    pay-period start date and the working time-card snapshot.  State only
    changes through commands passed to ``dispatch()``; every change
    replaces a snapshot instead of mutating one.  ``rollup()`` runs the
    pure rollup engine over the project-scoped inputs.

Architecture position:
    Modules -- stateful orchestration over the pure engines.  Reads
    ``ReferenceData`` and ``DashboardConfig``; never touches files itself.

Invariants enforced:
    - Only employees assigned to the selected project and only tasks of
      its jobs reach the engine.
    - Selecting a project re-seeds the snapshot from the stored time
      cards, keeping only entries on that project's tasks.
    - ``rollup()`` is memoized in a single slot keyed on the snapshot and
      window; any command that changes either invalidates it.

Failure modes:
    - UnknownProjectError when selecting a project id not in the store.
    - InvalidDateError when changing to a non-canonical start date.
    - Errors from ``update_entry`` propagate unchanged.

Usage:
    service = TimesheetService(load_reference_data(), get_active_config())
    service.dispatch(SelectProject(project_id=1))
    service.dispatch(UpdateEntry(2, "2024-04-02", "worked", True))
    rollup = service.rollup()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sitecost_config.schema import DashboardConfig
from sitecost_engines.pay_period import generate_pay_period, period_label
from sitecost_engines.timecard_rollup import TimeCardRollup, calculate_time_card_rollup
from sitecost_kernel.domain.dates import format_iso_date, parse_iso_date
from sitecost_kernel.exceptions import UnknownProjectError
from sitecost_kernel.logging_config import LogContext, get_logger
from sitecost_modules.payroll.models import DailyTimeEntry, Employee, TimeCardField
from sitecost_modules.payroll.timecards import (
    TimeCardSnapshot,
    get_entry,
    seed_project_time_cards,
    update_entry,
)
from sitecost_modules.project.models import Project, Task
from sitecost_modules.project.selectors import employees_for_project, tasks_for_project
from sitecost_modules.reference import ReferenceData

logger = get_logger("modules.payroll.service")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectProject:
    """Show the timesheet for another project."""
    project_id: int


@dataclass(frozen=True)
class ChangeStartDate:
    """Move the pay-period window to start on ``start_date``."""
    start_date: str


@dataclass(frozen=True)
class UpdateEntry:
    """Edit one cell of the time-card grid."""
    employee_id: int
    entry_date: str
    field_name: TimeCardField | str
    value: bool | int | Decimal | str | None


TimesheetCommand = SelectProject | ChangeStartDate | UpdateEntry


class TimesheetService:
    """
    Timesheet page state for one user session.

    Starts with no project selected and the configured default start date.
    """

    def __init__(self, reference: ReferenceData, config: DashboardConfig) -> None:
        self._reference = reference
        self._config = config
        self._project: Project | None = None
        self._project_tasks: tuple[Task, ...] = ()
        self._project_employees: tuple[Employee, ...] = ()
        self._time_cards: TimeCardSnapshot = ()
        self._start_date = format_iso_date(parse_iso_date(config.default_start_date))
        self._current_dates = generate_pay_period(self._start_date)
        self._rollup_key: tuple[TimeCardSnapshot, tuple[str, ...]] | None = None
        self._rollup_value: TimeCardRollup | None = None
        self._handlers: dict[type, Callable[[Any], None]] = {
            SelectProject: self._select_project,
            ChangeStartDate: self._change_start_date,
            UpdateEntry: self._update_entry,
        }

    # -- Read side ---------------------------------------------------------

    @property
    def project(self) -> Project | None:
        return self._project

    @property
    def start_date(self) -> str:
        return self._start_date

    @property
    def current_dates(self) -> tuple[str, ...]:
        return self._current_dates

    @property
    def period_label(self) -> str:
        return period_label(self._start_date)

    @property
    def project_tasks(self) -> tuple[Task, ...]:
        return self._project_tasks

    @property
    def project_employees(self) -> tuple[Employee, ...]:
        return self._project_employees

    @property
    def time_cards(self) -> TimeCardSnapshot:
        return self._time_cards

    def entry(self, employee_id: int, entry_date: str) -> DailyTimeEntry:
        """What the grid shows for one employee on one date."""
        return get_entry(self._time_cards, employee_id, entry_date)

    def rollup(self) -> TimeCardRollup:
        """
        Payroll, task costs, alerts and invoice lines for the current window.

        Recomputed only when the snapshot or the window changed since the
        last call.
        """
        key = (self._time_cards, self._current_dates)
        if self._rollup_key == key and self._rollup_value is not None:
            return self._rollup_value

        with LogContext.bind(
            project_id=str(self._project.project_id) if self._project else None,
        ):
            result = calculate_time_card_rollup(
                employee_time_cards=self._time_cards,
                employees=self._project_employees,
                tasks=self._project_tasks,
                current_dates=self._current_dates,
                currency_symbol=self._config.currency_symbol,
            )
        self._rollup_key = key
        self._rollup_value = result
        return result

    # -- Write side --------------------------------------------------------

    def dispatch(self, command: TimesheetCommand) -> None:
        """
        Apply a command to the session state.

        Raises:
            TypeError: If ``command`` is not a timesheet command.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported timesheet command: {command!r}")
        handler(command)
        self._invalidate()

    def _invalidate(self) -> None:
        self._rollup_key = None
        self._rollup_value = None

    def _select_project(self, command: SelectProject) -> None:
        project = self._reference.project(command.project_id)
        if project is None:
            logger.warning("timesheet_unknown_project", extra={
                "project_id": command.project_id,
            })
            raise UnknownProjectError(command.project_id)

        reference = self._reference
        self._project = project
        self._project_tasks = tasks_for_project(
            reference.tasks, reference.jobs, project.project_id,
        )
        self._project_employees = employees_for_project(
            reference.employees, project.project_id,
        )
        self._time_cards = seed_project_time_cards(
            reference.time_cards,
            self._project_employees,
            (t.task_id for t in self._project_tasks),
        )

        logger.info("timesheet_project_selected", extra={
            "project_id": project.project_id,
            "task_count": len(self._project_tasks),
            "employee_count": len(self._project_employees),
        })

    def _change_start_date(self, command: ChangeStartDate) -> None:
        start = format_iso_date(parse_iso_date(command.start_date))
        self._start_date = start
        self._current_dates = generate_pay_period(start)
        logger.info("timesheet_window_changed", extra={
            "window_start": self._current_dates[0],
            "window_end": self._current_dates[-1],
        })

    def _update_entry(self, command: UpdateEntry) -> None:
        self._time_cards = update_entry(
            self._time_cards,
            command.employee_id,
            command.entry_date,
            command.field_name,
            command.value,
        )
