"""
Project Domain Models (``sitecost_modules.project.models``).

Responsibility
--------------
Frozen dataclass value objects for the construction hierarchy (clients,
projects, jobs and tasks) and the cost records hung off it (change orders,
task actuals and resource assignments).  A project contains jobs, a job
contains tasks, and a task is the unit that accrues employee labor cost.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
``timecard_rollup`` engine, the project selectors and billing.  Records are
validated here, at the data-store boundary, so the engine can trust field
types.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``Task.task_progress`` is an integer percentage in 0..100.
* A task budget of zero means "no budget constraint".

Failure modes
-------------
* Negative budgets, quoted costs, task actuals or assigned hours raise
  ``ValueError``.
* Progress outside 0..100 raises ``ValueError``.
* Unknown status strings raise ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from sitecost_kernel.domain.values import ZERO, to_decimal


class ProjectStatus(str, Enum):
    """Project lifecycle states shown on the dashboard."""
    ACTIVE = "Active"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    NOT_STARTED = "Not Started"

    @classmethod
    def parse(cls, value: ProjectStatus | str) -> ProjectStatus:
        """Parse a status case-insensitively ("Not started" is accepted)."""
        if isinstance(value, ProjectStatus):
            return value
        normalized = " ".join(str(value).split()).lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        raise ValueError(f"Unknown project status: {value!r}")

    @property
    def is_open(self) -> bool:
        """Active and In Progress projects count as open work."""
        return self in (ProjectStatus.ACTIVE, ProjectStatus.IN_PROGRESS)


@dataclass(frozen=True)
class Client:
    """A client that projects are quoted and invoiced to."""
    client_id: int
    name: str
    address: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Project:
    """A construction project quoted to a client."""
    project_id: int
    name: str
    status: ProjectStatus = ProjectStatus.NOT_STARTED
    client_id: int | None = None
    quoted_cost: Decimal = ZERO
    quote_date: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "status", ProjectStatus.parse(self.status))
        object.__setattr__(self, "quoted_cost", to_decimal(self.quoted_cost))
        if self.quoted_cost < 0:
            raise ValueError("quoted_cost cannot be negative")


@dataclass(frozen=True)
class Job:
    """A phase of work within a project; owns zero or more tasks."""
    job_id: int
    project_id: int
    name: str
    job_budget: Decimal = ZERO
    start_date: str | None = None
    end_date: str | None = None
    status: str = "Not Started"

    def __post_init__(self):
        object.__setattr__(self, "job_budget", to_decimal(self.job_budget))
        if self.job_budget < 0:
            raise ValueError("job_budget cannot be negative")


@dataclass(frozen=True)
class Task:
    """
    A unit of work within a job.

    ``task_budget`` is the labor-cost ceiling used for budget alerts;
    zero (or unset) disables alerting for the task.
    """
    task_id: int
    job_id: int
    name: str
    task_budget: Decimal = ZERO
    task_progress: int = 0
    status: str = "Not Started"
    quotation_ref: str | None = None
    invoice_refs: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "task_budget", to_decimal(self.task_budget))
        object.__setattr__(self, "invoice_refs", tuple(self.invoice_refs))
        if self.task_budget < 0:
            raise ValueError("task_budget cannot be negative")
        if isinstance(self.task_progress, bool) or not isinstance(self.task_progress, int):
            raise ValueError(f"task_progress must be an integer, got {self.task_progress!r}")
        if not 0 <= self.task_progress <= 100:
            raise ValueError(
                f"task_progress must be between 0 and 100, got {self.task_progress}"
            )

    @property
    def has_budget(self) -> bool:
        return self.task_budget > 0

    @property
    def is_complete(self) -> bool:
        return self.task_progress == 100


@dataclass(frozen=True)
class ChangeOrder:
    """A client-approved change that adjusts the quoted cost of a project."""
    change_order_id: int
    project_id: int
    description: str
    cost_adjustment: Decimal = ZERO
    date: str | None = None

    def __post_init__(self):
        # Credits are allowed: a change order may reduce scope.
        object.__setattr__(self, "cost_adjustment", to_decimal(self.cost_adjustment))


@dataclass(frozen=True)
class TaskActual:
    """A recorded cost against a task (materials, hire, subcontract)."""
    actual_id: int
    task_id: int
    cost: Decimal
    date: str | None = None
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "cost", to_decimal(self.cost))
        if self.cost < 0:
            raise ValueError("cost cannot be negative")


@dataclass(frozen=True)
class ResourceAssignment:
    """
    An employee planned onto a task.

    ``hours`` is charged at the employee's daily rate, so the labor cost of
    an assignment is ``daily_rate * hours``.
    """
    assignment_id: int
    task_id: int
    employee_id: int
    hours: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "hours", to_decimal(self.hours))
        if self.hours < 0:
            raise ValueError("hours cannot be negative")
