"""
Project selectors -- Pure Functions.

Narrow reference data to the project in view and compute the progress
and cost figures shown on the project and portfolio pages.  All functions are pure:
no I/O, no side effects.  Progress percentages are integers rounded half
up, matching how the dashboard displays them.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sitecost_kernel.domain.values import ZERO
from sitecost_modules.payroll.models import Employee
from sitecost_modules.project.models import (
    ChangeOrder,
    Job,
    Project,
    ProjectStatus,
    ResourceAssignment,
    Task,
    TaskActual,
)


@dataclass(frozen=True)
class JobSummary:
    """A job with its tasks and derived progress."""
    job: Job
    tasks: tuple[Task, ...]
    progress: int
    completed_value: Decimal


@dataclass(frozen=True)
class PortfolioSummary:
    """Dashboard headline figures across all projects."""
    project_count: int
    open_count: int
    completed_count: int
    status_counts: dict[ProjectStatus, int]
    total_quoted: Decimal
    total_actual: Decimal
    total_variance: Decimal
    average_completion: int


@dataclass(frozen=True)
class ProjectCostSummary:
    """
    Quoted versus actual cost for one project.

    ``variance`` is measured against the quoted cost; positive means the
    project has cost more than it was quoted at.  Change orders are reported
    separately in ``change_order_total`` and folded in by ``adjusted_variance``.
    """
    project_id: int
    quoted_cost: Decimal
    actual_labor_cost: Decimal
    recorded_actual_cost: Decimal
    total_actual_cost: Decimal
    variance: Decimal
    change_order_total: Decimal

    @property
    def adjusted_quote(self) -> Decimal:
        return self.quoted_cost + self.change_order_total

    @property
    def adjusted_variance(self) -> Decimal:
        return self.total_actual_cost - self.adjusted_quote


def _rounded_mean(values: list[int]) -> int:
    if not values:
        return 0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def jobs_for_project(jobs: Iterable[Job], project_id: int) -> tuple[Job, ...]:
    return tuple(j for j in jobs if j.project_id == project_id)


def tasks_for_project(
    tasks: Iterable[Task],
    jobs: Iterable[Job],
    project_id: int,
) -> tuple[Task, ...]:
    """Tasks whose job belongs to the project, in task order."""
    job_ids = {j.job_id for j in jobs_for_project(jobs, project_id)}
    return tuple(t for t in tasks if t.job_id in job_ids)


def employees_for_project(
    employees: Iterable[Employee],
    project_id: int,
) -> tuple[Employee, ...]:
    return tuple(e for e in employees if e.is_assigned_to(project_id))


def summarize_job(job: Job, tasks: Iterable[Task]) -> JobSummary:
    """
    Progress is the rounded mean of task progress (0 for a job without
    tasks).  ``completed_value`` sums the budgets of tasks at 100 %.
    """
    job_tasks = tuple(t for t in tasks if t.job_id == job.job_id)
    completed_value = sum(
        (t.task_budget for t in job_tasks if t.is_complete),
        ZERO,
    )
    return JobSummary(
        job=job,
        tasks=job_tasks,
        progress=_rounded_mean([t.task_progress for t in job_tasks]),
        completed_value=completed_value,
    )


def project_completion(
    project_id: int,
    jobs: Iterable[Job],
    tasks: Iterable[Task],
) -> int:
    """Rounded mean progress over every task of the project."""
    project_tasks = tasks_for_project(tasks, jobs, project_id)
    return _rounded_mean([t.task_progress for t in project_tasks])


def summarize_portfolio(
    projects: Iterable[Project],
    jobs: Iterable[Job],
    tasks: Iterable[Task],
    actuals: Iterable[TaskActual] = (),
) -> PortfolioSummary:
    """
    Headline figures for the dashboard.

    ``total_actual`` sums recorded task actuals over every project's tasks;
    planned labor from resource assignments is not part of the portfolio
    figure.  ``total_variance`` is ``total_actual - total_quoted``.
    """
    projects = tuple(projects)
    jobs = tuple(jobs)
    tasks = tuple(tasks)
    actuals = tuple(actuals)

    counts = Counter(p.status for p in projects)
    status_counts = {status: counts.get(status, 0) for status in ProjectStatus}

    total_quoted = sum((p.quoted_cost for p in projects), ZERO)
    total_actual = sum(
        (
            recorded_task_cost(tasks_for_project(tasks, jobs, p.project_id), actuals)
            for p in projects
        ),
        ZERO,
    )

    return PortfolioSummary(
        project_count=len(projects),
        open_count=sum(1 for p in projects if p.status.is_open),
        completed_count=status_counts[ProjectStatus.COMPLETED],
        status_counts=status_counts,
        total_quoted=total_quoted,
        total_actual=total_actual,
        total_variance=total_actual - total_quoted,
        average_completion=_rounded_mean(
            [project_completion(p.project_id, jobs, tasks) for p in projects]
        ),
    )


def recorded_task_cost(
    tasks: Iterable[Task],
    actuals: Iterable[TaskActual],
) -> Decimal:
    """Sum of recorded actuals booked against the given tasks."""
    task_ids = {t.task_id for t in tasks}
    return sum((a.cost for a in actuals if a.task_id in task_ids), ZERO)


def assigned_labor_cost(
    tasks: Iterable[Task],
    assignments: Iterable[ResourceAssignment],
    employees: Iterable[Employee],
) -> Decimal:
    """
    Planned labor cost of the resource assignments on the given tasks.

    Each assignment costs ``daily_rate * hours``.  Assignments naming an
    unknown employee contribute nothing.
    """
    task_ids = {t.task_id for t in tasks}
    rates = {e.employee_id: e.daily_rate for e in employees}
    return sum(
        (
            rates[a.employee_id] * a.hours
            for a in assignments
            if a.task_id in task_ids and a.employee_id in rates
        ),
        ZERO,
    )


def project_cost_summary(
    project: Project,
    jobs: Iterable[Job],
    tasks: Iterable[Task],
    employees: Iterable[Employee],
    assignments: Iterable[ResourceAssignment] = (),
    actuals: Iterable[TaskActual] = (),
    change_orders: Iterable[ChangeOrder] = (),
) -> ProjectCostSummary:
    """
    Quoted versus actual cost of one project.

    Total actual cost is assigned labor plus recorded task actuals, and
    ``variance`` is that total less the project's quoted cost.
    """
    project_tasks = tasks_for_project(tasks, jobs, project.project_id)
    labor = assigned_labor_cost(project_tasks, assignments, employees)
    recorded = recorded_task_cost(project_tasks, actuals)
    total = labor + recorded
    change_order_total = sum(
        (co.cost_adjustment for co in change_orders if co.project_id == project.project_id),
        ZERO,
    )
    return ProjectCostSummary(
        project_id=project.project_id,
        quoted_cost=project.quoted_cost,
        actual_labor_cost=labor,
        recorded_actual_cost=recorded,
        total_actual_cost=total,
        variance=total - project.quoted_cost,
        change_order_total=change_order_total,
    )
