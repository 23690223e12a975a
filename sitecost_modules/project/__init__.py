"""Project hierarchy records, progress and cost selectors."""

from sitecost_modules.project.models import (
    ChangeOrder,
    Client,
    Job,
    Project,
    ProjectStatus,
    ResourceAssignment,
    Task,
    TaskActual,
)
from sitecost_modules.project.selectors import (
    JobSummary,
    PortfolioSummary,
    ProjectCostSummary,
    assigned_labor_cost,
    employees_for_project,
    jobs_for_project,
    project_completion,
    project_cost_summary,
    recorded_task_cost,
    summarize_job,
    summarize_portfolio,
    tasks_for_project,
)

__all__ = [
    "ChangeOrder",
    "Client",
    "Job",
    "JobSummary",
    "PortfolioSummary",
    "Project",
    "ProjectCostSummary",
    "ProjectStatus",
    "ResourceAssignment",
    "Task",
    "TaskActual",
    "assigned_labor_cost",
    "employees_for_project",
    "jobs_for_project",
    "project_completion",
    "project_cost_summary",
    "recorded_task_cost",
    "summarize_job",
    "summarize_portfolio",
    "tasks_for_project",
]
