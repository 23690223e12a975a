"""
Pytest fixtures for the sitecost test suite.

Provides:
- Structured logging configured once per session
- LogContext cleanup between tests
- ``captured_logs`` for asserting on emitted log events
- Small record builders shared by engine and module tests
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from sitecost_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from sitecost_modules.payroll.models import DailyTimeEntry, Employee, EmployeeTimeCard
from sitecost_modules.project.models import Job, Task


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture sitecost logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_time_card_rollup(...)
            logs = captured_logs()
            assert any(r["message"] == "time_card_rollup_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sitecost")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Record builders
# =============================================================================


@pytest.fixture
def make_employee():
    def _make(employee_id=1, rate="800", projects=(1,), name=None):
        return Employee(
            employee_id=employee_id,
            name=name or f"Employee {employee_id}",
            daily_rate=Decimal(rate),
            project_ids=frozenset(projects),
        )
    return _make


@pytest.fixture
def make_task():
    def _make(task_id=1, budget="1000", job_id=10, name=None, progress=0):
        return Task(
            task_id=task_id,
            job_id=job_id,
            name=name or f"Task {task_id}",
            task_budget=Decimal(budget),
            task_progress=progress,
        )
    return _make


@pytest.fixture
def make_job():
    def _make(job_id=10, project_id=1, name=None):
        return Job(job_id=job_id, project_id=project_id, name=name or f"Job {job_id}")
    return _make


@pytest.fixture
def make_card():
    def _make(employee_id, *entries):
        return EmployeeTimeCard(
            employee_id=employee_id,
            entries=tuple(
                e if isinstance(e, DailyTimeEntry) else DailyTimeEntry(*e)
                for e in entries
            ),
        )
    return _make
