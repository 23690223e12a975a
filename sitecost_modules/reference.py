"""
Reference Data Store (``sitecost_modules.reference``).

Responsibility
--------------
Load the dashboard's reference records (clients, projects, jobs, tasks,
employees, stored time cards and the project cost records) from a YAML
store and parse them into the frozen domain models.  The bundled store at
``sitecost_modules/data/mock_store.yaml`` backs the demo and the tests.

Architecture position
---------------------
**Modules layer** -- the only file-reading code outside ``sitecost_config``.
Everything downstream receives the typed ``ReferenceData`` snapshot.

Invariants enforced
-------------------
* Records keep the order they have in the store.
* Required keys are checked per record; a missing key or a value the model
  rejects surfaces as ``InvalidRecordError`` naming the record type and key.
* Dates may be quoted strings or YAML dates; both become ``yyyy-MM-dd``.

Failure modes
-------------
* Missing store file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid record  -> ``InvalidRecordError``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, TypeVar

import yaml

from sitecost_kernel.domain.dates import format_iso_date, parse_iso_date
from sitecost_kernel.exceptions import InvalidRecordError, SiteCostError
from sitecost_kernel.logging_config import get_logger
from sitecost_modules.payroll.models import DailyTimeEntry, Employee, EmployeeTimeCard
from sitecost_modules.project.models import (
    ChangeOrder,
    Client,
    Job,
    Project,
    ResourceAssignment,
    Task,
    TaskActual,
)

logger = get_logger("modules.reference")

DEFAULT_STORE_PATH = Path(__file__).parent / "data" / "mock_store.yaml"

T = TypeVar("T")


@dataclass(frozen=True)
class ReferenceData:
    """Typed snapshot of every record the dashboard reads."""
    clients: tuple[Client, ...] = ()
    projects: tuple[Project, ...] = ()
    jobs: tuple[Job, ...] = ()
    tasks: tuple[Task, ...] = ()
    employees: tuple[Employee, ...] = ()
    time_cards: tuple[EmployeeTimeCard, ...] = ()
    change_orders: tuple[ChangeOrder, ...] = ()
    task_actuals: tuple[TaskActual, ...] = ()
    resource_assignments: tuple[ResourceAssignment, ...] = ()

    def project(self, project_id: int) -> Project | None:
        return next((p for p in self.projects if p.project_id == project_id), None)

    def client(self, client_id: int | None) -> Client | None:
        if client_id is None:
            return None
        return next((c for c in self.clients if c.client_id == client_id), None)


def _require(data: dict[str, Any], key: str, record_type: str) -> Any:
    if key not in data or data[key] is None:
        raise InvalidRecordError(record_type, key, "required key is missing")
    return data[key]


def _optional_date(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return format_iso_date(parse_iso_date(value))


def _entry_date(value: Any) -> str:
    # YAML turns an unquoted 2024-04-01 into a date.
    if isinstance(value, date):
        return format_iso_date(value)
    return value


def parse_client(data: dict[str, Any]) -> Client:
    return Client(
        client_id=_require(data, "client_id", "client"),
        name=_require(data, "name", "client"),
        address=data.get("address", ""),
        email=data.get("email", ""),
        phone=data.get("phone", ""),
    )


def parse_project(data: dict[str, Any]) -> Project:
    return Project(
        project_id=_require(data, "project_id", "project"),
        name=_require(data, "name", "project"),
        status=data.get("status", "Not Started"),
        client_id=data.get("client_id"),
        quoted_cost=data.get("quoted_cost", 0),
        quote_date=_optional_date(data.get("quote_date")),
        start_date=_optional_date(data.get("start_date")),
        end_date=_optional_date(data.get("end_date")),
    )


def parse_job(data: dict[str, Any]) -> Job:
    return Job(
        job_id=_require(data, "job_id", "job"),
        project_id=_require(data, "project_id", "job"),
        name=_require(data, "name", "job"),
        job_budget=data.get("job_budget", 0),
        start_date=_optional_date(data.get("start_date")),
        end_date=_optional_date(data.get("end_date")),
        status=data.get("status", "Not Started"),
    )


def parse_task(data: dict[str, Any]) -> Task:
    return Task(
        task_id=_require(data, "task_id", "task"),
        job_id=_require(data, "job_id", "task"),
        name=_require(data, "name", "task"),
        task_budget=data.get("task_budget", 0),
        task_progress=data.get("task_progress", 0),
        status=data.get("status", "Not Started"),
        quotation_ref=data.get("quotation_ref"),
        invoice_refs=tuple(data.get("invoice_refs") or ()),
    )


def parse_employee(data: dict[str, Any]) -> Employee:
    return Employee(
        employee_id=_require(data, "employee_id", "employee"),
        name=_require(data, "name", "employee"),
        daily_rate=data.get("daily_rate", 0),
        project_ids=frozenset(data.get("project_ids") or ()),
    )


def parse_time_card(data: dict[str, Any]) -> EmployeeTimeCard:
    entries = tuple(
        DailyTimeEntry(
            date=_entry_date(_require(e, "date", "time_entry")),
            worked=e.get("worked", False),
            task_id=e.get("task_id"),
            borrowed=e.get("borrowed", 0),
        )
        for e in data.get("entries") or ()
    )
    return EmployeeTimeCard(
        employee_id=_require(data, "employee_id", "time_card"),
        entries=entries,
    )


def parse_change_order(data: dict[str, Any]) -> ChangeOrder:
    return ChangeOrder(
        change_order_id=_require(data, "change_order_id", "change_order"),
        project_id=_require(data, "project_id", "change_order"),
        description=data.get("description", ""),
        cost_adjustment=data.get("cost_adjustment", 0),
        date=_optional_date(data.get("date")),
    )


def parse_task_actual(data: dict[str, Any]) -> TaskActual:
    return TaskActual(
        actual_id=_require(data, "actual_id", "task_actual"),
        task_id=_require(data, "task_id", "task_actual"),
        cost=_require(data, "cost", "task_actual"),
        date=_optional_date(data.get("date")),
        description=data.get("description", ""),
    )


def parse_resource_assignment(data: dict[str, Any]) -> ResourceAssignment:
    return ResourceAssignment(
        assignment_id=_require(data, "assignment_id", "resource_assignment"),
        task_id=_require(data, "task_id", "resource_assignment"),
        employee_id=_require(data, "employee_id", "resource_assignment"),
        hours=data.get("hours", 0),
    )

def _parse_section(
    raw: dict[str, Any],
    section: str,
    parser: Callable[[dict[str, Any]], T],
) -> tuple[T, ...]:
    records = []
    for index, item in enumerate(raw.get(section) or ()):
        if not isinstance(item, dict):
            raise InvalidRecordError(section, str(index), "record is not a mapping")
        try:
            records.append(parser(item))
        except SiteCostError:
            raise
        except (TypeError, ValueError) as exc:
            raise InvalidRecordError(section, str(index), str(exc)) from exc
    return tuple(records)


def parse_reference_data(raw: dict[str, Any]) -> ReferenceData:
    """Parse an already-loaded store mapping into ``ReferenceData``."""
    return ReferenceData(
        clients=_parse_section(raw, "clients", parse_client),
        projects=_parse_section(raw, "projects", parse_project),
        jobs=_parse_section(raw, "jobs", parse_job),
        tasks=_parse_section(raw, "tasks", parse_task),
        employees=_parse_section(raw, "employees", parse_employee),
        time_cards=_parse_section(raw, "time_cards", parse_time_card),
        change_orders=_parse_section(raw, "change_orders", parse_change_order),
        task_actuals=_parse_section(raw, "task_actuals", parse_task_actual),
        resource_assignments=_parse_section(
            raw, "resource_assignments", parse_resource_assignment,
        ),
    )


def load_reference_data(path: Path | str | None = None) -> ReferenceData:
    """
    Load and parse the YAML store.

    Args:
        path: Store file.  Defaults to the bundled mock store.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        InvalidRecordError: If a record is missing a key or fails validation.
    """
    store_path = Path(path) if path is not None else DEFAULT_STORE_PATH
    with open(store_path) as f:
        raw = yaml.safe_load(f) or {}

    reference = parse_reference_data(raw)
    logger.info("reference_data_loaded", extra={
        "store_path": str(store_path),
        "project_count": len(reference.projects),
        "job_count": len(reference.jobs),
        "task_count": len(reference.tasks),
        "employee_count": len(reference.employees),
        "time_card_count": len(reference.time_cards),
        "change_order_count": len(reference.change_orders),
        "task_actual_count": len(reference.task_actuals),
        "assignment_count": len(reference.resource_assignments),
    })
    return reference
