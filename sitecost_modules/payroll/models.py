"""
Payroll Domain Models (``sitecost_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects for day-rate payroll: employees, daily time
entries and per-employee time cards.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
``timecard_rollup`` engine and by ``timecards.update_entry`` which produces
new snapshots instead of mutating records.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Entry dates are canonical ``yyyy-MM-dd`` strings.
* Date is the natural key within a time card: at most one entry per date.

Not enforced here
-----------------
"Not worked implies no task and no borrowed amount" is a rule of the
editing path (``update_entry``), not of stored data.  Stored entries may
carry a borrowed amount on a day that was not worked and the engine
accounts for it.

Failure modes
-------------
* Negative daily rate or borrowed amount raises ``ValueError``.
* Non-canonical entry date raises ``InvalidDateError``.
* Two entries on the same date raise ``DuplicateEntryError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from sitecost_kernel.domain.dates import format_iso_date, parse_iso_date
from sitecost_kernel.domain.values import ZERO, to_decimal
from sitecost_kernel.exceptions import DuplicateEntryError
from sitecost_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.models")


class TimeCardField(str, Enum):
    """Editable fields of a daily time entry."""
    WORKED = "worked"
    TASK_ID = "task_id"
    BORROWED = "borrowed"


@dataclass(frozen=True)
class Employee:
    """An employee paid a flat rate per day worked."""
    employee_id: int
    name: str
    daily_rate: Decimal = ZERO
    project_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "daily_rate", to_decimal(self.daily_rate))
        object.__setattr__(self, "project_ids", frozenset(self.project_ids))
        if self.daily_rate < 0:
            logger.warning(
                "employee_negative_daily_rate",
                extra={
                    "employee_id": self.employee_id,
                    "daily_rate": str(self.daily_rate),
                },
            )
            raise ValueError("daily_rate cannot be negative")

    def is_assigned_to(self, project_id: int) -> bool:
        return project_id in self.project_ids


@dataclass(frozen=True)
class DailyTimeEntry:
    """
    One calendar day on a time card.

    ``borrowed`` is a cash advance against future pay and is recorded
    independently of ``worked``.
    """
    date: str
    worked: bool = False
    task_id: int | None = None
    borrowed: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "date", format_iso_date(parse_iso_date(self.date)))
        object.__setattr__(self, "borrowed", to_decimal(self.borrowed))
        if not isinstance(self.worked, bool):
            raise ValueError(f"worked must be a bool, got {self.worked!r}")
        if self.borrowed < 0:
            raise ValueError("borrowed cannot be negative")

    @classmethod
    def blank(cls, entry_date: str) -> DailyTimeEntry:
        """The default entry for a date nobody has edited yet."""
        return cls(date=entry_date, worked=False, task_id=None, borrowed=ZERO)


@dataclass(frozen=True)
class EmployeeTimeCard:
    """All daily entries recorded for one employee, in insertion order."""
    employee_id: int
    entries: tuple[DailyTimeEntry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        seen: set[str] = set()
        for entry in self.entries:
            if entry.date in seen:
                raise DuplicateEntryError(self.employee_id, entry.date)
            seen.add(entry.date)

    def entry_for(self, entry_date: str) -> DailyTimeEntry | None:
        """Return the entry recorded on ``entry_date``, if any."""
        for entry in self.entries:
            if entry.date == entry_date:
                return entry
        return None
