"""
Time-card snapshot operations (``sitecost_modules.payroll.timecards``).

Responsibility
--------------
The only legal way to change stored time entries.  Every function takes a
snapshot (a tuple of ``EmployeeTimeCard``) and returns a NEW snapshot;
records are frozen and never mutated in place.

Also seeds the per-project snapshot from the stored cards, and answers
"what does the grid show for this employee on this date".

Invariants enforced
-------------------
* Cards and entries are created lazily on first edit.
* Clearing ``worked`` cascades: task_id becomes None and borrowed 0,
  whatever else the call carried.
* Date is unique within a card; an edit updates the existing entry.
* Card order and entry order are preserved; new ones are appended.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal

from sitecost_kernel.domain.dates import format_iso_date, parse_iso_date
from sitecost_kernel.domain.values import ZERO, to_decimal
from sitecost_kernel.exceptions import UnknownEntryFieldError
from sitecost_kernel.logging_config import get_logger
from sitecost_modules.payroll.models import (
    DailyTimeEntry,
    Employee,
    EmployeeTimeCard,
    TimeCardField,
)

logger = get_logger("modules.payroll.timecards")

TimeCardSnapshot = tuple[EmployeeTimeCard, ...]

_ALLOWED_FIELDS = tuple(f.value for f in TimeCardField)


def _parse_field(field_name: TimeCardField | str) -> TimeCardField:
    try:
        return TimeCardField(field_name)
    except ValueError:
        raise UnknownEntryFieldError(str(field_name), _ALLOWED_FIELDS) from None


def _apply(
    entry: DailyTimeEntry,
    field_name: TimeCardField,
    value: bool | int | Decimal | str | None,
) -> DailyTimeEntry:
    if field_name is TimeCardField.WORKED:
        if not value:
            return replace(entry, worked=False, task_id=None, borrowed=ZERO)
        return replace(entry, worked=True)
    if field_name is TimeCardField.TASK_ID:
        return replace(entry, task_id=int(value) if value is not None else None)
    return replace(entry, borrowed=to_decimal(value))


def update_entry(
    time_cards: Iterable[EmployeeTimeCard],
    employee_id: int,
    entry_date: str,
    field_name: TimeCardField | str,
    value: bool | int | Decimal | str | None,
) -> TimeCardSnapshot:
    """
    Apply one cell edit and return the new snapshot.

    Args:
        time_cards: Current snapshot.
        employee_id: Employee whose card is edited (created if absent).
        entry_date: Canonical ``yyyy-MM-dd`` date (entry created if absent,
            defaulting to not worked, no task, nothing borrowed).
        field_name: ``"worked"``, ``"task_id"`` or ``"borrowed"``.
        value: New value.  ``worked=False`` also clears task and borrowed.

    Returns:
        A new tuple of cards; the input is left untouched.

    Raises:
        UnknownEntryFieldError: For any other field name.
        InvalidDateError: If ``entry_date`` is not canonical.
        ValueError: If the value is invalid for the field (e.g. negative
            borrowed).
    """
    field_name = _parse_field(field_name)
    entry_date = format_iso_date(parse_iso_date(entry_date))

    cards = list(time_cards)
    card_index = next(
        (i for i, card in enumerate(cards) if card.employee_id == employee_id),
        None,
    )
    if card_index is None:
        cards.append(EmployeeTimeCard(employee_id=employee_id))
        card_index = len(cards) - 1

    card = cards[card_index]
    entries = list(card.entries)
    entry_index = next(
        (i for i, entry in enumerate(entries) if entry.date == entry_date),
        None,
    )
    if entry_index is None:
        entries.append(DailyTimeEntry.blank(entry_date))
        entry_index = len(entries) - 1

    updated = _apply(entries[entry_index], field_name, value)
    entries[entry_index] = updated
    cards[card_index] = replace(card, entries=tuple(entries))

    logger.info("time_entry_updated", extra={
        "employee_id": employee_id,
        "entry_date": entry_date,
        "field": field_name.value,
        "worked": updated.worked,
        "task_id": updated.task_id,
        "borrowed": str(updated.borrowed),
    })
    return tuple(cards)


def get_entry(
    time_cards: Iterable[EmployeeTimeCard],
    employee_id: int,
    entry_date: str,
) -> DailyTimeEntry:
    """Stored entry for the cell, or the blank default when none exists."""
    for card in time_cards:
        if card.employee_id == employee_id:
            entry = card.entry_for(entry_date)
            if entry is not None:
                return entry
            break
    return DailyTimeEntry.blank(entry_date)


def seed_project_time_cards(
    stored_cards: Iterable[EmployeeTimeCard],
    employees: Iterable[Employee],
    project_task_ids: Iterable[int],
) -> TimeCardSnapshot:
    """
    Build the working snapshot for one project.

    One card per employee in ``employees`` (in that order), keeping only the
    stored entries whose task belongs to the project.  Employees without a
    stored card get an empty one.
    """
    task_ids = frozenset(project_task_ids)
    by_employee = {card.employee_id: card for card in stored_cards}

    snapshot: list[EmployeeTimeCard] = []
    for employee in employees:
        stored = by_employee.get(employee.employee_id)
        if stored is None:
            snapshot.append(EmployeeTimeCard(employee_id=employee.employee_id))
            continue
        snapshot.append(replace(
            stored,
            entries=tuple(
                e for e in stored.entries
                if e.task_id is not None and e.task_id in task_ids
            ),
        ))

    logger.debug("project_time_cards_seeded", extra={
        "card_count": len(snapshot),
        "project_task_count": len(task_ids),
    })
    return tuple(snapshot)
