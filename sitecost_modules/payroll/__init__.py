"""
Payroll records and time-card snapshot operations.

``TimesheetService`` lives in ``sitecost_modules.payroll.service`` and is
not re-exported here, because the service imports the engines and the
engines import these models.
"""

from sitecost_modules.payroll.models import (
    DailyTimeEntry,
    Employee,
    EmployeeTimeCard,
    TimeCardField,
)
from sitecost_modules.payroll.timecards import (
    TimeCardSnapshot,
    get_entry,
    seed_project_time_cards,
    update_entry,
)

__all__ = [
    "DailyTimeEntry",
    "Employee",
    "EmployeeTimeCard",
    "TimeCardField",
    "TimeCardSnapshot",
    "get_entry",
    "seed_project_time_cards",
    "update_entry",
]
