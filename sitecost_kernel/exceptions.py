"""
Typed Exception Hierarchy for the sitecost packages.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe) and carries its context as
attributes rather than only inside the message string.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SiteCostError (base)
    |
    +-- DateError
    |   +-- InvalidDateError
    |   +-- MalformedDateWindowError
    |
    +-- TimeCardError
    |   +-- DuplicateEntryError
    |   +-- UnknownEntryFieldError
    |
    +-- ReferenceDataError
    |   +-- InvalidRecordError
    |   +-- UnknownProjectError
    |
    +-- BillingError
    |   +-- EmptyDocumentError
    |
    +-- ConfigError
        +-- InvalidConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Date            | INVALID_DATE                | Value is not a canonical yyyy-MM-dd date
                | MALFORMED_DATE_WINDOW       | Pay-period window holds non-canonical dates
----------------|-----------------------------|-----------------------------------------
Time card       | DUPLICATE_ENTRY             | Two entries share a date on one card
                | UNKNOWN_ENTRY_FIELD         | update_entry called with an unknown field
----------------|-----------------------------|-----------------------------------------
Reference data  | INVALID_RECORD              | Store record missing a key or badly typed
                | UNKNOWN_PROJECT             | Project id not present in the store
----------------|-----------------------------|-----------------------------------------
Billing         | EMPTY_DOCUMENT              | No billable task matched the selection
----------------|-----------------------------|-----------------------------------------
Config          | INVALID_CONFIG              | Dashboard configuration failed validation

The aggregation engine itself only ever raises MalformedDateWindowError:
unknown employees, unknown tasks and missing budgets are excluded from the
report rather than raised.
"""


class SiteCostError(Exception):
    """
    Base exception for all sitecost errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SITECOST_ERROR"


# Date-related exceptions


class DateError(SiteCostError):
    """Base exception for date and date-window errors."""

    code: str = "DATE_ERROR"


class InvalidDateError(DateError):
    """A value crossing the boundary is not a canonical ISO date."""

    code: str = "INVALID_DATE"

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid date {value!r}: expected a canonical yyyy-MM-dd string"
        )


class MalformedDateWindowError(DateError):
    """The active pay-period window contains non-canonical date strings."""

    code: str = "MALFORMED_DATE_WINDOW"

    def __init__(self, invalid_values: tuple[object, ...]):
        self.invalid_values = invalid_values
        super().__init__(
            f"Date window contains {len(invalid_values)} malformed value(s): "
            f"{', '.join(repr(v) for v in invalid_values)}"
        )


# Time-card exceptions


class TimeCardError(SiteCostError):
    """Base exception for time-card errors."""

    code: str = "TIME_CARD_ERROR"


class DuplicateEntryError(TimeCardError):
    """A time card holds more than one entry for the same calendar date."""

    code: str = "DUPLICATE_ENTRY"

    def __init__(self, employee_id: int, entry_date: str):
        self.employee_id = employee_id
        self.entry_date = entry_date
        super().__init__(
            f"Employee {employee_id} has more than one time entry on {entry_date}"
        )


class UnknownEntryFieldError(TimeCardError):
    """update_entry was asked to change a field that entries do not have."""

    code: str = "UNKNOWN_ENTRY_FIELD"

    def __init__(self, field_name: str, allowed: tuple[str, ...]):
        self.field_name = field_name
        self.allowed = allowed
        super().__init__(
            f"Unknown time entry field {field_name!r}; "
            f"expected one of {', '.join(allowed)}"
        )


# Reference data exceptions


class ReferenceDataError(SiteCostError):
    """Base exception for reference-data store errors."""

    code: str = "REFERENCE_DATA_ERROR"


class InvalidRecordError(ReferenceDataError):
    """A record from the data store could not be parsed."""

    code: str = "INVALID_RECORD"

    def __init__(self, record_type: str, key: str, reason: str):
        self.record_type = record_type
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid {record_type} record ({key}): {reason}")


class UnknownProjectError(ReferenceDataError):
    """The requested project does not exist in the store."""

    code: str = "UNKNOWN_PROJECT"

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


# Billing exceptions


class BillingError(SiteCostError):
    """Base exception for quotation and invoice document errors."""

    code: str = "BILLING_ERROR"


class EmptyDocumentError(BillingError):
    """None of the requested tasks could be billed."""

    code: str = "EMPTY_DOCUMENT"

    def __init__(self, document_ref: str, requested_task_ids: tuple[int, ...]):
        self.document_ref = document_ref
        self.requested_task_ids = requested_task_ids
        super().__init__(
            f"Document {document_ref} has no billable tasks "
            f"(requested: {list(requested_task_ids)})"
        )


# Config exceptions


class ConfigError(SiteCostError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """Dashboard configuration failed validation."""

    code: str = "INVALID_CONFIG"

    def __init__(self, errors: tuple[str, ...]):
        self.errors = errors
        super().__init__(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
