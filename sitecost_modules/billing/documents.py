"""
Billing Documents (``sitecost_modules.billing.documents``).

Responsibility
--------------
Build the data behind quotations and invoices: priced line items grouped
by job, subtotal, VAT and total, plus the invoice numbering rule.  Layout
and PDF rendering belong to the presentation layer and are not done here.

Architecture position
---------------------
**Modules layer** -- pure functions over frozen records, ZERO I/O.  The
document date and year are parameters; nothing reads the clock.

Invariants enforced
-------------------
* All amounts are ``Decimal``; totals are kept at full precision and
  rounded by the renderer.
* Groups are keyed by job name and sorted alphabetically (case-folded);
  tasks whose job is unknown land in ``UNCATEGORIZED``.
* ``vat = subtotal * vat_rate / 100`` and ``total = subtotal + vat``.

Failure modes
-------------
* ``EmptyDocumentError`` when none of the requested task ids resolve to a
  billable task.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from sitecost_kernel.domain.values import ZERO, to_decimal
from sitecost_kernel.exceptions import EmptyDocumentError
from sitecost_kernel.logging_config import get_logger
from sitecost_modules.project.models import Client, Job, Project, Task

logger = get_logger("modules.billing.documents")

UNCATEGORIZED = "Uncategorized"
GENERAL_WORKS = "General Works"
DEFAULT_VAT_RATE = Decimal("15")

INVOICE_NOTES = "Payment due within 7 days. Thank you for your business."
QUOTATION_NOTES = (
    "Payment terms: 50% deposit required to commence work.\n"
    "Balance due on completion.\n"
    "Valid for 30 days."
)


class DocumentType(str, Enum):
    QUOTATION = "quotation"
    INVOICE = "invoice"


@dataclass(frozen=True)
class LineItem:
    """A priced line on a quotation or invoice."""
    item_id: int
    description: str
    price: Decimal
    quantity: Decimal = Decimal("1")
    category: str = UNCATEGORIZED

    def __post_init__(self):
        object.__setattr__(self, "price", to_decimal(self.price))
        object.__setattr__(self, "quantity", to_decimal(self.quantity))

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.price


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    vat: Decimal
    total: Decimal


@dataclass(frozen=True)
class BillingDocument:
    """Everything a renderer needs to lay out a quotation or invoice."""
    document_type: DocumentType
    document_number: str
    document_date: str
    project: Project
    client: Client | None
    grouped_items: dict[str, tuple[LineItem, ...]]
    totals: DocumentTotals
    notes: str = ""
    reference_quotation: str | None = None

    @property
    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(item for items in self.grouped_items.values() for item in items)


def document_totals(
    items: Iterable[LineItem],
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> DocumentTotals:
    """Subtotal of quantity x price, VAT at ``vat_rate`` percent, and total."""
    subtotal = sum((item.amount for item in items), ZERO)
    vat = subtotal * to_decimal(vat_rate) / Decimal("100")
    return DocumentTotals(subtotal=subtotal, vat=vat, total=subtotal + vat)


def group_line_items(items: Iterable[LineItem]) -> dict[str, tuple[LineItem, ...]]:
    """Group by category, categories sorted alphabetically, item order kept."""
    groups: dict[str, list[LineItem]] = {}
    for item in items:
        groups.setdefault(item.category or UNCATEGORIZED, []).append(item)
    return {
        name: tuple(groups[name])
        for name in sorted(groups, key=str.casefold)
    }


def _task_line(task: Task, jobs_by_id: dict[int, Job], fallback: str) -> LineItem:
    job = jobs_by_id.get(task.job_id)
    return LineItem(
        item_id=task.task_id,
        description=task.name,
        price=task.task_budget,
        category=job.name if job is not None else fallback,
    )


def _select_tasks(tasks: Iterable[Task], task_ids: Iterable[int]) -> tuple[Task, ...]:
    by_id = {t.task_id: t for t in tasks}
    return tuple(by_id[i] for i in dict.fromkeys(task_ids) if i in by_id)


def eligible_invoice_tasks(
    tasks: Iterable[Task],
    quotation_ref: str,
) -> tuple[Task, ...]:
    """Tasks quoted under ``quotation_ref`` that no invoice has billed yet."""
    return tuple(
        t for t in tasks
        if t.quotation_ref == quotation_ref and not t.invoice_refs
    )


def next_invoice_ref(tasks: Iterable[Task], year: int) -> str:
    """
    Next invoice number for ``year``: ``INV-{year}-{n:04d}``.

    ``n`` is one more than the count of invoice refs already issued that
    year across all tasks.
    """
    prefix = f"INV-{year}"
    existing = sum(
        1 for t in tasks for ref in t.invoice_refs if ref.startswith(prefix)
    )
    return f"{prefix}-{existing + 1:04d}"


def build_invoice(
    invoice_ref: str,
    quotation_ref: str,
    project: Project,
    client: Client | None,
    tasks: Iterable[Task],
    jobs: Iterable[Job],
    task_ids: Iterable[int],
    document_date: str,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> BillingDocument:
    """
    Invoice for the selected tasks, each billed at its budget.

    Unknown task ids are ignored.

    Raises:
        EmptyDocumentError: If no requested task id resolves.
    """
    task_ids = tuple(task_ids)
    invoiced = _select_tasks(tasks, task_ids)
    if not invoiced:
        raise EmptyDocumentError(invoice_ref, task_ids)

    jobs_by_id = {j.job_id: j for j in jobs}
    items = [_task_line(t, jobs_by_id, UNCATEGORIZED) for t in invoiced]
    totals = document_totals(items, vat_rate)

    logger.info("invoice_built", extra={
        "invoice_ref": invoice_ref,
        "quotation_ref": quotation_ref,
        "project_id": project.project_id,
        "line_count": len(items),
        "subtotal": str(totals.subtotal),
        "total": str(totals.total),
    })

    return BillingDocument(
        document_type=DocumentType.INVOICE,
        document_number=invoice_ref,
        document_date=document_date,
        project=project,
        client=client,
        grouped_items=group_line_items(items),
        totals=totals,
        notes=INVOICE_NOTES,
        reference_quotation=quotation_ref,
    )


def build_quotation(
    quotation_ref: str,
    project: Project,
    client: Client | None,
    tasks: Iterable[Task],
    jobs: Iterable[Job],
    task_ids: Iterable[int],
    document_date: str,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> tuple[BillingDocument, tuple[Task, ...]]:
    """
    Quotation for the selected tasks that are not yet on another quotation.

    Returns the document and the requested tasks that were skipped because
    they already carry a quotation reference.

    Raises:
        EmptyDocumentError: If no requested task can be quoted.
    """
    task_ids = tuple(task_ids)
    requested = _select_tasks(tasks, task_ids)
    available = tuple(t for t in requested if not t.quotation_ref)
    already_quoted = tuple(t for t in requested if t.quotation_ref)
    if not available:
        raise EmptyDocumentError(quotation_ref, task_ids)

    jobs_by_id = {j.job_id: j for j in jobs}
    items = [_task_line(t, jobs_by_id, GENERAL_WORKS) for t in available]
    totals = document_totals(items, vat_rate)

    logger.info("quotation_built", extra={
        "quotation_ref": quotation_ref,
        "project_id": project.project_id,
        "line_count": len(items),
        "already_quoted_count": len(already_quoted),
        "total": str(totals.total),
    })

    document = BillingDocument(
        document_type=DocumentType.QUOTATION,
        document_number=quotation_ref,
        document_date=document_date,
        project=project,
        client=client,
        grouped_items=group_line_items(items),
        totals=totals,
        notes=QUOTATION_NOTES,
    )
    return document, already_quoted
