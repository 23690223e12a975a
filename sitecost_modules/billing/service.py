"""
sitecost_modules.billing.service -- Quotation and invoice drafting.

Responsibility:
    Resolve a project, its client, jobs and tasks from ``ReferenceData``
    and hand them to the pure document builders with the configured VAT
    rate.  Invoice numbers are allocated from the store when the caller
    does not supply one.

Architecture position:
    Modules -- orchestration over ``billing.documents``.  Reads
    ``ReferenceData`` and ``DashboardConfig``; never touches files itself
    and never mutates the store (issuing refs back onto tasks is the
    caller's concern).

Failure modes:
    - UnknownProjectError when the project id is not in the store.
    - EmptyDocumentError when none of the requested tasks can be billed.
    - InvalidDateError when ``document_date`` is not ``yyyy-MM-dd``.

Usage:
    billing = BillingService(load_reference_data(), get_active_config())
    invoice = billing.invoice(1, "QUO-2024-0001", [1001, 1002], "2024-05-02")
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sitecost_config.schema import DashboardConfig
from sitecost_kernel.domain.dates import format_iso_date, parse_iso_date
from sitecost_kernel.exceptions import UnknownProjectError
from sitecost_kernel.logging_config import LogContext, get_logger
from sitecost_modules.billing.documents import (
    BillingDocument,
    build_invoice,
    build_quotation,
    eligible_invoice_tasks,
    next_invoice_ref,
)
from sitecost_modules.project.models import Project, Task
from sitecost_modules.project.selectors import jobs_for_project, tasks_for_project
from sitecost_modules.reference import ReferenceData

logger = get_logger("modules.billing.service")


class BillingService:
    """Drafts billing documents for projects in the reference store."""

    def __init__(self, reference: ReferenceData, config: DashboardConfig) -> None:
        self._reference = reference
        self._config = config

    @property
    def vat_rate(self) -> Decimal:
        return self._config.vat_rate

    def _project(self, project_id: int) -> Project:
        project = self._reference.project(project_id)
        if project is None:
            logger.warning("billing_unknown_project", extra={"project_id": project_id})
            raise UnknownProjectError(project_id)
        return project

    def project_tasks(self, project_id: int) -> tuple[Task, ...]:
        reference = self._reference
        return tasks_for_project(reference.tasks, reference.jobs, self._project(project_id).project_id)

    def invoiceable_tasks(self, project_id: int, quotation_ref: str) -> tuple[Task, ...]:
        """Tasks of the project quoted under ``quotation_ref`` and not yet invoiced."""
        return eligible_invoice_tasks(self.project_tasks(project_id), quotation_ref)

    def next_invoice_ref(self, document_date: str) -> str:
        """Next free invoice number in the year of ``document_date``, across all projects."""
        year = parse_iso_date(document_date).year
        return next_invoice_ref(self._reference.tasks, year)

    def invoice(
        self,
        project_id: int,
        quotation_ref: str,
        task_ids: Iterable[int],
        document_date: str,
        invoice_ref: str | None = None,
    ) -> BillingDocument:
        project = self._project(project_id)
        document_date = format_iso_date(parse_iso_date(document_date))
        if invoice_ref is None:
            invoice_ref = self.next_invoice_ref(document_date)

        with LogContext.bind(project_id=str(project.project_id)):
            return build_invoice(
                invoice_ref=invoice_ref,
                quotation_ref=quotation_ref,
                project=project,
                client=self._reference.client(project.client_id),
                tasks=self.project_tasks(project_id),
                jobs=jobs_for_project(self._reference.jobs, project.project_id),
                task_ids=task_ids,
                document_date=document_date,
                vat_rate=self._config.vat_rate,
            )

    def quotation(
        self,
        project_id: int,
        quotation_ref: str,
        task_ids: Iterable[int],
        document_date: str,
    ) -> tuple[BillingDocument, tuple[Task, ...]]:
        """Quotation for the requested tasks; also returns the ones skipped as already quoted."""
        project = self._project(project_id)
        document_date = format_iso_date(parse_iso_date(document_date))

        with LogContext.bind(project_id=str(project.project_id)):
            return build_quotation(
                quotation_ref=quotation_ref,
                project=project,
                client=self._reference.client(project.client_id),
                tasks=self.project_tasks(project_id),
                jobs=jobs_for_project(self._reference.jobs, project.project_id),
                task_ids=task_ids,
                document_date=document_date,
                vat_rate=self._config.vat_rate,
            )
