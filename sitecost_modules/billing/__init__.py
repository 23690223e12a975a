"""Quotation and invoice document builders.

``BillingService`` lives in ``sitecost_modules.billing.service`` and is
imported from there.
"""

from sitecost_modules.billing.documents import (
    DEFAULT_VAT_RATE,
    UNCATEGORIZED,
    BillingDocument,
    DocumentTotals,
    DocumentType,
    LineItem,
    build_invoice,
    build_quotation,
    document_totals,
    eligible_invoice_tasks,
    group_line_items,
    next_invoice_ref,
)

__all__ = [
    "DEFAULT_VAT_RATE",
    "UNCATEGORIZED",
    "BillingDocument",
    "DocumentTotals",
    "DocumentType",
    "LineItem",
    "build_invoice",
    "build_quotation",
    "document_totals",
    "eligible_invoice_tasks",
    "group_line_items",
    "next_invoice_ref",
]
