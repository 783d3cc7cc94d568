"""
Service layer for the invoice analytics backend.

Contains the business logic between routes (HTTP layer) and storage:
- Invoice CRUD with amount reconciliation
- Filter construction
- Analytics aggregation
- Spreadsheet export
- User identity persistence

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from .analytics_service import get_analytics_summary, summarize_invoices
from .export_service import build_invoice_workbook, export_filename
from .filters import InvoiceFilter, apply_invoice_filter
from .invoice_service import (
    InvoiceAlreadyExistsError,
    create_invoice,
    get_invoice_by_number,
    get_vendor_list,
    list_invoices,
    total_pages,
    update_invoice_header,
)
from .reconciliation import compute_invoice_total, reconcile_invoice, reconcile_invoices
from .user_service import (
    LegacyUserStore,
    get_google_user_by_email,
    get_google_user_by_id,
    legacy_users,
    update_google_user,
    upsert_google_user,
)

__all__ = [
    "InvoiceFilter",
    "apply_invoice_filter",
    "compute_invoice_total",
    "reconcile_invoice",
    "reconcile_invoices",
    "list_invoices",
    "get_invoice_by_number",
    "update_invoice_header",
    "create_invoice",
    "get_vendor_list",
    "total_pages",
    "InvoiceAlreadyExistsError",
    "get_analytics_summary",
    "summarize_invoices",
    "build_invoice_workbook",
    "export_filename",
    "get_google_user_by_id",
    "get_google_user_by_email",
    "update_google_user",
    "upsert_google_user",
    "LegacyUserStore",
    "legacy_users",
]
