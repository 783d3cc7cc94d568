"""
Invoice amount reconciliation.

The header amount of an invoice must equal the sum of its line amounts.
Storage does not enforce this, so it is corrected lazily: every read path
passes freshly fetched invoices through `reconcile_invoices`, which writes
back a corrected header for each invoice whose stored amount differs from
its line total (exact comparison, no tolerance) and fixes the in-memory copy.

Each stale invoice costs one extra write; there is no batching. Concurrent
readers of the same stale invoice write the same derived value.
"""

import logging
from typing import Any, Dict, Iterable, List

from supabase import Client

from backend.config import settings
from backend.services.filters import INVOICE_NUM_PATH

logger = logging.getLogger(__name__)


def compute_invoice_total(invoice_lines: Iterable[Dict[str, Any]] | None) -> float:
    """
    Sum line_amount over the invoice lines, in line order.

    Missing or null line amounts count as zero.
    """
    total = 0.0
    for line in invoice_lines or []:
        total += line.get("line_amount") or 0
    return total


def needs_reconciliation(invoice: Dict[str, Any]) -> bool:
    """Return True when the stored header amount differs from the line total."""
    header = invoice.get("invoice_header") or {}
    return header.get("invoice_amount") != compute_invoice_total(invoice.get("invoice_lines"))


async def reconcile_invoice(
    supabase_client: Client,
    invoice: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Make one invoice's header amount match its line total.

    If the amounts diverge, the corrected header is persisted (keyed by
    invoice number) and the invoice dict is updated in place.

    Args:
        supabase_client: Supabase client
        invoice: Invoice row as read from storage

    Returns:
        The same invoice dict, with a corrected header amount if needed.
    """
    header = invoice.get("invoice_header") or {}
    total = compute_invoice_total(invoice.get("invoice_lines"))

    if header.get("invoice_amount") == total:
        return invoice

    invoice_num = header.get("invoice_num")
    corrected_header = {**header, "invoice_amount": total}

    logger.info(
        f"Reconciling invoice {invoice_num}: "
        f"stored={header.get('invoice_amount')}, lines={total}"
    )

    (
        supabase_client.table(settings.INVOICES_TABLE)
        .update({"invoice_header": corrected_header})
        .eq(INVOICE_NUM_PATH, invoice_num)
        .execute()
    )

    invoice["invoice_header"] = corrected_header
    return invoice


async def reconcile_invoices(
    supabase_client: Client,
    invoices: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Reconcile every invoice in a result set.

    Returns:
        The same list, each invoice with a consistent header amount.
    """
    for invoice in invoices:
        await reconcile_invoice(supabase_client, invoice)
    return invoices
