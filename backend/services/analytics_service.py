"""
Invoice analytics.

Computes the InvoiceSummary for a filter. The whole filtered set is fetched
and reconciled first, and every aggregate is derived from that one
reconciled set, so total_amount always equals the sum of line-derived
header amounts and never a stale stored value.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from supabase import Client

from backend.schemas.analytics import InvoiceSummary, InvoiceTypeBreakdown, MonthlyTotal
from backend.services.filters import InvoiceFilter
from backend.services.invoice_service import list_invoices

logger = logging.getLogger(__name__)


def summarize_invoices(invoices: List[Dict[str, Any]]) -> InvoiceSummary:
    """
    Aggregate already-reconciled invoices into an InvoiceSummary.

    - invoice_types: (type, count, amount), sorted by count descending
      (ties broken by type name so the order is stable)
    - monthly_totals: amounts grouped by invoice_date[:7] (YYYY-MM),
      sorted ascending by month
    """
    total_amount = 0.0
    type_counts: Dict[str, int] = defaultdict(int)
    type_amounts: Dict[str, float] = defaultdict(float)
    month_amounts: Dict[str, float] = defaultdict(float)

    for invoice in invoices:
        header = invoice.get("invoice_header") or {}
        amount = header.get("invoice_amount") or 0
        invoice_type = header.get("invoice_type") or ""
        month = (header.get("invoice_date") or "")[:7]

        total_amount += amount
        type_counts[invoice_type] += 1
        type_amounts[invoice_type] += amount
        month_amounts[month] += amount

    invoice_types = [
        InvoiceTypeBreakdown(type=t, count=type_counts[t], amount=type_amounts[t])
        for t in sorted(type_counts, key=lambda t: (-type_counts[t], t))
    ]

    monthly_totals = [
        MonthlyTotal(month=month, amount=month_amounts[month])
        for month in sorted(month_amounts)
    ]

    return InvoiceSummary(
        total_invoices=len(invoices),
        total_amount=total_amount,
        invoice_types=invoice_types,
        monthly_totals=monthly_totals,
    )


async def get_analytics_summary(
    supabase_client: Client,
    filters: Optional[InvoiceFilter] = None,
) -> InvoiceSummary:
    """
    Compute count, total amount, type breakdown and monthly totals.

    Args:
        supabase_client: Supabase client
        filters: Normalized filter (None = all invoices)

    Returns:
        InvoiceSummary over the reconciled filtered set
    """
    invoices, _ = await list_invoices(
        supabase_client=supabase_client,
        filters=filters,
        page=1,
        limit=0,
    )

    summary = summarize_invoices(invoices)

    logger.info(
        f"Analytics summary computed: invoices={summary.total_invoices}, "
        f"types={len(summary.invoice_types)}, months={len(summary.monthly_totals)}"
    )

    return summary
