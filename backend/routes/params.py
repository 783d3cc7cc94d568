"""
Shared query-string parameters for invoice listing endpoints.

The web client sends camelCase names (invoiceType, startDate, endDate);
these dependencies map them onto one InvoiceFilter so every endpoint
normalizes filters the same way.
"""

from typing import Annotated, Optional

from fastapi import Query

from backend.services.filters import InvoiceFilter


async def invoice_filter_params(
    vendor: Annotated[Optional[str], Query(description="Exact vendor name")] = None,
    currency: Annotated[Optional[str], Query(description="Exact currency code")] = None,
    invoice_type: Annotated[Optional[str], Query(alias="invoiceType", description="Exact invoice type")] = None,
    search: Annotated[Optional[str], Query(description="Substring of invoice number or vendor name")] = None,
    start_date: Annotated[Optional[str], Query(alias="startDate", description="Inclusive start (YYYY-MM-DD)")] = None,
    end_date: Annotated[Optional[str], Query(alias="endDate", description="Inclusive end (YYYY-MM-DD)")] = None,
) -> InvoiceFilter:
    """Filters accepted by list and export endpoints."""
    return InvoiceFilter.from_params(
        vendor=vendor,
        currency=currency,
        invoice_type=invoice_type,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )


async def analytics_filter_params(
    vendor: Annotated[Optional[str], Query(description="Exact vendor name")] = None,
    currency: Annotated[Optional[str], Query(description="Exact currency code")] = None,
    start_date: Annotated[Optional[str], Query(alias="startDate", description="Inclusive start (YYYY-MM-DD)")] = None,
    end_date: Annotated[Optional[str], Query(alias="endDate", description="Inclusive end (YYYY-MM-DD)")] = None,
) -> InvoiceFilter:
    """Filters accepted by the analytics summary endpoint."""
    return InvoiceFilter.from_params(
        vendor=vendor,
        currency=currency,
        start_date=start_date,
        end_date=end_date,
    )
