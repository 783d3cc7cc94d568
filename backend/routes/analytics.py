"""
Analytics API endpoints.

- GET /api/analytics/summary - totals, per-type breakdown and monthly totals
- GET /api/vendors - sorted distinct vendor names

Both are public and read-only.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.db.client import get_supabase_client
from backend.routes.params import analytics_filter_params
from backend.schemas.analytics import InvoiceSummary
from backend.services import InvoiceFilter, get_analytics_summary, get_vendor_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analytics"])


@router.get(
    "/analytics/summary",
    response_model=InvoiceSummary,
    status_code=status.HTTP_200_OK,
    summary="Invoice analytics summary",
    description="""
    Aggregate the filtered invoice set.

    Filters: vendor, currency, startDate + endDate (both required for the
    range to apply). Amounts are reconciled against line items before
    aggregation.
    """
)
async def analytics_summary(
    filters: Annotated[InvoiceFilter, Depends(analytics_filter_params)],
) -> InvoiceSummary:
    """Return the InvoiceSummary for the requested filters."""
    logger.info("Computing analytics summary")

    try:
        return await get_analytics_summary(get_supabase_client(), filters)

    except Exception as e:
        logger.error(f"Failed to compute analytics summary: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "analytics_error",
                "details": "Failed to fetch analytics"
            }
        )


@router.get(
    "/vendors",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
    summary="List vendors",
)
async def list_vendors() -> List[str]:
    try:
        return await get_vendor_list(get_supabase_client())

    except Exception as e:
        logger.error(f"Failed to fetch vendors: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch vendors"
            }
        )
