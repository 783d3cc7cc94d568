"""
Spreadsheet export endpoint.

GET /api/export/invoices streams an .xlsx workbook of every invoice matching
the same filters as GET /api/invoices (no pagination).
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from backend.db.client import get_supabase_client
from backend.routes.params import invoice_filter_params
from backend.services import InvoiceFilter, build_invoice_workbook, export_filename, list_invoices

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get(
    "/invoices",
    status_code=status.HTTP_200_OK,
    summary="Export invoices to Excel",
    description="""
    Download the filtered invoices as a workbook with two sheets:
    - "Invoice Headers": one row per invoice
    - "Invoice Lines": one row per line item, prefixed by its invoice number
    """,
    response_class=StreamingResponse,
)
async def export_invoices(
    filters: Annotated[InvoiceFilter, Depends(invoice_filter_params)],
) -> StreamingResponse:
    """Build and stream the export workbook."""
    try:
        invoices, total = await list_invoices(
            supabase_client=get_supabase_client(),
            filters=filters,
            limit=0,
        )
        buffer = build_invoice_workbook(invoices)

    except Exception as e:
        logger.error(f"Failed to export invoices: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "export_error",
                "details": "Failed to export invoices"
            }
        )

    filename = export_filename()
    logger.info(f"Exporting {total} invoices to {filename}")

    return StreamingResponse(
        buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
