"""
Invoice API endpoints.

Public endpoints:
- GET /api/invoices - paginated, filtered listing
- GET /api/invoices/{invoice_num} - single invoice
- PUT /api/invoices/{invoice_num} - partial header update

Authenticated endpoints (session cookie):
- GET /api/invoices/user - caller's invoices
- POST /api/invoices/user - create an invoice owned by the caller

Every invoice returned here has passed through amount reconciliation.
The /user routes are declared before /{invoice_num} so "user" is never
read as an invoice number.
"""

import logging
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from backend.auth.dependencies import get_current_user
from backend.db.client import get_supabase_client
from backend.routes.params import invoice_filter_params
from backend.schemas.auth import GoogleUser
from backend.schemas.invoices import (
    Invoice,
    InvoiceCreateRequest,
    InvoiceHeaderUpdate,
    InvoiceListResponse,
    PaginationInfo,
)
from backend.services import (
    InvoiceAlreadyExistsError,
    InvoiceFilter,
    create_invoice,
    get_invoice_by_number,
    list_invoices,
    total_pages,
    update_invoice_header,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _build_list_response(
    invoices: List[Dict[str, Any]],
    total: int,
    page: int,
    limit: int,
) -> InvoiceListResponse:
    return InvoiceListResponse(
        invoices=[Invoice.model_validate(inv) for inv in invoices],
        pagination=PaginationInfo(
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        ),
    )


def _not_found(invoice_num: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "not_found",
            "details": f"Invoice {invoice_num} not found"
        }
    )


@router.get(
    "",
    response_model=InvoiceListResponse,
    status_code=status.HTTP_200_OK,
    summary="List invoices",
    description="""
    Retrieve a page of invoices, newest invoice date first.

    Filters (all optional, empty values ignored):
    - vendor, currency, invoiceType: exact match
    - search: case-insensitive substring of invoice number or vendor name
    - startDate + endDate: inclusive range, applied only when both are given

    limit=0 disables pagination and returns every matching invoice.
    """
)
async def list_all_invoices(
    filters: Annotated[InvoiceFilter, Depends(invoice_filter_params)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=0)] = 10,
) -> InvoiceListResponse:
    """
    List invoices with filters and pagination.

    Returns:
        InvoiceListResponse with invoices and pagination metadata
    """
    logger.info(f"Listing invoices (page={page}, limit={limit})")

    try:
        invoices, total = await list_invoices(
            supabase_client=get_supabase_client(),
            filters=filters,
            page=page,
            limit=limit,
        )
        return _build_list_response(invoices, total, page, limit)

    except Exception as e:
        logger.error(f"Failed to fetch invoices: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch invoices"
            }
        )


@router.get(
    "/user",
    response_model=InvoiceListResponse,
    status_code=status.HTTP_200_OK,
    summary="List the caller's invoices",
    description="""
    Same filters and pagination as GET /api/invoices, restricted to invoices
    owned by the logged-in user.

    Security:
    - Requires a logged-in session (401 otherwise)
    """
)
async def list_user_invoices(
    user: Annotated[GoogleUser, Depends(get_current_user)],
    filters: Annotated[InvoiceFilter, Depends(invoice_filter_params)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=0)] = 10,
) -> InvoiceListResponse:
    """List invoices owned by the authenticated user."""
    logger.info(f"Listing invoices for user {user.id} (page={page}, limit={limit})")

    try:
        invoices, total = await list_invoices(
            supabase_client=get_supabase_client(),
            filters=filters,
            page=page,
            limit=limit,
            user_id=user.id,
        )
        return _build_list_response(invoices, total, page, limit)

    except Exception as e:
        logger.error(f"Failed to fetch invoices for user {user.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch user invoices"
            }
        )


@router.post(
    "/user",
    response_model=Invoice,
    status_code=status.HTTP_201_CREATED,
    summary="Create an invoice",
    description="""
    Create an invoice owned by the logged-in user.

    - The body is validated against the header and line schemas
    - invoice_amount is computed from the lines; any sent value is ignored
    - userId, createdAt and updatedAt are set by the server

    Errors:
    - 400 on schema validation failure
    - 401 without a logged-in session
    - 409 if the invoice number already exists
    """
)
async def create_user_invoice(
    request: InvoiceCreateRequest,
    user: Annotated[GoogleUser, Depends(get_current_user)],
) -> Invoice:
    """Persist a new user-owned invoice."""
    invoice_num = request.invoice_header.invoice_num

    logger.info(f"Creating invoice {invoice_num} for user {user.id}")

    try:
        created = await create_invoice(
            supabase_client=get_supabase_client(),
            invoice_header=request.invoice_header.model_dump(),
            invoice_lines=[line.model_dump() for line in request.invoice_lines],
            user_id=user.id,
            source=request.source,
            message_id=request.message_id,
        )
        return Invoice.model_validate(created)

    except InvoiceAlreadyExistsError:
        logger.warning(f"Invoice {invoice_num} already exists")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "invoice_exists",
                "details": f"Invoice {invoice_num} already exists"
            }
        )
    except Exception as e:
        logger.error(f"Failed to create invoice {invoice_num}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "persistence_error",
                "details": "Failed to create invoice"
            }
        )


@router.get(
    "/{invoice_num}",
    response_model=Invoice,
    status_code=status.HTTP_200_OK,
    summary="Get invoice details",
    description="Retrieve one invoice with its line items by invoice number. Returns 404 if unknown."
)
async def get_invoice(invoice_num: str) -> Invoice:
    """
    Get a single invoice.

    Raises:
        HTTPException 404: If no invoice has this number
    """
    logger.info(f"Fetching invoice {invoice_num}")

    try:
        invoice = await get_invoice_by_number(get_supabase_client(), invoice_num)
    except Exception as e:
        logger.error(f"Failed to fetch invoice {invoice_num}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to fetch invoice details"
            }
        )

    if not invoice:
        raise _not_found(invoice_num)

    return Invoice.model_validate(invoice)


@router.put(
    "/{invoice_num}",
    response_model=Invoice,
    status_code=status.HTTP_200_OK,
    summary="Update invoice header",
    description="""
    Update selected invoice header fields.

    - Only header fields are accepted; unknown fields are rejected (400)
    - invoice_amount is always recomputed from the current line items
    - Returns 404 if the invoice does not exist
    - Returns 409 if invoice_num is changed to a number already stored
    """
)
async def update_invoice(
    invoice_num: str,
    request: Annotated[InvoiceHeaderUpdate, Body()],
) -> Invoice:
    """Apply a partial header update and return the updated invoice."""
    changes = request.model_dump(exclude_unset=True)
    changes.pop("invoice_amount", None)

    logger.info(f"Updating invoice {invoice_num}")

    try:
        updated = await update_invoice_header(get_supabase_client(), invoice_num, changes)
    except InvoiceAlreadyExistsError as e:
        logger.warning(f"Cannot renumber invoice {invoice_num}: {e.invoice_num} already exists")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "invoice_exists",
                "details": f"Invoice {e.invoice_num} already exists"
            }
        )
    except Exception as e:
        logger.error(f"Failed to update invoice {invoice_num}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "update_error",
                "details": "Failed to update invoice"
            }
        )

    if not updated:
        raise _not_found(invoice_num)

    return Invoice.model_validate(updated)
