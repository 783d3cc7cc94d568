"""
Invoice persistence service.

CRITICAL RULES:
1. Every invoice returned to a caller has passed through reconciliation
   (invoice_header.invoice_amount == sum of line_amount)
2. Header updates ALWAYS recompute invoice_amount from the current lines,
   overriding any amount sent by the caller
3. Invoices are addressed by their business key, invoice_header.invoice_num
4. Line items are not independently editable
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, cast

from postgrest.exceptions import APIError
from supabase import Client

from backend.config import settings
from backend.services.filters import (
    DATE_PATH,
    INVOICE_NUM_PATH,
    VENDOR_PATH,
    InvoiceFilter,
    apply_invoice_filter,
)
from backend.services.reconciliation import compute_invoice_total, reconcile_invoice, reconcile_invoices
from backend.utils.constants import INVOICE_SOURCES

logger = logging.getLogger(__name__)


# PostgREST caps unranged selects at db-max-rows (1000 on Supabase)
FETCH_BATCH_SIZE = 1000

# PostgREST error code for an offset past the last matching row
RANGE_NOT_SATISFIABLE = "PGRST103"


class InvoiceAlreadyExistsError(Exception):
    """Raised when creating an invoice whose number is already stored."""

    def __init__(self, invoice_num: str):
        super().__init__(f"Invoice {invoice_num} already exists")
        self.invoice_num = invoice_num


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def total_pages(total: int, limit: int) -> int:
    """
    Number of pages for a listing.

    limit=0 means "no pagination": everything fits on one page.
    """
    if limit <= 0:
        return 1 if total > 0 else 0
    return -(-total // limit)


def fetch_all_rows(build_query: Callable[[], Any]) -> Tuple[List[Dict[str, Any]], int]:
    """
    Read every row of a query in FETCH_BATCH_SIZE slices.

    Args:
        build_query: Returns a fresh, unranged select built with count="exact"

    Returns:
        Tuple of (all rows, total count reported by the server)
    """
    rows: List[Dict[str, Any]] = []
    total: Optional[int] = None

    while True:
        offset = len(rows)
        result = build_query().range(offset, offset + FETCH_BATCH_SIZE - 1).execute()
        batch = cast(List[Dict[str, Any]], result.data or [])
        rows.extend(batch)

        if result.count is not None:
            total = result.count

        if not batch:
            break
        if total is not None:
            if len(rows) >= total:
                break
        elif len(batch) < FETCH_BATCH_SIZE:
            break

    return rows, total if total is not None else len(rows)


def _invoice_query(
    supabase_client: Client,
    filters: InvoiceFilter,
    user_id: Optional[str],
    columns: str = "*",
) -> Any:
    query = supabase_client.table(settings.INVOICES_TABLE).select(columns, count="exact")

    if user_id is not None:
        query = query.eq("user_id", user_id)

    return apply_invoice_filter(query, filters)


async def list_invoices(
    supabase_client: Client,
    filters: Optional[InvoiceFilter] = None,
    page: int = 1,
    limit: int = 10,
    user_id: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch a page of invoices matching the filters, newest invoice date first.

    Args:
        supabase_client: Supabase client
        filters: Normalized filter (None = no filtering)
        page: 1-based page number
        limit: Page size; 0 returns every matching invoice
        user_id: If given, only invoices owned by this user

    Returns:
        Tuple of (reconciled invoices on the page, total matching count).
        A page past the end is empty, with the real total.
    """
    filters = filters or InvoiceFilter()
    page = max(page, 1)

    logger.debug(
        f"Listing invoices (page={page}, limit={limit}, user_id={user_id}, filters={filters})"
    )

    def build_query() -> Any:
        # id breaks date ties so consecutive ranges do not overlap
        return (
            _invoice_query(supabase_client, filters, user_id)
            .order(DATE_PATH, desc=True)
            .order("id")
        )

    if limit > 0:
        offset = (page - 1) * limit
        try:
            result = build_query().range(offset, offset + limit - 1).execute()
        except APIError as e:
            if e.code != RANGE_NOT_SATISFIABLE:
                raise
            counted = _invoice_query(supabase_client, filters, user_id, columns="id").limit(1).execute()
            logger.info(f"Page {page} is past the last of {counted.count} matching invoices")
            return [], counted.count or 0

        invoices = cast(List[Dict[str, Any]], result.data or [])
        total = result.count if result.count is not None else len(invoices)
    else:
        invoices, total = fetch_all_rows(build_query)

    await reconcile_invoices(supabase_client, invoices)

    logger.info(f"Fetched {len(invoices)} of {total} matching invoices")

    return invoices, total


async def get_invoice_by_number(
    supabase_client: Client,
    invoice_num: str,
) -> Optional[Dict[str, Any]]:
    """
    Fetch a single invoice by invoice number.

    Returns:
        Reconciled invoice if found, None otherwise
    """
    logger.debug(f"Fetching invoice {invoice_num}")

    result = (
        supabase_client.table(settings.INVOICES_TABLE)
        .select("*")
        .eq(INVOICE_NUM_PATH, invoice_num)
        .limit(1)
        .execute()
    )

    if not result.data:
        logger.warning(f"Invoice {invoice_num} not found")
        return None

    invoice = cast(Dict[str, Any], result.data[0])
    return await reconcile_invoice(supabase_client, invoice)


async def update_invoice_header(
    supabase_client: Client,
    invoice_num: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Apply a partial header update.

    The stored header is merged with `changes`, then invoice_amount is set to
    the sum of the CURRENT line items regardless of what `changes` contains.

    Args:
        supabase_client: Supabase client
        invoice_num: Invoice number to update
        changes: Header fields to overwrite (already validated)

    Returns:
        The updated invoice, or None if no invoice has this number

    Raises:
        InvoiceAlreadyExistsError: If the invoice is renumbered onto a stored number
    """
    result = (
        supabase_client.table(settings.INVOICES_TABLE)
        .select("*")
        .eq(INVOICE_NUM_PATH, invoice_num)
        .limit(1)
        .execute()
    )

    if not result.data:
        logger.warning(f"Cannot update invoice {invoice_num}: not found")
        return None

    current = cast(Dict[str, Any], result.data[0])

    new_num = changes.get("invoice_num")
    if new_num and new_num != invoice_num:
        existing = (
            supabase_client.table(settings.INVOICES_TABLE)
            .select("id")
            .eq(INVOICE_NUM_PATH, new_num)
            .limit(1)
            .execute()
        )
        if existing.data:
            raise InvoiceAlreadyExistsError(new_num)

    total = compute_invoice_total(current.get("invoice_lines"))

    header = {**(current.get("invoice_header") or {}), **changes, "invoice_amount": total}

    update_data: Dict[str, Any] = {
        "invoice_header": header,
        "invoice_num": header.get("invoice_num", invoice_num),
        "updated_at": _utc_now(),
    }

    logger.info(f"Updating invoice {invoice_num}: fields={sorted(changes)}")

    try:
        updated = (
            supabase_client.table(settings.INVOICES_TABLE)
            .update(update_data)
            .eq(INVOICE_NUM_PATH, invoice_num)
            .execute()
        )
    except APIError as e:
        if e.code == "23505":
            raise InvoiceAlreadyExistsError(update_data["invoice_num"]) from e
        raise

    if updated.data:
        return cast(Dict[str, Any], updated.data[0])

    # Some PostgREST setups return no representation on update
    return {**current, **update_data}


async def create_invoice(
    supabase_client: Client,
    invoice_header: Dict[str, Any],
    invoice_lines: List[Dict[str, Any]],
    user_id: Optional[str] = None,
    source: Optional[str] = None,
    message_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Insert a new invoice.

    invoice_amount is computed from the lines before insert, so a new
    invoice never starts out inconsistent.

    Args:
        supabase_client: Supabase client
        invoice_header: Validated header fields
        invoice_lines: Validated line items
        user_id: Owner (Google subject id), None for unowned imports
        source: INVOICE_SOURCES value (defaults to manual)
        message_id: Originating message identifier, if any

    Returns:
        The created invoice record

    Raises:
        InvoiceAlreadyExistsError: If the invoice number is already stored
        Exception: If the database operation fails
    """
    invoice_num = invoice_header["invoice_num"]

    existing = (
        supabase_client.table(settings.INVOICES_TABLE)
        .select("id")
        .eq(INVOICE_NUM_PATH, invoice_num)
        .limit(1)
        .execute()
    )
    if existing.data:
        raise InvoiceAlreadyExistsError(invoice_num)

    now = _utc_now()
    header = {**invoice_header, "invoice_amount": compute_invoice_total(invoice_lines)}

    invoice_data = {
        "invoice_num": invoice_num,
        "invoice_header": header,
        "invoice_lines": invoice_lines,
        "user_id": user_id,
        "source": source or INVOICE_SOURCES["MANUAL"],
        "message_id": message_id,
        "created_at": now,
        "updated_at": now,
    }

    logger.info(
        f"Creating invoice {invoice_num} for user {user_id}: "
        f"vendor={header.get('vendor_name')}, lines={len(invoice_lines)}"
    )

    try:
        result = supabase_client.table(settings.INVOICES_TABLE).insert(invoice_data).execute()
    except APIError as e:
        # unique index on invoice_num: a concurrent request inserted it first
        if e.code == "23505":
            raise InvoiceAlreadyExistsError(invoice_num) from e
        raise

    if not result.data:
        raise Exception("Failed to create invoice: no data returned")

    created_invoice = cast(Dict[str, Any], result.data[0])

    logger.info(f"Invoice created successfully: invoice_num={invoice_num}")

    return created_invoice


async def get_vendor_list(supabase_client: Client) -> List[str]:
    """
    Fetch the sorted list of distinct vendor names.
    """
    rows, _ = fetch_all_rows(
        lambda: supabase_client.table(settings.INVOICES_TABLE).select(
            f"vendor_name:{VENDOR_PATH}", count="exact"
        ).order("id")
    )
    vendors = sorted({row["vendor_name"] for row in rows if row.get("vendor_name")})

    logger.debug(f"Found {len(vendors)} distinct vendors")

    return vendors
