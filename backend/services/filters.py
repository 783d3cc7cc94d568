"""
Invoice filter construction.

Turns the loose set of optional query-string parameters accepted by the
list, analytics, export and chat paths into one explicit InvoiceFilter, and
applies that filter to a PostgREST query on the invoices table.

Rules:
- Empty or whitespace-only values are treated as absent
- The date range applies only when BOTH start and end are given;
  a single bound is dropped entirely (never a one-sided range)
- Search is a case-insensitive substring match on invoice number OR vendor
- Values are not checked against any vocabulary; unknown values match nothing
"""

from dataclasses import dataclass
from typing import Any, Optional

# JSON paths into the invoice_header document column
VENDOR_PATH = "invoice_header->>vendor_name"
CURRENCY_PATH = "invoice_header->>currency_code"
TYPE_PATH = "invoice_header->>invoice_type"
DATE_PATH = "invoice_header->>invoice_date"
INVOICE_NUM_PATH = "invoice_header->>invoice_num"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class InvoiceFilter:
    """
    Normalized invoice filter.

    Build instances with `from_params` so the normalization rules are applied
    once at the boundary; the fields are then trusted as-is.
    """
    vendor: Optional[str] = None
    currency: Optional[str] = None
    invoice_type: Optional[str] = None
    search: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        vendor: Optional[str] = None,
        currency: Optional[str] = None,
        invoice_type: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> "InvoiceFilter":
        """
        Normalize raw request parameters into an InvoiceFilter.

        Args:
            vendor: Exact vendor name
            currency: Exact currency code
            invoice_type: Exact invoice type
            search: Substring of invoice number or vendor name
            start_date: Inclusive lower bound (YYYY-MM-DD)
            end_date: Inclusive upper bound (YYYY-MM-DD)

        Returns:
            InvoiceFilter with empty values removed and a partial date
            range discarded.
        """
        start = _clean(start_date)
        end = _clean(end_date)
        if not (start and end):
            start = end = None

        return cls(
            vendor=_clean(vendor),
            currency=_clean(currency),
            invoice_type=_clean(invoice_type),
            search=_clean(search),
            start_date=start,
            end_date=end,
        )

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    @property
    def is_empty(self) -> bool:
        return not any((
            self.vendor,
            self.currency,
            self.invoice_type,
            self.search,
            self.has_date_range,
        ))


def _quote_postgrest_value(value: str) -> str:
    """Quote a value for use inside a PostgREST or=(...) expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_expression(search: str) -> str:
    """
    Build the PostgREST `or` expression for free-text search.

    % and _ in the search text are literal characters, not wildcards.

    Example:
        >>> build_search_expression("smart")
        'invoice_header->>invoice_num.ilike."*smart*",invoice_header->>vendor_name.ilike."*smart*"'
    """
    pattern = _quote_postgrest_value(f"*{_escape_like(search)}*")
    return f"{INVOICE_NUM_PATH}.ilike.{pattern},{VENDOR_PATH}.ilike.{pattern}"


def apply_invoice_filter(query: Any, filters: InvoiceFilter) -> Any:
    """
    Apply an InvoiceFilter to a Supabase/PostgREST select query.

    Args:
        query: Query builder returned by client.table(...).select(...)
        filters: Normalized filter

    Returns:
        The query builder with the filter conditions added.
    """
    if filters.vendor:
        query = query.eq(VENDOR_PATH, filters.vendor)

    if filters.currency:
        query = query.eq(CURRENCY_PATH, filters.currency)

    if filters.invoice_type:
        query = query.eq(TYPE_PATH, filters.invoice_type)

    if filters.has_date_range:
        query = query.gte(DATE_PATH, filters.start_date).lte(DATE_PATH, filters.end_date)

    if filters.search:
        query = query.or_(build_search_expression(filters.search))

    return query
