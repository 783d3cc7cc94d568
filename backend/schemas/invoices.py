"""
Pydantic schemas for invoice endpoints.

These models define the request/response contracts for invoice records.
An invoice is a document with a header (summary fields) and an ordered list
of line items. Ownership fields keep the legacy camelCase wire names
(`userId`, `emailId`, `createdAt`, `updatedAt`) used by the web client.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Line items ---

class InvoiceLine(BaseModel):
    """A single itemized charge on an invoice."""
    line_number: int = Field(..., description="Position of the line within the invoice", examples=[1])
    line_type: str = Field(..., description="Line category", examples=["ITEM", "FREIGHT", "TAX"])
    description: str = Field(..., description="Free-text line description")
    quantity: float = Field(..., description="Quantity billed")
    unit_price: float = Field(..., description="Price per unit")
    line_amount: float = Field(..., description="Line total; the header amount is the sum of these")


# --- Header ---

class InvoiceHeader(BaseModel):
    """
    Invoice summary fields.

    INVARIANT: invoice_amount == sum(line.line_amount for line in invoice_lines).
    The server recomputes invoice_amount on every create, update and read,
    so any value sent by a client is advisory only.
    """
    organization_code: int = Field(..., description="Owning organization code", examples=[101])
    invoice_num: str = Field(..., min_length=1, description="Unique invoice number", examples=["INV-2023-004"])
    invoice_date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}",
        description="Invoice date (ISO-8601, YYYY-MM-DD)",
        examples=["2023-01-15"]
    )
    vendor_name: str = Field(..., description="Vendor name", examples=["BuildSmart"])
    vendor_site_code: str = Field(..., description="Vendor site code", examples=["BS-NYC"])
    invoice_amount: float = Field(0.0, description="Header total (server-computed from lines)")
    currency_code: str = Field(..., description="ISO currency code", examples=["USD"])
    payment_term: str = Field(..., description="Payment term", examples=["NET30"])
    invoice_type: str = Field(..., description="Invoice type", examples=["Standard", "Credit", "Prepayment"])
    pdf_link: Optional[str] = Field(None, description="Link to (or embedded payload of) the source document")


class InvoiceHeaderUpdate(BaseModel):
    """
    Partial header update for PUT /api/invoices/{invoice_num}.

    Every field is optional; unknown fields are rejected. invoice_amount is
    accepted for compatibility but always overwritten with the line total.
    """
    model_config = ConfigDict(extra="forbid")

    organization_code: Optional[int] = None
    invoice_num: Optional[str] = Field(None, min_length=1)
    invoice_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}")
    vendor_name: Optional[str] = None
    vendor_site_code: Optional[str] = None
    invoice_amount: Optional[float] = None
    currency_code: Optional[str] = None
    payment_term: Optional[str] = None
    invoice_type: Optional[str] = None
    pdf_link: Optional[str] = None


# --- Full document ---

class Invoice(BaseModel):
    """Invoice document as stored and as returned to clients."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", description="Storage identifier")
    invoice_header: InvoiceHeader
    invoice_lines: List[InvoiceLine] = Field(default_factory=list)
    user_id: Optional[str] = Field(None, alias="userId", description="Google subject id of the owner")
    source: Optional[str] = Field(None, description="How the invoice entered the system (manual/imported)")
    message_id: Optional[str] = Field(None, alias="emailId", description="Originating message identifier")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class InvoiceCreateRequest(BaseModel):
    """
    Request body for POST /api/invoices/user.

    The owner (userId) and timestamps are always set by the server.
    """
    model_config = ConfigDict(populate_by_name=True)

    invoice_header: InvoiceHeader
    invoice_lines: List[InvoiceLine] = Field(default_factory=list)
    source: Optional[str] = Field(None, description="Defaults to 'manual'")
    message_id: Optional[str] = Field(None, alias="emailId")


# --- List responses ---

class PaginationInfo(BaseModel):
    """Pagination metadata for invoice listings."""
    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(..., description="Number of invoices matching the filters")
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size; 0 means no pagination")
    total_pages: int = Field(..., alias="totalPages", description="ceil(total / limit)")


class InvoiceListResponse(BaseModel):
    """Response for GET /api/invoices and GET /api/invoices/user."""
    invoices: List[Invoice]
    pagination: PaginationInfo
