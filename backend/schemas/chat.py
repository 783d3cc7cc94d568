"""
Pydantic schemas for the invoice chat endpoint.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from backend.schemas.invoices import Invoice


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""
    message: str = Field(
        ...,
        min_length=1,
        description="Natural-language question about the invoices",
        examples=["Show me BuildSmart invoices from January"]
    )


class ChatResponse(BaseModel):
    """
    Response for POST /api/chat.

    `invoices` holds every matched invoice (not only the five summarised for
    the model). It is omitted when the request failed and the answer is an
    apology.
    """
    answer: str = Field(..., description="Model answer or apology")
    invoices: Optional[List[Invoice]] = Field(None, description="Matched invoices")
