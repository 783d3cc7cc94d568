"""
Pydantic schemas for analytics endpoints.
"""

from typing import List

from pydantic import BaseModel, Field


class InvoiceTypeBreakdown(BaseModel):
    """Count and summed amount for one invoice type."""
    type: str = Field(..., description="Invoice type", examples=["Standard"])
    count: int = Field(..., description="Number of invoices of this type")
    amount: float = Field(..., description="Sum of header amounts for this type")


class MonthlyTotal(BaseModel):
    """Summed header amount for one calendar month."""
    month: str = Field(..., description="Month key (YYYY-MM)", examples=["2023-01"])
    amount: float = Field(..., description="Sum of header amounts in the month")


class InvoiceSummary(BaseModel):
    """
    Response for GET /api/analytics/summary.

    All four aggregates are computed over the same filtered, reconciled set:
    - invoice_types is sorted by descending count
    - monthly_totals is sorted ascending by month
    """
    total_invoices: int = Field(..., description="Number of matching invoices")
    total_amount: float = Field(..., description="Sum of reconciled header amounts")
    invoice_types: List[InvoiceTypeBreakdown] = Field(default_factory=list)
    monthly_totals: List[MonthlyTotal] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "total_invoices": 3,
                    "total_amount": 4250.0,
                    "invoice_types": [
                        {"type": "Standard", "count": 2, "amount": 4000.0},
                        {"type": "Credit", "count": 1, "amount": 250.0}
                    ],
                    "monthly_totals": [
                        {"month": "2023-01", "amount": 1500.0},
                        {"month": "2023-02", "amount": 2750.0}
                    ]
                }
            ]
        }
    }
