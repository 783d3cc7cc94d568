"""
Pytest configuration for invoice analytics backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

# Query builder methods that return the builder itself
CHAIN_METHODS = (
    "select", "insert", "update", "eq", "gte", "lte", "or_",
    "order", "range", "limit",
)


def make_response(data=None, count=None):
    """Simulate the object returned by PostgREST `.execute()`."""
    response = MagicMock()
    response.data = data if data is not None else []
    response.count = count
    return response


def make_invoice(
    invoice_num="INV-2023-001",
    vendor="BuildSmart",
    invoice_date="2023-01-15",
    invoice_type="Standard",
    currency="USD",
    line_amounts=(60.0, 40.0),
    invoice_amount=None,
    **extra,
):
    """Build an invoice row as stored in the invoices table."""
    lines = [
        {
            "line_number": i,
            "line_type": "ITEM",
            "description": f"Item {i}",
            "quantity": 1.0,
            "unit_price": amount,
            "line_amount": amount,
        }
        for i, amount in enumerate(line_amounts, 1)
    ]
    row = {
        "id": f"id-{invoice_num}",
        "invoice_num": invoice_num,
        "invoice_header": {
            "organization_code": 101,
            "invoice_num": invoice_num,
            "invoice_date": invoice_date,
            "vendor_name": vendor,
            "vendor_site_code": f"{vendor[:2].upper()}-01",
            "invoice_amount": sum(line_amounts) if invoice_amount is None else invoice_amount,
            "currency_code": currency,
            "payment_term": "NET30",
            "invoice_type": invoice_type,
        },
        "invoice_lines": lines,
        "user_id": None,
        "source": "manual",
        "message_id": None,
        "created_at": "2023-01-15T10:00:00+00:00",
        "updated_at": "2023-01-15T10:00:00+00:00",
    }
    row.update(extra)
    return row


def make_supabase_mock(*responses):
    """
    Create a Supabase client mock whose table query chain is fluent.

    Each `.execute()` call returns the next response in order.

    Returns:
        (client, query) - query records every chained call
    """
    query = MagicMock()
    for method in CHAIN_METHODS:
        getattr(query, method).return_value = query
    query.execute.side_effect = list(responses)

    client = MagicMock()
    client.table.return_value = query
    return client, query


@pytest.fixture
def supabase_mock():
    """Factory fixture: supabase_mock(*responses) -> (client, query)."""
    return make_supabase_mock


@pytest.fixture
def invoice_factory():
    """Factory fixture building stored invoice rows."""
    return make_invoice


@pytest.fixture
def response_factory():
    """Factory fixture building `.execute()` results."""
    return make_response
