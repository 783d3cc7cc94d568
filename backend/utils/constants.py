"""
Domain constants for invoice records.

INVOICE_SOURCES marks how an invoice entered the system (invoice.source).
INVOICE_TYPES is the vocabulary used by the chat intent extractor; the
HTTP filters do not validate against it.
"""

INVOICE_SOURCES = {
    # Created by an authenticated user through POST /api/invoices/user
    'MANUAL': 'manual',

    # Loaded in bulk by scripts/import_invoices.py
    'IMPORTED': 'imported',
}

INVOICE_TYPES = ("Standard", "Credit", "Prepayment")

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
