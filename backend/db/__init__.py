"""
Database access layer for the invoice analytics backend.

The `invoices` table is used as a document store: each row keeps the
invoice header and its line items as JSON (`invoice_header`,
`invoice_lines`) next to a few flat ownership columns (`user_id`,
`source`, `message_id`, `created_at`, `updated_at`). Google OAuth
identities live in `google_users`.

DO NOT define table schemas or migrations here.
"""

from .client import get_supabase_client, reset_supabase_client

__all__ = ["get_supabase_client", "reset_supabase_client"]
