"""
Supabase client factory.

Invoices are a shared dataset (list, analytics and export endpoints are
public), so the backend talks to Supabase with a single server-side key
instead of per-user tokens. Ownership of user-created invoices is carried
in the `user_id` column and filtered explicitly by the service layer.
"""

import logging

from backend.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)

# Created lazily on first use and reused for the life of the process.
# The underlying HTTP connection pool is owned by the Supabase client.
_supabase_client: Client | None = None


def get_supabase_client() -> Client:
    """
    Get or create the process-wide Supabase client.

    Returns:
        A Supabase client authenticated with SUPABASE_KEY.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_KEY is not configured.

    Example:
        >>> client = get_supabase_client()
        >>> result = client.table("invoices").select("*").execute()
    """
    global _supabase_client

    if _supabase_client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY must be configured "
                "to access the invoice store."
            )

        _supabase_client = create_client(
            supabase_url=settings.SUPABASE_URL,
            supabase_key=settings.SUPABASE_KEY
        )
        logger.info("Supabase client initialized")

    return _supabase_client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call builds a fresh one."""
    global _supabase_client
    _supabase_client = None
