"""
FastAPI dependency functions for authentication.

Login state lives in the signed session cookie (Starlette SessionMiddleware):
after a successful Google OAuth callback the session holds the user's
Google subject id under SESSION_USER_KEY. These dependencies resolve that
id back to the stored GoogleUser on each request.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status

from backend.db.client import get_supabase_client
from backend.schemas.auth import GoogleUser
from backend.services.user_service import get_google_user_by_id

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
SESSION_STATE_KEY = "oauth_state"


async def get_optional_user(request: Request) -> Optional[GoogleUser]:
    """
    Resolve the session to a GoogleUser, or None when not logged in.

    A session pointing at a user that no longer exists is cleared.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None

    user = await get_google_user_by_id(get_supabase_client(), user_id)

    if user is None:
        logger.warning(f"Session references unknown user {user_id}; clearing session")
        request.session.clear()
        return None

    return user


async def get_current_user(request: Request) -> GoogleUser:
    """
    Require a logged-in user.

    Raises:
        HTTPException: 401 if the session has no valid user

    Usage:
        @router.get("/invoices/user")
        async def list_user_invoices(user: GoogleUser = Depends(get_current_user)):
            ...
    """
    user = await get_optional_user(request)

    if user is None:
        logger.warning(f"Unauthenticated access to {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "details": "Authentication required"}
        )

    return user
