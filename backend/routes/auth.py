"""
Auth API endpoints (Google OAuth 2.0 with session cookies).

- GET /api/auth/google - redirect to Google's consent screen
- GET /api/auth/google/callback - finish login, then redirect to "/"
- GET /api/auth/logout - end the session
- GET /api/auth/user - identity of the logged-in user

Any failure during the callback redirects to "/auth" so the web client can
show its login page again.
"""

import logging
import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from jwt.exceptions import InvalidTokenError

from backend.auth.dependencies import SESSION_STATE_KEY, SESSION_USER_KEY, get_optional_user
from backend.auth.google import (
    OAuthError,
    build_authorization_url,
    build_google_user,
    exchange_code_for_tokens,
    verify_id_token,
)
from backend.config import settings
from backend.db.client import get_supabase_client
from backend.schemas.auth import GoogleUser, LogoutResponse, SessionUserResponse
from backend.services import upsert_google_user

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_REDIRECT = "/"
LOGIN_FAILURE_REDIRECT = "/auth"

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get(
    "/google",
    summary="Start Google login",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
)
async def google_login(request: Request) -> RedirectResponse:
    """
    Redirect to Google's consent screen.

    A random state is stored in the session and checked on callback.

    Raises:
        HTTPException 503: If OAuth credentials are not configured
    """
    if not settings.oauth_configured:
        logger.error("Google OAuth requested but GOOGLE_CLIENT_ID/SECRET are not set")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "oauth_not_configured",
                "details": "Google login is not available"
            }
        )

    state = secrets.token_urlsafe(32)
    request.session[SESSION_STATE_KEY] = state

    return RedirectResponse(build_authorization_url(state))


@router.get(
    "/google/callback",
    summary="Google OAuth callback",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
)
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
) -> RedirectResponse:
    """
    Complete the authorization-code flow.

    1. Check the state against the session
    2. Exchange the code for tokens
    3. Verify the id_token
    4. Create or refresh the stored GoogleUser
    5. Store the user id in the session
    """
    expected_state = request.session.pop(SESSION_STATE_KEY, None)

    if error or not code:
        logger.warning(f"Google login did not return a code (error={error})")
        return RedirectResponse(LOGIN_FAILURE_REDIRECT)

    if not state or state != expected_state:
        logger.warning("Google login state mismatch")
        return RedirectResponse(LOGIN_FAILURE_REDIRECT)

    try:
        tokens = await exchange_code_for_tokens(code)
        claims = verify_id_token(tokens["id_token"])
        user = await upsert_google_user(get_supabase_client(), build_google_user(tokens, claims))

    except (OAuthError, InvalidTokenError) as e:
        logger.warning(f"Google login rejected: {e}")
        return RedirectResponse(LOGIN_FAILURE_REDIRECT)
    except Exception as e:
        logger.error(f"Google login failed: {e}", exc_info=True)
        return RedirectResponse(LOGIN_FAILURE_REDIRECT)

    request.session[SESSION_USER_KEY] = user.id
    logger.info(f"User {user.id} logged in")

    return RedirectResponse(LOGIN_SUCCESS_REDIRECT)


@router.get(
    "/logout",
    response_model=LogoutResponse,
    status_code=status.HTTP_200_OK,
    summary="Log out",
)
async def logout(request: Request) -> LogoutResponse:
    user_id = request.session.get(SESSION_USER_KEY)
    request.session.clear()

    if user_id:
        logger.info(f"User {user_id} logged out")

    return LogoutResponse()


@router.get(
    "/user",
    response_model=SessionUserResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    summary="Get logged-in user",
    description="Returns the safe identity fields of the session user, or 401 when not logged in.",
    responses={401: {"description": "Not authenticated"}},
)
async def get_session_user(
    user: Annotated[Optional[GoogleUser], Depends(get_optional_user)],
):
    if user is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Not authenticated"},
        )

    return SessionUserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
    )
