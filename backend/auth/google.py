"""
Google OAuth 2.0 / OpenID Connect client.

Implements the authorization-code flow used by /api/auth/google:
1. build_authorization_url() - consent screen URL carrying an anti-CSRF state
2. exchange_code_for_tokens() - POST the code to Google's token endpoint
3. verify_id_token() - check the returned id_token against Google's JWKS
4. build_google_user() - map claims + tokens to a GoogleUser

The id_token signature is verified with PyJWT's PyJWKClient, which fetches
and caches Google's public keys.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from urllib.parse import urlencode

import httpx
from jwt import PyJWKClient, decode
from jwt.exceptions import InvalidTokenError

from backend.config import settings
from backend.schemas.auth import GoogleUser

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")
OAUTH_SCOPES = ("openid", "email", "profile")

_jwks_client: PyJWKClient | None = None


class OAuthError(Exception):
    """Raised when the provider rejects the code exchange or returns bad data."""


def get_google_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client for Google's signing keys.

    The client caches keys and handles key rotation.
    """
    global _jwks_client

    if _jwks_client is None:
        logger.info(f"Initializing JWKS client with URL: {GOOGLE_JWKS_URL}")
        _jwks_client = PyJWKClient(
            GOOGLE_JWKS_URL,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def build_authorization_url(state: str) -> str:
    """Google consent screen URL for this application."""
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": " ".join(OAUTH_SCOPES),
        "state": state,
        "access_type": "offline",
        "include_granted_scopes": "true",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


async def exchange_code_for_tokens(code: str) -> Dict[str, Any]:
    """
    Exchange an authorization code for tokens.

    Returns:
        Token response (access_token, id_token, expires_in, refresh_token?)

    Raises:
        OAuthError: If Google does not return a usable token response
    """
    data = {
        "code": code,
        "client_id": settings.GOOGLE_CLIENT_ID,
        "client_secret": settings.GOOGLE_CLIENT_SECRET,
        "redirect_uri": settings.GOOGLE_CALLBACK_URL,
        "grant_type": "authorization_code",
    }

    async with httpx.AsyncClient(timeout=30) as client:
        response = await client.post(GOOGLE_TOKEN_URL, data=data)

    if response.status_code != 200:
        logger.warning(f"Google token exchange failed with status {response.status_code}")
        raise OAuthError("Failed to exchange authorization code")

    tokens = response.json()

    if not tokens.get("access_token") or not tokens.get("id_token"):
        raise OAuthError("Token response missing access_token or id_token")

    return tokens


def verify_id_token(id_token: str) -> Dict[str, Any]:
    """
    Verify a Google id_token and return its claims.

    Checks signature (RS256 via JWKS), expiry, audience (our client id) and
    issuer.

    Raises:
        InvalidTokenError: If any check fails
    """
    signing_key = get_google_jwks_client().get_signing_key_from_jwt(id_token)

    claims = decode(
        id_token,
        signing_key.key,
        algorithms=["RS256"],
        audience=settings.GOOGLE_CLIENT_ID,
        options={
            "verify_signature": True,
            "verify_exp": True,
            "verify_aud": True,
        }
    )

    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise InvalidTokenError(f"Unexpected issuer: {claims.get('iss')}")

    if not claims.get("sub"):
        raise InvalidTokenError("Token payload missing 'sub' claim")

    return claims


def build_google_user(tokens: Dict[str, Any], claims: Dict[str, Any]) -> GoogleUser:
    """Map verified id_token claims and the token response to a GoogleUser."""
    token_expiry = None
    expires_in = tokens.get("expires_in")
    if expires_in:
        token_expiry = (datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))).isoformat()

    email = claims.get("email") or ""

    return GoogleUser(
        id=str(claims["sub"]),
        email=email,
        display_name=claims.get("name") or email,
        first_name=claims.get("given_name"),
        last_name=claims.get("family_name"),
        profile_image_url=claims.get("picture"),
        access_token=tokens["access_token"],
        refresh_token=tokens.get("refresh_token"),
        token_expiry=token_expiry,
    )
