"""
Tests for /api/auth endpoints and the session-based auth dependencies.

Google is never contacted: the token exchange, id_token verification and
user persistence are patched at the route module.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from backend.auth.dependencies import get_optional_user
from backend.auth.google import OAuthError
from backend.main import app
from backend.schemas.auth import GoogleUser

TEST_USER = GoogleUser(
    id="google-sub-1",
    email="ana@example.com",
    display_name="Ana Perez",
    first_name="Ana",
    last_name="Perez",
    access_token="secret-access-token",
    refresh_token="secret-refresh-token",
)


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


def _start_login(client) -> str:
    """Hit /api/auth/google and return the state stored in the session."""
    response = client.get("/api/auth/google", follow_redirects=False)
    assert response.status_code == 307
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


@pytest.fixture
def mock_google():
    """Patch the OAuth helpers used by the callback."""
    with patch(
        "backend.routes.auth.exchange_code_for_tokens",
        new=AsyncMock(return_value={"access_token": "a", "id_token": "i"}),
    ) as exchange, \
         patch("backend.routes.auth.verify_id_token", return_value={"sub": "google-sub-1"}), \
         patch("backend.routes.auth.build_google_user", return_value=TEST_USER), \
         patch("backend.routes.auth.upsert_google_user", new=AsyncMock(return_value=TEST_USER)) as upsert, \
         patch("backend.routes.auth.get_supabase_client", return_value=MagicMock()):
        yield {"exchange": exchange, "upsert": upsert}


class TestGoogleLogin:

    def test_redirects_to_google(self, client):
        response = client.get("/api/auth/google", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"].startswith("https://accounts.google.com/")

    def test_not_configured_is_503(self, client):
        with patch("backend.routes.auth.settings") as mock_settings:
            mock_settings.oauth_configured = False
            response = client.get("/api/auth/google", follow_redirects=False)

        assert response.status_code == 503


class TestGoogleCallback:

    def test_success_logs_in_and_redirects_home(self, client, mock_google):
        state = _start_login(client)

        response = client.get(
            "/api/auth/google/callback",
            params={"code": "code-1", "state": state},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/"
        mock_google["exchange"].assert_awaited_once_with("code-1")
        mock_google["upsert"].assert_awaited_once()

        with patch("backend.auth.dependencies.get_supabase_client", return_value=MagicMock()), \
             patch(
                 "backend.auth.dependencies.get_google_user_by_id",
                 new=AsyncMock(return_value=TEST_USER),
             ) as lookup:
            me = client.get("/api/auth/user")

        assert lookup.await_args[0][1] == "google-sub-1"

        assert me.status_code == 200
        assert me.json()["id"] == "google-sub-1"

    def test_state_mismatch_redirects_to_auth(self, client, mock_google):
        _start_login(client)

        response = client.get(
            "/api/auth/google/callback",
            params={"code": "code-1", "state": "forged"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/auth"
        mock_google["exchange"].assert_not_awaited()

    def test_provider_error_redirects_to_auth(self, client, mock_google):
        response = client.get(
            "/api/auth/google/callback",
            params={"error": "access_denied"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/auth"

    def test_exchange_failure_redirects_to_auth(self, client, mock_google):
        mock_google["exchange"].side_effect = OAuthError("invalid_grant")
        state = _start_login(client)

        response = client.get(
            "/api/auth/google/callback",
            params={"code": "bad", "state": state},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/auth"
        mock_google["upsert"].assert_not_awaited()


class TestSessionUser:

    def test_not_authenticated(self, client):
        response = client.get("/api/auth/user")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

    def test_safe_fields_only(self, client):
        async def logged_in_user():
            return TEST_USER

        app.dependency_overrides[get_optional_user] = logged_in_user
        try:
            response = client.get("/api/auth/user")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        data = response.json()
        assert data == {
            "id": "google-sub-1",
            "email": "ana@example.com",
            "displayName": "Ana Perez",
            "firstName": "Ana",
            "lastName": "Perez",
            "profileImageUrl": None,
        }
        assert "secret-access-token" not in response.text


class TestLogout:

    def test_clears_session(self, client, mock_google):
        state = _start_login(client)
        client.get(
            "/api/auth/google/callback",
            params={"code": "code-1", "state": state},
            follow_redirects=False,
        )

        response = client.get("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Successfully logged out"}
        assert client.get("/api/auth/user").status_code == 401
