"""
Tests for Google identity persistence and the legacy user store.
"""

import pytest

from backend.schemas.auth import GoogleUser, LegacyUserCreate
from backend.services.user_service import (
    LegacyUserStore,
    get_google_user_by_email,
    get_google_user_by_id,
    update_google_user,
    upsert_google_user,
)


def _stored_user(**overrides):
    row = {
        "id": "google-sub-1",
        "email": "ana@example.com",
        "display_name": "Ana Perez",
        "first_name": "Ana",
        "last_name": "Perez",
        "profile_image_url": None,
        "access_token": "old-access",
        "refresh_token": "old-refresh",
        "token_expiry": None,
        "created_at": "2023-01-01T00:00:00+00:00",
        "updated_at": "2023-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


class TestLookups:

    @pytest.mark.asyncio
    async def test_get_by_id(self, supabase_mock, response_factory):
        client, query = supabase_mock(response_factory([_stored_user()]))

        user = await get_google_user_by_id(client, "google-sub-1")

        assert isinstance(user, GoogleUser)
        assert user.email == "ana@example.com"
        query.eq.assert_called_once_with("id", "google-sub-1")

    @pytest.mark.asyncio
    async def test_get_by_email(self, supabase_mock, response_factory):
        client, query = supabase_mock(response_factory([_stored_user()]))

        user = await get_google_user_by_email(client, "ana@example.com")

        assert user.id == "google-sub-1"
        query.eq.assert_called_once_with("email", "ana@example.com")

    @pytest.mark.asyncio
    async def test_unknown_user(self, supabase_mock, response_factory):
        client, _ = supabase_mock(response_factory([]))

        assert await get_google_user_by_id(client, "missing") is None


class TestUpdateGoogleUser:

    @pytest.mark.asyncio
    async def test_id_is_never_changed(self, supabase_mock, response_factory):
        client, query = supabase_mock(response_factory([_stored_user(display_name="Ana P.")]))

        user = await update_google_user(
            client, "google-sub-1", {"id": "other", "display_name": "Ana P."}
        )

        payload = query.update.call_args[0][0]
        assert "id" not in payload
        assert "updated_at" in payload
        assert user.display_name == "Ana P."


class TestUpsertGoogleUser:

    @pytest.mark.asyncio
    async def test_first_login_inserts_with_timestamps(self, supabase_mock, response_factory):
        new_user = GoogleUser(id="google-sub-1", email="ana@example.com", access_token="tok")
        client, query = supabase_mock(
            response_factory([]),
            response_factory([_stored_user(access_token="tok")]),
        )

        stored = await upsert_google_user(client, new_user)

        payload = query.insert.call_args[0][0]
        assert payload["id"] == "google-sub-1"
        assert payload["created_at"] is not None
        assert payload["created_at"] == payload["updated_at"]
        assert stored.access_token == "tok"

    @pytest.mark.asyncio
    async def test_returning_login_keeps_refresh_token_when_absent(
        self, supabase_mock, response_factory
    ):
        login = GoogleUser(id="google-sub-1", email="ana@example.com", access_token="new-access")
        client, query = supabase_mock(
            response_factory([_stored_user()]),
            response_factory([_stored_user(access_token="new-access")]),
        )

        stored = await upsert_google_user(client, login)

        payload = query.update.call_args[0][0]
        assert payload["access_token"] == "new-access"
        assert payload["refresh_token"] == "old-refresh"
        query.insert.assert_not_called()
        assert stored.id == "google-sub-1"


class TestLegacyUserStore:

    def test_starts_empty(self):
        store = LegacyUserStore()

        assert store.get_user(1) is None
        assert store.get_user_by_username("ana") is None

    def test_create_assigns_incrementing_ids(self):
        store = LegacyUserStore()

        first = store.create_user(LegacyUserCreate(username="ana", password="x"))
        second = store.create_user(LegacyUserCreate(username="luis", password="y"))

        assert (first.id, second.id) == (1, 2)
        assert store.get_user(2) == second
        assert store.get_user_by_username("ana") == first

    def test_clear(self):
        store = LegacyUserStore()
        store.create_user(LegacyUserCreate(username="ana", password="x"))

        store.clear()

        assert store.get_user(1) is None
        assert store.create_user(LegacyUserCreate(username="b", password="c")).id == 1
