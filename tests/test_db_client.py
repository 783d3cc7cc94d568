"""
Tests for the lazily created Supabase client.
"""

from unittest.mock import patch

import pytest

from backend.db import client as db_client


@pytest.fixture(autouse=True)
def fresh_client():
    db_client.reset_supabase_client()
    yield
    db_client.reset_supabase_client()


def test_client_is_created_once():
    with patch.object(db_client, "create_client", return_value="client") as mock_create:
        first = db_client.get_supabase_client()
        second = db_client.get_supabase_client()

    assert first == second == "client"
    mock_create.assert_called_once_with(
        supabase_url=db_client.settings.SUPABASE_URL,
        supabase_key=db_client.settings.SUPABASE_KEY,
    )


def test_missing_configuration_raises():
    with patch.object(db_client.settings, "SUPABASE_KEY", ""), \
         patch.object(db_client, "create_client") as mock_create:
        with pytest.raises(ValueError):
            db_client.get_supabase_client()

    mock_create.assert_not_called()
