"""
Tests for settings validation.
"""

from unittest.mock import patch

import pytest

from backend.config import DEFAULT_SESSION_SECRET, Settings


@pytest.fixture
def configured_store():
    with patch.object(Settings, "SUPABASE_URL", "http://localhost:54321"), \
         patch.object(Settings, "SUPABASE_KEY", "test-service-key"):
        yield


def test_missing_store_settings_are_listed():
    with patch.object(Settings, "SUPABASE_URL", ""), \
         patch.object(Settings, "SUPABASE_KEY", ""):
        with pytest.raises(ValueError, match="SUPABASE_URL, SUPABASE_KEY"):
            Settings.validate()


def test_production_rejects_default_session_secret(configured_store):
    with patch.object(Settings, "ENVIRONMENT", "production"), \
         patch.object(Settings, "SESSION_SECRET", DEFAULT_SESSION_SECRET):
        with pytest.raises(ValueError, match="SESSION_SECRET"):
            Settings.validate()


def test_production_rejects_empty_session_secret(configured_store):
    with patch.object(Settings, "ENVIRONMENT", "production"), \
         patch.object(Settings, "SESSION_SECRET", ""):
        with pytest.raises(ValueError, match="SESSION_SECRET"):
            Settings.validate()


def test_production_accepts_own_session_secret(configured_store):
    with patch.object(Settings, "ENVIRONMENT", "production"), \
         patch.object(Settings, "SESSION_SECRET", "a-long-random-secret"):
        Settings.validate()


def test_development_allows_default_session_secret(configured_store):
    with patch.object(Settings, "ENVIRONMENT", "development"), \
         patch.object(Settings, "SESSION_SECRET", DEFAULT_SESSION_SECRET):
        Settings.validate()
