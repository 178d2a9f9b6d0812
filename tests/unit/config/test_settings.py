"""Tests for banksync_config settings."""

import pytest
from pydantic import ValidationError

from banksync_config import Settings, clear_settings_cache, get_settings


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.bankin_base_url == "https://sync.bankin.com/v2"
        assert settings.bankin_page_limit == 200
        assert settings.transaction_fetch_concurrency == 1
        assert settings.database_url.startswith("sqlite+aiosqlite")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("BANKIN_EMAIL", "user@example.com")
        monkeypatch.setenv("BANKIN_PASSWORD", "hunter2")
        monkeypatch.setenv("BANKIN_BASE_URL", "https://example.test/v2/")
        monkeypatch.setenv("TRANSACTION_FETCH_CONCURRENCY", "4")

        settings = Settings(_env_file=None)

        assert settings.bankin_email == "user@example.com"
        assert settings.bankin_password.get_secret_value() == "hunter2"
        assert "hunter2" not in repr(settings)
        assert settings.bankin_base_url == "https://example.test/v2"
        assert settings.transaction_fetch_concurrency == 4

    def test_rejects_zero_concurrency(self, monkeypatch):
        monkeypatch.setenv("TRANSACTION_FETCH_CONCURRENCY", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_database_display_hides_credentials(self):
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://bank:secret@db:5432/banksync",
        )

        assert settings.database_display == "postgresql+asyncpg://db:5432/banksync"

    def test_get_settings_is_cached(self):
        clear_settings_cache()

        assert get_settings() is get_settings()
        clear_settings_cache()
