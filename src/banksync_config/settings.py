"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. BANKSYNC_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent
        if (parent / ".git").is_dir():
            return parent

    return Path.cwd()


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. BANKSYNC_ENV_FILE env var
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("BANKSYNC_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "banksync"
    debug: bool = False

    # Bankin API (BANKIN_ prefix)
    bankin_client_id: str = ""
    bankin_client_secret: SecretStr = SecretStr("")
    bankin_email: str = ""
    bankin_password: SecretStr = SecretStr("")
    bankin_device: str = ""
    bankin_base_url: str = "https://sync.bankin.com/v2"
    bankin_version: str = "2018-06-15"
    bankin_page_limit: int = 200
    bankin_max_pages: int = 50
    bankin_timeout: float = 30.0

    # Sync
    transaction_fetch_concurrency: int = 1
    sync_timezone: str = "UTC"

    # Document store
    database_url: str = "sqlite+aiosqlite:///banksync.db"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("bankin_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("transaction_fetch_concurrency", "bankin_page_limit")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            msg = "must be at least 1"
            raise ValueError(msg)
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_display(self) -> str:
        """Database URL without credentials (safe for logging)."""
        url = self.database_url
        if "@" not in url:
            return url
        scheme = url.split("://", 1)[0]
        return f"{scheme}://{url.split('@')[-1]}"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
