"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests (in-memory store, mocks)
    │   ├── domain/
    │   ├── application/
    │   └── infrastructure/
    ├── integration/           # SQLAlchemy document store on a SQLite file
    │   └── persistence/
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    config/.env.dev or config/.env is loaded before collection.
    RUN_EXTERNAL=1       Run @pytest.mark.external tests (real Bankin API)

Pytest Options:
    --run-external       Run external tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from banksync_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.external",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that verify database/persistence behavior",
    )
    config.addinivalue_line(
        "markers",
        "external: Tests connecting to the real Bankin API (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip external tests unless explicitly enabled."""
    run_external = config.getoption("--run-external") or os.environ.get(
        "RUN_EXTERNAL",
        "",
    ).lower() in ("1", "true", "yes")

    if run_external:
        return

    skip_external = pytest.mark.skip(
        reason="External test - run with --run-external or RUN_EXTERNAL=1",
    )
    for item in items:
        if "external" in {mark.name for mark in item.iter_markers()}:
            item.add_marker(skip_external)


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Start and end the test session with a fresh settings cache."""
    clear_settings_cache()
    yield
    clear_settings_cache()
