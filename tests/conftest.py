from __future__ import annotations

import os

import pytest

from gcp_mcp import config
from gcp_mcp.app import get_app_context

_ENV_KEYS = (
    "GOOGLE_PROJECT",
    "GOOGLE_CREDENTIALS",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "PUBLICCA_ENDPOINT",
    "LOG_FILE",
    "EAB_REQUEST_TIMEOUT_SECONDS",
    "EAB_BACKOFF_INITIAL_INTERVAL_SECONDS",
    "EAB_BACKOFF_MULTIPLIER",
    "EAB_BACKOFF_RANDOMIZATION_FACTOR",
    "EAB_BACKOFF_MAX_INTERVAL_SECONDS",
    "EAB_BACKOFF_MAX_ELAPSED_SECONDS",
    "EAB_BACKOFF_MAX_ATTEMPTS",
)


def pytest_sessionstart(session: pytest.Session) -> None:
    # Keep test output readable when logging gets configured.
    os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    config._load_settings_cached.cache_clear()
    get_app_context.cache_clear()
    yield
    config._load_settings_cached.cache_clear()
    get_app_context.cache_clear()
