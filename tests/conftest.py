from __future__ import annotations

import pytest

_ENV_VARS = (
    "NODE_ENV",
    "APP_ENV",
    "PORT",
    "CLAUDE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_MODEL",
    "CLAUDE_MAX_TOKENS",
    "CLAUDE_BASE_URL",
    "ANALYSIS_CONCURRENT",
    "MAX_REQUEST_BODY_MB",
    "CORS_ALLOW_ORIGINS",
)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Never reach the real API from tests.
    monkeypatch.setenv("CLAUDE_API_KEY", "")

    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    from freelancer_server.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from freelancer_server.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
