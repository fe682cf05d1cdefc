from __future__ import annotations

from fastapi.testclient import TestClient

from freelancer_server.core.llm.claude_client import ClaudeUpstreamError
from freelancer_server.core.llm.deps import get_claude_client
from freelancer_server.main import create_app
from tests.analysis._helpers import FakeLLMClient


def _client_with(fake: FakeLLMClient) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_claude_client] = lambda: fake
    return TestClient(app)


def test_smoke_test_uses_default_prompt() -> None:
    fake = FakeLLMClient(responses={"smoke_test": "Hello / مرحبا"})
    with _client_with(fake) as client:
        res = client.post("/api/test")

    assert res.status_code == 200, res.text
    assert res.json() == {
        "success": True,
        "response": "Hello / مرحبا",
        "model": "claude-3-5-sonnet-20241022",
    }
    assert fake.calls == [("smoke_test", "Say hello in Arabic and English!", 100)]


def test_smoke_test_forwards_caller_prompt() -> None:
    fake = FakeLLMClient(responses={"smoke_test": "pong"})
    with _client_with(fake) as client:
        res = client.post("/api/test", json={"prompt": "ping"})

    assert res.status_code == 200
    assert res.json()["response"] == "pong"
    assert fake.calls == [("smoke_test", "ping", 100)]


def test_smoke_test_failure_returns_500() -> None:
    fake = FakeLLMClient(failures={"smoke_test": ClaudeUpstreamError("LLM request timed out")})
    with _client_with(fake) as client:
        res = client.post("/api/test", json={"prompt": "ping"})

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "LLM request timed out"}
