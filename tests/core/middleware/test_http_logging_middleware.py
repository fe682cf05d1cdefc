"""Unit tests for the HTTP logging middleware.

We assert structured log fields via `caplog` (not message strings) and verify:
- X-Request-ID is generated or propagated, and visible to handlers
- Bodies over the cap are rejected with 413 while being received (chunked too)
- Every request, rejected ones included, emits one log line with route metadata
- Unhandled exceptions emit an ERROR log entry with a stack trace and return 500
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from freelancer_server.core.middleware.http_logging import HttpLoggingMiddleware

_MAX_BODY_BYTES = 1024


def _make_app() -> FastAPI:
    """Create a minimal app for middleware unit tests."""
    app = FastAPI()
    app.add_middleware(HttpLoggingMiddleware, max_body_bytes=_MAX_BODY_BYTES)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/whoami")
    async def whoami(request: Request) -> dict[str, str]:
        return {"request_id": request.state.request_id}

    @app.post("/echo")
    async def echo(request: Request) -> dict[str, int]:
        return {"received": len(await request.body())}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    return app


def _get_http_log_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "freelancer_server.http"]


def test_successful_request_sets_request_id_and_logs_one_info(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="freelancer_server.http")

    with TestClient(_make_app()) as client:
        res = client.get("/health?email=someone%40example.com")

    assert res.status_code == 200
    assert res.headers["x-request-id"]

    info_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.INFO]
    assert len(info_records) == 1

    record = info_records[0]
    assert record.__dict__["request_id"] == res.headers["x-request-id"]
    assert record.__dict__["http_method"] == "GET"
    # Must not include query string values.
    assert record.__dict__["request_path"] == "/health"
    assert record.__dict__["status_code"] == 200
    assert record.__dict__["request_bytes"] is None
    assert record.__dict__["duration_ms"] >= 0


def test_request_id_is_exposed_to_handlers() -> None:
    with TestClient(_make_app()) as client:
        generated = client.get("/whoami")
        propagated = client.get("/whoami", headers={"X-Request-ID": "req_abc-123"})

    assert generated.json()["request_id"] == generated.headers["x-request-id"]
    assert propagated.json() == {"request_id": "req_abc-123"}
    assert propagated.headers["x-request-id"] == "req_abc-123"


def test_replaces_unsafe_request_id() -> None:
    with TestClient(_make_app()) as client:
        res = client.get("/whoami", headers={"X-Request-ID": "bad id with spaces"})

    assert res.headers["x-request-id"] != "bad id with spaces"
    assert len(res.headers["x-request-id"]) == 32
    assert res.json()["request_id"] == res.headers["x-request-id"]


def test_unmatched_route_is_logged_without_raw_path(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="freelancer_server.http")

    with TestClient(_make_app()) as client:
        res = client.get("/clients/sam@example.com")

    assert res.status_code == 404
    info_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.INFO]
    assert info_records[0].__dict__["request_path"] == "unmatched"


def test_body_within_limit_is_forwarded_and_sized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="freelancer_server.http")

    with TestClient(_make_app()) as client:
        res = client.post("/echo", content=b"x" * 100)

    assert res.status_code == 200
    assert res.json() == {"received": 100}
    record = _get_http_log_records(caplog)[0]
    assert record.__dict__["request_bytes"] == 100


def test_chunked_body_within_limit_is_forwarded() -> None:
    def chunks() -> Iterator[bytes]:
        for _ in range(4):
            yield b"y" * 200

    with TestClient(_make_app()) as client:
        res = client.post("/echo", content=chunks())

    assert res.status_code == 200
    assert res.json() == {"received": 800}


def test_declared_oversized_body_returns_413_and_is_logged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="freelancer_server.http")

    with TestClient(_make_app()) as client:
        res = client.post(
            "/echo", content=b"x" * (_MAX_BODY_BYTES + 1), headers={"X-Request-ID": "req_big"}
        )

    assert res.status_code == 413
    payload = res.json()
    assert payload["success"] is False
    assert payload["error"] == "Request body is too large"
    assert res.headers["x-request-id"] == "req_big"

    records = _get_http_log_records(caplog)
    assert len(records) == 1
    record = records[0]
    assert record.__dict__["request_id"] == "req_big"
    assert record.__dict__["request_path"] == "/echo"
    assert record.__dict__["status_code"] == 413
    assert record.__dict__["duration_ms"] >= 0


def test_chunked_oversized_body_is_rejected_without_reading_it_all() -> None:
    consumed = 0

    def chunks() -> Iterator[bytes]:
        nonlocal consumed
        for _ in range(50):
            consumed += 1
            yield b"z" * (1024 * 1024)

    with TestClient(_make_app()) as client:
        res = client.post("/echo", content=chunks())

    assert res.status_code == 413
    assert res.json()["success"] is False
    # The first 1MB chunk already exceeds the cap; reading stops there.
    assert consumed < 50


def test_unhandled_exception_returns_500_and_logs_error_with_request_id(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="freelancer_server.http")

    with TestClient(_make_app(), raise_server_exceptions=False) as client:
        res = client.get("/boom", headers={"X-Request-ID": "req_err_001"})

    assert res.status_code == 500

    error_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.ERROR]
    assert len(error_records) == 1

    record = error_records[0]
    assert record.__dict__["request_id"] == "req_err_001"
    assert record.__dict__["request_path"] == "/boom"
    assert record.__dict__["status_code"] == 500
    assert record.exc_info
