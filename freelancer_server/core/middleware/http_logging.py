"""Request correlation, body-size enforcement and metadata logging.

- Log *metadata only* (no request/response bodies, no query strings, no headers).
- Generate or propagate X-Request-ID and expose it as `request.state.request_id`
  so analysis logs can be correlated with the request line.
- Enforce the JSON body cap while the body is received: at most `max_body_bytes`
  (plus one chunk) is ever buffered, chunked uploads included.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from datetime import UTC, datetime

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse
from starlette.routing import Match
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("freelancer_server.http")

REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class PayloadTooLargeError(Exception):
    """Raised while receiving a body that exceeds the configured cap."""


def _get_or_create_request_id(*, headers: Headers) -> str:
    """Return a safe request id, either propagated or newly generated.

    Only a narrow character set and length is accepted to avoid log injection.
    Anything else is replaced by a new UUID4.
    """

    candidate = headers.get(REQUEST_ID_HEADER)
    if candidate and _SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def safe_route_label(*, scope: Scope) -> str:
    """Return the route template for the request, or "unmatched".

    Requests rejected before routing (oversized bodies) are matched against the
    app's routes so they are still logged under their template.
    """

    route = scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path

    router = getattr(scope.get("app"), "router", None)
    for candidate in getattr(router, "routes", ()):
        match, _ = candidate.matches(scope)
        if match is Match.FULL:
            return getattr(candidate, "path", "unmatched")
    return "unmatched"


async def _receive_body(receive: Receive, *, max_bytes: int) -> tuple[list[Message], int]:
    """Drain the request body into memory, failing fast once it exceeds `max_bytes`."""

    messages: list[Message] = []
    received = 0
    while True:
        message = await receive()
        messages.append(message)
        if message["type"] != "http.request":
            break
        received += len(message.get("body", b""))
        if received > max_bytes:
            raise PayloadTooLargeError
        if not message.get("more_body", False):
            break
    return messages, received


class HttpLoggingMiddleware:
    """Correlate, size-check and log every HTTP request.

    Request bodies carry client profile data (names, emails, goals) and response
    bodies carry model output, so neither is ever logged here.
    """

    def __init__(self, app: ASGIApp, *, max_body_bytes: int | None = None):
        self.app = app
        self._max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _get_or_create_request_id(headers=Headers(scope=scope))
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_code = 500
        request_bytes: int | None = None

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        def log_extra() -> dict:
            return {
                "request_id": request_id,
                "http_method": scope["method"],
                "request_path": safe_route_label(scope=scope),
                "status_code": status_code,
                "request_bytes": request_bytes,
                "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
            }

        try:
            if self._max_body_bytes is not None and scope["method"] in _BODY_METHODS:
                receive, request_bytes = await self._bounded_receive(
                    scope, receive, max_bytes=self._max_body_bytes
                )
            await self.app(scope, receive, send_with_request_id)
        except PayloadTooLargeError:
            response = JSONResponse(
                status_code=413,
                content={
                    "success": False,
                    "error": "Request body is too large",
                    "timestamp": datetime.now(UTC).isoformat(),
                },
            )
            await response(scope, receive, send_with_request_id)
            logger.info("Request body too large", extra=log_extra())
            return
        except Exception:  # noqa: BLE001 - we must log unexpected exceptions with stack trace
            status_code = 500
            logger.exception("Unhandled exception while processing request", extra=log_extra())
            raise

        logger.info("Request completed", extra=log_extra())

    async def _bounded_receive(
        self, scope: Scope, receive: Receive, *, max_bytes: int
    ) -> tuple[Receive, int]:
        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > max_bytes:
            raise PayloadTooLargeError

        messages, received = await _receive_body(receive, max_bytes=max_bytes)

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        return replay, received
