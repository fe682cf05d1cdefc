from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from freelancer_server.api.schemas import ErrorOut
from freelancer_server.domain.exceptions import MalformedRequestError

logger = logging.getLogger("freelancer_server.request_validation")


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "invalid value")
    return f"Invalid request body: {loc}: {msg}" if loc else f"Invalid request body: {msg}"


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(MalformedRequestError)
    async def handle_malformed_request(
        request: Request,
        exc: MalformedRequestError,
    ) -> JSONResponse:
        logger.info(
            "Malformed request",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "request_path": request.url.path,  # no query string
                "status_code": 400,
                "error": "malformed_request",
            },
        )
        body = ErrorOut(error=exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # Do not echo the offending input back; it may contain client profile data.
        logger.info(
            "Request validation failed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "request_path": request.url.path,
                "status_code": 400,
                "error": "request_validation",
            },
        )
        body = ErrorOut(
            error=_describe_validation_error(exc),
            timestamp=datetime.now(UTC).isoformat(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(exclude_none=True),
        )
