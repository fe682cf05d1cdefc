from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from freelancer_server.analysis.schemas import (
    DEFAULT_SERVICE,
    AnalysisRequest,
    AnalyzeOut,
    PromptTestIn,
    PromptTestOut,
)
from freelancer_server.analysis.service import AnalysisService, LLMClient, build_report
from freelancer_server.api.schemas import ErrorOut
from freelancer_server.core.llm.deps import get_claude_client
from freelancer_server.core.settings import Settings, get_settings
from freelancer_server.domain.exceptions import MalformedRequestError

router = APIRouter(prefix="/api", tags=["analysis"])
logger = logging.getLogger("freelancer_server.analysis")

DEFAULT_TEST_PROMPT = "Say hello in Arabic and English!"
TEST_MAX_TOKENS = 100


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


@router.post(
    "/analyze",
    response_model=AnalyzeOut,
    responses={
        400: {"model": ErrorOut, "description": "Missing `data` or malformed body."},
        500: {"model": ErrorOut, "description": "Unexpected failure while analyzing."},
    },
    summary="Run the full profile analysis",
)
async def analyze(
    request: Request,
    payload: AnalysisRequest | None = Body(default=None),
    llm_client: LLMClient = Depends(get_claude_client),
    settings: Settings = Depends(get_settings),
):
    """
    Run the five analysis prompts and return the aggregated report.

    Individual model failures do not fail the request: they appear as
    "Error ...: ..." text in the matching report field.
    """

    started = time.perf_counter()
    if payload is None or payload.data is None:
        raise MalformedRequestError("Missing required field: data")

    request_id = _request_id(request)
    client_id = payload.client_id or "unknown"
    logger.info(
        "Analysis started (service=%s)",
        payload.service or DEFAULT_SERVICE,
        extra={"request_id": request_id, "client_id": client_id},
    )

    try:
        svc = AnalysisService(
            llm_client=llm_client,
            concurrent=settings.analysis_concurrent,
            request_id=request_id,
        )
        analysis = await svc.analyze(payload.data)
        report = build_report(
            request=payload,
            analysis=analysis,
            started=started,
            model=settings.claude_model,
        )
    except Exception as exc:  # noqa: BLE001 - reported as a 500 envelope, never a stack trace
        logger.exception(
            "Analysis failed",
            extra={"request_id": request_id, "client_id": client_id},
        )
        body = ErrorOut(
            error=str(exc) or "Internal server error",
            timestamp=datetime.now(UTC).isoformat(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    logger.info(
        "Analysis completed",
        extra={
            "request_id": request_id,
            "client_id": client_id,
            "duration_ms": report.metadata.processing_time_ms,
        },
    )
    return AnalyzeOut(report=report)


@router.post(
    "/test",
    response_model=PromptTestOut,
    responses={500: {"model": ErrorOut, "description": "The model call failed."}},
    summary="Send a single prompt to the model (manual smoke test)",
)
async def smoke_test(
    payload: PromptTestIn | None = Body(default=None),
    llm_client: LLMClient = Depends(get_claude_client),
    settings: Settings = Depends(get_settings),
):
    prompt = (payload.prompt if payload is not None else None) or DEFAULT_TEST_PROMPT

    try:
        text = await llm_client.complete(prompt, TEST_MAX_TOKENS)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Smoke test call failed: %s", exc)
        body = ErrorOut(error=str(exc) or type(exc).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )

    return PromptTestOut(response=text, model=settings.claude_model)
