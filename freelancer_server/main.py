from __future__ import annotations

import logging
import math
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freelancer_server.analysis.router import router as analysis_router
from freelancer_server.api.exception_handlers import register_exception_handlers
from freelancer_server.api.schemas import EndpointsOut, HealthOut, RootOut
from freelancer_server.core.logging import setup_logging
from freelancer_server.core.metrics import PrometheusMetricsMiddleware, metrics_router
from freelancer_server.core.middleware.http_logging import HttpLoggingMiddleware
from freelancer_server.core.settings import get_settings

setup_logging()

logger = logging.getLogger("freelancer_server")

_PROCESS_STARTED = time.monotonic()


def process_uptime_seconds() -> int:
    return max(math.floor(time.monotonic() - _PROCESS_STARTED), 0)


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        key = settings.claude_api_key
        logger.info(
            "Starting %s (env=%s, model=%s, api_key=%s)",
            settings.app_name,
            settings.app_env,
            settings.claude_model,
            f"set (length: {len(key)})" if key else "NOT SET",
        )
        yield
        # uvicorn stops accepting connections and drains in-flight requests before this runs.
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Analyzes a freelancer's LinkedIn profile data with five model prompts "
            "(voice tone, psychological triggers, content strategy, profile optimization, "
            "competitor insights) and returns one aggregated JSON report.\n\n"
            "- A failing model call never fails the request; its error text is placed "
            "in the matching report field.\n"
            "- Logs carry request metadata only, never profile data or model output."
        ),
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Uptime check and capability discovery.",
            },
            {
                "name": "analysis",
                "description": "Profile analysis report and a single-prompt smoke test.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(HttpLoggingMiddleware, max_body_bytes=settings.max_request_body_bytes)
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "Does not call the model API, so it is safe for frequent uptime checks."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(
            status="ok",
            timestamp=datetime.now(UTC).isoformat(),
            uptime=process_uptime_seconds(),
            version=settings.app_version,
        )

    @app.get("/", response_model=RootOut, tags=["health"], summary="Capability discovery")
    async def root() -> RootOut:
        return RootOut(
            message=settings.app_name,
            status="running",
            endpoints=EndpointsOut(health="/health", analyze="/api/analyze"),
        )

    app.include_router(metrics_router)
    app.include_router(analysis_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on HOST:PORT."""

    settings = get_settings()
    logger.info(
        "Serving on %s:%s (health: /health, analyze: /api/analyze)",
        settings.host,
        settings.port,
    )
    # uvicorn handles SIGTERM/SIGINT: graceful drain, lifespan shutdown, exit code 0.
    uvicorn.run(
        "freelancer_server.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
