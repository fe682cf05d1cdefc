from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Protocol

from freelancer_server.analysis.prompt import (
    build_competitor_insights_prompt,
    build_content_strategy_prompt,
    build_profile_optimization_prompt,
    build_psychological_triggers_prompt,
    build_voice_tone_prompt,
)
from freelancer_server.analysis.schemas import (
    DEFAULT_SERVICE,
    NOT_AVAILABLE,
    AnalysisRequest,
    AnalysisResult,
    ClientInfo,
    ProfileData,
    Report,
    ReportMetadata,
)
from freelancer_server.core.metrics import llm_calls_total

logger = logging.getLogger("freelancer_server.analysis")

# (step, max_tokens, error label) per analysis dimension.
VOICE_TONE = ("voice_tone", 500, "analyzing voice tone")
PSYCHOLOGICAL_TRIGGERS = ("psychological_triggers", 600, "detecting psychological triggers")
CONTENT_STRATEGY = ("content_strategy", 800, "generating content ideas")
PROFILE_OPTIMIZATION = ("profile_optimization", 700, "generating profile recommendations")
COMPETITOR_INSIGHTS = ("competitor_insights", 600, "analyzing competitors")


class LLMClient(Protocol):
    async def complete(self, prompt: str, max_tokens: int) -> str: ...


class AnalysisService:
    """Runs the five analysis prompts against the model and collects their text.

    Each step is isolated: a failing call is turned into an "Error <label>: <message>"
    string so the remaining steps (and the report) still complete.
    """

    def __init__(
        self,
        *,
        llm_client: LLMClient,
        concurrent: bool = False,
        request_id: str | None = None,
    ):
        self._llm = llm_client
        self._concurrent = concurrent
        self._request_id = request_id

    async def run_step(self, *, prompt: str, max_tokens: int, label: str, step: str) -> str:
        logger.info(
            "Analysis step started",
            extra={"request_id": self._request_id, "step": step},
        )
        try:
            text = await self._llm.complete(prompt, max_tokens)
        except Exception as exc:  # noqa: BLE001 - a failed step is reported as text
            message = str(exc) or type(exc).__name__
            logger.error(
                "Analysis step failed: %s",
                message,
                extra={"request_id": self._request_id, "step": step},
            )
            llm_calls_total.labels(step=step, outcome="error").inc()
            return f"Error {label}: {message}"

        llm_calls_total.labels(step=step, outcome="ok").inc()
        return text

    async def _run(self, spec: tuple[str, int, str], prompt: str) -> str:
        step, max_tokens, label = spec
        return await self.run_step(prompt=prompt, max_tokens=max_tokens, label=label, step=step)

    async def _voice_then_content(self, data: ProfileData) -> tuple[str, str]:
        voice_tone = await self._run(VOICE_TONE, build_voice_tone_prompt(data))
        content = await self._run(
            CONTENT_STRATEGY, build_content_strategy_prompt(data, voice_tone)
        )
        return voice_tone, content

    async def analyze(self, data: ProfileData) -> AnalysisResult:
        if self._concurrent:
            (voice_tone, content), triggers, profile, competitors = await asyncio.gather(
                self._voice_then_content(data),
                self._run(PSYCHOLOGICAL_TRIGGERS, build_psychological_triggers_prompt(data)),
                self._run(PROFILE_OPTIMIZATION, build_profile_optimization_prompt(data)),
                self._run(COMPETITOR_INSIGHTS, build_competitor_insights_prompt(data)),
            )
        else:
            # Content ideas consume the voice tone result, so order matters here.
            voice_tone = await self._run(VOICE_TONE, build_voice_tone_prompt(data))
            triggers = await self._run(
                PSYCHOLOGICAL_TRIGGERS, build_psychological_triggers_prompt(data)
            )
            content = await self._run(
                CONTENT_STRATEGY, build_content_strategy_prompt(data, voice_tone)
            )
            profile = await self._run(
                PROFILE_OPTIMIZATION, build_profile_optimization_prompt(data)
            )
            competitors = await self._run(
                COMPETITOR_INSIGHTS, build_competitor_insights_prompt(data)
            )

        return AnalysisResult(
            voice_tone=voice_tone,
            psychological_triggers=triggers,
            content_strategy=content,
            profile_optimization=profile,
            competitor_insights=competitors,
        )


def build_report(
    *,
    request: AnalysisRequest,
    analysis: AnalysisResult,
    started: float,
    model: str,
) -> Report:
    """Merge analysis text with request identity and timing metadata.

    `started` is a `time.perf_counter()` reading taken when the handler began.
    """

    data = request.data or ProfileData()
    elapsed_ms = max(int((time.perf_counter() - started) * 1000), 0)

    return Report(
        client_info=ClientInfo(
            client_id=request.client_id or NOT_AVAILABLE,
            name=data.name or NOT_AVAILABLE,
            email=data.email or NOT_AVAILABLE,
            linkedin_url=data.linkedin_url or NOT_AVAILABLE,
        ),
        service=request.service or DEFAULT_SERVICE,
        analysis=analysis,
        metadata=ReportMetadata(
            timestamp=datetime.now(UTC).isoformat(),
            processing_time_ms=elapsed_ms,
            model_used=model,
        ),
    )
