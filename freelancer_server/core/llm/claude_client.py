from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


class ClaudeError(Exception):
    """Base error for completion client failures."""


class ClaudeUnavailableError(ClaudeError):
    """Raised when the client is not configured (e.g., missing API key)."""


class ClaudeUpstreamError(ClaudeError):
    """Raised when the Messages API fails or returns an unexpected response."""


@dataclass(frozen=True)
class ClaudeConfig:
    api_key: str
    base_url: str
    model: str
    api_version: str
    timeout_seconds: float
    max_tokens_ceiling: int


def _upstream_message(resp: httpx.Response) -> str:
    """Best-effort extraction of `error.message` from an Anthropic error body."""

    try:
        body = resp.json()
        message = body["error"]["message"]
    except Exception:  # noqa: BLE001
        return f"LLM service returned HTTP {resp.status_code}"
    if isinstance(message, str) and message:
        return f"{resp.status_code} {message}"
    return f"LLM service returned HTTP {resp.status_code}"


class ClaudeClient:
    """
    Minimal Anthropic Messages API client for single-turn text completions.

    - No logging in this module (prompts/outputs contain client profile data).
    - Stateless requests; one user message per call.
    - Returns the text of the first content block, or "" when it is not text.
    """

    def __init__(
        self,
        *,
        config: ClaudeConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    async def complete(self, prompt: str, max_tokens: int) -> str:
        if not self._config.api_key:
            raise ClaudeUnavailableError("CLAUDE_API_KEY is not set")

        url = f"{self._config.base_url.rstrip('/')}/v1/messages"
        headers = {
            "x-api-key": self._config.api_key,
            "anthropic-version": self._config.api_version,
            "content-type": "application/json",
        }
        payload: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": min(int(max_tokens), self._config.max_tokens_ceiling),
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise ClaudeUpstreamError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            raise ClaudeUpstreamError(f"LLM request failed: {exc}") from exc

        if resp.status_code != 200:
            raise ClaudeUpstreamError(_upstream_message(resp))

        try:
            data = resp.json()
            blocks = data["content"]
        except Exception as exc:  # noqa: BLE001
            raise ClaudeUpstreamError("LLM response was not valid JSON") from exc

        if not isinstance(blocks, list) or not blocks:
            return ""

        first = blocks[0]
        if isinstance(first, dict) and first.get("type") == "text":
            return str(first.get("text", ""))
        return ""
