from __future__ import annotations

from freelancer_server.core.llm.claude_client import ClaudeClient, ClaudeConfig
from freelancer_server.core.settings import get_settings


def get_claude_client() -> ClaudeClient:
    """
    Dependency provider for ClaudeClient.

    Always returns a client, even without an API key: the missing key surfaces
    as a per-call error inside the report instead of failing the request.
    """

    settings = get_settings()
    config = ClaudeConfig(
        api_key=settings.claude_api_key,
        base_url=settings.claude_base_url,
        model=settings.claude_model,
        api_version=settings.claude_api_version,
        timeout_seconds=float(settings.claude_timeout_seconds),
        max_tokens_ceiling=int(settings.claude_max_tokens),
    )
    return ClaudeClient(config=config)
