from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = "MCP Freelancer Server"
    app_version: str = "1.0.0"
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
    )
    port: int = Field(
        default=10000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
    )

    # HTTP surface
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
        description="Comma-separated origins allowed by CORS. Defaults to any origin.",
    )
    max_request_body_mb: int = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices("MAX_REQUEST_BODY_MB", "max_request_body_mb"),
        description="Maximum accepted JSON request body size (MB).",
    )

    # LLM integration (Anthropic Messages API)
    # An empty key is accepted at startup; every call then fails and is reported as text.
    claude_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("CLAUDE_API_KEY", "ANTHROPIC_API_KEY", "claude_api_key"),
        description="Anthropic API key used for every analysis call.",
    )
    claude_model: str = Field(
        default="claude-3-5-sonnet-20241022",
        validation_alias=AliasChoices("CLAUDE_MODEL", "claude_model"),
        description="Model identifier sent with every completion request.",
    )
    claude_max_tokens: int = Field(
        default=2000,
        ge=1,
        validation_alias=AliasChoices("CLAUDE_MAX_TOKENS", "claude_max_tokens"),
        description="Upper bound applied to each per-call max_tokens budget.",
    )
    claude_base_url: str = Field(
        default="https://api.anthropic.com",
        validation_alias=AliasChoices("CLAUDE_BASE_URL", "claude_base_url"),
        description="Base URL for the Anthropic API (override for proxies/emulators).",
    )
    claude_api_version: str = Field(
        default="2023-06-01",
        validation_alias=AliasChoices("CLAUDE_API_VERSION", "claude_api_version"),
    )
    claude_timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        validation_alias=AliasChoices("CLAUDE_TIMEOUT_SECONDS", "claude_timeout_seconds"),
        description="Timeout for a single completion request (seconds).",
    )

    analysis_concurrent: bool = Field(
        default=False,
        validation_alias=AliasChoices("ANALYSIS_CONCURRENT", "analysis_concurrent"),
        description=(
            "Run the independent analysis steps concurrently. Content ideas still wait "
            "for the voice tone result."
        ),
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def max_request_body_bytes(self) -> int:
        return int(self.max_request_body_mb) * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
