from __future__ import annotations

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )
    timestamp: str = Field(description="Current server time (ISO-8601, UTC).")
    uptime: int = Field(ge=0, description="Whole seconds since the process started.")
    version: str = Field(examples=["1.0.0"])


class EndpointsOut(BaseModel):
    health: str
    analyze: str


class RootOut(BaseModel):
    """Capability discovery document."""

    message: str
    status: str
    endpoints: EndpointsOut


class ErrorOut(BaseModel):
    """Failure envelope shared by every route."""

    success: bool = False
    error: str
    timestamp: str | None = None
