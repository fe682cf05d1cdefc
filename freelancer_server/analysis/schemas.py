from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SERVICE = "linkedin_optimization"
NOT_AVAILABLE = "N/A"


class ProfileData(BaseModel):
    """Client profile fields submitted for analysis. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    linkedin_url: str | None = None
    goals: str | None = None
    pain_points: str | None = None


class AnalysisRequest(BaseModel):
    client_id: str | None = None
    service: str | None = None
    # Optional at the schema level so a missing field maps to the 400 envelope.
    data: ProfileData | None = None


class AnalysisResult(BaseModel):
    """Model text per analysis dimension (or an "Error ...: ..." string)."""

    voice_tone: str
    psychological_triggers: str
    content_strategy: str
    profile_optimization: str
    competitor_insights: str


class ClientInfo(BaseModel):
    client_id: str = NOT_AVAILABLE
    name: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE
    linkedin_url: str = NOT_AVAILABLE


class ReportMetadata(BaseModel):
    timestamp: str
    processing_time_ms: int = Field(ge=0)
    model_used: str


class Report(BaseModel):
    client_info: ClientInfo
    service: str = DEFAULT_SERVICE
    analysis: AnalysisResult
    metadata: ReportMetadata


class AnalyzeOut(BaseModel):
    success: bool = True
    report: Report


class PromptTestIn(BaseModel):
    prompt: str | None = None


class PromptTestOut(BaseModel):
    success: bool = True
    response: str
    model: str
