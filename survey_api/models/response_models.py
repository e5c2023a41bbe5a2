"""Models for API responses of the submission and health endpoints."""

from typing import List

from pydantic import BaseModel, Field

from survey_api.models.survey_models import QualificationLevel


class InsightSet(BaseModel):
    """Advisory output attached to a submission response."""
    insights: List[str] = Field(default_factory=list)
    trends: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class SubmissionResult(BaseModel):
    """Result of a successful survey submission."""
    success: bool = True
    id: str
    qualificationLevel: QualificationLevel
    score: int = Field(ge=0)
    insights: InsightSet
    timestamp: str


class HealthResponse(BaseModel):
    """Service liveness report."""
    status: str
    version: str
    timestamp: str
    service: str
