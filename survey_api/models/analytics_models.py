"""Models for aggregate analytics and organization benchmarks."""

from typing import List, Optional

from pydantic import BaseModel, Field

from survey_api.models.survey_models import QualificationLevel


class AnalyticsSummary(BaseModel):
    """Headline numbers of the dashboard."""
    totalResponses: int = Field(ge=0)
    avgScore: float = Field(ge=0)
    generatedAt: str


class TierCount(BaseModel):
    """Number of responses in one qualification tier."""
    qualificationLevel: QualificationLevel
    count: int = Field(ge=0)


class ChallengeCount(BaseModel):
    """Number of responses naming one primary challenge."""
    primaryChallenge: str
    count: int = Field(ge=0)


class MonthlyTrend(BaseModel):
    """Response statistics for one calendar month (YYYY-MM)."""
    month: str
    responseCount: int = Field(ge=0)
    meanScore: float
    meanFinancialImpact: Optional[float] = None


class AnalyticsSnapshot(BaseModel):
    """Dashboard aggregate, always regenerable from the stored records."""
    summary: AnalyticsSummary
    qualificationDistribution: List[TierCount] = Field(default_factory=list)
    challengeDistribution: List[ChallengeCount] = Field(default_factory=list)
    monthlyTrends: List[MonthlyTrend] = Field(default_factory=list)


class Benchmark(BaseModel):
    """Aggregate of peers sharing a challenge and AI readiness answer."""
    primaryChallenge: Optional[str] = None
    aiReadiness: Optional[str] = None
    avgScore: float
    avgFinancialImpact: Optional[float] = None
    count: int = Field(ge=0)


class BenchmarkReport(BaseModel):
    """Benchmarks and advisory items for one organization size tier."""
    organizationType: str
    benchmarks: List[Benchmark] = Field(default_factory=list)
    advisoryList: List[str] = Field(default_factory=list)
    generatedAt: str
