"""Models for survey answers, submissions and persisted survey records."""

import math
from typing import Any, Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class QuestionId(str, Enum):
    """The five scored question slots, in survey order."""
    ROLE = "q1"
    ORGANIZATION_SIZE = "q2"
    PRIMARY_CHALLENGE = "q3"
    FINANCIAL_IMPACT = "q4"
    AI_READINESS = "q5"


class RoleOption(str, Enum):
    """Options for the respondent role question."""
    RCM_DIRECTOR = "rcm-director"
    PRACTICE_ADMIN = "practice-admin"
    FINANCE_CONTROLLER = "finance-controller"
    BILLING_MANAGER = "billing-manager"
    IT_MANAGER = "it-manager"
    CLINICAL_SUPERVISOR = "clinical-supervisor"
    QUALITY_MANAGER = "quality-manager"
    OTHER_HEALTHCARE = "other-healthcare"


class OrganizationSizeOption(str, Enum):
    """Options for the organization size question."""
    MEGA_SYSTEM = "mega-system"
    LARGE = "large"
    MEDIUM = "medium"
    SMALL = "small"
    VERY_SMALL = "very-small"


class ChallengeOption(str, Enum):
    """Options for the primary RCM challenge question."""
    NPHIES_COMPLIANCE = "nphies-compliance"
    STAFFING_SHORTAGE = "staffing-shortage"
    MANUAL_PROCESSES = "manual-processes"
    DENIAL_MANAGEMENT = "denial-management"
    SYSTEM_INTEGRATION = "system-integration"
    CASH_FLOW = "cash-flow"


class FinancialImpactOption(str, Enum):
    """Options for the monthly financial impact question."""
    CRITICAL_IMPACT = "critical-impact"
    HIGH_IMPACT = "high-impact"
    MEDIUM_IMPACT = "medium-impact"
    LOW_IMPACT = "low-impact"
    MINIMAL = "minimal"


class AIReadinessOption(str, Enum):
    """Options for the AI adoption readiness question."""
    AI_PIONEER = "ai-pioneer"
    VERY_OPEN = "very-open"
    OPEN_WITH_PILOT = "open-with-pilot"
    CAUTIOUS_PROVEN = "cautious-proven"
    REGULATORY_CONCERNS = "regulatory-concerns"
    TRADITIONAL_FOCUS = "traditional-focus"


class Qualifier(str, Enum):
    """Coarse qualifier attached to every option in the survey UI."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class QualificationLevel(str, Enum):
    """Qualification tiers, highest first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    MINIMAL = "minimal"


class Answer(BaseModel):
    """A selected option for one question slot.

    ``aiScore`` is whatever the client computed and is only informational;
    the server always rescores from ``value``. ``qualify`` is kept as sent
    and only matters when ``value`` is not a known option.
    """
    value: str
    text: str
    qualify: Optional[str] = None
    aiScore: Optional[float] = None
    sar: Optional[float] = None


class Contact(BaseModel):
    """Contact details captured on the final survey step."""
    name: str
    email: EmailStr
    organization: str
    phone: Optional[str] = None
    location: Optional[str] = None
    jobTitle: Optional[str] = None

    @field_validator("name", "organization", "email", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> Any:
        """Trim required fields and reject blanks."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("must not be empty or whitespace only")
        return v


class SurveyAnswers(BaseModel):
    """All answers of one survey run plus the contact block."""
    q1: Optional[Answer] = None
    q2: Optional[Answer] = None
    q3: Optional[Answer] = None
    q4: Optional[Answer] = None
    q5: Optional[Answer] = None
    contact: Contact

    def slot(self, question: QuestionId) -> Optional[Answer]:
        return getattr(self, question.value)


class SurveySubmission(BaseModel):
    """Payload posted by the survey front-end."""
    answers: SurveyAnswers
    score: Optional[float] = Field(default=None, ge=0)
    qualificationLevel: Optional[QualificationLevel] = None
    aiRecommendations: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None
    version: str = "2.0"

    @model_validator(mode="before")
    @classmethod
    def lift_flat_answers(cls, data: Any) -> Any:
        """Accept q1..q5 and contact at the top level as well as under ``answers``."""
        if isinstance(data, dict) and "answers" not in data:
            keys = [q.value for q in QuestionId] + ["contact"]
            if any(k in data for k in keys):
                data = dict(data)
                data["answers"] = {k: data.pop(k) for k in keys if k in data}
        return data

    @field_validator("score")
    @classmethod
    def validate_finite(cls, v: Optional[float]) -> Optional[float]:
        """Reject NaN and infinity."""
        if v is not None and not math.isfinite(v):
            raise ValueError("score must be a finite number")
        return v


class SurveyRecord(BaseModel):
    """A finalized submission as persisted by the submission pipeline."""
    id: str
    timestamp: str
    clientTimestamp: Optional[str] = None
    createdMonth: str
    contact: Contact
    answers: Dict[str, Answer] = Field(default_factory=dict)
    totalScore: int
    clientScore: Optional[float] = None
    qualificationLevel: QualificationLevel
    recommendations: List[str] = Field(default_factory=list)
    priorityScore: int
    processingStatus: str = "processed"
    languagePreference: str = "en"
    version: str = "2.0"

    def answer_value(self, question: QuestionId) -> Optional[str]:
        answer = self.answers.get(question.value)
        return answer.value if answer else None

    @property
    def financial_impact_sar(self) -> Optional[float]:
        answer = self.answers.get(QuestionId.FINANCIAL_IMPACT.value)
        return answer.sar if answer else None
