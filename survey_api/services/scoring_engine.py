"""
Deterministic lead-qualification scoring.

Pure functions only:
- score / total_score: categorical answers to points
- qualification_level: total points to one of five tiers
- generate_recommendations: rule groups keyed on role, challenge and impact
"""

import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional, Type, Union

from survey_api.models.survey_models import (
    AIReadinessOption,
    Answer,
    ChallengeOption,
    FinancialImpactOption,
    OrganizationSizeOption,
    QualificationLevel,
    Qualifier,
    QuestionId,
    RoleOption,
)

logger = logging.getLogger(__name__)


WEIGHT_TABLES: Dict[QuestionId, Dict[str, int]] = {
    QuestionId.ROLE: {
        RoleOption.RCM_DIRECTOR.value: 5,
        RoleOption.PRACTICE_ADMIN.value: 5,
        RoleOption.FINANCE_CONTROLLER.value: 4,
        RoleOption.BILLING_MANAGER.value: 4,
        RoleOption.IT_MANAGER.value: 3,
        RoleOption.CLINICAL_SUPERVISOR.value: 3,
        RoleOption.QUALITY_MANAGER.value: 3,
        RoleOption.OTHER_HEALTHCARE.value: 1,
    },
    QuestionId.ORGANIZATION_SIZE: {
        OrganizationSizeOption.MEGA_SYSTEM.value: 5,
        OrganizationSizeOption.LARGE.value: 4,
        OrganizationSizeOption.MEDIUM.value: 4,
        OrganizationSizeOption.SMALL.value: 2,
        OrganizationSizeOption.VERY_SMALL.value: 1,
    },
    QuestionId.PRIMARY_CHALLENGE: {
        ChallengeOption.NPHIES_COMPLIANCE.value: 5,
        ChallengeOption.STAFFING_SHORTAGE.value: 4,
        ChallengeOption.MANUAL_PROCESSES.value: 4,
        ChallengeOption.DENIAL_MANAGEMENT.value: 4,
        ChallengeOption.SYSTEM_INTEGRATION.value: 3,
        ChallengeOption.CASH_FLOW.value: 2,
    },
    QuestionId.FINANCIAL_IMPACT: {
        FinancialImpactOption.CRITICAL_IMPACT.value: 5,
        FinancialImpactOption.HIGH_IMPACT.value: 4,
        FinancialImpactOption.MEDIUM_IMPACT.value: 3,
        FinancialImpactOption.LOW_IMPACT.value: 2,
        FinancialImpactOption.MINIMAL.value: 1,
    },
    QuestionId.AI_READINESS: {
        AIReadinessOption.AI_PIONEER.value: 5,
        AIReadinessOption.VERY_OPEN.value: 4,
        AIReadinessOption.OPEN_WITH_PILOT.value: 4,
        AIReadinessOption.CAUTIOUS_PROVEN.value: 3,
        AIReadinessOption.REGULATORY_CONCERNS.value: 2,
        AIReadinessOption.TRADITIONAL_FOCUS.value: 1,
    },
}

OPTION_ENUMS: Dict[QuestionId, Type[Enum]] = {
    QuestionId.ROLE: RoleOption,
    QuestionId.ORGANIZATION_SIZE: OrganizationSizeOption,
    QuestionId.PRIMARY_CHALLENGE: ChallengeOption,
    QuestionId.FINANCIAL_IMPACT: FinancialImpactOption,
    QuestionId.AI_READINESS: AIReadinessOption,
}

QUALIFIER_FALLBACK: Dict[Qualifier, int] = {
    Qualifier.HIGH: 3,
    Qualifier.MEDIUM: 2,
    Qualifier.LOW: 1,
}

# Inclusive lower bounds, highest tier first
TIER_THRESHOLDS = [
    (20, QualificationLevel.CRITICAL),
    (15, QualificationLevel.HIGH),
    (10, QualificationLevel.MEDIUM),
    (6, QualificationLevel.LOW),
]

TIER_LABELS: Dict[QualificationLevel, str] = {
    QualificationLevel.CRITICAL: "Exceptionally Qualified",
    QualificationLevel.HIGH: "Highly Qualified",
    QualificationLevel.MEDIUM: "Qualified",
    QualificationLevel.LOW: "Partially Qualified",
    QualificationLevel.MINIMAL: "Thank you for your interest",
}

PRIORITY_BONUS: Dict[QualificationLevel, int] = {
    QualificationLevel.CRITICAL: 10,
    QualificationLevel.HIGH: 5,
}

MAX_SCORE = sum(max(table.values()) for table in WEIGHT_TABLES.values())

ROLE_RECOMMENDATIONS = [
    (
        {RoleOption.RCM_DIRECTOR.value, RoleOption.PRACTICE_ADMIN.value},
        "Strategic RCM transformation with executive dashboard",
    ),
    (
        {RoleOption.BILLING_MANAGER.value},
        "Automated billing and denial management solutions",
    ),
    (
        {RoleOption.IT_MANAGER.value},
        "System integration and API-based workflow automation",
    ),
]

CHALLENGE_RECOMMENDATIONS = [
    (
        {ChallengeOption.NPHIES_COMPLIANCE.value},
        "NPHIES-compliant automated submission and tracking",
    ),
    (
        {ChallengeOption.STAFFING_SHORTAGE.value},
        "AI-powered staff augmentation and training programs",
    ),
    (
        {ChallengeOption.MANUAL_PROCESSES.value},
        "End-to-end process automation with RPA",
    ),
]

IMPACT_RECOMMENDATIONS = [
    (
        {
            FinancialImpactOption.CRITICAL_IMPACT.value,
            FinancialImpactOption.HIGH_IMPACT.value,
        },
        "Priority implementation with immediate ROI focus",
    ),
]


class WeightTableError(ValueError):
    """Raised when the weight tables do not cover the option enumerations."""


def validate_weight_tables() -> None:
    """Check every option of every slot has a positive weight and nothing else does."""
    problems = []
    for question in QuestionId:
        table = WEIGHT_TABLES.get(question)
        if table is None:
            problems.append(f"{question.value}: no weight table")
            continue
        options = {o.value for o in OPTION_ENUMS[question]}
        missing = sorted(options - table.keys())
        unknown = sorted(table.keys() - options)
        if missing:
            problems.append(f"{question.value}: missing weights for {missing}")
        if unknown:
            problems.append(f"{question.value}: weights for unknown options {unknown}")
        non_positive = sorted(k for k, w in table.items() if w <= 0)
        if non_positive:
            problems.append(f"{question.value}: non-positive weights for {non_positive}")
    if problems:
        raise WeightTableError("; ".join(problems))


def score(
    question: QuestionId,
    value: Optional[str],
    qualify: Optional[Union[Qualifier, str]] = None,
) -> int:
    """
    Points for one answer.

    Unknown or missing values fall back to the coarse qualifier
    (high=3, medium=2, low=1) and to 0 when there is none.
    """
    weight = WEIGHT_TABLES[question].get(value) if value else None
    if weight is not None:
        return weight

    if qualify is None:
        return 0
    try:
        return QUALIFIER_FALLBACK[Qualifier(qualify)]
    except ValueError:
        logger.debug("Unrecognised qualifier %r for %s", qualify, question.value)
        return 0


def score_answer(question: QuestionId, answer: Optional[Answer]) -> int:
    """Points for an optional answer; absent slots contribute 0."""
    if answer is None:
        return 0
    return score(question, answer.value, answer.qualify)


def total_score(answers: Mapping[QuestionId, Optional[Answer]]) -> int:
    """Sum of the per-slot points over whichever slots are present."""
    return sum(score_answer(question, answers.get(question)) for question in QuestionId)


def qualification_level(total: float) -> QualificationLevel:
    """Map a total score onto the qualification tier step function."""
    for threshold, level in TIER_THRESHOLDS:
        if total >= threshold:
            return level
    return QualificationLevel.MINIMAL


def priority_score(total: int, level: QualificationLevel) -> int:
    """Sales priority: the score plus a bonus for the two top tiers."""
    return total + PRIORITY_BONUS.get(level, 0)


def _first_match(rules, value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    for values, text in rules:
        if value in values:
            return text
    return None


def generate_recommendations(
    role: Optional[str],
    challenge: Optional[str],
    financial_impact: Optional[str],
) -> List[str]:
    """
    Advisory strings for a respondent.

    Role, challenge and impact groups are evaluated in that order and each
    contributes at most one string.
    """
    recommendations: List[str] = []
    for rules, value in (
        (ROLE_RECOMMENDATIONS, role),
        (CHALLENGE_RECOMMENDATIONS, challenge),
        (IMPACT_RECOMMENDATIONS, financial_impact),
    ):
        text = _first_match(rules, value)
        if text and text not in recommendations:
            recommendations.append(text)
    return recommendations
