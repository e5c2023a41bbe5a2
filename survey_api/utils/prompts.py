"""Utility functions to generate prompts for survey insight generation."""

from typing import Any, Dict

from survey_api.services.scoring_engine import MAX_SCORE

SYSTEM_MESSAGE = (
    "You are a healthcare revenue cycle management (RCM) expert specializing "
    "in Saudi Arabia market analysis. Be concise and practical."
)

MARKET_TRENDS = [
    "AI adoption in Saudi healthcare",
    "NPHIES compliance challenges",
]


def _format_sar(amount: Any) -> str:
    if amount is None:
        return "Not specified"
    return f"SAR {float(amount):,.0f}"


def build_insight_context(record) -> Dict[str, Any]:
    """Collect the answer labels of a stored record for the insight prompt."""
    answers = record.answers

    def text(slot: str) -> str:
        answer = answers.get(slot)
        return answer.text if answer else "Not answered"

    q4 = answers.get("q4")
    return {
        "role": text("q1"),
        "organizationSize": text("q2"),
        "organization": record.contact.organization,
        "challenge": text("q3"),
        "financialImpactSar": q4.sar if q4 else None,
        "aiReadiness": text("q5"),
        "score": record.totalScore,
        "qualificationLevel": record.qualificationLevel.value,
    }


def get_insight_prompt(context: Dict[str, Any]) -> str:
    """Generate the insight prompt for one survey response."""
    return f"""
Analyze this Saudi healthcare RCM survey response and provide insights:

Role: {context.get("role", "Not answered")}
Organization: {context.get("organization", "Not specified")} ({context.get("organizationSize", "size not specified")})
Challenge: {context.get("challenge", "Not answered")}
Financial Impact: {_format_sar(context.get("financialImpactSar"))}
AI Readiness: {context.get("aiReadiness", "Not answered")}
Score: {context.get("score", 0)}/{MAX_SCORE} ({context.get("qualificationLevel", "minimal")})

Provide, in at most 120 words:
1. Market insights for Saudi healthcare RCM
2. Specific recommendations for this organization
3. Industry trends this response indicates

Focus on NPHIES compliance, Saudi healthcare regulations, and practical implementation strategies.
""".strip()
