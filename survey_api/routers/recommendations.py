"""
FastAPI router for organization benchmarks and advisory recommendations.

Benchmarks group stored responses of the same organization size by
primary challenge and AI readiness.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from survey_api.models.analytics_models import BenchmarkReport
from survey_api.services.analytics_service import AnalyticsAggregator
from survey_api.services.errors import PersistenceError
from survey_api.services.providers import get_analytics_aggregator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/recommendations/{organization_type}",
    response_model=BenchmarkReport,
    status_code=status.HTTP_200_OK,
    summary="Benchmarks and recommendations for an organization size tier",
    responses={
        200: {
            "description": "Benchmarks for the organization size tier",
            "content": {
                "application/json": {
                    "example": {
                        "organizationType": "large",
                        "benchmarks": [
                            {
                                "primaryChallenge": "nphies-compliance",
                                "aiReadiness": "very-open",
                                "avgScore": 21.5,
                                "avgFinancialImpact": 450000.0,
                                "count": 4,
                            }
                        ],
                        "advisoryList": [
                            "Implement automated NPHIES submission workflows"
                        ],
                        "generatedAt": "2026-10-19T08:00:00+00:00",
                    }
                }
            },
        },
        500: {"description": "Survey data unavailable"},
    },
)
async def get_recommendations(
    organization_type: str,
    aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator),
):
    """
    Get peer benchmarks for an organization size tier.

    Results are cached for several hours, so new responses may take a
    while to show up.
    """
    try:
        return aggregator.get_benchmarks(organization_type)
    except PersistenceError as e:
        logger.error("Error in get_recommendations for %s: %s", organization_type, e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Failed to fetch recommendations",
                "details": "Survey data is temporarily unavailable",
            },
        )
