"""Router for the analytics dashboard."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from survey_api.models.analytics_models import AnalyticsSnapshot
from survey_api.services.analytics_service import AnalyticsAggregator
from survey_api.services.errors import PersistenceError
from survey_api.services.providers import get_analytics_aggregator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsSnapshot)
async def get_analytics(
    aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator),
):
    """Dashboard analytics, recomputed at most once per day."""
    try:
        return aggregator.get_dashboard()
    except PersistenceError as e:
        logger.error("Error in get_analytics: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Failed to fetch analytics",
                "details": "Survey data is temporarily unavailable",
            },
        )
