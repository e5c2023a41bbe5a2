"""Router for survey submissions."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from survey_api.models.response_models import SubmissionResult
from survey_api.services.errors import PersistenceError, SubmissionValidationError
from survey_api.services.providers import get_submission_pipeline
from survey_api.services.submission_pipeline import SubmissionPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def _invalid(details: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "Invalid request data",
            "details": details,
            "errors": errors or [],
        },
    )


@router.post(
    "/submit",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed or incomplete submission"},
        500: {"description": "Survey response could not be stored"},
    },
)
async def submit_survey(
    request: Request,
    pipeline: SubmissionPipeline = Depends(get_submission_pipeline),
):
    """
    Store a completed survey.

    The score and qualification tier are recomputed server side; the
    values sent by the client are informational only.
    """
    try:
        raw = await request.json()
    except ValueError:
        return _invalid("Request body is not valid JSON")

    try:
        return await pipeline.submit(raw)
    except SubmissionValidationError as e:
        logger.info("Rejected survey submission: %s", e.reason)
        return _invalid(e.reason, e.details)
    except PersistenceError as e:
        logger.error("Survey submission could not be stored: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to store survey response"},
        )
