"""Validation of incoming survey submission payloads."""

from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from survey_api.models.survey_models import SurveySubmission, QuestionId
from survey_api.services.errors import SubmissionValidationError
from survey_api.services.scoring_engine import WEIGHT_TABLES


def _format_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        details.append({"field": loc, "message": err.get("msg", "invalid value")})
    return details


def validate_submission(raw: Any) -> SurveySubmission:
    """
    Validate a raw JSON payload into a SurveySubmission.

    Raises SubmissionValidationError with a human readable reason when a
    required field is missing or has the wrong shape. Option values that are
    well typed but unknown pass, they simply score by fallback.
    """
    if not isinstance(raw, dict):
        raise SubmissionValidationError(
            "Submission body must be a JSON object",
            [{"field": "", "message": f"expected object, got {type(raw).__name__}"}],
        )

    try:
        return SurveySubmission.model_validate(raw)
    except ValidationError as e:
        details = _format_errors(e)
        first = details[0] if details else {"field": "", "message": "invalid payload"}
        where = f" at '{first['field']}'" if first["field"] else ""
        raise SubmissionValidationError(
            f"Invalid survey submission{where}: {first['message']}", details
        ) from e


def find_unknown_options(submission: SurveySubmission) -> List[Tuple[str, str]]:
    """
    List (slot, value) pairs whose value is not a known option.

    Used for logging only.
    """
    unknown = []
    for question in QuestionId:
        answer = submission.answers.slot(question)
        if answer is not None and answer.value not in WEIGHT_TABLES[question]:
            unknown.append((question.value, answer.value))
    return unknown
