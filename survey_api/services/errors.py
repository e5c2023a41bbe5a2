"""Exception hierarchy for the survey service."""

from typing import Any, List, Optional


class SurveyServiceError(Exception):
    """Base class for survey service errors."""


class SubmissionValidationError(SurveyServiceError):
    """Malformed or incomplete submission; correctable by the caller."""

    def __init__(self, reason: str, details: Optional[List[Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.details = details or []


class PersistenceError(SurveyServiceError):
    """The durable record store could not be written or read."""


class CacheError(SurveyServiceError):
    """A cache read or write failed."""


class AdvisoryError(SurveyServiceError):
    """The external advisory service failed or timed out."""
