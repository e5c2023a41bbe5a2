"""
Survey submission pipeline.

validate -> assign identity -> rescore -> persist -> cache -> advisory -> audit

Only validation and persistence can fail a submission. The cache write,
advisory call and audit append are best effort and only log on failure.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from survey_api.models.response_models import InsightSet, SubmissionResult
from survey_api.models.survey_models import (
    Answer,
    QuestionId,
    SurveyRecord,
    SurveySubmission,
)
from survey_api.services import scoring_engine
from survey_api.services.audit_log import record_event
from survey_api.services.errors import PersistenceError
from survey_api.services.storage_interfaces import (
    AdvisoryService,
    AuditSink,
    Cache,
    RecordStore,
)
from survey_api.services.validation import find_unknown_options, validate_submission
from survey_api.utils.prompts import MARKET_TRENDS, build_insight_context

logger = logging.getLogger(__name__)

RESPONSE_CACHE_PREFIX = "survey_response:"
RESPONSE_CACHE_TTL = 86400 * 365  # 1 year retention


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_record(
    submission: SurveySubmission, response_id: str, now: datetime
) -> SurveyRecord:
    """
    Freeze a validated submission into a persisted record.

    Scores, tier and recommendations are always recomputed from the raw
    option values; the client's figures are kept for reference only.
    """
    answers: Dict[str, Answer] = {}
    for question in QuestionId:
        answer = submission.answers.slot(question)
        if answer is None:
            continue
        points = scoring_engine.score_answer(question, answer)
        answers[question.value] = answer.model_copy(update={"aiScore": points})

    total = scoring_engine.total_score(
        {question: submission.answers.slot(question) for question in QuestionId}
    )
    level = scoring_engine.qualification_level(total)

    if submission.score is not None and submission.score != total:
        logger.debug(
            "Client score %s differs from server score %s for %s, using server value",
            submission.score, total, response_id,
        )

    recommendations = scoring_engine.generate_recommendations(
        role=_value(submission, QuestionId.ROLE),
        challenge=_value(submission, QuestionId.PRIMARY_CHALLENGE),
        financial_impact=_value(submission, QuestionId.FINANCIAL_IMPACT),
    )

    return SurveyRecord(
        id=response_id,
        timestamp=now.isoformat(),
        clientTimestamp=submission.timestamp,
        createdMonth=now.strftime("%Y-%m"),
        contact=submission.answers.contact,
        answers=answers,
        totalScore=total,
        clientScore=submission.score,
        qualificationLevel=level,
        recommendations=recommendations,
        priorityScore=scoring_engine.priority_score(total, level),
        version=submission.version,
    )


def _value(submission: SurveySubmission, question: QuestionId) -> Optional[str]:
    answer = submission.answers.slot(question)
    return answer.value if answer else None


class SubmissionPipeline:
    """Orchestrates storing one survey submission."""

    def __init__(
        self,
        store: RecordStore,
        cache: Optional[Cache] = None,
        audit_sink: Optional[AuditSink] = None,
        advisory: Optional[AdvisoryService] = None,
        enable_advisory: bool = False,
        advisory_timeout: float = 8.0,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.cache = cache
        self.audit_sink = audit_sink
        self.advisory = advisory
        self.enable_advisory = enable_advisory
        self.advisory_timeout = advisory_timeout
        self._clock = clock

    async def submit(self, raw: Any) -> SubmissionResult:
        """
        Validate, persist and acknowledge a raw submission payload.

        Raises:
            SubmissionValidationError: payload is malformed; nothing is stored
            PersistenceError: the record store rejected the write
        """
        submission = validate_submission(raw)
        unknown = find_unknown_options(submission)
        if unknown:
            logger.info("Submission carries unknown option values: %s", unknown)

        response_id = str(uuid4())
        record = build_record(submission, response_id, self._clock())

        self._persist(record)
        self._cache_record(record)
        insights = await self._generate_insights(record)

        record_event(
            self.audit_sink,
            "survey_submit",
            "create",
            {
                "responseId": record.id,
                "organization": record.contact.organization,
                "score": record.totalScore,
                "qualificationLevel": record.qualificationLevel.value,
            },
        )

        logger.info(
            "Stored survey response %s (score=%s, level=%s)",
            record.id, record.totalScore, record.qualificationLevel.value,
        )
        return SubmissionResult(
            success=True,
            id=record.id,
            qualificationLevel=record.qualificationLevel,
            score=record.totalScore,
            insights=insights,
            timestamp=record.timestamp,
        )

    def _persist(self, record: SurveyRecord) -> None:
        try:
            self.store.put(record.id, record)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error("Record store failed for response %s: %s", record.id, e)
            raise PersistenceError("Failed to store survey response") from e

    def _cache_record(self, record: SurveyRecord) -> None:
        if self.cache is None:
            return
        try:
            self.cache.put(
                f"{RESPONSE_CACHE_PREFIX}{record.id}",
                record.model_dump(mode="json"),
                RESPONSE_CACHE_TTL,
            )
        except Exception as e:
            logger.warning("Cache write failed for response %s: %s", record.id, e)

    async def _generate_insights(self, record: SurveyRecord) -> InsightSet:
        if not self.enable_advisory or self.advisory is None:
            return InsightSet()

        try:
            summary = await asyncio.wait_for(
                self.advisory.summarize(build_insight_context(record)),
                timeout=self.advisory_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Advisory call timed out after %ss for response %s",
                self.advisory_timeout, record.id,
            )
            return InsightSet()
        except Exception as e:
            logger.warning("Advisory call failed for response %s: %s", record.id, e)
            return InsightSet()

        return InsightSet(
            insights=[summary] if summary else [],
            trends=list(MARKET_TRENDS),
            recommendations=list(record.recommendations),
        )
