"""FastAPI dependency providers wiring the pipeline to configured backends."""

import logging
from functools import lru_cache
from typing import NamedTuple, Optional

from fastapi import Depends

from survey_api.services.ai_advisor import OpenAIAdvisoryService
from survey_api.services.analytics_service import AnalyticsAggregator
from survey_api.services.dynamodb_service import DynamoDBService
from survey_api.services.memory_backends import (
    InMemoryAuditSink,
    InMemoryCache,
    InMemoryRecordStore,
)
from survey_api.services.storage_interfaces import (
    AdvisoryService,
    AuditSink,
    Cache,
    RecordStore,
)
from survey_api.services.submission_pipeline import SubmissionPipeline
from survey_api.utils.config import get_settings

logger = logging.getLogger(__name__)


class Backends(NamedTuple):
    store: RecordStore
    cache: Cache
    audit: AuditSink


@lru_cache(maxsize=1)
def _backends() -> Backends:
    settings = get_settings()
    if settings.storage_backend == "dynamodb":
        service = DynamoDBService(settings)
        logger.info("Using DynamoDB table %s for survey responses", settings.dynamodb_responses_table)
        return Backends(service.records, service.cache, service.audit)
    logger.info("Using in-memory survey storage")
    return Backends(InMemoryRecordStore(), InMemoryCache(), InMemoryAuditSink())


@lru_cache(maxsize=1)
def _advisory_service() -> Optional[AdvisoryService]:
    settings = get_settings()
    if not settings.enable_ai_analysis:
        return None
    if not settings.openai_api_key:
        logger.warning("ENABLE_AI_ANALYSIS is set but OPENAI_API_KEY is missing; insights disabled")
        return None
    return OpenAIAdvisoryService(settings)


def get_record_store() -> RecordStore:
    return _backends().store


def get_cache() -> Cache:
    return _backends().cache


def get_audit_sink() -> AuditSink:
    return _backends().audit


def get_advisory_service() -> Optional[AdvisoryService]:
    return _advisory_service()


def get_submission_pipeline(
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
    audit_sink: AuditSink = Depends(get_audit_sink),
    advisory: Optional[AdvisoryService] = Depends(get_advisory_service),
) -> SubmissionPipeline:
    """Dependency injection for SubmissionPipeline."""
    settings = get_settings()
    return SubmissionPipeline(
        store=store,
        cache=cache,
        audit_sink=audit_sink,
        advisory=advisory,
        enable_advisory=settings.enable_ai_analysis,
        advisory_timeout=settings.advisory_timeout_seconds,
    )


def get_analytics_aggregator(
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
    audit_sink: AuditSink = Depends(get_audit_sink),
) -> AnalyticsAggregator:
    """Dependency injection for AnalyticsAggregator."""
    return AnalyticsAggregator(store=store, cache=cache, audit_sink=audit_sink)
