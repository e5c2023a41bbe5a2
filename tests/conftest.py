import copy
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from survey_api.main import app
from survey_api.services.analytics_service import AnalyticsAggregator
from survey_api.services.memory_backends import (
    InMemoryAuditSink,
    InMemoryCache,
    InMemoryRecordStore,
)
from survey_api.services.providers import (
    get_analytics_aggregator,
    get_submission_pipeline,
)
from survey_api.services.submission_pipeline import SubmissionPipeline


FULL_SUBMISSION = {
    "answers": {
        "q1": {"value": "rcm-director", "text": "RCM Director", "qualify": "high", "aiScore": 5},
        "q2": {"value": "large", "text": "Large hospital", "qualify": "high", "aiScore": 4},
        "q3": {"value": "nphies-compliance", "text": "NPHIES compliance", "qualify": "high", "aiScore": 5},
        "q4": {
            "value": "critical-impact",
            "text": "Over SAR 500K monthly",
            "qualify": "high",
            "sar": 800000,
            "aiScore": 5,
        },
        "q5": {"value": "ai-pioneer", "text": "AI pioneer", "qualify": "high", "aiScore": 5},
        "contact": {"name": "A", "email": "a@b.com", "organization": "Org"},
    },
    "score": 24,
    "aiRecommendations": [],
    "qualificationLevel": "critical",
    "timestamp": "10/19/2026, 11:00:00 AM",
    "version": "2.0",
}


class FixedClock:
    """Mutable clock for deterministic timestamps."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def submission_payload():
    return copy.deepcopy(FULL_SUBMISSION)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def pipeline(store, cache, audit_sink, clock):
    return SubmissionPipeline(store=store, cache=cache, audit_sink=audit_sink, clock=clock)


@pytest.fixture
def aggregator(store, cache, audit_sink, clock):
    return AnalyticsAggregator(store=store, cache=cache, audit_sink=audit_sink, clock=clock)


@pytest.fixture
def client(pipeline, aggregator):
    app.dependency_overrides[get_submission_pipeline] = lambda: pipeline
    app.dependency_overrides[get_analytics_aggregator] = lambda: aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()
