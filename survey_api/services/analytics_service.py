"""Aggregate analytics over stored survey responses."""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from survey_api.models.analytics_models import (
    AnalyticsSnapshot,
    AnalyticsSummary,
    Benchmark,
    BenchmarkReport,
    ChallengeCount,
    MonthlyTrend,
    TierCount,
)
from survey_api.models.survey_models import QualificationLevel, QuestionId, SurveyRecord
from survey_api.services.audit_log import record_event
from survey_api.services.errors import PersistenceError
from survey_api.services.storage_interfaces import AuditSink, Cache, RecordStore

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_PREFIX = "analytics_dashboard_"
DASHBOARD_CACHE_TTL = 86400
BENCHMARK_CACHE_PREFIX = "recommendations_"
BENCHMARK_CACHE_TTL = 21600  # 6 hours
MAX_MONTHLY_BUCKETS = 12

BENCHMARK_ADVISORY_LIST = [
    "Implement automated NPHIES submission workflows",
    "Deploy AI-powered denial prediction and prevention",
    "Establish centralized revenue cycle dashboard",
    "Invest in staff training for emerging technologies",
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _recorded_on(record: SurveyRecord) -> date:
    return datetime.fromisoformat(record.timestamp).astimezone(timezone.utc).date()


def _mean(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def build_snapshot(records: List[SurveyRecord], generated_at: str) -> AnalyticsSnapshot:
    """Compute the dashboard aggregate from the full record set."""
    avg_score = _mean(r.totalScore for r in records)

    tiers = Counter(r.qualificationLevel for r in records)
    qualification_distribution = [
        TierCount(qualificationLevel=level, count=tiers[level])
        for level in QualificationLevel
        if tiers[level]
    ]

    challenges = Counter(
        value
        for value in (r.answer_value(QuestionId.PRIMARY_CHALLENGE) for r in records)
        if value
    )
    challenge_distribution = [
        ChallengeCount(primaryChallenge=value, count=count)
        for value, count in sorted(challenges.items(), key=lambda kv: (-kv[1], kv[0]))
    ]

    by_month: Dict[str, List[SurveyRecord]] = defaultdict(list)
    for r in records:
        if r.createdMonth:
            by_month[r.createdMonth].append(r)
    monthly_trends = [
        MonthlyTrend(
            month=month,
            responseCount=len(by_month[month]),
            meanScore=_mean(r.totalScore for r in by_month[month]) or 0.0,
            meanFinancialImpact=_mean(r.financial_impact_sar for r in by_month[month]),
        )
        for month in sorted(by_month, reverse=True)[:MAX_MONTHLY_BUCKETS]
    ]

    return AnalyticsSnapshot(
        summary=AnalyticsSummary(
            totalResponses=len(records),
            avgScore=round(avg_score, 1) if avg_score is not None else 0,
            generatedAt=generated_at,
        ),
        qualificationDistribution=qualification_distribution,
        challengeDistribution=challenge_distribution,
        monthlyTrends=monthly_trends,
    )


def build_benchmarks(
    records: List[SurveyRecord], organization_type: str, generated_at: str
) -> BenchmarkReport:
    """Group peers of one organization size by (challenge, AI readiness)."""
    groups: Dict[Tuple[Optional[str], Optional[str]], List[SurveyRecord]] = defaultdict(list)
    for r in records:
        if r.answer_value(QuestionId.ORGANIZATION_SIZE) != organization_type:
            continue
        key = (
            r.answer_value(QuestionId.PRIMARY_CHALLENGE),
            r.answer_value(QuestionId.AI_READINESS),
        )
        groups[key].append(r)

    benchmarks = [
        Benchmark(
            primaryChallenge=challenge,
            aiReadiness=readiness,
            avgScore=_mean(r.totalScore for r in members) or 0.0,
            avgFinancialImpact=_mean(r.financial_impact_sar for r in members),
            count=len(members),
        )
        for (challenge, readiness), members in groups.items()
    ]
    benchmarks.sort(key=lambda b: (-b.count, b.primaryChallenge or "", b.aiReadiness or ""))

    return BenchmarkReport(
        organizationType=organization_type,
        benchmarks=benchmarks,
        advisoryList=list(BENCHMARK_ADVISORY_LIST),
        generatedAt=generated_at,
    )


class AnalyticsAggregator:
    """Serves cached dashboard snapshots and organization benchmarks."""

    def __init__(
        self,
        store: RecordStore,
        cache: Optional[Cache] = None,
        audit_sink: Optional[AuditSink] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.cache = cache
        self.audit_sink = audit_sink
        self._clock = clock

    def get_dashboard(self, as_of: Optional[date] = None) -> AnalyticsSnapshot:
        """
        Dashboard snapshot for the given calendar day.

        Only responses recorded on or before ``as_of`` (UTC) are counted.
        The first call of a day computes and caches the snapshot; later calls
        that day return the cached copy unchanged.
        """
        as_of = as_of or self._clock().date()
        cache_key = f"{DASHBOARD_CACHE_PREFIX}{as_of.isoformat()}"

        snapshot = self._load_cached(cache_key, AnalyticsSnapshot)
        if snapshot is None:
            records = self._all_records(lambda r: _recorded_on(r) <= as_of)
            snapshot = build_snapshot(records, self._clock().isoformat())
            self._store_cached(cache_key, snapshot.model_dump(mode="json"), DASHBOARD_CACHE_TTL)

        record_event(
            self.audit_sink,
            "data_access",
            "analytics_view",
            {"dataType": "dashboard_analytics", "asOf": as_of.isoformat()},
        )
        return snapshot

    def get_benchmarks(self, organization_type: str) -> BenchmarkReport:
        """Benchmarks for peers of one organization size, cached for 6 hours."""
        cache_key = f"{BENCHMARK_CACHE_PREFIX}{organization_type}"

        report = self._load_cached(cache_key, BenchmarkReport)
        if report is None:
            records = self._all_records()
            report = build_benchmarks(records, organization_type, self._clock().isoformat())
            self._store_cached(cache_key, report.model_dump(mode="json"), BENCHMARK_CACHE_TTL)
        return report

    def _all_records(
        self, predicate: Optional[Callable[[SurveyRecord], bool]] = None
    ) -> List[SurveyRecord]:
        try:
            return self.store.query(predicate)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error("Record store query failed: %s", e)
            raise PersistenceError("Failed to read survey responses") from e

    def _load_cached(self, key: str, model):
        if self.cache is None:
            return None
        try:
            cached = self.cache.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s, recomputing: %s", key, e)
            return None
        if cached is None:
            return None
        try:
            return model.model_validate(cached)
        except ValidationError as e:
            logger.warning("Discarding malformed cache entry %s: %s", key, e)
            return None

    def _store_cached(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        if self.cache is None:
            return
        try:
            self.cache.put(key, value, ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
