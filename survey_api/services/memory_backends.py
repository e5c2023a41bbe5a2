"""In-process implementations of the store, cache and audit sink.

Used for local development and tests. Records are deep-copied on the way in
and out so callers can't mutate the stored state.
"""

import copy
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from survey_api.models.audit_models import AuditEntry
from survey_api.models.survey_models import SurveyRecord
from survey_api.services.storage_interfaces import AuditSink, Cache, RecordStore


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store."""

    def __init__(self) -> None:
        self._records: Dict[str, SurveyRecord] = {}

    def put(self, key: str, record: SurveyRecord) -> None:
        self._records[key] = record.model_copy(deep=True)

    def get(self, key: str) -> Optional[SurveyRecord]:
        record = self._records.get(key)
        return record.model_copy(deep=True) if record else None

    def query(
        self, predicate: Optional[Callable[[SurveyRecord], bool]] = None
    ) -> List[SurveyRecord]:
        return [
            r.model_copy(deep=True)
            for r in self._records.values()
            if predicate is None or predicate(r)
        ]

    def __len__(self) -> int:
        return len(self._records)


class InMemoryCache(Cache):
    """Dict-backed cache honouring TTLs against a pluggable clock."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return copy.deepcopy(value)

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self._clock()
        self._prune(now)
        self._entries[key] = (copy.deepcopy(value), now + ttl_seconds)

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryAuditSink(AuditSink):
    """List-backed audit log."""

    def __init__(self) -> None:
        self.entries: List[AuditEntry] = []

    def append(self, entry: AuditEntry) -> None:
        self.entries.append(entry.model_copy(deep=True))
