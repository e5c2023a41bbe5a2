"""
Abstract interfaces for the pipeline's external collaborators.

Focused, minimal interfaces for each collaborator:
- RecordStore: durable survey records keyed by id
- Cache: key-value store with a retention window
- AuditSink: append-only audit log
- AdvisoryService: best-effort natural-language insight generation
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from survey_api.models.audit_models import AuditEntry
from survey_api.models.survey_models import SurveyRecord


class RecordStore(ABC):
    """Interface for the durable survey record store."""

    @abstractmethod
    def put(self, key: str, record: SurveyRecord) -> None:
        """Persist a record under key. Raises PersistenceError on failure."""

    @abstractmethod
    def get(self, key: str) -> Optional[SurveyRecord]:
        """Fetch a record by key, None when absent."""

    @abstractmethod
    def query(
        self, predicate: Optional[Callable[[SurveyRecord], bool]] = None
    ) -> List[SurveyRecord]:
        """Return every record matching predicate (all records when None)."""


class Cache(ABC):
    """Interface for a key-value cache with per-entry TTL."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached JSON-compatible value, None on miss or expiry."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a JSON-compatible value for ttl_seconds."""


class AuditSink(ABC):
    """Interface for the append-only audit log."""

    @abstractmethod
    def append(self, entry: AuditEntry) -> None:
        """Append an entry."""


class AdvisoryService(ABC):
    """Interface for the external text-generation advisor."""

    @abstractmethod
    async def summarize(self, context: Dict[str, Any]) -> str:
        """Return a short insight summary for the given survey context."""
