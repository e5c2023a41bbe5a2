"""Models for the append-only audit log."""

from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4

from pydantic import BaseModel, Field

DEFAULT_COMPLIANCE_FLAGS = ["GDPR", "HIPAA", "NPHIES"]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditEntry(BaseModel):
    """One audit log event. Never updated once written."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: str = Field(default_factory=_utc_now)
    eventType: str
    action: str
    details: Dict[str, Any] = Field(default_factory=dict)
    success: bool = True
    complianceFlags: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COMPLIANCE_FLAGS)
    )
