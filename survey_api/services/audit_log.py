"""Best-effort audit log writes."""

import logging
from typing import Any, Dict, Optional

from survey_api.models.audit_models import AuditEntry
from survey_api.services.storage_interfaces import AuditSink

logger = logging.getLogger(__name__)


def record_event(
    sink: Optional[AuditSink],
    event_type: str,
    action: str,
    details: Optional[Dict[str, Any]] = None,
) -> Optional[AuditEntry]:
    """
    Append an audit entry.

    Audit failures never fail the calling request: they are logged and
    None is returned.
    """
    if sink is None:
        return None
    entry = AuditEntry(eventType=event_type, action=action, details=details or {})
    try:
        sink.append(entry)
    except Exception as e:
        logger.error(
            "Audit log write failed for %s/%s (entry %s): %s",
            event_type, action, entry.id, e,
        )
        return None
    return entry
