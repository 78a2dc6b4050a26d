"""Department access audit events and best-effort delivery.

Audit events are an observability record, not a dependency of the access
decision. Delivery is fire-and-forget and at-most-once: the caller never
waits for the write, a failed write is logged and dropped, and nothing is
retried.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from .departments import Department


logger = logging.getLogger(__name__)


# Action names recorded for page authorization checks
ACTION_VIEW = "view"
ACTION_DENIED = "denied"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuditEvent:
    """One department access record."""

    user_id: str
    user_email: str
    department: Optional[Department]
    page_path: str
    action: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "userEmail": self.user_email,
            "department": self.department.value if self.department else None,
            "pagePath": self.page_path,
            "action": self.action,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp.isoformat(),
        }


class AuditWriter(Protocol):
    """Anything that can persist an audit event. May raise on failure."""

    def write(self, event: AuditEvent) -> None:
        ...


class AuditSink(Protocol):
    """Write-only destination for audit events. Must not block the caller."""

    def emit(self, event: AuditEvent) -> None:
        ...


class NullAuditSink:
    """Discards every event. Used when auditing is disabled."""

    def emit(self, event: AuditEvent) -> None:
        return None

    def shutdown(self, wait: bool = True) -> None:
        return None


class BestEffortAuditSink:
    """
    Hands audit events to a writer on a background thread pool.

    emit() returns as soon as the write is queued. Writer errors are logged
    at WARNING and discarded. Events emitted after shutdown are dropped.

    Usage:
        sink = BestEffortAuditSink(SqlAlchemyAuditWriter(make_session_factory(url)))
        control = AccessControl(audit_sink=sink)
        ...
        sink.shutdown()
    """

    def __init__(self, writer: AuditWriter, max_workers: int = 1):
        self.writer = writer
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="audit-sink"
        )

    def emit(self, event: AuditEvent) -> None:
        try:
            self._executor.submit(self._deliver, event)
        except RuntimeError:
            # Executor already shut down
            logger.warning(
                f"Audit sink closed, dropping {event.action} event for {event.user_email}"
            )

    def _deliver(self, event: AuditEvent) -> None:
        try:
            self.writer.write(event)
        except Exception as e:
            logger.warning(
                f"Audit write failed for {event.action} on {event.page_path} "
                f"by {event.user_email}: {e}"
            )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events. With wait=True, drain pending writes first."""
        self._executor.shutdown(wait=wait)
