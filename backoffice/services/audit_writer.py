"""Database-backed writer for department access events."""

from typing import Callable

from sqlalchemy.orm import Session

from backoffice.core.access.audit import AuditEvent
from backoffice.db.models import DepartmentAccessLog


class SqlAlchemyAuditWriter:
    """
    Persists audit events to the department_access_log table.

    Each write uses its own session. Failures are rolled back and re-raised;
    BestEffortAuditSink is responsible for swallowing them.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def write(self, event: AuditEvent) -> None:
        db = self.session_factory()
        try:
            db.add(DepartmentAccessLog.from_event(event))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
