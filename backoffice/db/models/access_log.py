"""Department access log model.

Append-only record of page authorization decisions. Rows are written by the
audit sink and read only by the audit API; nothing updates or deletes them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text, Uuid

from backoffice.core.access.audit import AuditEvent
from backoffice.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DepartmentAccessLog(Base):
    """One department access decision."""
    __tablename__ = "department_access_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Actor information
    user_id = Column(String(64), nullable=False, index=True)
    user_email = Column(String(255), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    # What was accessed
    department = Column(String(50), nullable=True, index=True)  # NULL for unassigned pages
    page_path = Column(String(500), nullable=False)
    action = Column(String(50), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    def __repr__(self) -> str:
        return f"<DepartmentAccessLog {self.action} {self.page_path} by {self.user_email}>"

    @classmethod
    def from_event(cls, event: AuditEvent) -> "DepartmentAccessLog":
        """Build a row from an audit event."""
        return cls(
            user_id=event.user_id,
            user_email=event.user_email,
            department=event.department.value if event.department else None,
            page_path=event.page_path,
            action=event.action,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            created_at=event.timestamp,
        )
