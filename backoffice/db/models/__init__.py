"""Database models for the back office."""

from backoffice.db.models.access_log import DepartmentAccessLog

__all__ = [
    "DepartmentAccessLog",
]
