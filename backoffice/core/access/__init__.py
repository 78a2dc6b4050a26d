"""Department-scoped access control for the back office.

This module defines the department/role model, the permission matrix, and
the AccessControl decision surface used by every admin page.
"""

from .departments import (
    Department,
    Role,
    DEPARTMENT_PERMISSIONS,
    TOP_ADMIN_DEPARTMENT,
    get_department_name,
    get_department_path,
)
from .principal import AccessDecision, AuthorizationOutcome, Principal
from .pages import PageRegistry
from .audit import AuditEvent, BestEffortAuditSink, NullAuditSink
from .control import AccessControl

__all__ = [
    "Department",
    "Role",
    "DEPARTMENT_PERMISSIONS",
    "TOP_ADMIN_DEPARTMENT",
    "get_department_name",
    "get_department_path",
    "AccessDecision",
    "AuthorizationOutcome",
    "Principal",
    "PageRegistry",
    "AuditEvent",
    "BestEffortAuditSink",
    "NullAuditSink",
    "AccessControl",
]
