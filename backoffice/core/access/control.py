"""Access decisions for department-scoped admin pages.

AccessControl is the single decision surface for department access. It is
constructed explicitly with its permission matrix, page registry and audit
sink; nothing here reads global state.
"""

import logging
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Union

from .audit import ACTION_DENIED, ACTION_VIEW, AuditEvent, AuditSink, NullAuditSink
from .departments import (
    DEPARTMENT_PERMISSIONS,
    Department,
    Role,
    coerce_department,
    coerce_role,
    validate_matrix,
)
from .pages import PageRegistry
from .principal import AccessDecision, Principal


logger = logging.getLogger(__name__)

RoleValue = Union[Role, str]
DepartmentValue = Union[Department, str]


class AccessControl:
    """Decides whether a principal may act within a department."""

    def __init__(
        self,
        matrix: Mapping[Department, FrozenSet[Role]] = DEPARTMENT_PERMISSIONS,
        registry: Optional[PageRegistry] = None,
        audit_sink: Optional[AuditSink] = None,
    ):
        """
        Initialize with the static configuration.

        Args:
            matrix: Department -> allowed roles. Validated and frozen here.
            registry: Page path -> owning department. Defaults to the
                department route base paths.
            audit_sink: Destination for access events. Defaults to discarding.

        Raises:
            ValueError: If the matrix violates its invariants
        """
        validate_matrix(matrix)
        self.matrix: Mapping[Department, FrozenSet[Role]] = MappingProxyType(
            {department: frozenset(roles) for department, roles in matrix.items()}
        )
        self.registry = registry if registry is not None else PageRegistry.default()
        self.audit_sink = audit_sink if audit_sink is not None else NullAuditSink()

    def can_access(
        self,
        role: RoleValue,
        primary_department: Optional[DepartmentValue],
        target_department: DepartmentValue,
    ) -> bool:
        """
        Check if a role/home-department pair may act in the target department.

        Unknown roles and departments are denied, never raised. A None role
        or target is a caller bug and raises TypeError.
        """
        if target_department is None:
            raise TypeError("target_department is required")

        resolved_role = coerce_role(role)

        # Super Admin bypasses the matrix entirely
        if resolved_role == Role.SUPER_ADMIN:
            return True

        target = coerce_department(target_department)
        if target is None or target not in self.matrix:
            return False

        if resolved_role is None or resolved_role not in self.matrix[target]:
            return False

        # Cross-department grant
        if resolved_role == Role.ADMIN:
            return True

        return coerce_department(primary_department) == target

    def accessible_departments(
        self,
        role: RoleValue,
        primary_department: Optional[DepartmentValue],
    ) -> FrozenSet[Department]:
        """
        Get the departments a principal may browse.

        Derived from can_access so that membership here always agrees with
        a direct check.
        """
        if coerce_role(role) == Role.SUPER_ADMIN:
            return frozenset(Department)

        return frozenset(
            department
            for department in Department
            if self.can_access(role, primary_department, department)
        )

    def authorize_department(
        self,
        principal: Optional[Principal],
        department: DepartmentValue,
    ) -> AccessDecision:
        """Three-way decision for a known target department."""
        if principal is None:
            return AccessDecision.unauthenticated()

        target = coerce_department(department)
        if self.can_access(principal.role, principal.primary_department, department):
            # target is None only for a super admin on an unrecognized department
            return AccessDecision.granted(target)

        role_value = getattr(principal.role, "value", principal.role)
        department_value = getattr(department, "value", department)
        reason = f"Role {role_value} does not have access to the {department_value} department"
        logger.info(f"Access denied for {principal.email}: {reason}")
        return AccessDecision.denied(reason, target)

    def authorize_page_request(
        self,
        principal: Optional[Principal],
        page_path: str,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AccessDecision:
        """
        Decide whether a principal may open an admin page.

        The owning department comes from the page registry. Paths no
        department owns are open to super admins only. Every authenticated
        decision is sent to the audit sink, and audit failures never change
        the result.
        """
        if principal is None:
            return AccessDecision.unauthenticated()

        department = self.registry.resolve(page_path)
        if department is None:
            decision = self._authorize_unassigned_page(principal, page_path)
        else:
            decision = self.authorize_department(principal, department)

        self._emit(
            AuditEvent(
                user_id=principal.user_id,
                user_email=principal.email,
                department=department,
                page_path=page_path,
                action=ACTION_VIEW if decision.allowed else ACTION_DENIED,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        return decision

    def accessible_pages(self, principal: Optional[Principal]) -> List[str]:
        """Registered page paths the principal may open."""
        if principal is None:
            return []
        departments = self.accessible_departments(principal.role, principal.primary_department)
        return [
            page for page in self.registry.pages()
            if self.registry.resolve(page) in departments
        ]

    def _authorize_unassigned_page(self, principal: Principal, page_path: str) -> AccessDecision:
        if coerce_role(principal.role) == Role.SUPER_ADMIN:
            return AccessDecision.granted(None)

        reason = f"Page {page_path} is not assigned to a department"
        logger.info(f"Access denied for {principal.email}: {reason}")
        return AccessDecision.denied(reason)

    def _emit(self, event: AuditEvent) -> None:
        try:
            self.audit_sink.emit(event)
        except Exception as e:
            logger.warning(f"Audit emission failed for {event.user_email}: {e}")
