"""Department and role model for the back-office access control.

Every admin surface is owned by exactly one department. A department's
entry in the permission matrix lists the roles that may act within it:

  - SUPER_ADMIN is allowed everywhere (checked before the matrix)
  - ADMIN gets cross-department access wherever the matrix lists it
  - every other role also needs a matching primary department
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Union


class Role(str, Enum):
    """Staff roles assigned to a user account."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    AUTHOR = "AUTHOR"
    PENDING = "PENDING"     # Invited, not yet activated


class Department(str, Enum):
    """Organizational units used to scope admin access."""

    SUPER_ADMIN = "SUPER_ADMIN"
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"
    EDITORIAL = "EDITORIAL"
    SUCCESS_PLUS = "SUCCESS_PLUS"     # Membership tier operations
    DEV = "DEV"
    MARKETING = "MARKETING"
    COACHING = "COACHING"


TOP_ADMIN_DEPARTMENT = Department.SUPER_ADMIN

PermissionMatrix = Mapping[Department, FrozenSet[Role]]


# Department -> roles allowed to act within it
DEPARTMENT_PERMISSIONS: PermissionMatrix = MappingProxyType({
    Department.SUPER_ADMIN: frozenset([Role.SUPER_ADMIN]),
    Department.CUSTOMER_SERVICE: frozenset([Role.SUPER_ADMIN, Role.ADMIN]),
    Department.EDITORIAL: frozenset([
        Role.SUPER_ADMIN, Role.ADMIN, Role.EDITOR, Role.AUTHOR,
    ]),
    Department.SUCCESS_PLUS: frozenset([Role.SUPER_ADMIN, Role.ADMIN]),
    Department.DEV: frozenset([Role.SUPER_ADMIN, Role.ADMIN]),
    Department.MARKETING: frozenset([Role.SUPER_ADMIN, Role.ADMIN]),
    Department.COACHING: frozenset([Role.SUPER_ADMIN, Role.ADMIN]),
})


DEPARTMENT_NAMES: Dict[Department, str] = {
    Department.SUPER_ADMIN: "Super Admin",
    Department.CUSTOMER_SERVICE: "Customer Service",
    Department.EDITORIAL: "Editorial",
    Department.SUCCESS_PLUS: "SUCCESS+",
    Department.DEV: "Dev",
    Department.MARKETING: "Marketing",
    Department.COACHING: "Coaching",
}

DEPARTMENT_PATHS: Dict[Department, str] = {
    Department.SUPER_ADMIN: "/admin/super",
    Department.CUSTOMER_SERVICE: "/admin/customer-service",
    Department.EDITORIAL: "/admin/editorial",
    Department.SUCCESS_PLUS: "/admin/success-plus",
    Department.DEV: "/admin/dev",
    Department.MARKETING: "/admin/marketing",
    Department.COACHING: "/admin/coaching",
}


def validate_matrix(matrix: Mapping[Department, FrozenSet[Role]]) -> None:
    """
    Check the permission matrix invariants.

    Every department must map to a non-empty role set that includes
    SUPER_ADMIN.

    Raises:
        ValueError: If any department violates the invariants
    """
    if not matrix:
        raise ValueError("Permission matrix is empty")

    for department, roles in matrix.items():
        if not isinstance(department, Department):
            raise ValueError(f"Unknown department in permission matrix: {department!r}")
        if not roles:
            raise ValueError(f"Department {department.value} has no allowed roles")
        if Role.SUPER_ADMIN not in roles:
            raise ValueError(
                f"Department {department.value} does not allow {Role.SUPER_ADMIN.value}"
            )


def coerce_role(value: Union[str, Role]) -> Optional[Role]:
    """Map a role value to a Role. Unknown values give None."""
    if value is None:
        raise TypeError("role is required")
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def coerce_department(value: Union[str, Department, None]) -> Optional[Department]:
    """Map a department value to a Department. Unknown values give None."""
    if value is None:
        return None
    if isinstance(value, Department):
        return value
    try:
        return Department(value)
    except ValueError:
        return None


def get_department_name(department: Department) -> str:
    """Get the display name for a department."""
    return DEPARTMENT_NAMES[department]


def get_department_path(department: Department) -> str:
    """Get the route base path for a department."""
    return DEPARTMENT_PATHS[department]
