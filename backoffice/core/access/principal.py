"""Principal and decision types for access checks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .departments import Department, Role


class AuthorizationOutcome(str, Enum):
    """Result of a page authorization check."""

    UNAUTHENTICATED = "unauthenticated"   # No session, send to login
    DENIED = "denied"                     # Signed in, not allowed here
    ALLOWED = "allowed"


@dataclass(frozen=True)
class Principal:
    """The authenticated staff member making a request."""

    user_id: str
    email: str
    role: Union[Role, str]
    primary_department: Optional[Union[Department, str]] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization check, with a reason when not allowed."""

    outcome: AuthorizationOutcome
    reason: Optional[str] = None
    department: Optional[Department] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AuthorizationOutcome.ALLOWED

    @classmethod
    def unauthenticated(cls) -> "AccessDecision":
        return cls(AuthorizationOutcome.UNAUTHENTICATED, reason="Authentication required")

    @classmethod
    def denied(cls, reason: str, department: Optional[Department] = None) -> "AccessDecision":
        return cls(AuthorizationOutcome.DENIED, reason=reason, department=department)

    @classmethod
    def granted(cls, department: Optional[Department]) -> "AccessDecision":
        return cls(AuthorizationOutcome.ALLOWED, department=department)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "allowed": self.allowed,
            "reason": self.reason,
            "department": self.department.value if self.department else None,
        }
