from typing import Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from backoffice.core.access import AccessControl, AuthorizationOutcome, Department, Principal
from backoffice.core.config import Settings
from backoffice.core.security import decode_principal

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

SESSION_COOKIE = "session_token"


def get_db(request: Request) -> Generator:
    """Database session from the application's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_access_control(request: Request) -> AccessControl:
    return request.app.state.access_control


def get_optional_principal(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Optional[Principal]:
    """Principal from a bearer token or the session cookie, or None."""
    token = token or request.cookies.get(SESSION_COOKIE)
    if not token:
        return None
    return decode_principal(token, settings)


def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    """Authenticated principal, or 401."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def redirect_to(location: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_303_SEE_OTHER,
        detail=f"Redirecting to {location}",
        headers={"Location": location},
    )


class DepartmentDependency:
    """
    FastAPI dependency gating a route to one department.

    No session redirects to the login page; a denied principal is sent to
    the access-denied page. Otherwise the principal is returned.

    Usage:
        @router.get("/admin/editorial/calendar")
        async def calendar(principal: Principal = Depends(require_department(Department.EDITORIAL))):
            ...
    """

    def __init__(self, department: Department):
        self.department = department

    def __call__(
        self,
        principal: Optional[Principal] = Depends(get_optional_principal),
        control: AccessControl = Depends(get_access_control),
        settings: Settings = Depends(get_app_settings),
    ) -> Principal:
        decision = control.authorize_department(principal, self.department)

        if decision.outcome == AuthorizationOutcome.UNAUTHENTICATED:
            raise redirect_to(settings.login_path)
        if decision.outcome == AuthorizationOutcome.DENIED:
            raise redirect_to(settings.access_denied_path)

        return principal


def require_department(department: Department) -> DepartmentDependency:
    """Shorthand for DepartmentDependency(department)."""
    return DepartmentDependency(department)
