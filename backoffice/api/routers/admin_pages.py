"""Admin page gate.

Every /admin page is authorized against the department that owns it before
anything is rendered. Rendering itself happens in the frontend.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from backoffice.api.deps import get_access_control, get_app_settings, get_optional_principal
from backoffice.core.access import AccessControl, AuthorizationOutcome, Principal
from backoffice.core.config import Settings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/login")
async def login_page():
    return {"page": "login"}


@router.get("/access-denied")
async def access_denied_page():
    return {"page": "access-denied", "message": "You do not have access to this page"}


@router.get("/{page_path:path}")
async def admin_page(
    page_path: str,
    request: Request,
    principal: Optional[Principal] = Depends(get_optional_principal),
    control: AccessControl = Depends(get_access_control),
    settings: Settings = Depends(get_app_settings),
):
    """Authorize an admin page and redirect when the user may not open it."""
    full_path = f"/admin/{page_path}"
    decision = control.authorize_page_request(
        principal,
        full_path,
        ip_address=getattr(request.state, "client_ip", None),
        user_agent=getattr(request.state, "user_agent", None),
    )

    if decision.outcome == AuthorizationOutcome.UNAUTHENTICATED:
        return RedirectResponse(settings.login_path, status_code=status.HTTP_303_SEE_OTHER)
    if decision.outcome == AuthorizationOutcome.DENIED:
        return RedirectResponse(settings.access_denied_path, status_code=status.HTTP_303_SEE_OTHER)

    return {
        "page": full_path,
        "department": decision.department.value if decision.department else None,
    }
