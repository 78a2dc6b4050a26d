"""Department access API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from backoffice.api.deps import get_access_control, get_current_principal, get_optional_principal
from backoffice.core.access import (
    AccessControl,
    Principal,
    get_department_name,
    get_department_path,
)

router = APIRouter(prefix="/access", tags=["access"])


# Schemas
class DepartmentInfo(BaseModel):
    department: str
    name: str
    path: str


class AccessDecisionResponse(BaseModel):
    outcome: str
    allowed: bool
    reason: Optional[str] = None
    department: Optional[str] = None


# Endpoints
@router.get("/departments", response_model=List[DepartmentInfo])
async def list_accessible_departments(
    principal: Principal = Depends(get_current_principal),
    control: AccessControl = Depends(get_access_control),
):
    """List the departments the current user may browse."""
    departments = control.accessible_departments(principal.role, principal.primary_department)
    return [
        DepartmentInfo(
            department=d.value,
            name=get_department_name(d),
            path=get_department_path(d),
        )
        for d in sorted(departments, key=lambda d: d.value)
    ]


@router.get("/check", response_model=AccessDecisionResponse)
async def check_page_access(
    request: Request,
    path: str = Query(..., min_length=1, description="Admin page path to check"),
    principal: Optional[Principal] = Depends(get_optional_principal),
    control: AccessControl = Depends(get_access_control),
):
    """Authorize a page path for the current user without opening it."""
    decision = control.authorize_page_request(
        principal,
        path,
        ip_address=getattr(request.state, "client_ip", None),
        user_agent=getattr(request.state, "user_agent", None),
    )
    return AccessDecisionResponse(**decision.to_dict())


@router.get("/pages", response_model=List[str])
async def list_accessible_pages(
    principal: Principal = Depends(get_current_principal),
    control: AccessControl = Depends(get_access_control),
):
    """List the registered admin pages the current user may open."""
    return control.accessible_pages(principal)
