"""Department access log query API endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from backoffice.api.deps import get_db, require_department
from backoffice.core.access import Department, Principal
from backoffice.db.models import DepartmentAccessLog

router = APIRouter(prefix="/audit", tags=["audit"])


# Schemas
class AccessLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    user_email: str
    department: Optional[str]
    page_path: str
    action: str
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime


class AccessLogListResponse(BaseModel):
    items: List[AccessLogResponse]
    total: int
    page: int
    per_page: int


# Endpoints
@router.get("/department-access", response_model=AccessLogListResponse)
async def list_department_access(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_department(Department.SUPER_ADMIN)),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    user_id: Optional[str] = None,
    department: Optional[Department] = None,
    action: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    """
    List department access log entries, newest first.

    Supports filtering by user, department, action, and date range.
    """
    query = db.query(DepartmentAccessLog)

    if user_id:
        query = query.filter(DepartmentAccessLog.user_id == user_id)

    if department:
        query = query.filter(DepartmentAccessLog.department == department.value)

    if action:
        query = query.filter(DepartmentAccessLog.action == action)

    if start_date:
        query = query.filter(DepartmentAccessLog.created_at >= start_date)

    if end_date:
        query = query.filter(DepartmentAccessLog.created_at <= end_date)

    total = query.count()
    items = (
        query.order_by(DepartmentAccessLog.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return AccessLogListResponse(
        items=[AccessLogResponse.model_validate(item) for item in items],
        total=total,
        page=page,
        per_page=per_page,
    )
