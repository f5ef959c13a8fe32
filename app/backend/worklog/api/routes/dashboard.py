"""Dashboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worklog.core.auth import RequestUserContext, get_current_user_context, require_roles
from worklog.db.session import get_db_session
from worklog.models.entities import UserRole
from worklog.services.reporting_service import ReportQueryService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _service(db: Session) -> ReportQueryService:
    return ReportQueryService(db)


@router.get("/today")
def get_today_stats(
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.today_stats(context=context)


@router.get("/employee")
def get_employee_dashboard(
    context: RequestUserContext = Depends(require_roles(UserRole.EMPLOYEE)),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.employee_dashboard(context=context)
