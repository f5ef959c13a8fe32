"""Report list and aggregate endpoints."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from worklog.core.auth import RequestUserContext, get_current_user_context
from worklog.db.session import get_db_session
from worklog.services.reporting_service import ReportQueryService

router = APIRouter(prefix="/reports", tags=["reports"])


def _service(db: Session) -> ReportQueryService:
    return ReportQueryService(db)


@router.get("")
def list_reports(
    day: date | None = Query(default=None, alias="date"),
    start_date: date | None = None,
    end_date: date | None = None,
    project_id: UUID | None = None,
    employee_id: UUID | None = None,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> list[dict[str, object]]:
    service = _service(db)
    return service.list_reports(
        context=context,
        day=day,
        start_date=start_date,
        end_date=end_date,
        project_id=project_id,
        employee_id=employee_id,
    )


@router.get("/recent")
def list_recent_reports(
    limit: int | None = Query(default=None, ge=1, le=100),
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> list[dict[str, object]]:
    service = _service(db)
    return service.recent_reports(context=context, limit=limit)


@router.get("/weekly")
def weekly_report(
    week_start: date | None = None,
    week_end: date | None = None,
    employee_id: UUID | None = None,
    project_id: UUID | None = None,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.weekly_summary(
        context=context,
        week_start=week_start,
        week_end=week_end,
        employee_id=employee_id,
        project_id=project_id,
    )


@router.get("/monthly")
def monthly_report(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1, le=9999),
    employee_id: UUID | None = None,
    project_id: UUID | None = None,
    context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _service(db)
    return service.monthly_summary(
        context=context,
        month=month,
        year=year,
        employee_id=employee_id,
        project_id=project_id,
    )
