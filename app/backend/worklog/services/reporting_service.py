"""Report query service: range resolution, scoping, aggregation and serialization."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from worklog.core.auth import RequestUserContext
from worklog.core.config import get_settings
from worklog.core.logging import get_logger
from worklog.models.entities import DEFAULT_REPORT_CATEGORY, Project, TimeEntry, User
from worklog.repositories.worklog_repository import EntryStore, WorklogRepository
from worklog.services.access_filter import AccessFilter, ReportFilters
from worklog.services.aggregation import (
    UNKNOWN_KEY,
    AggregateResult,
    aggregate_entries,
)
from worklog.services.report_periods import (
    ReportPeriod,
    ReportRange,
    month_bounds,
    parse_period,
    resolve_range,
)

logger = get_logger(__name__)

Q2 = Decimal("0.01")

UNKNOWN_PROJECT_NAME = "General Work"
UNKNOWN_EMPLOYEE_NAME = "Unknown Employee"
NO_DESCRIPTION = "No description provided"


def _q2(value: Decimal) -> Decimal:
    return value.quantize(Q2)


def _hours(value: Decimal) -> str:
    return str(_q2(value))


def first_present(*candidates: object) -> object:
    """Return the first candidate that is not ``None``."""

    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


class ReportQueryService:
    """Read-only report queries scoped by the caller's role."""

    def __init__(self, db: Session | None = None, store: EntryStore | None = None) -> None:
        if store is None:
            if db is None:
                raise ValueError("ReportQueryService needs a session or an entry store.")
            store = WorklogRepository(db)
        self.db = db
        self.store = store
        self.settings = get_settings()

    # ---------- Scoping / fetch ----------
    @staticmethod
    def _effective_filters(
        context: RequestUserContext,
        *,
        employee_id: UUID | None,
        project_id: UUID | None,
    ) -> ReportFilters:
        access = AccessFilter.for_context(context)
        return access.apply(ReportFilters(employee_id=employee_id, project_id=project_id))

    def _fetch(
        self,
        filters: ReportFilters,
        *,
        date_range: ReportRange | None,
        newest_first: bool = False,
    ) -> list[TimeEntry]:
        return self.store.list_time_entries(
            start=date_range.start if date_range else None,
            end_before=date_range.end_exclusive if date_range else None,
            project_id=filters.project_id,
            employee_id=filters.employee_id,
            newest_first=newest_first,
        )

    def _reference_lookups(self, entries: Iterable[TimeEntry]) -> tuple[dict[UUID, Project], dict[UUID, User]]:
        project_ids: set[UUID] = set()
        employee_ids: set[UUID] = set()
        for entry in entries:
            if entry.project_id is not None:
                project_ids.add(entry.project_id)
            if entry.employee_id is not None:
                employee_ids.add(entry.employee_id)
        return self.store.get_projects_by_ids(project_ids), self.store.get_users_by_ids(employee_ids)

    # ---------- Serialization ----------
    @staticmethod
    def serialize_project_ref(project: Project | None) -> dict[str, object]:
        if project is None:
            return {"id": UNKNOWN_KEY, "name": UNKNOWN_PROJECT_NAME}
        return {"id": str(project.id), "name": project.name}

    @staticmethod
    def serialize_employee_ref(user: User | None) -> dict[str, object]:
        if user is None:
            return {"id": UNKNOWN_KEY, "username": UNKNOWN_EMPLOYEE_NAME}
        return {"id": str(user.id), "username": user.username}

    @staticmethod
    def serialize_project(project: Project) -> dict[str, object]:
        return {
            "id": str(project.id),
            "name": project.name,
            "description": project.description,
            "status": project.status.value,
        }

    def serialize_time_entry(
        self,
        entry: TimeEntry,
        *,
        projects: dict[UUID, Project],
        users: dict[UUID, User],
    ) -> dict[str, object]:
        project = projects.get(entry.project_id) if entry.project_id is not None else None
        return {
            "id": str(entry.id),
            "date": entry.entry_date.isoformat(),
            "day": entry.entry_date.date().isoformat(),
            "employee": self.serialize_employee_ref(users.get(entry.employee_id)),
            "project": self.serialize_project_ref(project),
            "hours_worked": _hours(entry.hours_worked),
            "title": entry.title,
            "details": entry.details,
            "description": first_present(entry.description, entry.details, entry.title, NO_DESCRIPTION),
            "category": first_present(entry.category, DEFAULT_REPORT_CATEGORY),
        }

    def serialize_aggregate(
        self,
        result: AggregateResult,
        *,
        projects: dict[UUID, Project],
        users: dict[UUID, User],
    ) -> dict[str, object]:
        projects_by_key = {str(project_id): project for project_id, project in projects.items()}
        users_by_key = {str(user_id): user for user_id, user in users.items()}

        daily_breakdown = {
            day.isoformat(): {
                "date": day.isoformat(),
                "day_name": day.strftime("%A"),
                "day_number": day.day,
                "hours": _hours(bucket.hours),
                "report_count": bucket.report_count,
                "project_ids": sorted(bucket.project_keys),
            }
            for day, bucket in sorted(result.daily.items())
        }

        def project_order(key: str) -> tuple[int, str, str]:
            project = projects_by_key.get(key)
            return (project is None, project.name if project else UNKNOWN_PROJECT_NAME, key)

        project_breakdown: dict[str, object] = {}
        for key in sorted(result.projects, key=project_order):
            bucket = result.projects[key]
            project = projects_by_key.get(key)
            project_breakdown[key] = {
                "project": {
                    **self.serialize_project_ref(project),
                    "description": project.description if project else None,
                },
                "hours": _hours(bucket.hours),
                "report_count": bucket.report_count,
                "employee_ids": sorted(bucket.employee_keys),
            }

        def employee_order(key: str) -> tuple[int, str, str]:
            user = users_by_key.get(key)
            return (user is None, user.username if user else UNKNOWN_EMPLOYEE_NAME, key)

        employee_breakdown: dict[str, object] = {}
        for key in sorted(result.employees, key=employee_order):
            bucket = result.employees[key]
            employee_breakdown[key] = {
                "employee": self.serialize_employee_ref(users_by_key.get(key)),
                "hours": _hours(bucket.hours),
                "report_count": bucket.report_count,
                "project_ids": sorted(bucket.project_keys),
            }

        payload: dict[str, object] = {
            "period": result.period.value,
            "start": result.date_range.start_date.isoformat(),
            "end": result.date_range.end_date.isoformat(),
            "total_hours": _hours(result.total_hours),
            "total_reports": result.total_reports,
            "daily_breakdown": daily_breakdown,
            "project_breakdown": project_breakdown,
            "employee_breakdown": employee_breakdown,
        }
        if result.weekly is not None:
            payload["weekly_breakdown"] = {
                f"week{number}": {
                    "week_number": number,
                    "week_start": bucket.week_start.isoformat(),
                    "week_end": bucket.week_end.isoformat(),
                    "hours": _hours(bucket.hours),
                    "report_count": bucket.report_count,
                    "project_ids": sorted(bucket.project_keys),
                    "employee_ids": sorted(bucket.employee_keys),
                }
                for number, bucket in sorted(result.weekly.items())
            }
            payload["weekly_unplaced"] = {
                "hours": _hours(result.unplaced_hours),
                "report_count": result.unplaced_reports,
            }
        return payload

    # ---------- Aggregates ----------
    def _aggregate(
        self,
        *,
        context: RequestUserContext,
        period: ReportPeriod,
        date_range: ReportRange,
        employee_id: UUID | None,
        project_id: UUID | None,
    ) -> tuple[AggregateResult, dict[UUID, Project], dict[UUID, User]]:
        filters = self._effective_filters(context, employee_id=employee_id, project_id=project_id)
        entries = self._fetch(filters, date_range=date_range)
        projects, users = self._reference_lookups(entries)
        result = aggregate_entries(
            entries,
            date_range=date_range,
            period=period,
            known_project_ids=projects.keys(),
            known_employee_ids=users.keys(),
        )
        logger.debug(
            "reporting.aggregate_computed",
            period=period.value,
            start=date_range.start_date.isoformat(),
            end=date_range.end_date.isoformat(),
            entries=result.total_reports,
            requester_id=str(context.user_id),
        )
        return result, projects, users

    def period_summary(
        self,
        *,
        context: RequestUserContext,
        period: ReportPeriod | str,
        reference_date: date,
        range_from: date | None = None,
        range_to: date | None = None,
        employee_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> dict[str, object]:
        resolved_period = parse_period(period)
        date_range = resolve_range(reference_date, resolved_period, range_from=range_from, range_to=range_to)
        result, projects, users = self._aggregate(
            context=context,
            period=resolved_period,
            date_range=date_range,
            employee_id=employee_id,
            project_id=project_id,
        )
        return self.serialize_aggregate(result, projects=projects, users=users)

    def weekly_summary(
        self,
        *,
        context: RequestUserContext,
        week_start: date | None = None,
        week_end: date | None = None,
        employee_id: UUID | None = None,
        project_id: UUID | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        return self.period_summary(
            context=context,
            period=ReportPeriod.WEEK,
            reference_date=today or date.today(),
            range_from=week_start,
            range_to=week_end,
            employee_id=employee_id,
            project_id=project_id,
        )

    def monthly_summary(
        self,
        *,
        context: RequestUserContext,
        month: int | None = None,
        year: int | None = None,
        employee_id: UUID | None = None,
        project_id: UUID | None = None,
        today: date | None = None,
    ) -> dict[str, object]:
        current = today or date.today()
        month_start, _ = month_bounds(
            current.year if year is None else year,
            current.month if month is None else month,
        )
        return self.period_summary(
            context=context,
            period=ReportPeriod.MONTH,
            reference_date=month_start,
            employee_id=employee_id,
            project_id=project_id,
        )

    # ---------- Lists ----------
    def list_reports(
        self,
        *,
        context: RequestUserContext,
        day: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        project_id: UUID | None = None,
        employee_id: UUID | None = None,
    ) -> list[dict[str, object]]:
        if day is not None and (start_date is not None or end_date is not None):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Use either date or start_date/end_date, not both.",
            )

        date_range: ReportRange | None = None
        if day is not None:
            date_range = resolve_range(day, ReportPeriod.DAY)
        elif start_date is not None or end_date is not None:
            reference = start_date or end_date
            date_range = resolve_range(reference, ReportPeriod.DAY, range_from=start_date, range_to=end_date)

        filters = self._effective_filters(context, employee_id=employee_id, project_id=project_id)
        entries = self._fetch(filters, date_range=date_range, newest_first=True)
        projects, users = self._reference_lookups(entries)
        return [self.serialize_time_entry(entry, projects=projects, users=users) for entry in entries]

    def recent_reports(self, *, context: RequestUserContext, limit: int | None = None) -> list[dict[str, object]]:
        if limit is None:
            limit = self.settings.recent_reports_limit
        elif limit < 1:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="limit must be at least 1.",
            )
        return self.list_reports(context=context)[:limit]

    # ---------- Dashboard ----------
    def _visible_projects(self, context: RequestUserContext) -> list[Project]:
        if AccessFilter.for_context(context).sees_all_employees:
            return self.store.list_projects()
        return self.store.list_projects_for_member(context.user_id)

    def today_stats(self, *, context: RequestUserContext, today: date | None = None) -> dict[str, object]:
        current = today or date.today()
        day_result, _, _ = self._aggregate(
            context=context,
            period=ReportPeriod.DAY,
            date_range=resolve_range(current, ReportPeriod.DAY),
            employee_id=None,
            project_id=None,
        )
        week_result, _, _ = self._aggregate(
            context=context,
            period=ReportPeriod.WEEK,
            date_range=resolve_range(current, ReportPeriod.WEEK),
            employee_id=None,
            project_id=None,
        )
        return {
            "date": current.isoformat(),
            "total_reports_today": day_result.total_reports,
            "total_hours_today": _hours(day_result.total_hours),
            "current_project_count": len(self._visible_projects(context)),
            "this_week_hours": _hours(week_result.total_hours),
        }

    def employee_dashboard(self, *, context: RequestUserContext, today: date | None = None) -> dict[str, object]:
        reports = self.list_reports(context=context)
        projects = self._visible_projects(context)
        return {
            "stats": self.today_stats(context=context, today=today),
            "recent_reports": reports[: self.settings.recent_reports_limit],
            "projects": [self.serialize_project(project) for project in projects],
            "reports": reports,
        }
