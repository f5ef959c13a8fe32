"""Read-side persistence queries for time entries, projects and users."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from worklog.models.entities import Project, ProjectAssignment, TimeEntry, User


class EntryStore(Protocol):
    """Query capability the reporting service depends on."""

    def list_time_entries(
        self,
        *,
        start: datetime | None = None,
        end_before: datetime | None = None,
        project_id: UUID | None = None,
        employee_id: UUID | None = None,
        newest_first: bool = False,
    ) -> list[TimeEntry]: ...

    def get_projects_by_ids(self, project_ids: Collection[UUID]) -> dict[UUID, Project]: ...

    def get_users_by_ids(self, user_ids: Collection[UUID]) -> dict[UUID, User]: ...

    def list_projects(self) -> list[Project]: ...

    def list_projects_for_member(self, user_id: UUID) -> list[Project]: ...


class WorklogRepository:
    """SQLAlchemy implementation of :class:`EntryStore`."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Time entries ----------
    def list_time_entries(
        self,
        *,
        start: datetime | None = None,
        end_before: datetime | None = None,
        project_id: UUID | None = None,
        employee_id: UUID | None = None,
        newest_first: bool = False,
    ) -> list[TimeEntry]:
        conditions = []
        if start is not None:
            conditions.append(TimeEntry.entry_date >= start)
        if end_before is not None:
            conditions.append(TimeEntry.entry_date < end_before)
        if project_id is not None:
            conditions.append(TimeEntry.project_id == project_id)
        if employee_id is not None:
            conditions.append(TimeEntry.employee_id == employee_id)

        statement = select(TimeEntry)
        if conditions:
            statement = statement.where(and_(*conditions))
        if newest_first:
            statement = statement.order_by(TimeEntry.entry_date.desc(), TimeEntry.id.desc())
        else:
            statement = statement.order_by(TimeEntry.entry_date.asc(), TimeEntry.id.asc())
        return list(self.db.scalars(statement).all())

    # ---------- Projects ----------
    def get_projects_by_ids(self, project_ids: Collection[UUID]) -> dict[UUID, Project]:
        if not project_ids:
            return {}
        rows = self.db.scalars(select(Project).where(Project.id.in_(set(project_ids)))).all()
        return {row.id: row for row in rows}

    def list_projects(self) -> list[Project]:
        return list(self.db.scalars(select(Project).order_by(Project.name.asc(), Project.id.asc())).all())

    def list_projects_for_member(self, user_id: UUID) -> list[Project]:
        return list(
            self.db.scalars(
                select(Project)
                .join(ProjectAssignment, ProjectAssignment.project_id == Project.id)
                .where(ProjectAssignment.user_id == user_id)
                .order_by(Project.name.asc(), Project.id.asc())
            ).all()
        )

    # ---------- Users ----------
    def get_users_by_ids(self, user_ids: Collection[UUID]) -> dict[UUID, User]:
        if not user_ids:
            return {}
        rows = self.db.scalars(select(User).where(User.id.in_(set(user_ids)))).all()
        return {row.id: row for row in rows}
