"""Row-level visibility of time entries by caller role."""

from __future__ import annotations

from dataclasses import dataclass, replace
from uuid import UUID

from worklog.core.auth import ADMIN_ROLES, RequestUserContext
from worklog.core.logging import get_logger
from worklog.models.entities import UserRole

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ReportFilters:
    employee_id: UUID | None = None
    project_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class AccessFilter:
    """Narrow requested filters to what the caller may see.

    Employees are always scoped to their own entries; a request for another
    employee's data is corrected to the caller's id instead of rejected.
    Admin roles keep the requested employee filter, ``None`` meaning all.
    The project filter passes through for every role.
    """

    role: UserRole
    self_id: UUID

    @classmethod
    def for_context(cls, context: RequestUserContext) -> AccessFilter:
        return cls(role=context.role, self_id=context.user_id)

    @property
    def sees_all_employees(self) -> bool:
        return self.role in ADMIN_ROLES

    def apply(self, requested: ReportFilters) -> ReportFilters:
        if self.sees_all_employees:
            return requested

        if requested.employee_id is not None and requested.employee_id != self.self_id:
            logger.info(
                "access_filter.employee_scope_overridden",
                requester_id=str(self.self_id),
                requested_employee_id=str(requested.employee_id),
            )
        return replace(requested, employee_id=self.self_id)
