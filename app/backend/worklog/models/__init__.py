"""ORM model package."""

from worklog.models.entities import (
    Project,
    ProjectAssignment,
    ProjectStatus,
    TimeEntry,
    User,
    UserRole,
)

__all__ = [
    "Project",
    "ProjectAssignment",
    "ProjectStatus",
    "TimeEntry",
    "User",
    "UserRole",
]
