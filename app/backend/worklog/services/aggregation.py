"""Bucketing of time entries into day/week/month summaries."""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from worklog.core.logging import get_logger
from worklog.services.report_periods import ReportPeriod, ReportRange, sunday_based_weekday

logger = get_logger(__name__)

ZERO = Decimal("0.00")
UNKNOWN_KEY = "unknown"


class EntryLike(Protocol):
    entry_date: datetime
    employee_id: UUID | None
    project_id: UUID | None
    hours_worked: Decimal


@dataclass(slots=True)
class DayBucket:
    day: date
    hours: Decimal = ZERO
    report_count: int = 0
    project_keys: set[str] = field(default_factory=set)


@dataclass(slots=True)
class WeekBucket:
    week_number: int
    week_start: date
    week_end: date
    hours: Decimal = ZERO
    report_count: int = 0
    project_keys: set[str] = field(default_factory=set)
    employee_keys: set[str] = field(default_factory=set)


@dataclass(slots=True)
class ProjectBucket:
    key: str
    hours: Decimal = ZERO
    report_count: int = 0
    employee_keys: set[str] = field(default_factory=set)


@dataclass(slots=True)
class EmployeeBucket:
    key: str
    hours: Decimal = ZERO
    report_count: int = 0
    project_keys: set[str] = field(default_factory=set)


@dataclass(slots=True)
class AggregateResult:
    period: ReportPeriod
    date_range: ReportRange
    total_hours: Decimal = ZERO
    total_reports: int = 0
    daily: dict[date, DayBucket] = field(default_factory=dict)
    projects: dict[str, ProjectBucket] = field(default_factory=dict)
    employees: dict[str, EmployeeBucket] = field(default_factory=dict)
    weekly: dict[int, WeekBucket] | None = None
    # Month entries whose week number has no window.
    unplaced_hours: Decimal = ZERO
    unplaced_reports: int = 0


def reference_key(value: UUID | None, known_ids: Collection[UUID] | None) -> str:
    """Bucket key for a project/employee reference.

    ``known_ids`` of ``None`` skips the existence check; a null or
    unknown reference lands in the ``UNKNOWN_KEY`` bucket.
    """

    if value is None:
        return UNKNOWN_KEY
    if known_ids is not None and value not in known_ids:
        return UNKNOWN_KEY
    return str(value)


def month_week_number(value: date) -> int:
    """Week-of-month for the monthly breakdown.

    Counts from the weekday of the month's first day (Sunday = 0) and is
    not aligned with the Monday-based weekly report.
    """

    first_weekday = sunday_based_weekday(value.replace(day=1))
    return math.ceil((value.day + first_weekday) / 7)


def month_week_windows(month_start: date, month_end: date) -> dict[int, WeekBucket]:
    """Consecutive 7-day windows starting on the 1st of the month.

    A window is opened for every start day inside the month, so the last
    window's end may fall in the following month.
    """

    windows: dict[int, WeekBucket] = {}
    current = month_start
    week_number = 1
    while current <= month_end:
        windows[week_number] = WeekBucket(
            week_number=week_number,
            week_start=current,
            week_end=current + timedelta(days=6),
        )
        current += timedelta(days=7)
        week_number += 1
    return windows


def empty_result(date_range: ReportRange, period: ReportPeriod) -> AggregateResult:
    result = AggregateResult(
        period=period,
        date_range=date_range,
        daily={day: DayBucket(day=day) for day in date_range.days()},
    )
    if period is ReportPeriod.MONTH:
        month_start = date_range.start_date.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        result.weekly = month_week_windows(month_start, next_month - timedelta(days=1))
    return result


def aggregate_entries(
    entries: Iterable[EntryLike],
    *,
    date_range: ReportRange,
    period: ReportPeriod,
    known_project_ids: Collection[UUID] | None = None,
    known_employee_ids: Collection[UUID] | None = None,
) -> AggregateResult:
    """Sum already-scoped entries into day, project and employee buckets.

    Every day of ``date_range`` is present in ``daily`` even without entries.
    Month periods additionally get ``weekly``; entries whose week number has
    no window still count everywhere else and are tallied in
    ``unplaced_hours`` so the weekly buckets reconcile with the total.
    """

    result = empty_result(date_range, period)

    for entry in entries:
        hours = entry.hours_worked if entry.hours_worked is not None else ZERO
        day = entry.entry_date.date()
        project_key = reference_key(entry.project_id, known_project_ids)
        employee_key = reference_key(entry.employee_id, known_employee_ids)
        if UNKNOWN_KEY in (project_key, employee_key):
            logger.debug(
                "aggregation.unresolved_reference",
                project_id=str(entry.project_id) if entry.project_id else None,
                employee_id=str(entry.employee_id) if entry.employee_id else None,
            )

        result.total_hours += hours
        result.total_reports += 1

        day_bucket = result.daily.get(day)
        if day_bucket is not None:
            day_bucket.hours += hours
            day_bucket.report_count += 1
            day_bucket.project_keys.add(project_key)

        if result.weekly is not None:
            week_bucket = result.weekly.get(month_week_number(day))
            if week_bucket is not None:
                week_bucket.hours += hours
                week_bucket.report_count += 1
                week_bucket.project_keys.add(project_key)
                week_bucket.employee_keys.add(employee_key)
            else:
                result.unplaced_hours += hours
                result.unplaced_reports += 1

        project_bucket = result.projects.setdefault(project_key, ProjectBucket(key=project_key))
        project_bucket.hours += hours
        project_bucket.report_count += 1
        project_bucket.employee_keys.add(employee_key)

        employee_bucket = result.employees.setdefault(employee_key, EmployeeBucket(key=employee_key))
        employee_bucket.hours += hours
        employee_bucket.report_count += 1
        employee_bucket.project_keys.add(project_key)

    return result
