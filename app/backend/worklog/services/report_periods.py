"""Calendar range resolution for report periods."""

from __future__ import annotations

import calendar
import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from fastapi import HTTPException, status

START_OF_DAY = time.min
# Reported inclusive end of a day. Store queries stop before the next
# midnight instead, so sub-millisecond timestamps stay in their day.
END_OF_DAY = time(23, 59, 59, 999000)


class ReportPeriod(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class ReportRange:
    """Timestamp interval covering whole calendar days.

    ``end`` is the inclusive bound shown to clients; ``end_exclusive`` is the
    following midnight and is what the entry store filters on.
    """

    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def days(self) -> list[date]:
        return day_sequence(self.start_date, self.end_date)

    @property
    def end_exclusive(self) -> datetime:
        return datetime.combine(self.end_date + timedelta(days=1), START_OF_DAY)


def _validation_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


def parse_period(value: str | ReportPeriod) -> ReportPeriod:
    if isinstance(value, ReportPeriod):
        return value
    try:
        return ReportPeriod(value)
    except ValueError:
        allowed = ", ".join(member.value for member in ReportPeriod)
        raise _validation_error(f"period must be one of: {allowed}.") from None


def day_sequence(start: date, end: date) -> list[date]:
    days: list[date] = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days


def sunday_based_weekday(value: date) -> int:
    """Weekday index with Sunday = 0 and Saturday = 6."""

    return (value.weekday() + 1) % 7


def week_start_for(value: date) -> date:
    """Monday of the ISO week containing ``value``."""

    weekday = sunday_based_weekday(value)
    offset = -6 if weekday == 0 else 1 - weekday
    return value + timedelta(days=offset)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise _validation_error("month must be between 1 and 12.")
    if not date.min.year <= year <= date.max.year:
        raise _validation_error("year is out of range.")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def whole_days(start: date, end: date) -> ReportRange:
    if start > end:
        raise _validation_error("Range start must be on or before range end.")
    if end >= date.max:
        raise _validation_error("Range end is out of range.")
    return ReportRange(
        start=datetime.combine(start, START_OF_DAY),
        end=datetime.combine(end, END_OF_DAY),
    )


def resolve_range(
    reference_date: date,
    period: ReportPeriod | str,
    *,
    range_from: date | None = None,
    range_to: date | None = None,
) -> ReportRange:
    """Resolve the inclusive interval a report covers.

    An explicit ``range_from``/``range_to`` pair overrides the period
    computed around ``reference_date``; both bounds are required together.
    """

    resolved_period = parse_period(period)

    if range_from is not None or range_to is not None:
        if range_from is None or range_to is None:
            raise _validation_error("Both range start and range end must be provided.")
        return whole_days(range_from, range_to)

    if resolved_period is ReportPeriod.DAY:
        return whole_days(reference_date, reference_date)

    if resolved_period is ReportPeriod.WEEK:
        monday = week_start_for(reference_date)
        return whole_days(monday, monday + timedelta(days=6))

    first_day, last_day = month_bounds(reference_date.year, reference_date.month)
    return whole_days(first_day, last_day)
