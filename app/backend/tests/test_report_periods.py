from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest
from fastapi import HTTPException

from worklog.services.report_periods import (
    END_OF_DAY,
    ReportPeriod,
    month_bounds,
    parse_period,
    resolve_range,
    week_start_for,
)


def _sample_dates() -> list[date]:
    start = date(2026, 2, 20)
    return [start + timedelta(days=offset) for offset in range(45)]


@pytest.mark.parametrize("period", list(ReportPeriod))
def test_start_never_after_end(period: ReportPeriod) -> None:
    for reference in _sample_dates():
        resolved = resolve_range(reference, period)
        assert resolved.start <= resolved.end
        assert resolved.start_date <= reference <= resolved.end_date


def test_week_starts_on_monday_and_spans_seven_days() -> None:
    for reference in _sample_dates():
        resolved = resolve_range(reference, ReportPeriod.WEEK)
        assert resolved.start_date.weekday() == 0
        assert resolved.day_count == 7
        assert resolved.end_date - resolved.start_date == timedelta(days=6)


def test_sunday_belongs_to_the_preceding_monday() -> None:
    assert week_start_for(date(2026, 10, 25)) == date(2026, 10, 19)
    assert week_start_for(date(2026, 10, 19)) == date(2026, 10, 19)
    assert week_start_for(date(2026, 10, 24)) == date(2026, 10, 19)


def test_day_period_covers_whole_reference_day() -> None:
    resolved = resolve_range(date(2026, 10, 19), ReportPeriod.DAY)

    assert resolved.start == datetime(2026, 10, 19, 0, 0)
    assert resolved.end == datetime.combine(date(2026, 10, 19), END_OF_DAY)
    assert resolved.days() == [date(2026, 10, 19)]


def test_month_period_uses_calendar_month() -> None:
    resolved = resolve_range(date(2028, 2, 17), ReportPeriod.MONTH)

    assert resolved.start_date == date(2028, 2, 1)
    assert resolved.end_date == date(2028, 2, 29)
    assert resolved.day_count == 29


def test_explicit_range_overrides_period_and_includes_last_day() -> None:
    resolved = resolve_range(
        date(2026, 10, 19),
        ReportPeriod.WEEK,
        range_from=date(2026, 10, 1),
        range_to=date(2026, 10, 3),
    )

    assert resolved.start_date == date(2026, 10, 1)
    assert resolved.end == datetime.combine(date(2026, 10, 3), time(23, 59, 59, 999000))
    assert resolved.end_exclusive == datetime(2026, 10, 4, 0, 0)


def test_resolution_is_idempotent() -> None:
    first = resolve_range(date(2026, 10, 22), ReportPeriod.WEEK)
    resolve_range(date(2026, 1, 1), ReportPeriod.MONTH)
    second = resolve_range(date(2026, 10, 22), ReportPeriod.WEEK)

    assert first == second


def test_half_specified_override_is_rejected() -> None:
    with pytest.raises(HTTPException) as exc_info:
        resolve_range(date(2026, 10, 19), ReportPeriod.WEEK, range_from=date(2026, 10, 1))

    assert exc_info.value.status_code == 422


def test_reversed_override_is_rejected() -> None:
    with pytest.raises(HTTPException) as exc_info:
        resolve_range(
            date(2026, 10, 19),
            ReportPeriod.WEEK,
            range_from=date(2026, 10, 5),
            range_to=date(2026, 10, 1),
        )

    assert exc_info.value.status_code == 422


def test_invalid_period_and_month_are_rejected() -> None:
    with pytest.raises(HTTPException):
        parse_period("fortnight")
    with pytest.raises(HTTPException):
        month_bounds(2026, 13)

    assert parse_period("month") is ReportPeriod.MONTH


def test_exclusive_end_is_next_midnight() -> None:
    day = resolve_range(date(2026, 10, 19), ReportPeriod.DAY)

    assert day.end_exclusive == datetime(2026, 10, 20)
    assert day.end < datetime(2026, 10, 19, 23, 59, 59, 999500) < day.end_exclusive

    with pytest.raises(HTTPException):
        resolve_range(date(9999, 12, 5), ReportPeriod.MONTH)
