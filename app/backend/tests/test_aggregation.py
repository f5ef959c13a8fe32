from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from worklog.services.aggregation import UNKNOWN_KEY, aggregate_entries, month_week_number
from worklog.services.report_periods import ReportPeriod, resolve_range

E1 = uuid.uuid4()
E2 = uuid.uuid4()
P1 = uuid.uuid4()
P2 = uuid.uuid4()

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


@dataclass
class Entry:
    entry_date: datetime
    employee_id: uuid.UUID | None
    project_id: uuid.UUID | None
    hours_worked: Decimal


def _at(day: date, hour: int = 9) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0)


def _worked_example() -> list[Entry]:
    return [
        Entry(_at(MONDAY), E1, P1, Decimal("8")),
        Entry(_at(TUESDAY), E1, P2, Decimal("6")),
        Entry(_at(MONDAY, 17), E2, P1, Decimal("4")),
    ]


def _week_result(entries: list[Entry]):
    return aggregate_entries(
        entries,
        date_range=resolve_range(MONDAY, ReportPeriod.WEEK),
        period=ReportPeriod.WEEK,
        known_project_ids={P1, P2},
        known_employee_ids={E1, E2},
    )


def test_worked_week_example() -> None:
    result = _week_result(_worked_example())

    assert result.total_hours == Decimal("18")
    assert result.total_reports == 3
    assert result.daily[MONDAY].hours == Decimal("12")
    assert result.daily[MONDAY].report_count == 2
    assert result.daily[MONDAY].project_keys == {str(P1)}
    assert result.daily[TUESDAY].hours == Decimal("6")
    assert result.projects[str(P1)].hours == Decimal("12")
    assert result.projects[str(P1)].employee_keys == {str(E1), str(E2)}
    assert result.projects[str(P2)].hours == Decimal("6")
    assert result.employees[str(E1)].hours == Decimal("14")
    assert result.employees[str(E1)].project_keys == {str(P1), str(P2)}
    assert result.employees[str(E2)].hours == Decimal("4")
    assert result.weekly is None


def test_every_day_in_range_is_present_and_totals_cross_check() -> None:
    result = _week_result(_worked_example())

    assert len(result.daily) == 7
    assert result.daily[date(2026, 10, 25)].hours == Decimal("0")
    assert result.daily[date(2026, 10, 25)].report_count == 0
    assert result.daily[date(2026, 10, 25)].project_keys == set()

    daily_sum = sum((bucket.hours for bucket in result.daily.values()), Decimal("0"))
    project_sum = sum((bucket.hours for bucket in result.projects.values()), Decimal("0"))
    employee_sum = sum((bucket.hours for bucket in result.employees.values()), Decimal("0"))
    assert daily_sum == result.total_hours == project_sum == employee_sum


def test_month_daily_breakdown_has_one_key_per_day() -> None:
    month_range = resolve_range(date(2026, 2, 10), ReportPeriod.MONTH)

    result = aggregate_entries([], date_range=month_range, period=ReportPeriod.MONTH)

    assert len(result.daily) == month_range.day_count == 28
    assert result.total_hours == Decimal("0")
    assert result.projects == {}
    assert result.employees == {}


def test_same_calendar_day_shares_bucket_regardless_of_time() -> None:
    entries = [
        Entry(datetime(2026, 10, 21, 0, 0), E1, P1, Decimal("1")),
        Entry(datetime(2026, 10, 21, 23, 59, 59), E1, P1, Decimal("2")),
    ]

    result = _week_result(entries)

    assert result.daily[date(2026, 10, 21)].hours == Decimal("3")
    assert result.daily[date(2026, 10, 21)].report_count == 2


def test_sums_are_exact_decimals() -> None:
    entries = [
        Entry(_at(MONDAY), E1, P1, Decimal("0.1")),
        Entry(_at(MONDAY), E1, P1, Decimal("0.2")),
    ]

    result = _week_result(entries)

    assert result.total_hours == Decimal("0.3")


def test_unresolved_references_go_to_unknown_bucket() -> None:
    deleted_project = uuid.uuid4()
    deleted_employee = uuid.uuid4()
    entries = [
        Entry(_at(MONDAY), E1, deleted_project, Decimal("3")),
        Entry(_at(MONDAY), E1, None, Decimal("2")),
        Entry(_at(TUESDAY), deleted_employee, P1, Decimal("1")),
    ]

    result = _week_result(entries)

    assert result.total_hours == Decimal("6")
    assert result.projects[UNKNOWN_KEY].hours == Decimal("5")
    assert result.projects[UNKNOWN_KEY].report_count == 2
    assert result.employees[UNKNOWN_KEY].hours == Decimal("1")
    assert result.projects[str(P1)].employee_keys == {UNKNOWN_KEY}
    assert result.daily[MONDAY].project_keys == {UNKNOWN_KEY}


def test_entry_outside_range_counts_in_totals_but_not_daily() -> None:
    entries = [Entry(_at(date(2026, 11, 2)), E1, P1, Decimal("5"))]

    result = _week_result(entries)

    assert result.total_hours == Decimal("5")
    assert all(bucket.report_count == 0 for bucket in result.daily.values())
    assert result.projects[str(P1)].hours == Decimal("5")


def test_month_week_number_counts_from_first_weekday() -> None:
    # April 2026 starts on a Wednesday (offset 3).
    assert month_week_number(date(2026, 4, 1)) == 1
    assert month_week_number(date(2026, 4, 4)) == 1
    assert month_week_number(date(2026, 4, 5)) == 2
    assert month_week_number(date(2026, 4, 30)) == 5


def test_month_weekly_windows_start_on_the_first() -> None:
    month_range = resolve_range(date(2026, 4, 15), ReportPeriod.MONTH)

    result = aggregate_entries([], date_range=month_range, period=ReportPeriod.MONTH)

    assert sorted(result.weekly) == [1, 2, 3, 4, 5]
    assert result.weekly[1].week_start == date(2026, 4, 1)
    assert result.weekly[1].week_end == date(2026, 4, 7)
    assert result.weekly[5].week_start == date(2026, 4, 29)
    assert result.weekly[5].week_end == date(2026, 5, 5)


def test_month_weekly_breakdown_keeps_boundary_quirks() -> None:
    # August 2026 starts on a Saturday (offset 6) and has 31 days.
    month_range = resolve_range(date(2026, 8, 1), ReportPeriod.MONTH)
    entries = [
        Entry(_at(date(2026, 8, 1)), E1, P1, Decimal("1")),
        Entry(_at(date(2026, 8, 2)), E1, P1, Decimal("2")),
        Entry(_at(date(2026, 8, 31)), E2, P2, Decimal("4")),
    ]

    result = aggregate_entries(
        entries,
        date_range=month_range,
        period=ReportPeriod.MONTH,
        known_project_ids={P1, P2},
        known_employee_ids={E1, E2},
    )

    assert sorted(result.weekly) == [1, 2, 3, 4, 5]
    # Aug 2 lies in the first 7-day window but is numbered week 2.
    assert result.weekly[1].hours == Decimal("1")
    assert result.weekly[2].hours == Decimal("2")
    # Aug 31 computes to week 6, which has no window.
    assert month_week_number(date(2026, 8, 31)) == 6
    assert sum((bucket.hours for bucket in result.weekly.values()), Decimal("0")) == Decimal("3")
    assert result.unplaced_hours == Decimal("4")
    assert result.unplaced_reports == 1
    assert result.total_hours == Decimal("7")
    assert result.daily[date(2026, 8, 31)].hours == Decimal("4")
    assert result.employees[str(E2)].hours == Decimal("4")
