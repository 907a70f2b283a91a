import calendar
from datetime import date, datetime, timedelta

import pytest

from calendar_backend.date_grid import (
    add_months, end_of_month, generate_grid, is_same_month,
    start_of_week, week_number
)
from calendar_backend.models import ViewMode


def test_month_grid_covers_whole_weeks():
    days = generate_grid(datetime(2024, 2, 15, 10, 0), ViewMode.MONTH)
    assert days[0] == date(2024, 1, 28)
    assert days[-1] == date(2024, 3, 2)
    assert len(days) == 35


def test_month_grid_is_contiguous_and_starts_on_first_weekday():
    days = generate_grid(date(2024, 6, 1), ViewMode.MONTH, calendar.SUNDAY)
    assert len(days) == 42
    assert days[0].weekday() == calendar.SUNDAY
    assert all((b - a).days == 1 for a, b in zip(days, days[1:]))


def test_month_grid_with_four_rows():
    # February 2015 starts on a Sunday and has 28 days
    days = generate_grid(date(2015, 2, 10), ViewMode.MONTH)
    assert len(days) == 28
    assert days[0] == date(2015, 2, 1)


def test_month_grid_monday_start():
    days = generate_grid(date(2024, 2, 15), ViewMode.MONTH, calendar.MONDAY)
    assert days[0] == date(2024, 1, 29)
    assert days[-1] == date(2024, 3, 3)


def test_week_grid_is_seven_days_containing_anchor():
    anchor = datetime(2024, 2, 15, 23, 59)
    days = generate_grid(anchor, ViewMode.WEEK)
    assert days == [date(2024, 2, d) for d in range(11, 18)]


def test_week_grid_on_first_weekday_starts_there():
    days = generate_grid(date(2024, 2, 11), ViewMode.WEEK)
    assert days[0] == date(2024, 2, 11)


def test_day_grid_is_anchor_day():
    assert generate_grid(datetime(2024, 2, 15, 0, 1), ViewMode.DAY) == [date(2024, 2, 15)]


def test_grid_ignores_time_of_day():
    early = generate_grid(datetime(2024, 3, 1, 0, 0), ViewMode.MONTH)
    late = generate_grid(datetime(2024, 3, 1, 23, 59), ViewMode.MONTH)
    assert early == late


def test_start_of_week():
    assert start_of_week(date(2024, 2, 15)) == date(2024, 2, 11)
    assert start_of_week(date(2024, 2, 15), calendar.MONDAY) == date(2024, 2, 12)


def test_end_of_month_leap_year():
    assert end_of_month(date(2024, 2, 3)) == date(2024, 2, 29)
    assert end_of_month(date(2023, 2, 3)) == date(2023, 2, 28)


def test_is_same_month():
    assert is_same_month(date(2024, 2, 1), datetime(2024, 2, 29, 8, 0))
    assert not is_same_month(date(2024, 1, 31), date(2024, 2, 1))


def test_week_number():
    assert week_number(date(2024, 2, 15)) == 7
    assert week_number(date(2024, 1, 1)) == 1
    # Dec 31 2023 is a Sunday and shares the week with Jan 1 2024
    assert week_number(date(2023, 12, 31)) == 1


def test_add_months_clamps_day():
    assert add_months(datetime(2024, 1, 31, 12, 0), 1) == datetime(2024, 2, 29, 12, 0)
    assert add_months(datetime(2023, 1, 31, 12, 0), 1) == datetime(2023, 2, 28, 12, 0)


def test_add_months_crosses_year():
    assert add_months(datetime(2024, 12, 15, 9, 30), 1) == datetime(2025, 1, 15, 9, 30)
    assert add_months(datetime(2024, 1, 15, 9, 30), -1) == datetime(2023, 12, 15, 9, 30)


def _days(start, end):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


@pytest.mark.parametrize("first_weekday", [calendar.SUNDAY, calendar.MONDAY, calendar.SATURDAY])
def test_grids_for_every_day_across_years(first_weekday):
    # 2023-2025 covers the leap February of 2024 and two year boundaries
    for anchor in _days(date(2023, 1, 1), date(2025, 12, 31)):
        month = generate_grid(anchor, ViewMode.MONTH, first_weekday)
        assert len(month) % 7 == 0
        assert month[0].weekday() == first_weekday
        assert all((b - a).days == 1 for a, b in zip(month, month[1:]))
        assert month[0] <= date(anchor.year, anchor.month, 1)
        assert month[-1] >= end_of_month(anchor)
        assert (date(anchor.year, anchor.month, 1) - month[0]).days < 7
        assert (month[-1] - end_of_month(anchor)).days < 7

        week = generate_grid(anchor, ViewMode.WEEK, first_weekday)
        assert len(week) == 7
        assert week[0].weekday() == first_weekday
        assert week[0] <= anchor <= week[-1]

        assert generate_grid(anchor, ViewMode.DAY, first_weekday) == [anchor]


def test_month_grid_crosses_year_boundary():
    days = generate_grid(date(2025, 1, 15), ViewMode.MONTH)
    assert days[0] == date(2024, 12, 29)
    assert days[-1] == date(2025, 2, 1)
    assert len(days) == 35


def test_week_grid_crosses_year_boundary():
    days = generate_grid(date(2025, 1, 1), ViewMode.WEEK)
    assert days[0] == date(2024, 12, 29)
    assert days[-1] == date(2025, 1, 4)
