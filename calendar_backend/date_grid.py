"""
Calendar grid generation for the month, week and day views.

All functions are pure and work on calendar days (datetime.date), so the
result never depends on the time of day of the anchor.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

from .models import ViewMode
from .timezone_utils import local_day


# Week start of the pt-BR locale
DEFAULT_FIRST_WEEKDAY = calendar.SUNDAY

DateLike = Union[date, datetime]


def to_day(value: DateLike) -> date:
    """Calendar day of a date or datetime (aware values in local time)."""
    if isinstance(value, datetime):
        return local_day(value)
    return value


def start_of_week(d: DateLike, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> date:
    """First day of the week containing d. first_weekday: 0=Monday .. 6=Sunday."""
    d = to_day(d)
    return d - timedelta(days=(d.weekday() - first_weekday) % 7)


def end_of_week(d: DateLike, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> date:
    return start_of_week(d, first_weekday) + timedelta(days=6)


def start_of_month(d: DateLike) -> date:
    return to_day(d).replace(day=1)


def end_of_month(d: DateLike) -> date:
    d = to_day(d)
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def days_between(start: date, end: date) -> list[date]:
    """Every day from start to end, both inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def generate_grid(
    anchor: DateLike,
    mode: ViewMode,
    first_weekday: int = DEFAULT_FIRST_WEEKDAY
) -> list[date]:
    """
    Dates shown by a view.

    - MONTH: whole weeks from the week of the 1st to the week of the last day
      of the anchor's month (35 or 42 days, 28 for a February that starts on
      the first weekday of a non-leap year).
    - WEEK: the 7 days of the anchor's week.
    - DAY: the anchor's date only.
    """
    day = to_day(anchor)
    if mode == ViewMode.MONTH:
        start = start_of_week(start_of_month(day), first_weekday)
        end = end_of_week(end_of_month(day), first_weekday)
        return days_between(start, end)
    elif mode == ViewMode.WEEK:
        start = start_of_week(day, first_weekday)
        return days_between(start, start + timedelta(days=6))
    else:  # DAY
        return [day]


def is_same_month(a: DateLike, b: DateLike) -> bool:
    a, b = to_day(a), to_day(b)
    return a.year == b.year and a.month == b.month


def week_number(d: DateLike, first_weekday: int = DEFAULT_FIRST_WEEKDAY) -> int:
    """
    Locale week of the year.

    Week 1 is the week that contains January 1st, so the last days of
    December can already belong to week 1 of the following year.
    """
    d = to_day(d)
    week_start = start_of_week(d, first_weekday)
    next_year_week1 = start_of_week(date(d.year + 1, 1, 1), first_weekday)
    if week_start >= next_year_week1:
        return 1
    week1 = start_of_week(date(d.year, 1, 1), first_weekday)
    return (week_start - week1).days // 7 + 1


def add_months(dt: datetime, months: int) -> datetime:
    """
    Shift a datetime by whole months, keeping the time of day.

    The day of month is clamped to the length of the target month
    (Jan 31 + 1 month -> Feb 28/29).
    """
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)
