"""
Grouping of tasks into calendar cells and hour slots.

Every function returns complete, ordered task sequences: ascending by due
instant, ties kept in input order. Truncating a crowded cell ("+N mais") is
left to the views.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from .date_grid import is_same_month, to_day
from .models import Task, ViewMode
from .timezone_utils import instant


HOURS_PER_DAY = 24


def _sort_key(task: Task) -> float:
    return instant(task.due_date)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Sort by due instant. sorted() is stable, so ties keep input order."""
    return sorted(tasks, key=_sort_key)


@dataclass(frozen=True)
class CalendarCell:
    """One day of a month/week grid and the tasks due on it."""
    date: date
    is_in_current_period: bool
    tasks: tuple[Task, ...] = ()
    is_today: bool = False

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    def visible_tasks(self, limit: Optional[int]) -> tuple[Task, ...]:
        """First `limit` tasks, or all of them when limit is None."""
        if limit is None:
            return self.tasks
        return self.tasks[:max(limit, 0)]

    def overflow_count(self, limit: Optional[int]) -> int:
        """Number of tasks hidden by visible_tasks(limit)."""
        return self.task_count - len(self.visible_tasks(limit))


def bucket(tasks: Iterable[Task], cell: date) -> list[Task]:
    """Tasks due on the same local calendar day as cell, in display order."""
    day = to_day(cell)
    return sort_tasks(t for t in tasks if t.local_due.date() == day)


def bucket_by_hour(tasks: Iterable[Task], day: date, hour: int) -> list[Task]:
    """Tasks due on day whose local hour equals hour, in display order."""
    day = to_day(day)
    return sort_tasks(
        t for t in tasks
        if t.local_due.date() == day and t.local_due.hour == hour
    )


def group_by_day(tasks: Iterable[Task]) -> dict[date, list[Task]]:
    """
    One-pass grouping of tasks by local calendar day.

    Each list is already sorted. Sorting first and appending in that order
    keeps the result identical to calling bucket() per day.
    """
    groups: dict[date, list[Task]] = {}
    for task in sort_tasks(tasks):
        groups.setdefault(task.local_due.date(), []).append(task)
    return groups


def hour_slots(tasks: Iterable[Task], day: date) -> list[tuple[int, list[Task]]]:
    """The 24 (hour, tasks) rows of a day view."""
    day = to_day(day)
    rows: list[list[Task]] = [[] for _ in range(HOURS_PER_DAY)]
    for task in sort_tasks(tasks):
        local_due = task.local_due
        if local_due.date() == day:
            rows[local_due.hour].append(task)
    return list(enumerate(rows))


def build_cells(
    days: Sequence[date],
    tasks: Iterable[Task],
    anchor: datetime,
    mode: ViewMode,
    today: Optional[date] = None
) -> list[CalendarCell]:
    """
    Combine a generated grid with the task collection.

    In month view a cell is part of the current period when it lies in the
    anchor's month; week and day grids contain only current-period days.
    """
    groups = group_by_day(tasks)
    cells = []
    for day in days:
        if mode == ViewMode.MONTH:
            in_period = is_same_month(day, anchor)
        else:
            in_period = True
        cells.append(CalendarCell(
            date=day,
            is_in_current_period=in_period,
            tasks=tuple(groups.get(day, ())),
            is_today=today is not None and day == today,
        ))
    return cells
