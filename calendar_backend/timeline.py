"""
Placement of tasks on the 24-hour column of the week and day views.

Positions are expressed in minutes since local midnight and converted to
pixels by the views with their configured hour height. Tasks have no
duration of their own; every chip gets the same visual length and
simultaneous tasks simply overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from .bucketing import group_by_day
from .date_grid import to_day
from .models import Task
from .timezone_utils import utc_to_local_naive


MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

# 50px chip at the default 60px hour height
DEFAULT_TASK_DURATION_MINUTES = 50

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TimeSlotPosition:
    """A task placed on a day column."""
    task: Task
    day: date
    offset_minutes: int
    duration_minutes: int = DEFAULT_TASK_DURATION_MINUTES

    def top(self, hour_height: int) -> int:
        """Pixel offset from the top of the column."""
        return minutes_to_pixels(self.offset_minutes, hour_height)

    def height(self, hour_height: int) -> int:
        return minutes_to_pixels(self.duration_minutes, hour_height)


def minutes_since_midnight(dt: datetime) -> int:
    local = utc_to_local_naive(dt)
    return local.hour * MINUTES_PER_HOUR + local.minute


def minutes_to_pixels(minutes: float, hour_height: int) -> int:
    return int(minutes * hour_height / MINUTES_PER_HOUR)


def position(task: Task, duration_minutes: int = DEFAULT_TASK_DURATION_MINUTES) -> TimeSlotPosition:
    """Offset of a task within its day, always in [0, 1439]."""
    return TimeSlotPosition(
        task=task,
        day=task.local_due.date(),
        offset_minutes=minutes_since_midnight(task.due_date),
        duration_minutes=duration_minutes,
    )


def position_tasks(
    tasks: Iterable[Task],
    days: Sequence[date],
    duration_minutes: int = DEFAULT_TASK_DURATION_MINUTES
) -> list[TimeSlotPosition]:
    """Positions of all tasks falling on the given days, day by day in display order."""
    groups = group_by_day(tasks)
    positions = []
    for day in days:
        for task in groups.get(to_day(day), ()):
            positions.append(position(task, duration_minutes))
    return positions


def hour_fraction(task: Task) -> float:
    """Offset within the task's hour row, 0.0 (on the hour) to <1.0."""
    return task.local_due.minute / MINUTES_PER_HOUR


def now_offset(clock: Clock = datetime.now) -> int:
    """Minutes since local midnight of the current instant."""
    return minutes_since_midnight(clock())


def now_marker(day: date, clock: Clock = datetime.now) -> Optional[int]:
    """Offset of the current-time line, or None when day is not today."""
    now = utc_to_local_naive(clock())
    if to_day(day) != now.date():
        return None
    return now.hour * MINUTES_PER_HOUR + now.minute


def scroll_offset(hour: int, hour_height: int) -> int:
    """Initial vertical scroll so that the given hour is at the top."""
    hour = max(0, min(23, hour))
    return hour * hour_height
