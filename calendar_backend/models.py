"""
Task and company records as seen by the calendar.

Both are owned by the CRM data provider. The calendar only reads them; a task
is never mutated here (completion toggling goes back through the provider).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .timezone_utils import parse_iso_datetime, utc_to_local_naive


class ViewMode(Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"

    @classmethod
    def parse(cls, value: Union['ViewMode', str, None]) -> Optional['ViewMode']:
        """Return the matching mode, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None

    @property
    def is_timed(self) -> bool:
        """True for views that place tasks by time of day."""
        return self is not ViewMode.MONTH


@dataclass(frozen=True)
class Company:
    """A CRM company; only the id and display name matter to the calendar."""
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> 'Company':
        name = data.get("name") or data.get("fantasyName") or ""
        return cls(id=str(data["id"]), name=str(name))


@dataclass(frozen=True)
class Task:
    """
    A dated CRM task.

    due_date is used both for the day bucket and for the time-of-day
    position. It may be timezone-aware or naive local time.
    """
    id: str
    title: str
    due_date: datetime
    is_completed: bool = False
    company_id: str = ""

    @property
    def local_due(self) -> datetime:
        """Due date as naive local wall-clock time."""
        return utc_to_local_naive(self.due_date)

    @classmethod
    def from_dict(cls, data: dict) -> 'Task':
        """
        Build a task from a CRM JSON record.

        Accepts both the CRM export keys (dueDate, isCompleted, companyId)
        and their snake_case forms. Raises KeyError/ValueError for records
        without an id or with an unparseable due date.
        """
        due = data.get("dueDate", data.get("due_date"))
        if isinstance(due, datetime):
            due_date = due
        elif isinstance(due, str):
            due_date = parse_iso_datetime(due)
        else:
            raise ValueError(f"Task {data.get('id')!r} has no valid due date")

        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            due_date=due_date,
            is_completed=bool(data.get("isCompleted", data.get("is_completed", False))),
            company_id=str(data.get("companyId", data.get("company_id", "")) or ""),
        )
