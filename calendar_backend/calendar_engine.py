"""
Calendar engine: the single object a view talks to.

Combines the navigator with the grid, bucketing and timeline functions.
Task data is pulled from the provider on every computation, so nothing
derived is ever cached here.
"""

from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from .bucketing import CalendarCell, build_cells, hour_slots
from .date_grid import DEFAULT_FIRST_WEEKDAY, generate_grid, to_day, week_number
from .log import debug_print
from .models import Task, ViewMode
from .navigation import Clock, NavigationState, Navigator
from .timeline import (
    DEFAULT_TASK_DURATION_MINUTES, TimeSlotPosition,
    now_marker, now_offset, position_tasks
)
from .timezone_utils import utc_to_local_naive


UNKNOWN_COMPANY = "Empresa desconhecida"


def _debug_print(message: str) -> None:
    debug_print("ENGINE", message)


class CalendarEngine:
    """
    Calendar layout and navigation for a task collection.

    Collaborators:
        get_tasks: returns the current ordered task snapshot.
        get_company_name: company id -> name, or None when unknown.
        on_toggle_task: called with a task id when the user marks a task
            done/undone. Its return value is ignored.
        on_action: optional notifier called with the action name after each
            user action (navigation or toggle). Its return value is ignored.
    """

    def __init__(
        self,
        get_tasks: Callable[[], Sequence[Task]],
        get_company_name: Callable[[str], Optional[str]],
        on_toggle_task: Callable[[str], Any],
        clock: Clock = datetime.now,
        first_weekday: int = DEFAULT_FIRST_WEEKDAY,
        task_duration_minutes: int = DEFAULT_TASK_DURATION_MINUTES,
        unknown_company: str = UNKNOWN_COMPANY,
        on_action: Optional[Callable[[str], Any]] = None,
        initial_state: Optional[NavigationState] = None
    ):
        self._get_tasks = get_tasks
        self._get_company_name = get_company_name
        self._on_toggle_task = on_toggle_task
        self._clock = clock
        self.first_weekday = first_weekday
        self.task_duration_minutes = task_duration_minutes
        self.unknown_company = unknown_company
        self._on_action = on_action
        self._navigator = Navigator(clock=clock, initial_state=initial_state)

    # ==================== State ====================

    @property
    def state(self) -> NavigationState:
        return self._navigator.state

    @property
    def current_anchor(self) -> datetime:
        return self._navigator.anchor

    @property
    def current_mode(self) -> ViewMode:
        return self._navigator.mode

    def add_listener(self, callback: Callable[[NavigationState], None]) -> None:
        """Register a callback for state changes."""
        self._navigator.add_listener(callback)

    def today_date(self) -> date:
        return utc_to_local_naive(self._clock()).date()

    def is_today(self, day: date) -> bool:
        return to_day(day) == self.today_date()

    # ==================== Derived layout ====================

    def grid_dates(self) -> list[date]:
        return generate_grid(self.current_anchor, self.current_mode, self.first_weekday)

    def period_range(self) -> tuple[date, date]:
        """First and last date of the current grid."""
        days = self.grid_dates()
        return days[0], days[-1]

    @property
    def grid(self) -> list[CalendarCell]:
        """Cells of the current view with their complete task lists."""
        return build_cells(
            self.grid_dates(),
            self._get_tasks(),
            self.current_anchor,
            self.current_mode,
            today=self.today_date()
        )

    @property
    def positioned_tasks(self) -> list[TimeSlotPosition]:
        """Time-of-day placement of the visible tasks (week and day views only)."""
        if not self.current_mode.is_timed:
            return []
        return position_tasks(self._get_tasks(), self.grid_dates(), self.task_duration_minutes)

    def hour_slots(self) -> list[tuple[int, list[Task]]]:
        """Hour rows of the anchor's day."""
        return hour_slots(self._get_tasks(), self.current_anchor.date())

    def now_offset(self) -> int:
        return now_offset(self._clock)

    def now_marker(self, day: date) -> Optional[int]:
        return now_marker(day, self._clock)

    def week_number(self) -> int:
        return week_number(self.current_anchor, self.first_weekday)

    # ==================== Collaborators ====================

    def company_name(self, company_id: str) -> str:
        name = self._get_company_name(company_id)
        return name if name else self.unknown_company

    def toggle_task(self, task_id: str) -> None:
        _debug_print(f"Toggle task {task_id}")
        self._on_toggle_task(task_id)
        self._notify_action("toggle")

    def _notify_action(self, action: str) -> None:
        if self._on_action is not None:
            self._on_action(action)

    # ==================== Navigation ====================

    def prev(self) -> NavigationState:
        state = self._navigator.previous()
        self._notify_action("prev")
        return state

    def next(self) -> NavigationState:
        state = self._navigator.next()
        self._notify_action("next")
        return state

    def today(self) -> NavigationState:
        state = self._navigator.today()
        self._notify_action("today")
        return state

    def jump_to(self, value: Any) -> NavigationState:
        state = self._navigator.jump_to(value)
        self._notify_action("jump")
        return state

    def drill_down(self, value: Any) -> NavigationState:
        state = self._navigator.drill_down(value)
        self._notify_action("drill_down")
        return state

    def set_mode(self, mode: Any) -> NavigationState:
        state = self._navigator.set_mode(mode)
        self._notify_action("set_mode")
        return state
