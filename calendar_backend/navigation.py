"""
View mode and anchor date navigation.

NavigationState is immutable; the transition functions return a new state
or the very same state object when the input is rejected. Navigator keeps
the current state for a calendar view and notifies listeners on change.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional

from .date_grid import add_months
from .log import debug_print
from .models import ViewMode
from .timezone_utils import at_noon, parse_iso_date, utc_to_local_naive


Clock = Callable[[], datetime]


def _debug_print(message: str) -> None:
    debug_print("NAV", message)


@dataclass(frozen=True)
class NavigationState:
    """The anchor (naive local wall-clock time) and the active view mode."""
    anchor: datetime
    mode: ViewMode = ViewMode.MONTH

    @property
    def anchor_day(self) -> date:
        return self.anchor.date()


def coerce_day(value: Any) -> Optional[date]:
    """
    Calendar day from user input.

    Accepts date, datetime (aware values converted to local time) and
    YYYY-MM-DD strings. Returns None for anything else.
    """
    if isinstance(value, datetime):
        return utc_to_local_naive(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    return None


def _shift(state: NavigationState, step: int) -> NavigationState:
    if state.mode == ViewMode.MONTH:
        anchor = add_months(state.anchor, step)
    elif state.mode == ViewMode.WEEK:
        anchor = state.anchor + timedelta(weeks=step)
    else:  # DAY
        anchor = state.anchor + timedelta(days=step)
    return replace(state, anchor=anchor)


def go_previous(state: NavigationState) -> NavigationState:
    """Back one month, week or day depending on the mode."""
    return _shift(state, -1)


def go_next(state: NavigationState) -> NavigationState:
    """Forward one month, week or day depending on the mode."""
    return _shift(state, 1)


def go_today(state: NavigationState, now: datetime) -> NavigationState:
    return replace(state, anchor=utc_to_local_naive(now))


def jump_to(state: NavigationState, value: Any) -> NavigationState:
    """Move the anchor to the given day at noon, keeping the mode."""
    day = coerce_day(value)
    if day is None:
        _debug_print(f"Rejected jump target {value!r}")
        return state
    return replace(state, anchor=at_noon(day))


def drill_down(state: NavigationState, value: Any) -> NavigationState:
    """Open the day view on the given day."""
    day = coerce_day(value)
    if day is None:
        _debug_print(f"Rejected drill-down target {value!r}")
        return state
    return NavigationState(anchor=at_noon(day), mode=ViewMode.DAY)


def set_mode(state: NavigationState, mode: Any) -> NavigationState:
    view_mode = ViewMode.parse(mode)
    if view_mode is None:
        _debug_print(f"Rejected view mode {mode!r}")
        return state
    return replace(state, mode=view_mode)


class Navigator:
    """
    Owner of the (anchor, mode) pair of one calendar.

    Every dispatcher applies its transition in one assignment and returns
    the resulting state. Listeners are called only when the state actually
    changed.
    """

    def __init__(
        self,
        clock: Clock = datetime.now,
        initial_state: Optional[NavigationState] = None
    ):
        self._clock = clock
        if initial_state is None:
            initial_state = NavigationState(anchor=utc_to_local_naive(clock()), mode=ViewMode.MONTH)
        self._state = initial_state
        self._listeners: list[Callable[[NavigationState], None]] = []

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def anchor(self) -> datetime:
        return self._state.anchor

    @property
    def mode(self) -> ViewMode:
        return self._state.mode

    def add_listener(self, callback: Callable[[NavigationState], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[NavigationState], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _apply(self, new_state: NavigationState) -> NavigationState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        _debug_print(f"{new_state.mode.value} @ {new_state.anchor.isoformat()}")
        for callback in list(self._listeners):
            callback(new_state)
        return new_state

    def previous(self) -> NavigationState:
        return self._apply(go_previous(self._state))

    def next(self) -> NavigationState:
        return self._apply(go_next(self._state))

    def today(self) -> NavigationState:
        return self._apply(go_today(self._state, self._clock()))

    def jump_to(self, value: Any) -> NavigationState:
        return self._apply(jump_to(self._state, value))

    def drill_down(self, value: Any) -> NavigationState:
        return self._apply(drill_down(self._state, value))

    def set_mode(self, mode: Any) -> NavigationState:
        return self._apply(set_mode(self._state, mode))
