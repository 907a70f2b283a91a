from datetime import date, datetime

import pytest

from calendar_backend.calendar_engine import CalendarEngine, UNKNOWN_COMPANY
from calendar_backend.models import ViewMode
from calendar_backend.navigation import NavigationState

from conftest import make_task


@pytest.fixture
def tasks():
    return [
        make_task("t1", datetime(2024, 2, 15, 9, 30), company_id="acme"),
        make_task("t2", datetime(2024, 2, 15, 8, 0), company_id="ghost"),
        make_task("t3", datetime(2024, 2, 20, 14, 0), company_id="acme"),
        make_task("t4", datetime(2024, 4, 1, 14, 0), company_id="acme"),
    ]


@pytest.fixture
def recorder():
    return {"toggled": [], "actions": []}


@pytest.fixture
def engine(tasks, recorder, clock):
    companies = {"acme": "Acme Ltda"}
    return CalendarEngine(
        get_tasks=lambda: tasks,
        get_company_name=companies.get,
        on_toggle_task=recorder["toggled"].append,
        clock=clock,
        on_action=recorder["actions"].append,
    )


def test_initial_state(engine):
    assert engine.current_mode == ViewMode.MONTH
    assert engine.current_anchor == datetime(2024, 2, 15, 10, 0)
    assert engine.today_date() == date(2024, 2, 15)


def test_month_grid(engine):
    cells = engine.grid
    assert len(cells) == 35
    assert engine.period_range() == (date(2024, 1, 28), date(2024, 3, 2))
    today = next(c for c in cells if c.date == date(2024, 2, 15))
    assert today.is_today
    assert [t.id for t in today.tasks] == ["t2", "t1"]
    assert engine.positioned_tasks == []


def test_week_positions(engine):
    engine.set_mode("week")
    positions = engine.positioned_tasks
    assert [(p.task.id, p.offset_minutes) for p in positions] == [("t2", 480), ("t1", 570)]
    assert engine.week_number() == 7


def test_day_view_hour_slots(engine):
    engine.drill_down(date(2024, 2, 20))
    assert engine.current_mode == ViewMode.DAY
    rows = engine.hour_slots()
    assert len(rows) == 24
    assert [t.id for t in rows[14][1]] == ["t3"]
    assert [p.task.id for p in engine.positioned_tasks] == ["t3"]


def test_grid_reflects_provider_changes(engine, tasks):
    tasks.append(make_task("t5", datetime(2024, 2, 15, 7, 0)))
    today = next(c for c in engine.grid if c.date == date(2024, 2, 15))
    assert [t.id for t in today.tasks] == ["t5", "t2", "t1"]


def test_company_name_fallback(engine):
    assert engine.company_name("acme") == "Acme Ltda"
    assert engine.company_name("ghost") == UNKNOWN_COMPANY
    assert engine.company_name("") == "Empresa desconhecida"


def test_toggle_forwards_to_provider(engine, recorder):
    engine.toggle_task("t1")
    assert recorder["toggled"] == ["t1"]
    assert recorder["actions"] == ["toggle"]


def test_navigation_actions_are_announced(engine, recorder):
    engine.next()
    engine.prev()
    engine.today()
    engine.jump_to("nonsense")
    assert recorder["actions"] == ["next", "prev", "today", "jump"]
    assert engine.current_anchor == datetime(2024, 2, 15, 10, 0)


def test_listener_receives_new_state(engine):
    seen = []
    engine.add_listener(seen.append)
    engine.jump_to("2024-03-10")
    assert seen == [NavigationState(anchor=datetime(2024, 3, 10, 12, 0), mode=ViewMode.MONTH)]


def test_now_marker(engine):
    assert engine.now_offset() == 600
    assert engine.now_marker(date(2024, 2, 15)) == 600
    assert engine.now_marker(date(2024, 2, 14)) is None


def test_initial_state_and_week_start(tasks, clock):
    engine = CalendarEngine(
        get_tasks=lambda: tasks,
        get_company_name=lambda company_id: None,
        on_toggle_task=lambda task_id: None,
        clock=clock,
        first_weekday=0,
        initial_state=NavigationState(anchor=datetime(2024, 2, 15, 12, 0), mode=ViewMode.WEEK),
    )
    assert engine.grid_dates()[0] == date(2024, 2, 12)
    assert engine.is_today(datetime(2024, 2, 15, 23, 0))
