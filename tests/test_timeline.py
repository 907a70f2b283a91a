from datetime import date, datetime

from calendar_backend.timeline import (
    hour_fraction, minutes_since_midnight, minutes_to_pixels, now_marker,
    now_offset, position, position_tasks, scroll_offset
)
from calendar_backend.timezone_utils import parse_iso_datetime

from conftest import make_task


def test_position_offset_in_minutes():
    pos = position(make_task("a", datetime(2024, 2, 15, 9, 30)))
    assert pos.offset_minutes == 570
    assert pos.day == date(2024, 2, 15)
    assert pos.duration_minutes == 50


def test_position_bounds():
    assert position(make_task("a", datetime(2024, 2, 15, 0, 0))).offset_minutes == 0
    assert position(make_task("b", datetime(2024, 2, 15, 23, 59))).offset_minutes == 1439


def test_position_of_utc_timestamp_uses_local_time():
    task = make_task("a", parse_iso_datetime("2024-02-15T12:30:00Z"))
    assert position(task).offset_minutes == 9 * 60 + 30


def test_pixels_scale_with_hour_height():
    pos = position(make_task("a", datetime(2024, 2, 15, 9, 30)))
    assert pos.top(60) == 570
    assert pos.top(120) == 1140
    assert pos.height(60) == 50
    assert minutes_to_pixels(30, 48) == 24


def test_position_tasks_only_for_given_days():
    tasks = [
        make_task("in", datetime(2024, 2, 15, 9, 0)),
        make_task("out", datetime(2024, 2, 20, 9, 0)),
    ]
    positions = position_tasks(tasks, [date(2024, 2, 14), date(2024, 2, 15)])
    assert [p.task.id for p in positions] == ["in"]


def test_simultaneous_tasks_share_offset():
    tasks = [make_task("a", datetime(2024, 2, 15, 9, 0)), make_task("b", datetime(2024, 2, 15, 9, 0))]
    positions = position_tasks(tasks, [date(2024, 2, 15)])
    assert [p.offset_minutes for p in positions] == [540, 540]
    assert [p.task.id for p in positions] == ["a", "b"]


def test_hour_fraction():
    assert hour_fraction(make_task("a", datetime(2024, 2, 15, 9, 30))) == 0.5
    assert hour_fraction(make_task("b", datetime(2024, 2, 15, 9, 0))) == 0.0


def test_now_marker_only_on_today(clock):
    assert now_offset(clock) == 600
    assert now_marker(date(2024, 2, 15), clock) == 600
    assert now_marker(date(2024, 2, 16), clock) is None


def test_minutes_since_midnight_naive_is_local():
    assert minutes_since_midnight(datetime(2024, 2, 15, 1, 5)) == 65


def test_scroll_offset_clamps_hour():
    assert scroll_offset(8, 60) == 480
    assert scroll_offset(30, 60) == 23 * 60
    assert scroll_offset(-2, 60) == 0
