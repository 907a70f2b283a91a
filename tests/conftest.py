from datetime import datetime

import pytest

from calendar_backend.log import set_debug
from calendar_backend.models import Task
from calendar_backend.timezone_utils import set_timezone


NOW = datetime(2024, 2, 15, 10, 0)


@pytest.fixture(autouse=True)
def sao_paulo_timezone():
    set_timezone("America/Sao_Paulo")
    yield
    set_timezone("America/Sao_Paulo")
    set_debug(False)


@pytest.fixture
def clock():
    return lambda: NOW


def make_task(task_id, due, title=None, company_id="c1", done=False):
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        due_date=due,
        is_completed=done,
        company_id=company_id,
    )
