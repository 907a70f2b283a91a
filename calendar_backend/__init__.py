"""
CRM Calendar Backend Module

This module provides the calendar layout and navigation engine:
- Date grid generation for month/week/day views (date_grid.py)
- Task bucketing into cells and hour slots (bucketing.py)
- Time-of-day placement for week/day views (timeline.py)
- Navigation state machine (navigation.py)
- Engine facade used by the views (calendar_engine.py)
- Toolbar titles and period labels (period_labels.py)
- Configuration parsing (config.py) and the JSON task provider (task_store.py)
"""

from .config import Config
from .models import Task, Company, ViewMode
from .navigation import NavigationState, Navigator
from .bucketing import CalendarCell
from .timeline import TimeSlotPosition
from .calendar_engine import CalendarEngine, UNKNOWN_COMPANY
from .task_store import TaskStore, TaskStoreError

__all__ = [
    'Config',
    'Task',
    'Company',
    'ViewMode',
    'NavigationState',
    'Navigator',
    'CalendarCell',
    'TimeSlotPosition',
    'CalendarEngine',
    'UNKNOWN_COMPANY',
    'TaskStore',
    'TaskStoreError',
]
