"""
CRM Calendar GUI Widgets

Custom widgets for displaying tasks on the calendar.
"""

from .task_widget import TaskWidget, ChipStyle
from .calendar_widget import CalendarWidget, DayView, WeekView, MonthView

__all__ = ['TaskWidget', 'ChipStyle', 'CalendarWidget', 'DayView', 'WeekView', 'MonthView']
