"""
CRM Calendar GUI Module

PySide6-based graphical interface for the task calendar.
"""

from .main_window import MainWindow

__all__ = ['MainWindow']
