"""
Calendar Widget with Month, Week, and Day views.

The views hold no calendar logic of their own: dates, task buckets and
time-of-day positions all come from the CalendarEngine, and user actions
(drill-down, task toggling) are dispatched back to it.
"""

from datetime import date
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QScrollArea, QFrame, QStackedWidget
)
from PySide6.QtCore import Qt, Signal, QTimer
from PySide6.QtGui import QFontMetrics, QMouseEvent

from calendar_backend.calendar_engine import CalendarEngine
from calendar_backend.bucketing import CalendarCell
from calendar_backend.config import LayoutConfig, LocalizationConfig, ColorsConfig, LabelsConfig
from calendar_backend.models import ViewMode
from calendar_backend.navigation import NavigationState
from calendar_backend.timeline import TimeSlotPosition, hour_fraction, minutes_to_pixels, scroll_offset
from .task_widget import (
    TaskWidget, ChipStyle,
    set_task_layout_config, set_task_colors_config, set_task_labels_config
)

# Module-level configs (set by MainWindow at startup)
_layout_config: LayoutConfig = LayoutConfig()
_localization_config: LocalizationConfig = LocalizationConfig()
_colors_config: ColorsConfig = ColorsConfig()
_labels_config: LabelsConfig = LabelsConfig()

# Module-level hour height (updated when layout config is set)
HOUR_HEIGHT = 60  # Default value

# Seconds between current-time line updates
TIME_INDICATOR_INTERVAL_MS = 60000


def set_layout_config(config: LayoutConfig):
    """Set the layout configuration for this module and task widget."""
    global _layout_config, HOUR_HEIGHT
    _layout_config = config
    HOUR_HEIGHT = config.hour_height
    set_task_layout_config(config)


def set_localization_config(config: LocalizationConfig):
    """Set the localization configuration for this module."""
    global _localization_config
    _localization_config = config


def get_localization_config() -> LocalizationConfig:
    return _localization_config


def set_colors_config(config: ColorsConfig):
    """Set the colors configuration for this module and task widget."""
    global _colors_config
    _colors_config = config
    set_task_colors_config(config)


def get_colors_config() -> ColorsConfig:
    return _colors_config


def set_labels_config(config: LabelsConfig):
    """Set the labels configuration for this module and task widget."""
    global _labels_config
    _labels_config = config
    set_task_labels_config(config)


def get_labels_config() -> LabelsConfig:
    return _labels_config


def get_interface_font() -> tuple[str, int]:
    """Get the configured interface font name and size."""
    return (_layout_config.interface_font, _layout_config.interface_font_size)


def _get_time_column_width() -> int:
    """Calculate time column width based on actual font metrics."""
    sample_label = QLabel("00:00")
    metrics = QFontMetrics(sample_label.font())
    return metrics.horizontalAdvance("00:00") + 24


def _get_single_line_height() -> int:
    sample_label = QLabel("Sample")
    fm = QFontMetrics(sample_label.font())
    return fm.height() + 4


def _clear_layout_widgets(widgets: list[QWidget]) -> None:
    for widget in widgets:
        widget.deleteLater()
    widgets.clear()


class TimeIndicator(QFrame):
    """Red current-time line drawn over a 24-hour column."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFrameStyle(QFrame.HLine | QFrame.Plain)
        self.setStyleSheet(f"background-color: {get_colors_config().current_time_line}; border: none;")
        self.setFixedHeight(2)
        self.hide()

    def place(self, offset_minutes: Optional[int], x: int, width: int) -> None:
        """Show at the given minute offset, or hide when offset is None."""
        if offset_minutes is None:
            self.hide()
            return
        y = minutes_to_pixels(offset_minutes, HOUR_HEIGHT)
        self.setGeometry(x, y, width, 2)
        self.show()
        self.raise_()


class TimeLabelsColumn(QWidget):
    """Fixed 00:00 - 23:00 labels alongside the week grid."""

    def __init__(self, width: int, parent=None):
        super().__init__(parent)
        colors = get_colors_config()
        self.setFixedWidth(width)
        self.setFixedHeight(24 * HOUR_HEIGHT)
        self.setStyleSheet(f"background: {colors.header_background};")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        for hour in range(24):
            lbl = QLabel(f"{hour:02d}:00")
            lbl.setFixedHeight(HOUR_HEIGHT)
            lbl.setAlignment(Qt.AlignHCenter | Qt.AlignTop)
            lbl.setStyleSheet(f"color: {colors.header_text}; padding-top: 6px; border-bottom: 1px solid {colors.hour_line};")
            layout.addWidget(lbl)


class DayColumnWidget(QWidget):
    """
    A single day column with absolute positioning for tasks.

    Every task chip has the same height; tasks at the same time overlap and
    the later one is drawn on top.
    """

    toggle_requested = Signal(str)

    def __init__(self, engine: CalendarEngine, for_date: date, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._date = for_date
        self._positions: list[TimeSlotPosition] = []
        self._task_widgets: list[TaskWidget] = []
        self._setup_ui()
        self._time_indicator = TimeIndicator(self)

    def _setup_ui(self):
        colors = get_colors_config()
        # Fixed height for 24 hours
        self.setMinimumHeight(24 * HOUR_HEIGHT)
        self.setMaximumHeight(24 * HOUR_HEIGHT)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet(f"background-color: {colors.day_column_background}; border-right: 1px solid {colors.cell_border};")

        # Draw hour lines
        for hour in range(1, 24):
            line = QFrame(self)
            line.setFrameStyle(QFrame.HLine | QFrame.Plain)
            line.setStyleSheet(f"background-color: {colors.hour_line}; border: none;")
            line.setGeometry(0, hour * HOUR_HEIGHT, 2000, 1)

    @property
    def date(self) -> date:
        return self._date

    def set_positions(self, for_date: date, positions: list[TimeSlotPosition]):
        """Replace the tasks shown in this column."""
        self._date = for_date
        self._positions = positions
        _clear_layout_widgets(self._task_widgets)

        for pos in positions:
            widget = TaskWidget(
                pos.task,
                company_name=self._engine.company_name(pos.task.company_id),
                style=ChipStyle.WEEK,
                parent=self
            )
            widget.toggle_requested.connect(self.toggle_requested.emit)
            self._task_widgets.append(widget)
            widget.show()

        self._position_task_widgets()
        self.update_time_indicator()

    def _position_task_widgets(self):
        width = self.width() - 8  # 4px margin on each side
        for widget, pos in zip(self._task_widgets, self._positions):
            widget.setGeometry(4, pos.top(HOUR_HEIGHT), width, pos.height(HOUR_HEIGHT))
            widget.raise_()

    def update_time_indicator(self):
        """Update the position of the current time indicator."""
        self._time_indicator.place(self._engine.now_marker(self._date), 0, self.width())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_task_widgets()
        self.update_time_indicator()


class DayHeaderLabel(QLabel):
    """Week view column header; clicking it opens the day view."""

    clicked = Signal(date)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._date: Optional[date] = None
        self.setAlignment(Qt.AlignCenter)
        self.setCursor(Qt.PointingHandCursor)

    def set_day(self, d: date, is_today: bool):
        self._date = d
        localization = get_localization_config()
        colors = get_colors_config()
        font_name, font_size = get_interface_font()
        day_name = localization.get_day_name(d.weekday())
        self.setText(f"{day_name.upper()}\n{d.day}")
        if is_today:
            self.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 6px; background: {colors.today_highlight_background}; color: {colors.today_highlight_text};")
        else:
            self.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 6px; background: {colors.header_background}; color: {colors.header_text};")

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton and self._date is not None:
            self.clicked.emit(self._date)
        super().mousePressEvent(event)


class WeekView(QWidget):
    """Week view showing 7 day columns side by side."""

    toggle_requested = Signal(str)
    day_clicked = Signal(date)

    def __init__(self, engine: CalendarEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._day_columns: list[DayColumnWidget] = []
        self._header_labels: list[DayHeaderLabel] = []
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        time_col_width = _get_time_column_width()

        # Header with day names; account for the scrollbar on the right
        from PySide6.QtWidgets import QApplication, QStyle
        scrollbar_width = QApplication.style().pixelMetric(QStyle.PM_ScrollBarExtent)

        colors = get_colors_config()
        header = QWidget()
        header.setStyleSheet(f"background: {colors.header_background};")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(0, 0, scrollbar_width, 0)
        header_layout.setSpacing(1)

        tz_label = QLabel(get_labels_config().timezone_label)
        tz_label.setFixedWidth(time_col_width)
        tz_label.setAlignment(Qt.AlignHCenter | Qt.AlignBottom)
        tz_label.setStyleSheet(f"color: {colors.header_text}; padding-bottom: 6px;")
        header_layout.addWidget(tz_label)

        for _ in range(7):
            label = DayHeaderLabel()
            label.clicked.connect(self.day_clicked.emit)
            header_layout.addWidget(label, 1)
            self._header_labels.append(label)

        main_layout.addWidget(header)

        # Scroll area for time grid
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        content = QWidget()
        content_layout = QHBoxLayout(content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(0)
        content_layout.addWidget(TimeLabelsColumn(time_col_width))

        for _ in range(7):
            col = DayColumnWidget(self._engine, date.today())
            col.toggle_requested.connect(self.toggle_requested.emit)
            content_layout.addWidget(col, 1)
            self._day_columns.append(col)

        scroll.setWidget(content)
        self._scroll = scroll
        main_layout.addWidget(scroll, 1)

    def get_scroll_position(self) -> int:
        return self._scroll.verticalScrollBar().value()

    def set_scroll_position(self, position: int):
        self._scroll.verticalScrollBar().setValue(position)

    def refresh(self):
        """Pull the week grid and task positions from the engine."""
        cells = self._engine.grid
        positions = self._engine.positioned_tasks
        by_day: dict[date, list[TimeSlotPosition]] = {}
        for pos in positions:
            by_day.setdefault(pos.day, []).append(pos)

        for cell, label, col in zip(cells, self._header_labels, self._day_columns):
            label.set_day(cell.date, cell.is_today)
            col.set_positions(cell.date, by_day.get(cell.date, []))

    def update_time_indicator(self):
        for col in self._day_columns:
            col.update_time_indicator()


class DayScheduleWidget(QWidget):
    """
    The 24 hour rows of the day view.

    Each task sits in the row of its hour, shifted down by the fraction of
    the hour given by its minutes.
    """

    toggle_requested = Signal(str)

    def __init__(self, engine: CalendarEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._task_widgets: list[TaskWidget] = []
        self._placements: list[tuple[int, float]] = []  # (hour, fraction) per widget
        self._label_width = _get_time_column_width()
        self._setup_ui()
        self._time_indicator = TimeIndicator(self)

    def _setup_ui(self):
        colors = get_colors_config()
        self.setFixedHeight(24 * HOUR_HEIGHT)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setStyleSheet(f"background-color: {colors.day_column_background};")

        for hour in range(24):
            lbl = QLabel(f"{hour:02d}:00", self)
            lbl.setAlignment(Qt.AlignHCenter | Qt.AlignTop)
            lbl.setStyleSheet(f"color: {colors.header_text}; padding-top: 6px; border-right: 1px solid {colors.hour_line};")
            lbl.setGeometry(0, hour * HOUR_HEIGHT, self._label_width, HOUR_HEIGHT)

            line = QFrame(self)
            line.setFrameStyle(QFrame.HLine | QFrame.Plain)
            line.setStyleSheet(f"background-color: {colors.hour_line}; border: none;")
            line.setGeometry(0, (hour + 1) * HOUR_HEIGHT - 1, 4000, 1)

    def refresh(self):
        _clear_layout_widgets(self._task_widgets)
        self._placements.clear()

        for hour, tasks in self._engine.hour_slots():
            for task in tasks:
                widget = TaskWidget(
                    task,
                    company_name=self._engine.company_name(task.company_id),
                    style=ChipStyle.DAY,
                    parent=self
                )
                widget.toggle_requested.connect(self.toggle_requested.emit)
                self._task_widgets.append(widget)
                self._placements.append((hour, hour_fraction(task)))
                widget.show()

        self._position_task_widgets()
        self.update_time_indicator()

    def _task_top(self, hour: int, fraction: float) -> int:
        return int((hour + fraction) * HOUR_HEIGHT)

    def _position_task_widgets(self):
        x = self._label_width + 8
        width = max(self.width() - x - 8, 50)
        min_height = _layout_config.day_chip_min_height
        for widget, (hour, fraction) in zip(self._task_widgets, self._placements):
            height = max(min_height, widget.sizeHint().height())
            widget.setGeometry(x, self._task_top(hour, fraction) + 2, width, height)
            widget.raise_()

    def update_time_indicator(self):
        day = self._engine.current_anchor.date()
        self._time_indicator.place(self._engine.now_marker(day), self._label_width, self.width() - self._label_width)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_task_widgets()
        self.update_time_indicator()


class DayView(QWidget):
    """Single day view with hourly time slots."""

    toggle_requested = Signal(str)

    def __init__(self, engine: CalendarEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self._schedule = DayScheduleWidget(self._engine)
        self._schedule.toggle_requested.connect(self.toggle_requested.emit)
        scroll.setWidget(self._schedule)
        self._scroll = scroll
        layout.addWidget(scroll)

    def get_scroll_position(self) -> int:
        return self._scroll.verticalScrollBar().value()

    def set_scroll_position(self, position: int):
        self._scroll.verticalScrollBar().setValue(position)

    def refresh(self):
        self._schedule.refresh()

    def update_time_indicator(self):
        self._schedule.update_time_indicator()


class MonthDayCell(QFrame):
    """Single day cell in month view."""

    clicked = Signal(date)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._cell: Optional[CalendarCell] = None
        self._task_widgets: list[QWidget] = []
        self._setup_ui()

    def _setup_ui(self):
        self.setFrameStyle(QFrame.Box | QFrame.Plain)
        fm = QFontMetrics(self.font())
        # Day number + room for the configured number of task lines
        min_height = fm.height() + (_layout_config.month_cell_max_tasks + 1) * _get_single_line_height() + 12
        self.setMinimumSize(max(fm.horizontalAdvance("00") + 16, 60), max(min_height, 80))
        self.setCursor(Qt.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        top_row = QHBoxLayout()
        self._day_label = QLabel()
        self._day_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        top_row.addWidget(self._day_label)
        top_row.addStretch()
        self._count_label = QLabel()
        self._count_label.setAlignment(Qt.AlignRight | Qt.AlignTop)
        top_row.addWidget(self._count_label)
        layout.addLayout(top_row)

        self._tasks_layout = QVBoxLayout()
        self._tasks_layout.setSpacing(1)
        layout.addLayout(self._tasks_layout)
        layout.addStretch()

    @property
    def date(self) -> Optional[date]:
        return self._cell.date if self._cell else None

    def set_cell(self, cell: CalendarCell, company_name):
        self._cell = cell
        self._day_label.setText(str(cell.date.day))
        self._update_style()

        _clear_layout_widgets(self._task_widgets)
        colors = get_colors_config()
        if cell.task_count:
            self._count_label.setText(str(cell.task_count))
            self._count_label.setStyleSheet(f"color: {colors.header_text}; background: {colors.count_badge_background}; border-radius: 6px; padding: 0px 5px; font-size: 8pt;")
            self._count_label.show()
        else:
            self._count_label.hide()

        limit = _layout_config.month_cell_max_tasks
        for task in cell.visible_tasks(limit):
            widget = TaskWidget(task, company_name=company_name(task.company_id), style=ChipStyle.MONTH)
            widget.setMaximumHeight(_get_single_line_height())
            self._tasks_layout.addWidget(widget)
            self._task_widgets.append(widget)

        hidden = cell.overflow_count(limit)
        if hidden > 0:
            more = QLabel(get_labels_config().more_tasks.format(hidden))
            more.setStyleSheet(f"color: {colors.month_text_other}; font-size: 8pt; padding-left: 4px;")
            self._tasks_layout.addWidget(more)
            self._task_widgets.append(more)

    def _update_style(self):
        colors = get_colors_config()
        cell = self._cell
        bg = colors.month_cell_current if cell.is_in_current_period else colors.month_cell_other
        text = colors.month_text_current if cell.is_in_current_period else colors.month_text_other
        if cell.is_today:
            bg = colors.today_cell_background
            self._day_label.setStyleSheet(f"color: {colors.today_highlight_text}; font-weight: bold; background: {colors.today_highlight_background}; border-radius: 10px; padding: 2px 6px;")
        else:
            self._day_label.setStyleSheet(f"color: {text}; padding: 2px 6px;")

        self.setStyleSheet(f"MonthDayCell {{ background-color: {bg}; border: 1px solid {colors.cell_border}; }}")

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton and self._cell is not None:
            self.clicked.emit(self._cell.date)
        super().mousePressEvent(event)


class MonthView(QWidget):
    """Month view showing a calendar grid of whole weeks."""

    day_clicked = Signal(date)

    MAX_ROWS = 6

    def __init__(self, engine: CalendarEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._cells: list[MonthDayCell] = []
        self._header_labels: list[QLabel] = []
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.setSpacing(1)
        for _ in range(7):
            label = QLabel()
            label.setAlignment(Qt.AlignCenter)
            header_layout.addWidget(label, 1)
            self._header_labels.append(label)
        layout.addWidget(header)
        self._update_headers()

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        grid_widget = QWidget()
        self._grid_layout = QGridLayout(grid_widget)
        self._grid_layout.setContentsMargins(0, 0, 0, 0)
        self._grid_layout.setSpacing(1)
        for col in range(7):
            self._grid_layout.setColumnStretch(col, 1)

        for row in range(self.MAX_ROWS):
            for col in range(7):
                cell = MonthDayCell()
                cell.clicked.connect(self.day_clicked.emit)
                self._grid_layout.addWidget(cell, row, col)
                self._cells.append(cell)

        scroll.setWidget(grid_widget)
        layout.addWidget(scroll, 1)

    def _update_headers(self):
        """Day names in grid order, starting at the configured first weekday."""
        localization = get_localization_config()
        colors = get_colors_config()
        font_name, font_size = get_interface_font()
        first_weekday = self._engine.first_weekday
        for i, label in enumerate(self._header_labels):
            label.setText(localization.get_day_name((first_weekday + i) % 7).upper())
            label.setStyleSheet(f"font-family: '{font_name}'; font-size: {font_size}pt; font-weight: bold; padding: 8px; color: {colors.header_text}; background: {colors.header_background};")

    def refresh(self):
        cells = self._engine.grid
        for i, widget in enumerate(self._cells):
            if i < len(cells):
                widget.set_cell(cells[i], self._engine.company_name)
                widget.show()
            else:
                widget.hide()


class CalendarWidget(QWidget):
    """
    Main calendar widget with switchable views.

    Re-renders whenever the engine's navigation state changes and when
    refresh() is called after the task data changed.
    """

    state_changed = Signal(object)  # NavigationState

    def __init__(self, engine: CalendarEngine, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._current_view: Optional[ViewMode] = None
        self._setup_ui()
        self._engine.add_listener(self._on_state_changed)

        # Keep the current-time line moving
        self._time_timer = QTimer(self)
        self._time_timer.timeout.connect(self._update_time_indicators)
        self._time_timer.start(TIME_INDICATOR_INTERVAL_MS)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._stack = QStackedWidget()

        self._month_view = MonthView(self._engine)
        self._week_view = WeekView(self._engine)
        self._day_view = DayView(self._engine)

        self._month_view.day_clicked.connect(self._engine.drill_down)
        self._week_view.day_clicked.connect(self._engine.drill_down)
        self._week_view.toggle_requested.connect(self._engine.toggle_task)
        self._day_view.toggle_requested.connect(self._engine.toggle_task)

        self._stack.addWidget(self._month_view)
        self._stack.addWidget(self._week_view)
        self._stack.addWidget(self._day_view)

        layout.addWidget(self._stack)
        self.refresh()

    @property
    def engine(self) -> CalendarEngine:
        return self._engine

    def _view_for_mode(self, mode: ViewMode) -> QWidget:
        if mode == ViewMode.DAY:
            return self._day_view
        elif mode == ViewMode.WEEK:
            return self._week_view
        return self._month_view

    def refresh(self):
        """Re-render the active view from the engine."""
        mode = self._engine.current_mode
        view = self._view_for_mode(mode)
        self._stack.setCurrentWidget(view)
        view.refresh()

        if mode != self._current_view:
            self._current_view = mode
            # Scroll to the start of the working day when a timed view opens
            if mode.is_timed:
                QTimer.singleShot(0, self.scroll_to_start_hour)

    def scroll_to_start_hour(self):
        self.set_scroll_position(scroll_offset(_layout_config.scroll_to_hour, HOUR_HEIGHT))

    def _on_state_changed(self, state: NavigationState):
        self.refresh()
        self.state_changed.emit(state)

    def _update_time_indicators(self):
        if self._current_view == ViewMode.WEEK:
            self._week_view.update_time_indicator()
        elif self._current_view == ViewMode.DAY:
            self._day_view.update_time_indicator()

    def get_scroll_position(self) -> int:
        """Get scroll position for day/week views."""
        if self._current_view == ViewMode.DAY:
            return self._day_view.get_scroll_position()
        elif self._current_view == ViewMode.WEEK:
            return self._week_view.get_scroll_position()
        return 0

    def set_scroll_position(self, position: int):
        """Set scroll position for day/week views."""
        self._day_view.set_scroll_position(position)
        self._week_view.set_scroll_position(position)
