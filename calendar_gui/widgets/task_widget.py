"""
Task chip widget.

Shows a single CRM task in the month, week or day view. Completed tasks are
dimmed and struck through. Clicking a chip in the week or day view asks the
engine to toggle the task.
"""

from enum import Enum

from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QFrame, QSizePolicy
from PySide6.QtCore import Qt, Signal, QSize
from PySide6.QtGui import QFont, QMouseEvent, QFontMetrics

from calendar_backend.config import LayoutConfig, ColorsConfig, LabelsConfig
from calendar_backend.models import Task


class ChipStyle(Enum):
    """Where the chip is shown; decides its layout."""
    MONTH = "month"   # one line "HH:mm title", not clickable
    WEEK = "week"     # title + time
    DAY = "day"       # completion mark, title, time and company

# Module-level configs (set by MainWindow at startup via calendar_widget)
_layout_config: LayoutConfig = LayoutConfig()
_colors_config: ColorsConfig = ColorsConfig()
_labels_config: LabelsConfig = LabelsConfig()


def set_task_layout_config(config: LayoutConfig):
    """Set the layout configuration for task widgets."""
    global _layout_config
    _layout_config = config


def set_task_colors_config(config: ColorsConfig):
    """Set the colors configuration for task widgets."""
    global _colors_config
    _colors_config = config


def set_task_labels_config(config: LabelsConfig):
    global _labels_config
    _labels_config = config


def get_text_font() -> QFont:
    """Get the configured text font for tasks."""
    return QFont(_layout_config.text_font, _layout_config.text_font_size)


def _sanitize_text(text: str) -> str:
    """Convert line breaks to spaces for single-line display."""
    if not text:
        return text
    return ' '.join(text.split())


class TaskWidget(QFrame):
    """
    Widget representing a single task in the calendar view.

    Emits toggle_requested with the task id when clicked (week and day
    styles only; month chips let clicks through to their cell).
    """

    toggle_requested = Signal(str)

    def __init__(
        self,
        task: Task,
        company_name: str = "",
        style: ChipStyle = ChipStyle.WEEK,
        parent: QWidget = None
    ):
        """
        Initialize the task widget.

        Args:
            task: The task to display
            company_name: Resolved company name for tooltip/day view
            style: Layout variant for the hosting view
            parent: Parent widget
        """
        super().__init__(parent)
        self.task = task
        self.company_name = company_name
        self.chip_style = style

        self._setup_ui()
        self._apply_style()

    def _setup_ui(self) -> None:
        self.setFont(get_text_font())

        if self.chip_style == ChipStyle.MONTH:
            self._setup_month_ui()
            # Clicks belong to the month cell (drill down)
            self.setAttribute(Qt.WA_TransparentForMouseEvents)
        elif self.chip_style == ChipStyle.WEEK:
            self._setup_week_ui()
            self.setCursor(Qt.PointingHandCursor)
        else:
            self._setup_day_ui()
            self.setCursor(Qt.PointingHandCursor)

        self.setFrameStyle(QFrame.StyledPanel | QFrame.Plain)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)
        self.setToolTip(f"{self.task.title} - {self.company_name}" if self.company_name else self.task.title)

    def _time_text(self) -> str:
        return self.task.local_due.strftime('%H:%M')

    def _title_label(self, text: str, bold: bool = True) -> QLabel:
        label = QLabel(_sanitize_text(text))
        label.setWordWrap(False)
        label.setTextFormat(Qt.PlainText)
        font = QFont(get_text_font())
        font.setBold(bold)
        font.setStrikeOut(self.task.is_completed)
        label.setFont(font)
        return label

    def _setup_month_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 1, 4, 1)
        layout.setSpacing(0)
        layout.addWidget(self._title_label(f"{self._time_text()} {self.task.title}", bold=False))

    def _setup_week_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(0)
        layout.setAlignment(Qt.AlignTop)
        layout.addWidget(self._title_label(self.task.title))

        time_label = QLabel(self._time_text())
        time_label.setObjectName("secondary")
        layout.addWidget(time_label)

    def _setup_day_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(6, 4, 6, 4)
        layout.setSpacing(6)
        layout.setAlignment(Qt.AlignTop)

        mark = QLabel(_labels_config.done_mark if self.task.is_completed else "")
        fm = QFontMetrics(mark.font())
        mark.setFixedSize(fm.height(), fm.height())
        mark.setAlignment(Qt.AlignCenter)
        mark.setObjectName("mark")
        layout.addWidget(mark, 0, Qt.AlignTop)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(0)
        text_layout.addWidget(self._title_label(self.task.title))
        details = QLabel(f"{self._time_text()} • {_sanitize_text(self.company_name)}")
        details.setObjectName("secondary")
        details.setTextFormat(Qt.PlainText)
        text_layout.addWidget(details)
        layout.addLayout(text_layout, 1)

    def _apply_style(self) -> None:
        """Apply color styling based on completion."""
        colors = _colors_config
        if self.task.is_completed:
            bg, border, text = colors.task_done_background, colors.task_done_border, colors.task_done_text
        else:
            bg, border, text = colors.task_background, colors.task_border, colors.task_text
        border_width = 4 if self.chip_style == ChipStyle.DAY else 2

        self.setStyleSheet(f"""
            TaskWidget {{
                background-color: {bg};
                border: none;
                border-left: {border_width}px solid {border};
                border-radius: 4px;
                color: {text};
            }}
            QLabel {{
                color: {text};
                background: transparent;
                border: none;
                padding: 0px;
                margin: 0px;
            }}
            QLabel#secondary {{
                color: {colors.secondary_text};
            }}
            QLabel#mark {{
                border: 1px solid {border};
                border-radius: 7px;
            }}
        """)

    def mousePressEvent(self, mouse_event: QMouseEvent) -> None:
        if mouse_event.button() == Qt.LeftButton:
            self.toggle_requested.emit(self.task.id)
            # Do not let the click reach the day column underneath
            mouse_event.accept()
            return
        super().mousePressEvent(mouse_event)

    def sizeHint(self) -> QSize:
        """Return the preferred size for this widget based on font metrics."""
        fm = QFontMetrics(self.font())
        line_height = fm.height()
        lines = 1 if self.chip_style == ChipStyle.MONTH else 2
        return QSize(150, lines * line_height + 6)
