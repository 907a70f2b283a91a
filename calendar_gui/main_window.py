"""
Main Window for CRM Calendar.

The primary application window with the navigation toolbar and the
calendar views.
"""

import base64
import json
from datetime import date
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QToolBar, QPushButton, QLabel, QDateEdit,
    QStatusBar, QApplication, QSizePolicy, QButtonGroup
)
from PySide6.QtCore import Qt, QTimer, QDate
from PySide6.QtGui import QCloseEvent, QFont, QKeySequence, QShortcut

from calendar_backend.calendar_engine import CalendarEngine
from calendar_backend.config import Config
from calendar_backend.log import debug_print
from calendar_backend.models import ViewMode
from calendar_backend.navigation import NavigationState
from calendar_backend.period_labels import period_label, view_subtitle, view_title
from calendar_backend.task_store import TaskStore, TaskStoreError
from calendar_backend.timezone_utils import at_noon, set_timezone

from .widgets.calendar_widget import (
    CalendarWidget, set_layout_config, set_localization_config,
    set_colors_config, set_labels_config
)


def _debug_print(message: str) -> None:
    debug_print("WINDOW", message)


class MainWindow(QMainWindow):
    """
    Main application window.

    Contains:
    - Toolbar with title, navigation and view switching
    - Main calendar view (month/week/day)
    """

    def __init__(self, config: Config, task_store: TaskStore, parent=None):
        super().__init__(parent)
        self.config = config
        set_timezone(config.timezone)

        # Set layout config, localization, colors, and labels for calendar widget BEFORE creating UI
        set_layout_config(config.layout)
        set_localization_config(config.localization)
        set_colors_config(config.colors)
        set_labels_config(config.labels)

        # Apply text_font as application default (for tooltips, task content, etc.)
        text_font = QFont(config.layout.text_font, config.layout.text_font_size)
        QApplication.instance().setFont(text_font)

        # Store interface font for explicit use on UI elements
        self._interface_font = QFont(config.layout.interface_font, config.layout.interface_font_size)

        self.task_store = task_store
        self.task_store.set_on_change_callback(self._on_data_changed)

        # State file for persistence (using JSON, not QSettings)
        self._state_file = config.state_file
        self._ui_state: dict = {}
        self._load_ui_state()

        self.engine = CalendarEngine(
            get_tasks=self.task_store.get_tasks,
            get_company_name=self.task_store.get_company_name,
            on_toggle_task=self._on_toggle_task,
            first_weekday=config.first_weekday,
            task_duration_minutes=config.layout.task_duration_minutes,
            unknown_company=config.labels.unknown_company,
            on_action=self._on_engine_action,
            initial_state=self._restored_navigation_state()
        )

        # Auto-refresh timer
        self._auto_refresh_timer = QTimer(self)
        self._auto_refresh_timer.timeout.connect(self._on_auto_refresh)

        self._setup_window()
        self._setup_ui()
        self._setup_toolbar()
        self._setup_shortcuts()
        self._setup_statusbar()

        self._update_toolbar(self.engine.state)
        self._restore_scroll_position()

        # Start auto-refresh timer if interval > 0
        if config.refresh_interval > 0:
            self._auto_refresh_timer.start(config.refresh_interval * 1000)  # Convert to milliseconds
            _debug_print(f"Auto-refresh enabled every {config.refresh_interval} seconds")

    def _setup_window(self):
        """Configure main window properties."""
        self.setWindowTitle(self.config.labels.window_title)
        self.setMinimumSize(800, 600)

        # Restore window geometry
        geometry = self._ui_state.get("geometry")
        if geometry:
            self.restoreGeometry(base64.b64decode(geometry))
        else:
            self.resize(1200, 800)

    def _setup_shortcuts(self):
        """Set up keyboard shortcuts from config bindings."""
        prev_shortcut = QShortcut(QKeySequence(self.config.bindings.prev), self)
        prev_shortcut.activated.connect(self.engine.prev)

        next_shortcut = QShortcut(QKeySequence(self.config.bindings.next), self)
        next_shortcut.activated.connect(self.engine.next)

        if self.config.bindings.today:
            today_shortcut = QShortcut(QKeySequence(self.config.bindings.today), self)
            today_shortcut.activated.connect(self.engine.today)

    def _setup_ui(self):
        """Set up the main UI layout."""
        self._calendar_widget = CalendarWidget(self.engine)
        self._calendar_widget.state_changed.connect(self._update_toolbar)
        self.setCentralWidget(self._calendar_widget)

    def _setup_toolbar(self):
        """Set up the navigation toolbar."""
        labels = self.config.labels
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        if toolbar.layout():
            toolbar.layout().setContentsMargins(8, 12, 8, 8)

        # === LEFT BLOCK: back button, title and subtitle ===
        self._back_btn = QPushButton(labels.button_back_to_month)
        self._back_btn.setFont(self._interface_font)
        self._back_btn.clicked.connect(lambda: self.engine.set_mode(ViewMode.MONTH))
        self._back_action = toolbar.addWidget(self._back_btn)

        title_box = QWidget()
        title_layout = QVBoxLayout(title_box)
        title_layout.setContentsMargins(8, 0, 8, 0)
        title_layout.setSpacing(0)
        self._title_label = QLabel()
        title_font = QFont(self._interface_font)
        title_font.setBold(True)
        title_font.setPointSize(self._interface_font.pointSize() + 4)
        self._title_label.setFont(title_font)
        title_layout.addWidget(self._title_label)
        self._subtitle_label = QLabel()
        self._subtitle_label.setFont(self._interface_font)
        self._subtitle_label.setStyleSheet(f"color: {self.config.colors.secondary_text};")
        title_layout.addWidget(self._subtitle_label)
        toolbar.addWidget(title_box)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        # === CENTER: today, prev, period label, date picker, next ===
        self._today_btn = QPushButton(labels.button_today)
        self._today_btn.setFont(self._interface_font)
        self._today_btn.clicked.connect(self.engine.today)
        toolbar.addWidget(self._today_btn)

        self._prev_btn = QPushButton(labels.button_prev)
        self._prev_btn.setFont(self._interface_font)
        self._prev_btn.clicked.connect(self.engine.prev)
        toolbar.addWidget(self._prev_btn)

        self._period_label = QLabel()
        period_font = QFont(self._interface_font)
        period_font.setBold(True)
        self._period_label.setFont(period_font)
        self._period_label.setAlignment(Qt.AlignCenter)
        self._period_label.setMinimumWidth(140)
        toolbar.addWidget(self._period_label)

        self._date_edit = QDateEdit()
        self._date_edit.setFont(self._interface_font)
        self._date_edit.setCalendarPopup(True)
        self._date_edit.setDisplayFormat("dd/MM/yyyy")
        self._date_edit.dateChanged.connect(self._on_date_picked)
        toolbar.addWidget(self._date_edit)

        self._next_btn = QPushButton(labels.button_next)
        self._next_btn.setFont(self._interface_font)
        self._next_btn.clicked.connect(self.engine.next)
        toolbar.addWidget(self._next_btn)

        toolbar.addSeparator()

        # === RIGHT BLOCK: view switcher ===
        switcher = QWidget()
        switcher_layout = QHBoxLayout(switcher)
        switcher_layout.setContentsMargins(0, 0, 0, 0)
        switcher_layout.setSpacing(2)
        self._view_buttons: dict[ViewMode, QPushButton] = {}
        self._view_group = QButtonGroup(self)
        self._view_group.setExclusive(True)
        for mode, text in (
            (ViewMode.MONTH, labels.view_month),
            (ViewMode.WEEK, labels.view_week),
            (ViewMode.DAY, labels.view_day),
        ):
            btn = QPushButton(text)
            btn.setFont(self._interface_font)
            btn.setCheckable(True)
            btn.clicked.connect(lambda checked=False, m=mode: self.engine.set_mode(m))
            self._view_group.addButton(btn)
            switcher_layout.addWidget(btn)
            self._view_buttons[mode] = btn
        toolbar.addWidget(switcher)

    def _setup_statusbar(self):
        """Set up the status bar."""
        self._statusbar = QStatusBar()
        self._statusbar.setFont(self._interface_font)
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage(self.config.labels.status_loaded.format(len(self.task_store.get_tasks())))

    def _update_toolbar(self, state: NavigationState):
        """Sync title, period label, date picker and view buttons with the state."""
        labels = self.config.labels
        localization = self.config.localization

        self._back_action.setVisible(state.mode != ViewMode.MONTH)
        self._title_label.setText(view_title(state.mode, labels))
        self._subtitle_label.setText(view_subtitle(state, self.engine.period_range(), labels, localization))
        self._period_label.setText(period_label(state, labels, localization, self.engine.first_weekday))

        day = state.anchor_day
        self._date_edit.blockSignals(True)
        self._date_edit.setDate(QDate(day.year, day.month, day.day))
        self._date_edit.blockSignals(False)

        self._view_buttons[state.mode].setChecked(True)

    # ==================== State persistence ====================

    def _load_ui_state(self):
        """Load UI state from the JSON state file."""
        if not self._state_file.exists():
            self._ui_state = {}
            return
        try:
            with open(self._state_file, 'r') as f:
                state = json.load(f)
            self._ui_state = state.get('ui', {}) if isinstance(state, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            _debug_print(f"Error loading UI state: {e}")
            self._ui_state = {}

    def _save_ui_state(self):
        """Save UI state to the JSON state file."""
        try:
            self._state_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._state_file, 'w') as f:
                json.dump({'ui': self._ui_state}, f, indent=2)
        except OSError as e:
            _debug_print(f"Error saving UI state: {e}")

    def _restored_navigation_state(self) -> Optional[NavigationState]:
        """Navigation state from the previous session, or None to start at today."""
        mode = ViewMode.parse(self._ui_state.get("view_type"))
        date_str = self._ui_state.get("current_date")
        if mode is None or not isinstance(date_str, str):
            return None
        try:
            current_date = date.fromisoformat(date_str)
        except ValueError:
            return None
        return NavigationState(anchor=at_noon(current_date), mode=mode)

    def _restore_scroll_position(self):
        scroll_pos = self._ui_state.get("scroll_position")
        if isinstance(scroll_pos, int) and self.engine.current_mode.is_timed:
            QTimer.singleShot(100, lambda: self._calendar_widget.set_scroll_position(scroll_pos))

    def _save_state(self):
        """Save application state to JSON."""
        # Window geometry (encode as base64 string for JSON)
        self._ui_state["geometry"] = base64.b64encode(self.saveGeometry().data()).decode('utf-8')
        self._ui_state["view_type"] = self.engine.current_mode.value
        self._ui_state["current_date"] = self.engine.current_anchor.date().isoformat()
        self._ui_state["scroll_position"] = self._calendar_widget.get_scroll_position()
        self._save_ui_state()

    # ==================== Data ====================

    def _on_toggle_task(self, task_id: str):
        """Toggle completion in the store and report it in the status bar."""
        task = self.task_store.get_task(task_id)
        if task is None:
            return
        try:
            done = self.task_store.toggle_task(task_id)
        except TaskStoreError as e:
            _debug_print(f"Toggle failed: {e}")
            self._statusbar.showMessage(str(e), 5000)
            return
        labels = self.config.labels
        self._statusbar.showMessage(labels.status_task_done if done else labels.status_task_reopened, 3000)

    def _on_engine_action(self, action: str):
        _debug_print(f"Action: {action}")

    def _on_data_changed(self):
        """Called when the task store changes."""
        self._calendar_widget.refresh()

    def _on_date_picked(self, qdate: QDate):
        self.engine.jump_to(date(qdate.year(), qdate.month(), qdate.day()))

    def _on_auto_refresh(self):
        """Re-read the task file."""
        try:
            self.task_store.reload()
        except TaskStoreError as e:
            _debug_print(f"Auto-refresh failed: {e}")
            self._statusbar.showMessage(str(e), 5000)

    def closeEvent(self, event: QCloseEvent):
        """Handle window close."""
        self._auto_refresh_timer.stop()
        self._save_state()
        super().closeEvent(event)
