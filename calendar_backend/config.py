"""
Configuration parser for CRM Calendar.

Handles TOML file parsing into dataclasses. Every section is optional except
that [General] must point at the CRM data file.
"""

import calendar
import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import Optional

from .log import debug_print


def _debug_print(message: str) -> None:
    debug_print("CONFIG", message)


# Printed by the launcher when no configuration file exists
EXAMPLE_CONFIG = """
[General]
tasks_file = "~/.local/share/crm-calendar/crm-data.json"
timezone = "America/Sao_Paulo"
first_weekday = "sunday"
refresh_interval = 60

[Layout]
hour_height = 60
month_cell_max_tasks = 3

[Bindings]
prev = "Left"
next = "Right"
today = "T"
"""


WEEKDAY_NAMES = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


def parse_weekday(value, default: int = calendar.SUNDAY) -> int:
    """Weekday from a name ("sunday") or a Monday-based index (0-6)."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if 0 <= value <= 6 else default
    if isinstance(value, str):
        return WEEKDAY_NAMES.get(value.strip().lower(), default)
    return default


@dataclass
class LayoutConfig:
    """Configuration for UI layout and fonts."""
    interface_font: str = "Sans"
    interface_font_size: int = 11
    text_font: str = "Sans"
    text_font_size: int = 10
    hour_height: int = 60             # Height of an hour slot in day/week view in pixels
    task_duration_minutes: int = 50   # Visual length of a task chip in week view
    day_chip_min_height: int = 45     # Minimum chip height in day view in pixels
    month_cell_max_tasks: int = 3     # Chips shown per month cell before "+N mais"
    scroll_to_hour: int = 8           # Hour scrolled to when week/day view opens


@dataclass
class BindingsConfig:
    """Configuration for keyboard bindings."""
    next: str = "Right"   # Key to go to next period
    prev: str = "Left"    # Key to go to previous period
    today: str = "T"      # Key to jump to today


@dataclass
class ColorsConfig:
    """Configuration for UI colors."""
    # Calendar/Grid Colors
    day_column_background: str = "#ffffff"
    hour_line: str = "#f1f5f9"
    cell_border: str = "#e2e8f0"
    current_time_line: str = "#ef4444"      # Red line indicating current time

    # Header/Navigation Colors
    header_background: str = "#f8fafc"
    header_text: str = "#64748b"
    today_highlight_background: str = "#2563eb"
    today_highlight_text: str = "#ffffff"
    today_cell_background: str = "#f5f8ff"

    # Month View Colors
    month_cell_current: str = "#ffffff"
    month_cell_other: str = "#f8fafc"
    month_text_current: str = "#1e293b"
    month_text_other: str = "#94a3b8"
    count_badge_background: str = "#f1f5f9"

    # Task chip colors
    task_background: str = "#eff6ff"
    task_border: str = "#3b82f6"
    task_text: str = "#1e3a8a"
    task_done_background: str = "#f8fafc"
    task_done_border: str = "#cbd5e1"
    task_done_text: str = "#94a3b8"
    secondary_text: str = "#64748b"


@dataclass
class LabelsConfig:
    """Configuration for UI labels."""
    window_title: str = "CRM - Calendário"

    # View titles and subtitles
    title_month: str = "Calendário"
    title_week: str = "Visão Semanal"
    title_day: str = "Agenda do Dia"
    subtitle_month: str = "Visão geral de tarefas e entregas"
    subtitle_week: str = "Semana de {} a {}"
    subtitle_day: str = "Programação horária para {}"
    period_week: str = "Semana {}"

    # View Switcher Labels
    view_month: str = "Mês"
    view_week: str = "Semana"
    view_day: str = "Dia"

    # Toolbar Button Labels
    button_prev: str = "◀"
    button_next: str = "▶"
    button_today: str = "Hoje"
    button_back_to_month: str = "Voltar ao Mês"

    # Miscellaneous Labels
    more_tasks: str = "+ {} mais"
    unknown_company: str = "Empresa desconhecida"
    timezone_label: str = "GMT-3"
    done_mark: str = "✓"
    status_loaded: str = "{} tarefas carregadas"
    status_task_done: str = "Tarefa concluída"
    status_task_reopened: str = "Tarefa reaberta"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Abbreviated day names, Monday first
    day_names: list[str] = None
    # Full month names
    month_names: list[str] = None
    # Abbreviated month names (dd/MMM)
    month_abbreviations: list[str] = None

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Seg", "Ter", "Qua", "Qui", "Sex", "Sáb", "Dom"]
        if self.month_names is None:
            self.month_names = [
                "janeiro", "fevereiro", "março", "abril", "maio", "junho",
                "julho", "agosto", "setembro", "outubro", "novembro", "dezembro"
            ]
        if self.month_abbreviations is None:
            self.month_abbreviations = [name[:3] for name in self.month_names]

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""

    def get_month_abbreviation(self, month: int) -> str:
        if 1 <= month <= len(self.month_abbreviations):
            return self.month_abbreviations[month - 1]
        return ""


def _section(cls, data: dict):
    """Build a section dataclass, taking known keys from data and defaults for the rest."""
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        _debug_print(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Config:
    """Main configuration container for CRM Calendar."""

    tasks_file: Path
    state_file: Path
    timezone: str = "America/Sao_Paulo"
    first_weekday: int = calendar.SUNDAY
    refresh_interval: int = 60  # Re-read the data file every N seconds (0 to disable)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    bindings: BindingsConfig = field(default_factory=BindingsConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    labels: LabelsConfig = field(default_factory=LabelsConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'crm-calendar' / 'crm-calendar.toml'

    @classmethod
    def get_default_state_path(cls) -> Path:
        """Get the default state file path."""
        xdg_state = os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state'))
        return Path(xdg_state) / 'crm-calendar' / 'state.json'

    @classmethod
    def get_default_tasks_path(cls) -> Path:
        xdg_data = os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))
        return Path(xdg_data) / 'crm-calendar' / 'crm-data.json'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        _debug_print(f"TOML sections: {list(data.keys())}")
        return cls.from_dict(data, base_dir=config_path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_dir: Optional[Path] = None) -> 'Config':
        """Build a configuration from parsed TOML data."""
        # Parse General section
        general = data.get('General', {})

        tasks_file = Path(os.path.expanduser(general.get('tasks_file', str(cls.get_default_tasks_path()))))
        if base_dir is not None and not tasks_file.is_absolute():
            tasks_file = base_dir / tasks_file

        state_file = Path(os.path.expanduser(general.get('state_file', str(cls.get_default_state_path()))))

        timezone = general.get('timezone', 'America/Sao_Paulo')
        first_weekday = parse_weekday(general.get('first_weekday', 'sunday'))
        refresh_interval = general.get('refresh_interval', 60)

        # Parse Layout, Bindings, Colors and Labels sections
        layout = _section(LayoutConfig, data.get('Layout', {}))
        bindings = _section(BindingsConfig, data.get('Bindings', {}))
        colors = _section(ColorsConfig, data.get('Colors', {}))
        labels = _section(LabelsConfig, data.get('Labels', {}))

        # Parse Localization section (space-separated name lists)
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')
        month_abbr_str = localization_data.get('month_abbreviations', '')

        localization = LocalizationConfig(
            day_names=day_names_str.split() if day_names_str else None,
            month_names=month_names_str.split() if month_names_str else None,
            month_abbreviations=month_abbr_str.split() if month_abbr_str else None,
        )

        _debug_print(f"Tasks file: {tasks_file}, timezone: {timezone}, week starts on {first_weekday}")

        return cls(
            tasks_file=tasks_file,
            state_file=state_file,
            timezone=timezone,
            first_weekday=first_weekday,
            refresh_interval=refresh_interval,
            layout=layout,
            bindings=bindings,
            localization=localization,
            colors=colors,
            labels=labels,
        )

    @classmethod
    def default(cls) -> 'Config':
        """Configuration with every default, used when no file exists."""
        return cls.from_dict({})
