"""
Toolbar texts for the current view: title, subtitle and period label.

Month view:  "Calendário"    / "Visão geral de tarefas e entregas" / "Fevereiro 2024"
Week view:   "Visão Semanal" / "Semana de 11/fev a 17/fev"        / "Semana 7"
Day view:    "Agenda do Dia" / "Programação horária para 15 de fevereiro" / "15/02/2024"
"""

from datetime import date

from .config import LabelsConfig, LocalizationConfig
from .date_grid import week_number
from .models import ViewMode
from .navigation import NavigationState


def short_date(d: date, localization: LocalizationConfig) -> str:
    """dd/MMM, e.g. 11/fev."""
    return f"{d.day:02d}/{localization.get_month_abbreviation(d.month)}"


def long_date(d: date, localization: LocalizationConfig) -> str:
    """dd de MMMM, e.g. 15 de fevereiro."""
    return f"{d.day:02d} de {localization.get_month_name(d.month)}"


def view_title(mode: ViewMode, labels: LabelsConfig) -> str:
    if mode == ViewMode.DAY:
        return labels.title_day
    elif mode == ViewMode.WEEK:
        return labels.title_week
    return labels.title_month


def view_subtitle(
    state: NavigationState,
    period: tuple[date, date],
    labels: LabelsConfig,
    localization: LocalizationConfig
) -> str:
    """Subtitle under the title; period is the first and last grid date."""
    if state.mode == ViewMode.DAY:
        return labels.subtitle_day.format(long_date(state.anchor_day, localization))
    elif state.mode == ViewMode.WEEK:
        start, end = period
        return labels.subtitle_week.format(short_date(start, localization), short_date(end, localization))
    return labels.subtitle_month


def period_label(
    state: NavigationState,
    labels: LabelsConfig,
    localization: LocalizationConfig,
    first_weekday: int
) -> str:
    """Label between the prev/next arrows."""
    day = state.anchor_day
    if state.mode == ViewMode.DAY:
        return day.strftime("%d/%m/%Y")
    elif state.mode == ViewMode.WEEK:
        return labels.period_week.format(week_number(day, first_weekday))
    return f"{localization.get_month_name(day.month).capitalize()} {day.year}"
