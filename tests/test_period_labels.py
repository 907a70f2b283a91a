from datetime import date, datetime

from calendar_backend.config import LabelsConfig, LocalizationConfig
from calendar_backend.models import ViewMode
from calendar_backend.navigation import NavigationState
from calendar_backend.period_labels import long_date, period_label, short_date, view_subtitle, view_title


LABELS = LabelsConfig()
LOCALIZATION = LocalizationConfig()


def nav(mode):
    return NavigationState(anchor=datetime(2024, 2, 15, 12, 0), mode=mode)


def test_titles():
    assert view_title(ViewMode.MONTH, LABELS) == "Calendário"
    assert view_title(ViewMode.WEEK, LABELS) == "Visão Semanal"
    assert view_title(ViewMode.DAY, LABELS) == "Agenda do Dia"


def test_subtitles():
    week = (date(2024, 2, 11), date(2024, 2, 17))
    assert view_subtitle(nav(ViewMode.MONTH), week, LABELS, LOCALIZATION) == "Visão geral de tarefas e entregas"
    assert view_subtitle(nav(ViewMode.WEEK), week, LABELS, LOCALIZATION) == "Semana de 11/fev a 17/fev"
    assert view_subtitle(nav(ViewMode.DAY), week, LABELS, LOCALIZATION) == "Programação horária para 15 de fevereiro"


def test_period_labels():
    assert period_label(nav(ViewMode.MONTH), LABELS, LOCALIZATION, 6) == "Fevereiro 2024"
    assert period_label(nav(ViewMode.WEEK), LABELS, LOCALIZATION, 6) == "Semana 7"
    assert period_label(nav(ViewMode.DAY), LABELS, LOCALIZATION, 6) == "15/02/2024"


def test_date_formats():
    assert short_date(date(2024, 3, 2), LOCALIZATION) == "02/mar"
    assert long_date(date(2024, 3, 2), LOCALIZATION) == "02 de março"
