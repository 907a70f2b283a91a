import calendar
from pathlib import Path

import pytest

from calendar_backend.config import EXAMPLE_CONFIG, Config, LocalizationConfig, parse_weekday


def write_config(tmp_path, text):
    path = tmp_path / "crm-calendar.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(tmp_path / "absent.toml")


def test_load_general_and_layout(tmp_path):
    path = write_config(tmp_path, """
[General]
tasks_file = "data/crm.json"
timezone = "America/Manaus"
first_weekday = "monday"
refresh_interval = 0

[Layout]
hour_height = 48
month_cell_max_tasks = 4
""")
    config = Config.load(path)
    assert config.tasks_file == tmp_path / "data" / "crm.json"
    assert config.timezone == "America/Manaus"
    assert config.first_weekday == calendar.MONDAY
    assert config.refresh_interval == 0
    assert config.layout.hour_height == 48
    assert config.layout.month_cell_max_tasks == 4
    assert config.layout.task_duration_minutes == 50


def test_defaults():
    config = Config.default()
    assert config.first_weekday == calendar.SUNDAY
    assert config.timezone == "America/Sao_Paulo"
    assert config.labels.more_tasks.format(2) == "+ 2 mais"
    assert config.labels.unknown_company == "Empresa desconhecida"
    assert config.tasks_file.name == "crm-data.json"


def test_unknown_keys_are_ignored(tmp_path):
    path = write_config(tmp_path, """
[Bindings]
next = "N"
reload = "R"

[Labels]
button_today = "Today"
""")
    config = Config.load(path)
    assert config.bindings.next == "N"
    assert config.bindings.prev == "Left"
    assert config.labels.button_today == "Today"


def test_localization_lists(tmp_path):
    path = write_config(tmp_path, """
[Localization]
day_names = "Mon Tue Wed Thu Fri Sat Sun"
month_names = "January February March April May June July August September October November December"
""")
    localization = Config.load(path).localization
    assert localization.get_day_name(6) == "Sun"
    assert localization.get_month_name(2) == "February"
    assert localization.get_month_abbreviation(2) == "Feb"


def test_localization_out_of_range():
    localization = LocalizationConfig()
    assert localization.get_day_name(7) == ""
    assert localization.get_month_name(0) == ""
    assert localization.get_month_abbreviation(13) == ""


def test_absolute_tasks_path_kept(tmp_path):
    target = tmp_path / "elsewhere" / "crm.json"
    path = write_config(tmp_path, f'[General]\ntasks_file = "{target.as_posix()}"\n')
    assert Config.load(path).tasks_file == Path(target)


def test_parse_weekday():
    assert parse_weekday("Sunday") == calendar.SUNDAY
    assert parse_weekday(2) == calendar.WEDNESDAY
    assert parse_weekday(9) == calendar.SUNDAY
    assert parse_weekday(True, default=calendar.MONDAY) == calendar.MONDAY
    assert parse_weekday("someday") == calendar.SUNDAY


def test_example_config_is_valid_toml(tmp_path):
    config = Config.load(write_config(tmp_path, EXAMPLE_CONFIG))
    assert config.tasks_file.name == "crm-data.json"
    assert config.first_weekday == calendar.SUNDAY
    assert config.bindings.prev == "Left"
    assert config.refresh_interval == 60
