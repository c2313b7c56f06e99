# tests/unit/test_config.py
"""
Unit tests for configuration loading and calendar construction.
"""

from datetime import date
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from site_planner.config.loader import build_calendar, get_db_path, load_config
from site_planner.config.schema import (
    CalendarConfig,
    SitePlannerConfig,
    StorageConfig,
    WorkHoursConfig,
)
from site_planner.scheduling.holidays import FRENCH_HOLIDAYS


def test_creates_default_config(tmp_path: Path):
    path = tmp_path / "config.yaml"

    config = load_config(path)

    assert path.exists()
    assert config.storage.group_metadata == "placeholder"
    assert config.calendar.weekend_days == [5, 6]
    assert len(config.calendar.holidays) == len(FRENCH_HOLIDAYS)

    # The written file loads back to the same values
    assert load_config(path) == config


def test_loads_and_ignores_unknown_keys(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "calendar": {
                    "work_hours": {"morning_start": 7, "afternoon_end": 16},
                    "holidays": ["2026-01-05"],
                },
                "storage": {"group_metadata": "entity", "db_path": "/tmp/x.db"},
                "output": {"verbosity": "quiet"},
                "unknown_section": {"a": 1},
            }
        )
    )

    config = load_config(path)

    assert config.calendar.work_hours.morning_start == 7
    assert config.calendar.holidays == [date(2026, 1, 5)]
    assert config.storage.group_metadata == "entity"
    assert config.output.verbosity == "quiet"
    assert get_db_path(config) == Path("/tmp/x.db")


def test_empty_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == SitePlannerConfig()


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        WorkHoursConfig(morning_start=12, morning_end=8)
    with pytest.raises(ValidationError):
        CalendarConfig(weekend_days=[7])
    with pytest.raises(ValidationError):
        StorageConfig(group_metadata="table")


def test_build_calendar_uses_config():
    config = SitePlannerConfig(
        calendar=CalendarConfig(holidays=[date(2026, 1, 5)], weekend_days=[6])
    )
    calendar = build_calendar(config)

    assert not calendar.is_working_day(date(2026, 1, 5))
    # Saturday works, Sunday doesn't
    assert calendar.is_working_day(date(2026, 1, 10))
    assert not calendar.is_working_day(date(2026, 1, 11))
    assert calendar.project_end(date(2026, 1, 5), 8, 8).end_date == date(2026, 1, 6)
