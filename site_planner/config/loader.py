# site_planner/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path

from site_planner.scheduling.holidays import FixedHolidays
from site_planner.scheduling.work_calendar import WorkCalendar, WorkHours

from .schema import SitePlannerConfig

logger = logging.getLogger(__name__)

APP_NAME = "site-planner"


def get_config_dir() -> Path:
    """Get the config directory, creating it if needed."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    return get_config_dir() / "config.yaml"


def get_db_path(config: SitePlannerConfig) -> Path:
    """Database path from config, or phases.db in the config directory."""
    if config.storage.db_path:
        return Path(config.storage.db_path).expanduser()
    return get_config_dir() / "phases.db"


def load_config(config_path: Path | None = None) -> SitePlannerConfig:
    """
    Load configuration from YAML file.

    If the config file doesn't exist, creates it with defaults.

    Args:
        config_path: Explicit config file (default: platform config dir)

    Returns:
        Validated SitePlannerConfig
    """
    config_path = Path(config_path) if config_path else get_config_path()

    if not config_path.exists():
        default_config = SitePlannerConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        return default_config

    with config_path.open("r") as f:
        config_data = yaml.safe_load(f) or {}

    config = SitePlannerConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return config


def build_calendar(config: SitePlannerConfig) -> WorkCalendar:
    """Build the WorkCalendar described by the calendar section."""
    wh = config.calendar.work_hours
    return WorkCalendar(
        work_hours=WorkHours(
            morning_start=wh.morning_start,
            morning_end=wh.morning_end,
            afternoon_start=wh.afternoon_start,
            afternoon_end=wh.afternoon_end,
        ),
        holidays=FixedHolidays(config.calendar.holidays),
        weekend_days=config.calendar.weekend_days,
    )
