# site_planner/config/__init__.py
"""Configuration system for site-planner."""

from .loader import build_calendar, get_config_path, get_db_path, load_config
from .schema import (
    CalendarConfig,
    OutputConfig,
    SitePlannerConfig,
    StorageConfig,
    WorkHoursConfig,
)

__all__ = [
    "SitePlannerConfig",
    "CalendarConfig",
    "WorkHoursConfig",
    "StorageConfig",
    "OutputConfig",
    "load_config",
    "get_config_path",
    "get_db_path",
    "build_calendar",
]
