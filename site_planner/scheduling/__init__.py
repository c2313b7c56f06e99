# site_planner/scheduling/__init__.py
"""Working calendar, end projection and overlap cascade."""

from site_planner.scheduling.cascade import CascadeShift, cascade_updates
from site_planner.scheduling.holidays import (
    FRENCH_HOLIDAYS,
    FixedHolidays,
    HolidayProvider,
    NoHolidays,
    default_holidays,
)
from site_planner.scheduling.work_calendar import (
    InvalidScheduleInput,
    ProjectedEnd,
    WorkCalendar,
    WorkHours,
    format_hour,
    parse_hour_string,
    week_number,
    week_start,
)

__all__ = [
    "WorkCalendar",
    "WorkHours",
    "ProjectedEnd",
    "InvalidScheduleInput",
    "HolidayProvider",
    "FixedHolidays",
    "NoHolidays",
    "FRENCH_HOLIDAYS",
    "default_holidays",
    "CascadeShift",
    "cascade_updates",
    "format_hour",
    "parse_hour_string",
    "week_number",
    "week_start",
]
