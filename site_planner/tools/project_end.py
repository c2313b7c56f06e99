# site_planner/tools/project_end.py
"""
project_end tool implementation.

Projects the end point of a working-hours duration on the configured calendar.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.loader import build_calendar
from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import ProjectEndResponse
from site_planner.scheduling.work_calendar import InvalidScheduleInput
from site_planner.validation.sanitize import parse_date, validate_duration, validate_hour

logger = logging.getLogger(__name__)


def project_end(
    start_date: str,
    start_hour: int,
    duration_hours: int,
    config: SitePlannerConfig,
) -> dict:
    """
    Project where `duration_hours` of work starting at a point will end.

    Args:
        start_date: Start date (YYYY-MM-DD)
        start_hour: Start hour (0-23), normalized onto the work blocks
        duration_hours: Working hours to consume
        config: Configuration instance (calendar section)

    Returns:
        ProjectEndResponse as dict

    Raises:
        ToolError: If any input is invalid
    """
    start = parse_date(start_date, "start_date")
    hour = validate_hour(start_hour, "start_hour")
    duration = validate_duration(duration_hours)

    try:
        end = build_calendar(config).project_end(start, hour, duration)
    except InvalidScheduleInput as e:
        raise ToolError(str(e))

    logger.debug(f"Projected {start} {hour}h + {duration}h -> {end.end_date} {end.end_hour}h")

    response = ProjectEndResponse(
        start_date=start.isoformat(),
        start_hour=hour,
        duration_hours=duration,
        end_date=end.end_date.isoformat(),
        end_hour=end.end_hour,
    )
    return response.model_dump()
