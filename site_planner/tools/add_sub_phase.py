# site_planner/tools/add_sub_phase.py
"""
add_sub_phase tool implementation.

Validates inputs, projects the end point and inserts the sub-phase with the
next free number of its group.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import SubPhaseResponse, SubPhaseSummary
from site_planner.models.store import PhaseStore
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import (
    parse_date,
    sanitize_label,
    sanitize_project_id,
    validate_duration,
    validate_group_number,
    validate_hour,
)

logger = logging.getLogger(__name__)


async def add_sub_phase(
    project_id: str,
    group_number: int,
    start_date: str,
    start_hour: int,
    duration_hours: int,
    label: str | None,
    assigned_worker_id: str | None,
    store: PhaseStore,
    config: SitePlannerConfig,
    modified_by: str | None = None,
) -> dict:
    """
    Add a sub-phase to a phase group.

    Args:
        project_id: Project identifier
        group_number: Phase group (created implicitly if new)
        start_date: Start date (YYYY-MM-DD)
        start_hour: Start hour (0-23)
        duration_hours: Working hours (1-500)
        label: Optional label
        assigned_worker_id: Optional worker
        store: Phase storage instance
        config: Configuration instance
        modified_by: Who made the change, if known

    Returns:
        SubPhaseResponse as dict

    Raises:
        ToolError: If inputs are invalid or the insert fails
    """
    project_id = sanitize_project_id(project_id)
    group_number = validate_group_number(group_number)
    start = parse_date(start_date, "start_date")
    hour = validate_hour(start_hour, "start_hour")
    duration = validate_duration(duration_hours)
    worker = assigned_worker_id.strip() if assigned_worker_id else None

    model = PhaseGroupModel.from_config(store, config)
    try:
        sub_phase = await model.add_sub_phase(
            project_id,
            group_number,
            start,
            hour,
            duration,
            label=sanitize_label(label),
            assigned_worker_id=worker or None,
            modified_by=modified_by,
        )
    except ValueError as e:
        raise ToolError(f"Cannot add sub-phase: {e}")

    response = SubPhaseResponse(sub_phase=SubPhaseSummary.from_sub_phase(sub_phase))
    return response.model_dump()
