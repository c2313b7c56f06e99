# site_planner/tools/edit_sub_phase.py
"""
edit_sub_phase tool implementation.

Applies a partial edit to a sub-phase and optionally cascades the new end
onto later overlapping sub-phases of its group.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import SubPhaseResponse, SubPhaseSummary
from site_planner.models.store import PhaseStore
from site_planner.planning.errors import PartialWriteError
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import (
    parse_date,
    sanitize_label,
    sanitize_phase_id,
    validate_duration,
    validate_hour,
)

logger = logging.getLogger(__name__)


async def edit_sub_phase(
    phase_id: str,
    store: PhaseStore,
    config: SitePlannerConfig,
    start_date: str | None = None,
    start_hour: int | None = None,
    duration_hours: int | None = None,
    label: str | None = None,
    assigned_worker_id: str | None = None,
    cascade: bool = False,
    modified_by: str | None = None,
) -> dict:
    """
    Edit a sub-phase. Arguments left as None are unchanged.

    An empty label or worker clears it.

    Args:
        phase_id: Sub-phase identifier
        store: Phase storage instance
        config: Configuration instance
        start_date: New start date (YYYY-MM-DD)
        start_hour: New start hour (0-23)
        duration_hours: New duration (1-500)
        label: New label ("" clears)
        assigned_worker_id: New worker ("" unassigns)
        cascade: Push later overlapping sub-phases of the group
        modified_by: Who made the change, if known

    Returns:
        SubPhaseResponse as dict (with the shifted sub-phases)

    Raises:
        ToolError: If inputs are invalid, the sub-phase is unknown, or a
            cascade write fails
    """
    phase_id = sanitize_phase_id(phase_id)

    changes: dict = {}
    if start_date is not None:
        changes["start_date"] = parse_date(start_date, "start_date")
    if start_hour is not None:
        changes["start_hour"] = validate_hour(start_hour, "start_hour")
    if duration_hours is not None:
        changes["duration_hours"] = validate_duration(duration_hours)
    if label is not None:
        changes["label"] = sanitize_label(label)
    if assigned_worker_id is not None:
        changes["assigned_worker_id"] = assigned_worker_id.strip() or None

    model = PhaseGroupModel.from_config(store, config)
    try:
        result = await model.edit_sub_phase(
            phase_id, changes, cascade=cascade, modified_by=modified_by
        )
    except PartialWriteError as e:
        raise ToolError(
            f"{e}. Applied: {e.applied}; pending: {e.pending}. Re-run the edit to finish."
        )
    except ValueError as e:
        raise ToolError(f"Cannot edit sub-phase: {e}")

    shifted = []
    if result.shifts:
        for shift in result.shifts:
            sub_phase = await store.get_sub_phase(shift.phase_id)
            if sub_phase is not None:
                shifted.append(SubPhaseSummary.from_sub_phase(sub_phase))

    response = SubPhaseResponse(
        sub_phase=SubPhaseSummary.from_sub_phase(result.sub_phase),
        shifted=shifted,
    )
    logger.info(f"Edited sub-phase {phase_id} ({len(changes)} field(s), {len(shifted)} shifted)")
    return response.model_dump()
