# site_planner/tools/delete_sub_phase.py
"""delete_sub_phase tool implementation."""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import DeleteResponse
from site_planner.models.store import PhaseStore
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import sanitize_phase_id

logger = logging.getLogger(__name__)


async def delete_sub_phase(
    phase_id: str,
    store: PhaseStore,
    config: SitePlannerConfig,
    modified_by: str | None = None,
) -> dict:
    """
    Delete one sub-phase. Numbering is left as is until the group is renumbered.

    Returns:
        DeleteResponse as dict

    Raises:
        ToolError: If phase_id is invalid or not found
    """
    phase_id = sanitize_phase_id(phase_id)
    model = PhaseGroupModel.from_config(store, config)

    try:
        deleted = await model.delete_sub_phase(phase_id, modified_by=modified_by)
    except ValueError as e:
        raise ToolError(f"{e}. Use list_phases to see available sub-phases.")

    response = DeleteResponse(project_id=deleted.project_id, deleted=[phase_id], total=1)
    return response.model_dump()
