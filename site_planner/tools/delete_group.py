# site_planner/tools/delete_group.py
"""delete_group tool implementation."""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import DeleteResponse
from site_planner.models.store import PhaseStore
from site_planner.planning.errors import PartialWriteError
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import sanitize_project_id, validate_group_number

logger = logging.getLogger(__name__)


async def delete_group(
    project_id: str,
    group_number: int,
    store: PhaseStore,
    config: SitePlannerConfig,
) -> dict:
    """
    Delete a phase group: every sub-phase, its placeholder and group record.

    Returns:
        DeleteResponse as dict

    Raises:
        ToolError: If inputs are invalid or a delete fails midway (already
            deleted rows stay deleted; re-run to finish)
    """
    project_id = sanitize_project_id(project_id)
    group_number = validate_group_number(group_number)

    model = PhaseGroupModel.from_config(store, config)
    try:
        deleted = await model.delete_group(project_id, group_number)
    except PartialWriteError as e:
        raise ToolError(
            f"{e}. Deleted: {e.applied}; remaining: {e.pending}. Re-run to finish."
        )

    response = DeleteResponse(project_id=project_id, deleted=deleted, total=len(deleted))
    return response.model_dump()
