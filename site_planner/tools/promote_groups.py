# site_planner/tools/promote_groups.py
"""
promote_groups tool implementation.

Migrates a project's group metadata from placeholder rows to group records.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import PromoteResponse
from site_planner.models.store import PhaseStore
from site_planner.planning.errors import PartialWriteError
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import sanitize_project_id

logger = logging.getLogger(__name__)


async def promote_groups(project_id: str, store: PhaseStore, config: SitePlannerConfig) -> dict:
    """
    Turn every placeholder of a project into an explicit group record.

    Returns:
        PromoteResponse as dict

    Raises:
        ToolError: If project_id is invalid or a write fails midway
    """
    project_id = sanitize_project_id(project_id)
    model = PhaseGroupModel.from_config(store, config)

    try:
        promoted = await model.promote_placeholders(project_id)
    except PartialWriteError as e:
        raise ToolError(f"{e}. Re-run to finish the migration.")

    logger.info(f"Promoted {len(promoted)} placeholder(s) of project {project_id}")
    response = PromoteResponse(project_id=project_id, promoted=promoted, total=len(promoted))
    return response.model_dump()
