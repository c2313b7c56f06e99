# site_planner/tools/renumber_phases.py
"""
renumber_phases tool implementation.

Restores chronological, gap-free sub numbers for every group of a project.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import RenumberResponse
from site_planner.models.store import PhaseStore
from site_planner.planning.errors import PartialWriteError
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import sanitize_project_id

logger = logging.getLogger(__name__)


async def renumber_phases(project_id: str, store: PhaseStore, config: SitePlannerConfig) -> dict:
    """
    Renumber all sub-phases of a project.

    Returns:
        RenumberResponse as dict (empty updates when already canonical)

    Raises:
        ToolError: If project_id is invalid or an update fails midway
    """
    project_id = sanitize_project_id(project_id)
    model = PhaseGroupModel.from_config(store, config)

    try:
        updates = await model.renumber_project(project_id)
    except PartialWriteError as e:
        raise ToolError(
            f"{e}. Renumbered: {e.applied}; pending: {e.pending}. Re-run to finish."
        )

    response = RenumberResponse(
        project_id=project_id,
        updates=[u._asdict() for u in updates],
        total=len(updates),
    )
    return response.model_dump()
