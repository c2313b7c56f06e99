# site_planner/tools/list_phases.py
"""
list_phases tool implementation.

Lists the phase groups of a project with their sub-phases and budget gauges.
"""

import logging

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import (
    GaugeResponse,
    ListPhasesResponse,
    PhaseGroupSummary,
    SubPhaseSummary,
)
from site_planner.models.store import PhaseStore
from site_planner.planning.grouping import group_gauge, unassigned_sub_phases
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import sanitize_project_id

logger = logging.getLogger(__name__)


async def list_phases(project_id: str, store: PhaseStore, config: SitePlannerConfig) -> dict:
    """
    List all phase groups of a project.

    Args:
        project_id: Project identifier
        store: Phase storage instance
        config: Configuration instance

    Returns:
        ListPhasesResponse as dict

    Raises:
        ToolError: If project_id is invalid
    """
    project_id = sanitize_project_id(project_id)
    model = PhaseGroupModel.from_config(store, config)

    groups = await model.load_groups(project_id)

    summaries = []
    real = []
    for group in groups:
        real.extend(group.sub_phases)
        summaries.append(
            PhaseGroupSummary(
                group_number=group.group_number,
                label=group.display_label,
                budget_hours=group.budget_hours,
                placeholder_id=group.placeholder.phase_id if group.placeholder else None,
                gauge=GaugeResponse.from_gauge(group_gauge(group)),
                sub_phases=[SubPhaseSummary.from_sub_phase(p) for p in group.sub_phases],
            )
        )

    response = ListPhasesResponse(
        project_id=project_id,
        groups=summaries,
        unassigned=[SubPhaseSummary.from_sub_phase(p) for p in unassigned_sub_phases(real)],
        total=len(real),
    )

    logger.info(f"Listed {len(summaries)} group(s) for project {project_id}")
    return response.model_dump()
