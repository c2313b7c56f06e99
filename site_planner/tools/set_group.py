# site_planner/tools/set_group.py
"""
set_group tool implementation.

Creates or updates a phase group's label and budget.
"""

import logging

from fastmcp.exceptions import ToolError

from site_planner.config.schema import SitePlannerConfig
from site_planner.models.responses import GroupResponse
from site_planner.models.store import PhaseStore
from site_planner.planning.service import PhaseGroupModel
from site_planner.validation.sanitize import (
    sanitize_label,
    sanitize_project_id,
    validate_budget,
    validate_group_number,
)

logger = logging.getLogger(__name__)


async def set_group(
    project_id: str,
    group_number: int,
    label: str | None,
    budget_hours: int | None,
    store: PhaseStore,
    config: SitePlannerConfig,
) -> dict:
    """
    Set a group's label and budget (creates the group if needed).

    Args:
        project_id: Project identifier
        group_number: Phase group number
        label: Group label (None or blank clears it)
        budget_hours: Allocated hours (None or 0 means no budget)
        store: Phase storage instance
        config: Configuration instance (storage.group_metadata selects the mode)

    Returns:
        GroupResponse as dict

    Raises:
        ToolError: If inputs are invalid or the write fails
    """
    project_id = sanitize_project_id(project_id)
    group_number = validate_group_number(group_number)
    budget = validate_budget(budget_hours)
    cleaned_label = sanitize_label(label)

    model = PhaseGroupModel.from_config(store, config)
    try:
        placeholder_id = await model.upsert_group_metadata(
            project_id, group_number, cleaned_label, budget
        )
    except ValueError as e:
        raise ToolError(f"Cannot update group {group_number}: {e}")

    response = GroupResponse(
        project_id=project_id,
        group_number=group_number,
        label=cleaned_label,
        budget_hours=budget,
        storage="placeholder" if placeholder_id else "entity",
        placeholder_id=placeholder_id,
    )
    return response.model_dump()
