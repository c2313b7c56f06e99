# site_planner/tools/phase_history.py
"""phase_history tool implementation."""

import logging

from site_planner.models.responses import HistoryItem, HistoryResponse
from site_planner.models.store import PhaseStore
from site_planner.validation.sanitize import sanitize_phase_id, sanitize_project_id

logger = logging.getLogger(__name__)


async def phase_history(
    project_id: str,
    store: PhaseStore,
    phase_id: str | None = None,
) -> dict:
    """
    List recorded changes of a project, newest first.

    Args:
        project_id: Project identifier
        store: Phase storage instance
        phase_id: Restrict to one sub-phase

    Returns:
        HistoryResponse as dict

    Raises:
        ToolError: If an identifier is invalid
    """
    project_id = sanitize_project_id(project_id)
    if phase_id is not None:
        phase_id = sanitize_phase_id(phase_id)

    entries = await store.list_history(project_id, phase_id)
    items = [HistoryItem.from_entry(e) for e in entries]

    response = HistoryResponse(project_id=project_id, entries=items, total=len(items))
    return response.model_dump()
