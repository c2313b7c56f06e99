# site_planner/planning/numbering.py
"""
Chronological, gap-free renumbering of sub-phases.

Canonical state per group: the placeholder holds sub number 0 and real
sub-phases hold 1..N in ascending (start_date, start_hour) order. Ties keep
their input order; stores list rows by current sub number, so tied rows keep
their previous relative numbering and the result is idempotent.
"""

import logging
from typing import Iterable

from site_planner.models.phases import PLACEHOLDER_SUB_NUMBER, SubPhase, SubPhaseUpdate

logger = logging.getLogger(__name__)


def renumber(sub_phases: Iterable[SubPhase]) -> list[SubPhaseUpdate]:
    """
    Compute the minimal updates restoring canonical numbering.

    Args:
        sub_phases: Every sub-phase of one project

    Returns:
        SubPhaseUpdates, grouped by ascending group number; records already
        numbered correctly are omitted
    """
    groups: dict[int, list[SubPhase]] = {}
    for sub_phase in sub_phases:
        groups.setdefault(sub_phase.group_number, []).append(sub_phase)

    updates: list[SubPhaseUpdate] = []
    for group_number in sorted(groups):
        members = groups[group_number]
        placeholders = [p for p in members if p.is_placeholder]
        real = [p for p in members if not p.is_placeholder]

        if len(placeholders) > 1:
            logger.warning(
                f"Group {group_number} has {len(placeholders)} placeholders, numbering all as 0"
            )
        for placeholder in placeholders:
            if placeholder.sub_number != PLACEHOLDER_SUB_NUMBER:
                updates.append(SubPhaseUpdate(placeholder.phase_id, PLACEHOLDER_SUB_NUMBER))

        # list.sort is stable: equal start points keep input order
        real.sort(key=lambda p: p.start_key)
        for position, sub_phase in enumerate(real, start=1):
            if sub_phase.sub_number != position:
                updates.append(SubPhaseUpdate(sub_phase.phase_id, position))

    return updates
