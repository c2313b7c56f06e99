# site_planner/planning/grouping.py
"""
Phase group assembly and budget consumption.

Groups are derived from the flat list of a project's sub-phases. Their
metadata comes from an explicit GroupRecord when one exists, otherwise from
the zero-duration placeholder row.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from site_planner.models.phases import GroupRecord, PhaseGroup, SubPhase

logger = logging.getLogger(__name__)

# Rendered overflow never exceeds half the bar length (1.5x in total)
OVERFLOW_CAP_PERCENT = 50.0


@dataclass(frozen=True)
class BudgetGauge:
    """
    Consumed/allocated budget reading.

    When no budget is set, `defined` is False and the percentages are None:
    callers must render a distinct "no budget defined" state, not 0%.
    """

    consumed: int
    allocated: int | None
    defined: bool
    percent: int | None = None
    actual_percent: int | None = None
    overflow_percent: float = 0.0

    @property
    def is_over(self) -> bool:
        return self.defined and self.consumed > (self.allocated or 0)


def group_by(
    sub_phases: Iterable[SubPhase],
    group_records: Iterable[GroupRecord] | None = None,
) -> list[PhaseGroup]:
    """
    Partition sub-phases into phase groups.

    Real sub-phases are sorted by (start_date, start_hour) for display only;
    their sub_number is left untouched. Groups that only exist as a
    GroupRecord (no rows yet) are included too.

    Args:
        sub_phases: Sub-phases of one project
        group_records: Optional explicit group metadata

    Returns:
        PhaseGroups ordered by group number
    """
    records = {r.group_number: r for r in group_records or ()}
    groups: dict[int, PhaseGroup] = {}

    for sub_phase in sub_phases:
        group = groups.setdefault(
            sub_phase.group_number, PhaseGroup(group_number=sub_phase.group_number)
        )
        if sub_phase.is_placeholder:
            if group.placeholder is None:
                group.placeholder = sub_phase
            else:
                logger.warning(
                    f"Extra placeholder {sub_phase.phase_id} in group "
                    f"{sub_phase.group_number}, keeping {group.placeholder.phase_id}"
                )
        else:
            group.sub_phases.append(sub_phase)

    for group_number in records:
        groups.setdefault(group_number, PhaseGroup(group_number=group_number))

    for group in groups.values():
        group.sub_phases.sort(key=lambda p: p.start_key)
        record = records.get(group.group_number)
        if record is not None:
            group.label = record.label or ""
            group.budget_hours = record.budget_hours
        elif group.placeholder is not None:
            group.label = group.placeholder.label or ""
            group.budget_hours = group.placeholder.budget_hours

    return [groups[n] for n in sorted(groups)]


def consumed_hours(group: PhaseGroup) -> int:
    """Sum of durations of the group's real sub-phases."""
    return sum(p.duration_hours for p in group.sub_phases if p.duration_hours > 0)


def gauge(consumed: int, allocated: int | None) -> BudgetGauge:
    """
    Compute the budget gauge for a group.

    Args:
        consumed: Hours consumed
        allocated: Hours allocated (0 or None means no budget)

    Returns:
        BudgetGauge with the fill percent clamped to 100 and the overflow
        indicator capped at OVERFLOW_CAP_PERCENT

    Raises:
        ValueError: If allocated is negative
    """
    if allocated is not None and allocated < 0:
        raise ValueError(f"Allocated budget cannot be negative, got {allocated}")
    if not allocated:
        return BudgetGauge(consumed=consumed, allocated=allocated, defined=False)

    actual = _round_half_up(100 * consumed / allocated)
    overflow = 0.0
    if consumed > allocated:
        overflow = min(100 * (consumed - allocated) / allocated, OVERFLOW_CAP_PERCENT)

    return BudgetGauge(
        consumed=consumed,
        allocated=allocated,
        defined=True,
        percent=min(actual, 100),
        actual_percent=actual,
        overflow_percent=overflow,
    )


def group_gauge(group: PhaseGroup) -> BudgetGauge:
    return gauge(consumed_hours(group), group.budget_hours)


def next_sub_number(group: PhaseGroup) -> int:
    """Number for a new sub-phase: 1, or one past the highest real number."""
    real = [p.sub_number for p in group.sub_phases if not p.is_placeholder]
    return max(real) + 1 if real else 1


def unassigned_sub_phases(sub_phases: Iterable[SubPhase]) -> list[SubPhase]:
    """Real sub-phases with no worker assigned, in chronological order."""
    pending = [p for p in sub_phases if not p.is_placeholder and not p.assigned_worker_id]
    return sorted(pending, key=lambda p: (p.start_key, p.group_number, p.sub_number))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
