# site_planner/scheduling/cascade.py
"""
Overlap cascade within a phase group.

When a sub-phase's end moves later, the sub-phases of the same group that
start after it may now overlap. Each overlapping one is pushed to start where
the previous one ends, re-projected, and the check continues with its new
end. The cascade stops at the first sub-phase that no longer overlaps.
"""

from datetime import date
from typing import Iterable, NamedTuple

from site_planner.models.phases import SubPhase
from site_planner.scheduling.work_calendar import WorkCalendar


class CascadeShift(NamedTuple):
    """New schedule for a pushed sub-phase."""

    phase_id: str
    start_date: date
    start_hour: int
    end_date: date
    end_hour: int

    def as_fields(self) -> dict:
        return {
            "start_date": self.start_date,
            "start_hour": self.start_hour,
            "end_date": self.end_date,
            "end_hour": self.end_hour,
        }


def cascade_updates(
    edited: SubPhase,
    new_end_date: date,
    new_end_hour: int,
    sub_phases: Iterable[SubPhase],
    calendar: WorkCalendar,
) -> list[CascadeShift]:
    """
    Compute the shifts needed so later sub-phases of the group don't overlap.

    Args:
        edited: The sub-phase whose end moved (its start is the pivot)
        new_end_date: New end date of the edited sub-phase
        new_end_hour: New end hour of the edited sub-phase
        sub_phases: Sub-phases of the project (other groups are ignored)
        calendar: Calendar used to re-project pushed sub-phases

    Returns:
        CascadeShifts in chronological order (empty when nothing overlaps)
    """
    siblings = [
        p
        for p in sub_phases
        if p.project_id == edited.project_id
        and p.group_number == edited.group_number
        and p.phase_id != edited.phase_id
        and not p.is_placeholder
    ]
    later = sorted(
        (p for p in siblings if p.start_key > edited.start_key),
        key=lambda p: p.start_key,
    )

    shifts: list[CascadeShift] = []
    current_end = (new_end_date, new_end_hour)

    for sub_phase in later:
        if not sub_phase.start_key < current_end:
            break

        start_date, start_hour = calendar.next_start_after(*current_end)
        end = calendar.project_end(start_date, start_hour, sub_phase.duration_hours)
        shifts.append(
            CascadeShift(sub_phase.phase_id, start_date, start_hour, end.end_date, end.end_hour)
        )
        current_end = (end.end_date, end.end_hour)

    return shifts
