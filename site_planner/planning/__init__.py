# site_planner/planning/__init__.py
"""Phase grouping, numbering, history and the PhaseGroupModel service."""

from site_planner.planning.errors import InvalidScheduleInput, PartialWriteError
from site_planner.planning.grouping import (
    BudgetGauge,
    consumed_hours,
    gauge,
    group_by,
    group_gauge,
    next_sub_number,
    unassigned_sub_phases,
)
from site_planner.planning.numbering import renumber
from site_planner.planning.service import EditResult, PhaseGroupModel

__all__ = [
    "PhaseGroupModel",
    "EditResult",
    "PartialWriteError",
    "InvalidScheduleInput",
    "BudgetGauge",
    "gauge",
    "group_gauge",
    "group_by",
    "consumed_hours",
    "next_sub_number",
    "unassigned_sub_phases",
    "renumber",
]
