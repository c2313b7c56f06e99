# site_planner/models/responses.py
"""
Pydantic response models for tool outputs.

All tools return structured responses using these models for consistency.
"""

from pydantic import BaseModel, Field

from site_planner.models.phases import HistoryEntry, SubPhase
from site_planner.planning.grouping import BudgetGauge


class ProjectEndResponse(BaseModel):
    """Response from project_end tool."""

    start_date: str = Field(description="Requested start date (ISO format)")
    start_hour: int = Field(description="Requested start hour")
    duration_hours: int = Field(description="Working hours consumed")
    end_date: str = Field(description="Projected end date (ISO format)")
    end_hour: int = Field(description="Projected end hour")


class GaugeResponse(BaseModel):
    """Budget consumption of a phase group."""

    consumed: int = Field(description="Hours consumed by real sub-phases")
    allocated: int | None = Field(default=None, description="Hours allocated to the group")
    defined: bool = Field(description="False when no budget is set (render 'no budget')")
    percent: int | None = Field(default=None, description="Fill percent, clamped to 100")
    actual_percent: int | None = Field(default=None, description="Unclamped percent")
    overflow_percent: float = Field(default=0.0, description="Overflow indicator, capped at 50")

    @classmethod
    def from_gauge(cls, gauge: BudgetGauge) -> "GaugeResponse":
        return cls(
            consumed=gauge.consumed,
            allocated=gauge.allocated,
            defined=gauge.defined,
            percent=gauge.percent,
            actual_percent=gauge.actual_percent,
            overflow_percent=gauge.overflow_percent,
        )


class SubPhaseSummary(BaseModel):
    """A single sub-phase (used in listings and write responses)."""

    phase_id: str = Field(description="Sub-phase identifier")
    code: str = Field(description="Display code 'group.sub'")
    group_number: int
    sub_number: int
    label: str | None = None
    start_date: str = Field(description="Start date (ISO format)")
    start_hour: int
    duration_hours: int
    end_date: str = Field(description="End date (ISO format)")
    end_hour: int
    assigned_worker_id: str | None = None

    @classmethod
    def from_sub_phase(cls, sub_phase: SubPhase) -> "SubPhaseSummary":
        return cls(
            phase_id=sub_phase.phase_id or "",
            code=sub_phase.code,
            group_number=sub_phase.group_number,
            sub_number=sub_phase.sub_number,
            label=sub_phase.label,
            start_date=sub_phase.start_date.isoformat(),
            start_hour=sub_phase.start_hour,
            duration_hours=sub_phase.duration_hours,
            end_date=sub_phase.end_date.isoformat(),
            end_hour=sub_phase.end_hour,
            assigned_worker_id=sub_phase.assigned_worker_id,
        )


class PhaseGroupSummary(BaseModel):
    """A phase group with its sub-phases and budget gauge."""

    group_number: int
    label: str = Field(description="Group label ('Phase N' when unnamed)")
    budget_hours: int | None = None
    placeholder_id: str | None = Field(
        default=None, description="Phase ID of the placeholder row, if any"
    )
    gauge: GaugeResponse
    sub_phases: list[SubPhaseSummary] = Field(default_factory=list)


class ListPhasesResponse(BaseModel):
    """Response from list_phases tool."""

    project_id: str
    groups: list[PhaseGroupSummary] = Field(default_factory=list)
    unassigned: list[SubPhaseSummary] = Field(
        default_factory=list, description="Real sub-phases with no worker"
    )
    total: int = Field(description="Number of real sub-phases")


class SubPhaseResponse(BaseModel):
    """Response from add_sub_phase / edit_sub_phase tools."""

    sub_phase: SubPhaseSummary
    shifted: list[SubPhaseSummary] = Field(
        default_factory=list, description="Sub-phases pushed by the cascade"
    )


class GroupResponse(BaseModel):
    """Response from set_group tool."""

    project_id: str
    group_number: int
    label: str | None = None
    budget_hours: int | None = None
    storage: str = Field(description="'placeholder' or 'entity'")
    placeholder_id: str | None = None


class DeleteResponse(BaseModel):
    """Response from delete tools."""

    project_id: str
    deleted: list[str] = Field(default_factory=list, description="Deleted phase IDs")
    total: int


class RenumberResponse(BaseModel):
    """Response from renumber_phases tool."""

    project_id: str
    updates: list[dict] = Field(
        default_factory=list, description="Applied {phase_id, sub_number} updates"
    )
    total: int


class HistoryItem(BaseModel):
    """A single change history entry."""

    phase_id: str
    action: str
    description: str
    modified_at: str = Field(description="Timestamp (ISO format)")
    modified_by: str | None = None
    old_values: dict = Field(default_factory=dict)
    new_values: dict = Field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        return cls(
            phase_id=entry.phase_id,
            action=entry.action,
            description=entry.description,
            modified_at=entry.modified_at.isoformat(),
            modified_by=entry.modified_by,
            old_values=entry.old_values,
            new_values=entry.new_values,
        )


class HistoryResponse(BaseModel):
    """Response from phase_history tool."""

    project_id: str
    entries: list[HistoryItem] = Field(default_factory=list)
    total: int


class PromoteResponse(BaseModel):
    """Response from promote_groups tool."""

    project_id: str
    promoted: list[int] = Field(
        default_factory=list, description="Group numbers moved to group records"
    )
    total: int
