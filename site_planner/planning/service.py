# site_planner/planning/service.py
"""
PhaseGroupModel: phase operations against a PhaseStore.

Every multi-record operation (renumbering, group deletion, cascades,
placeholder promotion) issues its writes one at a time, in emission order,
each awaited before the next. There is no rollback: on failure a
PartialWriteError lists what was applied and what is pending, and
re-running the operation finishes the job.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, NamedTuple

from site_planner.models.phases import (
    PLACEHOLDER_SUB_NUMBER,
    GroupRecord,
    HistoryEntry,
    PhaseGroup,
    SubPhase,
    SubPhaseUpdate,
)
from site_planner.models.store import PhaseStore
from site_planner.planning.errors import InvalidScheduleInput, PartialWriteError
from site_planner.planning.grouping import group_by, next_sub_number
from site_planner.planning.history import build_entry
from site_planner.planning.numbering import renumber
from site_planner.planning.retry import store_write_retry
from site_planner.scheduling.cascade import CascadeShift, cascade_updates
from site_planner.scheduling.work_calendar import WorkCalendar

if TYPE_CHECKING:
    from site_planner.config.schema import SitePlannerConfig

logger = logging.getLogger(__name__)

GroupMetadataMode = Literal["placeholder", "entity"]

EDITABLE_FIELDS = frozenset(
    {"label", "start_date", "start_hour", "duration_hours", "assigned_worker_id"}
)
SCHEDULE_FIELDS = frozenset({"start_date", "start_hour", "duration_hours"})


class PendingWrite(NamedTuple):
    """One queued store call of a multi-record operation."""

    target: str
    method: Callable[..., Awaitable[Any]]
    args: tuple = ()
    kwargs: dict | None = None


@dataclass
class EditResult:
    """Outcome of an edit: the stored sub-phase and any cascaded shifts."""

    sub_phase: SubPhase
    shifts: list[CascadeShift] = field(default_factory=list)


class PhaseGroupModel:
    """
    Phase grouping, numbering and group metadata over a store.

    Args:
        store: Persistence collaborator
        calendar: Working calendar used to project ends (default WorkCalendar())
        group_metadata: "placeholder" writes group label/budget on a
            zero-duration row, "entity" writes an explicit GroupRecord
        write_attempts: Attempts per store write on transient SQLite errors
        today: Clock used for placeholder dates (default date.today)
    """

    def __init__(
        self,
        store: PhaseStore,
        calendar: WorkCalendar | None = None,
        group_metadata: GroupMetadataMode = "placeholder",
        write_attempts: int = 3,
        today: Callable[[], date] | None = None,
    ) -> None:
        if group_metadata not in ("placeholder", "entity"):
            raise ValueError(f"Unknown group metadata mode '{group_metadata}'")
        self.store = store
        self.calendar = calendar or WorkCalendar()
        self.group_metadata = group_metadata
        self._retry = store_write_retry(write_attempts)
        self._today = today or date.today

    @classmethod
    def from_config(cls, store: PhaseStore, config: "SitePlannerConfig") -> "PhaseGroupModel":
        """Build a model with the calendar and storage settings of `config`."""
        from site_planner.config.loader import build_calendar

        return cls(
            store,
            calendar=build_calendar(config),
            group_metadata=config.storage.group_metadata,
            write_attempts=config.storage.write_retries,
        )

    async def load_groups(self, project_id: str) -> list[PhaseGroup]:
        """Read the project's sub-phases and group records into PhaseGroups."""
        sub_phases = await self.store.list_sub_phases(project_id)
        records = await self.store.list_groups(project_id)
        return group_by(sub_phases, records)

    async def add_sub_phase(
        self,
        project_id: str,
        group_number: int,
        start_date: date,
        start_hour: int,
        duration_hours: int,
        label: str | None = None,
        assigned_worker_id: str | None = None,
        modified_by: str | None = None,
    ) -> SubPhase:
        """
        Insert a real sub-phase with its projected end and the next free number.

        Raises:
            InvalidScheduleInput: If the group number or schedule is invalid
        """
        _check_group_number(group_number)
        end = self.calendar.project_end(start_date, start_hour, duration_hours)

        groups = {g.group_number: g for g in await self.load_groups(project_id)}
        group = groups.get(group_number)
        sub_number = next_sub_number(group) if group else 1

        sub_phase = SubPhase(
            project_id=project_id,
            group_number=group_number,
            sub_number=sub_number,
            label=label,
            start_date=start_date,
            start_hour=start_hour,
            duration_hours=duration_hours,
            end_date=end.end_date,
            end_hour=end.end_hour,
            assigned_worker_id=assigned_worker_id,
        )
        phase_id = await self._write(self.store.insert_sub_phase, sub_phase)
        sub_phase.phase_id = phase_id

        await self._record(build_entry(sub_phase, {}, modified_by, forced_action="create"))
        logger.info(f"Added sub-phase {sub_phase.code} ({phase_id}) to project {project_id}")
        return await self.store.get_sub_phase(phase_id) or sub_phase

    async def edit_sub_phase(
        self,
        phase_id: str,
        changes: dict[str, Any],
        cascade: bool = False,
        modified_by: str | None = None,
    ) -> EditResult:
        """
        Edit a real sub-phase, re-projecting its end when the schedule changes.

        Args:
            phase_id: Sub-phase to edit
            changes: New values for label, start_date, start_hour,
                duration_hours and/or assigned_worker_id
            cascade: Push later overlapping sub-phases of the group
            modified_by: Who made the change, if known

        Returns:
            EditResult with the stored sub-phase and the applied shifts

        Raises:
            ValueError: If the sub-phase doesn't exist, is a placeholder, or a
                field is not editable
            InvalidScheduleInput: If the new schedule is invalid
            PartialWriteError: If a cascade write fails midway
        """
        invalid = set(changes) - EDITABLE_FIELDS
        if invalid:
            raise ValueError(f"Fields not editable: {sorted(invalid)}")

        current = await self.store.get_sub_phase(phase_id)
        if current is None:
            raise ValueError(f"Sub-phase {phase_id} not found")
        if current.is_placeholder:
            raise ValueError(
                f"Sub-phase {phase_id} is a group placeholder; edit it through the group metadata"
            )

        fields = {k: v for k, v in changes.items() if getattr(current, k) != v}
        if SCHEDULE_FIELDS & set(fields):
            end = self.calendar.project_end(
                fields.get("start_date", current.start_date),
                fields.get("start_hour", current.start_hour),
                fields.get("duration_hours", current.duration_hours),
            )
            fields["end_date"] = end.end_date
            fields["end_hour"] = end.end_hour

        if not fields:
            return EditResult(sub_phase=current)

        await self._write(self.store.update_sub_phase, phase_id, **fields)
        await self._record(build_entry(current, fields, modified_by))

        shifts: list[CascadeShift] = []
        end_moved = "end_date" in fields and (
            (fields["end_date"], fields["end_hour"]) != (current.end_date, current.end_hour)
        )
        if cascade and end_moved:
            siblings = await self.store.list_sub_phases(current.project_id)
            shifts = cascade_updates(
                current, fields["end_date"], fields["end_hour"], siblings, self.calendar
            )
            await self._apply(
                "cascade",
                [
                    PendingWrite(s.phase_id, self.store.update_sub_phase, (s.phase_id,), s.as_fields())
                    for s in shifts
                ],
            )
            if shifts:
                logger.info(f"Cascade from {phase_id} shifted {len(shifts)} sub-phase(s)")

        updated = await self.store.get_sub_phase(phase_id)
        return EditResult(sub_phase=updated or current, shifts=shifts)

    async def delete_sub_phase(self, phase_id: str, modified_by: str | None = None) -> SubPhase:
        """
        Delete a single sub-phase (no renumbering; close the group to renumber).

        Raises:
            ValueError: If the sub-phase doesn't exist
        """
        current = await self.store.get_sub_phase(phase_id)
        if current is None:
            raise ValueError(f"Sub-phase {phase_id} not found")

        await self._write(self.store.delete_sub_phase, phase_id)
        await self._record(build_entry(current, {}, modified_by, forced_action="delete"))
        return current

    async def upsert_group_metadata(
        self,
        project_id: str,
        group_number: int,
        label: str | None,
        budget_hours: int | None,
    ) -> str | None:
        """
        Create or update a group's label and budget with exactly one write.

        In placeholder mode an existing placeholder is updated in place,
        otherwise a new one is inserted (sub number 0, zero duration, dated
        today at the opening hour). In entity mode the GroupRecord is saved.

        A group that already has a GroupRecord is always written through the
        record, whatever the mode: the record shadows any placeholder on read.

        Returns:
            Placeholder phase_id, or None when the GroupRecord was written

        Raises:
            InvalidScheduleInput: If the group number or budget is invalid
        """
        _check_group_number(group_number)
        if budget_hours is not None and (
            not isinstance(budget_hours, int) or isinstance(budget_hours, bool) or budget_hours < 0
        ):
            raise InvalidScheduleInput(f"budget_hours must be a non-negative integer, got {budget_hours!r}")

        records = await self.store.list_groups(project_id)
        has_record = any(r.group_number == group_number for r in records)

        if self.group_metadata == "entity" or has_record:
            if self.group_metadata != "entity":
                logger.debug(f"Group {group_number} of {project_id} has a record, saving it instead")
            await self._write(
                self.store.save_group,
                GroupRecord(
                    project_id=project_id,
                    group_number=group_number,
                    label=label,
                    budget_hours=budget_hours,
                ),
            )
            return None

        sub_phases = await self.store.list_sub_phases(project_id)
        placeholder = next(
            (p for p in sub_phases if p.group_number == group_number and p.is_placeholder),
            None,
        )

        if placeholder is not None:
            await self._write(
                self.store.update_sub_phase,
                placeholder.phase_id,
                label=label,
                budget_hours=budget_hours,
            )
            logger.info(f"Updated placeholder of group {group_number} ({placeholder.phase_id})")
            return placeholder.phase_id

        today = self._today()
        opening = self.calendar.opening_hour
        phase_id = await self._write(
            self.store.insert_sub_phase,
            SubPhase(
                project_id=project_id,
                group_number=group_number,
                sub_number=PLACEHOLDER_SUB_NUMBER,
                label=label,
                start_date=today,
                start_hour=opening,
                duration_hours=0,
                end_date=today,
                end_hour=opening,
                budget_hours=budget_hours,
            ),
        )
        logger.info(f"Created placeholder for group {group_number} ({phase_id})")
        return phase_id

    async def delete_group(self, project_id: str, group_number: int) -> list[str]:
        """
        Delete every sub-phase of a group, placeholder included.

        The group's GroupRecord, when there is one, is deleted last.

        Returns:
            Deleted phase IDs in deletion order

        Raises:
            PartialWriteError: If a delete fails midway
        """
        sub_phases = await self.store.list_sub_phases(project_id)
        members = [p.phase_id for p in sub_phases if p.group_number == group_number]
        records = await self.store.list_groups(project_id)

        steps = [PendingWrite(pid, self.store.delete_sub_phase, (pid,)) for pid in members]
        if any(r.group_number == group_number for r in records):
            steps.append(
                PendingWrite(
                    f"group-{group_number}",
                    self.store.delete_group_record,
                    (project_id, group_number),
                )
            )

        await self._apply("delete_group", steps)

        logger.info(f"Deleted group {group_number} of {project_id}: {len(members)} sub-phase(s)")
        return members

    async def renumber_project(self, project_id: str) -> list[SubPhaseUpdate]:
        """
        Restore canonical numbering for every group of a project.

        Returns:
            The updates that were applied (empty when already canonical)

        Raises:
            PartialWriteError: If an update fails midway
        """
        sub_phases = await self.store.list_sub_phases(project_id)
        updates = renumber(sub_phases)

        await self._apply(
            "renumber",
            [
                PendingWrite(
                    u.phase_id, self.store.update_sub_phase, (u.phase_id,), {"sub_number": u.sub_number}
                )
                for u in updates
            ],
        )
        if updates:
            logger.info(f"Renumbered {len(updates)} sub-phase(s) of project {project_id}")
        return updates

    async def promote_placeholders(self, project_id: str) -> list[int]:
        """
        Move placeholder metadata into explicit GroupRecords and drop the rows.

        Returns:
            Group numbers that were promoted

        Raises:
            PartialWriteError: If a write fails midway
        """
        sub_phases = await self.store.list_sub_phases(project_id)
        placeholders = [p for p in sub_phases if p.is_placeholder]
        existing = {r.group_number for r in await self.store.list_groups(project_id)}

        promoted: list[int] = []
        steps: list[PendingWrite] = []
        for placeholder in placeholders:
            if placeholder.group_number not in existing:
                record = GroupRecord(
                    project_id=project_id,
                    group_number=placeholder.group_number,
                    label=placeholder.label,
                    budget_hours=placeholder.budget_hours,
                )
                existing.add(placeholder.group_number)
                promoted.append(placeholder.group_number)
                steps.append(
                    PendingWrite(f"group-{placeholder.group_number}", self.store.save_group, (record,))
                )
            steps.append(
                PendingWrite(placeholder.phase_id, self.store.delete_sub_phase, (placeholder.phase_id,))
            )

        await self._apply("promote_placeholders", steps)
        return promoted

    async def history(self, project_id: str, phase_id: str | None = None) -> list[HistoryEntry]:
        return await self.store.list_history(project_id, phase_id)

    async def _write(self, method: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        return await self._retry(method)(*args, **kwargs)

    async def _apply(self, operation: str, steps: list[PendingWrite]) -> None:
        """Run writes one by one; on failure raise PartialWriteError with progress."""
        applied: list[str] = []
        for index, step in enumerate(steps):
            try:
                await self._write(step.method, *step.args, **(step.kwargs or {}))
            except Exception as e:
                pending = [s.target for s in steps[index:]]
                logger.error(
                    f"{operation} failed on {step.target} after {len(applied)} write(s): {e}"
                )
                raise PartialWriteError(operation, applied, pending, e) from e
            applied.append(step.target)

    async def _record(self, entry: HistoryEntry) -> None:
        # History is informational: a failed insert never undoes the change itself
        try:
            await self.store.add_history(entry)
        except Exception as e:
            logger.warning(f"Could not record history for {entry.phase_id}: {e}")


def _check_group_number(group_number: int) -> None:
    if not isinstance(group_number, int) or isinstance(group_number, bool) or group_number < 1:
        raise InvalidScheduleInput(f"group_number must be a positive integer, got {group_number!r}")
