# site_planner/models/phases.py
"""
Sub-phase records and in-memory storage.

Internal models (NOT Pydantic - tool outputs use models/responses.py).
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, NamedTuple
from uuid import uuid4

from site_planner.models.store import UPDATABLE_FIELDS, PhaseStore

logger = logging.getLogger(__name__)

PLACEHOLDER_SUB_NUMBER = 0


@dataclass
class SubPhase:
    """
    Atomic schedulable work item of a project.

    A zero-duration sub-phase is the group placeholder: it carries the
    group's label and budget and is never scheduled.
    """

    project_id: str
    group_number: int
    sub_number: int
    start_date: date
    start_hour: int
    duration_hours: int
    end_date: date
    end_hour: int
    label: str | None = None
    assigned_worker_id: str | None = None
    budget_hours: int | None = None
    phase_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.duration_hours == 0

    @property
    def code(self) -> str:
        """Display code, e.g. "2.3" for sub-phase 3 of phase 2."""
        return f"{self.group_number}.{self.sub_number}"

    @property
    def start_key(self) -> tuple[date, int]:
        return (self.start_date, self.start_hour)


@dataclass
class GroupRecord:
    """Explicit phase group metadata (replaces the placeholder row)."""

    project_id: str
    group_number: int
    label: str | None = None
    budget_hours: int | None = None
    updated_at: datetime | None = None


@dataclass
class PhaseGroup:
    """
    A named collection of sub-phases sharing a group number.

    Derived on read; `sub_phases` holds real sub-phases only, in display order.
    """

    group_number: int
    label: str = ""
    budget_hours: int | None = None
    sub_phases: list[SubPhase] = field(default_factory=list)
    placeholder: SubPhase | None = None

    @property
    def display_label(self) -> str:
        return self.label or f"Phase {self.group_number}"


class SubPhaseUpdate(NamedTuple):
    """A single renumbering write: set `sub_number` of `phase_id`."""

    phase_id: str
    sub_number: int


@dataclass
class HistoryEntry:
    """One recorded change of a sub-phase."""

    project_id: str
    phase_id: str
    action: str
    description: str
    modified_at: datetime
    modified_by: str | None = None
    old_values: dict[str, Any] = field(default_factory=dict)
    new_values: dict[str, Any] = field(default_factory=dict)
    entry_id: int | None = None


class InMemoryPhaseStore(PhaseStore):
    """
    Simple in-memory sub-phase storage.

    Single-process usage only. Implements the PhaseStore protocol with async
    wrappers around dict operations; records are copied in and out so callers
    never share state with the store.
    """

    def __init__(self) -> None:
        """Initialize empty store."""
        self._phases: dict[str, SubPhase] = {}
        self._groups: dict[tuple[str, int], GroupRecord] = {}
        self._history: list[HistoryEntry] = []
        logger.info("Initialized InMemoryPhaseStore")

    async def list_sub_phases(self, project_id: str) -> list[SubPhase]:
        rows = [replace(p) for p in self._phases.values() if p.project_id == project_id]
        # sorted() is stable: ties keep insertion order
        return sorted(rows, key=lambda p: (p.group_number, p.sub_number))

    async def get_sub_phase(self, phase_id: str) -> SubPhase | None:
        record = self._phases.get(phase_id)
        return replace(record) if record else None

    async def insert_sub_phase(self, sub_phase: SubPhase) -> str:
        phase_id = sub_phase.phase_id or generate_phase_id()
        if phase_id in self._phases:
            raise ValueError(f"Sub-phase {phase_id} already exists")

        now = datetime.now(timezone.utc)
        self._phases[phase_id] = replace(
            sub_phase,
            phase_id=phase_id,
            created_at=sub_phase.created_at or now,
            updated_at=now,
        )
        logger.info(f"Inserted sub-phase {phase_id} ({sub_phase.project_id} {sub_phase.code})")
        return phase_id

    async def update_sub_phase(self, phase_id: str, **fields) -> None:
        invalid = set(fields) - UPDATABLE_FIELDS
        if invalid:
            raise ValueError(f"Invalid field names: {invalid}")

        record = self._phases.get(phase_id)
        if not record:
            raise ValueError(f"Sub-phase {phase_id} not found")

        if not fields:
            return

        fields.setdefault("updated_at", datetime.now(timezone.utc))
        self._phases[phase_id] = replace(record, **fields)
        logger.info(f"Updated sub-phase {phase_id}: {sorted(fields)}")

    async def delete_sub_phase(self, phase_id: str) -> None:
        if self._phases.pop(phase_id, None) is None:
            raise ValueError(f"Sub-phase {phase_id} not found")
        logger.info(f"Deleted sub-phase {phase_id}")

    async def list_groups(self, project_id: str) -> list[GroupRecord]:
        records = [replace(g) for (pid, _), g in self._groups.items() if pid == project_id]
        return sorted(records, key=lambda g: g.group_number)

    async def save_group(self, record: GroupRecord) -> None:
        self._groups[(record.project_id, record.group_number)] = replace(
            record, updated_at=datetime.now(timezone.utc)
        )
        logger.info(f"Saved group {record.project_id} #{record.group_number}")

    async def delete_group_record(self, project_id: str, group_number: int) -> bool:
        return self._groups.pop((project_id, group_number), None) is not None

    async def add_history(self, entry: HistoryEntry) -> None:
        entry_id = len(self._history) + 1
        self._history.append(replace(entry, entry_id=entry_id))

    async def list_history(
        self, project_id: str, phase_id: str | None = None
    ) -> list[HistoryEntry]:
        entries = [
            e
            for e in self._history
            if e.project_id == project_id and (phase_id is None or e.phase_id == phase_id)
        ]
        return sorted(entries, key=lambda e: (e.modified_at, e.entry_id or 0), reverse=True)


def generate_phase_id() -> str:
    """
    Generate a unique sub-phase ID.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]
