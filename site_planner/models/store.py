# site_planner/models/store.py
"""
Phase store protocol definition.

Defines the abstract interface that both InMemoryPhaseStore and SQLitePhaseStore implement.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from site_planner.models.phases import GroupRecord, HistoryEntry, SubPhase

# Fields a caller may change through update_sub_phase
UPDATABLE_FIELDS = frozenset(
    {
        "group_number",
        "sub_number",
        "label",
        "start_date",
        "start_hour",
        "duration_hours",
        "end_date",
        "end_hour",
        "assigned_worker_id",
        "budget_hours",
        "updated_at",
    }
)


class PhaseStore(ABC):
    """
    Abstract base class for sub-phase persistence.

    Calls are awaited one at a time by the engine; implementations do not
    need to support batched or transactional multi-record writes.
    """

    @abstractmethod
    async def list_sub_phases(self, project_id: str) -> "list[SubPhase]":
        """
        List every sub-phase of a project, placeholders included.

        Returns:
            SubPhases ordered by group number, then sub number, then insertion order
        """
        pass

    @abstractmethod
    async def get_sub_phase(self, phase_id: str) -> "SubPhase | None":
        """
        Get a sub-phase by ID.

        Returns:
            SubPhase if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert_sub_phase(self, sub_phase: "SubPhase") -> str:
        """
        Insert a sub-phase.

        A missing phase_id is generated by the store.

        Returns:
            The phase_id of the stored record

        Raises:
            ValueError: If the phase_id already exists
        """
        pass

    @abstractmethod
    async def update_sub_phase(self, phase_id: str, **fields) -> None:
        """
        Update fields on an existing sub-phase.

        Raises:
            ValueError: If phase_id doesn't exist or a field name is not updatable
        """
        pass

    @abstractmethod
    async def delete_sub_phase(self, phase_id: str) -> None:
        """
        Delete a sub-phase.

        Raises:
            ValueError: If phase_id doesn't exist
        """
        pass

    @abstractmethod
    async def list_groups(self, project_id: str) -> "list[GroupRecord]":
        """List explicit group records of a project, ordered by group number."""
        pass

    @abstractmethod
    async def save_group(self, record: "GroupRecord") -> None:
        """Insert or replace the group record keyed by (project_id, group_number)."""
        pass

    @abstractmethod
    async def delete_group_record(self, project_id: str, group_number: int) -> bool:
        """
        Delete an explicit group record.

        Returns:
            True if a record was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def add_history(self, entry: "HistoryEntry") -> None:
        """Append a change-history entry."""
        pass

    @abstractmethod
    async def list_history(
        self, project_id: str, phase_id: str | None = None
    ) -> "list[HistoryEntry]":
        """
        List history entries of a project (optionally for a single phase).

        Returns:
            HistoryEntries, newest first
        """
        pass

    async def close(self) -> None:
        """Release resources held by the store."""
        return None
