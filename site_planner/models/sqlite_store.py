# site_planner/models/sqlite_store.py
"""
SQLite-backed phase persistence.

Provides async CRUD operations with WAL mode and IMMEDIATE transactions.
Each call is its own transaction: the engine's multi-record operations are
deliberately not wrapped in a single one.
"""

import json
import logging
from datetime import date, datetime, timezone

import aiosqlite

from site_planner.models.phases import GroupRecord, HistoryEntry, SubPhase, generate_phase_id
from site_planner.models.schema import init_db
from site_planner.models.store import UPDATABLE_FIELDS, PhaseStore

logger = logging.getLogger(__name__)


class SQLitePhaseStore(PhaseStore):
    """
    Async SQLite-backed sub-phase storage.

    Features:
        - WAL mode for concurrent reads/writes
        - IMMEDIATE transactions for write safety
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite phase store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLitePhaseStore with path: {db_path}")

    async def initialize(self) -> None:
        """Initialize database schema (runs pending migrations)."""
        await init_db(self._db_path)

    async def list_sub_phases(self, project_id: str) -> list[SubPhase]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM sub_phases WHERE project_id = ? "
                "ORDER BY group_number ASC, sub_number ASC, rowid ASC",
                (project_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sub_phase(row) for row in rows]

    async def get_sub_phase(self, phase_id: str) -> SubPhase | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM sub_phases WHERE id = ?", (phase_id,))
            row = await cursor.fetchone()

            if not row:
                return None

            return self._row_to_sub_phase(row)

    async def insert_sub_phase(self, sub_phase: SubPhase) -> str:
        phase_id = sub_phase.phase_id or generate_phase_id()

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("SELECT id FROM sub_phases WHERE id = ?", (phase_id,))
                if await cursor.fetchone():
                    raise ValueError(f"Sub-phase {phase_id} already exists")

                now_iso = datetime.now(timezone.utc).isoformat()
                created_at_iso = (
                    sub_phase.created_at.isoformat() if sub_phase.created_at else now_iso
                )

                await db.execute(
                    """
                    INSERT INTO sub_phases (
                        id, project_id, group_number, sub_number, label,
                        start_date, start_hour, duration_hours, end_date, end_hour,
                        assigned_worker_id, budget_hours, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        phase_id,
                        sub_phase.project_id,
                        sub_phase.group_number,
                        sub_phase.sub_number,
                        sub_phase.label,
                        sub_phase.start_date.isoformat(),
                        sub_phase.start_hour,
                        sub_phase.duration_hours,
                        sub_phase.end_date.isoformat(),
                        sub_phase.end_hour,
                        sub_phase.assigned_worker_id,
                        sub_phase.budget_hours,
                        created_at_iso,
                        now_iso,
                    ),
                )

                await db.commit()
                logger.info(
                    f"Inserted sub-phase {phase_id} ({sub_phase.project_id} {sub_phase.code})"
                )

            except Exception:
                await db.rollback()
                raise

        return phase_id

    async def update_sub_phase(self, phase_id: str, **fields) -> None:
        invalid = set(fields.keys()) - UPDATABLE_FIELDS
        if invalid:
            raise ValueError(f"Invalid field names: {invalid}")

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("SELECT id FROM sub_phases WHERE id = ?", (phase_id,))
                if not await cursor.fetchone():
                    raise ValueError(f"Sub-phase {phase_id} not found")

                if not fields:
                    await db.rollback()
                    return

                set_parts = []
                values = []

                for key, value in fields.items():
                    set_parts.append(f"{key} = ?")
                    values.append(_to_column(value))

                # Always update updated_at
                if "updated_at" not in fields:
                    set_parts.append("updated_at = ?")
                    values.append(datetime.now(timezone.utc).isoformat())

                values.append(phase_id)  # For WHERE clause

                sql = f"UPDATE sub_phases SET {', '.join(set_parts)} WHERE id = ?"
                await db.execute(sql, values)

                await db.commit()
                logger.info(f"Updated sub-phase {phase_id}: {sorted(fields)}")

            except Exception:
                await db.rollback()
                raise

    async def delete_sub_phase(self, phase_id: str) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("DELETE FROM sub_phases WHERE id = ?", (phase_id,))
                if cursor.rowcount == 0:
                    raise ValueError(f"Sub-phase {phase_id} not found")

                await db.commit()
                logger.info(f"Deleted sub-phase {phase_id}")

            except Exception:
                await db.rollback()
                raise

    async def list_groups(self, project_id: str) -> list[GroupRecord]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM phase_groups WHERE project_id = ? ORDER BY group_number ASC",
                (project_id,),
            )
            rows = await cursor.fetchall()
            return [
                GroupRecord(
                    project_id=row["project_id"],
                    group_number=row["group_number"],
                    label=row["label"],
                    budget_hours=row["budget_hours"],
                    updated_at=datetime.fromisoformat(row["updated_at"]),
                )
                for row in rows
            ]

    async def save_group(self, record: GroupRecord) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                await db.execute(
                    """
                    INSERT INTO phase_groups (project_id, group_number, label, budget_hours, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(project_id, group_number)
                    DO UPDATE SET label = excluded.label,
                                  budget_hours = excluded.budget_hours,
                                  updated_at = excluded.updated_at
                    """,
                    (
                        record.project_id,
                        record.group_number,
                        record.label,
                        record.budget_hours,
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                await db.commit()
                logger.info(f"Saved group {record.project_id} #{record.group_number}")

            except Exception:
                await db.rollback()
                raise

    async def delete_group_record(self, project_id: str, group_number: int) -> bool:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute(
                    "DELETE FROM phase_groups WHERE project_id = ? AND group_number = ?",
                    (project_id, group_number),
                )
                await db.commit()

            except Exception:
                await db.rollback()
                raise

            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Deleted group record {project_id} #{group_number}")
            return deleted

    async def add_history(self, entry: HistoryEntry) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                """
                INSERT INTO phase_history (
                    project_id, phase_id, action, description,
                    modified_by, modified_at, old_values, new_values
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.project_id,
                    entry.phase_id,
                    entry.action,
                    entry.description,
                    entry.modified_by,
                    entry.modified_at.isoformat(),
                    json.dumps(entry.old_values, default=str),
                    json.dumps(entry.new_values, default=str),
                ),
            )
            await db.commit()

    async def list_history(
        self, project_id: str, phase_id: str | None = None
    ) -> list[HistoryEntry]:
        sql = "SELECT * FROM phase_history WHERE project_id = ?"
        params: list = [project_id]
        if phase_id is not None:
            sql += " AND phase_id = ?"
            params.append(phase_id)
        sql += " ORDER BY modified_at DESC, id DESC"

        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(sql, params)
            rows = await cursor.fetchall()

            return [
                HistoryEntry(
                    entry_id=row["id"],
                    project_id=row["project_id"],
                    phase_id=row["phase_id"],
                    action=row["action"],
                    description=row["description"],
                    modified_by=row["modified_by"],
                    modified_at=datetime.fromisoformat(row["modified_at"]),
                    old_values=json.loads(row["old_values"]) if row["old_values"] else {},
                    new_values=json.loads(row["new_values"]) if row["new_values"] else {},
                )
                for row in rows
            ]

    async def close(self) -> None:
        """
        Checkpoint WAL and close database.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except Exception as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def _row_to_sub_phase(self, row: aiosqlite.Row) -> SubPhase:
        """
        Convert SQLite row to SubPhase.

        Args:
            row: SQLite row (with row_factory=aiosqlite.Row)

        Returns:
            SubPhase instance
        """
        return SubPhase(
            phase_id=row["id"],
            project_id=row["project_id"],
            group_number=row["group_number"],
            sub_number=row["sub_number"],
            label=row["label"],
            start_date=date.fromisoformat(row["start_date"]),
            start_hour=row["start_hour"],
            duration_hours=row["duration_hours"],
            end_date=date.fromisoformat(row["end_date"]),
            end_hour=row["end_hour"],
            assigned_worker_id=row["assigned_worker_id"],
            budget_hours=row["budget_hours"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


def _to_column(value):
    """Serialize a Python value for a sub_phases column."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
