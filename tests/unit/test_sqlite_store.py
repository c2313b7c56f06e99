# tests/unit/test_sqlite_store.py
"""
Unit tests for SQLitePhaseStore persistence.

Tests CRUD operations, listing order, group records, history and the
v1 -> v2 schema migration.
"""

from datetime import date, datetime, timezone
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from site_planner.models.phases import GroupRecord, HistoryEntry, SubPhase
from site_planner.models.schema import SCHEMA_VERSION, init_db
from site_planner.models.sqlite_store import SQLitePhaseStore


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> SQLitePhaseStore:
    """Create and initialize a test SQLite store."""
    store = SQLitePhaseStore(str(tmp_path / "test_phases.db"))
    await store.initialize()
    return store


def _sub_phase(
    phase_id=None,
    group_number=1,
    sub_number=1,
    start=date(2026, 1, 5),
    duration=8,
    label="Footings",
) -> SubPhase:
    return SubPhase(
        phase_id=phase_id,
        project_id="proj-1",
        group_number=group_number,
        sub_number=sub_number,
        label=label,
        start_date=start,
        start_hour=8,
        duration_hours=duration,
        end_date=start,
        end_hour=17 if duration else 8,
    )


@pytest.mark.asyncio
async def test_insert_and_get_roundtrip(store: SQLitePhaseStore):
    """Inserting then reading back preserves every field."""
    record = _sub_phase(phase_id="abc123def456")
    record.assigned_worker_id = "w1"

    phase_id = await store.insert_sub_phase(record)
    retrieved = await store.get_sub_phase(phase_id)

    assert phase_id == "abc123def456"
    assert retrieved is not None
    assert retrieved.project_id == "proj-1"
    assert retrieved.label == "Footings"
    assert retrieved.start_date == date(2026, 1, 5)
    assert retrieved.end_date == date(2026, 1, 5)
    assert (retrieved.start_hour, retrieved.end_hour) == (8, 17)
    assert retrieved.duration_hours == 8
    assert retrieved.assigned_worker_id == "w1"
    assert retrieved.budget_hours is None
    assert retrieved.created_at is not None
    assert retrieved.updated_at is not None


@pytest.mark.asyncio
async def test_insert_generates_id(store: SQLitePhaseStore):
    phase_id = await store.insert_sub_phase(_sub_phase())
    assert len(phase_id) == 12


@pytest.mark.asyncio
async def test_insert_duplicate_raises_error(store: SQLitePhaseStore):
    await store.insert_sub_phase(_sub_phase(phase_id="dup-id"))

    with pytest.raises(ValueError, match="already exists"):
        await store.insert_sub_phase(_sub_phase(phase_id="dup-id"))


@pytest.mark.asyncio
async def test_get_missing_returns_none(store: SQLitePhaseStore):
    assert await store.get_sub_phase("nope") is None


@pytest.mark.asyncio
async def test_list_orders_by_group_then_number_then_insertion(store: SQLitePhaseStore):
    await store.insert_sub_phase(_sub_phase(phase_id="g2", group_number=2, sub_number=1))
    await store.insert_sub_phase(_sub_phase(phase_id="tie-a", sub_number=2))
    await store.insert_sub_phase(_sub_phase(phase_id="g1-1", sub_number=1))
    await store.insert_sub_phase(_sub_phase(phase_id="tie-b", sub_number=2))
    await store.insert_sub_phase(_sub_phase(phase_id="ph", sub_number=0, duration=0))

    phases = await store.list_sub_phases("proj-1")

    assert [p.phase_id for p in phases] == ["ph", "g1-1", "tie-a", "tie-b", "g2"]
    assert phases[0].is_placeholder


@pytest.mark.asyncio
async def test_list_filters_by_project(store: SQLitePhaseStore):
    await store.insert_sub_phase(_sub_phase(phase_id="mine"))
    other = _sub_phase(phase_id="theirs")
    other.project_id = "proj-2"
    await store.insert_sub_phase(other)

    assert [p.phase_id for p in await store.list_sub_phases("proj-1")] == ["mine"]


@pytest.mark.asyncio
async def test_update_fields(store: SQLitePhaseStore):
    phase_id = await store.insert_sub_phase(_sub_phase())
    before = await store.get_sub_phase(phase_id)

    await store.update_sub_phase(
        phase_id, sub_number=3, end_date=date(2026, 1, 6), end_hour=12, label=None
    )

    after = await store.get_sub_phase(phase_id)
    assert after.sub_number == 3
    assert after.end_date == date(2026, 1, 6)
    assert after.end_hour == 12
    assert after.label is None
    assert after.updated_at >= before.updated_at


@pytest.mark.asyncio
async def test_update_invalid_field_raises_error(store: SQLitePhaseStore):
    phase_id = await store.insert_sub_phase(_sub_phase())

    with pytest.raises(ValueError, match="Invalid field names"):
        await store.update_sub_phase(phase_id, project_id="elsewhere")


@pytest.mark.asyncio
async def test_update_missing_raises_error(store: SQLitePhaseStore):
    with pytest.raises(ValueError, match="not found"):
        await store.update_sub_phase("missing", label="x")


@pytest.mark.asyncio
async def test_delete(store: SQLitePhaseStore):
    phase_id = await store.insert_sub_phase(_sub_phase())

    await store.delete_sub_phase(phase_id)

    assert await store.get_sub_phase(phase_id) is None
    with pytest.raises(ValueError, match="not found"):
        await store.delete_sub_phase(phase_id)


@pytest.mark.asyncio
async def test_group_records_upsert_and_delete(store: SQLitePhaseStore):
    await store.save_group(GroupRecord(project_id="proj-1", group_number=2, label="Roof"))
    await store.save_group(
        GroupRecord(project_id="proj-1", group_number=2, label="Roofing", budget_hours=90)
    )
    await store.save_group(GroupRecord(project_id="proj-1", group_number=1, label="Walls"))

    records = await store.list_groups("proj-1")
    assert [(r.group_number, r.label, r.budget_hours) for r in records] == [
        (1, "Walls", None),
        (2, "Roofing", 90),
    ]
    assert records[0].updated_at is not None

    assert await store.delete_group_record("proj-1", 2) is True
    assert await store.delete_group_record("proj-1", 2) is False
    assert [r.group_number for r in await store.list_groups("proj-1")] == [1]


@pytest.mark.asyncio
async def test_history_newest_first_with_values(store: SQLitePhaseStore):
    for i, action in enumerate(["create", "duration_change"]):
        await store.add_history(
            HistoryEntry(
                project_id="proj-1",
                phase_id="abc",
                action=action,
                description=f"entry {i}",
                modified_at=datetime(2026, 1, 5, 10 + i, tzinfo=timezone.utc),
                old_values={"duration_hours": 8},
                new_values={"duration_hours": 8 + 4 * i, "start_date": "2026-01-05"},
            )
        )
    await store.add_history(
        HistoryEntry(
            project_id="proj-1",
            phase_id="other",
            action="create",
            description="other",
            modified_at=datetime(2026, 1, 5, 9, tzinfo=timezone.utc),
        )
    )

    entries = await store.list_history("proj-1")
    assert [e.description for e in entries] == ["entry 1", "entry 0", "other"]
    assert entries[0].new_values == {"duration_hours": 12, "start_date": "2026-01-05"}
    assert entries[0].entry_id is not None

    only_abc = await store.list_history("proj-1", phase_id="abc")
    assert len(only_abc) == 2


@pytest.mark.asyncio
async def test_close_is_safe(store: SQLitePhaseStore):
    await store.close()
    # Store reconnects per call, so it stays usable
    await store.insert_sub_phase(_sub_phase())


@pytest.mark.asyncio
async def test_migrates_v1_database(tmp_path: Path):
    """A v1 database (no budget column, no group tables) is upgraded in place."""
    db_path = str(tmp_path / "legacy.db")
    async with aiosqlite.connect(db_path) as db:
        await db.execute(
            """
            CREATE TABLE sub_phases (
                id TEXT PRIMARY KEY,
                project_id TEXT NOT NULL,
                group_number INTEGER NOT NULL,
                sub_number INTEGER NOT NULL,
                label TEXT,
                start_date TEXT NOT NULL,
                start_hour INTEGER NOT NULL,
                duration_hours INTEGER NOT NULL,
                end_date TEXT NOT NULL,
                end_hour INTEGER NOT NULL,
                assigned_worker_id TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        await db.execute("CREATE TABLE schema_version (version INTEGER)")
        await db.execute("INSERT INTO schema_version (version) VALUES (1)")
        await db.commit()

    await init_db(db_path)

    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("PRAGMA table_info(sub_phases)")
        columns = [row[1] for row in await cursor.fetchall()]
        cursor = await db.execute("SELECT version FROM schema_version")
        version = (await cursor.fetchone())[0]

    assert "budget_hours" in columns
    assert version == SCHEMA_VERSION

    store = SQLitePhaseStore(db_path)
    phase_id = await store.insert_sub_phase(_sub_phase())
    assert (await store.get_sub_phase(phase_id)).budget_hours is None
