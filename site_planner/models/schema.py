# site_planner/models/schema.py
"""
Database schema definition for SQLite phase persistence.

Provides DDL for tables, indexes, and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 2

SUB_PHASES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS sub_phases (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    group_number INTEGER NOT NULL CHECK(group_number > 0),
    sub_number INTEGER NOT NULL CHECK(sub_number >= 0),
    label TEXT,
    start_date TEXT NOT NULL,
    start_hour INTEGER NOT NULL CHECK(start_hour >= 0 AND start_hour <= 23),
    duration_hours INTEGER NOT NULL CHECK(duration_hours >= 0),
    end_date TEXT NOT NULL,
    end_hour INTEGER NOT NULL CHECK(end_hour >= 0 AND end_hour <= 24),
    assigned_worker_id TEXT,
    budget_hours INTEGER,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

# Index for per-project listing in numbering order
SUB_PHASES_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_sub_phases_project_group "
    "ON sub_phases(project_id, group_number, sub_number)"
)

PHASE_GROUPS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS phase_groups (
    project_id TEXT NOT NULL,
    group_number INTEGER NOT NULL CHECK(group_number > 0),
    label TEXT,
    budget_hours INTEGER,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (project_id, group_number)
)
"""

PHASE_HISTORY_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS phase_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    project_id TEXT NOT NULL,
    phase_id TEXT NOT NULL,
    action TEXT NOT NULL,
    description TEXT NOT NULL,
    modified_by TEXT,
    modified_at TEXT NOT NULL,
    old_values TEXT,
    new_values TEXT
)
"""

PHASE_HISTORY_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_phase_history_project "
    "ON phase_history(project_id, modified_at)"
)


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Args:
        db: Database connection

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    """
    Set schema version in database.

    Args:
        db: Database connection
        version: Schema version to set
    """
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def _migrate_v1_to_v2(db: aiosqlite.Connection) -> None:
    """
    Migrate schema from v1 to v2.

    Changes:
        - Add budget_hours column to sub_phases (group budget on the placeholder)
        - phase_groups and phase_history tables (created by init_db)
    """
    logger.info("Migrating schema from v1 to v2")

    cursor = await db.execute("PRAGMA table_info(sub_phases)")
    columns = await cursor.fetchall()
    column_names = [col[1] for col in columns]

    if "budget_hours" not in column_names:
        await db.execute("ALTER TABLE sub_phases ADD COLUMN budget_hours INTEGER")
        logger.info("Added budget_hours column to sub_phases table")
    else:
        logger.info("budget_hours column already exists (skip)")


async def init_db(db_path: str) -> None:
    """
    Initialize database schema with WAL mode and optimal settings.

    Handles schema migrations automatically.

    Args:
        db_path: Path to SQLite database file

    Settings:
        - WAL mode: Concurrent reads + writes
        - synchronous=NORMAL: Good durability/performance balance
        - busy_timeout=5000ms: Retry on SQLITE_BUSY
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA synchronous=NORMAL")
        await db.execute("PRAGMA busy_timeout=5000")

        await db.execute(SUB_PHASES_TABLE_SQL)
        await db.execute(SUB_PHASES_INDEX_SQL)
        await db.execute(PHASE_GROUPS_TABLE_SQL)
        await db.execute(PHASE_HISTORY_TABLE_SQL)
        await db.execute(PHASE_HISTORY_INDEX_SQL)

        current_version = await _get_schema_version(db)

        if current_version < SCHEMA_VERSION:
            logger.info(
                f"Schema migration needed: v{current_version} -> v{SCHEMA_VERSION}"
            )

            if current_version < 1:
                # New database, set version directly
                await _set_schema_version(db, SCHEMA_VERSION)
                logger.info(f"New database initialized at v{SCHEMA_VERSION}")
            elif current_version == 1:
                await _migrate_v1_to_v2(db)
                await _set_schema_version(db, 2)
                logger.info("Migration to v2 complete")

        await db.commit()

        logger.info(f"Initialized database at {db_path} (schema v{SCHEMA_VERSION})")
