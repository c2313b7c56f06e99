# site_planner/server.py
"""
FastMCP server instance with tool registration.

configure_logging() is called first to prevent stdout pollution.
All logging goes to stderr as JSON.
"""

# Configure logging FIRST before any other imports
from site_planner.logging_config import configure_logging

configure_logging()

import logging

from fastmcp import FastMCP

from site_planner.config.loader import get_db_path, load_config
from site_planner.config.schema import SitePlannerConfig
from site_planner.models.sqlite_store import SQLitePhaseStore
from site_planner.models.store import PhaseStore
from site_planner.tools.add_sub_phase import add_sub_phase as _add_sub_phase
from site_planner.tools.delete_group import delete_group as _delete_group
from site_planner.tools.delete_sub_phase import delete_sub_phase as _delete_sub_phase
from site_planner.tools.edit_sub_phase import edit_sub_phase as _edit_sub_phase
from site_planner.tools.list_phases import list_phases as _list_phases
from site_planner.tools.phase_history import phase_history as _phase_history
from site_planner.tools.project_end import project_end as _project_end
from site_planner.tools.promote_groups import promote_groups as _promote_groups
from site_planner.tools.renumber_phases import renumber_phases as _renumber_phases
from site_planner.tools.set_group import set_group as _set_group

logger = logging.getLogger(__name__)

mcp = FastMCP("site-planner")

_config = load_config()
configure_logging(_config.output.verbosity)
logger.info(f"Loaded configuration: group_metadata={_config.storage.group_metadata}")

# Opened by initialize_lifecycle() (called from __main__.py)
_store: SQLitePhaseStore | None = None


async def get_store() -> PhaseStore:
    """
    Get the phase store opened at startup.

    Raises:
        RuntimeError: If the lifecycle was not initialized
    """
    if _store is None:
        raise RuntimeError("Server lifecycle not initialized. Call initialize_lifecycle() first.")
    return _store


async def initialize_lifecycle(config: SitePlannerConfig | None = None) -> None:
    """
    Open the SQLite store (creating or migrating the schema).

    Args:
        config: SitePlannerConfig instance (defaults to the module-level config)
    """
    global _store

    actual_config = config or _config
    db_path = get_db_path(actual_config)
    logger.info(f"Initializing lifecycle with db_path={db_path}")

    store = SQLitePhaseStore(str(db_path))
    await store.initialize()
    _store = store


async def shutdown_lifecycle() -> None:
    """Close the store if it was opened."""
    global _store

    if _store is not None:
        await _store.close()
        _store = None


@mcp.tool()
async def project_end(start_date: str, start_hour: int, duration_hours: int) -> dict:
    """Project the end date and hour of a working-hours duration (skips nights, weekends, holidays)."""
    return _project_end(start_date, start_hour, duration_hours, config=_config)


@mcp.tool()
async def list_phases(project_id: str) -> dict:
    """List the phase groups of a project with sub-phases and budget gauges."""
    store = await get_store()
    return await _list_phases(project_id, store=store, config=_config)


@mcp.tool()
async def add_sub_phase(
    project_id: str,
    group_number: int,
    start_date: str,
    start_hour: int,
    duration_hours: int,
    label: str | None = None,
    assigned_worker_id: str | None = None,
) -> dict:
    """Add a sub-phase to a group; its end is projected on the working calendar."""
    store = await get_store()
    return await _add_sub_phase(
        project_id,
        group_number,
        start_date,
        start_hour,
        duration_hours,
        label,
        assigned_worker_id,
        store=store,
        config=_config,
    )


@mcp.tool()
async def edit_sub_phase(
    phase_id: str,
    start_date: str | None = None,
    start_hour: int | None = None,
    duration_hours: int | None = None,
    label: str | None = None,
    assigned_worker_id: str | None = None,
    cascade: bool = False,
) -> dict:
    """Edit a sub-phase; optionally push later overlapping sub-phases of its group."""
    store = await get_store()
    return await _edit_sub_phase(
        phase_id,
        store=store,
        config=_config,
        start_date=start_date,
        start_hour=start_hour,
        duration_hours=duration_hours,
        label=label,
        assigned_worker_id=assigned_worker_id,
        cascade=cascade,
    )


@mcp.tool()
async def delete_sub_phase(phase_id: str) -> dict:
    """Delete a single sub-phase (renumber the project afterwards to close gaps)."""
    store = await get_store()
    return await _delete_sub_phase(phase_id, store=store, config=_config)


@mcp.tool()
async def set_group(
    project_id: str,
    group_number: int,
    label: str | None = None,
    budget_hours: int | None = None,
) -> dict:
    """Create or update a phase group's label and hour budget."""
    store = await get_store()
    return await _set_group(project_id, group_number, label, budget_hours, store=store, config=_config)


@mcp.tool()
async def delete_group(project_id: str, group_number: int) -> dict:
    """Delete a phase group and all of its sub-phases."""
    store = await get_store()
    return await _delete_group(project_id, group_number, store=store, config=_config)


@mcp.tool()
async def renumber_phases(project_id: str) -> dict:
    """Renumber sub-phases chronologically (placeholder 0, then 1..N) in every group."""
    store = await get_store()
    return await _renumber_phases(project_id, store=store, config=_config)


@mcp.tool()
async def phase_history(project_id: str, phase_id: str | None = None) -> dict:
    """List recorded sub-phase changes of a project, newest first."""
    store = await get_store()
    return await _phase_history(project_id, store=store, phase_id=phase_id)


@mcp.tool()
async def promote_groups(project_id: str) -> dict:
    """Move group labels and budgets from placeholder rows to group records."""
    store = await get_store()
    return await _promote_groups(project_id, store=store, config=_config)


logger.info("MCP server initialized with 10 tools")
