# site_planner/cli.py
"""
CLI interface for site-planner.

Thin presentation layer over the tools/ service layer.
All commands delegate to the same functions that MCP wraps.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from site_planner.config.loader import get_db_path, load_config

app = typer.Typer(
    name="site-planner",
    help="Phase scheduling and numbering for construction projects.",
    no_args_is_help=True,
)

console = Console()

GAUGE_WIDTH = 20


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


async def _get_store(config):
    """Open the SQLite store configured for this user."""
    from site_planner.models.sqlite_store import SQLitePhaseStore

    store = SQLitePhaseStore(str(get_db_path(config)))
    await store.initialize()
    return store


def _with_store(call):
    """Load config, open the store, run `call(store, config)`, close the store."""
    config = load_config()

    async def _go():
        store = await _get_store(config)
        try:
            return await call(store, config)
        finally:
            await store.close()

    try:
        return _run(_go())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _gauge_bar(gauge: dict) -> str:
    """Textual budget gauge: fill up to 100%, then a red overflow tail."""
    if not gauge["defined"]:
        return "[dim]no budget defined[/dim]"
    filled = round(gauge["percent"] * GAUGE_WIDTH / 100)
    overflow = round(gauge["overflow_percent"] * GAUGE_WIDTH / 100)
    color = "red" if gauge["actual_percent"] > 100 else "green"
    bar = f"[{color}]{'█' * filled}[/{color}]{'░' * (GAUGE_WIDTH - filled)}"
    if overflow:
        bar += f"[red]{'▓' * overflow}[/red]"
    return f"{bar} {gauge['actual_percent']}% ({gauge['consumed']}/{gauge['allocated']}h)"


def _print_sub_phase(sub_phase: dict) -> None:
    typer.echo(
        f"{sub_phase['code']:<7} {sub_phase['phase_id']}  "
        f"{sub_phase['start_date']} {sub_phase['start_hour']:02d}h -> "
        f"{sub_phase['end_date']} {sub_phase['end_hour']:02d}h "
        f"({sub_phase['duration_hours']}h)"
    )


@app.command()
def end(
    start_date: str = typer.Argument(..., help="Start date (YYYY-MM-DD)"),
    start_hour: int = typer.Argument(..., help="Start hour (0-23)"),
    duration: int = typer.Argument(..., help="Working hours"),
):
    """Project the end of a working-hours duration."""
    from site_planner.tools.project_end import project_end

    try:
        result = project_end(start_date, start_hour, duration, config=load_config())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"{result['end_date']} {result['end_hour']:02d}:00")


@app.command("list")
def list_groups(project_id: str = typer.Argument(..., help="Project ID")):
    """List the phase groups of a project."""
    from site_planner.tools.list_phases import list_phases

    result = _with_store(lambda store, config: list_phases(project_id, store=store, config=config))

    if not result["groups"]:
        typer.echo("No phases found.")
        return

    for group in result["groups"]:
        table = Table(
            title=f"{group['group_number']}. {group['label']}",
            caption=_gauge_bar(group["gauge"]),
            title_justify="left",
        )
        table.add_column("Code")
        table.add_column("Label")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Hours", justify="right")
        table.add_column("Worker")
        table.add_column("ID", style="dim")
        for p in group["sub_phases"]:
            table.add_row(
                p["code"],
                p["label"] or "",
                f"{p['start_date']} {p['start_hour']:02d}h",
                f"{p['end_date']} {p['end_hour']:02d}h",
                str(p["duration_hours"]),
                p["assigned_worker_id"] or "-",
                p["phase_id"],
            )
        console.print(table)

    if result["unassigned"]:
        typer.echo(f"\n{len(result['unassigned'])} sub-phase(s) without a worker.")


@app.command()
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    group_number: int = typer.Argument(..., help="Phase group number"),
    start_date: str = typer.Argument(..., help="Start date (YYYY-MM-DD)"),
    start_hour: int = typer.Argument(..., help="Start hour (0-23)"),
    duration: int = typer.Argument(..., help="Working hours (1-500)"),
    label: str = typer.Option(None, "--label", "-l", help="Sub-phase label"),
    worker: str = typer.Option(None, "--worker", "-w", help="Assigned worker ID"),
):
    """Add a sub-phase to a group."""
    from site_planner.tools.add_sub_phase import add_sub_phase

    result = _with_store(
        lambda store, config: add_sub_phase(
            project_id,
            group_number,
            start_date,
            start_hour,
            duration,
            label,
            worker,
            store=store,
            config=config,
        )
    )
    typer.echo("Added:")
    _print_sub_phase(result["sub_phase"])


@app.command()
def edit(
    phase_id: str = typer.Argument(..., help="Sub-phase ID"),
    start_date: str = typer.Option(None, "--start", help="New start date (YYYY-MM-DD)"),
    start_hour: int = typer.Option(None, "--hour", help="New start hour (0-23)"),
    duration: int = typer.Option(None, "--duration", "-d", help="New duration in hours"),
    label: str = typer.Option(None, "--label", "-l", help="New label ('' clears)"),
    worker: str = typer.Option(None, "--worker", "-w", help="New worker ('' unassigns)"),
    cascade: bool = typer.Option(False, "--cascade", help="Push later overlapping sub-phases"),
):
    """Edit a sub-phase."""
    from site_planner.tools.edit_sub_phase import edit_sub_phase

    result = _with_store(
        lambda store, config: edit_sub_phase(
            phase_id,
            store=store,
            config=config,
            start_date=start_date,
            start_hour=start_hour,
            duration_hours=duration,
            label=label,
            assigned_worker_id=worker,
            cascade=cascade,
        )
    )
    typer.echo("Updated:")
    _print_sub_phase(result["sub_phase"])
    for shifted in result["shifted"]:
        typer.echo(typer.style("Shifted: ", fg=typer.colors.YELLOW), nl=False)
        _print_sub_phase(shifted)


@app.command()
def rm(phase_id: str = typer.Argument(..., help="Sub-phase ID")):
    """Delete a sub-phase."""
    from site_planner.tools.delete_sub_phase import delete_sub_phase

    _with_store(lambda store, config: delete_sub_phase(phase_id, store=store, config=config))
    typer.echo(f"Deleted sub-phase {phase_id}.")


@app.command("group-set")
def group_set(
    project_id: str = typer.Argument(..., help="Project ID"),
    group_number: int = typer.Argument(..., help="Phase group number"),
    label: str = typer.Option(None, "--label", "-l", help="Group label"),
    budget: int = typer.Option(None, "--budget", "-b", help="Budget in hours (0 = none)"),
):
    """Create or update a group's label and budget."""
    from site_planner.tools.set_group import set_group

    result = _with_store(
        lambda store, config: set_group(
            project_id, group_number, label, budget, store=store, config=config
        )
    )
    budget_text = f"{result['budget_hours']}h" if result["budget_hours"] else "no budget"
    typer.echo(f"Group {result['group_number']}: {result['label'] or '-'} ({budget_text})")


@app.command("group-rm")
def group_rm(
    project_id: str = typer.Argument(..., help="Project ID"),
    group_number: int = typer.Argument(..., help="Phase group number"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a group and all of its sub-phases."""
    from site_planner.tools.delete_group import delete_group

    if not yes:
        typer.confirm(f"Delete group {group_number} and all its sub-phases?", abort=True)

    result = _with_store(
        lambda store, config: delete_group(project_id, group_number, store=store, config=config)
    )
    typer.echo(f"Deleted group {group_number} ({result['total']} record(s)).")


@app.command("group-promote")
def group_promote(project_id: str = typer.Argument(..., help="Project ID")):
    """Move group metadata from placeholder rows to group records."""
    from site_planner.tools.promote_groups import promote_groups

    result = _with_store(
        lambda store, config: promote_groups(project_id, store=store, config=config)
    )
    typer.echo(f"Promoted {result['total']} group(s).")


@app.command()
def renumber(project_id: str = typer.Argument(..., help="Project ID")):
    """Renumber sub-phases chronologically in every group."""
    from site_planner.tools.renumber_phases import renumber_phases

    result = _with_store(
        lambda store, config: renumber_phases(project_id, store=store, config=config)
    )
    if not result["total"]:
        typer.echo("Numbering already up to date.")
        return
    typer.echo(f"Renumbered {result['total']} sub-phase(s).")


@app.command()
def history(
    project_id: str = typer.Argument(..., help="Project ID"),
    phase_id: str = typer.Option(None, "--phase", "-p", help="Only this sub-phase"),
):
    """Show recorded changes, newest first."""
    from site_planner.tools.phase_history import phase_history

    result = _with_store(
        lambda store, config: phase_history(project_id, store=store, phase_id=phase_id)
    )
    if not result["entries"]:
        typer.echo("No history found.")
        return

    for entry in result["entries"]:
        who = f" by {entry['modified_by']}" if entry["modified_by"] else ""
        typer.echo(typer.style(f"{entry['modified_at']}{who}", fg=typer.colors.BRIGHT_BLACK))
        typer.echo(f"  {entry['description'].replace(chr(10), chr(10) + '  ')}")


@app.command()
def serve():
    """Start the MCP server over stdio."""
    from site_planner.__main__ import main

    asyncio.run(main())


if __name__ == "__main__":
    app()
