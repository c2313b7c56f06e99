# site_planner/planning/history.py
"""
Change history for sub-phases.

Each edit is classified by its most specific change (worker, then budget,
then duration, then dates) and stored with a readable description and the
old/new values of the tracked fields.
"""

from dataclasses import asdict
from datetime import date, datetime, timezone
from typing import Any

from site_planner.models.phases import HistoryEntry, SubPhase
from site_planner.scheduling.work_calendar import format_hour

TRACKED_FIELDS = (
    "start_date",
    "end_date",
    "start_hour",
    "end_hour",
    "duration_hours",
    "budget_hours",
    "assigned_worker_id",
    "label",
)

DATE_FIELDS = ("start_date", "end_date", "start_hour", "end_hour")

ACTIONS = frozenset(
    {
        "create",
        "delete",
        "date_change",
        "duration_change",
        "worker_change",
        "budget_change",
        "update",
    }
)


def snapshot(sub_phase: SubPhase) -> dict[str, Any]:
    """Tracked field values of a sub-phase, dates as ISO strings."""
    values = asdict(sub_phase)
    return {name: _plain(values[name]) for name in TRACKED_FIELDS}


def detect_action(old_values: dict[str, Any], new_values: dict[str, Any]) -> str:
    """Classify a change by its most specific difference."""

    def changed(name: str) -> bool:
        return old_values.get(name) != new_values.get(name)

    if changed("assigned_worker_id"):
        return "worker_change"
    if changed("budget_hours"):
        return "budget_change"
    if changed("duration_hours"):
        return "duration_change"
    if any(changed(name) for name in DATE_FIELDS):
        return "date_change"
    return "update"


def phase_caption(sub_phase: SubPhase) -> str:
    """E.g. "Phase 2.3 (Kitchen fitting)"."""
    caption = f"Phase {sub_phase.code}"
    if sub_phase.label:
        caption += f" ({sub_phase.label})"
    return caption


def describe_change(
    action: str,
    old_values: dict[str, Any],
    new_values: dict[str, Any],
    sub_phase: SubPhase,
) -> str:
    caption = phase_caption(sub_phase)

    if action == "create":
        return f"{caption}: Created"
    if action == "delete":
        return f"{caption}: Deleted"
    if action == "date_change":
        parts = []
        for name, title, fmt in (
            ("start_date", "Start", str),
            ("start_hour", "Start hour", format_hour),
            ("end_date", "End", str),
            ("end_hour", "End hour", format_hour),
        ):
            old, new = old_values.get(name), new_values.get(name)
            if old != new:
                parts.append(f"{title}: {_fmt(old, fmt)} -> {_fmt(new, fmt)}")
        return f"{caption}: Dates changed\n" + "\n".join(parts)
    if action == "duration_change":
        return (
            f"{caption}: Duration changed\n"
            f"{old_values.get('duration_hours')}h -> {new_values.get('duration_hours')}h"
        )
    if action == "worker_change":
        old = old_values.get("assigned_worker_id") or "Unassigned"
        new = new_values.get("assigned_worker_id") or "Unassigned"
        return f"{caption}: Worker changed\n{old} -> {new}"
    if action == "budget_change":
        return (
            f"{caption}: Budget changed\n"
            f"{old_values.get('budget_hours') or 0}h -> {new_values.get('budget_hours') or 0}h"
        )
    return f"{caption}: Updated"


def build_entry(
    old_phase: SubPhase,
    new_fields: dict[str, Any],
    modified_by: str | None = None,
    forced_action: str | None = None,
) -> HistoryEntry:
    """
    Build the history entry for a change of `old_phase`.

    Args:
        old_phase: Sub-phase as it was before the change
        new_fields: Changed fields (merged over the old values)
        modified_by: Who made the change, if known
        forced_action: Use this action instead of detecting one ("create", "delete")

    Raises:
        ValueError: If forced_action is not a known action
    """
    if forced_action is not None and forced_action not in ACTIONS:
        raise ValueError(f"Unknown history action '{forced_action}'")

    old_values = snapshot(old_phase)
    new_values = dict(old_values)
    new_values.update(
        {name: _plain(value) for name, value in new_fields.items() if name in TRACKED_FIELDS}
    )

    action = forced_action or detect_action(old_values, new_values)

    return HistoryEntry(
        project_id=old_phase.project_id,
        phase_id=old_phase.phase_id or "",
        action=action,
        description=describe_change(action, old_values, new_values, old_phase),
        modified_by=modified_by,
        modified_at=datetime.now(timezone.utc),
        old_values=old_values,
        new_values=new_values,
    )


def _plain(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


def _fmt(value: Any, fmt) -> str:
    return "-" if value is None else fmt(value)
