# tests/unit/test_numbering.py
"""
Unit tests for chronological renumbering.
"""

from dataclasses import replace
from datetime import date

from site_planner.models.phases import SubPhase, SubPhaseUpdate
from site_planner.planning.numbering import renumber


def _phase(phase_id, group_number, sub_number, start, hour=8, duration=4):
    return SubPhase(
        phase_id=phase_id,
        project_id="proj-1",
        group_number=group_number,
        sub_number=sub_number,
        start_date=start,
        start_hour=hour,
        duration_hours=duration,
        end_date=start,
        end_hour=hour + duration,
    )


def _apply(phases, updates):
    by_id = {u.phase_id: u.sub_number for u in updates}
    return [replace(p, sub_number=by_id.get(p.phase_id, p.sub_number)) for p in phases]


def test_chronological_numbering():
    phases = [
        _phase("c", 1, 1, date(2026, 1, 9)),
        _phase("a", 1, 2, date(2026, 1, 5)),
        _phase("b", 1, 3, date(2026, 1, 7)),
    ]
    updates = renumber(phases)

    assert updates == [
        SubPhaseUpdate("a", 1),
        SubPhaseUpdate("b", 2),
        SubPhaseUpdate("c", 3),
    ]


def test_only_changed_rows_emitted():
    phases = [
        _phase("a", 1, 1, date(2026, 1, 5)),
        _phase("b", 1, 3, date(2026, 1, 6)),
        _phase("c", 1, 4, date(2026, 1, 7)),
    ]
    assert renumber(phases) == [SubPhaseUpdate("b", 2), SubPhaseUpdate("c", 3)]


def test_start_hour_breaks_same_day_ties():
    phases = [
        _phase("afternoon", 1, 1, date(2026, 1, 5), hour=13),
        _phase("morning", 1, 2, date(2026, 1, 5), hour=8),
    ]
    assert renumber(phases) == [SubPhaseUpdate("morning", 1), SubPhaseUpdate("afternoon", 2)]


def test_placeholder_forced_to_zero():
    phases = [
        _phase("ph", 1, 5, date(2026, 1, 5), duration=0),
        _phase("a", 1, 1, date(2026, 1, 5)),
    ]
    assert renumber(phases) == [SubPhaseUpdate("ph", 0)]


def test_groups_numbered_independently_in_group_order():
    phases = [
        _phase("g2", 2, 7, date(2026, 1, 5)),
        _phase("g1", 1, 3, date(2026, 1, 5)),
    ]
    assert renumber(phases) == [SubPhaseUpdate("g1", 1), SubPhaseUpdate("g2", 1)]


def test_result_is_gap_free_and_idempotent():
    phases = [
        _phase("a", 1, 9, date(2026, 1, 12)),
        _phase("b", 1, 2, date(2026, 1, 5)),
        _phase("ph", 1, 0, date(2026, 1, 1), duration=0),
        _phase("c", 2, 4, date(2026, 1, 6)),
        _phase("d", 2, 4, date(2026, 1, 6)),
        _phase("e", 1, 2, date(2026, 1, 7)),
    ]
    renumbered = _apply(phases, renumber(phases))

    for group_number in (1, 2):
        real = [p for p in renumbered if p.group_number == group_number and not p.is_placeholder]
        assert sorted(p.sub_number for p in real) == list(range(1, len(real) + 1))
        ordered = sorted(real, key=lambda p: p.sub_number)
        assert [p.start_key for p in ordered] == sorted(p.start_key for p in real)

    assert renumber(renumbered) == []


def test_ties_keep_input_order():
    phases = [
        _phase("first", 1, 1, date(2026, 1, 5)),
        _phase("second", 1, 2, date(2026, 1, 5)),
    ]
    assert renumber(phases) == []

    swapped = [phases[1], phases[0]]
    assert renumber(swapped) == [SubPhaseUpdate("second", 1), SubPhaseUpdate("first", 2)]


def test_empty_project():
    assert renumber([]) == []
