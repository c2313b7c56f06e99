# tests/unit/test_cascade.py
"""
Unit tests for the overlap cascade within a phase group.
"""

from datetime import date

import pytest

from site_planner.models.phases import SubPhase
from site_planner.scheduling.cascade import CascadeShift, cascade_updates
from site_planner.scheduling.holidays import NoHolidays
from site_planner.scheduling.work_calendar import WorkCalendar

MON, TUE, WED, THU, FRI = (date(2026, 1, d) for d in range(5, 10))


@pytest.fixture
def calendar() -> WorkCalendar:
    return WorkCalendar(holidays=NoHolidays())


def _phase(phase_id, day, hour=8, duration=8, group_number=1, sub_number=1, calendar=None):
    calendar = calendar or WorkCalendar(holidays=NoHolidays())
    end = calendar.project_end(day, hour, duration) if duration else (day, hour)
    return SubPhase(
        phase_id=phase_id,
        project_id="proj-1",
        group_number=group_number,
        sub_number=sub_number,
        start_date=day,
        start_hour=hour,
        duration_hours=duration,
        end_date=end[0],
        end_hour=end[1],
    )


def test_pushes_overlapping_successor(calendar):
    a = _phase("a", MON)
    b = _phase("b", TUE, sub_number=2)
    c = _phase("c", THU, sub_number=3)

    # a grows from 8h to 12h: now ends Tuesday at noon
    shifts = cascade_updates(a, TUE, 12, [a, b, c], calendar)

    assert shifts == [CascadeShift("b", TUE, 13, WED, 12)]


def test_chain_continues_while_overlapping(calendar):
    a = _phase("a", MON)
    b = _phase("b", TUE, sub_number=2)
    c = _phase("c", WED, sub_number=3)

    shifts = cascade_updates(a, TUE, 12, [a, b, c], calendar)

    assert [s.phase_id for s in shifts] == ["b", "c"]
    assert shifts[1] == CascadeShift("c", WED, 13, THU, 12)


def test_end_at_closing_resumes_next_working_day(calendar):
    a = _phase("a", THU)
    b = _phase("b", FRI, sub_number=2, duration=4)

    shifts = cascade_updates(a, FRI, 17, [a, b], calendar)

    assert shifts == [CascadeShift("b", date(2026, 1, 12), 8, date(2026, 1, 12), 12)]


def test_no_overlap_no_shift(calendar):
    a = _phase("a", MON)
    b = _phase("b", WED, sub_number=2)

    assert cascade_updates(a, TUE, 12, [a, b], calendar) == []


def test_other_groups_and_placeholders_untouched(calendar):
    a = _phase("a", MON)
    other = _phase("other", TUE, group_number=2)
    placeholder = _phase("ph", TUE, duration=0, sub_number=0)

    assert cascade_updates(a, TUE, 12, [a, other, placeholder], calendar) == []


def test_earlier_sub_phases_ignored(calendar):
    earlier = _phase("earlier", MON)
    a = _phase("a", TUE, sub_number=2)

    assert cascade_updates(a, WED, 17, [earlier, a], calendar) == []


def test_as_fields():
    shift = CascadeShift("b", TUE, 13, WED, 12)
    assert shift.as_fields() == {
        "start_date": TUE,
        "start_hour": 13,
        "end_date": WED,
        "end_hour": 12,
    }
