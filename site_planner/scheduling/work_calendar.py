# site_planner/scheduling/work_calendar.py
"""
Working-time calendar and duration projection.

A working day is made of two blocks (morning and afternoon) separated by a
midday break. Weekends and holidays are skipped entirely. All values are
naive local business time: a date plus an integer hour of day.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, NamedTuple

from site_planner.scheduling.holidays import HolidayProvider, default_holidays

logger = logging.getLogger(__name__)

# date.weekday() values
SATURDAY = 5
SUNDAY = 6


class InvalidScheduleInput(ValueError):
    """Raised when a projection request is malformed (bad date, hour or duration)."""


class ProjectedEnd(NamedTuple):
    """End point of a projected duration."""

    end_date: date
    end_hour: int


@dataclass(frozen=True)
class WorkHours:
    """Daily work blocks, expressed as whole hours."""

    morning_start: int = 8
    morning_end: int = 12
    afternoon_start: int = 13
    afternoon_end: int = 17

    def __post_init__(self) -> None:
        bounds = (self.morning_start, self.morning_end, self.afternoon_start, self.afternoon_end)
        if not all(0 <= b <= 24 for b in bounds):
            raise ValueError(f"Work hours must be within 0-24, got {bounds}")
        if not (self.morning_start < self.morning_end <= self.afternoon_start < self.afternoon_end):
            raise ValueError(f"Work blocks must be ordered and non-empty, got {bounds}")

    @property
    def morning_hours(self) -> int:
        return self.morning_end - self.morning_start

    @property
    def afternoon_hours(self) -> int:
        return self.afternoon_end - self.afternoon_start

    @property
    def hours_per_day(self) -> int:
        return self.morning_hours + self.afternoon_hours


class WorkCalendar:
    """
    Working-day predicate and duration projection over the work fabric.

    Args:
        work_hours: Daily work blocks (default 08-12 / 13-17)
        holidays: Holiday provider (default: built-in French public holidays)
        weekend_days: Non-working weekdays as date.weekday() values (default Sat/Sun)
    """

    def __init__(
        self,
        work_hours: WorkHours | None = None,
        holidays: HolidayProvider | None = None,
        weekend_days: Iterable[int] = (SATURDAY, SUNDAY),
    ) -> None:
        self.work_hours = work_hours or WorkHours()
        self.holidays = holidays if holidays is not None else default_holidays()
        self.weekend_days = frozenset(weekend_days)
        if len(self.weekend_days) >= 7:
            raise ValueError("A calendar needs at least one working weekday")

    @property
    def opening_hour(self) -> int:
        return self.work_hours.morning_start

    @property
    def hours_per_day(self) -> int:
        return self.work_hours.hours_per_day

    def is_working_day(self, day: date) -> bool:
        """Return False on weekend days and holidays, True otherwise."""
        if day.weekday() in self.weekend_days:
            return False
        return not self.holidays.is_holiday(day)

    def next_working_day(self, day: date) -> date:
        """Return the first working day strictly after `day`."""
        candidate = day + timedelta(days=1)
        while not self.is_working_day(candidate):
            candidate += timedelta(days=1)
        return candidate

    def count_working_days(self, start: date, end: date) -> int:
        """Count working days between `start` and `end`, both inclusive."""
        count = 0
        current = start
        while current <= end:
            if self.is_working_day(current):
                count += 1
            current += timedelta(days=1)
        return count

    def project_end(self, start_date: date, start_hour: int, duration_hours: int) -> ProjectedEnd:
        """
        Project the end point of `duration_hours` working hours.

        The start is first normalized onto the work fabric (before opening ->
        opening, midday break -> afternoon start, after closing -> next day at
        opening), moved forward past non-working days, then the duration is
        consumed block by block.

        An end hour equal to the morning closing hour (12 by default) means
        "end of the morning block": the work stops at the break, it does not
        end inside it. `next_start_after` resumes such an end at the
        afternoon opening.

        Args:
            start_date: Requested start date
            start_hour: Requested start hour (0-23)
            duration_hours: Working hours to consume (> 0)

        Returns:
            ProjectedEnd(end_date, end_hour)

        Raises:
            InvalidScheduleInput: If any argument is malformed or duration <= 0
        """
        _check_date(start_date, "start_date")
        _check_hour(start_hour, "start_hour")
        if not _is_int(duration_hours):
            raise InvalidScheduleInput(f"duration_hours must be an integer, got {duration_hours!r}")
        if duration_hours <= 0:
            raise InvalidScheduleInput(
                f"duration_hours must be positive, got {duration_hours} "
                "(zero-duration placeholders are never projected)"
            )

        wh = self.work_hours
        current_date = start_date
        current_hour = start_hour

        if current_hour < wh.morning_start:
            current_hour = wh.morning_start
        if wh.morning_end <= current_hour < wh.afternoon_start:
            current_hour = wh.afternoon_start
        if current_hour >= wh.afternoon_end:
            current_date += timedelta(days=1)
            current_hour = wh.morning_start

        while not self.is_working_day(current_date):
            current_date += timedelta(days=1)

        remaining = duration_hours
        while remaining > 0:
            if wh.morning_start <= current_hour < wh.morning_end:
                consumed = min(wh.morning_end - current_hour, remaining)
                remaining -= consumed
                current_hour = wh.morning_end
                if remaining > 0:
                    consumed = min(wh.afternoon_hours, remaining)
                    remaining -= consumed
                    current_hour = wh.afternoon_start + consumed
            elif wh.afternoon_start <= current_hour < wh.afternoon_end:
                consumed = min(wh.afternoon_end - current_hour, remaining)
                remaining -= consumed
                current_hour += consumed

            if remaining > 0:
                current_date = self.next_working_day(current_date)
                current_hour = wh.morning_start

        return ProjectedEnd(current_date, current_hour)

    def next_start_after(self, end_date: date, end_hour: int) -> tuple[date, int]:
        """
        Return the earliest start point following an end point.

        Ends at the close of the morning block resume after the break, ends at
        or after closing resume on the next working day at opening.
        """
        wh = self.work_hours
        if end_hour == wh.morning_end:
            return end_date, wh.afternoon_start
        if end_hour >= wh.afternoon_end:
            return self.next_working_day(end_date), wh.morning_start
        return end_date, end_hour

    def __repr__(self) -> str:
        wh = self.work_hours
        return (
            f"WorkCalendar({wh.morning_start}-{wh.morning_end}/"
            f"{wh.afternoon_start}-{wh.afternoon_end}, holidays={self.holidays!r})"
        )


def week_number(day: date) -> int:
    """ISO 8601 week number (1-53)."""
    return day.isocalendar()[1]


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def format_hour(hour: float) -> str:
    """Format a fractional hour as HH:MM (8 -> "08:00", 13.5 -> "13:30")."""
    hours = int(hour)
    minutes = round((hour - hours) * 60)
    return f"{hours:02d}:{minutes:02d}"


def parse_hour_string(value: str | None, default: int = 8) -> int:
    """
    Parse an "HH:MM[:SS]" string into its hour.

    Empty or unparseable values fall back to `default` (the opening hour).
    """
    if not value:
        return default
    try:
        hour = int(value.split(":")[0])
    except ValueError:
        logger.warning(f"Unparseable hour string '{value}', using {default}")
        return default
    return hour or default


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_hour(value, name: str) -> None:
    if not _is_int(value):
        raise InvalidScheduleInput(f"{name} must be an integer hour, got {value!r}")
    if not 0 <= value <= 23:
        raise InvalidScheduleInput(f"{name} must be within 0-23, got {value}")


def _check_date(value, name: str) -> None:
    # datetime is a date subclass but carries a time component
    if not isinstance(value, date) or isinstance(value, datetime):
        raise InvalidScheduleInput(f"{name} must be a calendar date, got {value!r}")
