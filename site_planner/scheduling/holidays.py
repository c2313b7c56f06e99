# site_planner/scheduling/holidays.py
"""
Holiday providers for the working calendar.

Holidays are plain calendar dates (no recurrence rules). The default list
covers French public holidays for 2025-2027 and is meant to be extended
through configuration rather than edited here.
"""

from datetime import date
from typing import Iterable, Protocol, runtime_checkable

FRENCH_HOLIDAYS: tuple[date, ...] = (
    # 2025
    date(2025, 1, 1),
    date(2025, 4, 21),
    date(2025, 5, 1),
    date(2025, 5, 8),
    date(2025, 5, 29),
    date(2025, 6, 9),
    date(2025, 7, 14),
    date(2025, 8, 15),
    date(2025, 11, 1),
    date(2025, 11, 11),
    date(2025, 12, 25),
    # 2026
    date(2026, 1, 1),
    date(2026, 4, 6),
    date(2026, 5, 1),
    date(2026, 5, 8),
    date(2026, 5, 14),
    date(2026, 5, 25),
    date(2026, 7, 14),
    date(2026, 8, 15),
    date(2026, 11, 1),
    date(2026, 11, 11),
    date(2026, 12, 25),
    # 2027
    date(2027, 1, 1),
    date(2027, 3, 29),
    date(2027, 5, 1),
    date(2027, 5, 6),
    date(2027, 5, 8),
    date(2027, 5, 17),
    date(2027, 7, 14),
    date(2027, 8, 15),
    date(2027, 11, 1),
    date(2027, 11, 11),
    date(2027, 12, 25),
)


@runtime_checkable
class HolidayProvider(Protocol):
    """Anything that can tell whether a calendar date is a holiday."""

    def is_holiday(self, day: date) -> bool: ...


class FixedHolidays:
    """
    Holiday provider backed by an explicit set of dates.

    Args:
        dates: Holiday dates (duplicates are ignored)
    """

    def __init__(self, dates: Iterable[date] = ()) -> None:
        self._dates = frozenset(dates)

    def is_holiday(self, day: date) -> bool:
        return day in self._dates

    def __len__(self) -> int:
        return len(self._dates)

    def __repr__(self) -> str:
        return f"FixedHolidays({len(self._dates)} dates)"


class NoHolidays:
    """Provider for calendars without any holiday."""

    def is_holiday(self, day: date) -> bool:
        return False


def default_holidays() -> FixedHolidays:
    """Return the built-in French public holiday provider."""
    return FixedHolidays(FRENCH_HOLIDAYS)
