"""Pure calendar calculations — no UI dependencies.

Days of the week are numbered 0 (Sunday) to 6 (Saturday) throughout the
picker; ``date.weekday()`` numbering (Monday = 0) never leaves this module.
"""

from __future__ import annotations

import calendar
from datetime import MAXYEAR, date, datetime, timedelta
from typing import NamedTuple

SUNDAY = 0
MONDAY = 1


class YearMonth(NamedTuple):
    """A calendar month. Tuple ordering is chronological."""

    year: int
    month: int

    @classmethod
    def of(cls, d: date) -> YearMonth:
        """Return the month containing ``d``."""
        return cls(d.year, d.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, days_in_month(self.year, self.month))

    def shift(self, months: int) -> YearMonth:
        """Return the month ``months`` months later (earlier if negative)."""
        index = self.year * 12 + (self.month - 1) + months
        year, month0 = divmod(index, 12)
        return YearMonth(year, month0 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def to_date(value: date) -> date:
    """Drop the time part of a ``datetime``; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def day_of_week(d: date) -> int:
    """Return 0 for Sunday through 6 for Saturday."""
    return (d.weekday() + 1) % 7


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d.year, d.month))


def start_of_week(d: date, first_day_of_week: int = SUNDAY) -> date:
    """Return the most recent ``first_day_of_week`` on or before ``d``."""
    back = (day_of_week(d) - first_day_of_week) % 7
    return d - timedelta(days=back)


def end_of_week(d: date, first_day_of_week: int = SUNDAY) -> date:
    """Return the next ``(first_day_of_week + 6) % 7`` on or after ``d``."""
    return start_of_week(d, first_day_of_week) + timedelta(days=6)


def months_between(start: YearMonth, end: YearMonth) -> int:
    """Return how many months ``end`` lies after ``start`` (negative if before)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def iter_days(first: date, last: date):
    """Yield every date from ``first`` to ``last`` inclusive."""
    d = first
    while d <= last:
        yield d
        d += timedelta(days=1)


def iso_week_number(d: date) -> int:
    return d.isocalendar()[1]


def _week_start_ordinal(d: date, first_day_of_week: int) -> int:
    return d.toordinal() - (day_of_week(d) - first_day_of_week) % 7


def week_number(d: date, first_day_of_week: int = SUNDAY) -> int:
    """Return the week number of ``d``.

    Week 1 is the week (starting on ``first_day_of_week``) that contains
    1 January, so the last days of December may already be in week 1 of
    the following year.
    """
    week_start = _week_start_ordinal(d, first_day_of_week)
    if d.year < MAXYEAR:
        next_year_start = _week_start_ordinal(date(d.year + 1, 1, 1), first_day_of_week)
        if week_start >= next_year_start:
            return 1
    year_start = _week_start_ordinal(date(d.year, 1, 1), first_day_of_week)
    return (week_start - year_start) // 7 + 1
