"""Month grids: weeks of seven days, each day tagged with its modifiers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import date

from calendar_errors import ConfigurationError
from calendar_logic import (
    MONDAY,
    YearMonth,
    add_days,
    end_of_week,
    iso_week_number,
    iter_days,
    start_of_week,
    week_number,
)
from calendar_modifiers import (
    DayModifierSet,
    InternalModifiers,
    ModifierMap,
    resolve,
    validate_modifiers,
)

WEEKS_IN_FIXED_MONTH = 6


@dataclass(frozen=True)
class CalendarDay:
    """One date in a month grid.

    Equality and hashing look at the date only: the same date shown as an
    outside day of one month and an inside day of the next compares equal.
    """

    date: date
    in_displayed_month: bool = field(default=True, compare=False)
    index: int = field(default=0, compare=False)
    modifiers: DayModifierSet = field(default=(), compare=False)

    def has(self, modifier: str) -> bool:
        return modifier in self.modifiers


@dataclass(frozen=True)
class WeekRow:
    number: int
    days: tuple[CalendarDay, ...]

    def __iter__(self) -> Iterator[CalendarDay]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)


@dataclass(frozen=True)
class MonthMatrix:
    month: YearMonth
    weeks: tuple[WeekRow, ...]

    def days(self) -> Iterator[CalendarDay]:
        """Yield every day of the grid, outside days included."""
        for week in self.weeks:
            yield from week.days

    def find(self, d: date) -> CalendarDay | None:
        """Return the grid cell for ``d``, preferring an in-month cell."""
        found = None
        for day in self.days():
            if day.date == d:
                if day.in_displayed_month:
                    return day
                found = day
        return found

    @property
    def first_day(self) -> date:
        return self.weeks[0].days[0].date

    @property
    def last_day(self) -> date:
        return self.weeks[-1].days[-1].date


def check_first_day_of_week(first_day_of_week: int) -> None:
    if (
        not isinstance(first_day_of_week, int)
        or isinstance(first_day_of_week, bool)
        or not 0 <= first_day_of_week <= 6
    ):
        raise ConfigurationError(
            f"first day of week must be between 0 (Sun) and 6 (Sat), got {first_day_of_week!r}"
        )


def grid_bounds(
    month: YearMonth, first_day_of_week: int, fixed_weeks: bool = False
) -> tuple[date, date]:
    """Return the first and last date shown for ``month``.

    With ``fixed_weeks`` the grid is padded at the end to six rows so the
    calendar height stays constant.
    """
    first = start_of_week(month.first_day, first_day_of_week)
    last = end_of_week(month.last_day, first_day_of_week)
    if fixed_weeks:
        weeks = ((last - first).days + 1) // 7
        last = add_days(last, 7 * (WEEKS_IN_FIXED_MONTH - weeks))
    return first, last


def build_month(
    month: YearMonth,
    first_day_of_week: int,
    modifiers: ModifierMap | None,
    today: date,
    *,
    internal: InternalModifiers | None = None,
    fixed_weeks: bool = False,
    iso_week: bool = False,
    show_outside_days: bool = True,
) -> MonthMatrix:
    """Build the grid of ``month`` with every day's modifiers resolved.

    ``iso_week`` starts weeks on Monday and numbers them the ISO way. When
    ``show_outside_days`` is off, days of neighbouring months are hidden.
    """
    if iso_week:
        first_day_of_week = MONDAY
    check_first_day_of_week(first_day_of_week)
    modifiers = validate_modifiers(modifiers)
    month = YearMonth(*month)

    first, last = grid_bounds(month, first_day_of_week, fixed_weeks)
    weeks: list[WeekRow] = []
    row: list[CalendarDay] = []
    for d in iter_days(first, last):
        day = CalendarDay(d, YearMonth.of(d) == month, len(row))
        day = replace(
            day,
            modifiers=resolve(
                day, modifiers, today, internal, hide_outside_days=not show_outside_days
            ),
        )
        row.append(day)
        if len(row) == 7:
            anchor = row[0].date
            number = (
                iso_week_number(anchor) if iso_week else week_number(anchor, first_day_of_week)
            )
            weeks.append(WeekRow(number, tuple(row)))
            row = []
    return MonthMatrix(month, tuple(weeks))
