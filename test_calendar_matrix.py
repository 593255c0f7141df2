from __future__ import annotations

from datetime import date, timedelta

import pytest

from calendar_errors import ConfigurationError
from calendar_logic import YearMonth, day_of_week
from calendar_matrix import CalendarDay, build_month, grid_bounds
from calendar_modifiers import internal_modifiers

MONTHS = [YearMonth(year, month) for year in (2015, 2020, 2021, 2022, 2024) for month in range(1, 13)]


def test_june_2022_starting_sunday(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today)
    assert matrix.first_day == date(2022, 5, 29)
    assert matrix.last_day == date(2022, 7, 2)
    assert len(matrix.weeks) == 5


@pytest.mark.parametrize("first_day_of_week", range(7))
def test_every_grid_is_whole_consecutive_weeks(first_day_of_week: int, today: date) -> None:
    for month in MONTHS:
        matrix = build_month(month, first_day_of_week, {}, today)
        assert 4 <= len(matrix.weeks) <= 6
        days = list(matrix.days())
        assert all(len(week) == 7 for week in matrix.weeks)
        assert day_of_week(days[0].date) == first_day_of_week
        for previous, current in zip(days, days[1:]):
            assert current.date - previous.date == timedelta(days=1)
        inside = [d.date for d in days if d.in_displayed_month]
        assert inside[0] == month.first_day
        assert inside[-1] == month.last_day
        assert all((YearMonth.of(d.date) == month) == d.in_displayed_month for d in days)
        assert all(d.has("outside") != d.in_displayed_month for d in days)


def test_february_2015_fits_in_four_weeks(today: date) -> None:
    matrix = build_month(YearMonth(2015, 2), 0, {}, today)
    assert len(matrix.weeks) == 4
    assert not any(d.has("outside") for d in matrix.days())


def test_fixed_weeks_always_gives_six_rows(today: date) -> None:
    for month in MONTHS:
        matrix = build_month(month, 1, {}, today, fixed_weeks=True)
        assert len(matrix.weeks) == 6
    first, last = grid_bounds(YearMonth(2015, 2), 0, fixed_weeks=True)
    assert (last - first).days + 1 == 42


def test_day_index_within_week(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today)
    for week in matrix.weeks:
        assert [d.index for d in week] == list(range(7))


def test_iso_week_starts_on_monday(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today, iso_week=True)
    assert matrix.first_day == date(2022, 5, 30)
    assert [week.number for week in matrix.weeks] == [22, 23, 24, 25, 26]


def test_week_numbers_for_sunday_weeks(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today)
    assert [week.number for week in matrix.weeks] == [23, 24, 25, 26, 27]


def test_days_carry_resolved_modifiers(june: YearMonth, today: date) -> None:
    internal = internal_modifiers(disabled={"dayOfWeek": [0]}, selection=date(2022, 6, 15))
    matrix = build_month(june, 0, {"payday": date(2022, 6, 30)}, today, internal=internal)
    assert matrix.find(today).modifiers == ("today",)
    assert matrix.find(date(2022, 6, 15)).modifiers == ("selected",)
    assert matrix.find(date(2022, 6, 30)).modifiers == ("payday",)
    assert matrix.find(date(2022, 5, 29)).modifiers == ("disabled", "outside")


def test_outside_days_hidden_when_not_shown(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today, show_outside_days=False)
    assert matrix.find(date(2022, 7, 1)).modifiers == ("hidden", "outside")
    assert matrix.find(date(2022, 6, 30)).modifiers == ()


def test_build_is_deterministic(june: YearMonth, today: date) -> None:
    modifiers = {"weekend": {"dayOfWeek": [0, 6]}}
    first = build_month(june, 1, modifiers, today)
    second = build_month(june, 1, modifiers, today)
    assert first == second
    assert [d.modifiers for d in first.days()] == [d.modifiers for d in second.days()]


def test_calendar_day_identity_is_the_date() -> None:
    d = date(2022, 6, 1)
    assert CalendarDay(d, True, 3) == CalendarDay(d, False, 0, ("outside",))
    assert len({CalendarDay(d, True), CalendarDay(d, False)}) == 1


def test_find_prefers_the_in_month_cell(june: YearMonth, today: date) -> None:
    matrix = build_month(june, 0, {}, today)
    assert matrix.find(date(2022, 5, 29)).in_displayed_month is False
    assert matrix.find(date(2022, 6, 1)).in_displayed_month is True
    assert matrix.find(date(2022, 8, 1)) is None


@pytest.mark.parametrize("first_day_of_week", [-1, 7, True, "0"])
def test_invalid_first_day_of_week(first_day_of_week, june: YearMonth, today: date) -> None:
    with pytest.raises(ConfigurationError):
        build_month(june, first_day_of_week, {}, today)


def test_reserved_modifier_fails_before_building(june: YearMonth, today: date) -> None:
    with pytest.raises(ConfigurationError):
        build_month(june, 0, {"selected": today}, today)
