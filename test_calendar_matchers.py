from __future__ import annotations

from datetime import date, datetime

import pytest

from calendar_errors import ConfigurationError
from calendar_matchers import (
    Constant,
    DateAfter,
    DateArray,
    DateBefore,
    DateInterval,
    DateRange,
    DayOfWeekSet,
    Predicate,
    SingleDate,
    matches,
    matches_any,
    to_matcher,
    to_matchers,
)

D = date(2022, 6, 13)


def test_to_matcher_coerces_loose_values() -> None:
    assert to_matcher(D) == SingleDate(D)
    assert to_matcher("2022-06-13") == SingleDate(D)
    assert to_matcher([D, date(2022, 6, 14)]) == DateArray(frozenset({D, date(2022, 6, 14)}))
    assert to_matcher({"from": D, "to": None}) == DateRange(D, None)
    assert to_matcher({"before": D}) == DateBefore(D)
    assert to_matcher({"after": D}) == DateAfter(D)
    assert to_matcher({"after": D, "before": date(2022, 6, 20)}) == DateInterval(
        after=D, before=date(2022, 6, 20)
    )
    assert to_matcher({"dayOfWeek": [0, 6]}) == DayOfWeekSet(frozenset({0, 6}))
    assert to_matcher({"day_of_week": 3}) == DayOfWeekSet(frozenset({3}))
    assert to_matcher(True) == Constant(True)
    assert isinstance(to_matcher(lambda d: d.day == 1), Predicate)


def test_to_matchers_splits_mixed_lists() -> None:
    assert to_matchers(None) == ()
    assert to_matchers([D, "2022-06-14"]) == (DateArray(frozenset({D, date(2022, 6, 14)})),)
    many = to_matchers([D, {"dayOfWeek": [0]}])
    assert many == (SingleDate(D), DayOfWeekSet(frozenset({0})))


@pytest.mark.parametrize(
    "value",
    [
        {"from": date(2022, 6, 20), "to": date(2022, 6, 10)},
        {"dayOfWeek": [7]},
        {"dayOfWeek": None},
        {"start": D},
        "not-a-date",
        3.5,
    ],
)
def test_to_matcher_rejects_malformed_values(value) -> None:
    with pytest.raises(ConfigurationError):
        to_matcher(value)


def test_inverted_range_is_rejected_at_evaluation() -> None:
    """A range built directly, bypassing coercion, still fails when used."""
    inverted = DateRange(date(2022, 6, 20), date(2022, 6, 10))
    with pytest.raises(ConfigurationError):
        matches(D, inverted)


def test_date_range_bounds_are_inclusive_and_open_when_missing() -> None:
    rng = DateRange(date(2022, 6, 10), date(2022, 6, 13))
    assert matches(date(2022, 6, 10), rng)
    assert matches(date(2022, 6, 13), rng)
    assert not matches(date(2022, 6, 14), rng)
    assert matches(date(1900, 1, 1), DateRange(None, D))
    assert matches(date(2100, 1, 1), DateRange(D, None))
    assert matches(D, DateRange())


def test_interval_matches_inside_or_outside() -> None:
    closed = DateInterval(after=date(2022, 6, 10), before=date(2022, 6, 13))
    assert matches(date(2022, 6, 11), closed)
    assert not matches(date(2022, 6, 10), closed)
    assert not matches(date(2022, 6, 13), closed)

    outside = DateInterval(after=date(2022, 6, 13), before=date(2022, 6, 10))
    assert matches(date(2022, 6, 9), outside)
    assert matches(date(2022, 6, 14), outside)
    assert not matches(date(2022, 6, 11), outside)


def test_before_after_weekday_predicate_and_constant() -> None:
    assert matches(date(2022, 6, 12), DateBefore(D))
    assert not matches(D, DateBefore(D))
    assert matches(date(2022, 6, 14), DateAfter(D))
    assert not matches(D, DateAfter(D))
    weekend = DayOfWeekSet(frozenset({0, 6}))
    assert matches(date(2022, 6, 12), weekend)
    assert matches(date(2022, 6, 18), weekend)
    assert not matches(D, weekend)
    assert matches(D, Predicate(lambda d: d.day == 13))
    assert matches(D, Constant(True))
    assert not matches(D, Constant(False))


def test_matches_any() -> None:
    assert matches_any(D, [Constant(False), SingleDate(D)])
    assert not matches_any(D, [])


def test_matchers_built_with_datetimes_compare_by_day() -> None:
    morning = datetime(2022, 6, 13, 9, 30)
    assert SingleDate(morning) == SingleDate(D)
    assert matches(D, SingleDate(morning))
    assert matches(D, DateArray(frozenset({morning})))
    assert matches(D, to_matcher(DateRange(datetime(2022, 6, 1, 9), None)))
    assert matches(D, DateRange(None, morning))
    assert not matches(D, DateBefore(morning))
    assert not matches(D, DateAfter(morning))
    overnight = DateInterval(after=datetime(2022, 6, 12, 23), before=datetime(2022, 6, 14, 1))
    assert matches(D, overnight)
