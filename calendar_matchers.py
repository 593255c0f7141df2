"""Matchers: which calendar dates belong to a modifier.

A matcher is one of a closed set of frozen dataclasses. Loose values (a
date, a list of dates, a callable, a ``{"from": ..., "to": ...}`` mapping)
are turned into one with :func:`to_matcher`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime

from calendar_errors import ConfigurationError
from calendar_logic import day_of_week, to_date


def _drop_time(matcher, *names: str) -> None:
    for name in names:
        object.__setattr__(matcher, name, to_date(getattr(matcher, name)))


@dataclass(frozen=True)
class SingleDate:
    value: date

    def __post_init__(self) -> None:
        _drop_time(self, "value")


@dataclass(frozen=True)
class DateArray:
    dates: frozenset[date]

    def __post_init__(self) -> None:
        object.__setattr__(self, "dates", frozenset(to_date(d) for d in self.dates))


@dataclass(frozen=True)
class DateRange:
    """Days from ``from_date`` to ``to_date`` inclusive; a missing bound is open."""

    from_date: date | None = None
    to_date: date | None = None

    def __post_init__(self) -> None:
        _drop_time(self, "from_date", "to_date")


@dataclass(frozen=True)
class DateBefore:
    """Days strictly before ``before``."""

    before: date

    def __post_init__(self) -> None:
        _drop_time(self, "before")


@dataclass(frozen=True)
class DateAfter:
    """Days strictly after ``after``."""

    after: date

    def __post_init__(self) -> None:
        _drop_time(self, "after")


@dataclass(frozen=True)
class DateInterval:
    """Days strictly between ``after`` and ``before``.

    When ``before`` is not later than ``after`` the interval is open and
    matches the days outside it instead.
    """

    after: date
    before: date

    def __post_init__(self) -> None:
        _drop_time(self, "after", "before")


@dataclass(frozen=True)
class DayOfWeekSet:
    """Days whose weekday (0 = Sunday) is in ``days``."""

    days: frozenset[int]


@dataclass(frozen=True)
class Predicate:
    func: Callable[[date], bool]


@dataclass(frozen=True)
class Constant:
    """Matches every day (True) or none (False)."""

    value: bool


Matcher = (
    SingleDate
    | DateArray
    | DateRange
    | DateBefore
    | DateAfter
    | DateInterval
    | DayOfWeekSet
    | Predicate
    | Constant
)

MATCHER_TYPES = (
    SingleDate,
    DateArray,
    DateRange,
    DateBefore,
    DateAfter,
    DateInterval,
    DayOfWeekSet,
    Predicate,
    Constant,
)


# --- coercion ---------------------------------------------------------------

def _as_date(value, what: str) -> date:
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigurationError(f"{what}: invalid date {value!r}") from exc
    raise ConfigurationError(f"{what}: expected a date, got {type(value).__name__}")


def _as_optional_date(value, what: str) -> date | None:
    if value is None:
        return None
    return _as_date(value, what)


def _from_mapping(value: Mapping) -> Matcher:
    keys = set(value)
    if keys <= {"from", "to"} and keys:
        return DateRange(
            _as_optional_date(value.get("from"), "range 'from'"),
            _as_optional_date(value.get("to"), "range 'to'"),
        )
    if keys == {"before", "after"}:
        return DateInterval(
            after=_as_date(value["after"], "interval 'after'"),
            before=_as_date(value["before"], "interval 'before'"),
        )
    if keys == {"before"}:
        return DateBefore(_as_date(value["before"], "'before'"))
    if keys == {"after"}:
        return DateAfter(_as_date(value["after"], "'after'"))
    if keys in ({"dayOfWeek"}, {"day_of_week"}):
        days = value.get("dayOfWeek", value.get("day_of_week"))
        if isinstance(days, int):
            days = [days]
        if not isinstance(days, (list, tuple, set, frozenset)):
            raise ConfigurationError(f"day of week must be a list, got {days!r}")
        return DayOfWeekSet(frozenset(days))
    raise ConfigurationError(f"unrecognised matcher keys: {sorted(keys)}")


def to_matcher(value) -> Matcher:
    """Turn a loose matcher description into a validated :data:`Matcher`."""
    if isinstance(value, MATCHER_TYPES):
        matcher = value
    elif isinstance(value, bool):
        matcher = Constant(value)
    elif isinstance(value, (date, datetime, str)):
        matcher = SingleDate(_as_date(value, "date matcher"))
    elif isinstance(value, Mapping):
        matcher = _from_mapping(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        matcher = DateArray(frozenset(_as_date(v, "date list") for v in value))
    elif callable(value):
        matcher = Predicate(value)
    else:
        raise ConfigurationError(f"unsupported matcher: {value!r}")
    validate_matcher(matcher)
    return matcher


def to_matchers(value) -> tuple[Matcher, ...]:
    """Coerce one matcher or a list of matchers into a tuple.

    A plain list of dates stays a single :class:`DateArray`; a list that
    holds anything else is read as several matchers.
    """
    if value is None:
        return ()
    if isinstance(value, (list, tuple)) and not all(
        isinstance(v, (date, datetime, str)) for v in value
    ):
        return tuple(to_matcher(v) for v in value)
    return (to_matcher(value),)


def validate_matcher(matcher: Matcher) -> None:
    """Raise :class:`ConfigurationError` for a matcher that can never be right."""
    if isinstance(matcher, DateRange):
        if (
            matcher.from_date is not None
            and matcher.to_date is not None
            and matcher.from_date > matcher.to_date
        ):
            raise ConfigurationError(
                f"date range is inverted: {matcher.from_date} > {matcher.to_date}"
            )
    elif isinstance(matcher, DayOfWeekSet):
        bad = [d for d in matcher.days if not isinstance(d, int) or not 0 <= d <= 6]
        if bad:
            raise ConfigurationError(f"day of week must be 0..6, got {bad}")
    elif isinstance(matcher, Predicate):
        if not callable(matcher.func):
            raise ConfigurationError(f"predicate is not callable: {matcher.func!r}")
    elif not isinstance(matcher, MATCHER_TYPES):
        raise ConfigurationError(f"not a matcher: {matcher!r}")


# --- evaluation -------------------------------------------------------------

def matches(day: date, matcher: Matcher) -> bool:
    """Return True when ``day`` is selected by ``matcher``."""
    if isinstance(matcher, SingleDate):
        return day == matcher.value
    if isinstance(matcher, DateArray):
        return day in matcher.dates
    if isinstance(matcher, DateRange):
        validate_matcher(matcher)
        if matcher.from_date is not None and day < matcher.from_date:
            return False
        if matcher.to_date is not None and day > matcher.to_date:
            return False
        return True
    if isinstance(matcher, DateBefore):
        return day < matcher.before
    if isinstance(matcher, DateAfter):
        return day > matcher.after
    if isinstance(matcher, DateInterval):
        if matcher.after < matcher.before:
            return matcher.after < day < matcher.before
        return day < matcher.before or day > matcher.after
    if isinstance(matcher, DayOfWeekSet):
        return day_of_week(day) in matcher.days
    if isinstance(matcher, Predicate):
        return bool(matcher.func(day))
    if isinstance(matcher, Constant):
        return matcher.value
    raise ConfigurationError(f"not a matcher: {matcher!r}")


def matches_any(day: date, matchers: Iterable[Matcher]) -> bool:
    return any(matches(day, m) for m in matchers)
