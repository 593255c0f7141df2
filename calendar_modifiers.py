"""Modifier resolution: which named tags apply to a day on one render pass."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import TYPE_CHECKING

from calendar_errors import ConfigurationError
from calendar_logic import add_days, to_date
from calendar_matchers import (
    DateAfter,
    DateArray,
    DateBefore,
    DateInterval,
    DateRange,
    Matcher,
    Predicate,
    SingleDate,
    matches_any,
    to_matchers,
)
from calendar_selection import MultipleSelection, RangeSelection, SelectionState

if TYPE_CHECKING:
    from calendar_matrix import CalendarDay

DISABLED = "disabled"
HIDDEN = "hidden"
SELECTED = "selected"
TODAY = "today"
OUTSIDE = "outside"
RANGE_START = "range-start"
RANGE_MIDDLE = "range-middle"
RANGE_END = "range-end"

RESERVED_MODIFIERS = frozenset(
    {DISABLED, HIDDEN, SELECTED, TODAY, OUTSIDE, RANGE_START, RANGE_MIDDLE, RANGE_END}
)

# Resolution order of the modifiers derived from configuration and selection
_INTERNAL_ORDER = (DISABLED, HIDDEN, SELECTED, RANGE_START, RANGE_MIDDLE, RANGE_END)

ModifierMap = Mapping[str, object]
InternalModifiers = dict[str, tuple[Matcher, ...]]
DayModifierSet = tuple[str, ...]


def validate_modifiers(modifiers: ModifierMap | None) -> dict[str, tuple[Matcher, ...]]:
    """Return ``modifiers`` with every value coerced to a tuple of matchers.

    Raises ConfigurationError for reserved or empty names and malformed
    matchers.
    """
    validated: dict[str, tuple[Matcher, ...]] = {}
    for name, value in (modifiers or {}).items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"modifier name must be a non-empty string: {name!r}")
        if name in RESERVED_MODIFIERS:
            raise ConfigurationError(f"modifier name {name!r} is reserved")
        validated[name] = to_matchers(value)
    return validated


def selection_modifiers(selection: SelectionState) -> InternalModifiers:
    """Return the ``selected`` and ``range-*`` matchers for a selection state."""
    if selection is None:
        return {}
    if isinstance(selection, date):
        return {SELECTED: (SingleDate(selection),)}
    if isinstance(selection, RangeSelection):
        start, end = selection.from_date, selection.to_date
        if start is None and end is None:
            return {}
        if start is None or end is None:
            anchor = SingleDate(start if start is not None else end)
            return {SELECTED: (anchor,), RANGE_START: (anchor,), RANGE_END: (anchor,)}
        result: InternalModifiers = {
            SELECTED: (DateRange(start, end),),
            RANGE_START: (SingleDate(start),),
            RANGE_END: (SingleDate(end),),
        }
        if start != end:
            result[RANGE_MIDDLE] = (DateInterval(after=start, before=end),)
        return result
    # Multiple selection
    if not selection:
        return {}
    return {SELECTED: (DateArray(frozenset(selection)),)}


def range_length_matchers(
    selection: RangeSelection,
    min_days: int | None = None,
    max_days: int | None = None,
) -> tuple[Matcher, ...]:
    """Return matchers for the days that cannot end a half-open range.

    Only applies while ``from_date`` is set and ``to_date`` is not; a range
    ending on a matched day would be shorter than ``min_days`` or longer
    than ``max_days`` (both counted inclusively).
    """
    anchor = selection.from_date
    if anchor is None or selection.to_date is not None:
        return ()
    matchers: list[Matcher] = []
    if min_days is not None and min_days > 1:
        matchers.append(
            DateInterval(
                after=_add_days_clamped(anchor, -(min_days - 1)),
                before=_add_days_clamped(anchor, min_days - 1),
            )
        )
    if max_days is not None and max_days > 0:
        matchers.append(DateBefore(_add_days_clamped(anchor, -(max_days - 1))))
        matchers.append(DateAfter(_add_days_clamped(anchor, max_days - 1)))
    return tuple(matchers)


def _add_days_clamped(d: date, n: int) -> date:
    try:
        return add_days(d, n)
    except OverflowError:
        return date.max if n > 0 else date.min


def capacity_matchers(selection: MultipleSelection, max_count: int | None) -> tuple[Matcher, ...]:
    """Return a matcher for the days a full multiple selection cannot take."""
    if max_count is None or len(selection) < max_count:
        return ()
    chosen = frozenset(to_date(d) for d in selection)
    return (Predicate(lambda d: d not in chosen),)


def internal_modifiers(
    *,
    disabled=None,
    hidden=None,
    selection: SelectionState = None,
    from_date: date | None = None,
    to_date: date | None = None,
    range_min: int | None = None,
    range_max: int | None = None,
    multiple_max: int | None = None,
) -> InternalModifiers:
    """Collect the reserved modifiers for one render pass.

    ``disabled`` and ``hidden`` take anything :func:`to_matchers` accepts.
    Days before ``from_date`` and after ``to_date`` are disabled too, and so
    are the unselected days once a multiple selection holds ``multiple_max``
    days.
    """
    disabled_matchers = list(to_matchers(disabled))
    if from_date is not None:
        disabled_matchers.append(DateBefore(from_date))
    if to_date is not None:
        disabled_matchers.append(DateAfter(to_date))
    if isinstance(selection, RangeSelection):
        disabled_matchers.extend(range_length_matchers(selection, range_min, range_max))
    elif isinstance(selection, frozenset):
        disabled_matchers.extend(capacity_matchers(selection, multiple_max))

    result: InternalModifiers = {}
    if disabled_matchers:
        result[DISABLED] = tuple(disabled_matchers)
    hidden_matchers = to_matchers(hidden)
    if hidden_matchers:
        result[HIDDEN] = hidden_matchers
    result.update(selection_modifiers(selection))
    return result


def resolve(
    day: CalendarDay,
    modifiers: ModifierMap | None,
    today: date,
    internal: InternalModifiers | None = None,
    hide_outside_days: bool = False,
) -> DayModifierSet:
    """Return the names of the modifiers active for ``day``.

    Custom modifiers come first in their mapping order, then the reserved
    ones derived from configuration and selection, then ``today`` and
    ``outside``. Raises ConfigurationError for a reserved custom name or a
    malformed matcher.
    """
    active: list[str] = []
    for name, matchers in validate_modifiers(modifiers).items():
        if matches_any(day.date, matchers):
            active.append(name)

    internal = internal or {}
    outside = not day.in_displayed_month
    for name in _INTERNAL_ORDER:
        if matches_any(day.date, internal.get(name, ())):
            active.append(name)
        elif name == HIDDEN and outside and hide_outside_days:
            active.append(name)

    if day.date == today:
        active.append(TODAY)
    if outside:
        active.append(OUTSIDE)
    return tuple(active)


def is_selectable(modifiers: Iterable[str]) -> bool:
    """A day can be clicked unless it is disabled or hidden."""
    names = set(modifiers)
    return DISABLED not in names and HIDDEN not in names
