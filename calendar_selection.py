"""Selection state transitions for single, multiple and range modes.

Every function takes the current state and returns the next one; nothing
is mutated. A click that changes nothing (unselectable day, full
multiple selection, ``required`` toggle-off) returns the input state
object itself, so callers can detect it with ``is``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from calendar_logic import to_date

logger = logging.getLogger(__name__)


class SelectionMode(str, Enum):
    DEFAULT = "default"
    SINGLE = "single"
    MULTIPLE = "multiple"
    RANGE = "range"


@dataclass(frozen=True)
class RangeSelection:
    """A possibly incomplete date range. ``from_date <= to_date`` when both are set."""

    from_date: date | None = None
    to_date: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_date", to_date(self.from_date))
        object.__setattr__(self, "to_date", to_date(self.to_date))
        if self.is_complete and self.from_date > self.to_date:
            start, end = self.to_date, self.from_date
            object.__setattr__(self, "from_date", start)
            object.__setattr__(self, "to_date", end)

    @property
    def is_complete(self) -> bool:
        return self.from_date is not None and self.to_date is not None

    def __contains__(self, d: date) -> bool:
        if not self.is_complete:
            return d == self.from_date or d == self.to_date
        return self.from_date <= d <= self.to_date


SingleSelection = date | None
MultipleSelection = frozenset[date]
SelectionState = SingleSelection | MultipleSelection | RangeSelection


def empty_selection(mode: SelectionMode | str) -> SelectionState:
    """Return the empty state for ``mode``."""
    mode = SelectionMode(mode)
    if mode is SelectionMode.MULTIPLE:
        return frozenset()
    if mode is SelectionMode.RANGE:
        return RangeSelection()
    return None


# --- single -----------------------------------------------------------------

def select_single(
    state: SingleSelection,
    day: date,
    *,
    selectable: bool = True,
    required: bool = False,
) -> SingleSelection:
    if not selectable:
        return state
    if state == day:
        # Re-click toggles off unless a selection is required
        return state if required else None
    return day


# --- multiple ---------------------------------------------------------------

def select_multiple(
    state: MultipleSelection,
    day: date,
    *,
    selectable: bool = True,
    max_count: int | None = None,
    min_count: int | None = None,
) -> MultipleSelection:
    if not selectable:
        return state
    if day in state:
        if min_count is not None and len(state) <= min_count:
            logger.debug("Keeping %s: selection already at minimum %d", day, min_count)
            return state
        return state - {day}
    if max_count is not None and len(state) >= max_count:
        logger.debug("Ignoring %s: selection already at maximum %d", day, max_count)
        return state
    return state | {day}


# --- range ------------------------------------------------------------------

def select_range(
    state: RangeSelection,
    day: date,
    *,
    selectable: bool = True,
    required: bool = False,
    extend: bool = False,
) -> RangeSelection:
    if not selectable:
        return state
    start, end = state.from_date, state.to_date

    if start is None and end is None:
        return RangeSelection(day, None)

    if start is None:
        # Only an end is known; treat it as the anchor
        start, end = end, None

    if end is None:
        if day < start:
            return RangeSelection(day, start)
        if day == start and required:
            return RangeSelection(day, None)
        return RangeSelection(start, day)

    if extend:
        if day < start:
            return RangeSelection(day, end)
        return RangeSelection(start, day)
    return RangeSelection(day, None)


def range_length(state: RangeSelection) -> int:
    """Return the number of days in a complete range, inclusive; 0 otherwise."""
    if not state.is_complete:
        return 0
    return (state.to_date - state.from_date).days + 1


# --- dispatch ---------------------------------------------------------------

def select(
    state: SelectionState,
    day: date,
    is_selectable: bool,
    extend_key_held: bool = False,
    mode: SelectionMode | str = SelectionMode.SINGLE,
    *,
    required: bool = False,
    max_count: int | None = None,
    min_count: int | None = None,
) -> SelectionState:
    """Apply one click on ``day`` to ``state`` and return the next state.

    ``is_selectable`` is the only admission check: pass False for days that
    resolve as disabled or hidden and the state comes back unchanged.
    ``extend_key_held`` only affects range mode, where it grows a complete
    range instead of starting a new one.
    """
    mode = SelectionMode(mode)
    day = to_date(day)
    if not is_selectable:
        logger.debug("Ignoring click on unselectable day %s", day)
        return state
    if mode is SelectionMode.SINGLE:
        if isinstance(state, datetime):
            state = to_date(state)
        return select_single(state, day, required=required)
    if mode is SelectionMode.MULTIPLE:
        if not isinstance(state, frozenset) or any(isinstance(d, datetime) for d in state):
            state = frozenset(to_date(d) for d in state or ())
        return select_multiple(state, day, max_count=max_count, min_count=min_count)
    if mode is SelectionMode.RANGE:
        return select_range(
            state if state is not None else RangeSelection(),
            day,
            required=required,
            extend=extend_key_held,
        )
    return state
