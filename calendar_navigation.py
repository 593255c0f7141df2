"""Multi-month display window with paging clamped to month limits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from calendar_errors import ConfigurationError
from calendar_logic import YearMonth, months_between
from calendar_matrix import MonthMatrix, build_month
from calendar_modifiers import InternalModifiers, ModifierMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayWindow:
    """The consecutive months currently shown, starting at ``pivot``."""

    pivot: YearMonth
    count: int
    from_limit: YearMonth | None = None
    to_limit: YearMonth | None = None

    @property
    def months(self) -> tuple[YearMonth, ...]:
        return tuple(self.pivot.shift(i) for i in range(self.size))

    @property
    def size(self) -> int:
        """Number of months shown; smaller than ``count`` when the limits are narrower."""
        if self.from_limit is not None and self.to_limit is not None:
            return min(self.count, months_between(self.from_limit, self.to_limit) + 1)
        return self.count

    @property
    def first(self) -> YearMonth:
        return self.pivot

    @property
    def last(self) -> YearMonth:
        return self.pivot.shift(self.size - 1)

    def contains(self, d: date) -> bool:
        """Return True if ``d`` falls in one of the displayed months."""
        return self.first <= YearMonth.of(d) <= self.last

    def __iter__(self):
        return iter(self.months)


# First and last months whose six-week grids fit between date.min and date.max
EARLIEST_MONTH = YearMonth(1, 2)
LATEST_MONTH = YearMonth(9999, 11)


def check_limits(from_limit: YearMonth | None, to_limit: YearMonth | None) -> None:
    if from_limit is not None and to_limit is not None and from_limit > to_limit:
        raise ConfigurationError(f"from month {from_limit} is after to month {to_limit}")


def _clamp_pivot(
    pivot: YearMonth,
    size: int,
    from_limit: YearMonth | None,
    to_limit: YearMonth | None,
) -> YearMonth:
    lower = max(from_limit or EARLIEST_MONTH, EARLIEST_MONTH)
    upper = min(to_limit or LATEST_MONTH, LATEST_MONTH)
    if pivot.shift(size - 1) > upper:
        pivot = upper.shift(-(size - 1))
    if pivot < lower:
        pivot = lower
    return pivot


def window(
    pivot_month: YearMonth,
    count: int = 1,
    from_limit: YearMonth | None = None,
    to_limit: YearMonth | None = None,
) -> DisplayWindow:
    """Return a window of ``count`` months starting at ``pivot_month``, clamped to the limits."""
    if not isinstance(count, int) or count < 1:
        raise ConfigurationError(f"number of months must be at least 1, got {count!r}")
    from_limit = YearMonth(*from_limit) if from_limit is not None else None
    to_limit = YearMonth(*to_limit) if to_limit is not None else None
    check_limits(from_limit, to_limit)
    draft = DisplayWindow(YearMonth(*pivot_month), count, from_limit, to_limit)
    pivot = _clamp_pivot(draft.pivot, draft.size, from_limit, to_limit)
    if pivot != draft.pivot:
        logger.debug("Clamped pivot %s to %s", draft.pivot, pivot)
    return DisplayWindow(pivot, count, from_limit, to_limit)


def page(current: DisplayWindow, direction: int, step: int | None = None) -> DisplayWindow:
    """Move the window ``step`` months (default: a full page) forwards or backwards.

    ``direction`` is 1 for forwards or -1 for backwards. The window stops
    at the limits and never wraps around.
    """
    if direction not in (-1, 1):
        raise ConfigurationError(f"paging direction must be 1 or -1, got {direction!r}")
    if step is None:
        step = current.count
    offset = step if direction > 0 else -step
    return go_to(current, current.pivot.shift(offset))


def go_to(current: DisplayWindow, month: YearMonth) -> DisplayWindow:
    """Make ``month`` the first displayed month, as far as the limits allow."""
    return window(month, current.count, current.from_limit, current.to_limit)


def previous_month(current: DisplayWindow, step: int | None = None) -> YearMonth | None:
    """Return the pivot one page back, or None when already at the lower limit."""
    target = page(current, -1, step)
    return target.pivot if target.pivot != current.pivot else None


def next_month(current: DisplayWindow, step: int | None = None) -> YearMonth | None:
    """Return the pivot one page ahead, or None when already at the upper limit."""
    target = page(current, 1, step)
    return target.pivot if target.pivot != current.pivot else None


def initial_window(
    today: date,
    count: int = 1,
    default_month: YearMonth | None = None,
    from_limit: YearMonth | None = None,
    to_limit: YearMonth | None = None,
) -> DisplayWindow:
    """Return the first window to show: ``default_month``, else the month of ``today``."""
    pivot = YearMonth(*default_month) if default_month is not None else YearMonth.of(today)
    return window(pivot, count, from_limit, to_limit)


def build_window(
    current: DisplayWindow,
    first_day_of_week: int,
    modifiers: ModifierMap | None,
    today: date,
    *,
    internal: InternalModifiers | None = None,
    fixed_weeks: bool = False,
    iso_week: bool = False,
    show_outside_days: bool = True,
    reverse_months: bool = False,
) -> list[MonthMatrix]:
    """Build one :class:`MonthMatrix` per displayed month."""
    matrices = [
        build_month(
            month,
            first_day_of_week,
            modifiers,
            today,
            internal=internal,
            fixed_weeks=fixed_weeks,
            iso_week=iso_week,
            show_outside_days=show_outside_days,
        )
        for month in current.months
    ]
    if reverse_months:
        matrices.reverse()
    return matrices
