"""Day picker state holder, the UI-free counterpart of a calendar window.

``DayPicker`` owns one selection and one display window and re-derives
every month grid from them on each call to :meth:`DayPicker.months`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import date

from calendar_logic import YearMonth, to_date
from calendar_matrix import CalendarDay, MonthMatrix
from calendar_modifiers import (
    DayModifierSet,
    InternalModifiers,
    internal_modifiers,
    is_selectable,
    resolve,
)
from calendar_navigation import DisplayWindow, build_window, go_to, initial_window, page
from calendar_navigation import next_month as _next_page
from calendar_navigation import previous_month as _previous_page
from calendar_selection import (
    RangeSelection,
    SelectionMode,
    SelectionState,
    empty_selection,
    range_length,
    select,
)
from calendar_settings import PickerSettings, parse_settings

logger = logging.getLogger(__name__)


class DayPicker:
    """Multi-month date picker without a rendering layer."""

    def __init__(
        self,
        settings: PickerSettings | Mapping | None = None,
        *,
        today: date | None = None,
        selection: SelectionState = None,
    ) -> None:
        if not isinstance(settings, PickerSettings):
            settings = parse_settings(settings)
        self.settings = settings
        self.today: date = to_date(today or settings.today or date.today())

        self.window: DisplayWindow = initial_window(
            self.today,
            settings.number_of_months,
            settings.default_month,
            settings.from_month,
            settings.to_month,
        )

        # Selection state
        self.selection: SelectionState = (
            selection if selection is not None else empty_selection(settings.mode)
        )

    # ------------------------------------------------------------------
    # Render pass
    # ------------------------------------------------------------------
    def internal_modifiers(self) -> InternalModifiers:
        s = self.settings
        return internal_modifiers(
            disabled=s.disabled,
            hidden=s.hidden,
            selection=self.selection,
            from_date=s.from_date,
            to_date=s.to_date,
            range_min=s.min if s.mode is SelectionMode.RANGE else None,
            range_max=s.max if s.mode is SelectionMode.RANGE else None,
            multiple_max=s.max if s.mode is SelectionMode.MULTIPLE else None,
        )

    def months(self) -> list[MonthMatrix]:
        """Build the grids of every displayed month."""
        s = self.settings
        return build_window(
            self.window,
            s.first_day_of_week,
            s.modifiers,
            self.today,
            internal=self.internal_modifiers(),
            fixed_weeks=s.fixed_weeks,
            iso_week=s.iso_week,
            show_outside_days=s.show_outside_days,
            reverse_months=s.reverse_months,
        )

    def day(self, d: date, displayed_month: YearMonth | None = None) -> CalendarDay:
        """Return ``d`` as a grid cell of ``displayed_month`` (default: its own month)."""
        d = to_date(d)
        month = YearMonth(*displayed_month) if displayed_month is not None else YearMonth.of(d)
        return self._resolved(CalendarDay(d, YearMonth.of(d) == month))

    def _resolved(self, day: CalendarDay) -> CalendarDay:
        return replace(day, modifiers=self.modifiers_for(day))

    def modifiers_for(self, day: CalendarDay) -> DayModifierSet:
        return resolve(
            day,
            self.settings.modifiers,
            self.today,
            self.internal_modifiers(),
            hide_outside_days=not self.settings.show_outside_days,
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def click(self, day: date | CalendarDay, extend: bool = False) -> bool:
        """Apply a click and return True if the selection changed."""
        # Modifiers are re-resolved: the cell may come from an earlier render
        day = self._resolved(day) if isinstance(day, CalendarDay) else self.day(day)
        s = self.settings
        previous = self.selection
        self.selection = select(
            previous,
            day.date,
            is_selectable(day.modifiers),
            extend,
            s.mode,
            required=s.required,
            max_count=s.max,
            min_count=s.min,
        )
        changed = self.selection is not previous and self.selection != previous
        if not changed:
            logger.debug("Click on %s left the selection unchanged", day.date)
        return changed

    def clear_selection(self) -> None:
        self.selection = empty_selection(self.settings.mode)

    def selection_span(self) -> tuple[int, int, int]:
        """Return (days, full weeks, remaining days) of a complete range selection."""
        if not isinstance(self.selection, RangeSelection):
            return 0, 0, 0
        total_days = range_length(self.selection)
        full_weeks, rem_days = divmod(total_days, 7)
        return total_days, full_weeks, rem_days

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def navigate(self, direction: int) -> bool:
        """Page backwards (< 0) or forwards; return False at a limit."""
        target = page(self.window, direction, self.settings.page_step)
        moved = target.pivot != self.window.pivot
        self.window = target
        return moved

    def navigate_year(self, direction: int) -> bool:
        target = go_to(self.window, self.window.pivot.shift(12 * direction))
        moved = target.pivot != self.window.pivot
        self.window = target
        return moved

    def go_to_month(self, month: YearMonth) -> None:
        self.window = go_to(self.window, YearMonth(*month))

    def go_to_date(self, d: date) -> None:
        """Show ``d``; the window does not move if it is already displayed."""
        d = to_date(d)
        if not self.window.contains(d):
            self.go_to_month(YearMonth.of(d))

    def go_today(self) -> None:
        self.go_to_month(YearMonth.of(self.today))

    @property
    def previous_month(self) -> YearMonth | None:
        return _previous_page(self.window, self.settings.page_step)

    @property
    def next_month(self) -> YearMonth | None:
        return _next_page(self.window, self.settings.page_step)
