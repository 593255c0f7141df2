"""JSON-based configuration for the day picker."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

from calendar_errors import ConfigurationError
from calendar_logic import YearMonth, to_date
from calendar_matchers import Matcher, to_matchers
from calendar_matrix import check_first_day_of_week
from calendar_modifiers import validate_modifiers
from calendar_navigation import check_limits
from calendar_selection import SelectionMode

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".day-picker-settings.json")

_DEFAULTS = {
    "mode": "default",
    "firstDayOfWeek": 0,
    "numberOfMonths": 1,
    "defaultMonth": None,
    "fromMonth": None,
    "toMonth": None,
    "fromYear": None,
    "toYear": None,
    "fromDate": None,
    "toDate": None,
    "today": None,
    "required": False,
    "min": None,
    "max": None,
    "fixedWeeks": False,
    "showOutsideDays": True,
    "ISOWeek": False,
    "showWeekNumber": False,
    "reverseMonths": False,
    "pagedNavigation": True,
    "captionLayout": "buttons",
    "disabled": None,
    "hidden": None,
    "modifiers": {},
}

CAPTION_LAYOUTS = ("buttons", "dropdown", "dropdown-buttons")
_BOOL_KEYS = (
    "required", "fixedWeeks", "showOutsideDays", "ISOWeek",
    "showWeekNumber", "reverseMonths", "pagedNavigation",
)


@dataclass(frozen=True)
class PickerSettings:
    """Validated picker configuration. Month limits are already resolved."""

    mode: SelectionMode = SelectionMode.DEFAULT
    first_day_of_week: int = 0
    number_of_months: int = 1
    default_month: YearMonth | None = None
    from_month: YearMonth | None = None
    to_month: YearMonth | None = None
    from_date: date | None = None
    to_date: date | None = None
    today: date | None = None
    required: bool = False
    min: int | None = None
    max: int | None = None
    fixed_weeks: bool = False
    show_outside_days: bool = True
    iso_week: bool = False
    show_week_number: bool = False
    reverse_months: bool = False
    paged_navigation: bool = True
    caption_layout: str = "buttons"
    disabled: tuple[Matcher, ...] = ()
    hidden: tuple[Matcher, ...] = ()
    modifiers: dict[str, tuple[Matcher, ...]] = field(default_factory=dict)

    @property
    def page_step(self) -> int:
        return self.number_of_months if self.paged_navigation else 1


# --- field parsers ----------------------------------------------------------

def _parse_date(value, key: str) -> date | None:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ConfigurationError(f"{key}: invalid date {value!r}") from exc
    raise ConfigurationError(f"{key}: expected a date, got {value!r}")


def _parse_month(value, key: str) -> YearMonth | None:
    if value is None:
        return None
    if isinstance(value, YearMonth):
        return value
    if isinstance(value, (date, datetime)):
        return YearMonth.of(value)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        year, month = value
    elif isinstance(value, str):
        try:
            year, month = (int(part) for part in value.split("-")[:2])
        except ValueError as exc:
            raise ConfigurationError(f"{key}: invalid month {value!r}") from exc
    else:
        raise ConfigurationError(f"{key}: expected a month, got {value!r}")
    if not isinstance(year, int) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ConfigurationError(f"{key}: month must be 1..12, got {month}")
    return YearMonth(year, month)


def _parse_int(value, key: str, minimum: int) -> int | None:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise ConfigurationError(f"{key}: expected an integer >= {minimum}, got {value!r}")
    return value


def _parse_year(value, key: str) -> int | None:
    return _parse_int(value, key, 1)


def _later(a, b):
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def _earlier(a, b):
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


# --- public API -------------------------------------------------------------

def parse_settings(raw: Mapping | None = None) -> PickerSettings:
    """Validate a settings mapping and return :class:`PickerSettings`.

    Missing keys take their defaults; unknown keys are ignored. Every
    problem raises ConfigurationError before any month is built.
    """
    settings = dict(_DEFAULTS)
    settings.update(raw or {})

    try:
        mode = SelectionMode(settings["mode"])
    except ValueError as exc:
        raise ConfigurationError(f"mode: unknown selection mode {settings['mode']!r}") from exc

    first_day_of_week = settings["firstDayOfWeek"]
    check_first_day_of_week(first_day_of_week)
    number_of_months = _parse_int(settings["numberOfMonths"], "numberOfMonths", 1)
    if number_of_months is None:
        raise ConfigurationError("numberOfMonths: expected an integer >= 1, got None")

    for key in _BOOL_KEYS:
        if not isinstance(settings[key], bool):
            raise ConfigurationError(f"{key}: expected true or false, got {settings[key]!r}")

    from_day = _parse_date(settings["fromDate"], "fromDate")
    to_day = _parse_date(settings["toDate"], "toDate")
    if from_day is not None and to_day is not None and from_day > to_day:
        raise ConfigurationError(f"fromDate {from_day} is after toDate {to_day}")

    from_month = _parse_month(settings["fromMonth"], "fromMonth")
    to_month = _parse_month(settings["toMonth"], "toMonth")
    from_year = _parse_year(settings["fromYear"], "fromYear")
    to_year = _parse_year(settings["toYear"], "toYear")
    if from_year is not None:
        from_month = _later(from_month, YearMonth(from_year, 1))
    if to_year is not None:
        to_month = _earlier(to_month, YearMonth(to_year, 12))
    if from_day is not None:
        from_month = _later(from_month, YearMonth.of(from_day))
    if to_day is not None:
        to_month = _earlier(to_month, YearMonth.of(to_day))
    check_limits(from_month, to_month)

    minimum = _parse_int(settings["min"], "min", 0)
    maximum = _parse_int(settings["max"], "max", 0)
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ConfigurationError(f"min {minimum} is greater than max {maximum}")

    caption_layout = settings["captionLayout"]
    if caption_layout not in CAPTION_LAYOUTS:
        raise ConfigurationError(f"captionLayout: unknown layout {caption_layout!r}")
    if caption_layout != "buttons" and (from_month is None or to_month is None):
        # Dropdowns need both ends of the year list
        logger.debug("captionLayout %r needs month limits, using buttons", caption_layout)
        caption_layout = "buttons"

    return PickerSettings(
        mode=mode,
        first_day_of_week=first_day_of_week,
        number_of_months=number_of_months,
        default_month=_parse_month(settings["defaultMonth"], "defaultMonth"),
        from_month=from_month,
        to_month=to_month,
        from_date=from_day,
        to_date=to_day,
        today=_parse_date(settings["today"], "today"),
        required=settings["required"],
        min=minimum,
        max=maximum,
        fixed_weeks=settings["fixedWeeks"],
        show_outside_days=settings["showOutsideDays"],
        iso_week=settings["ISOWeek"],
        show_week_number=settings["showWeekNumber"],
        reverse_months=settings["reverseMonths"],
        paged_navigation=settings["pagedNavigation"],
        caption_layout=caption_layout,
        disabled=to_matchers(settings["disabled"]),
        hidden=to_matchers(settings["hidden"]),
        modifiers=validate_modifiers(settings["modifiers"]),
    )


def settings_path() -> str:
    """Return the settings file path, honouring ``DAY_PICKER_SETTINGS``."""
    return os.path.expanduser(os.getenv("DAY_PICKER_SETTINGS", _SETTINGS_PATH))


def load_settings(path: str | None = None) -> PickerSettings:
    """Load settings from disk, returning defaults when the file does not exist."""
    path = path or settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        logger.warning("No settings file at %s, using defaults", path)
        return parse_settings()
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    except OSError as exc:
        raise ConfigurationError(f"{path}: cannot read settings ({exc})") from exc
    if not isinstance(stored, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    logger.debug("Loaded settings from %s", path)
    return parse_settings(stored)
