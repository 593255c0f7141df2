from __future__ import annotations

from datetime import date

import pytest

from calendar_logic import YearMonth


@pytest.fixture()
def today() -> date:
    """A fixed 'today' so grids never depend on the wall clock."""
    return date(2022, 6, 13)


@pytest.fixture()
def june() -> YearMonth:
    return YearMonth(2022, 6)
