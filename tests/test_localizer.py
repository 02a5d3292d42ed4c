import math

import pytest

from garden_engine.catalog import PlantPeriod, ScheduleWindow
from garden_engine.localizer import (
    first_window,
    localize_periods,
    localize_window,
    resolve_frost_anchor,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 120),
        (True, 120),
        ("", 120),
        ("abc", 120),
        (math.nan, 120),
        (math.inf, 120),
        ([100], 120),
        (100, 100),
        (100.9, 100),
        ("95", 95),
        (0, 0),
        (366, 366),
        (367, 120),
        (-5, 120),
        (10_000_000, 120),
        ("1e12", 120),
    ],
)
def test_resolve_frost_anchor(value, expected):
    assert resolve_frost_anchor(value) == expected


def test_localize_window_sets_start():
    window = ScheduleWindow(-42, 78, 14)
    localized = localize_window(window, 100)
    assert localized.start_day_localized == 58
    assert localized.start_day_default == 78
    assert window.start_day_localized is None
    assert localize_window(None, 100) is None


def test_localize_periods_keeps_missing_windows():
    periods = (
        PlantPeriod(outdoor=ScheduleWindow(-35, 85, 21)),
        PlantPeriod(outdoor=ScheduleWindow(100, 220, 21)),
    )
    localized = localize_periods(periods, 130)
    assert [p.outdoor.start_day for p in localized] == [95, 230]
    assert all(p.indoor is None and p.transplant is None for p in localized)


def test_localization_is_deterministic():
    periods = (PlantPeriod(indoor=ScheduleWindow(-42, 78, 14)),)
    assert localize_periods(periods, 100) == localize_periods(periods, 100)


def test_first_window_skips_empty_periods():
    periods = (
        PlantPeriod(),
        PlantPeriod(transplant=ScheduleWindow(14, 134, 7)),
        PlantPeriod(transplant=ScheduleWindow(30, 150, 7)),
    )
    assert first_window(periods, "transplant").start_offset_from_spring_frost == 14
    assert first_window(periods, "indoor") is None
    assert first_window((), "outdoor") is None
