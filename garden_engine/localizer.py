"""Localize frost-relative schedule windows to a concrete spring frost day."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable

from .catalog import WINDOW_KINDS, PlantPeriod, ScheduleWindow
from .constants import DEFAULT_SPRING_FROST_DAY, MAX_SPRING_FROST_DAY, MIN_SPRING_FROST_DAY

__all__ = [
    "resolve_frost_anchor",
    "localize_window",
    "localize_periods",
    "first_window",
]


def resolve_frost_anchor(value: Any) -> int:
    """Return a usable frost anchor day for ``value``.

    Missing, non-numeric, non-finite and out-of-range values fall back to
    :data:`DEFAULT_SPRING_FROST_DAY`. Fractional days are truncated; the
    result always lies in ``MIN_SPRING_FROST_DAY..MAX_SPRING_FROST_DAY``.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_SPRING_FROST_DAY
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_SPRING_FROST_DAY
    if not isinstance(value, (int, float)):
        return DEFAULT_SPRING_FROST_DAY
    if not math.isfinite(value):
        return DEFAULT_SPRING_FROST_DAY
    day = int(value)
    if not MIN_SPRING_FROST_DAY <= day <= MAX_SPRING_FROST_DAY:
        return DEFAULT_SPRING_FROST_DAY
    return day


def localize_window(window: ScheduleWindow | None, frost_anchor_day: int) -> ScheduleWindow | None:
    """Return ``window`` with ``start_day_localized`` set for the anchor."""
    if window is None:
        return None
    return replace(
        window,
        start_day_localized=frost_anchor_day + window.start_offset_from_spring_frost,
    )


def localize_periods(
    periods: Iterable[PlantPeriod], frost_anchor_day: int
) -> tuple[PlantPeriod, ...]:
    """Return ``periods`` with every present window localized to the anchor."""
    return tuple(
        PlantPeriod(
            **{
                kind: localize_window(getattr(period, kind), frost_anchor_day)
                for kind in WINDOW_KINDS
            }
        )
        for period in periods
    )


def first_window(periods: Iterable[PlantPeriod], kind: str) -> ScheduleWindow | None:
    """Return the first non-empty ``kind`` window in period order."""
    for period in periods:
        window = period.window(kind)
        if window is not None and window.duration > 0:
            return window
    return None
