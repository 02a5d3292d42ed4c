"""Central constants used across the garden engine."""

from __future__ import annotations

from typing import Mapping

from .utils import load_dataset

# Day-of-year used when a location has no usable spring frost anchor (Apr 30).
DEFAULT_SPRING_FROST_DAY = 120
# Anchors outside this range are treated as missing.
MIN_SPRING_FROST_DAY = 0
MAX_SPRING_FROST_DAY = 366
DEFAULT_HARDINESS_ZONE = "6b"

# Reference year for all day-of-year arithmetic. 2025 is not a leap year.
BASE_YEAR = 2025

NOT_APPLICABLE = "Not applicable"
HARVEST_SUFFIX = "(est.)"
FALLBACK_EMOJI = "\U0001f331"

ORNAMENTAL_TYPES = frozenset({"flower", "ornamental"})
PLANT_TYPES = ("vegetable", "flower", "herb", "ornamental")
DEFAULT_PLANT_TYPE = "vegetable"

HARVEST_ESTIMATE_FILE = "harvest_estimates.json"
_DEFAULT_HARVEST_ESTIMATES: dict[str, int] = {
    "Vegetables": 75,
    "Fruits": 90,
    "Herbs": 50,
    "Flowers": 65,
}
DEFAULT_HARVEST_DAYS = 75

WATERING_FREQUENCIES = ("frequent", "average", "minimum", "custom")
WATERING_INTERVALS: dict[str, int] = {
    "frequent": 2,
    "average": 4,
    "minimum": 7,
}
DEFAULT_WATERING_FREQUENCY = "average"
DEFAULT_WATERING_INTERVAL = 4
WATERING_REMINDER_HOUR = 9
MAX_WATERING_INTERVAL = 365


def harvest_estimates() -> dict[str, int]:
    """Return per-category harvest estimates merged over the built-in table.

    Entries from ``harvest_estimates.json`` override the defaults; values that
    are not positive integers are ignored.
    """

    data = load_dataset(HARVEST_ESTIMATE_FILE)
    result = dict(_DEFAULT_HARVEST_ESTIMATES)
    if isinstance(data, Mapping):
        for category, days in data.items():
            if isinstance(days, bool) or not isinstance(days, (int, float)):
                continue
            if days > 0:
                result[str(category)] = int(days)
    return result


def estimate_harvest_days(category: str) -> int:
    """Return the fixed days-to-harvest estimate for ``category``."""

    return harvest_estimates().get(category, DEFAULT_HARVEST_DAYS)


__all__ = [
    "DEFAULT_SPRING_FROST_DAY",
    "MIN_SPRING_FROST_DAY",
    "MAX_SPRING_FROST_DAY",
    "DEFAULT_HARDINESS_ZONE",
    "BASE_YEAR",
    "NOT_APPLICABLE",
    "HARVEST_SUFFIX",
    "FALLBACK_EMOJI",
    "ORNAMENTAL_TYPES",
    "PLANT_TYPES",
    "DEFAULT_PLANT_TYPE",
    "DEFAULT_HARVEST_DAYS",
    "WATERING_FREQUENCIES",
    "WATERING_INTERVALS",
    "DEFAULT_WATERING_FREQUENCY",
    "DEFAULT_WATERING_INTERVAL",
    "WATERING_REMINDER_HOUR",
    "MAX_WATERING_INTERVAL",
    "harvest_estimates",
    "estimate_harvest_days",
]
