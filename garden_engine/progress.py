"""Growth progress for tracked plants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .constants import estimate_harvest_days
from .day_calendar import parse_timestamp, utcnow, whole_days_between
from .localizer import first_window
from .tracking import TrackedPlant

__all__ = ["PHASES", "ProgressResult", "calculate_progress", "days_since_planting"]

PHASES = ("indoor", "transplant", "outdoor", "harvest")


@dataclass(frozen=True, slots=True)
class ProgressResult:
    days_passed: int
    percent_complete: float
    transplant_reached: bool
    harvest_ready: bool
    phase: str
    next_milestone: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "daysPassed": self.days_passed,
            "percentComplete": self.percent_complete,
            "transplantReached": self.transplant_reached,
            "harvestReady": self.harvest_ready,
            "phase": self.phase,
            "nextMilestone": self.next_milestone,
        }


def _plural(count: int) -> str:
    return "day" if count == 1 else "days"


def days_since_planting(tracked: TrackedPlant, now: datetime | None = None) -> int:
    """Return whole days since ``seed_planted_date``, never negative.

    Unparsable planting dates count as zero days.
    """
    planted = parse_timestamp(tracked.seed_planted_date)
    if planted is None:
        return 0
    return max(whole_days_between(planted, now or utcnow()), 0)


def _transplant_target(tracked: TrackedPlant) -> int:
    plant = tracked.plant
    if (plant.transplant_day or 0) > 0:
        return plant.transplant_day
    transplant = first_window(plant.default_periods, "transplant")
    indoor = first_window(plant.default_periods, "indoor")
    if transplant is not None and indoor is not None:
        return max(transplant.start_day_default - indoor.start_day_default, 0)
    return 0


def calculate_progress(tracked: TrackedPlant, now: datetime | None = None) -> ProgressResult:
    """Return the growth progress of ``tracked`` at ``now``.

    Ornamentals have no harvest and only report elapsed days and the bloom
    season. Cultivated plants move through indoor, transplant, outdoor and
    harvest phases based on days since planting.
    """
    plant = tracked.plant
    days_passed = days_since_planting(tracked, now)

    if plant.is_ornamental:
        milestone = f"Blooms: {plant.bloom_season}" if plant.bloom_season else "Growing"
        return ProgressResult(days_passed, 0.0, False, False, "outdoor", milestone)

    fallback = estimate_harvest_days(plant.category)
    total = plant.days_to_harvest if (plant.days_to_harvest or 0) > 0 else fallback
    total = max(total, 1)
    target = _transplant_target(tracked)

    transplant_reached = target > 0 and days_passed >= target
    harvest_ready = days_passed >= total

    if harvest_ready:
        phase = "harvest"
    elif transplant_reached:
        phase = "outdoor"
    elif target > 0:
        phase = "transplant"
    elif "indoor" in plant.indoor_outdoor.lower():
        phase = "indoor"
    else:
        phase = "outdoor"

    percent = min(days_passed / total * 100, 100.0)

    if not transplant_reached and target > 0:
        remaining = max(target - days_passed, 0)
        if remaining == 0:
            milestone = "Transplant this week"
        else:
            milestone = f"Transplant in {remaining} {_plural(remaining)}"
    elif not harvest_ready:
        remaining = max(total - days_passed, 0)
        if remaining == 0:
            milestone = "Harvest window opening"
        else:
            milestone = f"Harvest in {remaining} {_plural(remaining)}"
    else:
        milestone = "Harvest ready"

    return ProgressResult(
        days_passed=days_passed,
        percent_complete=percent,
        transplant_reached=transplant_reached,
        harvest_ready=harvest_ready,
        phase=phase,
        next_milestone=milestone,
    )
