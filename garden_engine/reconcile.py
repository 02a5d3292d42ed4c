"""Refresh stored plant snapshots after the frost anchor or catalog changes.

Only records whose schedule differs from the freshly built plant are
replaced. Unchanged records, rows, gardens and collections are returned as
the very same objects so callers can detect "nothing changed" with ``is``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from .database import PlantDatabase
from .garden import Garden, Grid
from .logging_utils import warn_once
from .matching import find_plant_match
from .plant_builder import Plant, periods_signature
from .state import GardenState
from .tracking import TrackedPlant
from .watering import CustomWateringEntry

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "plant_differs",
    "refresh_plant",
    "reconcile_grid",
    "reconcile_gardens",
    "reconcile_added_plants",
    "reconcile_tracked_plants",
    "reconcile_custom_watering",
    "reconcile_state",
]


def _schedule_key(plant: Plant) -> tuple[object, ...]:
    schedule = plant.cultivated
    if schedule is None:
        return (None, None, None, None, None, None)
    return (
        schedule.start_seed_indoor,
        schedule.start_seed_outdoor,
        schedule.transplant_outdoor,
        schedule.harvest_date,
        schedule.days_to_harvest,
        schedule.transplant_day,
    )


def plant_differs(current: Plant, fresh: Plant) -> bool:
    """Return ``True`` when any derived schedule field differs."""
    if _schedule_key(current) != _schedule_key(fresh):
        return True
    return periods_signature(current.default_periods) != periods_signature(fresh.default_periods)


def _unmatched(plant: Plant) -> None:
    warn_once(
        _LOGGER,
        f"unmatched-plant:{plant.slug or plant.name}",
        f"no catalog match for {plant.name}, leaving record untouched",
        level=logging.DEBUG,
    )


def refresh_plant(plant: Plant, database: PlantDatabase) -> Plant:
    """Return the fresh database plant if ``plant`` is stale, else ``plant``."""
    fresh = find_plant_match(plant, database)
    if fresh is None:
        _unmatched(plant)
        return plant
    if plant_differs(plant, fresh):
        return fresh
    return plant


def reconcile_grid(grid: Grid, database: PlantDatabase) -> Grid:
    changed = False
    rows = []
    for row in grid:
        cells = tuple(
            refresh_plant(cell, database) if cell is not None else None for cell in row
        )
        if any(new is not old for new, old in zip(cells, row)):
            changed = True
            rows.append(cells)
        else:
            rows.append(row)
    return tuple(rows) if changed else grid


def reconcile_gardens(
    gardens: Sequence[Garden], database: PlantDatabase
) -> Sequence[Garden]:
    changed = False
    result = []
    for garden in gardens:
        grid = reconcile_grid(garden.grid, database)
        if grid is not garden.grid:
            changed = True
            garden = replace(garden, grid=grid)
        result.append(garden)
    return tuple(result) if changed else gardens


def reconcile_added_plants(
    plants: Sequence[Plant], database: PlantDatabase
) -> Sequence[Plant]:
    result = tuple(refresh_plant(plant, database) for plant in plants)
    if all(new is old for new, old in zip(result, plants)):
        return plants
    return result


def _refresh_tracked(tracked: TrackedPlant, database: PlantDatabase) -> TrackedPlant:
    plant = refresh_plant(tracked.plant, database)
    if plant is tracked.plant:
        return tracked
    # only the snapshot changes; user-owned fields are carried over verbatim
    return replace(tracked, plant=plant)


def reconcile_tracked_plants(
    tracked_plants: Sequence[TrackedPlant], database: PlantDatabase
) -> Sequence[TrackedPlant]:
    result = tuple(_refresh_tracked(tracked, database) for tracked in tracked_plants)
    if all(new is old for new, old in zip(result, tracked_plants)):
        return tracked_plants
    return result


def _refresh_custom(entry: CustomWateringEntry, database: PlantDatabase) -> CustomWateringEntry:
    if not entry.linked_plant_id and not entry.linked_plant_name:
        return entry
    # ids are catalog positions; the stored name survives catalog edits
    plant = find_plant_match({"name": entry.linked_plant_name}, database)
    if plant is None and entry.linked_plant_id:
        plant = database.by_id.get(entry.linked_plant_id)
    if plant is None:
        return entry
    if (
        entry.linked_plant_id == plant.id
        and entry.linked_plant_name == plant.name
        and entry.linked_plant_category == plant.category
    ):
        return entry
    return replace(
        entry,
        linked_plant_id=plant.id,
        linked_plant_name=plant.name,
        linked_plant_category=plant.category,
    )


def reconcile_custom_watering(
    entries: Sequence[CustomWateringEntry], database: PlantDatabase
) -> Sequence[CustomWateringEntry]:
    """Refresh the denormalized plant name and category of linked entries."""
    result = tuple(_refresh_custom(entry, database) for entry in entries)
    if all(new is old for new, old in zip(result, entries)):
        return entries
    return result


def reconcile_state(state: GardenState, database: PlantDatabase) -> GardenState:
    """Return ``state`` with every stale snapshot refreshed.

    The same ``state`` object is returned when nothing changed.
    """
    gardens = reconcile_gardens(state.gardens, database)
    added = reconcile_added_plants(state.added_plants, database)
    tracked = reconcile_tracked_plants(state.tracked_plants, database)
    custom = reconcile_custom_watering(state.custom_watering, database)
    if (
        gardens is state.gardens
        and added is state.added_plants
        and tracked is state.tracked_plants
        and custom is state.custom_watering
    ):
        return state
    _LOGGER.info("Refreshed stored plants for frost day %d", database.frost_anchor_day)
    return replace(
        state,
        gardens=tuple(gardens),
        added_plants=tuple(added),
        tracked_plants=tuple(tracked),
        custom_watering=tuple(custom),
    )
