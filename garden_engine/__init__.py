"""Planting-schedule localization and growth-progress engine."""

from __future__ import annotations

from . import (catalog, constants, day_calendar, localizer, plant_builder,
               progress, reconcile, tracking, watering)
from .catalog import *  # noqa: F401,F403
from .constants import *  # noqa: F401,F403
from .database import (PlantDatabase, build_plant_database,
                       clear_database_cache)
from .day_calendar import *  # noqa: F401,F403
from .engine import GardenEngine
from .garden import Garden, create_garden, place_plant, remove_plant
from .localizer import *  # noqa: F401,F403
from .location import LocationInfo, normalize_location
from .matching import LEGACY_NAME_MAP, find_plant_match
from .plant_builder import *  # noqa: F401,F403
from .planting_calendar import (CalendarEvent, calendar_events,
                                calendar_frame, events_in_month)
from .progress import *  # noqa: F401,F403
from .reconcile import *  # noqa: F401,F403
from .state import GardenState, hydrate_state, serialize_state
from .tracking import *  # noqa: F401,F403
from .utils import clear_dataset_cache, load_dataset
from .watering import *  # noqa: F401,F403

__version__ = "0.1.0"

__all__ = sorted(
    set(catalog.__all__)
    | set(constants.__all__)
    | set(day_calendar.__all__)
    | set(localizer.__all__)
    | set(plant_builder.__all__)
    | set(progress.__all__)
    | set(reconcile.__all__)
    | set(tracking.__all__)
    | set(watering.__all__)
    | {"clear_dataset_cache", "load_dataset"}
    | {
        "PlantDatabase",
        "build_plant_database",
        "clear_database_cache",
        "GardenEngine",
        "Garden",
        "create_garden",
        "place_plant",
        "remove_plant",
        "LocationInfo",
        "normalize_location",
        "LEGACY_NAME_MAP",
        "find_plant_match",
        "CalendarEvent",
        "calendar_events",
        "calendar_frame",
        "events_in_month",
        "GardenState",
        "hydrate_state",
        "serialize_state",
    }
)
