"""Whole persisted garden state: loading, saving and collection updates."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .coercion import as_dict, as_int
from .database import PlantDatabase
from .day_calendar import utcnow
from .garden import DEFAULT_BED_TYPE, Garden, empty_grid
from .location import LocationInfo, normalize_location
from .logging_utils import warn_once
from .matching import find_plant_match
from .plant_builder import Plant
from .tracking import TrackedPlant
from .watering import CustomWateringEntry, hydrate_custom_entries

_LOGGER = logging.getLogger(__name__)

__all__ = ["GardenState", "hydrate_state", "serialize_state", "resolve_plant"]


@dataclass(frozen=True, slots=True)
class GardenState:
    """Everything a user has saved, as one immutable snapshot."""

    gardens: tuple[Garden, ...] = field(default_factory=tuple)
    added_plants: tuple[Plant, ...] = field(default_factory=tuple)
    tracked_plants: tuple[TrackedPlant, ...] = field(default_factory=tuple)
    custom_watering: tuple[CustomWateringEntry, ...] = field(default_factory=tuple)
    location: LocationInfo | None = None

    # gardens

    def get_garden(self, garden_id: int) -> Garden:
        for garden in self.gardens:
            if garden.id == garden_id:
                return garden
        raise KeyError(garden_id)

    def add_garden(self, garden: Garden) -> GardenState:
        return replace(self, gardens=self.gardens + (garden,))

    def update_garden(self, garden: Garden) -> GardenState:
        self.get_garden(garden.id)
        return replace(
            self, gardens=tuple(garden if g.id == garden.id else g for g in self.gardens)
        )

    def delete_garden(self, garden_id: int) -> GardenState:
        self.get_garden(garden_id)
        return replace(self, gardens=tuple(g for g in self.gardens if g.id != garden_id))

    def restore_garden(self, garden: Garden, index: int | None = None) -> GardenState:
        """Put ``garden`` back: replace by id, else insert at ``index``, else append."""
        gardens = list(self.gardens)
        for position, existing in enumerate(gardens):
            if existing.id == garden.id:
                gardens[position] = garden
                return replace(self, gardens=tuple(gardens))
        if index is not None and 0 <= index <= len(gardens):
            gardens.insert(index, garden)
        else:
            gardens.append(garden)
        return replace(self, gardens=tuple(gardens))

    # added plants

    def add_plant_to_list(self, plant: Plant) -> GardenState:
        if any(existing.id == plant.id for existing in self.added_plants):
            return self
        return replace(self, added_plants=self.added_plants + (plant,))

    def remove_plant_from_list(self, plant_id: str) -> GardenState:
        return replace(
            self, added_plants=tuple(p for p in self.added_plants if p.id != plant_id)
        )

    # tracked plants

    def get_tracked(self, tracking_id: str) -> TrackedPlant:
        for tracked in self.tracked_plants:
            if tracked.tracking_id == tracking_id:
                return tracked
        raise KeyError(tracking_id)

    def add_tracked(self, tracked: TrackedPlant) -> GardenState:
        if any(t.tracking_id == tracked.tracking_id for t in self.tracked_plants):
            raise ValueError(f"tracking id {tracked.tracking_id} already exists")
        return replace(self, tracked_plants=self.tracked_plants + (tracked,))

    def update_tracked(self, tracked: TrackedPlant) -> GardenState:
        self.get_tracked(tracked.tracking_id)
        return replace(
            self,
            tracked_plants=tuple(
                tracked if t.tracking_id == tracked.tracking_id else t
                for t in self.tracked_plants
            ),
        )

    def remove_tracked(self, tracking_id: str) -> GardenState:
        self.get_tracked(tracking_id)
        return replace(
            self,
            tracked_plants=tuple(t for t in self.tracked_plants if t.tracking_id != tracking_id),
        )

    # custom watering

    def get_custom_entry(self, entry_id: str) -> CustomWateringEntry:
        for entry in self.custom_watering:
            if entry.id == entry_id:
                return entry
        raise KeyError(entry_id)

    def add_custom_entry(self, entry: CustomWateringEntry) -> GardenState:
        return replace(self, custom_watering=self.custom_watering + (entry,))

    def update_custom_entry(self, entry: CustomWateringEntry) -> GardenState:
        self.get_custom_entry(entry.id)
        return replace(
            self,
            custom_watering=tuple(entry if e.id == entry.id else e for e in self.custom_watering),
        )

    def remove_custom_entry(self, entry_id: str) -> GardenState:
        self.get_custom_entry(entry_id)
        return replace(
            self, custom_watering=tuple(e for e in self.custom_watering if e.id != entry_id)
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "gardens": [g.as_dict() for g in self.gardens],
            "addedPlants": [p.as_dict() for p in self.added_plants],
            "trackedPlants": [t.as_dict() for t in self.tracked_plants],
            "customWateringEntries": [e.as_dict() for e in self.custom_watering],
            "location": self.location.as_dict() if self.location else None,
        }


def _record_label(record: Any) -> str:
    data = as_dict(record)
    return str(data.get("slug") or data.get("name") or "?")


def resolve_plant(record: Any, database: PlantDatabase) -> Plant | None:
    """Return the database match for ``record`` or a tolerant snapshot.

    Records with neither a name nor a slug resolve to ``None``.
    """
    match = find_plant_match(record, database)
    if match is not None:
        return match
    data = as_dict(record)
    if not data.get("name") and not data.get("slug"):
        return None
    label = _record_label(data)
    warn_once(
        _LOGGER,
        f"unmatched-plant:{label}",
        "no catalog match, keeping stored snapshot",
        level=logging.DEBUG,
    )
    return Plant.from_dict(data)


def _hydrate_garden(raw: Any, index: int, database: PlantDatabase, now_ms: int) -> Garden:
    data = as_dict(raw)
    rows = as_int(data.get("rows"), 0)
    cols = as_int(data.get("cols"), 0)
    raw_grid = data.get("grid")
    if isinstance(raw_grid, list):
        grid = tuple(
            tuple(resolve_plant(cell, database) for cell in row)
            if isinstance(row, list)
            else tuple(None for _ in range(max(cols, 0)))
            for row in raw_grid
        )
    else:
        grid = empty_grid(rows, cols)

    garden_id = data.get("id")
    if isinstance(garden_id, bool) or not isinstance(garden_id, int):
        garden_id = now_ms + index
    name = data.get("name")
    bed_type = data.get("bedType")
    return Garden(
        id=garden_id,
        name=name if isinstance(name, str) else f"Garden {index + 1}",
        bed_type=bed_type if isinstance(bed_type, str) else DEFAULT_BED_TYPE,
        rows=rows,
        cols=cols,
        grid=grid,
    )


def _hydrate_tracked(
    raw: Any, index: int, database: PlantDatabase, now: datetime
) -> TrackedPlant | None:
    data = as_dict(raw)
    plant = resolve_plant(data, database)
    if plant is None:
        return None
    raw_id = data.get("trackingId")
    if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool) and str(raw_id).strip():
        tracking_id = str(raw_id).strip()
    else:
        tracking_id = f"{plant.slug}-{int(now.timestamp() * 1000)}-{index}"
    return TrackedPlant.from_dict(data, plant=plant, tracking_id=tracking_id, now=now)


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def hydrate_state(
    blob: str | bytes | Mapping[str, Any] | None,
    database: PlantDatabase,
    now: datetime | None = None,
) -> GardenState:
    """Return a :class:`GardenState` loaded from a persisted blob.

    Every field is coerced to a safe default; a blob that cannot be parsed at
    all gives an empty state.
    """
    if blob is None:
        return GardenState()
    if isinstance(blob, (str, bytes, bytearray)):
        try:
            blob = json.loads(blob)
        except (ValueError, UnicodeDecodeError) as err:
            _LOGGER.warning("Failed to load saved garden state: %s", err)
            return GardenState()
    if not isinstance(blob, Mapping):
        _LOGGER.warning("Ignoring saved garden state of type %s", type(blob).__name__)
        return GardenState()

    now = now or utcnow()
    now_ms = int(now.timestamp() * 1000)

    gardens = tuple(
        _hydrate_garden(raw, index, database, now_ms)
        for index, raw in enumerate(_list(blob.get("gardens")))
    )
    added = tuple(
        plant
        for plant in (resolve_plant(raw, database) for raw in _list(blob.get("addedPlants")))
        if plant is not None
    )
    tracked = tuple(
        item
        for item in (
            _hydrate_tracked(raw, index, database, now)
            for index, raw in enumerate(_list(blob.get("trackedPlants")))
        )
        if item is not None
    )
    custom = hydrate_custom_entries(blob.get("customWateringEntries"), now)
    location = normalize_location(blob.get("location"))

    _LOGGER.info(
        "Loaded %d gardens, %d added plants and %d tracked plants",
        len(gardens),
        len(added),
        len(tracked),
    )
    return GardenState(
        gardens=gardens,
        added_plants=added,
        tracked_plants=tracked,
        custom_watering=custom,
        location=location,
    )


def serialize_state(state: GardenState) -> str:
    """Return ``state`` as the JSON blob written to storage."""
    return json.dumps(state.as_dict(), ensure_ascii=False)
