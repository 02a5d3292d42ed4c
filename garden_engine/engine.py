"""Stateful facade tying the derived database to the user's saved state."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from . import garden as garden_ops
from . import tracking
from . import watering
from .catalog import RawPlantSpecies
from .database import PlantDatabase, build_plant_database
from .day_calendar import utcnow
from .garden import Garden
from .location import LocationInfo, frost_anchor_for, normalize_location
from .plant_builder import Plant
from .planting_calendar import CalendarEvent, calendar_events, events_in_month
from .progress import ProgressResult, calculate_progress
from .reconcile import reconcile_state
from .state import GardenState, hydrate_state, serialize_state
from .tracking import PlantMetadata, PlantTimelineEntry, TrackedPlant, WateringStatus
from .watering import CustomWateringEntry

_LOGGER = logging.getLogger(__name__)

__all__ = ["GardenEngine"]


class GardenEngine:
    """Hold a :class:`GardenState` and keep it consistent with the catalog.

    Every command replaces :attr:`state` with a new snapshot. ``clock``
    supplies the current time and exists so callers can pin it.
    """

    def __init__(
        self,
        catalog: tuple[RawPlantSpecies, ...] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._catalog = catalog
        self._clock = clock
        self.state = GardenState()

    # derived data

    @property
    def frost_anchor_day(self) -> int:
        return frost_anchor_for(self.state.location)

    @property
    def database(self) -> PlantDatabase:
        return build_plant_database(self.frost_anchor_day, self._catalog)

    def plant(self, slug: str) -> Plant:
        plant = self.database.get(slug)
        if plant is None:
            raise KeyError(slug)
        return plant

    # persistence

    def load(self, blob: str | bytes | Mapping[str, Any] | None) -> GardenState:
        """Replace the state with ``blob`` and refresh it for its location."""
        state = hydrate_state(blob, build_plant_database(None, self._catalog), self._clock())
        self.state = state
        self.state = reconcile_state(state, self.database)
        return self.state

    def dump(self) -> str:
        return serialize_state(self.state)

    def update_location(self, info: LocationInfo | Mapping[str, Any] | None) -> GardenState:
        """Switch to a new location and re-derive every stored plant."""
        if info is not None and not isinstance(info, LocationInfo):
            info = normalize_location(dict(info))
        previous = self.frost_anchor_day
        self.state = replace(self.state, location=info)
        if self.frost_anchor_day != previous:
            _LOGGER.info("Frost day changed from %d to %d", previous, self.frost_anchor_day)
        self.state = reconcile_state(self.state, self.database)
        return self.state

    # gardens

    def create_garden(self, name: str, bed_type: str, rows: int, cols: int) -> int:
        garden = garden_ops.create_garden(name, bed_type, rows, cols, self.state.gardens)
        self.state = self.state.add_garden(garden)
        return garden.id

    def place_plant(self, garden_id: int, row: int, col: int, plant: Plant) -> Garden:
        garden = garden_ops.place_plant(self.state.get_garden(garden_id), row, col, plant)
        self.state = self.state.update_garden(garden).add_plant_to_list(plant)
        return garden

    def remove_plant(self, garden_id: int, row: int, col: int) -> Garden:
        garden = garden_ops.remove_plant(self.state.get_garden(garden_id), row, col)
        self.state = self.state.update_garden(garden)
        return garden

    def delete_garden(self, garden_id: int) -> Garden:
        garden = self.state.get_garden(garden_id)
        self.state = self.state.delete_garden(garden_id)
        return garden

    def restore_garden(self, garden: Garden, index: int | None = None) -> None:
        self.state = self.state.restore_garden(garden, index)

    def add_plant_to_list(self, plant: Plant) -> None:
        self.state = self.state.add_plant_to_list(plant)

    def remove_plant_from_list(self, plant_id: str) -> None:
        self.state = self.state.remove_plant_from_list(plant_id)

    # tracked plants

    def _unique_tracking_id(self, plant: Plant, now: datetime) -> str:
        base = f"{plant.slug}-{int(now.timestamp() * 1000)}"
        existing = {t.tracking_id for t in self.state.tracked_plants}
        candidate = base
        suffix = 1
        while candidate in existing:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def start_tracking(self, plant: Plant) -> TrackedPlant:
        now = self._clock()
        tracked = tracking.start_tracking(plant, now, self._unique_tracking_id(plant, now))
        self.state = self.state.add_tracked(tracked)
        return tracked

    def remove_tracked_plant(self, tracking_id: str) -> None:
        self.state = self.state.remove_tracked(tracking_id)

    def _update_tracked(self, tracked: TrackedPlant) -> TrackedPlant:
        self.state = self.state.update_tracked(tracked)
        return tracked

    def confirm_planted_date(self, tracking_id: str, planted: str | datetime) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(tracking.confirm_planted_date(tracked, planted))

    def log_watering(self, tracking_id: str) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(tracking.log_watering(tracked, self._clock()))

    def update_watering_settings(
        self, tracking_id: str, frequency: str, interval_days: int | None = None
    ) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(
            tracking.update_watering_settings(tracked, frequency, interval_days)
        )

    def toggle_watering_reminder(self, tracking_id: str, enabled: bool) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(tracking.toggle_watering_reminder(tracked, enabled))

    def add_timeline_entry(self, tracking_id: str, entry: PlantTimelineEntry) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(tracking.add_timeline_entry(tracked, entry))

    def update_tracked_plant_details(
        self,
        tracking_id: str,
        metadata: PlantMetadata | None = None,
        timeline: list[PlantTimelineEntry] | None = None,
        notes: str | None = None,
    ) -> TrackedPlant:
        tracked = self.state.get_tracked(tracking_id)
        return self._update_tracked(
            tracking.update_tracked_plant_details(tracked, metadata, timeline, notes)
        )

    def calculate_progress(self, tracking_id: str) -> ProgressResult:
        return calculate_progress(self.state.get_tracked(tracking_id), self._clock())

    def watering_status(
        self, tracking_id: str, max_temp_f: float | None = None
    ) -> WateringStatus:
        return tracking.watering_status(
            self.state.get_tracked(tracking_id), self._clock(), max_temp_f
        )

    def overdue_plants(self, max_temp_f: float | None = None) -> list[TrackedPlant]:
        """Return tracked plants whose watering reminder is due."""
        now = self._clock()
        return [
            tracked
            for tracked in self.state.tracked_plants
            if tracking.watering_status(tracked, now, max_temp_f).reminder_due
        ]

    # custom watering

    def add_custom_watering_entry(
        self, name: str | None, frequency_days: float | None, **options: Any
    ) -> CustomWateringEntry:
        entry = watering.new_custom_entry(
            name, frequency_days, database=self.database, now=self._clock(), **options
        )
        self.state = self.state.add_custom_entry(entry)
        return entry

    def update_custom_watering_entry(self, entry_id: str, **updates: Any) -> CustomWateringEntry:
        entry = watering.update_custom_entry(
            self.state.get_custom_entry(entry_id),
            database=self.database,
            now=self._clock(),
            **updates,
        )
        self.state = self.state.update_custom_entry(entry)
        return entry

    def mark_custom_watering_entry_watered(self, entry_id: str) -> CustomWateringEntry:
        entry = watering.mark_custom_entry_watered(
            self.state.get_custom_entry(entry_id), self._clock()
        )
        self.state = self.state.update_custom_entry(entry)
        return entry

    def delete_custom_watering_entry(self, entry_id: str) -> None:
        self.state = self.state.remove_custom_entry(entry_id)

    # calendar

    def month_events(self, month: int) -> list[CalendarEvent]:
        """Return calendar events in ``month`` for every added plant."""
        events = [event for plant in self.state.added_plants for event in calendar_events(plant)]
        return events_in_month(events, month)
