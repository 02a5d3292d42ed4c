"""Tracked plant records and the commands that mutate them.

Every command returns a new :class:`TrackedPlant`; nothing is changed in
place. The plant snapshot is the only part reconciliation may replace, all
other fields belong to the user.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Mapping

from .coercion import as_bool, as_dict, as_int, optional_string, string_or_fallback
from .constants import (
    DEFAULT_WATERING_FREQUENCY,
    DEFAULT_WATERING_INTERVAL,
    MAX_WATERING_INTERVAL,
    WATERING_FREQUENCIES,
    WATERING_INTERVALS,
    WATERING_REMINDER_HOUR,
)
from .day_calendar import isoformat_utc, parse_timestamp, utcnow, whole_days_between
from .plant_builder import Plant

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "TIMELINE_CATEGORIES",
    "TIMELINE_PRIORITIES",
    "PlantCustomField",
    "PlantMetadata",
    "PlantTimelineEntry",
    "TrackedPlant",
    "WateringStatus",
    "start_tracking",
    "confirm_planted_date",
    "log_watering",
    "update_watering_settings",
    "toggle_watering_reminder",
    "add_timeline_entry",
    "update_tracked_plant_details",
    "heat_adjusted_interval",
    "watering_status",
]

TIMELINE_CATEGORIES = ("observation", "maintenance", "issue", "harvest", "custom")
TIMELINE_PRIORITIES = ("low", "medium", "high")

STATUS_PLANNED = "planned"
STATUS_PLANTED = "planted"

HOT_DAY_F = 92
EXTREME_HEAT_F = 100

# attribute name -> persisted key
_METADATA_KEYS = {
    "variety": "variety",
    "cultivar": "cultivar",
    "source": "source",
    "pot_size": "potSize",
    "soil_mix": "soilMix",
    "fertilizer_schedule": "fertilizerSchedule",
    "location": "location",
    "notes": "notes",
}


@dataclass(frozen=True, slots=True)
class PlantCustomField:
    id: str
    label: str
    value: str

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "label": self.label, "value": self.value}


@dataclass(frozen=True, slots=True)
class PlantMetadata:
    """User-entered details about a tracked plant."""

    variety: str = ""
    cultivar: str = ""
    source: str = ""
    pot_size: str = ""
    soil_mix: str = ""
    fertilizer_schedule: str = ""
    location: str = ""
    notes: str = ""
    custom_fields: tuple[PlantCustomField, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in _METADATA_KEYS.items()}
        data["customFields"] = [f.as_dict() for f in self.custom_fields]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> PlantMetadata:
        data = as_dict(data)
        custom: list[PlantCustomField] = []
        raw_fields = data.get("customFields")
        for raw in raw_fields if isinstance(raw_fields, list) else []:
            raw = as_dict(raw)
            if not raw:
                continue
            custom.append(
                PlantCustomField(
                    id=str(raw.get("id", "")),
                    label=str(raw.get("label", "")),
                    value=str(raw.get("value", "")),
                )
            )
        values = {
            attr: data[key] if isinstance(data.get(key), str) else ""
            for attr, key in _METADATA_KEYS.items()
        }
        return cls(custom_fields=tuple(custom), **values)


@dataclass(frozen=True, slots=True)
class PlantTimelineEntry:
    """One append-only journal entry."""

    id: str
    date: str
    title: str
    created_at: str
    notes: str | None = None
    photo_uri: str | None = None
    category: str | None = None
    priority: str | None = None

    def __post_init__(self) -> None:
        if self.category is not None and self.category not in TIMELINE_CATEGORIES:
            raise ValueError(f"invalid timeline category {self.category}")
        if self.priority is not None and self.priority not in TIMELINE_PRIORITIES:
            raise ValueError(f"invalid timeline priority {self.priority}")

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "createdAt": self.created_at,
        }
        optional = {
            "notes": self.notes,
            "photoUri": self.photo_uri,
            "category": self.category,
            "priority": self.priority,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: Any) -> PlantTimelineEntry | None:
        """Return an entry from persisted data or ``None`` if it has no id."""
        data = as_dict(data)
        entry_id = optional_string(data.get("id"))
        if entry_id is None:
            return None
        date = string_or_fallback(data.get("date"), data.get("createdAt"), fallback="")
        category = data.get("category")
        priority = data.get("priority")
        return cls(
            id=entry_id,
            date=date,
            title=string_or_fallback(data.get("title"), fallback="Untitled entry"),
            created_at=string_or_fallback(data.get("createdAt"), fallback=date),
            notes=optional_string(data.get("notes")),
            photo_uri=optional_string(data.get("photoUri")),
            category=category if category in TIMELINE_CATEGORIES else None,
            priority=priority if priority in TIMELINE_PRIORITIES else None,
        )


@dataclass(frozen=True, slots=True)
class TrackedPlant:
    """A user's real planting: a plant snapshot plus user-owned state."""

    plant: Plant
    tracking_id: str
    seed_planted_date: str
    planted_confirmed: bool = False
    days_grown: int = 0
    status: str = STATUS_PLANNED
    watering_frequency: str = DEFAULT_WATERING_FREQUENCY
    watering_interval_days: int = DEFAULT_WATERING_INTERVAL
    last_watered: str | None = None
    watering_reminder_enabled: bool = True
    notes: str = ""
    metadata: PlantMetadata = field(default_factory=PlantMetadata)
    timeline: tuple[PlantTimelineEntry, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.plant.name

    @property
    def slug(self) -> str:
        return self.plant.slug

    def as_dict(self) -> dict[str, Any]:
        """Return the flat persisted mapping (plant fields plus tracking fields)."""
        data = self.plant.as_dict()
        data.update(
            {
                "trackingId": self.tracking_id,
                "seedPlantedDate": self.seed_planted_date,
                "plantedConfirmed": self.planted_confirmed,
                "daysGrown": self.days_grown,
                "status": self.status,
                "wateringFrequency": self.watering_frequency,
                "wateringIntervalDays": self.watering_interval_days,
                "wateringReminderEnabled": self.watering_reminder_enabled,
                "notes": self.notes,
                "metadata": self.metadata.as_dict(),
                "timeline": [entry.as_dict() for entry in self.timeline],
            }
        )
        if self.last_watered is not None:
            data["lastWatered"] = self.last_watered
        return data

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        *,
        plant: Plant | None = None,
        tracking_id: str | None = None,
        now: datetime | None = None,
    ) -> TrackedPlant:
        """Return a tracked plant from persisted ``data``.

        ``plant`` replaces the embedded snapshot, used when the record was
        matched against the current database.
        """
        if plant is None:
            plant = Plant.from_dict(data)
        frequency = data.get("wateringFrequency")
        if frequency not in WATERING_FREQUENCIES:
            frequency = DEFAULT_WATERING_FREQUENCY
        interval = as_int(data.get("wateringIntervalDays"))
        if interval is None or not 1 <= interval <= MAX_WATERING_INTERVAL:
            interval = DEFAULT_WATERING_INTERVAL
        raw_timeline = data.get("timeline")
        timeline = tuple(
            entry
            for entry in (
                PlantTimelineEntry.from_dict(raw)
                for raw in (raw_timeline if isinstance(raw_timeline, list) else [])
            )
            if entry is not None
        )
        planted_confirmed = as_bool(data.get("plantedConfirmed"), False)
        status = data.get("status")
        if status not in (STATUS_PLANNED, STATUS_PLANTED):
            status = STATUS_PLANTED if planted_confirmed else STATUS_PLANNED
        return cls(
            plant=plant,
            tracking_id=string_or_fallback(data.get("trackingId"), tracking_id, fallback=""),
            seed_planted_date=string_or_fallback(
                data.get("seedPlantedDate"),
                data.get("plantedDate"),
                fallback=isoformat_utc(now or utcnow()),
            ),
            planted_confirmed=planted_confirmed,
            days_grown=max(as_int(data.get("daysGrown"), 0), 0),
            status=status,
            watering_frequency=frequency,
            watering_interval_days=interval,
            last_watered=optional_string(data.get("lastWatered")),
            watering_reminder_enabled=as_bool(data.get("wateringReminderEnabled"), True),
            notes=data["notes"] if isinstance(data.get("notes"), str) else "",
            metadata=PlantMetadata.from_dict(data.get("metadata")),
            timeline=timeline,
        )


@dataclass(frozen=True, slots=True)
class WateringStatus:
    days_since_watered: int | None
    interval_days: int
    next_watering: datetime | None
    reminder_due: bool
    urgency: str | None


def _now(now: datetime | None) -> datetime:
    return now if now is not None else utcnow()


def _log_entry(
    now: datetime, title: str, notes: str, category: str, priority: str
) -> PlantTimelineEntry:
    stamp = isoformat_utc(now)
    return PlantTimelineEntry(
        id=f"log-{int(now.timestamp() * 1000)}",
        date=stamp,
        title=title,
        created_at=stamp,
        notes=notes,
        category=category,
        priority=priority,
    )


def start_tracking(
    plant: Plant, now: datetime | None = None, tracking_id: str | None = None
) -> TrackedPlant:
    """Return a new planned :class:`TrackedPlant` for ``plant``."""
    now = _now(now)
    stamp = isoformat_utc(now)
    if tracking_id is None:
        tracking_id = f"{plant.slug}-{int(now.timestamp() * 1000)}"
    entry = _log_entry(
        now, "Tracking started", "Plant added to your garden tracker.", "observation", "low"
    )
    _LOGGER.debug("Started tracking %s as %s", plant.name, tracking_id)
    return TrackedPlant(
        plant=plant,
        tracking_id=tracking_id,
        seed_planted_date=stamp,
        last_watered=stamp,
        timeline=(entry,),
    )


def confirm_planted_date(tracked: TrackedPlant, planted: str | datetime) -> TrackedPlant:
    """Mark ``tracked`` as planted on ``planted``.

    Parsable dates are normalized to ISO; anything else is stored as given.
    """
    parsed = parse_timestamp(planted)
    if parsed is not None:
        normalized = isoformat_utc(parsed)
    else:
        normalized = str(planted)
    return replace(
        tracked,
        seed_planted_date=normalized,
        status=STATUS_PLANTED,
        planted_confirmed=True,
        days_grown=0,
    )


def log_watering(tracked: TrackedPlant, now: datetime | None = None) -> TrackedPlant:
    now = _now(now)
    entry = _log_entry(now, "Watered", "Watering logged.", "maintenance", "medium")
    updated = add_timeline_entry(tracked, entry)
    return replace(updated, last_watered=isoformat_utc(now))


def update_watering_settings(
    tracked: TrackedPlant, frequency: str, interval_days: int | None = None
) -> TrackedPlant:
    """Return ``tracked`` with a new watering frequency.

    Without ``interval_days`` the preset interval for ``frequency`` is used;
    ``custom`` keeps the current interval.
    """
    if frequency not in WATERING_FREQUENCIES:
        raise ValueError(f"unknown watering frequency {frequency}")
    if interval_days is None:
        if frequency == "custom":
            interval_days = tracked.watering_interval_days or DEFAULT_WATERING_INTERVAL
        else:
            interval_days = WATERING_INTERVALS[frequency]
    elif not 1 <= interval_days <= MAX_WATERING_INTERVAL:
        raise ValueError(f"interval_days must be between 1 and {MAX_WATERING_INTERVAL}")
    return replace(
        tracked, watering_frequency=frequency, watering_interval_days=int(interval_days)
    )


def toggle_watering_reminder(tracked: TrackedPlant, enabled: bool) -> TrackedPlant:
    return replace(tracked, watering_reminder_enabled=bool(enabled))


def add_timeline_entry(tracked: TrackedPlant, entry: PlantTimelineEntry) -> TrackedPlant:
    """Append ``entry`` unless an entry with the same id exists."""
    if any(existing.id == entry.id for existing in tracked.timeline):
        return tracked
    return replace(tracked, timeline=tracked.timeline + (entry,))


def update_tracked_plant_details(
    tracked: TrackedPlant,
    metadata: PlantMetadata | None = None,
    timeline: tuple[PlantTimelineEntry, ...] | list[PlantTimelineEntry] | None = None,
    notes: str | None = None,
) -> TrackedPlant:
    changes: dict[str, Any] = {}
    if metadata is not None:
        changes["metadata"] = metadata
    if timeline is not None:
        changes["timeline"] = tuple(timeline)
    if notes is not None:
        changes["notes"] = notes
    if not changes:
        return tracked
    return replace(tracked, **changes)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def heat_adjusted_interval(interval_days: int, max_temp_f: float | None = None) -> int:
    """Return ``interval_days`` shortened for hot days.

    Above 92°F the interval shrinks by 30 %, above 100°F by 50 %, never
    below one day.
    """
    if max_temp_f is None or max_temp_f <= HOT_DAY_F:
        return interval_days
    reduction = 0.5 if max_temp_f > EXTREME_HEAT_F else 0.3
    return max(1, _round_half_up(interval_days * (1 - reduction)))


def watering_status(
    tracked: TrackedPlant,
    now: datetime | None = None,
    max_temp_f: float | None = None,
) -> WateringStatus:
    """Return watering reminder state for ``tracked`` at ``now``."""
    now = _now(now)
    interval = heat_adjusted_interval(tracked.watering_interval_days, max_temp_f)
    last = parse_timestamp(tracked.last_watered)
    if last is None:
        return WateringStatus(None, interval, None, False, None)

    days = whole_days_between(last, now)
    next_day = last + timedelta(days=interval)
    next_watering = next_day.replace(
        hour=WATERING_REMINDER_HOUR, minute=0, second=0, microsecond=0
    )
    due = tracked.watering_reminder_enabled and (4 <= days <= 7 or days > interval + 3)
    urgency = None
    if due:
        urgency = "Urgent!" if days > interval else "Reminder"
    return WateringStatus(days, interval, next_watering, due, urgency)
