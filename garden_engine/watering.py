"""Custom watering reminders for plants that are not tracked individually."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

from .coercion import as_bool, as_dict, as_float, as_int, optional_string, string_or_fallback
from .constants import (
    DEFAULT_WATERING_INTERVAL,
    FALLBACK_EMOJI,
    MAX_WATERING_INTERVAL,
    WATERING_REMINDER_HOUR,
)
from .database import PlantDatabase
from .day_calendar import isoformat_utc, parse_timestamp, utcnow
from .plant_builder import Plant

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "WateringSchedule",
    "CustomWateringEntry",
    "new_custom_entry",
    "update_custom_entry",
    "mark_custom_entry_watered",
    "next_watering_at",
    "hydrate_custom_entries",
]

UNTITLED = "Untitled Plant"

_UPDATABLE = frozenset(
    {
        "name",
        "linked_plant_id",
        "linked_plant_name",
        "linked_plant_category",
        "emoji",
        "location",
        "notes",
        "reminder_enabled",
        "frequency_days",
        "remind_at_hour",
    }
)


@dataclass(frozen=True, slots=True)
class WateringSchedule:
    frequency_days: int = DEFAULT_WATERING_INTERVAL
    remind_at_hour: int | None = None
    mode: str = "interval"

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"mode": self.mode, "frequencyDays": self.frequency_days}
        if self.remind_at_hour is not None:
            data["remindAtHour"] = self.remind_at_hour
        return data


@dataclass(frozen=True, slots=True)
class CustomWateringEntry:
    id: str
    name: str
    created_at: str
    updated_at: str
    schedule: WateringSchedule = field(default_factory=WateringSchedule)
    emoji: str = FALLBACK_EMOJI
    reminder_enabled: bool = True
    linked_plant_id: str | None = None
    linked_plant_name: str | None = None
    linked_plant_category: str | None = None
    location: str | None = None
    notes: str | None = None
    last_watered_at: str | None = None
    next_watering_at: str | None = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "schedule": self.schedule.as_dict(),
            "reminderEnabled": self.reminder_enabled,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        optional = {
            "linkedPlantId": self.linked_plant_id,
            "linkedPlantName": self.linked_plant_name,
            "linkedPlantCategory": self.linked_plant_category,
            "location": self.location,
            "notes": self.notes,
            "lastWateredAt": self.last_watered_at,
            "nextWateringAt": self.next_watering_at,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


def _round_frequency(value: Any) -> int:
    """Return ``value`` rounded half up, or the default for unusable values."""
    number = as_float(value)
    if number is None or number == 0 or number > MAX_WATERING_INTERVAL:
        return DEFAULT_WATERING_INTERVAL
    return max(1, math.floor(number + 0.5))


def _check_hour(hour: Any) -> int | None:
    if hour is None:
        return None
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
        raise ValueError(f"remind_at_hour must be an hour between 0 and 23, got {hour!r}")
    return hour


def next_watering_at(
    last_watered: datetime | None,
    frequency_days: int,
    hour: int = WATERING_REMINDER_HOUR,
    now: datetime | None = None,
) -> datetime:
    """Return the next reminder time, ``frequency_days`` after the last watering.

    Without a previous watering the interval counts from ``now``.
    """
    base = last_watered or now or utcnow()
    next_day = base + timedelta(days=max(1, frequency_days))
    return next_day.replace(hour=hour, minute=0, second=0, microsecond=0)


def _sync_reminder(entry: CustomWateringEntry, now: datetime) -> CustomWateringEntry:
    if not entry.reminder_enabled:
        return replace(entry, next_watering_at=None)
    hour = entry.schedule.remind_at_hour
    upcoming = next_watering_at(
        parse_timestamp(entry.last_watered_at),
        entry.schedule.frequency_days,
        WATERING_REMINDER_HOUR if hour is None else hour,
        now,
    )
    return replace(entry, next_watering_at=isoformat_utc(upcoming))


def _linked(database: PlantDatabase | None, plant_id: str | None) -> Plant | None:
    if database is None or not plant_id:
        return None
    return database.by_id.get(plant_id)


def new_custom_entry(
    name: str | None,
    frequency_days: float | None,
    *,
    database: PlantDatabase | None = None,
    linked_plant_id: str | None = None,
    linked_plant_name: str | None = None,
    linked_plant_category: str | None = None,
    emoji: str | None = None,
    location: str | None = None,
    notes: str | None = None,
    remind_at_hour: int | None = None,
    reminder_enabled: bool = True,
    now: datetime | None = None,
    entry_id: str | None = None,
) -> CustomWateringEntry:
    """Return a new custom watering entry with its next reminder computed."""
    now = now or utcnow()
    stamp = isoformat_utc(now)
    linked = _linked(database, linked_plant_id)
    entry = CustomWateringEntry(
        id=entry_id or f"custom-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:6]}",
        name=string_or_fallback(name, linked.name if linked else None, fallback=UNTITLED),
        linked_plant_id=linked_plant_id,
        linked_plant_name=linked_plant_name if linked_plant_name is not None else (linked.name if linked else None),
        linked_plant_category=(
            linked_plant_category if linked_plant_category is not None else (linked.category if linked else None)
        ),
        emoji=emoji or (linked.image if linked else FALLBACK_EMOJI),
        location=location,
        notes=notes,
        schedule=WateringSchedule(
            frequency_days=_round_frequency(frequency_days),
            remind_at_hour=_check_hour(remind_at_hour),
        ),
        reminder_enabled=reminder_enabled,
        created_at=stamp,
        updated_at=stamp,
    )
    return _sync_reminder(entry, now)


def update_custom_entry(
    entry: CustomWateringEntry,
    *,
    database: PlantDatabase | None = None,
    now: datetime | None = None,
    **updates: Any,
) -> CustomWateringEntry:
    """Return ``entry`` with ``updates`` applied.

    Changing ``linked_plant_id`` refreshes the denormalized plant name,
    category and emoji unless they are given explicitly.
    """
    unknown = set(updates) - _UPDATABLE
    if unknown:
        raise ValueError(f"unknown custom watering fields: {', '.join(sorted(unknown))}")
    now = now or utcnow()

    schedule = entry.schedule
    if updates.get("frequency_days"):
        schedule = replace(schedule, frequency_days=_round_frequency(updates.pop("frequency_days")))
    else:
        updates.pop("frequency_days", None)
    if "remind_at_hour" in updates:
        schedule = replace(schedule, remind_at_hour=_check_hour(updates.pop("remind_at_hour")))

    new_link = updates.get("linked_plant_id")
    if new_link:
        linked = _linked(database, new_link)
        for attr, value in (
            ("linked_plant_name", linked.name if linked else None),
            ("linked_plant_category", linked.category if linked else None),
            ("emoji", linked.image if linked else None),
        ):
            if updates.get(attr) is None:
                updates[attr] = value
    if updates.get("emoji") is None:
        updates["emoji"] = entry.emoji
    if "name" in updates:
        updates["name"] = string_or_fallback(updates["name"], fallback=entry.name)

    updated = replace(entry, schedule=schedule, updated_at=isoformat_utc(now), **updates)
    return _sync_reminder(updated, now)


def mark_custom_entry_watered(
    entry: CustomWateringEntry, now: datetime | None = None
) -> CustomWateringEntry:
    now = now or utcnow()
    stamp = isoformat_utc(now)
    return _sync_reminder(replace(entry, last_watered_at=stamp, updated_at=stamp), now)


def hydrate_custom_entries(
    raw: Any, now: datetime | None = None
) -> tuple[CustomWateringEntry, ...]:
    """Return custom entries from persisted data, coercing every field.

    The frequency comes from ``schedule.frequencyDays`` or the legacy top
    level ``frequencyDays``. Non-list input yields no entries.
    """
    if not isinstance(raw, list):
        return ()
    now = now or utcnow()
    stamp = isoformat_utc(now)
    entries: list[CustomWateringEntry] = []
    for index, item in enumerate(raw):
        data = as_dict(item)
        if not data:
            _LOGGER.debug("Skipping custom watering entry %d: not a mapping", index)
            continue
        schedule = as_dict(data.get("schedule"))
        frequency = schedule.get("frequencyDays", data.get("frequencyDays"))
        number = as_float(frequency)
        remind = as_int(schedule.get("remindAtHour"))
        created = string_or_fallback(data.get("createdAt"), fallback=stamp)
        entry = CustomWateringEntry(
            id=string_or_fallback(
                data.get("id"), fallback=f"custom-{int(now.timestamp() * 1000)}-{index}"
            ),
            name=string_or_fallback(data.get("name"), data.get("linkedPlantName"), fallback=UNTITLED),
            linked_plant_id=optional_string(data.get("linkedPlantId")),
            linked_plant_name=optional_string(data.get("linkedPlantName")),
            linked_plant_category=optional_string(data.get("linkedPlantCategory")),
            emoji=string_or_fallback(data.get("emoji"), fallback=FALLBACK_EMOJI),
            location=optional_string(data.get("location")),
            notes=optional_string(data.get("notes")),
            schedule=WateringSchedule(
                frequency_days=(
                    max(1, int(number))
                    if number is not None and number <= MAX_WATERING_INTERVAL
                    else DEFAULT_WATERING_INTERVAL
                ),
                remind_at_hour=remind if remind is not None and 0 <= remind <= 23 else None,
            ),
            reminder_enabled=as_bool(data.get("reminderEnabled"), True),
            last_watered_at=optional_string(data.get("lastWateredAt")),
            created_at=created,
            updated_at=string_or_fallback(data.get("updatedAt"), fallback=created),
        )
        entries.append(_sync_reminder(entry, now))
    return tuple(entries)

