"""Planting calendar events derived from localized plant schedules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from .day_calendar import day_to_date
from .localizer import first_window
from .plant_builder import Plant, earliest_start_day

__all__ = [
    "EVENT_KINDS",
    "CalendarEvent",
    "calendar_events",
    "events_in_month",
    "calendar_frame",
]

# window kind -> calendar event kind
_WINDOW_EVENTS = (
    ("indoor", "sow-indoors"),
    ("outdoor", "sow-outdoors"),
    ("transplant", "transplant"),
)
EVENT_KINDS = tuple(kind for _, kind in _WINDOW_EVENTS) + ("harvest",)


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    slug: str
    name: str
    kind: str
    start_day: int
    end_day: int

    def months(self) -> frozenset[int]:
        """Return the calendar months the event touches.

        Days before 1 or after 365 roll into the neighbouring year, so a
        harvest on day 400 falls in February.
        """
        start = day_to_date(self.start_day)
        end = day_to_date(max(self.end_day, self.start_day))
        if (end - start).days >= 365:
            return frozenset(range(1, 13))
        months = set()
        year, month = start.year, start.month
        while (year, month) <= (end.year, end.month):
            months.add(month)
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)
        return frozenset(months)


def calendar_events(plant: Plant) -> list[CalendarEvent]:
    """Return the sowing, transplant and harvest events for ``plant``.

    Display-only ornamentals and plants without windows have no events.
    """
    periods = plant.default_periods
    events: list[CalendarEvent] = []
    for window_kind, event_kind in _WINDOW_EVENTS:
        window = first_window(periods, window_kind)
        if window is None:
            continue
        events.append(
            CalendarEvent(plant.slug, plant.name, event_kind, window.start_day, window.end_day)
        )

    start = earliest_start_day(periods)
    if start is not None and plant.days_to_harvest:
        harvest_day = start + plant.days_to_harvest
        events.append(CalendarEvent(plant.slug, plant.name, "harvest", harvest_day, harvest_day))
    return events


def events_in_month(events: Iterable[CalendarEvent], month: int) -> list[CalendarEvent]:
    """Return events touching calendar ``month``, ordered by start day."""
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    selected = [event for event in events if month in event.months()]
    return sorted(selected, key=lambda event: (event.start_day, event.name, event.kind))


def calendar_frame(plants: Iterable[Plant]) -> "pd.DataFrame":
    """Return every calendar event of ``plants`` as a :class:`pandas.DataFrame`."""
    rows = [
        {
            "slug": event.slug,
            "name": event.name,
            "kind": event.kind,
            "start_day": event.start_day,
            "end_day": event.end_day,
            "start_date": day_to_date(event.start_day),
            "end_date": day_to_date(event.end_day),
        }
        for plant in plants
        for event in calendar_events(plant)
    ]
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    df["start_date"] = pd.to_datetime(df["start_date"])  # type: ignore[arg-type]
    df["end_date"] = pd.to_datetime(df["end_date"])  # type: ignore[arg-type]
    return df.sort_values(["start_day", "name", "kind"]).reset_index(drop=True)
