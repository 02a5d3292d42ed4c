"""Build display-ready plant records from catalog species and a frost anchor."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping, Union

from .catalog import PlantPeriod, RawPlantSpecies, ScheduleWindow, is_ornamental_type, pick_emoji
from .coercion import as_int, optional_string, string_or_fallback
from .constants import (
    DEFAULT_PLANT_TYPE,
    DEFAULT_SPRING_FROST_DAY,
    FALLBACK_EMOJI,
    HARVEST_SUFFIX,
    NOT_APPLICABLE,
    PLANT_TYPES,
    estimate_harvest_days,
)
from .day_calendar import format_day, format_day_range
from .localizer import first_window, localize_periods
from .utils import slugify

__all__ = [
    "CultivatedSchedule",
    "OrnamentalDisplay",
    "Plant",
    "PlantSchedule",
    "build_plant",
    "format_window",
    "format_harvest_date",
    "summarize_planting_mode",
    "periods_signature",
    "earliest_start_day",
]

OUTDOOR_DISPLAY = "Outdoor"

MODE_INDOOR_TO_OUTDOOR = "Indoor seed → outdoor transplant"
MODE_INDOOR_TRANSPLANT = "Start indoors & transplant"
MODE_INDOOR = "Start indoors"
MODE_DIRECT_SOW = "Direct sow outdoors"
MODE_TRANSPLANT = "Transplant outdoors"
MODE_UNKNOWN = "Refer to schedule"


@dataclass(frozen=True, slots=True)
class CultivatedSchedule:
    """Localized schedule fields of a sown/transplanted/harvested plant."""

    kind: ClassVar[str] = "cultivated"

    start_seed_indoor: str
    start_seed_outdoor: str
    transplant_outdoor: str
    harvest_date: str
    indoor_outdoor: str
    days_to_harvest: int
    transplant_day: int
    periods: tuple[PlantPeriod, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class OrnamentalDisplay:
    """Display-only record for ornamentals without schedule data."""

    kind: ClassVar[str] = "ornamental"

    indoor_outdoor: str = OUTDOOR_DISPLAY


PlantSchedule = Union[CultivatedSchedule, OrnamentalDisplay]


@dataclass(frozen=True, slots=True)
class Plant:
    """Display-ready plant, a pure function of a species and a frost anchor."""

    id: str
    slug: str
    name: str
    category: str
    image: str
    plant_type: str
    min_zone: int
    max_zone: int
    schedule: PlantSchedule
    bloom_season: str | None = None
    description: str | None = None

    @property
    def is_ornamental(self) -> bool:
        return is_ornamental_type(self.plant_type)

    @property
    def indoor_outdoor(self) -> str:
        return self.schedule.indoor_outdoor

    @property
    def cultivated(self) -> CultivatedSchedule | None:
        """Return the cultivated schedule or ``None`` for display-only records."""
        if isinstance(self.schedule, CultivatedSchedule):
            return self.schedule
        return None

    @property
    def default_periods(self) -> tuple[PlantPeriod, ...]:
        schedule = self.cultivated
        return schedule.periods if schedule else ()

    @property
    def days_to_harvest(self) -> int | None:
        schedule = self.cultivated
        return schedule.days_to_harvest if schedule else None

    @property
    def transplant_day(self) -> int | None:
        schedule = self.cultivated
        return schedule.transplant_day if schedule else None

    def as_dict(self) -> dict[str, Any]:
        """Return the flat camelCase mapping used by persisted snapshots."""
        data: dict[str, Any] = {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "category": self.category,
            "image": self.image,
            "plantType": self.plant_type,
            "indoorOutdoor": self.indoor_outdoor,
            "minZone": self.min_zone,
            "maxZone": self.max_zone,
        }
        schedule = self.cultivated
        if schedule is not None:
            data.update(
                {
                    "startSeedIndoor": schedule.start_seed_indoor,
                    "startSeedOutdoor": schedule.start_seed_outdoor,
                    "transplantOutdoor": schedule.transplant_outdoor,
                    "harvestDate": schedule.harvest_date,
                    "daysToHarvest": schedule.days_to_harvest,
                    "transplantDay": schedule.transplant_day,
                    "defaultPeriods": [p.as_dict() for p in schedule.periods],
                }
            )
        if self.bloom_season is not None:
            data["bloomSeason"] = self.bloom_season
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Plant:
        """Return a plant snapshot from a persisted mapping.

        Every field is coerced to a safe default so legacy or partially
        written records never raise.
        """
        name = string_or_fallback(data.get("name"), fallback="Unknown Plant")
        plant_id = data.get("id")
        if isinstance(plant_id, bool) or not isinstance(plant_id, (str, int)):
            plant_id = ""
        plant_type = data.get("plantType")
        if plant_type not in PLANT_TYPES:
            plant_type = DEFAULT_PLANT_TYPE

        raw_periods = data.get("defaultPeriods")
        periods = tuple(
            PlantPeriod.from_dict(p) for p in raw_periods
        ) if isinstance(raw_periods, list) else ()

        schedule: PlantSchedule
        has_schedule_fields = any(key in data for key in _CULTIVATED_KEYS)
        if is_ornamental_type(plant_type) and not periods and not has_schedule_fields:
            schedule = OrnamentalDisplay(
                indoor_outdoor=string_or_fallback(data.get("indoorOutdoor"), fallback=OUTDOOR_DISPLAY)
            )
        else:
            schedule = CultivatedSchedule(
                start_seed_indoor=string_or_fallback(data.get("startSeedIndoor"), fallback=NOT_APPLICABLE),
                start_seed_outdoor=string_or_fallback(data.get("startSeedOutdoor"), fallback=NOT_APPLICABLE),
                transplant_outdoor=string_or_fallback(data.get("transplantOutdoor"), fallback=NOT_APPLICABLE),
                harvest_date=string_or_fallback(data.get("harvestDate"), fallback=NOT_APPLICABLE),
                indoor_outdoor=string_or_fallback(
                    data.get("indoorOutdoor"), fallback=summarize_planting_mode(periods)
                ),
                days_to_harvest=as_int(data.get("daysToHarvest"), 0),
                transplant_day=as_int(data.get("transplantDay"), 0),
                periods=periods,
            )

        return cls(
            id=str(plant_id),
            slug=string_or_fallback(data.get("slug"), fallback=slugify(name)),
            name=name,
            category=string_or_fallback(data.get("category"), fallback="Uncategorized"),
            image=string_or_fallback(data.get("image"), fallback=FALLBACK_EMOJI),
            plant_type=plant_type,
            min_zone=as_int(data.get("minZone"), 1),
            max_zone=as_int(data.get("maxZone"), 13),
            schedule=schedule,
            bloom_season=optional_string(data.get("bloomSeason")),
            description=optional_string(data.get("description")),
        )


_CULTIVATED_KEYS = (
    "startSeedIndoor",
    "startSeedOutdoor",
    "transplantOutdoor",
    "harvestDate",
    "daysToHarvest",
    "transplantDay",
)


def format_window(window: ScheduleWindow | None) -> str:
    """Return the human readable date range for ``window``."""
    if window is None:
        return NOT_APPLICABLE
    return format_day_range(window.start_day, window.duration)


def format_harvest_date(start_day: int, days_to_harvest: int) -> str:
    return f"{format_day(start_day + days_to_harvest)} {HARVEST_SUFFIX}"


def summarize_planting_mode(periods: Iterable[PlantPeriod]) -> str:
    """Return the planting-mode label for the windows present in ``periods``."""
    periods = tuple(periods)
    has_indoor = any(p.indoor for p in periods)
    has_outdoor = any(p.outdoor for p in periods)
    has_transplant = any(p.transplant for p in periods)

    if has_indoor and has_transplant and has_outdoor:
        return MODE_INDOOR_TO_OUTDOOR
    if has_indoor and has_transplant:
        return MODE_INDOOR_TRANSPLANT
    if has_indoor:
        return MODE_INDOOR
    if has_outdoor:
        return MODE_DIRECT_SOW
    if has_transplant:
        return MODE_TRANSPLANT
    return MODE_UNKNOWN


def periods_signature(periods: Iterable[PlantPeriod]) -> str:
    """Return a stable serialization of ``periods`` for change detection."""
    return json.dumps([p.as_dict() for p in periods], sort_keys=True)


def _first_start(*windows: ScheduleWindow | None) -> int | None:
    for window in windows:
        if window is not None:
            return window.start_day
    return None


def earliest_start_day(periods: Iterable[PlantPeriod]) -> int | None:
    """Return the first indoor, outdoor or transplant start day in ``periods``."""
    periods = tuple(periods)
    return _first_start(
        first_window(periods, "indoor"),
        first_window(periods, "outdoor"),
        first_window(periods, "transplant"),
    )


def build_plant(
    species: RawPlantSpecies,
    frost_anchor_day: int,
    *,
    plant_id: str,
    image: str | None = None,
) -> Plant:
    """Return the :class:`Plant` for ``species`` localized to ``frost_anchor_day``.

    Ornamentals without periods become display-only records. Every other
    species gets a :class:`CultivatedSchedule`; missing windows render as
    ``"Not applicable"`` rather than raising.
    """
    common = dict(
        id=plant_id,
        slug=slugify(species.name),
        name=species.name,
        category=species.category,
        image=image or pick_emoji(species.name, species.category),
        plant_type=species.plant_type,
        min_zone=species.min_zone,
        max_zone=species.max_zone,
        bloom_season=species.bloom_season,
        description=species.description,
    )

    if species.is_ornamental and not species.default_periods:
        return Plant(schedule=OrnamentalDisplay(), **common)

    periods = localize_periods(species.default_periods, frost_anchor_day)
    indoor = first_window(periods, "indoor")
    transplant = first_window(periods, "transplant")
    outdoor = first_window(periods, "outdoor")

    earliest_start = earliest_start_day(periods)
    if earliest_start is None:
        earliest_start = frost_anchor_day or DEFAULT_SPRING_FROST_DAY
    transplant_start = _first_start(transplant, outdoor, indoor)
    if transplant_start is None:
        transplant_start = earliest_start

    days_to_harvest = estimate_harvest_days(species.category)
    schedule = CultivatedSchedule(
        start_seed_indoor=format_window(indoor),
        start_seed_outdoor=format_window(outdoor),
        transplant_outdoor=format_window(transplant),
        harvest_date=format_harvest_date(earliest_start, days_to_harvest),
        indoor_outdoor=summarize_planting_mode(species.default_periods),
        days_to_harvest=days_to_harvest,
        transplant_day=max(transplant_start - earliest_start, 0),
        periods=periods,
    )
    return Plant(schedule=schedule, **common)
