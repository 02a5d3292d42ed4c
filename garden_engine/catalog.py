"""Raw plant catalog: species definitions and their frost-relative schedules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import voluptuous as vol

from .coercion import as_int
from .constants import DEFAULT_PLANT_TYPE, FALLBACK_EMOJI, ORNAMENTAL_TYPES, PLANT_TYPES
from .utils import load_dataset

_LOGGER = logging.getLogger(__name__)

CATALOG_FILE = "plant_catalog.json"
EMOJI_FILE = "plant_emoji.json"

WINDOW_KINDS = ("indoor", "transplant", "outdoor")

__all__ = [
    "CATALOG_FILE",
    "WINDOW_KINDS",
    "ScheduleWindow",
    "PlantPeriod",
    "RawPlantSpecies",
    "SPECIES_SCHEMA",
    "CATALOG_SCHEMA",
    "is_ornamental_type",
    "parse_species",
    "validate_catalog",
    "load_catalog",
    "pick_emoji",
]


def is_ornamental_type(plant_type: str | None) -> bool:
    """Return ``True`` for display-only plant types (flowers and ornamentals)."""
    return plant_type in ORNAMENTAL_TYPES


@dataclass(frozen=True, slots=True)
class ScheduleWindow:
    """One cultivation window relative to the spring frost anchor.

    ``start_day_localized`` is ``None`` on raw catalog data and is filled in
    by :func:`garden_engine.localizer.localize_window`.
    """

    start_offset_from_spring_frost: int
    start_day_default: int
    duration: int
    raw_start: str | None = None
    start_day_localized: int | None = None

    @property
    def start_day(self) -> int:
        """Return the localized start day, falling back to the default day."""
        if self.start_day_localized is not None:
            return self.start_day_localized
        return self.start_day_default

    @property
    def end_day(self) -> int:
        """Return the last day covered by the window (inclusive)."""
        return self.start_day + max(self.duration - 1, 0)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.raw_start is not None:
            data["rawStart"] = self.raw_start
        data["startOffsetFromSpringFrost"] = self.start_offset_from_spring_frost
        data["startDayDefault"] = self.start_day_default
        data["duration"] = self.duration
        if self.start_day_localized is not None:
            data["startDayLocalized"] = self.start_day_localized
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ScheduleWindow | None:
        """Return a window parsed leniently from ``data`` or ``None``."""
        if not isinstance(data, Mapping):
            return None
        offset = as_int(data.get("startOffsetFromSpringFrost"))
        default_day = as_int(data.get("startDayDefault"))
        duration = as_int(data.get("duration"))
        if offset is None or default_day is None or duration is None:
            return None
        raw_start = data.get("rawStart")
        return cls(
            start_offset_from_spring_frost=offset,
            start_day_default=default_day,
            duration=duration,
            raw_start=raw_start if isinstance(raw_start, str) else None,
            start_day_localized=as_int(data.get("startDayLocalized")),
        )


@dataclass(frozen=True, slots=True)
class PlantPeriod:
    """A single cultivation cycle made of optional windows."""

    indoor: ScheduleWindow | None = None
    transplant: ScheduleWindow | None = None
    outdoor: ScheduleWindow | None = None

    def window(self, kind: str) -> ScheduleWindow | None:
        if kind not in WINDOW_KINDS:
            raise ValueError(f"unknown window kind {kind}")
        return getattr(self, kind)

    def as_dict(self) -> dict[str, Any]:
        return {
            kind: window.as_dict()
            for kind in WINDOW_KINDS
            if (window := getattr(self, kind)) is not None
        }

    @classmethod
    def from_dict(cls, data: Any) -> PlantPeriod:
        if not isinstance(data, Mapping):
            return cls()
        return cls(**{kind: ScheduleWindow.from_dict(data.get(kind)) for kind in WINDOW_KINDS})


@dataclass(frozen=True, slots=True)
class RawPlantSpecies:
    """Immutable species definition loaded from the catalog dataset."""

    name: str
    category: str
    min_zone: int
    max_zone: int
    plant_type: str = DEFAULT_PLANT_TYPE
    default_periods: tuple[PlantPeriod, ...] = field(default_factory=tuple)
    bloom_season: str | None = None
    description: str | None = None

    @property
    def is_ornamental(self) -> bool:
        return is_ornamental_type(self.plant_type)


_WINDOW_SCHEMA = vol.Any(
    None,
    vol.Schema(
        {
            vol.Optional("rawStart"): vol.Any(None, str),
            vol.Required("startOffsetFromSpringFrost"): int,
            vol.Required("startDayDefault"): int,
            vol.Required("duration"): vol.All(int, vol.Range(min=1)),
        },
        extra=vol.ALLOW_EXTRA,
    ),
)

_PERIOD_SCHEMA = vol.Schema(
    {vol.Optional(kind): _WINDOW_SCHEMA for kind in WINDOW_KINDS},
    extra=vol.ALLOW_EXTRA,
)

SPECIES_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Required("category"): vol.All(str, vol.Length(min=1)),
        vol.Required("minZone"): int,
        vol.Required("maxZone"): int,
        vol.Optional("plantType", default=DEFAULT_PLANT_TYPE): vol.In(PLANT_TYPES),
        vol.Optional("defaultPeriods", default=list): [_PERIOD_SCHEMA],
        vol.Optional("bloomSeason"): vol.Any(None, str),
        vol.Optional("description"): vol.Any(None, str),
    },
    extra=vol.ALLOW_EXTRA,
)

CATALOG_SCHEMA = vol.Schema(
    {
        vol.Optional("source"): str,
        vol.Optional("license"): str,
        vol.Optional("generatedAt"): str,
        vol.Optional("plantCount"): int,
        vol.Required("plants"): list,
    },
    extra=vol.ALLOW_EXTRA,
)


def parse_species(data: Mapping[str, Any]) -> RawPlantSpecies:
    """Return a :class:`RawPlantSpecies` from a validated catalog entry.

    Raises :class:`voluptuous.Invalid` when ``data`` does not match
    :data:`SPECIES_SCHEMA`.
    """
    clean = SPECIES_SCHEMA(dict(data))
    periods = tuple(PlantPeriod.from_dict(p) for p in clean["defaultPeriods"])
    return RawPlantSpecies(
        name=clean["name"],
        category=clean["category"],
        min_zone=clean["minZone"],
        max_zone=clean["maxZone"],
        plant_type=clean["plantType"],
        default_periods=periods,
        bloom_season=clean.get("bloomSeason"),
        description=clean.get("description"),
    )


def validate_catalog(data: Any) -> list[str]:
    """Validate a whole catalog document and return the species names.

    Every malformed species is reported in a single :class:`voluptuous.Invalid`
    so dataset authors can fix them in one pass.
    """
    document = CATALOG_SCHEMA(data)
    issues: list[str] = []
    names: list[str] = []
    seen: set[str] = set()
    for index, entry in enumerate(document["plants"]):
        label = entry.get("name") if isinstance(entry, Mapping) else None
        try:
            species = parse_species(entry if isinstance(entry, Mapping) else {})
        except vol.Invalid as err:
            issues.append(f"plants[{index}] ({label or '?'}): {err}")
            continue
        if species.min_zone > species.max_zone:
            issues.append(f"plants[{index}] ({species.name}): minZone exceeds maxZone")
        key = species.name.lower()
        if key in seen:
            issues.append(f"plants[{index}] ({species.name}): duplicate name")
        seen.add(key)
        names.append(species.name)

    count = document.get("plantCount")
    if count is not None and count != len(document["plants"]):
        issues.append(f"plantCount {count} does not match {len(document['plants'])} entries")
    if issues:
        raise vol.Invalid("; ".join(issues))
    return names


def load_catalog(filename: str = CATALOG_FILE) -> tuple[RawPlantSpecies, ...]:
    """Return the species defined in ``filename``.

    Entries that fail validation are skipped with a warning so one bad row
    cannot take the whole catalog down.
    """
    data = load_dataset(filename)
    entries: Iterable[Any]
    if isinstance(data, Mapping):
        entries = data.get("plants") or []
    elif isinstance(data, list):
        entries = data
    else:
        entries = []

    species: list[RawPlantSpecies] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            _LOGGER.warning("Skipping catalog entry %d: not a mapping", index)
            continue
        try:
            species.append(parse_species(entry))
        except vol.Invalid as err:
            _LOGGER.warning("Skipping catalog entry %d (%s): %s", index, entry.get("name"), err)
    _LOGGER.debug("Loaded %d species from %s", len(species), filename)
    return tuple(species)


def _emoji_map() -> dict[str, str]:
    data = load_dataset(EMOJI_FILE)
    if not isinstance(data, Mapping):
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, str) and v}


def _singular_forms(name: str) -> list[str]:
    forms = [name]
    if name.endswith("es"):
        forms.append(name[:-2])
    if name.endswith("s"):
        forms.append(name[:-1])
    return forms


def pick_emoji(name: str, category: str) -> str:
    """Return the display emoji for a species name or its category.

    Plural names fall back to their singular key, so ``Tomatoes`` and
    ``Carrots`` share the ``Tomato`` and ``Carrot`` entries.
    """
    emoji = _emoji_map()
    for key in (*_singular_forms(name), category):
        if key in emoji:
            return emoji[key]
    return FALLBACK_EMOJI
