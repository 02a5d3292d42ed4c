"""Per-anchor derived plant database."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator

from .catalog import RawPlantSpecies, load_catalog
from .localizer import resolve_frost_anchor
from .plant_builder import Plant, build_plant

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "PlantDatabase",
    "build_plant_database",
    "clear_database_cache",
    "parse_zone",
]

_ZONE_RE = re.compile(r"^\s*(\d{1,2})\s*[ab]?\s*$", re.IGNORECASE)


def parse_zone(zone: str | int | None) -> int | None:
    """Return the numeric USDA zone of ``zone`` (``"6b"`` -> ``6``)."""
    if isinstance(zone, bool) or zone is None:
        return None
    if isinstance(zone, int):
        return zone
    match = _ZONE_RE.match(str(zone))
    if not match:
        return None
    return int(match.group(1))


@dataclass(frozen=True, slots=True)
class PlantDatabase:
    """Every catalog species built for a single frost anchor."""

    frost_anchor_day: int
    plants: tuple[Plant, ...]
    by_slug: dict[str, Plant] = field(default_factory=dict, compare=False)
    by_id: dict[str, Plant] = field(default_factory=dict, compare=False)

    def __len__(self) -> int:
        return len(self.plants)

    def __iter__(self) -> Iterator[Plant]:
        return iter(self.plants)

    def get(self, slug: str) -> Plant | None:
        return self.by_slug.get(slug)

    def plants_for_zone(self, zone: str | int | None) -> list[Plant]:
        """Return plants whose hardiness range covers ``zone``.

        Unparsable zones return the whole catalog.
        """
        number = parse_zone(zone)
        if number is None:
            return list(self.plants)
        return [p for p in self.plants if p.min_zone <= number <= p.max_zone]


@lru_cache(maxsize=None)
def _cached_catalog() -> tuple[RawPlantSpecies, ...]:
    return load_catalog()


@lru_cache(maxsize=16)
def _build(anchor: int, catalog: tuple[RawPlantSpecies, ...]) -> PlantDatabase:
    plants = tuple(
        build_plant(species, anchor, plant_id=str(index))
        for index, species in enumerate(catalog, start=1)
    )
    by_slug: dict[str, Plant] = {}
    for plant in plants:
        by_slug.setdefault(plant.slug, plant)
    _LOGGER.info("Built plant database with %d plants for frost day %d", len(plants), anchor)
    return PlantDatabase(
        frost_anchor_day=anchor,
        plants=plants,
        by_slug=by_slug,
        by_id={p.id: p for p in plants},
    )


def build_plant_database(
    frost_anchor_day: object = None,
    catalog: tuple[RawPlantSpecies, ...] | None = None,
) -> PlantDatabase:
    """Return the derived database for ``frost_anchor_day``.

    Results are cached per ``(anchor, catalog)`` so repeated lookups for the
    same location reuse the same :class:`Plant` objects.
    """
    anchor = resolve_frost_anchor(frost_anchor_day)
    if catalog is None:
        catalog = _cached_catalog()
    return _build(anchor, tuple(catalog))


def clear_database_cache() -> None:
    """Drop every cached catalog and derived database."""
    _cached_catalog.cache_clear()
    _build.cache_clear()
