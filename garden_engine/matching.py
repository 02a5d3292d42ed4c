"""Match persisted plant records against the current plant database."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .database import PlantDatabase
from .plant_builder import Plant
from .utils import load_dataset

__all__ = ["LEGACY_NAME_FILE", "LEGACY_NAME_MAP", "legacy_name_map", "find_plant_match"]

LEGACY_NAME_FILE = "legacy_plant_names.yaml"

# Names used by early app versions before the catalog was renamed.
LEGACY_NAME_MAP: dict[str, str] = {
    "tomato": "Tomatoes",
    "tomatoes": "Tomatoes",
    "pepper": "Bell Peppers",
    "peppers": "Bell Peppers",
    "cilantro": "Cilantro",
    "basil": "Basil",
    "lettuce": "Lettuce",
    "carrot": "Carrots",
    "carrots": "Carrots",
}


def legacy_name_map() -> dict[str, str]:
    """Return the legacy remap table with dataset entries merged in."""
    result = dict(LEGACY_NAME_MAP)
    data = load_dataset(LEGACY_NAME_FILE)
    if isinstance(data, Mapping):
        for old, new in data.items():
            if isinstance(new, str) and new.strip():
                result[str(old).strip().lower()] = new.strip()
    return result


def _candidate_field(candidate: Any, key: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(key)
    return getattr(candidate, key, None)


def _by_name(database: PlantDatabase, lowered: str) -> Plant | None:
    for plant in database.plants:
        if plant.name.lower() == lowered:
            return plant
    return None


def find_plant_match(candidate: Any, database: PlantDatabase) -> Plant | None:
    """Return the database plant that ``candidate`` refers to.

    ``candidate`` is a persisted mapping or any object with ``slug`` and
    ``name`` attributes. The slug wins; otherwise the trimmed name is passed
    through the legacy remap table and compared case-insensitively, then in
    its singular or plural form.
    """
    if candidate is None or isinstance(candidate, (str, bytes, int, float, bool)):
        return None

    slug = _candidate_field(candidate, "slug")
    if isinstance(slug, str) and slug:
        match = database.get(slug)
        if match is not None:
            return match

    raw_name = _candidate_field(candidate, "name")
    if not isinstance(raw_name, str) or not raw_name.strip():
        return None
    raw_name = raw_name.strip()

    mapped = legacy_name_map().get(raw_name.lower(), raw_name)
    target = mapped.strip().lower()

    match = _by_name(database, target)
    if match is not None:
        return match
    if target.endswith("s"):
        return _by_name(database, target[:-1])
    return _by_name(database, f"{target}s")
