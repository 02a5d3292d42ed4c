"""Utility helpers for reading the static datasets used by the garden engine."""

from __future__ import annotations

import json
import os
import re
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union

import yaml

__all__ = [
    "save_json",
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "deep_update",
    "slugify",
    "list_dataset_files",
]


PathType = Union[str, PathLike]


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def save_json(path: PathType, data: Any) -> bool:
    """Write ``data`` to ``path`` and return ``True`` on success."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return True


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


# The default data directory is the repository ``data`` folder. It can be
# overridden with ``GARDEN_DATA_DIR``. ``GARDEN_EXTRA_DATA_DIRS`` holds an
# ``os.pathsep``-separated list merged after the base directory and
# ``GARDEN_OVERLAY_DIR`` holds user files merged last.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DATA_ENV = "GARDEN_DATA_DIR"
OVERLAY_ENV = "GARDEN_OVERLAY_DIR"
EXTRA_ENV = "GARDEN_EXTRA_DATA_DIRS"

_PATH_CACHE: tuple[Path, ...] | None = None
_ENV_STATE: tuple[str | None, str | None] | None = None


def get_data_dir() -> Path:
    """Return base dataset directory honoring the ``GARDEN_DATA_DIR`` env."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return the overlay directory defined via ``GARDEN_OVERLAY_DIR``."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_extra_dirs() -> tuple[Path, ...]:
    """Return additional dataset directories from ``GARDEN_EXTRA_DATA_DIRS``."""

    env = os.getenv(EXTRA_ENV)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets.

    Results are cached but refreshed automatically when the relevant
    environment variables change between calls.
    """

    global _PATH_CACHE, _ENV_STATE
    env_state = (os.getenv(DATA_ENV), os.getenv(EXTRA_ENV))
    if _PATH_CACHE is None or _ENV_STATE != env_state:
        _PATH_CACHE = (get_data_dir(), *get_extra_dirs())
        _ENV_STATE = env_state
    return _PATH_CACHE


@lru_cache(maxsize=None)
def load_dataset(filename: str) -> Any:
    """Return dataset ``filename`` merged across search paths and overlay.

    Mapping datasets are merged key by key with :func:`deep_update`; any other
    shape found later in the search order replaces what came before. A
    dataset missing from every directory loads as an empty mapping.
    """

    data: Any = {}
    paths = list(dataset_paths())
    overlay = overlay_dir()
    if overlay:
        paths.append(overlay)

    for base in paths:
        path = base / filename
        if not path.exists():
            continue
        extra = load_data(path)
        if isinstance(extra, dict) and isinstance(data, dict):
            deep_update(data, extra)
        else:
            data = extra
    return data


@lru_cache(maxsize=None)
def list_dataset_files() -> list[str]:
    """Return alphabetically sorted dataset files available in search paths."""

    files: set[str] = set()
    overlay = overlay_dir()
    bases = list(dataset_paths()) + ([overlay] if overlay else [])
    for base in bases:
        if not base.is_dir():
            continue
        for path in base.rglob("*"):
            if path.suffix.lower() in {".json", ".yaml", ".yml"} and path.is_file():
                files.add(path.relative_to(base).as_posix())
    return sorted(files)


def clear_dataset_cache() -> None:
    """Clear cached dataset results loaded via :func:`load_dataset`."""

    global _PATH_CACHE, _ENV_STATE
    load_dataset.cache_clear()
    list_dataset_files.cache_clear()
    _PATH_CACHE = None
    _ENV_STATE = None


_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Return the catalog slug for ``name`` (``"Bell Peppers"`` -> ``"bell-peppers"``)."""

    return _SLUG_PATTERN.sub("-", str(name).lower()).strip("-")
