"""Defensive coercion helpers for persisted, possibly legacy-shaped records."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

__all__ = [
    "as_dict",
    "as_int",
    "as_float",
    "as_bool",
    "optional_string",
    "string_or_fallback",
]


def as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {}


def as_int(value: Any, default: int | None = None) -> int | None:
    """Return ``value`` as an ``int`` when it is a finite whole number."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return default


def as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def as_bool(value: Any, default: bool) -> bool:
    """Return ``value`` as a flag, parsing ``"true"``/``"false"`` strings.

    Unrecognised strings and other types give ``default``.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


def optional_string(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    return text


def string_or_fallback(*candidates: Any, fallback: str) -> str:
    for candidate in candidates:
        text = optional_string(candidate)
        if text is not None:
            return text
    return fallback
