"""Persisted location and the frost anchor it carries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .coercion import as_float, optional_string
from .day_calendar import isoformat_utc, utcnow
from .localizer import resolve_frost_anchor

__all__ = ["LocationInfo", "normalize_location", "frost_anchor_for"]


@dataclass(frozen=True, slots=True)
class LocationInfo:
    """Climate lookup result for a ZIP code or weather station."""

    zip: str
    location_name: str
    station_id: str
    station_name: str
    spring_frost_day: int
    fetched_at: str
    alternate_station_ids: tuple[str, ...] = field(default_factory=tuple)
    winter_frost_day: float | None = None
    avg_winter_temp_f: float | None = None
    latitude: float | None = None
    longitude: float | None = None
    elevation_meters: float | None = None
    hardiness_zone: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "zip": self.zip,
            "locationName": self.location_name,
            "stationId": self.station_id,
            "stationName": self.station_name,
            "alternateStationIds": list(self.alternate_station_ids),
            "springFrostDay": self.spring_frost_day,
            "winterFrostDay": self.winter_frost_day,
            "avgWinterTempF": self.avg_winter_temp_f,
            "fetchedAt": self.fetched_at,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevationMeters": self.elevation_meters,
            "hardinessZone": self.hardiness_zone,
        }


def _trimmed(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_location(candidate: Any) -> LocationInfo | None:
    """Return a :class:`LocationInfo` coerced from persisted data.

    Returns ``None`` for non-mappings and for records with neither a ZIP code
    nor a station id.
    """
    if not isinstance(candidate, dict):
        return None
    zip_code = _trimmed(candidate.get("zip"))
    station_id = _trimmed(candidate.get("stationId"))
    if not zip_code and not station_id:
        return None

    alternates = candidate.get("alternateStationIds")
    fetched_at = candidate.get("fetchedAt")
    return LocationInfo(
        zip=zip_code,
        location_name=_trimmed(candidate.get("locationName")),
        station_id=station_id,
        station_name=_trimmed(candidate.get("stationName")),
        alternate_station_ids=tuple(
            item for item in (alternates if isinstance(alternates, list) else [])
            if isinstance(item, str) and item.strip()
        ),
        spring_frost_day=resolve_frost_anchor(candidate.get("springFrostDay")),
        winter_frost_day=as_float(candidate.get("winterFrostDay")),
        avg_winter_temp_f=as_float(candidate.get("avgWinterTempF")),
        fetched_at=fetched_at if isinstance(fetched_at, str) else isoformat_utc(utcnow()),
        latitude=as_float(candidate.get("latitude")),
        longitude=as_float(candidate.get("longitude")),
        elevation_meters=as_float(candidate.get("elevationMeters")),
        hardiness_zone=optional_string(candidate.get("hardinessZone")),
    )


def frost_anchor_for(location: LocationInfo | None) -> int:
    """Return the frost anchor for ``location`` or the default when unset."""
    if location is None:
        return resolve_frost_anchor(None)
    return resolve_frost_anchor(location.spring_frost_day)
