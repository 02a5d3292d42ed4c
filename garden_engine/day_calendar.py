"""Day-of-year helpers anchored to a fixed reference year.

Schedules recur every year, so all localized days are expressed relative to
January 1 of :data:`~garden_engine.constants.BASE_YEAR` and formatted without
a year. Days may be ``<= 0`` or exceed 365; conversion rolls into the adjacent
calendar year with ordinary date arithmetic.
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta

from .constants import BASE_YEAR

__all__ = [
    "day_to_date",
    "date_to_day",
    "format_date",
    "format_day",
    "format_day_range",
    "parse_timestamp",
    "whole_days_between",
    "isoformat_utc",
    "utcnow",
]

_DAY_ONE = date(BASE_YEAR, 1, 1)
_SECONDS_PER_DAY = 86400
_TIMESTAMP_YEARS = range(1900, 3000)


def day_to_date(day: int) -> date:
    """Return the calendar date for reference-year ``day`` (day 1 = Jan 1)."""
    return _DAY_ONE + timedelta(days=int(day) - 1)


def date_to_day(value: date) -> int:
    """Return the reference-year day number for the month/day of ``value``."""
    return (date(BASE_YEAR, value.month, value.day) - _DAY_ONE).days + 1


def format_date(value: date) -> str:
    """Return ``value`` as a short ``"Mon D"`` label."""
    return f"{value:%b} {value.day}"


def format_day(day: int) -> str:
    """Return reference-year ``day`` as ``"Mon D"``."""
    return format_date(day_to_date(day))


def format_day_range(start_day: int, duration: int) -> str:
    """Return ``"Mon D - Mon D"`` for a window, or a single day when short."""
    if duration <= 1:
        return format_day(start_day)
    end_day = start_day + max(duration - 1, 0)
    return f"{format_day(start_day)} - {format_day(end_day)}"


def parse_timestamp(raw: object) -> datetime | None:
    """Return an aware UTC datetime parsed from an ISO string.

    ``Z`` suffixes are accepted, naive values are treated as UTC and anything
    unparsable or outside years 1900-2999 returns ``None``.
    """
    if isinstance(raw, datetime):
        ts = raw
    elif isinstance(raw, date):
        ts = datetime(raw.year, raw.month, raw.day)
    elif isinstance(raw, str) and raw.strip():
        try:
            ts = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if ts.year not in _TIMESTAMP_YEARS:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Return the floor of elapsed days from ``start`` to ``end``."""
    seconds = (end - start).total_seconds()
    return math.floor(seconds / _SECONDS_PER_DAY)


def utcnow() -> datetime:
    return datetime.now(UTC)


def isoformat_utc(value: datetime) -> str:
    """Return ``value`` as a millisecond ISO string with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
