"""
Conversions between calendar instants and the engine's time axis.

The engine measures time as (fractional) days since J2000, 2000-01-01T12:00:00Z.
UTC is used throughout; the difference to TT is far below the resolution that
matters for display trajectories.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Union

from mission_trajectories.constants import DAY, DAYS_PER_CENTURY, J2000_JD

J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

Instant = Union[datetime, date, str, float, int]


def parse_datetime(value: str | date | datetime) -> datetime:
    """Parse an ISO-8601 string or date into a timezone-aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid date '{value}': {exc}") from exc
    else:
        raise TypeError(f"Cannot interpret {type(value).__name__} as a date")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_j2000_days(value: Instant) -> float:
    """
    Convert an instant to days since J2000.

    Floats and ints are taken to already be days since J2000 and are returned as float.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a valid instant")
    if isinstance(value, (int, float)):
        return float(value)
    dt = parse_datetime(value)
    return (dt - J2000).total_seconds() / DAY


def from_j2000_days(days: float) -> datetime:
    """Convert days since J2000 back to a UTC datetime."""
    return J2000 + timedelta(seconds=float(days) * DAY)


def julian_date(value: Instant) -> float:
    return J2000_JD + to_j2000_days(value)


def greenwich_mean_sidereal_time(value: Instant) -> float:
    """
    Greenwich mean sidereal time in hours, in [0, 24).

    IAU 1982 polynomial in Julian centuries T since J2000 (UT1 taken as UTC):
    GMST = 67310.54841 + (876600 h + 8640184.812866) T + 0.093104 T^2 - 6.2e-6 T^3 seconds.
    """
    T = to_j2000_days(value) / DAYS_PER_CENTURY
    seconds = (67310.54841 + (876600.0 * 3600.0 + 8640184.812866) * T
               + 0.093104 * T ** 2 - 6.2e-6 * T ** 3)
    return (seconds / 3600.0) % 24.0
