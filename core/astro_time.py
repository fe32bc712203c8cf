from __future__ import annotations
from datetime import datetime, timezone, timedelta

# Lightweight time utilities (no external deps).
# We use UTC internally; naive datetimes are treated as UTC.

J2000_JD = 2451545.0
DAYS_PER_CENTURY = 36525.0


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        # assume UTC if naive
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_to_julian_date(dt: datetime) -> float:
    """Convert a datetime (timezone-aware recommended) to Julian Date."""
    dt = as_utc(dt)

    year = dt.year
    month = dt.month
    day = dt.day + (dt.hour + (dt.minute + dt.second/60.0)/60.0)/24.0

    if month <= 2:
        year -= 1
        month += 12

    A = year // 100
    B = 2 - A + (A // 4)

    jd = int(365.25*(year + 4716)) + int(30.6001*(month + 1)) + day + B - 1524.5
    return float(jd)


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000_JD) / DAYS_PER_CENTURY


def add_elapsed(dt: datetime, hours: int = 0, minutes: int = 0, seconds: int = 0) -> datetime:
    """Shift a timestamp by an elapsed (hours, minutes, seconds) delta; negatives go back."""
    return as_utc(dt) + timedelta(hours=hours, minutes=minutes, seconds=seconds)
