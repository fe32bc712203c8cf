"""
Universe module — the bodies of the sky and where they are.

Usage:
    from universe import CelestialObserver, make_sun
    obs = CelestialObserver(datetime(2008, 6, 21, 12, tzinfo=timezone.utc), body="sun")
    sun = make_sun(obs)
    obs.advance(1, 0, 0)
    sun.latitude
"""

from .observer import (
    CelestialObserver,
    EphemerisResult,
    EclipticPosition,
    compute_position,
    solar_ecliptic,
    lunar_ecliptic,
    DIST_SCALE_FACTOR,
)
from .orbital_body import (
    BodyKind,
    CelestialBody,
    DayPhase,
    make_sun,
    make_moon,
)

__all__ = [
    "CelestialObserver",
    "EphemerisResult",
    "EclipticPosition",
    "compute_position",
    "solar_ecliptic",
    "lunar_ecliptic",
    "DIST_SCALE_FACTOR",
    "BodyKind",
    "CelestialBody",
    "DayPhase",
    "make_sun",
    "make_moon",
]
