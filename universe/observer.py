"""
CelestialObserver — posizione apparente di Sole e Luna per un sito terrestre.

Ephemeris model (Jensen et al., "A Physically-Based Night Sky Model"):
  1. datetime UTC → Julian Date → secoli T da J2000
  2. serie trigonometrica di basso ordine → longitudine/latitudine
     eclittiche (lambda, beta) e distanza (raggi terrestri)
  3. vettore cartesiano eclittico, ruotato con tre rotazioni successive
     (latitudine del sito, obliquità dell'eclittica, tempo siderale locale)
     nel riferimento orizzontale locale
  4. sottrazione del raggio terrestre lungo l'asse locale → topocentrico
  5. longitude/latitude apparenti via atan2, posizione scalata per il rendering

The apparent "latitude" returned here is an hour-like day angle, not an
altitude: ~0 at sunrise, ~π/2 at local noon, ~π at sunset, negative at night.
All the colour and lighting code is written against this convention.

Validity: the series are empirical fits around J2000; a few centuries either
side is fine, far outside that window the result is undefined (not an error).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import numpy as np

from core.astro_time import add_elapsed, as_utc, datetime_to_julian_date, julian_centuries
from core.coords import AXIS_X, AXIS_Y, AXIS_Z, rotation_matrix
from core.types import SiteLocation


# Earth radius in km: ephemeris distances (Earth radii) → rendering units
DIST_SCALE_FACTOR = 6378.137

# Earth radii per astronomical unit
EARTH_RADII_PER_AU = 23454.8

# Local "up" of the observer after the horizon rotation
_FORWARD = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True)
class EclipticPosition:
    """Geocentric ecliptic coordinates (radians, Earth radii)."""
    lam:  float
    beta: float
    r:    float


@dataclass(frozen=True)
class EphemerisResult:
    """Apparent position of a body in the observer's horizon frame."""
    longitude: float
    latitude:  float
    distance:  float
    position:  np.ndarray   # (3,) rendering-space vector centred at the site


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------

def lunar_ecliptic(T: float) -> EclipticPosition:
    """Moon: ecliptic longitude/latitude and distance (from horizontal parallax)."""
    l_ = 3.8104 + 8399.7091 * T     # mean longitude
    m_ = 2.3554 + 8328.6911 * T     # mean anomaly
    m  = 6.2300 + 628.3019 * T      # Sun mean anomaly
    d  = 5.1985 + 7771.3772 * T     # mean elongation
    f  = 1.6280 + 8433.4663 * T     # argument of latitude

    lam = (l_
           + 0.1098 * math.sin(m_)
           + 0.0222 * math.sin(2*d - m_)
           + 0.0115 * math.sin(2*d)
           + 0.0037 * math.sin(2*m_)
           - 0.0032 * math.sin(m)
           - 0.0020 * math.sin(2*f)
           + 0.0010 * math.sin(2*d - 2*m_)
           + 0.0010 * math.sin(2*d - m * m_)
           + 0.0009 * math.sin(2*d + m_)
           + 0.0008 * math.sin(2*d - m)
           + 0.0007 * math.sin(m_ - m)
           - 0.0006 * math.sin(d)
           - 0.0005 * math.sin(m + m_))

    beta = (0.0895 * math.sin(f)
            + 0.0049 * math.sin(m_ + f)
            + 0.0048 * math.sin(m_ - f)
            + 0.0030 * math.sin(2*d - f)
            + 0.0010 * math.sin(2*d + f - m_)
            + 0.0008 * math.sin(2*d - f - m_)
            + 0.0006 * math.sin(2*d + f))

    parallax = (0.016593
                + 0.000904 * math.cos(m_)
                + 0.000166 * math.cos(2*d - m_)
                + 0.000137 * math.cos(2*d)
                + 0.000049 * math.cos(2*m_)
                + 0.000015 * math.cos(2*d + m_)
                + 0.000009 * math.cos(2*d - m))

    return EclipticPosition(lam=lam, beta=beta, r=1.0 / parallax)


def solar_ecliptic(T: float) -> EclipticPosition:
    """Sun: ecliptic longitude (beta = 0) and distance, AU converted to Earth radii."""
    M = 6.24 + 628.302 * T
    lam = (4.895048 + 628.331951 * T
           + (0.033417 - 0.000084 * T) * math.sin(M)
           + 0.000351 * math.sin(2*M))
    r_au = (1.000140
            - (0.016708 - 0.000042 * T) * math.cos(M)
            - 0.000141 * math.cos(2*M))
    return EclipticPosition(lam=lam, beta=0.0, r=r_au * EARTH_RADII_PER_AU)


SERIES = {
    "sun":  solar_ecliptic,
    "moon": lunar_ecliptic,
}


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------

def ecliptic_to_horizon(ecl: EclipticPosition, T: float,
                        site_lat: float, site_lon: float) -> np.ndarray:
    """Ecliptic spherical → local horizon Cartesian (Earth radii, site-centred)."""
    r, lam, beta = ecl.r, ecl.lam, ecl.beta
    v = np.array([
        r * math.sin(beta),
        r * math.sin(lam) * math.cos(beta),
        r * math.cos(lam) * math.cos(beta),
    ])

    lon = site_lon + math.pi * 3 / 2
    eta = 0.409093 - 0.000227 * T                   # obliquity of the ecliptic
    lmst = 4.894961 + 230121.675315 * T + lon       # local mean sidereal time

    rx = rotation_matrix(AXIS_X, -eta)
    ry = rotation_matrix(AXIS_Y, -(site_lat - math.pi / 2))
    rz = rotation_matrix(AXIS_Z, -lmst)
    v = rz @ (rx @ (ry @ v))
    return v - _FORWARD


def compute_position(time: datetime,
                     lambda_offset: float = 0.0,
                     beta_offset: float = 0.0,
                     r_offset: float = 0.0,
                     site_lat: float = 0.0,
                     site_lon: float = 0.0,
                     body: str = "sun") -> EphemerisResult:
    """
    Apparent longitude/latitude, distance and rendering position of `body`
    ("sun" or "moon") at UTC `time` for a site at (site_lat, site_lon) radians.

    Offsets are added to the raw series: lambda/beta in radians, r in Earth radii.
    Deterministic: same inputs → bit-identical outputs.
    """
    T = julian_centuries(datetime_to_julian_date(time))
    raw = SERIES[body](T)
    ecl = EclipticPosition(lam=raw.lam + lambda_offset,
                           beta=raw.beta + beta_offset,
                           r=raw.r + r_offset)

    v = ecliptic_to_horizon(ecl, T, site_lat, site_lon)

    longitude = math.atan2(v[2], -v[0])
    latitude = math.atan2(v[1], -v[0])

    return EphemerisResult(
        longitude=longitude,
        latitude=latitude,
        distance=ecl.r * DIST_SCALE_FACTOR,
        position=v * DIST_SCALE_FACTOR,
    )


class CelestialObserver:
    """
    Tracks one body (sun or moon) seen from an Earth site.

    Derived fields (longitude, latitude, distance, position) are recomputed
    from scratch on every change of time or site: they never go stale.

    Usage:
        obs = CelestialObserver(datetime(2008, 6, 21, tzinfo=timezone.utc),
                                body="sun", site=SiteLocation(0.7, 0.0))
        obs.advance(0, 10, 0)      # +10 minutes
        obs.latitude, obs.position
    """

    def __init__(self, current_time: datetime,
                 lambda_offset: float = 0.0,
                 beta_offset: float = 0.0,
                 r_offset: float = 0.0,
                 body: str = "sun",
                 site: Optional[SiteLocation] = None):
        if body not in SERIES:
            raise ValueError(f"unknown body '{body}', expected one of {sorted(SERIES)}")
        self.body = body
        self.lambda_offset = lambda_offset
        self.beta_offset = beta_offset
        self.r_offset = r_offset
        self._time = as_utc(current_time)
        site = site or SiteLocation()
        self._site_lat = site.latitude_rad
        self._site_lon = site.longitude_rad
        self._debug = False
        self._recompute()

    # ── Site ─────────────────────────────────────────────────────────────────

    @property
    def site_latitude(self) -> float:
        return self._site_lat

    @property
    def site_longitude(self) -> float:
        return self._site_lon

    def set_site_latitude(self, lat: float) -> None:
        self._site_lat = lat
        self._recompute()

    def set_site_longitude(self, lon: float) -> None:
        self._site_lon = lon
        self._recompute()

    # ── Derived ──────────────────────────────────────────────────────────────

    @property
    def current_time(self) -> datetime:
        return self._time

    @property
    def longitude(self) -> float:
        return self._result.longitude

    @property
    def latitude(self) -> float:
        return self._result.latitude

    @property
    def distance(self) -> float:
        return self._result.distance

    @property
    def position(self) -> np.ndarray:
        """Rendering-space position centred at the site (copy)."""
        return self._result.position.copy()

    def enable_debug(self, enable: bool = True) -> None:
        self._debug = enable

    def advance(self, hours: int = 0, minutes: int = 0, seconds: int = 0) -> None:
        """Move the clock by the elapsed delta and recompute the position."""
        self._time = add_elapsed(self._time, hours, minutes, seconds)
        self._recompute()

    def _recompute(self) -> None:
        self._result = compute_position(
            self._time, self.lambda_offset, self.beta_offset, self.r_offset,
            self._site_lat, self._site_lon, self.body)
        if self._debug:
            print(f"[{self.body.upper()} OBSERVER] {self._time:%d/%m/%Y - %H:%M:%S}")
            print(f"  POS {self._result.position}  lat={self.latitude:.4f} lon={self.longitude:.4f}")
