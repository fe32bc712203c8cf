"""
Sky colour model — Preetham/Perez analytic daylight sky on a dome sample set.

Pipeline per sun (vectorised over the dome vertex normals):
  1. sun latitude/longitude → theta_sun (from zenith), phi_sun, direction
  2. zenith luminance  Yz(T, chi)         chi = (4/9 - T/120)(π - 2 theta_sun)
  3. zenith chromaticity xz, yz           cubic in theta_sun, quadratic in T
  4. Perez coefficients A..E for Y, x, y  linear in T
  5. first-order Perez normalisation of the zenith values
  6. second-order Perez F(theta, gamma) per vertex
  7. overcast blend of Y with (1 + 2 n_y) / 3
  8. xyY → XYZ → linear RGB
  9. night override (damped, blue-shifted XYZ)
 10. HSV exposure, gamma, clamp, additive blend on the vertex colour
 11. haze colour from two antipodal horizon samples

Reference: Preetham, Shirley, Smits, "A Practical Analytic Model for Daylight"
(SIGGRAPH 1999). Coefficients are the paper's, kept to the last digit.

Functions are pure: no buffers are shared between calls, the caller owns the
colour buffer it passes in.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from core.coords import clamp, lerp
from core.types import RGBA, BLACK

INFINITY = 3.3e+38
EPSILON = 0.000001

# Haze: colour at vertex 0 blended with the colour at this index
# (antipodal on the horizon ring when the dome has 2 * RAD_SAMPLES radial samples)
RAD_SAMPLES = 12

# Night: sun latitude strictly inside this interval
NIGHT_LAT_MIN = -0.9 * math.pi
NIGHT_LAT_MAX = -0.1 * math.pi


def _const(rows) -> np.ndarray:
    arr = np.array(rows, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# ---------------------------------------------------------------------------
# Distribution coefficients (Perez): [coeff][slope, intercept] vs turbidity
# ---------------------------------------------------------------------------

DISTRIBUTION_LUMINANCE = _const([
    [0.17872, -1.46303],    # A: darkening or brightening of the horizon
    [-0.35540, 0.42749],    # B: luminance gradient near the horizon
    [-0.02266, 5.32505],    # C: relative intensity of the circumsolar region
    [0.12064, -2.57705],    # D: width of the circumsolar region
    [-0.06696, 0.37027],    # E: relative backscattered light
])

DISTRIBUTION_X = _const([
    [-0.01925, -0.25922],
    [-0.06651, 0.00081],
    [-0.00041, 0.21247],
    [-0.06409, -0.89887],
    [-0.00325, 0.04517],
])

DISTRIBUTION_Y = _const([
    [-0.01669, -0.26078],
    [-0.09495, 0.00921],
    [-0.00792, 0.21023],
    [-0.04405, -1.65369],
    [-0.01092, 0.05291],
])

# Zenith chromaticity: rows = T², T¹, T⁰; columns = theta³, theta², theta, 1
ZENITH_X_MATRIX = _const([
    [0.00165, -0.00375, 0.00209, 0.00000],
    [-0.02903, 0.06377, -0.03202, 0.00394],
    [0.11693, -0.21196, 0.06052, 0.25886],
])

ZENITH_Y_MATRIX = _const([
    [0.00275, -0.00610, 0.00317, 0.00000],
    [-0.04214, 0.08970, -0.04153, 0.00516],
    [0.15346, -0.26756, 0.06670, 0.26688],
])

# CIE XYZ → linear sRGB (D65)
XYZ_TO_RGB = _const([
    [3.240479, -1.537150, -0.498535],
    [-0.969256, 1.875992, 0.041556],
    [0.055648, -0.204043, 1.057311],
])


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ExposureMode(Enum):
    LINEAR      = "linear"
    EXPONENTIAL = "exponential"


class SkyModelConfig:
    """
    Shading parameters of one sky. Every setter clamps to its domain, never raises.

    exposure and gamma are stored inverted (1/x), as the model consumes them.
    """

    def __init__(self):
        self.turbidity = 2.0
        self.overcast = 0.0
        self.exposure_mode = ExposureMode.EXPONENTIAL
        self.exposure = 1.0 / 18.0
        self.gamma_correction = 1.0 / 2.5
        self.dawn_color: RGBA = (0.9843, 0.7098, 0.3523, 1.0)
        self.dusk_color: RGBA = (0.6843, 0.5098, 0.1246, 1.0)
        self.moon_color: RGBA = (0.2745, 0.3961, 0.6196, 1.0)

        self.set_turbidity(2.95)
        self.set_exposure(ExposureMode.EXPONENTIAL, 21.0)
        self.set_overcast(0.45)
        self.set_gamma_correction(1.09)

    def set_turbidity(self, turbidity: float) -> None:
        self.turbidity = clamp(turbidity, 1.0, 512.0)

    def set_overcast(self, overcast: float) -> None:
        self.overcast = clamp(overcast, 0.0, 1.0)

    def set_exposure(self, mode: ExposureMode | str, exposure: float) -> None:
        self.exposure_mode = ExposureMode(mode)
        self.exposure = 1.0 / clamp(exposure, 1.0, INFINITY)

    def set_gamma_correction(self, gamma: float) -> None:
        self.gamma_correction = 1.0 / clamp(gamma, EPSILON, INFINITY)

    @property
    def is_linear_exposure(self) -> bool:
        return self.exposure_mode is ExposureMode.LINEAR

    def set_dawn_color(self, color: RGBA) -> None:
        self.dawn_color = tuple(float(c) for c in color)

    def set_dusk_color(self, color: RGBA) -> None:
        self.dusk_color = tuple(float(c) for c in color)

    def set_moon_color(self, color: RGBA) -> None:
        self.moon_color = tuple(float(c) for c in color)


# ---------------------------------------------------------------------------
# Model terms
# ---------------------------------------------------------------------------

def is_night_time(lat: float) -> bool:
    """True if a sun at this latitude has set or not risen yet (open interval)."""
    return NIGHT_LAT_MIN < lat < NIGHT_LAT_MAX


def sun_angles(lat: float, lon: float) -> Tuple[float, float]:
    """
    Sun latitude/longitude (0 = east) → (theta_sun, phi_sun):
    theta from the zenith in [0, π], phi from the west reference azimuth.
    """
    if lat >= 0:
        theta = abs(abs(lat) - math.pi / 2)
    else:
        theta = math.pi - abs(abs(lat) - math.pi / 2)
    phi = -abs(lon + math.pi)
    return theta, phi


def sun_direction(theta_sun: float, phi_sun: float) -> np.ndarray:
    """Unit horizon-frame direction (y up) of the sun."""
    elev = math.pi / 2 - theta_sun
    d = np.array([
        math.cos(elev) * math.cos(phi_sun),
        math.sin(elev),
        math.cos(elev) * math.sin(phi_sun),
    ])
    return d / np.linalg.norm(d)


def zenith_luminance(theta_sun: float, turbidity: float) -> float:
    """Zenith luminance Yz, sign-normalised to be non-negative."""
    chi = (4.0 / 9.0 - turbidity / 120.0) * (math.pi - 2.0 * theta_sun)
    yz = (4.0453 * turbidity - 4.9710) * math.tan(chi) - 0.2155 * turbidity + 2.4192
    return abs(yz)


def get_zenith(zenith_matrix: np.ndarray, theta: float, turbidity: float) -> float:
    """Zenith chromaticity: cubic in theta per row, rows weighted T², T, 1."""
    thetas = np.array([theta**3, theta**2, theta, 1.0])
    per_row = zenith_matrix @ thetas
    return float(per_row[0] * turbidity * turbidity
                 + per_row[1] * turbidity
                 + per_row[2])


def get_perez(distribution: np.ndarray, turbidity: float) -> np.ndarray:
    """The five Perez coefficients A..E for a given turbidity."""
    return distribution[:, 0] * turbidity + distribution[:, 1]


def perez_function_o1(perez: np.ndarray, theta_sun: float, zenith_value: float) -> float:
    """Zenith value divided by F(0, theta_sun)."""
    A, B, C, D, E = perez
    val = ((1.0 + A * math.exp(B))
           * (1.0 + C * math.exp(D * theta_sun) + E * math.cos(theta_sun) ** 2))
    return zenith_value / val


def perez_function_o2(perez: np.ndarray, cos_theta, gamma, cos_gamma2, zenith_value):
    """Full Perez distribution, broadcast over per-vertex arrays."""
    A, B, C, D, E = perez
    return (zenith_value
            * (1.0 + A * np.exp(B * cos_theta))
            * (1.0 + C * np.exp(D * gamma) + E * cos_gamma2))


# ---------------------------------------------------------------------------
# Colour spaces  (arrays with channels on the last axis)
# ---------------------------------------------------------------------------

def xyY_to_XYZ(x, y, Y) -> np.ndarray:
    X = (x / y) * Y
    Z = ((1.0 - x - y) / y) * Y
    return np.stack([X, Y, Z], axis=-1)


def xyz_to_rgb(xyz) -> np.ndarray:
    return np.asarray(xyz, dtype=np.float64) @ XYZ_TO_RGB.T


def rgb_to_hsv(rgb) -> np.ndarray:
    """
    RGB → HSV with hue in degrees [0, 360), saturation and value unbounded
    (out-of-gamut inputs are allowed). Achromatic colours get hue -1.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    maxc = np.max(rgb, axis=-1)
    minc = np.min(rgb, axis=-1)
    delta = maxc - minc

    black = np.abs(maxc) < EPSILON
    grey = np.abs(delta) < EPSILON
    s = np.where(black, 0.0, delta / np.where(black, 1.0, maxc))

    d = np.where(grey, 1.0, delta)
    h = np.where(np.abs(r - maxc) < EPSILON, (g - b) / d,
        np.where(np.abs(g - maxc) < EPSILON, 2.0 + (b - r) / d,
                 4.0 + (r - g) / d))
    h = h * 60.0
    h = np.where(h < 0.0, h + 360.0, h)
    h = np.where(black | grey, -1.0, h)
    return np.stack([h, s, maxc], axis=-1)


def hsv_to_rgb(hsv) -> np.ndarray:
    """Inverse of rgb_to_hsv. |saturation| < EPSILON is grey at the given value."""
    hsv = np.asarray(hsv, dtype=np.float64)
    h, s, v = hsv[..., 0], hsv[..., 1], hsv[..., 2]

    hh = h / 60.0
    sector = np.floor(hh)
    f = hh - sector
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    conds = [sector == 0, sector == 1, sector == 2, sector == 3, sector == 4]
    r = np.select(conds, [v, q, p, p, t], default=v)
    g = np.select(conds, [t, v, v, q, p], default=p)
    b = np.select(conds, [p, p, t, v, v], default=q)

    grey = np.abs(s) < EPSILON
    r = np.where(grey, v, r)
    g = np.where(grey, v, g)
    b = np.where(grey, v, b)
    return np.stack([r, g, b], axis=-1)


def apply_exposure(rgb: np.ndarray, mode: ExposureMode, exposure: float) -> np.ndarray:
    hsv = rgb_to_hsv(rgb)
    if mode is ExposureMode.LINEAR:
        hsv[..., 2] = hsv[..., 2] * exposure
    else:
        hsv[..., 2] = 1.0 - np.exp(-exposure * hsv[..., 2])
    return hsv_to_rgb(hsv)


def apply_gamma_clamped(rgb: np.ndarray, gamma: float) -> np.ndarray:
    """
    Per-channel power, then clamp to [0, 1].
    Negative or NaN channels end as 0 and +inf as 1, so the result is always finite.
    """
    rgb = np.nan_to_num(rgb, nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(rgb, 0.0, 1.0) ** gamma


# ---------------------------------------------------------------------------
# Dome
# ---------------------------------------------------------------------------

def build_dome_normals(planes: int = 12, radial_samples: int = 2 * RAD_SAMPLES) -> np.ndarray:
    """
    Outward unit normals of a hemisphere, ring by ring from the horizon up,
    `radial_samples + 1` vertices per ring (seam duplicated) and the zenith last.
    Shape: ((planes - 1) * (radial_samples + 1) + 1, 3).
    """
    rings = []
    for plane in range(planes - 1):
        elev = (math.pi / 2) * plane / (planes - 1)
        az = np.linspace(0.0, 2.0 * math.pi, radial_samples + 1)
        ring = np.stack([
            math.cos(elev) * np.cos(az),
            np.full_like(az, math.sin(elev)),
            math.cos(elev) * np.sin(az),
        ], axis=-1)
        rings.append(ring)
    rings.append(np.array([[0.0, 1.0, 0.0]]))
    return np.concatenate(rings, axis=0)


@dataclass
class SkyColors:
    """Colour buffer after one sun's contribution, plus the haze colour."""
    colors: np.ndarray          # (N, 4) RGBA
    haze:   RGBA
    night:  bool = False


@dataclass
class ZenithTerms:
    """Per-sun quantities that do not depend on the view direction."""
    theta_sun:  float
    phi_sun:    float
    direction:  np.ndarray
    luminance:  float
    x:          float
    y:          float
    perez_Y:    np.ndarray = field(repr=False)
    perez_x:    np.ndarray = field(repr=False)
    perez_y:    np.ndarray = field(repr=False)


def zenith_terms(sun_lat: float, sun_lon: float, turbidity: float) -> ZenithTerms:
    theta, phi = sun_angles(sun_lat, sun_lon)
    perez_Y = get_perez(DISTRIBUTION_LUMINANCE, turbidity)
    perez_x = get_perez(DISTRIBUTION_X, turbidity)
    perez_y = get_perez(DISTRIBUTION_Y, turbidity)
    return ZenithTerms(
        theta_sun=theta,
        phi_sun=phi,
        direction=sun_direction(theta, phi),
        luminance=perez_function_o1(perez_Y, theta, zenith_luminance(theta, turbidity)),
        x=perez_function_o1(perez_x, theta, get_zenith(ZENITH_X_MATRIX, theta, turbidity)),
        y=perez_function_o1(perez_y, theta, get_zenith(ZENITH_Y_MATRIX, theta, turbidity)),
        perez_Y=perez_Y,
        perez_x=perez_x,
        perez_y=perez_y,
    )


def sky_xyY(normals: np.ndarray, terms: ZenithTerms, overcast: float) -> np.ndarray:
    """Per-vertex (x, y, Y) chromaticity + luminance, shape (N, 3)."""
    normals = np.asarray(normals, dtype=np.float64)
    ny = normals[:, 1]
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        gamma = np.arccos(np.clip(normals @ terms.direction, -1.0, 1.0))
        cos_theta = 1.0 / ny
        cos_gamma2 = np.cos(gamma) ** 2

        x = perez_function_o2(terms.perez_x, cos_theta, gamma, cos_gamma2, terms.x)
        y = perez_function_o2(terms.perez_y, cos_theta, gamma, cos_gamma2, terms.y)
        y_clear = perez_function_o2(terms.perez_Y, cos_theta, gamma, cos_gamma2, terms.luminance)
    y_over = (1.0 + 2.0 * ny) / 3.0
    if overcast >= 1.0:
        # fully overcast: the clear term drops out even where it is not finite
        Y = y_over
    else:
        Y = lerp(overcast, y_clear, y_over)
    return np.stack([x, y, Y], axis=-1)


def update_dome_colors(normals: np.ndarray,
                       sun_lat: float,
                       sun_lon: float,
                       config: SkyModelConfig,
                       colors: Optional[np.ndarray] = None) -> SkyColors:
    """
    Add one sun's sky colour to a dome colour buffer.

    normals : (N, 3) unit vertex normals of the dome
    colors  : (N, 4) RGBA already on the dome (other suns, solid sky colour);
              None → black. Not modified: a new buffer is returned.
    """
    normals = np.asarray(normals, dtype=np.float64)
    n = normals.shape[0]
    if colors is None:
        base = np.zeros((n, 4))
        base[:, 3] = 1.0
    else:
        base = np.asarray(colors, dtype=np.float64)

    night = is_night_time(sun_lat)
    terms = zenith_terms(sun_lat, sun_lon, config.turbidity)

    xyY = sky_xyY(normals, terms, config.overcast)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        xyz = xyY_to_XYZ(xyY[:, 0], xyY[:, 1], xyY[:, 2])
        if night:
            xyz = xyz * np.array([0.01, 0.01, -0.045])
        rgb = xyz_to_rgb(xyz)
        rgb = apply_exposure(rgb, config.exposure_mode, config.exposure)
        rgb = apply_gamma_clamped(rgb, config.gamma_correction)

    out = np.empty_like(base)
    out[:, :3] = np.clip(base[:, :3] + rgb, 0.0, 1.0)
    out[:, 3] = 1.0

    if night or n == 0:
        haze = BLACK
    else:
        haze_rgba = out[0]
        if n > RAD_SAMPLES:
            haze_rgba = lerp(0.5, out[0], out[RAD_SAMPLES])
        haze = tuple(float(c) for c in haze_rgba)
        if any(math.isnan(c) for c in haze):
            haze = BLACK

    return SkyColors(colors=out, haze=haze, night=night)
