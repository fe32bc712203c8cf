"""
DayPhase — comportamento giorno/notte delle luci del cielo.

Per ogni sole:
  - stato DAY / NIGHT con transizioni edge-triggered: ombre e contributo
    all'ambient cambiano solo quando lo stato cambia, non ad ogni tick
  - colore diffuso continuo (alba → bianco → tramonto → alba) funzione della
    latitudine apparente, indipendente dal toggle giorno/notte
  - intensità del lens flare

Per ogni luna: luce e flare pesati dalla latitudine media dei soli.
Condivisi: opacità delle stelle e tinta delle ombre.

Latitudes here are the observer's apparent day angle (see universe.observer):
0 at sunrise, π/2 at noon, π at sunset, negative below the horizon.
"""
from __future__ import annotations
import math
from typing import Optional, Tuple

from core.types import RGBA, BLACK, WHITE, AmbientLightState, scale_rgba
from universe.orbital_body import CelestialBody, DayPhase
from .sky_model import is_night_time

PI_6 = math.pi / 6

SHADOW_BASE: RGBA = (0.75, 0.75, 0.75, 0.75)


def phase_from_latitude(lat: float) -> DayPhase:
    return DayPhase.NIGHT if is_night_time(lat) else DayPhase.DAY


def update_day_night(sun: CelestialBody,
                     ambient: Optional[AmbientLightState] = None) -> Optional[DayPhase]:
    """
    Bring the sun's light in line with its current regime.

    Returns the new phase when a transition fired, None otherwise.
    DAY → NIGHT: no shadows, light detached from the world ambient.
    NIGHT → DAY: shadows back on, light re-attached.
    """
    new_phase = phase_from_latitude(sun.latitude)
    if new_phase is sun.phase:
        return None

    sun.phase = new_phase
    if new_phase is DayPhase.NIGHT:
        sun.light.shadow_caster = False
        if ambient is not None:
            ambient.detach(sun.light)
    else:
        sun.light.shadow_caster = True
        if ambient is not None:
            ambient.attach(sun.light)
    return new_phase


def _ramp(start: RGBA, k: float, t: float) -> RGBA:
    """start + k·(1 - start)·t per channel (towards white for t>0)."""
    return tuple(s + (1.0 - s) * k * t for s in start)


def _fall(k: float, target: RGBA, t: float) -> RGBA:
    """1 - k·(1 - target)·t per channel (from white towards target)."""
    return tuple(1.0 - (1.0 - c) * k * t for c in target)


def sun_light_color(lat: float, dawn: RGBA, dusk: RGBA) -> RGBA:
    """
    Diurnal tint of the sunlight. Latitude is folded into [0, 2π):
        [0,     2π/6)   dawn → towards white
        [2π/6,  4π/6)   white plateau (around noon)
        [4π/6,  7π/6)   white → towards dusk
        [7π/6,  9π/6)   dusk → towards white
        [9π/6, 11π/6)   white → towards dawn
        [11π/6, 2π)     dawn → towards white
    """
    if lat < 0:
        lat += 2 * math.pi

    if lat >= 11 * PI_6:
        return _ramp(dawn, 1.0 / (3 * PI_6), lat - 11 * PI_6)
    if lat < 2 * PI_6:
        return _ramp(dawn, 1.0 / (3 * PI_6), lat)
    if lat < 4 * PI_6:
        return WHITE
    if lat < 7 * PI_6:
        return _fall(1.0 / (2 * PI_6), dusk, lat - 4 * PI_6)
    if lat < 9 * PI_6:
        return _ramp(dusk, 1.0 / (2 * PI_6), lat - 7 * PI_6)
    return _fall(1.0 / (4 * PI_6), dawn, lat - 9 * PI_6)


def sun_flare_intensity(lat: float, size_mult: float) -> Tuple[float, bool]:
    """(intensity, occlusion test enabled) of a sun's lens flare."""
    if lat < 0:
        return 0.0, False
    return max(abs(math.sin(lat)) * 0.4 * size_mult, 0.25), True


def moon_weight(moon_lat: float, mean_sun_lat: float) -> float:
    """Moon latitude weighted by how far the suns are below the horizon."""
    return moon_lat * math.sin(-mean_sun_lat)


def moon_light_color(moon_lat: float, mean_sun_lat: float, moon_color: RGBA) -> RGBA:
    """Black while the weight is negative, else moon colour · sin(-sun) · |sin(moon)|."""
    if moon_weight(moon_lat, mean_sun_lat) < 0:
        return BLACK
    color = scale_rgba(moon_color, math.sin(-mean_sun_lat))
    return scale_rgba(color, abs(math.sin(moon_lat)))


def moon_flare(moon_lat: float, mean_sun_lat: float) -> Tuple[float, float]:
    """(scale, alpha) of the moon glow quad; scale 0 hides it."""
    w = moon_weight(moon_lat, mean_sun_lat)
    if w < 0:
        return 0.0, 0.0
    return 0.9 * abs(math.sin(w)), 0.3 * abs(math.sin(w))


def star_opacity(mean_sun_lat: float) -> float:
    """Star layer alpha. Not clamped: the renderer clamps."""
    return 0.4 - math.sin(mean_sun_lat)


def shadow_color(mean_sun_lat: float) -> RGBA:
    return scale_rgba(SHADOW_BASE, 1.2 - math.sin(mean_sun_lat))


def apply_sun_lighting(sun: CelestialBody, dawn: RGBA, dusk: RGBA,
                       ambient: Optional[AmbientLightState] = None) -> Optional[DayPhase]:
    """One tick of sun lighting: day/night edge, diffuse curve, flare."""
    transition = update_day_night(sun, ambient)
    sun.light.diffuse = sun_light_color(sun.latitude, dawn, dusk)
    sun.flare_intensity, sun.flare_occlusion = sun_flare_intensity(sun.latitude, sun.size_mult)
    return transition


def apply_moon_lighting(moon: CelestialBody, mean_sun_lat: float, moon_color: RGBA) -> None:
    moon.light.diffuse = moon_light_color(moon.latitude, mean_sun_lat, moon_color)
    if moon.has_flare:
        moon.flare_scale, moon.flare_alpha = moon_flare(moon.latitude, mean_sun_lat)
