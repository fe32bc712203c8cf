"""
SkyDome — orchestrates suns, moons, sky colour and lights for each tick.

Usage:
    dome = SkyDome(ambient=world_ambient)
    dome.add_sun(CelestialObserver(start, body="sun", site=site))
    dome.add_moon(CelestialObserver(start, body="moon", site=site))
    dome.create_stars()

    # every frame
    frame = dome.update(tpf, hh, mm, ss)
    renderer.upload_colors(frame.colors)
    fog.color = frame.haze_color

Per tick:
  1. every sun: advance its observer, day/night edge, light colour, flare,
     sky colour contribution blended on top of the previous suns
  2. once: mean sun latitude → star opacity + rotation, shadow tint,
     world ambient scaled by the mean sun flare intensity
  3. every moon: advance, light colour and flare weighted by the mean sun latitude
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import numpy as np

from core.types import RGBA, BLACK, Light, AmbientLightState, TextureOffset, Vec3, scale_rgba
from universe.observer import CelestialObserver
from universe.orbital_body import BodyKind, CelestialBody, DayPhase, make_sun, make_moon
from .sky_model import SkyModelConfig, build_dome_normals, update_dome_colors
from .day_phase import (
    apply_sun_lighting,
    apply_moon_lighting,
    star_opacity,
    shadow_color,
)

# Mean sun latitude used when no sun is registered (deep night)
NO_SUN_LATITUDE = -math.pi / 2


@dataclass
class BodyState:
    """Snapshot of one body after a tick."""
    kind:          BodyKind
    index:         int
    latitude:      float
    longitude:     float
    position:      np.ndarray
    diffuse:       RGBA
    shadow_caster: bool
    flare:         float        # sun: flare intensity; moon: flare scale


@dataclass
class SkyFrame:
    """Everything one tick produced. Not kept by the dome beyond the next tick."""
    colors:             np.ndarray
    haze_color:         RGBA
    mean_sun_latitude:  float
    star_alpha:         Optional[float]
    star_offset:        Optional[Vec3]
    shadow_color:       RGBA
    ambient_scale:      float
    bodies:             List[BodyState] = field(default_factory=list)
    transitions:        List[Tuple[int, DayPhase]] = field(default_factory=list)


class SkyDome:
    """
    Sky of one scene: registered suns and moons, the dome colour buffer,
    the optional star layer and the world ambient they drive.

    normals      : (N, 3) dome vertex normals (default: build_dome_normals())
    ambient      : world light state; suns attach to it while it is day
    scene_offset : added to every body position to place its light
    verbose      : print registrations and day/night transitions
    """

    def __init__(self,
                 normals: Optional[np.ndarray] = None,
                 config: Optional[SkyModelConfig] = None,
                 ambient: Optional[AmbientLightState] = None,
                 scene_offset: Vec3 = (0.0, 0.0, 0.0),
                 verbose: bool = False):
        self.normals = build_dome_normals() if normals is None else np.asarray(normals, dtype=np.float64)
        self.config = config or SkyModelConfig()
        self.ambient = ambient
        self.scene_offset = np.asarray(scene_offset, dtype=np.float64)
        self.verbose = verbose

        self._base_ambient: RGBA = ambient.global_ambient if ambient is not None else BLACK
        self._sky_color: RGBA = BLACK
        self._haze_color: RGBA = BLACK
        self._colors = self._solid_buffer()
        self._suns: List[CelestialBody] = []
        self._moons: List[CelestialBody] = []
        self._stars: Optional[TextureOffset] = None

    # ── Bodies ───────────────────────────────────────────────────────────────

    def add_sun(self, observer: CelestialObserver, size_mult: float = 1.0,
                pick_node: Optional[Any] = None) -> Light:
        """Register a sun; returns its light for the world light state."""
        sun = make_sun(observer, size_mult, pick_node)
        sun.light.location = self._absolute(sun)
        self._suns.append(sun)
        if self.ambient is not None:
            self.ambient.attach(sun.light)
        if self.verbose:
            print(f"[SkyDome] sun #{len(self._suns) - 1} added (lat={sun.latitude:.3f})")
        return sun.light

    def add_moon(self, observer: CelestialObserver, size_mult: float = 1.0,
                 with_flare: bool = True) -> Light:
        """Register a moon; returns its light for the world light state."""
        moon = make_moon(observer, size_mult, has_flare=with_flare)
        moon.light.location = self._absolute(moon)
        self._moons.append(moon)
        if self.verbose:
            print(f"[SkyDome] moon #{len(self._moons) - 1} added (lat={moon.latitude:.3f})")
        return moon.light

    def get_sun(self, index: int) -> CelestialBody:
        return self._suns[index]

    def get_moon(self, index: int) -> CelestialBody:
        return self._moons[index]

    def remove_sun(self, index: int) -> CelestialBody:
        sun = self._suns.pop(index)
        if self.ambient is not None:
            self.ambient.detach(sun.light)
        if self.verbose:
            print(f"[SkyDome] sun #{index} removed")
        return sun

    def remove_moon(self, index: int) -> CelestialBody:
        moon = self._moons.pop(index)
        if self.verbose:
            print(f"[SkyDome] moon #{index} removed")
        return moon

    @property
    def suns(self) -> Tuple[CelestialBody, ...]:
        return tuple(self._suns)

    @property
    def moons(self) -> Tuple[CelestialBody, ...]:
        return tuple(self._moons)

    # ── Sky properties ───────────────────────────────────────────────────────

    @property
    def haze_color(self) -> RGBA:
        return self._haze_color

    @property
    def sky_solid_color(self) -> RGBA:
        return self._sky_color

    @sky_solid_color.setter
    def sky_solid_color(self, color: RGBA) -> None:
        """Base colour of the dome under the suns' contribution. Black by default."""
        self._sky_color = tuple(float(c) for c in color)

    @property
    def colors(self) -> np.ndarray:
        """(N, 4) RGBA of the dome after the last tick (copy)."""
        return self._colors.copy()

    def create_stars(self, offset: Vec3 = (0.0, 0.0, 0.0)) -> TextureOffset:
        """Enable the star layer; returns its texture translation."""
        self._stars = TextureOffset(offset)
        return self._stars

    @property
    def stars(self) -> Optional[TextureOffset]:
        return self._stars

    # ── Tick ─────────────────────────────────────────────────────────────────

    def update(self, tpf: float, hh: int, mm: int, ss: int) -> SkyFrame:
        """
        Advance every body by (hh, mm, ss) and recompute the sky.
        tpf (wall seconds per frame) is accepted for the renderer's frame
        signature; the sky is driven by the elapsed simulated time only.
        """
        cfg = self.config
        colors = self._solid_buffer()
        haze = BLACK
        lat_sum = 0.0
        flare_sum = 0.0
        transitions: List[Tuple[int, DayPhase]] = []
        states: List[BodyState] = []

        for i, sun in enumerate(self._suns):
            sun.observer.advance(hh, mm, ss)
            sun.light.location = self._absolute(sun)

            changed = apply_sun_lighting(sun, cfg.dawn_color, cfg.dusk_color, self.ambient)
            if changed is not None:
                transitions.append((i, changed))
                if self.verbose:
                    print(f"[SkyDome] sun #{i} → {changed.value}")

            lat_sum += sun.latitude
            flare_sum += sun.flare_intensity

            sky = update_dome_colors(self.normals, sun.latitude, sun.longitude, cfg, colors)
            colors = sky.colors
            haze = sky.haze
            states.append(self._state(sun, i, sun.flare_intensity))

        n_suns = len(self._suns)
        mean_lat = lat_sum / n_suns if n_suns else NO_SUN_LATITUDE
        ambient_scale = flare_sum / n_suns if n_suns else 0.0

        if self.ambient is not None:
            self.ambient.global_ambient = scale_rgba(self._base_ambient, ambient_scale)

        star_alpha = None
        star_offset = None
        if self._stars is not None:
            star_alpha = star_opacity(mean_lat)
            angle = hh * 1 + mm * 0.166
            star_offset = self._stars.translate((0.02 * angle, 0.02 * angle, 0.01 * angle), 1.0)

        for i, moon in enumerate(self._moons):
            moon.observer.advance(hh, mm, ss)
            moon.light.location = self._absolute(moon)
            apply_moon_lighting(moon, mean_lat, cfg.moon_color)
            states.append(self._state(moon, i, moon.flare_scale))

        self._colors = colors
        self._haze_color = haze

        return SkyFrame(
            colors=colors.copy(),
            haze_color=haze,
            mean_sun_latitude=mean_lat,
            star_alpha=star_alpha,
            star_offset=star_offset,
            shadow_color=shadow_color(mean_lat),
            ambient_scale=ambient_scale,
            bodies=states,
            transitions=transitions,
        )

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _solid_buffer(self) -> np.ndarray:
        buf = np.empty((self.normals.shape[0], 4), dtype=np.float64)
        buf[:] = self._sky_color
        return buf

    def _absolute(self, body: CelestialBody) -> Vec3:
        return tuple(float(c) for c in self.scene_offset + body.position)

    @staticmethod
    def _state(body: CelestialBody, index: int, flare: float) -> BodyState:
        return BodyState(
            kind=body.kind,
            index=index,
            latitude=body.latitude,
            longitude=body.longitude,
            position=body.position,
            diffuse=body.light.diffuse,
            shadow_caster=body.light.shadow_caster,
            flare=flare,
        )
