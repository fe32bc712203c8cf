"""
CelestialBody — un Sole o una Luna registrati nel cielo.

Tagged variant instead of a Sun/Moon class hierarchy: both kinds share the
observer and the light; the fields that only make sense for one kind are
simply unused by the other. Per-kind behaviour lives in atmosphere.day_phase
and atmosphere.sky_dome, dispatched on `kind`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.types import Light, WHITE, BLACK
from .observer import CelestialObserver


class BodyKind(Enum):
    SUN  = "sun"
    MOON = "moon"


class DayPhase(Enum):
    """Day/night regime of a sun, as tracked by the lighting state machine."""
    DAY   = "day"
    NIGHT = "night"


@dataclass
class CelestialBody:
    kind:              BodyKind
    observer:          CelestialObserver
    light:             Light
    size_mult:         float = 1.0

    # Sun only
    flare_intensity:   float = 0.0
    flare_occlusion:   bool  = True             # triangle-accurate occlusion test
    pick_node:         Optional[Any] = None     # occlusion reference, owned by the renderer
    phase:             DayPhase = DayPhase.DAY

    # Moon only
    has_flare:         bool  = True
    flare_scale:       float = 0.0
    flare_alpha:       float = 0.0

    @property
    def is_sun(self) -> bool:
        return self.kind is BodyKind.SUN

    @property
    def latitude(self) -> float:
        return self.observer.latitude

    @property
    def longitude(self) -> float:
        return self.observer.longitude

    @property
    def position(self):
        return self.observer.position


def make_sun(observer: CelestialObserver, size_mult: float = 1.0,
             pick_node: Optional[Any] = None) -> CelestialBody:
    light = Light(diffuse=WHITE, ambient=(0.0, 0.0, 0.0, 0.0),
                  enabled=True, shadow_caster=True)
    return CelestialBody(kind=BodyKind.SUN, observer=observer, light=light,
                         size_mult=size_mult, pick_node=pick_node,
                         phase=DayPhase.DAY)


def make_moon(observer: CelestialObserver, size_mult: float = 1.0,
              has_flare: bool = True) -> CelestialBody:
    light = Light(diffuse=(0.25, 0.25, 0.25, 0.25), ambient=(0.1, 0.1, 0.1, 1.0),
                  enabled=True, shadow_caster=False)
    return CelestialBody(kind=BodyKind.MOON, observer=observer, light=light,
                         size_mult=size_mult, has_flare=has_flare)
