from __future__ import annotations
import threading
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .coords import wrap_mod

RGBA = Tuple[float, float, float, float]
Vec3 = Tuple[float, float, float]

BLACK: RGBA = (0.0, 0.0, 0.0, 1.0)
WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)


def scale_rgba(color: RGBA, k: float) -> RGBA:
    """Multiply every channel (alpha included) by k."""
    r, g, b, a = color
    return (r * k, g * k, b * k, a * k)


@dataclass(slots=True)
class Light:
    """
    Light description shared with the rendering collaborator.
    The sky core only reads/writes diffuse colour and the shadow flag.
    """
    diffuse: RGBA = WHITE
    ambient: RGBA = (0.0, 0.0, 0.0, 0.0)
    enabled: bool = True
    shadow_caster: bool = False
    location: Vec3 = (0.0, 0.0, 0.0)


@dataclass
class AmbientLightState:
    """World light state: the lights contributing to scene ambient + a global scale."""
    global_ambient: RGBA = WHITE
    lights: list[Light] = field(default_factory=list)

    def attach(self, light: Light) -> None:
        if not any(l is light for l in self.lights):
            self.lights.append(light)

    def detach(self, light: Light) -> None:
        self.lights = [l for l in self.lights if l is not light]

    def is_attached(self, light: Light) -> bool:
        return any(l is light for l in self.lights)


class TextureOffset:
    """
    Texture translation of a scrolling layer (stars, clouds).

    Several writers may touch it (per-frame update, background wind task):
    every read-modify-write goes through translate() under one lock.
    """

    def __init__(self, offset: Vec3 = (0.0, 0.0, 0.0)):
        self._offset = tuple(float(c) for c in offset)
        self._lock = threading.Lock()

    @property
    def value(self) -> Vec3:
        with self._lock:
            return self._offset

    def set(self, offset: Vec3) -> None:
        with self._lock:
            self._offset = tuple(float(c) for c in offset)

    def translate(self, delta: Vec3, modulo: float = 1.0) -> Vec3:
        """Add delta component-wise, wrap each component modulo `modulo`."""
        with self._lock:
            self._offset = tuple(
                wrap_mod(c + d, modulo) for c, d in zip(self._offset, delta))
            return self._offset


@dataclass(slots=True)
class SiteLocation:
    """Observing site in radians, range (-π, π]."""
    latitude_rad: float = 0.0
    longitude_rad: float = 0.0
    name: Optional[str] = None
