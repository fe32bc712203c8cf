"""
CloudLayer — cloud dome opacity and wind-driven texture scrolling.

Two writers move the cloud texture:
  - the per-frame update (warp) proportional to the simulated elapsed time
  - the background wind task (blow), a fixed step every 0.2·speed seconds
Both go through TextureOffset.translate(), which serialises them.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from core.coords import clamp
from core.types import TextureOffset, Vec3

# Cloud sphere: 15 z-samples × 20 radial samples
CLOUD_VERTEX_COUNT: int = 13 * 21 + 2

WIND_BASE_INTERVAL_S: float = 0.2
WARP_MODULO: float = 0.95
BLOW_MODULO: float = 1.0


@dataclass(frozen=True)
class WindSettings:
    """Wind translation per step (components in [0, 1]) and update-speed multiplier."""
    vector: Vec3 = (0.0, 0.0, 0.0)
    speed:  float = 1.0

    @property
    def interval_s(self) -> float:
        """Sleep between two background wind steps."""
        return WIND_BASE_INTERVAL_S * self.speed

    def normalized(self) -> Optional[Vec3]:
        n = math.sqrt(sum(c * c for c in self.vector))
        if n == 0.0:
            return None
        return tuple(c / n for c in self.vector)


class CloudLayer:
    """
    Per-vertex cloud opacity + cloud texture translation.

    Usage:
        clouds = CloudLayer(seed=42)
        clouds.set_cloudness(0.6)
        clouds.warp(wind, hh, mm)   # every tick
    """

    def __init__(self, vertex_count: int = CLOUD_VERTEX_COUNT, seed: int = 42):
        self.vertex_count = vertex_count
        self._rng = np.random.default_rng(seed)
        self._cloudness = 0.0
        self.alpha = np.zeros(vertex_count, dtype=np.float32)
        self.texture = TextureOffset()

    @property
    def cloudness(self) -> float:
        return self._cloudness

    def set_cloudness(self, value: float) -> np.ndarray:
        """
        Cloud thickness in [0, 1] (clamped). Each vertex gets a random share
        of it, between 10% and 100%, for an uneven cover.
        """
        value = clamp(value, 0.0, 1.0)
        self._cloudness = value
        jitter = self._rng.random(self.vertex_count) * 0.9 + 0.1
        self.alpha = (value * jitter).astype(np.float32)
        return self.alpha

    def warp(self, wind: WindSettings, hh: int, mm: int) -> Vec3:
        """Per-tick drift along the normalised wind, scaled by elapsed hours."""
        direction = wind.normalized()
        if direction is None:
            return self.texture.value
        time_factor = 0.25 * (hh + 0.016 * mm)
        return self.texture.translate(
            tuple(c * time_factor for c in direction), WARP_MODULO)

    def blow(self, wind: WindSettings) -> Vec3:
        """One background wind step: raw wind vector, wrapped modulo 1."""
        return self.texture.translate(wind.vector, BLOW_MODULO)
