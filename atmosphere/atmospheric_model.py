"""
Atmosphere — haze and clouds layered on a SkyDome.

  1. haze  : fog applied to the terrain, coloured like the dome's horizon
  2. clouds: opacity per cloud-dome vertex + scrolling texture
  3. wind  : background PeriodicTask scrolling the clouds between frames

Lifecycle:
    atm = Atmosphere(dome)
    atm.set_cloudness(0.5)
    atm.set_wind((0.001, 0.0, 0.0005), 1.0)   # starts the wind task
    ...
    atm.update(tpf, hh, mm, ss)               # every frame, after dome.update()
    ...
    atm.cleanup()                             # scene teardown: stops the task

Texture loading and the fog render state are the renderer's business: this
class only produces the numbers they need.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

from core.time_controller import PeriodicTask
from core.types import RGBA, Vec3
from .cloud_layer import CloudLayer, WindSettings
from .sky_dome import SkyDome


@dataclass
class FogSettings:
    """Exponential per-pixel fog on the terrain node."""
    density: float = 0.0005
    start:   float = 600.0
    end:     float = 7000.0
    color:   RGBA  = (0.7, 0.7, 0.7, 0.5)


class Atmosphere:

    def __init__(self, sky_dome: SkyDome,
                 fog: Optional[FogSettings] = None,
                 clouds: Optional[CloudLayer] = None):
        self.sky_dome = sky_dome
        self.fog = fog or FogSettings()
        self.clouds = clouds or CloudLayer()
        # replaced as a whole by set_wind(); the wind task only reads it
        self._wind = WindSettings()
        self._wind_task: Optional[PeriodicTask] = None

    @property
    def wind(self) -> WindSettings:
        return self._wind

    @property
    def wind_running(self) -> bool:
        return self._wind_task is not None and self._wind_task.running

    def set_cloudness(self, value: float):
        return self.clouds.set_cloudness(value)

    def set_fog(self, **changes) -> FogSettings:
        """Override fog parameters (density, start, end, color)."""
        self.fog = replace(self.fog, **changes)
        return self.fog

    def set_wind(self, wind: Vec3, speed: float) -> None:
        """
        Set the wind translation per step and its update-speed multiplier,
        starting the background wind task on first call.
        """
        self._wind = WindSettings(vector=tuple(float(c) for c in wind), speed=float(speed))
        if self._wind_task is None:
            self._wind_task = PeriodicTask(
                action=lambda: self.clouds.blow(self._wind),
                interval=lambda: self._wind.interval_s,
                name="cloud-wind",
            )
        self._wind_task.start()

    def update(self, tpf: float, hh: int, mm: int, ss: int) -> Vec3:
        """Haze follows the dome; clouds drift with the elapsed simulated time."""
        self.fog.color = self.sky_dome.haze_color
        return self.clouds.warp(self._wind, hh, mm)

    def cleanup(self, timeout: Optional[float] = None) -> None:
        """Stop the wind task. Call in the scene cleanup."""
        if self._wind_task is not None:
            self._wind_task.stop(timeout)
