"""
Atmosphere package — dynamic sky colour, lights and weather layers.

Main exports:
    SkyDome          — per-tick orchestrator of suns, moons, dome colour, stars
    SkyFrame         — result of one tick (colours, haze, stars, lights)
    SkyModelConfig   — turbidity / overcast / exposure / gamma / light colours
    update_dome_colors — Preetham/Perez sky colour for one sun on a dome
    DayPhase         — DAY / NIGHT regime of a sun
    Atmosphere       — haze fog + clouds + background wind task
    CloudLayer       — cloud opacity and texture drift
"""
from .sky_model import (
    SkyModelConfig,
    ExposureMode,
    SkyColors,
    update_dome_colors,
    build_dome_normals,
    is_night_time,
    rgb_to_hsv,
    hsv_to_rgb,
    RAD_SAMPLES,
)
from .day_phase import (
    DayPhase,
    phase_from_latitude,
    update_day_night,
    sun_light_color,
    moon_light_color,
    moon_flare,
    star_opacity,
)
from .sky_dome import SkyDome, SkyFrame, BodyState
from .cloud_layer import CloudLayer, WindSettings
from .atmospheric_model import Atmosphere, FogSettings

__all__ = [
    "SkyModelConfig",
    "ExposureMode",
    "SkyColors",
    "update_dome_colors",
    "build_dome_normals",
    "is_night_time",
    "rgb_to_hsv",
    "hsv_to_rgb",
    "RAD_SAMPLES",
    "DayPhase",
    "phase_from_latitude",
    "update_day_night",
    "sun_light_color",
    "moon_light_color",
    "moon_flare",
    "star_opacity",
    "SkyDome",
    "SkyFrame",
    "BodyState",
    "CloudLayer",
    "WindSettings",
    "Atmosphere",
    "FogSettings",
]
