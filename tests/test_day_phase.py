"""Tests for the day/night lighting state machine and light curves."""

from __future__ import annotations

import math

import numpy as np
import pytest

from core.types import AmbientLightState, BLACK, WHITE, Light
from universe.orbital_body import BodyKind, CelestialBody, DayPhase
from atmosphere.day_phase import (
    moon_flare,
    moon_light_color,
    phase_from_latitude,
    shadow_color,
    star_opacity,
    sun_flare_intensity,
    sun_light_color,
    update_day_night,
)

DAWN = (0.9843, 0.7098, 0.3523, 1.0)
DUSK = (0.6843, 0.5098, 0.1246, 1.0)
MOON = (0.2745, 0.3961, 0.6196, 1.0)


class _FixedObserver:
    """Observer stand-in whose latitude the test sets directly."""

    def __init__(self, latitude: float = 0.5):
        self.latitude = latitude
        self.longitude = 0.0
        self.position = np.zeros(3)


def _sun(lat: float = 0.5) -> CelestialBody:
    return CelestialBody(kind=BodyKind.SUN, observer=_FixedObserver(lat),
                         light=Light(shadow_caster=True))


def test_phase_from_latitude() -> None:
    assert phase_from_latitude(1.0) is DayPhase.DAY
    assert phase_from_latitude(-0.5 * math.pi) is DayPhase.NIGHT
    assert phase_from_latitude(-0.1 * math.pi) is DayPhase.DAY


def test_transitions_fire_once_per_crossing() -> None:
    sun = _sun()
    ambient = AmbientLightState()
    ambient.attach(sun.light)

    lats = [0.5, 0.6, -0.5 * math.pi, -0.5 * math.pi, -0.4 * math.pi, 0.2, 0.3, 1.0]
    fired = []
    for lat in lats:
        sun.observer.latitude = lat
        fired.append(update_day_night(sun, ambient))

    assert fired == [None, None, DayPhase.NIGHT, None, None, DayPhase.DAY, None, None]
    assert sun.light.shadow_caster
    assert ambient.is_attached(sun.light)


def test_night_disables_shadows_and_ambient() -> None:
    sun = _sun()
    ambient = AmbientLightState()
    ambient.attach(sun.light)

    sun.observer.latitude = -1.0
    assert update_day_night(sun, ambient) is DayPhase.NIGHT
    assert not sun.light.shadow_caster
    assert not ambient.is_attached(sun.light)
    assert sun.phase is DayPhase.NIGHT


def test_transition_without_ambient() -> None:
    sun = _sun(-1.0)
    assert update_day_night(sun) is DayPhase.NIGHT
    assert not sun.light.shadow_caster


def test_sun_light_curve_anchors() -> None:
    assert sun_light_color(math.pi / 2, DAWN, DUSK) == WHITE
    assert sun_light_color(0.0, DAWN, DUSK) == pytest.approx(DAWN)
    assert sun_light_color(4 * math.pi / 6, DAWN, DUSK) == pytest.approx(WHITE)
    assert sun_light_color(7 * math.pi / 6, DAWN, DUSK) == pytest.approx(DUSK)
    # folded negative latitudes: 9π/6 is the white start of the pre-dawn segment
    assert sun_light_color(-math.pi / 2, DAWN, DUSK) == pytest.approx(WHITE)


def test_sun_light_curve_never_above_white() -> None:
    for lat in np.linspace(-math.pi + 1e-6, math.pi, 97):
        color = sun_light_color(float(lat), DAWN, DUSK)
        assert all(math.isfinite(c) and c <= 1.0 + 1e-9 for c in color)


def test_pre_dawn_is_between_dawn_and_white() -> None:
    color = sun_light_color(-0.1, DAWN, DUSK)
    for c, d in zip(color, DAWN):
        assert d <= c <= 1.0


def test_sun_flare_intensity() -> None:
    assert sun_flare_intensity(-0.1, 1.0) == (0.0, False)
    assert sun_flare_intensity(math.pi / 2, 1.0) == (pytest.approx(0.4), True)
    assert sun_flare_intensity(0.1, 1.0) == (0.25, True)
    assert sun_flare_intensity(math.pi / 2, 3.0)[0] == pytest.approx(1.2)


def test_moon_hidden_while_sun_is_up() -> None:
    """Moon latitude 0.3, sun 0.2: weighted term negative → no flare, black light."""
    assert moon_flare(0.3, 0.2) == (0.0, 0.0)
    assert moon_light_color(0.3, 0.2, MOON) == BLACK


def test_moon_light_when_sun_is_down() -> None:
    color = moon_light_color(0.5, -0.5, MOON)
    k = math.sin(0.5) * abs(math.sin(0.5))
    assert color == pytest.approx(tuple(c * k for c in MOON))

    scale, alpha = moon_flare(0.5, -0.5)
    w = 0.5 * math.sin(0.5)
    assert scale == pytest.approx(0.9 * abs(math.sin(w)))
    assert alpha == pytest.approx(0.3 * abs(math.sin(w)))


def test_star_opacity_unclamped() -> None:
    assert star_opacity(0.0) == pytest.approx(0.4)
    assert star_opacity(math.pi / 2) == pytest.approx(-0.6)
    assert star_opacity(-math.pi / 2) == pytest.approx(1.4)


def test_shadow_color() -> None:
    assert shadow_color(0.0) == pytest.approx((0.9, 0.9, 0.9, 0.9))


def test_moon_below_horizon_with_sun_up_goes_negative() -> None:
    """Moon below the horizon, sun up: the weight is positive, the colour is left unclamped."""
    color = moon_light_color(-0.5, 0.5, MOON)
    k = math.sin(-0.5) * abs(math.sin(-0.5))
    assert k < 0
    assert color == pytest.approx(tuple(c * k for c in MOON))
    assert all(c < 0 for c in color)
