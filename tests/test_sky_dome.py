"""Tests for the SkyDome orchestrator."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import numpy as np
import pytest

from core.types import AmbientLightState, BLACK, WHITE, SiteLocation, scale_rgba
from universe import CelestialObserver, DayPhase
from atmosphere import SkyDome, is_night_time
from atmosphere.sky_dome import NO_SUN_LATITUDE

START = datetime(2008, 6, 21, 6, tzinfo=timezone.utc)
SITE = SiteLocation(0.7, 0.0)


def _dome(ambient: AmbientLightState | None = None) -> SkyDome:
    dome = SkyDome(ambient=ambient)
    dome.add_sun(CelestialObserver(START, body="sun", site=SITE))
    dome.add_moon(CelestialObserver(START, body="moon", site=SITE))
    dome.create_stars()
    return dome


def test_one_day_has_one_sunset_and_one_sunrise() -> None:
    ambient = AmbientLightState()
    dome = _dome(ambient)
    sun = dome.get_sun(0)

    transitions = []
    night_frames = 0
    for _ in range(24):
        frame = dome.update(0.016, 1, 0, 0)
        transitions.extend(phase for _, phase in frame.transitions)
        if sun.phase is DayPhase.NIGHT:
            night_frames += 1
            assert not ambient.is_attached(sun.light)
            assert not sun.light.shadow_caster
        else:
            assert ambient.is_attached(sun.light)

    assert transitions == [DayPhase.NIGHT, DayPhase.DAY]
    assert night_frames > 0
    assert sun.observer.current_time == datetime(2008, 6, 22, 6, tzinfo=timezone.utc)


def test_frame_colors_in_range() -> None:
    dome = _dome()
    for _ in range(24):
        frame = dome.update(0.016, 1, 0, 0)
        assert frame.colors.shape == (dome.normals.shape[0], 4)
        assert np.all(np.isfinite(frame.colors))
        assert np.all((frame.colors >= 0.0) & (frame.colors <= 1.0))
        np.testing.assert_array_equal(frame.colors[:, 3], 1.0)
        assert all(0.0 <= c <= 1.0 for c in frame.haze_color)


def test_haze_black_at_night() -> None:
    dome = _dome()
    seen_night = False
    for _ in range(24):
        frame = dome.update(0.016, 1, 0, 0)
        if is_night_time(frame.mean_sun_latitude):
            seen_night = True
            assert frame.haze_color == BLACK
            assert dome.haze_color == BLACK
    assert seen_night


def test_two_suns_use_mean_latitude_and_mean_flare() -> None:
    ambient = AmbientLightState()
    dome = SkyDome(ambient=ambient)
    dome.add_sun(CelestialObserver(START, body="sun", site=SITE))
    dome.add_sun(CelestialObserver(START, lambda_offset=0.6, body="sun", site=SITE),
                 size_mult=2.0)

    frame = dome.update(0.016, 3, 0, 0)
    a, b = dome.suns
    assert frame.mean_sun_latitude == pytest.approx((a.latitude + b.latitude) / 2)
    assert frame.ambient_scale == pytest.approx((a.flare_intensity + b.flare_intensity) / 2)
    assert ambient.global_ambient == pytest.approx(scale_rgba(WHITE, frame.ambient_scale))

    # the scale is applied to the ambient captured at construction, never compounded
    frame = dome.update(0.016, 0, 0, 0)
    assert ambient.global_ambient == pytest.approx(scale_rgba(WHITE, frame.ambient_scale))


def test_remove_sun_detaches_light() -> None:
    ambient = AmbientLightState()
    dome = _dome(ambient)
    light = dome.get_sun(0).light
    assert ambient.is_attached(light)

    removed = dome.remove_sun(0)
    assert removed.light is light
    assert not ambient.is_attached(light)
    assert dome.suns == ()
    with pytest.raises(IndexError):
        dome.get_sun(0)


def test_solid_white_sky_saturates() -> None:
    dome = _dome()
    dome.sky_solid_color = WHITE
    frame = dome.update(0.016, 0, 0, 0)
    np.testing.assert_allclose(frame.colors, 1.0)


def test_star_texture_rotates_with_time() -> None:
    dome = _dome()
    frame = dome.update(0.016, 1, 0, 0)
    assert frame.star_offset == pytest.approx((0.02, 0.02, 0.01))
    frame = dome.update(0.016, 0, 30, 0)
    f = 30 * 0.166
    assert frame.star_offset == pytest.approx((0.02 + 0.02 * f, 0.02 + 0.02 * f, 0.01 + 0.01 * f))
    assert frame.star_alpha == pytest.approx(0.4 - math.sin(frame.mean_sun_latitude))


def test_without_suns() -> None:
    dome = SkyDome()
    dome.create_stars()
    dome.add_moon(CelestialObserver(START, body="moon", site=SITE))
    frame = dome.update(0.016, 1, 0, 0)

    assert frame.mean_sun_latitude == NO_SUN_LATITUDE
    assert frame.star_alpha == pytest.approx(1.4)
    assert frame.ambient_scale == 0.0
    assert frame.haze_color == BLACK
    assert frame.shadow_color == pytest.approx((1.65, 1.65, 1.65, 1.65))
    np.testing.assert_array_equal(frame.colors[:, :3], 0.0)
    assert [s.kind.value for s in frame.bodies] == ["moon"]


def test_frame_buffer_is_a_copy() -> None:
    dome = _dome()
    frame = dome.update(0.016, 1, 0, 0)
    frame.colors[:] = 0.5
    assert not np.allclose(dome.colors, 0.5)


def test_light_location_follows_scene_offset() -> None:
    dome = SkyDome(scene_offset=(10.0, 0.0, -5.0))
    light = dome.add_sun(CelestialObserver(START, body="sun", site=SITE))
    dome.update(0.016, 2, 0, 0)
    pos = dome.get_sun(0).position
    assert light.location == pytest.approx((10.0 + pos[0], pos[1], -5.0 + pos[2]))
