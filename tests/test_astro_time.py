"""Tests for Julian date and elapsed-time helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.astro_time import add_elapsed, datetime_to_julian_date, julian_centuries


def test_j2000_epoch() -> None:
    """2000-01-01 12:00 UTC is JD 2451545.0, zero centuries."""
    jd = datetime_to_julian_date(datetime(2000, 1, 1, 12, tzinfo=timezone.utc))
    assert jd == pytest.approx(2451545.0)
    assert julian_centuries(jd) == pytest.approx(0.0)


def test_known_date_and_fraction_of_day() -> None:
    """Midnight starts at .5 and hours add as fractions of a day."""
    assert datetime_to_julian_date(datetime(2008, 6, 21, tzinfo=timezone.utc)) == pytest.approx(2454638.5)
    assert datetime_to_julian_date(datetime(2008, 6, 21, 12, tzinfo=timezone.utc)) == pytest.approx(2454639.0)
    assert datetime_to_julian_date(datetime(2008, 6, 21, 18, tzinfo=timezone.utc)) == pytest.approx(2454639.25)


def test_naive_datetime_is_utc() -> None:
    naive = datetime(2010, 3, 1, 6, 30)
    aware = datetime(2010, 3, 1, 6, 30, tzinfo=timezone.utc)
    assert datetime_to_julian_date(naive) == datetime_to_julian_date(aware)


def test_add_elapsed_forward_and_back() -> None:
    t0 = datetime(2008, 12, 31, 23, 30, tzinfo=timezone.utc)
    assert add_elapsed(t0, 1, 0, 0) == datetime(2009, 1, 1, 0, 30, tzinfo=timezone.utc)
    assert add_elapsed(t0, 0, -30, -1) == datetime(2008, 12, 31, 22, 59, 59, tzinfo=timezone.utc)
