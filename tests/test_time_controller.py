"""Tests for the tick driver and the periodic background task."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

import pytest

from core.time_controller import PeriodicTask, TimeController, split_seconds

START = datetime(2008, 6, 21, 6, tzinfo=timezone.utc)


@pytest.mark.parametrize("total, expected", [
    (0, (0, 0, 0)),
    (59, (0, 0, 59)),
    (3725, (1, 2, 5)),
    (-3725, (-1, -2, -5)),
    (86400, (24, 0, 0)),
])
def test_split_seconds(total: int, expected: tuple) -> None:
    assert split_seconds(total) == expected


def test_step_carries_fractional_seconds() -> None:
    tc = TimeController(START, speed_idx=1)
    assert tc.step(0.4) == (0, 0, 0)
    assert tc.step(0.4) == (0, 0, 0)
    assert tc.step(0.4) == (0, 0, 1)
    assert tc.utc == datetime(2008, 6, 21, 6, 0, 1, tzinfo=timezone.utc)


def test_step_at_one_hour_per_second() -> None:
    tc = TimeController(START, speed_idx=5)
    assert tc.step(1.5) == (1, 30, 0)
    assert tc.utc == datetime(2008, 6, 21, 7, 30, tzinfo=timezone.utc)


def test_pause_and_speed_controls() -> None:
    tc = TimeController(START, speed_idx=0)
    assert tc.paused
    assert tc.step(10.0) == (0, 0, 0)

    tc.speed_up()
    assert not tc.paused
    assert tc.speed_idx == 1
    tc.speed_up()
    assert tc.speed == 10
    tc.speed_down()
    tc.speed_down()
    assert tc.paused
    assert tc.speed_label == "PAUSED"

    tc.set_speed_idx(99)
    assert tc.speed == 86400


def test_reverse_runs_time_backwards() -> None:
    tc = TimeController(START, speed_idx=4)
    tc.reverse()
    assert tc.speed == -300
    assert tc.speed_label.startswith("◀◀")
    assert tc.step(1.0) == (0, -5, 0)
    assert tc.utc == datetime(2008, 6, 21, 5, 55, tzinfo=timezone.utc)


def test_naive_start_is_utc() -> None:
    tc = TimeController(datetime(2008, 6, 21, 6), speed_idx=1)
    assert tc.utc == START


def test_periodic_task_stops_promptly() -> None:
    calls = []
    fired = threading.Event()

    def action() -> None:
        calls.append(time.monotonic())
        fired.set()

    task = PeriodicTask(action, lambda: 10.0, name="test-task")
    task.start()
    assert fired.wait(1.0)
    assert task.running

    t0 = time.monotonic()
    task.stop(timeout=1.0)
    assert time.monotonic() - t0 < 1.0
    assert not task.running
    assert len(calls) == 1


def test_periodic_task_rereads_interval() -> None:
    count = [0]
    period = [10.0]

    def action() -> None:
        count[0] += 1
        period[0] = 0.005

    task = PeriodicTask(action, lambda: period[0])
    task.start()
    deadline = time.monotonic() + 2.0
    # first wait uses the updated short period
    while count[0] < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    task.stop(timeout=1.0)
    assert count[0] >= 3
