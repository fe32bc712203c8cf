"""Tests for the command-line simulation."""

from __future__ import annotations

from datetime import datetime, timezone

from main import main


def test_clock_drives_the_simulation(capsys) -> None:
    """Three hours at 1h/s with one-second frames → three rows, clock three hours on."""
    clock = main(["--start", "2008-06-21T06:00", "--hours", "3", "--speed", "5"])
    out = capsys.readouterr().out
    assert "1h/s" in out
    assert clock.utc == datetime(2008, 6, 21, 9, tzinfo=timezone.utc)
    assert "2008-06-21 09:00" in out
    assert len(out.strip().splitlines()) == 2 + 3


def test_reverse_runs_backwards(capsys) -> None:
    clock = main(["--start", "2008-06-21T06:00", "--hours", "1", "--speed", "4",
                  "--reverse", "--no-moon"])
    out = capsys.readouterr().out
    assert "◀◀ 5min/s" in out
    assert clock.utc == datetime(2008, 6, 21, 5, 0, tzinfo=timezone.utc)


def test_paused_clock_prints_no_rows(capsys) -> None:
    clock = main(["--hours", "2", "--speed", "0"])
    out = capsys.readouterr().out
    assert clock.paused
    assert "PAUSED" in out
    assert len(out.strip().splitlines()) == 2
