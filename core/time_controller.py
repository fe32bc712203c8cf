"""
TimeController — tick driver for the sky simulation.

Ogni frame il controller riceve i secondi reali trascorsi, li moltiplica per
la velocità corrente e restituisce il delta simulato come ore/minuti/secondi
interi (il formato che SkyDome.update() e Atmosphere.update() consumano).
La parte frazionaria dei secondi viene accumulata tra un frame e l'altro:
nessun secondo simulato viene perso.

Velocità disponibili:
    SPEEDS = [0, 1, 10, 60, 300, 3600, 86400]
    (pausa, tempo reale, 10×, 1min/s, 5min/s, 1h/s, 1d/s)

Controllo:
    tc.speed_up()    — prossimo step di velocità avanti
    tc.speed_down()  — step indietro (0 = pausa)
    tc.reverse()     — inverte direzione
    tc.toggle_pause()
    tc.step(dt_wall_seconds)  — chiamato ogni frame, ritorna (hh, mm, ss)

PeriodicTask is the cancellable background loop used for slow effects that
live outside the per-frame path (cloud wind). The owner starts it and must
stop it; stop() is honoured within one interval.
"""

from __future__ import annotations
import math
import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from .astro_time import add_elapsed, as_utc


# Passi di velocità in secondi simulati per secondo reale
SPEEDS = [0, 1, 10, 60, 300, 3600, 86400]
SPEED_LABELS = ["PAUSED", "1×", "10×", "1min/s", "5min/s", "1h/s", "1d/s"]


def split_seconds(total: int) -> Tuple[int, int, int]:
    """Signed seconds → (hours, minutes, seconds), all sharing the sign of total."""
    sign = -1 if total < 0 else 1
    total = abs(total)
    hh, rem = divmod(total, 3600)
    mm, ss = divmod(rem, 60)
    return sign * hh, sign * mm, sign * ss


class TimeController:
    """
    Gestione tempo simulato con avanzamento per frame.

    Parametri
    ----------
    start_utc : datetime UTC da cui partire (default: adesso)
    speed_idx : indice in SPEEDS (default: 1 = tempo reale)
    """

    def __init__(self,
                 start_utc: Optional[datetime] = None,
                 speed_idx: int = 1):
        if start_utc is None:
            start_utc = datetime.now(timezone.utc)
        self._utc       = as_utc(start_utc)
        self._speed_idx = max(0, min(speed_idx, len(SPEEDS) - 1))
        self._direction = +1    # +1 avanti, -1 indietro
        self._paused    = (self._speed_idx == 0)
        self._carry_s   = 0.0   # secondi simulati non ancora emessi

    # ── Proprietà ────────────────────────────────────────────────────────────

    @property
    def utc(self) -> datetime:
        return self._utc

    @property
    def speed(self) -> float:
        return SPEEDS[self._speed_idx] * self._direction

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def speed_label(self) -> str:
        if self._paused:
            return "PAUSED"
        lbl = SPEED_LABELS[self._speed_idx]
        return ("◀◀ " if self._direction < 0 else "") + lbl

    @property
    def speed_idx(self) -> int:
        return self._speed_idx

    # ── Controlli ────────────────────────────────────────────────────────────

    def speed_up(self):
        """Aumenta velocità (o riprende se in pausa)."""
        if self._paused:
            self._paused = False
            if self._speed_idx == 0:
                self._speed_idx = 1
        elif self._speed_idx < len(SPEEDS) - 1:
            self._speed_idx += 1

    def speed_down(self):
        """Diminuisce velocità (pausa a 0)."""
        if self._speed_idx > 0:
            self._speed_idx -= 1
        if self._speed_idx == 0:
            self._paused = True

    def toggle_pause(self):
        self._paused = not self._paused

    def reverse(self):
        """Inverte la direzione del tempo."""
        self._direction *= -1

    def set_speed_idx(self, idx: int):
        self._speed_idx = max(0, min(idx, len(SPEEDS) - 1))
        self._paused    = (self._speed_idx == 0)

    # ── Aggiornamento frame ───────────────────────────────────────────────────

    def step(self, dt_wall: float) -> Tuple[int, int, int]:
        """
        Avanza il tempo di dt_wall secondi reali.
        Ritorna il delta simulato (hh, mm, ss) da passare agli update.
        """
        if self._paused:
            return 0, 0, 0
        self._carry_s += dt_wall * SPEEDS[self._speed_idx] * self._direction
        whole = int(math.trunc(self._carry_s))
        self._carry_s -= whole
        hh, mm, ss = split_seconds(whole)
        self._utc = add_elapsed(self._utc, hh, mm, ss)
        return hh, mm, ss


class PeriodicTask:
    """
    Runs `action()` every `interval()` seconds on a daemon thread until stop().

    `interval` is re-read after every run so the owner can change the period
    through its own settings object without restarting the task.
    """

    def __init__(self, action: Callable[[], None],
                 interval: Callable[[], float],
                 name: str = "periodic-task"):
        self._action   = action
        self._interval = interval
        self._name     = name
        self._stop     = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self._name,
                                        daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.is_set():
            self._action()
            # Event.wait returns early on stop(): cancellation within one interval
            self._stop.wait(max(1e-3, self._interval()))
