"""
Periodic tick scheduling for playback clocks.

A scheduler starts a callback at a fixed cadence and returns a handle
whose `cancel()` stops it. Two implementations:

  ThreadScheduler  real time, one daemon thread per started tick
  ManualScheduler  simulated time advanced explicitly; used for offline
                   rendering and tests, and doubles as the time source
"""
from __future__ import annotations
import logging
import threading
import time
from typing import Callable, List

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TickHandle:
    """Cancellation handle for one periodic tick."""

    def __init__(self, callback: Callable[[], None], interval_ms: float):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.callback    = callback
        self.interval_ms = interval_ms
        self._cancelled  = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class _ThreadTick(TickHandle):

    def __init__(self, callback: Callable[[], None], interval_ms: float):
        super().__init__(callback, interval_ms)
        self._thread = threading.Thread(target=self._run, name="playback-tick", daemon=True)

    def _run(self) -> None:
        interval_s = self.interval_ms / 1000.0
        while not self._cancelled.wait(interval_s):
            try:
                self.callback()
            except Exception:
                logger.exception("Tick callback failed, stopping tick")
                self.cancel()

    def join(self, timeout: float = 1.0) -> None:
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)


class ThreadScheduler:
    """Runs each tick on its own daemon thread."""

    def start(self, callback: Callable[[], None], interval_ms: float) -> TickHandle:
        tick = _ThreadTick(callback, interval_ms)
        tick._thread.start()
        return tick


class _ManualTick(TickHandle):

    def __init__(self, callback: Callable[[], None], interval_ms: float, due_ms: float):
        super().__init__(callback, interval_ms)
        self.due_ms = due_ms


class ManualScheduler:
    """
    Deterministic scheduler over simulated milliseconds.

    `advance(ms)` moves time forward, firing every live tick each time its
    due time is reached, in due order. `now()` is the matching time source.
    """

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)
        self._ticks: List[_ManualTick] = []

    def now(self) -> float:
        return self.now_ms

    def start(self, callback: Callable[[], None], interval_ms: float) -> TickHandle:
        tick = _ManualTick(callback, interval_ms, due_ms=self.now_ms + interval_ms)
        self._ticks.append(tick)
        return tick

    def advance(self, ms: float) -> None:
        target = self.now_ms + ms
        while True:
            self._ticks = [t for t in self._ticks if not t.cancelled]
            if not self._ticks:
                break
            nxt = min(self._ticks, key=lambda t: t.due_ms)
            if nxt.due_ms > target:
                break
            self.now_ms = nxt.due_ms
            nxt.due_ms += nxt.interval_ms
            nxt.callback()
        self.now_ms = target

    @property
    def active_ticks(self) -> int:
        return sum(1 for t in self._ticks if not t.cancelled)
