"""
Playback clock.

Drives elapsed time for one timeline: play, pause, seek, reset and
loop-on-completion. Every elapsed value the clock settles on is pushed to
`on_frame`, so a timeline slider bound to the callback stays in sync with
both ticks and manual seeks.

Each clock owns its tick handle, elapsed time and lock; any number of
clocks can run side by side.
"""
from __future__ import annotations
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from ..errors import PlaybackError
from .scheduler import ThreadScheduler, TickHandle, monotonic_ms
from .. import config

logger = logging.getLogger(__name__)


class ClockState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED  = "paused"
    SEEKING = "seeking"


def format_progress(elapsed_ms: float, total_ms: float) -> str:
    """Label shown beside the timeline slider, e.g. '1.2s / 3.0s'."""
    return f"{elapsed_ms / 1000:.1f}s / {total_ms / 1000:.1f}s"


class PlaybackClock:
    """Elapsed-time driver with a cancellable fixed-cadence tick."""

    def __init__(
        self,
        total_duration_ms: float,
        on_frame:          Callable[[float], None],
        scheduler=None,
        now_ms:            Optional[Callable[[], float]] = None,
        on_static:         Optional[Callable[[], None]] = None,
        tick_interval_ms:  float = config.TICK_INTERVAL_MS,
    ):
        self._total      = max(0.0, float(total_duration_ms))
        self._on_frame   = on_frame
        self._on_static  = on_static
        self._scheduler  = scheduler or ThreadScheduler()
        self._now        = now_ms or monotonic_ms
        self._interval   = tick_interval_ms

        self._lock       = threading.RLock()
        self._state      = ClockState.STOPPED
        self._elapsed    = 0.0
        self._origin     = 0.0
        self._handle: Optional[TickHandle] = None
        self._token: Optional[object] = None
        self._closed     = False

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is ClockState.PLAYING

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed

    @property
    def total_duration_ms(self) -> float:
        return self._total

    @property
    def closed(self) -> bool:
        return self._closed

    def progress_label(self) -> str:
        return format_progress(self._elapsed, self._total)

    # ── Control ───────────────────────────────────────────────────────────────

    def play(self) -> None:
        with self._lock:
            self._check_open()
            if self._state is ClockState.PLAYING:
                return
            self._origin = self._now() - self._elapsed
            self._state  = ClockState.PLAYING
            token = object()
            self._token  = token
            self._handle = self._scheduler.start(lambda: self._tick(token), self._interval)
            logger.debug("Play from %.0fms", self._elapsed)

    def pause(self) -> None:
        with self._lock:
            self._cancel_tick()
            if self._state is ClockState.PLAYING:
                self._state = ClockState.PAUSED

    def seek(self, to_ms: float) -> float:
        """Jump to `to_ms` (clamped), render it, and keep playing from there."""
        with self._lock:
            self._check_open()
            target = min(max(0.0, float(to_ms)), self._total)
            resume = self._state
            self._state = ClockState.SEEKING
            self._elapsed = target
            if resume is ClockState.PLAYING:
                self._origin = self._now() - target
            self._on_frame(target)
            self._state = resume
            return target

    def reset(self) -> None:
        with self._lock:
            self._check_open()
            self.pause()
            self.seek(0.0)
            self._state = ClockState.STOPPED
            if self._on_static is not None:
                self._on_static()

    def close(self) -> None:
        """Cancel ticking for good; the hosting view is going away."""
        with self._lock:
            self._cancel_tick()
            self._state  = ClockState.STOPPED
            self._closed = True

    def __enter__(self) -> "PlaybackClock":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._closed:
            raise PlaybackError("Playback clock has been closed")

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._token  = None

    def _tick(self, token: object) -> None:
        with self._lock:
            # A tick that lost the race against pause/reset/close is stale
            if token is not self._token or self._state is not ClockState.PLAYING:
                return
            now = self._now()
            elapsed = now - self._origin
            if elapsed >= self._total:
                self._origin = now
                elapsed = 0.0
            self._elapsed = elapsed
            try:
                self._on_frame(elapsed)
            except Exception:
                logger.exception("Frame callback failed at %.0fms, pausing", elapsed)
                self._cancel_tick()
                self._state = ClockState.PAUSED
