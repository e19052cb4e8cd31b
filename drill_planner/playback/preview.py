"""
Animation preview surface.

Binds one set of court elements to its compiled timeline, a playback
clock and the frame renderer. The timeline is recompiled every time the
preview is opened, so a preview always reflects the elements it was
opened with.
"""
from __future__ import annotations
import logging
from typing import Callable, Iterable, Optional, Tuple

from ..errors import PlaybackError
from ..models.elements import Element
from ..models.frame import FrameState
from ..models.timeline import Timeline
from ..rally.compiler import RallyCompiler
from .clock import ClockState, PlaybackClock
from .renderer import FrameRenderer
from .. import config

logger = logging.getLogger(__name__)


class AnimationPreview:
    """Play, pause, seek and reset an animated rally."""

    def __init__(
        self,
        on_frame:  Callable[[FrameState], None],
        scheduler=None,
        now_ms:    Optional[Callable[[], float]] = None,
        on_static: Optional[Callable[[], None]] = None,
        compiler:  Optional[RallyCompiler] = None,
        renderer:  Optional[FrameRenderer] = None,
        tick_interval_ms: float = config.TICK_INTERVAL_MS,
    ):
        self._on_frame  = on_frame
        self._scheduler = scheduler
        self._now       = now_ms
        self._on_static = on_static
        self._interval  = tick_interval_ms
        self.compiler   = compiler or RallyCompiler()
        self.renderer   = renderer or FrameRenderer()

        self.elements: Tuple[Element, ...] = ()
        self.timeline: Timeline = Timeline()
        self.clock: Optional[PlaybackClock] = None
        self.last_frame: Optional[FrameState] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def open(self, elements: Iterable[Element]) -> Timeline:
        """
        Compile elements and show the first frame, replacing any open clock.

        Args:
            elements: Court elements to animate

        Returns:
            The compiled timeline
        """
        self.close()
        self.elements = tuple(elements)
        self.timeline = self.compiler.compile(self.elements)
        self.clock = PlaybackClock(
            self.timeline.total_duration_ms,
            self._emit,
            scheduler=self._scheduler,
            now_ms=self._now,
            on_static=self._on_static,
            tick_interval_ms=self._interval,
        )
        logger.debug("Preview opened: %d events, %.0fms",
                     len(self.timeline), self.timeline.total_duration_ms)
        self._emit(0.0)
        return self.timeline

    def close(self) -> None:
        if self.clock is not None:
            self.clock.close()
        self.clock = None

    @property
    def is_open(self) -> bool:
        return self.clock is not None

    def __enter__(self) -> "AnimationPreview":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    # ── Controls ──────────────────────────────────────────────────────────────

    def play(self) -> None:
        self._require_clock().play()

    def pause(self) -> None:
        self._require_clock().pause()

    def toggle(self) -> bool:
        """Play if paused/stopped, pause if playing. Returns True when playing."""
        clock = self._require_clock()
        if clock.is_playing:
            clock.pause()
        else:
            clock.play()
        return clock.is_playing

    def seek(self, to_ms: float) -> float:
        return self._require_clock().seek(to_ms)

    def step(self, delta_ms: float = config.SEEK_STEP_MS) -> float:
        clock = self._require_clock()
        return clock.seek(clock.elapsed_ms + delta_ms)

    def reset(self) -> None:
        self._require_clock().reset()

    # ── Derived ───────────────────────────────────────────────────────────────

    @property
    def state(self) -> ClockState:
        return self.clock.state if self.clock is not None else ClockState.STOPPED

    @property
    def elapsed_ms(self) -> float:
        return self.clock.elapsed_ms if self.clock is not None else 0.0

    @property
    def total_duration_ms(self) -> float:
        return self.timeline.total_duration_ms

    def frame_at(self, elapsed_ms: float) -> FrameState:
        return self.renderer.render_frame(elapsed_ms, self.timeline, self.elements)

    def _emit(self, elapsed_ms: float) -> None:
        frame = self.frame_at(elapsed_ms)
        self.last_frame = frame
        self._on_frame(frame)

    def _require_clock(self) -> PlaybackClock:
        if self.clock is None:
            raise PlaybackError("Preview is not open")
        return self.clock
