"""
Practice session: run a routine's drills in order with a countdown per
drill and the drill's rally looping in its own animation preview.
"""
from __future__ import annotations
import logging
import math
import time
from typing import Callable, Iterable, List, Optional

from .errors import PreconditionError
from .models.elements import elements_from_dicts
from .models.frame import FrameState
from .models.records import Drill, Routine
from .playback.preview import AnimationPreview

logger = logging.getLogger(__name__)


def format_time(seconds: float) -> str:
    """Whole seconds as MM:SS."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


class DrillCountdown:
    """
    Wall-clock countdown for one drill.

    Pausing freezes the remaining time; resuming continues from it.
    """

    def __init__(self, duration_minutes: float, clock: Callable[[], float] = time.monotonic):
        self.duration_s = float(duration_minutes) * 60.0
        self._clock = clock
        self._started_at: Optional[float] = None
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0

    @property
    def started(self) -> bool:
        return self._started_at is not None

    @property
    def paused(self) -> bool:
        return self._paused_at is not None

    @property
    def running(self) -> bool:
        return self.started and not self.paused

    def start(self) -> None:
        if not self.started:
            self._started_at = self._clock()

    def pause(self) -> None:
        if self.running:
            self._paused_at = self._clock()

    def resume(self) -> None:
        if self.paused:
            self._paused_total += self._clock() - self._paused_at
            self._paused_at = None

    def toggle(self) -> bool:
        """Start, pause or resume. Returns True when now running."""
        if not self.started:
            self.start()
        elif self.paused:
            self.resume()
        else:
            self.pause()
        return self.running

    def stop(self) -> None:
        self._started_at = None
        self._paused_at = None
        self._paused_total = 0.0

    @property
    def elapsed_s(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._paused_at if self._paused_at is not None else self._clock()
        return end - self._started_at - self._paused_total

    @property
    def remaining_s(self) -> float:
        return max(0.0, self.duration_s - self.elapsed_s)

    @property
    def is_complete(self) -> bool:
        return self.started and self.remaining_s <= 0

    def display(self) -> str:
        return format_time(math.ceil(self.remaining_s))


class PracticeSession:
    """Steps through the drills of one routine."""

    def __init__(
        self,
        on_frame: Optional[Callable[[FrameState], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        scheduler=None,
        now_ms: Optional[Callable[[], float]] = None,
    ):
        self._clock = clock
        self.preview = AnimationPreview(on_frame or (lambda _frame: None),
                                        scheduler=scheduler, now_ms=now_ms)
        self.routine: Optional[Routine] = None
        self.drills: List[Drill] = []
        self.index = 0
        self.countdown: Optional[DrillCountdown] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self, routine: Optional[Routine], drills: Iterable[Drill]) -> Drill:
        if routine is None:
            raise PreconditionError("Please select a routine first.")

        by_id = {d.id: d for d in drills}
        resolved = [by_id[i] for i in routine.drill_ids if i in by_id]
        if not resolved:
            raise PreconditionError("This routine has no valid drills.")

        self.routine = routine
        self.drills = resolved
        self.index = 0
        logger.info("Session '%s' started with %d drills", routine.name, len(resolved))
        return self._load_current()

    def stop(self) -> None:
        self.preview.close()
        if self.countdown is not None:
            self.countdown.stop()
        self.routine = None
        self.drills = []
        self.index = 0
        self.countdown = None

    @property
    def active(self) -> bool:
        return self.routine is not None

    @property
    def current(self) -> Optional[Drill]:
        return self.drills[self.index] if self.active else None

    @property
    def is_last(self) -> bool:
        return self.active and self.index == len(self.drills) - 1

    # ── Navigation ────────────────────────────────────────────────────────────

    def next_drill(self) -> bool:
        if not self.active or self.is_last:
            return False
        self.index += 1
        self._load_current()
        return True

    def previous_drill(self) -> bool:
        if not self.active or self.index == 0:
            return False
        self.index -= 1
        self._load_current()
        return True

    def toggle(self) -> bool:
        """Start/pause/resume the countdown and the rally loop together."""
        if self.countdown is None:
            raise PreconditionError("No drill is running.")
        running = self.countdown.toggle()
        if running:
            self.preview.play()
        else:
            self.preview.pause()
        return running

    def update(self) -> bool:
        """
        Advance past a finished drill. Returns True once the last drill's
        countdown has run out and the session has ended.
        """
        if self.countdown is None or not self.countdown.is_complete:
            return False
        if self.next_drill():
            return False
        logger.info("Session '%s' complete", self.routine.name)
        self.stop()
        return True

    def _load_current(self) -> Drill:
        drill = self.drills[self.index]
        if self.countdown is not None:
            self.countdown.stop()
        self.countdown = DrillCountdown(drill.duration_minutes, clock=self._clock)
        self.preview.open(elements_from_dicts(drill.court_elements))
        logger.debug("Drill %d/%d: %s", self.index + 1, len(self.drills), drill.name)
        return drill
