"""
Compiled rally timeline models.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from .elements import Action, Position, Shot
from .. import config


class EventKind(Enum):
    SHOT     = "shot"
    MOVEMENT = "movement"


@dataclass(frozen=True)
class TimelineEvent:
    """
    One timed action of the rally.

    `origin` is where the motion starts at playback time: the striking
    player's walked position for a shot (the ball's launch point), the
    moving player's walked position for a movement.
    """
    kind: EventKind
    start_time_ms: float
    duration_ms: float
    element: Action
    origin: Position

    @property
    def end_time_ms(self) -> float:
        return self.start_time_ms + self.duration_ms

    @property
    def target(self) -> Position:
        return self.element.end

    @property
    def player_id(self) -> int:
        return self.element.player_id

    def is_active(self, elapsed_ms: float) -> bool:
        """True while the motion is in flight: start <= elapsed < end."""
        return self.start_time_ms <= elapsed_ms < self.end_time_ms

    def is_complete(self, elapsed_ms: float) -> bool:
        return self.end_time_ms <= elapsed_ms

    def progress(self, elapsed_ms: float) -> float:
        """Fraction of the motion done at `elapsed_ms`, clamped to [0, 1]."""
        if self.duration_ms <= 0:
            return 1.0 if elapsed_ms >= self.start_time_ms else 0.0
        p = (elapsed_ms - self.start_time_ms) / self.duration_ms
        return min(1.0, max(0.0, p))

    def position_at(self, elapsed_ms: float) -> Position:
        """Linear interpolation between origin and target."""
        p = self.progress(elapsed_ms)
        ox, oy = self.origin
        tx, ty = self.target
        return (ox + (tx - ox) * p, oy + (ty - oy) * p)

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "start_ms": round(self.start_time_ms, 1),
            "duration_ms": round(self.duration_ms, 1),
            "origin": [round(self.origin[0], 1), round(self.origin[1], 1)],
            "target": [round(self.target[0], 1), round(self.target[1], 1)],
            "element": self.element.to_dict(),
        }


@dataclass(frozen=True)
class Timeline:
    """Rally events in emission (sequence) order."""
    events: Tuple[TimelineEvent, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> TimelineEvent:
        return self.events[index]

    @property
    def total_duration_ms(self) -> float:
        if not self.events:
            return config.DEFAULT_DURATION_MS
        return max(e.end_time_ms for e in self.events)

    @property
    def shots(self) -> Tuple[TimelineEvent, ...]:
        return tuple(e for e in self.events if e.kind is EventKind.SHOT)

    @property
    def movements(self) -> Tuple[TimelineEvent, ...]:
        return tuple(e for e in self.events if e.kind is EventKind.MOVEMENT)

    def event_for(self, element_id: int) -> Optional[TimelineEvent]:
        for e in self.events:
            if e.element.id == element_id:
                return e
        return None

    def to_dict(self) -> dict:
        return {
            "total_duration_ms": round(self.total_duration_ms, 1),
            "events": [e.to_dict() for e in self.events],
        }


def event_kind_for(element: Action) -> EventKind:
    return EventKind.SHOT if isinstance(element, Shot) else EventKind.MOVEMENT
