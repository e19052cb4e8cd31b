"""
Per-instant frame state produced by the frame renderer.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .elements import Position
from .timeline import EventKind


@dataclass(frozen=True)
class TrailSegment:
    """A shot or movement path drawn behind the animation."""
    kind: EventKind
    start: Position
    end: Position
    opacity: float
    in_flight: bool
    label: str = ""

    @property
    def dashed(self) -> bool:
        return self.kind is EventKind.MOVEMENT


@dataclass(frozen=True)
class PlayerFrame:
    player_id: int
    number: int            # 1-based, ascending id order
    position: Position
    moving: bool = False

    @property
    def label(self) -> str:
        return f"P{self.number}"


@dataclass
class FrameState:
    """Everything needed to draw one animation frame."""
    elapsed_ms: float
    ball: Optional[Position] = None
    players: List[PlayerFrame] = field(default_factory=list)
    trails: List[TrailSegment] = field(default_factory=list)

    @property
    def ball_visible(self) -> bool:
        return self.ball is not None

    def player_positions(self) -> Dict[int, Position]:
        return {p.player_id: p.position for p in self.players}

    def to_dict(self) -> dict:
        return {
            "elapsed_ms": round(self.elapsed_ms, 1),
            "ball": [round(self.ball[0], 1), round(self.ball[1], 1)] if self.ball else None,
            "players": {
                p.label: [round(p.position[0], 1), round(p.position[1], 1)]
                for p in self.players
            },
            "trails": len(self.trails),
        }
