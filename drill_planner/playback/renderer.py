"""
Frame renderer: what every actor looks like at one elapsed time.

  ball     in flight along the first active shot, else resting where the
           last completed shot landed, else hidden
  players  last reached position, or interpolated along an in-flight
           movement
  trails   every started shot/movement; bright while in flight, faint
           once complete
"""
from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.elements import Element, Player, Position
from ..models.frame import FrameState, PlayerFrame, TrailSegment
from ..models.timeline import EventKind, Timeline
from ..rally.positions import player_numbers
from .. import config


class FrameRenderer:
    """Stateless; safe to share between playback surfaces."""

    def __init__(
        self,
        shot_active_alpha:     float = config.SHOT_TRAIL_ACTIVE_ALPHA,
        shot_done_alpha:       float = config.SHOT_TRAIL_DONE_ALPHA,
        movement_active_alpha: float = config.MOVEMENT_TRAIL_ACTIVE_ALPHA,
        movement_done_alpha:   float = config.MOVEMENT_TRAIL_DONE_ALPHA,
    ):
        self.shot_active_alpha     = shot_active_alpha
        self.shot_done_alpha       = shot_done_alpha
        self.movement_active_alpha = movement_active_alpha
        self.movement_done_alpha   = movement_done_alpha

    def render_frame(
        self,
        elapsed_ms: float,
        timeline: Timeline,
        elements: Iterable[Element],
    ) -> FrameState:
        elements = list(elements)
        players  = [e for e in elements if isinstance(e, Player)]
        numbers  = player_numbers(elements)

        positions = self.player_positions(elapsed_ms, timeline, players)
        return FrameState(
            elapsed_ms=elapsed_ms,
            ball=self.ball_position(elapsed_ms, timeline),
            players=[
                PlayerFrame(
                    player_id=p.id,
                    number=numbers[p.id],
                    position=positions[p.id][0],
                    moving=positions[p.id][1],
                )
                for p in players
            ],
            trails=self.trails(elapsed_ms, timeline, numbers),
        )

    # ── Ball ──────────────────────────────────────────────────────────────────

    @staticmethod
    def ball_position(elapsed_ms: float, timeline: Timeline) -> Optional[Position]:
        shots = timeline.shots

        for event in shots:
            if event.is_active(elapsed_ms):
                return event.position_at(elapsed_ms)   # only one ball at a time

        landed = None
        for event in shots:
            if event.is_complete(elapsed_ms):
                landed = event
        return landed.target if landed is not None else None

    # ── Players ───────────────────────────────────────────────────────────────

    @staticmethod
    def player_positions(
        elapsed_ms: float,
        timeline: Timeline,
        players: Iterable[Player],
    ) -> Dict[int, Tuple[Position, bool]]:
        """{player_id: (position, moving)} at `elapsed_ms`."""
        known: Dict[int, List[Tuple[float, Position]]] = defaultdict(list)
        for event in timeline.movements:
            known[event.player_id].append((event.end_time_ms, event.target))

        result: Dict[int, Tuple[Position, bool]] = {}
        for player in players:
            marks = [(0.0, player.position)] + sorted(known[player.id], key=lambda m: m[0])
            position = player.position
            for time_ms, pos in reversed(marks):
                if time_ms <= elapsed_ms:
                    position = pos
                    break

            moving = False
            for event in timeline.movements:
                if event.player_id == player.id and event.is_active(elapsed_ms):
                    position = event.position_at(elapsed_ms)
                    moving = True
            result[player.id] = (position, moving)
        return result

    # ── Trails ────────────────────────────────────────────────────────────────

    def trails(
        self,
        elapsed_ms: float,
        timeline: Timeline,
        numbers: Dict[int, int],
    ) -> List[TrailSegment]:
        segments: List[TrailSegment] = []

        for event in timeline.shots:
            if elapsed_ms < event.start_time_ms:
                continue
            active = event.is_active(elapsed_ms)
            label = ""
            shot_type = getattr(event.element, "shot_type", "")
            if shot_type:
                label = f"P{numbers.get(event.player_id, 0)}: {shot_type}"
            segments.append(TrailSegment(
                kind=EventKind.SHOT,
                start=event.origin,
                end=event.target,
                opacity=self.shot_active_alpha if active else self.shot_done_alpha,
                in_flight=active,
                label=label,
            ))

        for event in timeline.movements:
            if elapsed_ms < event.start_time_ms:
                continue
            active = event.is_active(elapsed_ms)
            segments.append(TrailSegment(
                kind=EventKind.MOVEMENT,
                start=event.origin,
                end=event.target,
                opacity=self.movement_active_alpha if active else self.movement_done_alpha,
                in_flight=active,
            ))

        return segments


_default_renderer = FrameRenderer()


def render_frame(elapsed_ms: float, timeline: Timeline, elements: Iterable[Element]) -> FrameState:
    return _default_renderer.render_frame(elapsed_ms, timeline, elements)
