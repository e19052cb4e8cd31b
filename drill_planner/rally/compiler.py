"""
Rally compiler.

Turns an annotation set into a chronological timeline. Actions are
walked in sequence order against one running clock:

  shot      ball travels from the striker's walked position to its
            target at BALL_SPEED, then the rally pauses SHOT_DELAY_MS
  movement  player travels from their walked position to the target
            at PLAYER_SPEED; no pause

Every action starts where its player was left by the previous action,
so playback never teleports a player even when earlier movements were
edited after later elements were drawn.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List

import numpy as np

from ..models.elements import Element, Player, Position, Shot, sort_actions
from ..models.timeline import EventKind, Timeline, TimelineEvent
from .. import config

logger = logging.getLogger(__name__)


def travel_time_ms(origin: Position, target: Position, speed_px_s: float) -> float:
    """Milliseconds needed to cover origin→target at constant speed."""
    distance = float(np.hypot(target[0] - origin[0], target[1] - origin[1]))
    return distance / speed_px_s * 1000.0


class RallyCompiler:
    """Builds a Timeline from court elements using constant speed models."""

    def __init__(
        self,
        ball_speed_px_s:   float = config.BALL_SPEED_PX_S,
        player_speed_px_s: float = config.PLAYER_SPEED_PX_S,
        shot_delay_ms:     float = config.SHOT_DELAY_MS,
    ):
        if ball_speed_px_s <= 0 or player_speed_px_s <= 0:
            raise ValueError("Speeds must be positive")
        self.ball_speed_px_s   = ball_speed_px_s
        self.player_speed_px_s = player_speed_px_s
        self.shot_delay_ms     = shot_delay_ms

    def compile(self, elements: Iterable[Element]) -> Timeline:
        elements = list(elements)
        actions  = sort_actions(elements)
        logger.debug("Processing events in sequence: %s",
                     [f"{a.kind} {a.sequence}" for a in actions])

        # Walk from the base marks, not from the resolver's final state
        walked: Dict[int, Position] = {
            e.id: e.position for e in elements if isinstance(e, Player)
        }

        events: List[TimelineEvent] = []
        current_ms = 0.0

        for action in actions:
            origin = walked.get(action.player_id, action.start)

            if isinstance(action, Shot):
                duration = travel_time_ms(origin, action.end, self.ball_speed_px_s)
                events.append(TimelineEvent(
                    kind=EventKind.SHOT,
                    start_time_ms=current_ms,
                    duration_ms=duration,
                    element=action,
                    origin=origin,
                ))
                logger.debug("Shot %s: player %s hits at %.0fms",
                             action.sequence, action.player_id, current_ms)
                current_ms += duration + self.shot_delay_ms
            else:
                duration = travel_time_ms(origin, action.end, self.player_speed_px_s)
                events.append(TimelineEvent(
                    kind=EventKind.MOVEMENT,
                    start_time_ms=current_ms,
                    duration_ms=duration,
                    element=action,
                    origin=origin,
                ))
                logger.debug("Movement %s: player %s moves at %.0fms",
                             action.sequence, action.player_id, current_ms)
                walked[action.player_id] = action.end
                current_ms += duration

        timeline = Timeline(events=tuple(events))
        logger.debug("Compiled %d events, %.0fms total",
                     len(timeline), timeline.total_duration_ms)
        return timeline


def compile_rally(elements: Iterable[Element]) -> Timeline:
    """Compile with the default speed model."""
    return RallyCompiler().compile(elements)
