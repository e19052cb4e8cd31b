"""
Position resolver.

Replays player start marks followed by every movement in rally order to
find where each player currently stands. Shots never relocate a player.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable

from ..models.elements import Element, Movement, Player, Position, sort_actions

logger = logging.getLogger(__name__)


def resolve_positions(elements: Iterable[Element]) -> Dict[int, Position]:
    """
    Return {player_id: (x, y)} after all movements have been applied.

    Movements that reference an unknown player are skipped.
    """
    elements = list(elements)
    positions: Dict[int, Position] = {
        e.id: e.position for e in elements if isinstance(e, Player)
    }

    for action in sort_actions(elements):
        if not isinstance(action, Movement):
            continue
        if action.player_id not in positions:
            logger.debug("Movement %s references unknown player %s, skipped",
                         action.id, action.player_id)
            continue
        positions[action.player_id] = action.end

    return positions


def player_numbers(elements: Iterable[Element]) -> Dict[int, int]:
    """Map player id → 1-based display number (ascending id order)."""
    ids = sorted(e.id for e in elements if isinstance(e, Player))
    return {pid: i + 1 for i, pid in enumerate(ids)}
