"""
Annotation store: the editable element set of one drill plus the derived
"where is each player now" map used when drawing the next shot or movement.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from ..models.elements import (
    Element, Movement, Player, Position, Shot, mirror_x,
)
from ..rally.positions import player_numbers, resolve_positions
from .ids import IdGenerator
from .. import config


class AnnotationStore:
    """Ordered court elements with positions kept in sync."""

    def __init__(
        self,
        elements: Iterable[Element] = (),
        ids: Optional[IdGenerator] = None,
    ):
        self.ids = ids or IdGenerator()
        self._elements: Tuple[Element, ...] = ()
        self._positions: Dict[int, Position] = {}
        self.replace(elements)

    # ── Read ───────────────────────────────────────────────────────────────────

    @property
    def elements(self) -> Tuple[Element, ...]:
        return self._elements

    @property
    def positions(self) -> Mapping[int, Position]:
        """Read-only view of each player's current position."""
        return MappingProxyType(self._positions)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    @property
    def is_empty(self) -> bool:
        return not self._elements

    def players(self) -> List[Player]:
        return [e for e in self._elements if isinstance(e, Player)]

    def shots(self) -> List[Shot]:
        return [e for e in self._elements if isinstance(e, Shot)]

    def movements(self) -> List[Movement]:
        return [e for e in self._elements if isinstance(e, Movement)]

    def find_player(self, player_id: int) -> Optional[Player]:
        for p in self.players():
            if p.id == player_id:
                return p
        return None

    def current_position(self, player_id: int) -> Optional[Position]:
        """Where the player stands now, falling back to their start mark."""
        if player_id in self._positions:
            return self._positions[player_id]
        player = self.find_player(player_id)
        return player.position if player else None

    def player_at(
        self, x: float, y: float, radius: float = config.PLAYER_HIT_RADIUS
    ) -> Optional[Player]:
        """First player whose current position lies within `radius` of (x, y)."""
        for p in self.players():
            px, py = self.current_position(p.id)
            if np.hypot(px - x, py - y) <= radius:
                return p
        return None

    def player_number(self, player_id: int) -> int:
        """1-based number in ascending id order, 0 if unknown."""
        return player_numbers(self._elements).get(player_id, 0)

    def next_sequence(self) -> int:
        sequences = [
            e.sequence for e in self._elements
            if isinstance(e, (Shot, Movement)) and e.sequence
        ]
        return max(sequences) + 1 if sequences else 1

    # ── Element factories (allocate ids, capture start positions) ─────────────

    def new_player(self, x: float, y: float) -> Player:
        return Player(id=self.ids.next_id(), x=float(x), y=float(y))

    def new_shot(self, player_id: int, end: Position, shot_type: str) -> Shot:
        sx, sy = self._start_for(player_id)
        return Shot(
            id=self.ids.next_id(), player_id=player_id, shot_type=shot_type,
            start_x=sx, start_y=sy, end_x=float(end[0]), end_y=float(end[1]),
            sequence=self.next_sequence(),
        )

    def new_movement(self, player_id: int, end: Position) -> Movement:
        sx, sy = self._start_for(player_id)
        return Movement(
            id=self.ids.next_id(), player_id=player_id,
            start_x=sx, start_y=sy, end_x=float(end[0]), end_y=float(end[1]),
            sequence=self.next_sequence(),
        )

    def _start_for(self, player_id: int) -> Position:
        pos = self.current_position(player_id)
        if pos is None:
            raise KeyError(f"Unknown player {player_id}")
        return pos

    # ── Write ──────────────────────────────────────────────────────────────────

    def add(self, element: Element) -> Element:
        self._elements = self._elements + (element,)
        self.ids.observe([element.id])
        if isinstance(element, Player):
            self._positions[element.id] = element.position
        elif isinstance(element, Movement):
            self._positions = resolve_positions(self._elements)
        return element

    def replace(self, elements: Iterable[Element]) -> None:
        """Swap in a whole new element set and re-derive positions."""
        self._elements = tuple(elements)
        self.ids.observe(e.id for e in self._elements)
        self._positions = resolve_positions(self._elements)

    def clear(self) -> None:
        self._elements = ()
        self._positions = {}

    def flip_horizontal(self, axis_x: Optional[float] = None) -> None:
        """Mirror all elements around the court's centre line."""
        if axis_x is None:
            court_width = config.CANVAS_WIDTH - 2 * config.COURT_MARGIN_PX
            axis_x = config.COURT_MARGIN_PX + court_width / 2
        self.replace(mirror_x(e, axis_x) for e in self._elements)

    # ── Snapshots ──────────────────────────────────────────────────────────────

    def snapshot(self) -> Tuple[Tuple[Element, ...], Dict[int, Position]]:
        """Elements are immutable and shared; positions are copied."""
        return self._elements, dict(self._positions)

    def restore(self, elements: Tuple[Element, ...], positions: Mapping[int, Position]) -> None:
        self._elements = tuple(elements)
        self._positions = dict(positions)
