"""
Court element models: players, shots and movements.

Elements are frozen dataclasses so that an annotation set can be shared
between the store, history snapshots and compiled timelines without copying.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..errors import InvalidElementError
from .. import config


Position = Tuple[float, float]


@dataclass(frozen=True)
class Player:
    """A player's starting mark on the court."""
    id: int
    x: float
    y: float

    kind = "player"

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {"type": self.kind, "id": self.id, "x": self.x, "y": self.y}


@dataclass(frozen=True)
class Shot:
    """One ball strike from a player towards (end_x, end_y)."""
    id: int
    player_id: int
    shot_type: str
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    sequence: Optional[int] = None

    kind = "shot"

    @property
    def start(self) -> Position:
        return (self.start_x, self.start_y)

    @property
    def end(self) -> Position:
        return (self.end_x, self.end_y)

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "id": self.id,
            "playerId": self.player_id,
            "shotType": self.shot_type,
            "startX": self.start_x,
            "startY": self.start_y,
            "endX": self.end_x,
            "endY": self.end_y,
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class Movement:
    """A player repositioning without the ball."""
    id: int
    player_id: int
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    sequence: Optional[int] = None

    kind = "movement"

    @property
    def start(self) -> Position:
        return (self.start_x, self.start_y)

    @property
    def end(self) -> Position:
        return (self.end_x, self.end_y)

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "id": self.id,
            "playerId": self.player_id,
            "startX": self.start_x,
            "startY": self.start_y,
            "endX": self.end_x,
            "endY": self.end_y,
            "sequence": self.sequence,
        }


Element = Union[Player, Shot, Movement]
Action = Union[Shot, Movement]


def sequence_key(element: Action) -> int:
    """Sort key for rally order; unsequenced (or zero) elements sort as 1."""
    return element.sequence or config.DEFAULT_SEQUENCE


def sort_actions(elements: Iterable[Element]) -> List[Action]:
    """Shots and movements in rally order, stable for equal sequence numbers."""
    actions = [e for e in elements if isinstance(e, (Shot, Movement))]
    return sorted(actions, key=sequence_key)


def mirror_x(element: Element, axis_x: float) -> Element:
    """Reflect an element's x coordinates around the vertical line x = axis_x."""
    if isinstance(element, Player):
        return replace(element, x=2 * axis_x - element.x)
    return replace(
        element,
        start_x=2 * axis_x - element.start_x,
        end_x=2 * axis_x - element.end_x,
    )


# ── Serialisation ─────────────────────────────────────────────────────────────

def _number(d: dict, key: str) -> float:
    try:
        return float(d[key])
    except KeyError:
        raise InvalidElementError(f"{d.get('type', 'element')} is missing '{key}'")
    except (TypeError, ValueError):
        raise InvalidElementError(f"'{key}' must be a number, got {d[key]!r}")


def _identifier(d: dict, key: str) -> Union[int, float]:
    """
    Read an element id or player reference.

    Integral values come back as int. Fractional ids (older drills copied
    with `Date.now() + Math.random()` style ids) are kept exact as float so
    that distinct elements stay distinct; `elements_from_dicts` re-keys them.
    """
    value = d.get(key)
    if value is None:
        raise InvalidElementError(f"{d.get('type') or 'element'} is missing '{key}'")
    if isinstance(value, bool):
        raise InvalidElementError(f"'{key}' must be a number, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidElementError(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(number):
        raise InvalidElementError(f"'{key}' must be finite, got {value!r}")
    return int(number) if number.is_integer() else number


def _sequence(d: dict) -> Optional[int]:
    value = d.get("sequence")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidElementError(f"'sequence' must be an integer, got {value!r}")


def element_from_dict(d: dict) -> Element:
    """Parse one stored court element (the drill's JSON wire format)."""
    if not isinstance(d, dict):
        raise InvalidElementError(f"Court element must be an object, got {type(d).__name__}")

    kind = d.get("type")
    eid = _identifier(d, "id")

    if kind == "player":
        return Player(id=eid, x=_number(d, "x"), y=_number(d, "y"))

    if kind in ("shot", "movement"):
        common = dict(
            id=eid,
            player_id=_identifier(d, "playerId"),
            start_x=_number(d, "startX"),
            start_y=_number(d, "startY"),
            end_x=_number(d, "endX"),
            end_y=_number(d, "endY"),
            sequence=_sequence(d),
        )
        if kind == "shot":
            return Shot(shot_type=str(d.get("shotType") or config.DEFAULT_SHOT_TYPE), **common)
        return Movement(**common)

    raise InvalidElementError(f"Unknown court element type: {kind!r}")


def rekey_fractional_ids(elements: List[Element]) -> List[Element]:
    """
    Give every fractional id a fresh integer above all existing ids.

    Player references are remapped with the same table, so shots and
    movements keep pointing at the same player.

    Args:
        elements: Parsed elements, possibly holding float ids

    Returns:
        The same elements with integer ids only (the input list itself
        when nothing needed re-keying)
    """
    ids = [e.id for e in elements]
    ids += [e.player_id for e in elements if not isinstance(e, Player)]
    fractional = [i for i in ids if not isinstance(i, int)]
    if not fractional:
        return elements

    next_id = math.floor(max(ids)) + 1
    mapping: Dict[float, int] = {}
    for i in fractional:
        if i not in mapping:
            mapping[i] = next_id
            next_id += 1

    rekeyed: List[Element] = []
    for e in elements:
        if isinstance(e, Player):
            rekeyed.append(replace(e, id=mapping.get(e.id, e.id)))
        else:
            rekeyed.append(replace(
                e,
                id=mapping.get(e.id, e.id),
                player_id=mapping.get(e.player_id, e.player_id),
            ))
    return rekeyed


def elements_from_dicts(items: Iterable[dict]) -> List[Element]:
    return rekey_fractional_ids([element_from_dict(d) for d in items])


def elements_to_dicts(elements: Iterable[Element]) -> List[dict]:
    return [e.to_dict() for e in elements]
