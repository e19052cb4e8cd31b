"""
Core data models for Tennis Drill Planner.
Split across sub-modules; this __init__ re-exports everything.
"""
from .elements import (
    Player, Shot, Movement, Element, Action, Position,
    element_from_dict, elements_from_dicts, elements_to_dicts, rekey_fractional_ids,
    sort_actions, sequence_key, mirror_x,
)
from .timeline import EventKind, TimelineEvent, Timeline
from .frame    import FrameState, PlayerFrame, TrailSegment
from .records  import Drill, Routine

__all__ = [
    "Player", "Shot", "Movement", "Element", "Action", "Position",
    "element_from_dict", "elements_from_dicts", "elements_to_dicts", "rekey_fractional_ids",
    "sort_actions", "sequence_key", "mirror_x",
    "EventKind", "TimelineEvent", "Timeline",
    "FrameState", "PlayerFrame", "TrailSegment",
    "Drill", "Routine",
]
