"""
Editor session: the explicit context behind an editing surface.

Holds the annotation store, its undo/redo history, the active tool and
the current selection. Surfaces (the OpenCV editor window, tests) feed it
clicks and commands; every mutation snapshots history first.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from enum import Enum
from typing import Dict, Optional

from ..errors import PreconditionError
from ..models.elements import (
    Element, Movement, Player, Shot, elements_from_dicts, elements_to_dicts,
)
from ..models.records import Drill
from ..models.timeline import Timeline
from ..rally.compiler import RallyCompiler
from ..storage.repository import DrillRepository
from .history import EditHistory
from .ids import IdGenerator
from .store import AnnotationStore
from .. import config

logger = logging.getLogger(__name__)


class Tool(Enum):
    NONE     = "none"
    PLAYER   = "player"
    SHOT     = "shot"
    MOVEMENT = "movement"


class EditorSession:
    """One drill being created or edited."""

    def __init__(
        self,
        ids: Optional[IdGenerator] = None,
        compiler: Optional[RallyCompiler] = None,
        max_undo: int = config.MAX_UNDO_SIZE,
    ):
        self.store    = AnnotationStore(ids=ids)
        self.history  = EditHistory(self.store, max_size=max_undo)
        self.compiler = compiler or RallyCompiler()

        self.tool: Tool = Tool.NONE
        self.shot_type: str = config.DEFAULT_SHOT_TYPE
        self.selected_player_id: Optional[int] = None

        # Drill currently being edited (None = creating a new one)
        self.editing_drill_id: Optional[int] = None
        self.name: str = ""
        self.description: str = ""
        self.duration_minutes: float = 10.0

    # ── Tool & selection ──────────────────────────────────────────────────────

    def set_tool(self, tool: Tool) -> None:
        self.tool = tool
        self.selected_player_id = None

    def set_shot_type(self, shot_type: str) -> None:
        if shot_type not in config.SHOT_TYPES:
            raise ValueError(f"Unknown shot type {shot_type!r}; "
                             f"expected one of {', '.join(config.SHOT_TYPES)}")
        self.shot_type = shot_type

    def cycle_shot_type(self) -> str:
        types = config.SHOT_TYPES
        i = types.index(self.shot_type) if self.shot_type in types else -1
        self.shot_type = types[(i + 1) % len(types)]
        return self.shot_type

    # ── Click dispatch ────────────────────────────────────────────────────────

    def click(self, x: float, y: float) -> Optional[Element]:
        """
        Handle a click on the court canvas.

        Returns the element added, or None when the click only selected a
        player (or did nothing).
        """
        if self.tool is Tool.NONE:
            return None

        if self.tool is Tool.PLAYER:
            return self.add_player(x, y)

        if self.selected_player_id is None:
            player = self.store.player_at(x, y)
            if player is None:
                noun = "a shot" if self.tool is Tool.SHOT else "movement"
                raise PreconditionError(f"Please click on a player first to add {noun}.")
            self.selected_player_id = player.id
            return None

        player_id = self.selected_player_id
        if self.tool is Tool.SHOT:
            element = self.add_shot(player_id, (x, y), self.shot_type)
        else:
            element = self.add_movement(player_id, (x, y))
        self.selected_player_id = None
        return element

    # ── Mutations (history snapshot first) ────────────────────────────────────

    def add_player(self, x: float, y: float) -> Player:
        player = self.store.new_player(x, y)
        return self.history.apply("add_player", lambda: self.store.add(player))

    def add_shot(self, player_id: int, end, shot_type: Optional[str] = None) -> Shot:
        self._require_player(player_id, "a shot")
        shot = self.store.new_shot(player_id, end, shot_type or self.shot_type)
        return self.history.apply("add_shot", lambda: self.store.add(shot))

    def add_movement(self, player_id: int, end) -> Movement:
        self._require_player(player_id, "movement")
        movement = self.store.new_movement(player_id, end)
        return self.history.apply("add_movement", lambda: self.store.add(movement))

    def _require_player(self, player_id: Optional[int], noun: str) -> None:
        if player_id is None or self.store.find_player(player_id) is None:
            raise PreconditionError(f"Please click on a player first to add {noun}.")

    def clear(self) -> None:
        if not self.store.is_empty:
            self.history.save_state("clear_court")
        self.store.clear()
        self.tool = Tool.NONE
        self.selected_player_id = None

    def flip_horizontal(self) -> None:
        if self.store.is_empty:
            raise PreconditionError("No elements to flip!")
        self.history.apply("flip_horizontal", self.store.flip_horizontal)

    def undo(self) -> bool:
        self.selected_player_id = None
        return self.history.undo()

    def redo(self) -> bool:
        self.selected_player_id = None
        return self.history.redo()

    # ── Drill lifecycle ───────────────────────────────────────────────────────

    def _reset(self) -> None:
        self.store.clear()
        self.history.clear()
        self.tool = Tool.NONE
        self.selected_player_id = None

    def new_drill(self) -> None:
        self._reset()
        self.editing_drill_id = None
        self.name = ""
        self.description = ""
        self.duration_minutes = 10.0

    def load_drill(self, drill: Drill) -> None:
        """Open an existing drill for editing."""
        elements = elements_from_dicts(drill.court_elements)
        self._reset()
        self.store.replace(elements)
        self.editing_drill_id = drill.id
        self.name = drill.name
        self.description = drill.description
        self.duration_minutes = drill.duration_minutes
        logger.info("Editing drill %s '%s' (%d elements)",
                    drill.id, drill.name, len(elements))

    def replicate_drill(self, drill: Drill) -> None:
        """Start a new drill from a copy of `drill` with fresh ids."""
        elements = elements_from_dicts(drill.court_elements)
        self._reset()
        self.store.ids.observe(e.id for e in elements)

        id_map: Dict[int, int] = {e.id: self.store.ids.next_id() for e in elements}
        player_ids = {e.id for e in elements if isinstance(e, Player)}
        copies = []
        for e in elements:
            changes = {"id": id_map[e.id]}
            if isinstance(e, (Shot, Movement)) and e.player_id in player_ids:
                changes["player_id"] = id_map[e.player_id]
            copies.append(replace(e, **changes))

        self.store.replace(copies)
        self.editing_drill_id = None
        self.name = f"{drill.name} (Copy)"
        self.description = drill.description
        self.duration_minutes = drill.duration_minutes

    def to_drill(self) -> Drill:
        return Drill(
            id=self.editing_drill_id,
            name=self.name,
            description=self.description,
            duration_minutes=self.duration_minutes,
            court_elements=elements_to_dicts(self.store.elements),
        )

    def save(
        self,
        repository: DrillRepository,
        name: Optional[str] = None,
        description: Optional[str] = None,
        duration_minutes: Optional[float] = None,
    ) -> Drill:
        """
        Create or update the drill. A PersistenceError propagates with the
        store and history untouched so the user can retry.
        """
        name = (self.name if name is None else name).strip()
        duration = self.duration_minutes if duration_minutes is None else duration_minutes
        if not name:
            raise PreconditionError("Please give the drill a name.")
        if duration <= 0:
            raise PreconditionError("Drill duration must be positive.")

        drill = self.to_drill()
        drill.name = name
        drill.duration_minutes = float(duration)
        if description is not None:
            drill.description = description

        if drill.id is None:
            saved = repository.create_drill(drill)
        else:
            saved = repository.update_drill(drill)

        self.editing_drill_id = saved.id
        self.name = saved.name
        self.description = saved.description
        self.duration_minutes = saved.duration_minutes
        return saved

    # ── Derived ───────────────────────────────────────────────────────────────

    def compile(self) -> Timeline:
        return self.compiler.compile(self.store.elements)

    def player_number(self, player_id: int) -> int:
        return self.store.player_number(player_id)
