"""
Undo/redo history over an AnnotationStore.

Every entry is an immutable snapshot: the element tuple (frozen
elements, shared between entries) and a read-only copy of the position
map. Snapshots are taken BEFORE the mutation they guard.
"""
from __future__ import annotations
import logging
import time
from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Deque, List, Mapping, Tuple, TypeVar

from ..models.elements import Element, Position
from .store import AnnotationStore
from .. import config

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryEntry:
    elements:  Tuple[Element, ...]
    positions: Mapping[int, Position]
    label:     str
    timestamp: float


class EditHistory:
    """Two bounded stacks of store snapshots."""

    def __init__(
        self,
        store: AnnotationStore,
        max_size: int = config.MAX_UNDO_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        self.store    = store
        self.max_size = max_size
        self._clock   = clock
        self._undo: Deque[HistoryEntry] = deque(maxlen=max_size)
        self._redo: Deque[HistoryEntry] = deque(maxlen=max_size)

    # ── Snapshots ──────────────────────────────────────────────────────────────

    def _capture(self, label: str) -> HistoryEntry:
        elements, positions = self.store.snapshot()
        return HistoryEntry(
            elements=elements,
            positions=MappingProxyType(positions),
            label=label,
            timestamp=self._clock(),
        )

    def _restore(self, entry: HistoryEntry) -> None:
        self.store.restore(entry.elements, entry.positions)

    # ── Public API ─────────────────────────────────────────────────────────────

    def save_state(self, label: str = "edit") -> HistoryEntry:
        """Snapshot the current state before a mutation. Clears redo."""
        entry = self._capture(label)
        self._undo.append(entry)       # deque drops the oldest past max_size
        self._redo.clear()
        logger.debug("Saved state '%s' (undo=%d)", label, len(self._undo))
        return entry

    def apply(self, label: str, mutation: Callable[[], T]) -> T:
        """
        Snapshot then mutate, as one step. If the mutation raises, the
        store, undo stack and redo stack are put back as they were.
        """
        undo_before = list(self._undo)
        redo_before = list(self._redo)
        entry = self.save_state(label)
        try:
            return mutation()
        except Exception:
            self._restore(entry)
            self._undo = deque(undo_before, maxlen=self.max_size)
            self._redo = deque(redo_before, maxlen=self.max_size)
            raise

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._capture("current"))
        entry = self._undo.pop()
        self._restore(entry)
        logger.debug("Undo '%s'", entry.label)
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._capture("undo"))
        entry = self._redo.pop()
        self._restore(entry)
        logger.debug("Redo (undo=%d, redo=%d)", len(self._undo), len(self._redo))
        return True

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    clear_history = clear

    # ── Introspection ──────────────────────────────────────────────────────────

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def undo_entries(self) -> List[HistoryEntry]:
        """Oldest first."""
        return list(self._undo)
