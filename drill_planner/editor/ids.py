"""
Element id allocation.
"""
import threading
from typing import Iterable


class IdGenerator:
    """
    Monotonic integer ids, unique within one generator.

    Loading elements that already carry ids must go through `observe` so
    newly allocated ids never collide with them.
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def observe(self, used_ids: Iterable[int]) -> None:
        """Advance past every id in `used_ids`."""
        with self._lock:
            for used in used_ids:
                if used >= self._next:
                    self._next = used + 1

    @property
    def peek(self) -> int:
        return self._next
