"""
SQLite persistence for drills and routines.

Court elements and routine drill ids are stored as JSON text columns and
handed back unchanged. Every sqlite3/OS failure surfaces as a
PersistenceError so callers can keep their in-memory state and retry.
"""
from __future__ import annotations
import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..errors import PersistenceError
from ..models.records import Drill, Routine
from .. import config

logger = logging.getLogger(__name__)


_SCHEMA = (
    """CREATE TABLE IF NOT EXISTS drills (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        duration INTEGER NOT NULL,
        court_elements TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )""",
    """CREATE TABLE IF NOT EXISTS routines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        drill_ids TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )""",
)


class DrillRepository:
    """CRUD over the drills and routines tables."""

    def __init__(self, db_path: Union[str, Path] = config.DATABASE_PATH):
        """
        Open (and create if needed) the drill database.

        Args:
            db_path: SQLite database file
        """
        self.db_path = str(db_path)
        with self._connect() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            with conn:                      # commit / rollback
                yield conn
        except sqlite3.Error as e:
            logger.error("Database error on %s: %s", self.db_path, e)
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    # ── Drills ─────────────────────────────────────────────────────────────────

    def list_drills(self) -> List[Drill]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM drills ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [self._row_to_drill(r) for r in rows]

    def get_drill(self, drill_id: int) -> Optional[Drill]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM drills WHERE id = ?", (drill_id,)).fetchone()
        return self._row_to_drill(row) if row else None

    def create_drill(self, drill: Drill) -> Drill:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO drills (name, description, duration, court_elements) "
                "VALUES (?, ?, ?, ?)",
                (drill.name, drill.description, drill.duration_minutes,
                 json.dumps(drill.court_elements)),
            )
            row = conn.execute("SELECT * FROM drills WHERE id = ?", (cur.lastrowid,)).fetchone()
        saved = self._row_to_drill(row)
        logger.info("Created drill %s '%s'", saved.id, saved.name)
        return saved

    def update_drill(self, drill: Drill) -> Drill:
        if drill.id is None:
            raise PersistenceError("Cannot update a drill that has no id")
        with self._connect() as conn:
            cur = conn.execute(
                "UPDATE drills SET name = ?, description = ?, duration = ?, "
                "court_elements = ? WHERE id = ?",
                (drill.name, drill.description, drill.duration_minutes,
                 json.dumps(drill.court_elements), drill.id),
            )
            if cur.rowcount == 0:
                raise PersistenceError(f"Drill {drill.id} not found")
            row = conn.execute("SELECT * FROM drills WHERE id = ?", (drill.id,)).fetchone()
        return self._row_to_drill(row)

    def delete_drill(self, drill_id: int) -> bool:
        """Delete a drill and drop it from every routine that lists it."""
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM drills WHERE id = ?", (drill_id,))
            for row in conn.execute("SELECT id, drill_ids FROM routines").fetchall():
                ids = self._load_json(row["drill_ids"])
                if drill_id in ids:
                    kept = [i for i in ids if i != drill_id]
                    conn.execute("UPDATE routines SET drill_ids = ? WHERE id = ?",
                                 (json.dumps(kept), row["id"]))
        return cur.rowcount > 0

    # ── Routines ───────────────────────────────────────────────────────────────

    def list_routines(self) -> List[Routine]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM routines ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [self._row_to_routine(r) for r in rows]

    def get_routine(self, routine_id: int) -> Optional[Routine]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM routines WHERE id = ?", (routine_id,)).fetchone()
        return self._row_to_routine(row) if row else None

    def create_routine(self, routine: Routine) -> Routine:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO routines (name, description, drill_ids) VALUES (?, ?, ?)",
                (routine.name, routine.description, json.dumps(list(routine.drill_ids))),
            )
            row = conn.execute("SELECT * FROM routines WHERE id = ?", (cur.lastrowid,)).fetchone()
        return self._row_to_routine(row)

    def update_routine(self, routine: Routine) -> Routine:
        if routine.id is None:
            raise PersistenceError("Cannot update a routine that has no id")
        with self._connect() as conn:
            cur = conn.execute(
                "UPDATE routines SET name = ?, description = ?, drill_ids = ? WHERE id = ?",
                (routine.name, routine.description,
                 json.dumps(list(routine.drill_ids)), routine.id),
            )
            if cur.rowcount == 0:
                raise PersistenceError(f"Routine {routine.id} not found")
            row = conn.execute("SELECT * FROM routines WHERE id = ?", (routine.id,)).fetchone()
        return self._row_to_routine(row)

    def delete_routine(self, routine_id: int) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM routines WHERE id = ?", (routine_id,))
        return cur.rowcount > 0

    def replicate_routine(self, routine_id: int) -> Routine:
        """Store a copy of a routine under "<name> (Copy)"."""
        source = self.get_routine(routine_id)
        if source is None:
            raise PersistenceError(f"Routine {routine_id} not found")
        return self.create_routine(Routine(
            name=f"{source.name} (Copy)",
            description=source.description,
            drill_ids=list(source.drill_ids),
        ))

    # ── Serialisation helpers ──────────────────────────────────────────────────

    @staticmethod
    def _load_json(text: Optional[str]) -> list:
        if not text:
            return []
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt JSON column: {e}") from e
        return value if isinstance(value, list) else []

    @classmethod
    def _row_to_drill(cls, row: sqlite3.Row) -> Drill:
        return Drill(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            duration_minutes=float(row["duration"]),
            court_elements=cls._load_json(row["court_elements"]),
            created_at=row["created_at"],
        )

    @classmethod
    def _row_to_routine(cls, row: sqlite3.Row) -> Routine:
        return Routine(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            drill_ids=[int(i) for i in cls._load_json(row["drill_ids"])],
            created_at=row["created_at"],
        )
