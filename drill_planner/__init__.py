"""
Tennis Drill Planner – source package.

Public API:  the main components are importable directly from `drill_planner`.

    from drill_planner import EditorSession, AnnotationStore, EditHistory
    from drill_planner import RallyCompiler, resolve_positions
    from drill_planner import PlaybackClock, AnimationPreview, render_frame
    from drill_planner import CourtVisualizer, Exporter, DrillRepository
    from drill_planner.models import Player, Shot, Movement, Timeline, Drill
"""

# ── Rally (positions → timeline) ──────────────────────────────────────────────
from .rally.positions import resolve_positions, player_numbers
from .rally.compiler  import RallyCompiler, compile_rally, travel_time_ms

# ── Playback ──────────────────────────────────────────────────────────────────
from .playback.scheduler import ThreadScheduler, ManualScheduler
from .playback.clock     import PlaybackClock, ClockState, format_progress
from .playback.renderer  import FrameRenderer, render_frame
from .playback.preview   import AnimationPreview

# ── Editing ───────────────────────────────────────────────────────────────────
from .editor.ids     import IdGenerator
from .editor.store   import AnnotationStore
from .editor.history import EditHistory, HistoryEntry
from .editor.session import EditorSession, Tool

# ── Persistence & practice ────────────────────────────────────────────────────
from .storage.repository import DrillRepository
from .practice           import PracticeSession, DrillCountdown, format_time

# ── Utilities ─────────────────────────────────────────────────────────────────
from .visualizer import CourtVisualizer, draw_static_court
from .exporter   import Exporter

# ── Errors ────────────────────────────────────────────────────────────────────
from .errors import (
    DrillPlannerError, PreconditionError, InvalidElementError,
    PersistenceError, PlaybackError,
)

__all__ = [
    # Rally
    "resolve_positions", "player_numbers",
    "RallyCompiler", "compile_rally", "travel_time_ms",
    # Playback
    "ThreadScheduler", "ManualScheduler",
    "PlaybackClock", "ClockState", "format_progress",
    "FrameRenderer", "render_frame", "AnimationPreview",
    # Editing
    "IdGenerator", "AnnotationStore", "EditHistory", "HistoryEntry",
    "EditorSession", "Tool",
    # Persistence & practice
    "DrillRepository", "PracticeSession", "DrillCountdown", "format_time",
    # Utilities
    "CourtVisualizer", "draw_static_court", "Exporter",
    # Errors
    "DrillPlannerError", "PreconditionError", "InvalidElementError",
    "PersistenceError", "PlaybackError",
]
