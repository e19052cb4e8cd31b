"""
Configuration for Tennis Drill Planner.
"""
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────────────────────
# Resolved against the directory the planner runs in, not the install location
WORKING_DIR   = Path.cwd()
RESULTS_DIR   = WORKING_DIR / "results"
DATABASE_PATH = WORKING_DIR / "tennis_training.db"

# ── Rally timing ──────────────────────────────────────────────────────────────
BALL_SPEED_PX_S     = 200.0       # straight-line ball flight
PLAYER_SPEED_PX_S   = 150.0       # player repositioning
SHOT_DELAY_MS       = 300.0       # pause after a shot before the next action
DEFAULT_DURATION_MS = 3000.0      # empty drills still loop for this long
DEFAULT_SEQUENCE    = 1           # elements saved without a sequence sort here

# ── Playback ──────────────────────────────────────────────────────────────────
TICK_INTERVAL_MS    = 50          # 20 frames per second
SEEK_STEP_MS        = 500         # arrow-key scrub step in preview windows

# ── Edit history ──────────────────────────────────────────────────────────────
MAX_UNDO_SIZE       = 50

# ── Court canvas (vertical layout, pixels) ────────────────────────────────────
CANVAS_WIDTH        = 300
CANVAS_HEIGHT       = 600
COURT_MARGIN_PX     = 30
SINGLES_WIDTH_RATIO = 0.73        # singles court as a share of doubles width
SERVICE_LINE_RATIO  = 0.21        # baseline → service line, share of length
PLAYER_HIT_RADIUS   = 15          # click tolerance when selecting a player

# ── Shots ─────────────────────────────────────────────────────────────────────
SHOT_TYPES = ("forehand", "backhand", "volley", "serve", "smash", "lob", "drop")
DEFAULT_SHOT_TYPE = "forehand"

# ── Trail opacity ─────────────────────────────────────────────────────────────
SHOT_TRAIL_ACTIVE_ALPHA     = 0.8
SHOT_TRAIL_DONE_ALPHA       = 0.3
MOVEMENT_TRAIL_ACTIVE_ALPHA = 0.6
MOVEMENT_TRAIL_DONE_ALPHA   = 0.2

# ── Colours (BGR for OpenCV) ──────────────────────────────────────────────────
COURT_COLOR        = (19, 69, 139)      # clay
LINE_COLOR         = (255, 255, 255)
SHOT_COLOR         = (0, 0, 255)
MOVEMENT_COLOR     = (204, 102, 0)
PLAYER_COLOR       = (0, 255, 255)
SHOT_POS_COLOR     = (102, 102, 255)
MOVE_POS_COLOR     = (255, 204, 102)
BALL_COLOR         = (0, 255, 230)
SELECTION_COLOR    = (0, 0, 255)
TEXT_COLOR         = (0, 0, 0)

# ── Drawing ───────────────────────────────────────────────────────────────────
PLAYER_RADIUS      = 10
MARKER_RADIUS      = 8
BALL_RADIUS        = 10
FONT_SCALE         = 0.35
FONT_THICKNESS     = 1

# ── Video output ──────────────────────────────────────────────────────────────
OUTPUT_VIDEO_CODEC = "mp4v"
OUTPUT_FPS         = 1000 / TICK_INTERVAL_MS

# ── Interactive windows ───────────────────────────────────────────────────────
EDITOR_WINDOW_NAME  = "Tennis Drill Planner - Editor"
PREVIEW_WINDOW_NAME = "Tennis Drill Planner - Preview"
NOTICE_DURATION_MS  = 2000
