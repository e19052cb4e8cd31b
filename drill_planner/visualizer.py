"""
Court drawing with OpenCV.

Everything is drawn onto BGR numpy images the size of the court canvas,
in canvas pixel coordinates, so a saved drill renders exactly where it
was placed in the editor.
"""
import math
import cv2
import numpy as np
from typing import Dict, Iterable, List, Optional, Tuple

from .models.elements import Element, Movement, Player, Position, Shot, sort_actions
from .models.frame import FrameState, TrailSegment
from .playback.clock import format_progress
from .rally.positions import player_numbers
from . import config


Color = Tuple[int, int, int]


def _pt(p: Position) -> Tuple[int, int]:
    return (int(round(p[0])), int(round(p[1])))


def position_sequence(elements: Iterable[Element]) -> Dict[int, List[Tuple[Position, int, str]]]:
    """
    Where each player stands through the drill.

    {player_id: [(position, sequence, kind), ...]} with kind one of
    'start', 'shot' (where the player hit from) or 'movement' (where a
    move ended). Sequence 0 marks the starting mark.
    """
    elements = list(elements)
    current: Dict[int, Position] = {}
    marks: Dict[int, List[Tuple[Position, int, str]]] = {}
    for e in elements:
        if isinstance(e, Player):
            current[e.id] = e.position
            marks[e.id] = [(e.position, 0, "start")]

    for action in sort_actions(elements):
        if action.player_id not in marks:
            continue
        seq = action.sequence or config.DEFAULT_SEQUENCE
        if isinstance(action, Shot):
            marks[action.player_id].append((current[action.player_id], seq, "shot"))
        else:
            marks[action.player_id].append((action.end, seq, "movement"))
            current[action.player_id] = action.end
    return marks


class CourtVisualizer:
    """Draws the court, drill annotations and animation frames."""

    def __init__(
        self,
        width: int = config.CANVAS_WIDTH,
        height: int = config.CANVAS_HEIGHT,
        margin: int = config.COURT_MARGIN_PX,
        font_scale: float = config.FONT_SCALE,
        font_thickness: int = config.FONT_THICKNESS,
    ):
        """
        Initialize visualizer.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            margin: Gap between canvas edge and doubles outline
            font_scale: OpenCV font scale for labels
            font_thickness: OpenCV font thickness for labels
        """
        self.width = width
        self.height = height
        self.margin = margin
        self.font_scale = font_scale
        self.font_thickness = font_thickness
        self.font = cv2.FONT_HERSHEY_SIMPLEX
        self._court: Optional[np.ndarray] = None

    # ── Court ─────────────────────────────────────────────────────────────────

    def draw_court(self) -> np.ndarray:
        """Empty court; cached, a fresh copy is returned each call."""
        if self._court is None:
            self._court = self._render_court()
        return self._court.copy()

    def _render_court(self) -> np.ndarray:
        img = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        img[:] = config.COURT_COLOR

        m = self.margin
        court_w = self.width - 2 * m
        court_h = self.height - 2 * m
        singles_off = (court_w - court_w * config.SINGLES_WIDTH_RATIO) / 2
        service_off = court_h * config.SERVICE_LINE_RATIO
        left, right = m, m + court_w
        top, bottom = m, m + court_h
        s_left, s_right = left + singles_off, right - singles_off
        line = config.LINE_COLOR

        # Doubles outline
        cv2.rectangle(img, (left, top), (right, bottom), line, 3)
        # Singles sidelines
        cv2.line(img, _pt((s_left, top)), _pt((s_left, bottom)), line, 3)
        cv2.line(img, _pt((s_right, top)), _pt((s_right, bottom)), line, 3)
        # Net
        cv2.line(img, _pt((left, top + court_h / 2)), _pt((right, top + court_h / 2)), line, 4)
        # Service lines and centre service line
        cv2.line(img, _pt((s_left, top + service_off)), _pt((s_right, top + service_off)), line, 2)
        cv2.line(img, _pt((s_left, bottom - service_off)), _pt((s_right, bottom - service_off)), line, 2)
        cv2.line(img, _pt((left + court_w / 2, top + service_off)),
                 _pt((left + court_w / 2, bottom - service_off)), line, 2)
        # Baselines
        cv2.line(img, (left, top), (right, top), line, 4)
        cv2.line(img, (left, bottom), (right, bottom), line, 4)
        return img

    # ── Static drill view ─────────────────────────────────────────────────────

    def draw_static_court(
        self,
        elements: Iterable[Element] = (),
        suppress_annotations: bool = False,
        selected_player_id: Optional[int] = None,
    ) -> np.ndarray:
        """
        Draw the court with the drill's annotations.

        Args:
            elements: Players, shots and movements to draw
            suppress_annotations: Draw the bare court only (while animating)
            selected_player_id: Player to highlight with a selection ring

        Returns:
            Annotated BGR image
        """
        img = self.draw_court()
        if suppress_annotations:
            return img

        elements = list(elements)
        numbers = player_numbers(elements)

        self._draw_position_markers(img, elements, numbers, selected_player_id)

        for e in elements:
            if isinstance(e, Shot):
                self._arrow(img, e.start, e.end, config.SHOT_COLOR, 2, head=15)
                if e.player_id in numbers:
                    text = f"P{numbers[e.player_id]}: {e.shot_type} ({e.sequence or 1})"
                    self._text(img, text, self._midpoint(e.start, e.end), config.SHOT_COLOR)

        for e in elements:
            if isinstance(e, Movement):
                self._arrow(img, e.start, e.end, config.MOVEMENT_COLOR, 2, head=12, dashed=True)
                if e.player_id in numbers:
                    text = f"P{numbers[e.player_id]}: Move ({e.sequence or 1})"
                    self._text(img, text, self._midpoint(e.start, e.end), config.MOVEMENT_COLOR)
        return img

    def _draw_position_markers(
        self,
        img: np.ndarray,
        elements: List[Element],
        numbers: Dict[int, int],
        selected_player_id: Optional[int],
    ) -> None:
        fills = {
            "start":    config.PLAYER_COLOR,
            "shot":     config.SHOT_POS_COLOR,
            "movement": config.MOVE_POS_COLOR,
        }
        for player_id, marks in position_sequence(elements).items():
            selected = player_id == selected_player_id
            for i, (pos, seq, kind) in enumerate(marks):
                center = _pt(pos)
                cv2.circle(img, center, config.MARKER_RADIUS, fills[kind], -1, cv2.LINE_AA)
                border = config.SELECTION_COLOR if selected else config.TEXT_COLOR
                cv2.circle(img, center, config.MARKER_RADIUS, border, 2 if selected else 1, cv2.LINE_AA)

                if selected and i == len(marks) - 1:
                    self._dashed_circle(img, pos, config.PLAYER_HIT_RADIUS, config.SELECTION_COLOR)

                label = f"P{numbers[player_id]}" if seq == 0 else f"P{numbers[player_id]}-{seq}"
                self._text(img, label, (pos[0] - 15, pos[1] - 12), config.TEXT_COLOR)

    # ── Animation frames ──────────────────────────────────────────────────────

    def draw_frame(
        self,
        frame: FrameState,
        total_duration_ms: Optional[float] = None,
    ) -> np.ndarray:
        """
        Draw one animation frame.

        Args:
            frame: Ball, player and trail state at one elapsed time
            total_duration_ms: When given, a progress label is overlaid

        Returns:
            BGR image of the frame
        """
        img = self.draw_court()

        for trail in frame.trails:
            self._draw_trail(img, trail)

        for player in frame.players:
            center = _pt(player.position)
            cv2.circle(img, center, config.PLAYER_RADIUS, config.PLAYER_COLOR, -1, cv2.LINE_AA)
            cv2.circle(img, center, config.PLAYER_RADIUS, config.TEXT_COLOR, 1, cv2.LINE_AA)
            self._text(img, player.label,
                       (player.position[0] - 15, player.position[1] - 15), config.TEXT_COLOR)

        if frame.ball is not None:
            self._draw_ball(img, frame.ball)

        if total_duration_ms is not None:
            self.draw_info(img, [format_progress(frame.elapsed_ms, total_duration_ms)])
        return img

    def _draw_trail(self, img: np.ndarray, trail: TrailSegment) -> None:
        overlay = img.copy()
        if trail.dashed:
            self._dashed_line(overlay, trail.start, trail.end, config.MOVEMENT_COLOR, 2)
        else:
            cv2.line(overlay, _pt(trail.start), _pt(trail.end), config.SHOT_COLOR, 2, cv2.LINE_AA)
            if trail.label:
                color = config.SHOT_COLOR if trail.in_flight else (153, 153, 153)
                self._text(overlay, trail.label, self._midpoint(trail.start, trail.end), color)
        cv2.addWeighted(overlay, trail.opacity, img, 1 - trail.opacity, 0, dst=img)

    def _draw_ball(self, img: np.ndarray, pos: Position) -> None:
        center = _pt(pos)
        shadow = img.copy()
        cv2.circle(shadow, (center[0] + 1, center[1] + 1), config.BALL_RADIUS, (0, 0, 0), -1, cv2.LINE_AA)
        cv2.addWeighted(shadow, 0.2, img, 0.8, 0, dst=img)
        cv2.circle(img, center, config.BALL_RADIUS, config.BALL_COLOR, -1, cv2.LINE_AA)
        # Seam
        cv2.ellipse(img, center, (7, 7), 0, -45, 135, (255, 255, 255), 1, cv2.LINE_AA)
        cv2.ellipse(img, center, (7, 7), 0, 135, 315, (255, 255, 255), 1, cv2.LINE_AA)

    def draw_info(self, img: np.ndarray, lines: List[str]) -> np.ndarray:
        """Text overlay in the top-left corner (drawn in place)."""
        y = 16
        for line in lines:
            cv2.putText(img, line, (6, y), self.font, self.font_scale + 0.05,
                        config.LINE_COLOR, self.font_thickness, cv2.LINE_AA)
            y += 14
        return img

    # ── Primitives ────────────────────────────────────────────────────────────

    @staticmethod
    def _midpoint(a: Position, b: Position) -> Position:
        return ((a[0] + b[0]) / 2 + 10, (a[1] + b[1]) / 2 - 5)

    def _text(self, img: np.ndarray, text: str, pos: Position, color: Color) -> None:
        cv2.putText(img, text, _pt(pos), self.font, self.font_scale,
                    color, self.font_thickness, cv2.LINE_AA)

    @staticmethod
    def _dashed_line(
        img: np.ndarray, a: Position, b: Position, color: Color,
        thickness: int, dash: int = 8,
    ) -> None:
        length = math.hypot(b[0] - a[0], b[1] - a[1])
        if length == 0:
            return
        steps = max(1, int(length // dash))
        for i in range(0, steps, 2):
            t0 = i * dash / length
            t1 = min(1.0, (i + 1) * dash / length)
            p0 = (a[0] + (b[0] - a[0]) * t0, a[1] + (b[1] - a[1]) * t0)
            p1 = (a[0] + (b[0] - a[0]) * t1, a[1] + (b[1] - a[1]) * t1)
            cv2.line(img, _pt(p0), _pt(p1), color, thickness, cv2.LINE_AA)

    @staticmethod
    def _dashed_circle(img: np.ndarray, center: Position, radius: int, color: Color) -> None:
        for start in range(0, 360, 30):
            cv2.ellipse(img, _pt(center), (radius, radius), 0, start, start + 15,
                        color, 1, cv2.LINE_AA)

    def _arrow(
        self, img: np.ndarray, a: Position, b: Position, color: Color,
        thickness: int, head: int, dashed: bool = False,
    ) -> None:
        if dashed:
            self._dashed_line(img, a, b, color, thickness)
        else:
            cv2.line(img, _pt(a), _pt(b), color, thickness, cv2.LINE_AA)
        if a == b:
            return
        angle = math.atan2(b[1] - a[1], b[0] - a[0])
        for side in (-math.pi / 6, math.pi / 6):
            tip = (b[0] - head * math.cos(angle + side), b[1] - head * math.sin(angle + side))
            cv2.line(img, _pt(b), _pt(tip), color, thickness, cv2.LINE_AA)


_default_visualizer = CourtVisualizer()


def draw_static_court(
    elements: Iterable[Element] = (),
    suppress_annotations: bool = False,
    selected_player_id: Optional[int] = None,
) -> np.ndarray:
    return _default_visualizer.draw_static_court(elements, suppress_annotations, selected_player_id)
