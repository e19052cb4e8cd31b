"""
Interactive drill editor – OpenCV window over an EditorSession.

Controls:
  Left-click   – act with the current tool (place player / select player,
                 then place shot or movement end)
  P / S / M    – player, shot, movement tool
  T            – cycle shot type
  U / Y        – undo / redo
  F            – flip court horizontally
  C            – clear court
  A            – toggle rally animation
  SPACE        – play / pause animation
  W            – save drill
  Q / ESC      – quit
"""
from __future__ import annotations
import logging
import time
from typing import Optional

import cv2
import numpy as np

from ..errors import DrillPlannerError
from ..models.frame import FrameState
from ..models.records import Drill
from ..playback.preview import AnimationPreview
from ..storage.repository import DrillRepository
from ..visualizer import CourtVisualizer
from .session import EditorSession, Tool
from .. import config

logger = logging.getLogger(__name__)


_TOOL_KEYS = {
    ord('p'): Tool.PLAYER,
    ord('s'): Tool.SHOT,
    ord('m'): Tool.MOVEMENT,
}


class InteractiveEditor:
    """Click-driven drill editing with an inline rally preview."""

    def __init__(
        self,
        session: EditorSession,
        repository: Optional[DrillRepository] = None,
        visualizer: Optional[CourtVisualizer] = None,
        scheduler=None,
        now_ms=None,
    ):
        self.session    = session
        self.repository = repository
        self.visualizer = visualizer or CourtVisualizer()
        self.preview    = AnimationPreview(self._on_frame, scheduler=scheduler,
                                           now_ms=now_ms, on_static=self._on_static)
        self.window_name = config.EDITOR_WINDOW_NAME
        self.saved: Optional[Drill] = None

        self._frame: Optional[FrameState] = None
        self._notice: Optional[str] = None
        self._notice_until = 0.0

    # ── Public API ─────────────────────────────────────────────────────────────

    def run(self) -> Optional[Drill]:
        """Show the editor and block until the user quits. Returns the last saved drill."""
        cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.window_name, self._on_mouse)
        try:
            while True:
                cv2.imshow(self.window_name, self.render())
                key = cv2.waitKey(30) & 0xFF
                if key != 0xFF and not self.handle_key(key):
                    break
        finally:
            self.preview.close()
            cv2.destroyWindow(self.window_name)
        return self.saved

    @property
    def animating(self) -> bool:
        return self.preview.is_open

    def notify(self, message: str) -> None:
        self._notice = message
        self._notice_until = time.monotonic() * 1000 + config.NOTICE_DURATION_MS
        logger.info(message)

    @property
    def notice(self) -> Optional[str]:
        if self._notice and time.monotonic() * 1000 < self._notice_until:
            return self._notice
        return None

    # ── Input ─────────────────────────────────────────────────────────────────

    def handle_key(self, key: int) -> bool:
        """Apply one key press. Returns False when the editor should close."""
        if key in (ord('q'), 27):
            return False

        try:
            if key == ord('a'):
                self.toggle_animation()
            elif key == 32:
                if self.animating:
                    self.preview.toggle()
            else:
                self._handle_edit_key(key)
        except DrillPlannerError as e:
            self.notify(str(e))
        return True

    def _handle_edit_key(self, key: int) -> None:
        session = self.session
        if key in _TOOL_KEYS or key in (ord('u'), ord('y'), ord('f'), ord('c')):
            self.stop_animation()

        if key in _TOOL_KEYS:
            session.set_tool(_TOOL_KEYS[key])
        elif key == ord('t'):
            self.notify(f"Shot type: {session.cycle_shot_type()}")
        elif key == ord('u'):
            if not session.undo():
                self.notify("Nothing to undo")
        elif key == ord('y'):
            if not session.redo():
                self.notify("Nothing to redo")
        elif key == ord('f'):
            session.flip_horizontal()
        elif key == ord('c'):
            session.clear()
        elif key == ord('w'):
            self.save()

    def handle_click(self, x: int, y: int) -> None:
        if self.animating:
            return
        try:
            self.session.click(x, y)
        except DrillPlannerError as e:
            self.notify(str(e))

    def _on_mouse(self, event, x, y, *_):
        if event == cv2.EVENT_LBUTTONDOWN:
            self.handle_click(x, y)

    # ── Actions ───────────────────────────────────────────────────────────────

    def toggle_animation(self) -> None:
        if self.animating:
            self.stop_animation()
            return
        self.preview.open(self.session.store.elements)
        self.preview.play()

    def stop_animation(self) -> None:
        self.preview.close()
        self._frame = None

    def save(self) -> Optional[Drill]:
        if self.repository is None:
            self.notify("No drill database configured")
            return None
        self.saved = self.session.save(self.repository)
        self.notify(f"Saved drill '{self.saved.name}'")
        return self.saved

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _on_frame(self, frame: FrameState) -> None:
        self._frame = frame

    def _on_static(self) -> None:
        self._frame = None

    def render(self) -> np.ndarray:
        session = self.session
        frame = self._frame
        if self.animating and frame is not None:
            img = self.visualizer.draw_frame(frame, self.preview.total_duration_ms)
        else:
            img = self.visualizer.draw_static_court(
                session.store.elements,
                selected_player_id=session.selected_player_id,
            )

        status = f"Tool: {session.tool.value}"
        if session.tool is Tool.SHOT:
            status += f" ({session.shot_type})"
        lines = [status, f"Undo {session.history.undo_depth}  Redo {session.history.redo_depth}"]
        if session.name:
            lines.insert(0, session.name)
        if not self.animating:
            self.visualizer.draw_info(img, lines)

        notice = self.notice
        if notice:
            h = img.shape[0]
            cv2.rectangle(img, (0, h - 22), (img.shape[1], h), (15, 15, 15), -1)
            cv2.putText(img, notice, (6, h - 7), cv2.FONT_HERSHEY_SIMPLEX,
                        config.FONT_SCALE, (0, 200, 255), 1, cv2.LINE_AA)
        return img
