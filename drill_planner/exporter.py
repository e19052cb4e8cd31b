"""
Export drills to JSON, PNG and animation video.
"""
import json
import math
import cv2
import numpy as np
from pathlib import Path
from typing import Iterable, List, Optional, Union

from tqdm import tqdm

from .errors import PersistenceError
from .models.elements import Element, elements_from_dicts
from .models.frame import FrameState
from .models.records import Drill
from .models.timeline import Timeline
from .playback.preview import AnimationPreview
from .playback.scheduler import ManualScheduler
from .visualizer import CourtVisualizer
from . import config


class Exporter:
    """Writes drills, court images and rendered animations to disk."""

    def __init__(self, output_dir: Union[str, Path] = config.RESULTS_DIR):
        """
        Initialize exporter.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create output directory {self.output_dir}: {e}") from e

    # ── JSON ──────────────────────────────────────────────────────────────────

    def export_drill(self, drill: Drill, filename: Optional[str] = None) -> Path:
        """
        Export a drill record to a JSON file.

        Args:
            drill: Drill to write
            filename: Output filename (None = derived from the drill name)

        Returns:
            Path to saved file
        """
        if filename is None:
            slug = "_".join(drill.name.lower().split()) or "drill"
            filename = f"{slug}.json"
        return self._write_json(drill.to_dict(), filename)

    def export_timeline(self, timeline: Timeline, filename: str = "timeline.json") -> Path:
        return self._write_json(timeline.to_dict(), filename)

    def _write_json(self, data: dict, filename: str) -> Path:
        output_path = self.output_dir / filename
        try:
            with open(output_path, 'w') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Cannot write {output_path}: {e}") from e
        return output_path

    @staticmethod
    def load_drill(path: Union[str, Path]) -> Drill:
        """
        Read a drill JSON file.

        Accepts either a full drill record or a bare list of court
        elements. Elements are validated on load, so malformed files fail
        here with InvalidElementError rather than during playback.
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read drill file {path}: {e}") from e

        if isinstance(data, list):
            drill = Drill(name=path.stem, duration_minutes=10.0, court_elements=data)
        elif isinstance(data, dict):
            drill = Drill.from_dict(data)
        else:
            raise PersistenceError(f"{path} holds neither a drill nor a list of court elements")
        elements_from_dicts(drill.court_elements)
        return drill

    # ── Images & video ────────────────────────────────────────────────────────

    def save_frame(self, frame: np.ndarray, filename: str) -> Path:
        """Save a single court image."""
        output_path = self.output_dir / filename
        if not cv2.imwrite(str(output_path), frame):
            raise PersistenceError(f"Cannot write image {output_path}")
        return output_path

    def create_video_writer(
        self,
        filename: str,
        width: int = config.CANVAS_WIDTH,
        height: int = config.CANVAS_HEIGHT,
        fps: float = config.OUTPUT_FPS,
    ) -> cv2.VideoWriter:
        """
        Create a video writer for the rendered animation.

        Args:
            filename: Output filename
            width: Frame width in pixels
            height: Frame height in pixels
            fps: Output frame rate

        Returns:
            OpenCV VideoWriter object
        """
        output_path = self.output_dir / filename

        # Try multiple codecs for compatibility
        codecs = [
            config.OUTPUT_VIDEO_CODEC,  # mp4v (MPEG-4)
            "XVID",
            "MJPG",
        ]

        writer = None
        working_codec = None

        for codec in codecs:
            fourcc = cv2.VideoWriter_fourcc(*codec)
            writer = cv2.VideoWriter(str(output_path), fourcc, fps, (width, height))
            if writer.isOpened():
                working_codec = codec
                break
            writer.release()
            writer = None
            print(f"[Exporter] Codec {codec} unavailable")

        if writer is None:
            raise PersistenceError(
                f"Could not create video writer for {output_path}. "
                f"Tried codecs: {codecs}."
            )

        print(f"[Exporter] Using video codec: {working_codec}")
        return writer

    @staticmethod
    def collect_frames(
        elements: Iterable[Element],
        tick_interval_ms: float = config.TICK_INTERVAL_MS,
    ) -> List[FrameState]:
        """
        One pass of the rally, frame by frame at the playback cadence,
        ending on the final frame at the total duration.
        """
        frames: List[FrameState] = []
        scheduler = ManualScheduler()
        with AnimationPreview(
            frames.append,
            scheduler=scheduler,
            now_ms=scheduler.now,
            tick_interval_ms=tick_interval_ms,
        ) as preview:
            timeline = preview.open(elements)
            total = timeline.total_duration_ms
            preview.play()
            for _ in range(max(0, math.ceil(total / tick_interval_ms) - 1)):
                scheduler.advance(tick_interval_ms)
            preview.pause()
            preview.seek(total)
        return frames

    def render_animation(
        self,
        elements: Iterable[Element],
        filename: str = "drill_animation.mp4",
        visualizer: Optional[CourtVisualizer] = None,
        show_progress: bool = True,
    ) -> Path:
        """
        Render one pass of the animation to a video file.

        Args:
            elements: Court elements of the drill
            filename: Output filename
            visualizer: Visualizer to draw frames with (None = default)
            show_progress: Show a progress bar while rendering

        Returns:
            Path to saved video
        """
        visualizer = visualizer or CourtVisualizer()
        elements = list(elements)
        frames = self.collect_frames(elements)
        total = frames[-1].elapsed_ms if frames else 0.0

        writer = self.create_video_writer(filename, visualizer.width, visualizer.height)
        try:
            for state in tqdm(frames, desc="Rendering", unit="frame", disable=not show_progress):
                writer.write(visualizer.draw_frame(state, total_duration_ms=total))
        finally:
            writer.release()

        output_path = self.output_dir / filename
        print(f"[Exporter] {len(frames)} frames → {output_path}")
        return output_path
