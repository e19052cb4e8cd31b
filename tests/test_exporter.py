"""
Tests for drill export.
"""
import json
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.errors import InvalidElementError, PersistenceError
from drill_planner.exporter import Exporter
from drill_planner.rally.compiler import compile_rally


class _RecordingWriter:
    def __init__(self):
        self.frames = []
        self.released = False

    def write(self, frame):
        self.frames.append(frame)

    def release(self):
        self.released = True


@pytest.fixture
def exporter(tmp_path):
    return Exporter(tmp_path / "out")


class TestDrillFiles:

    def test_export_and_load(self, exporter, sample_drill):
        path = exporter.export_drill(sample_drill)

        assert path.name == "down_the_line.json"
        loaded = Exporter.load_drill(path)
        assert loaded.name == sample_drill.name
        assert loaded.court_elements == sample_drill.court_elements

    def test_load_bare_element_list(self, tmp_path, single_shot):
        path = tmp_path / "rally.json"
        path.write_text(json.dumps([e.to_dict() for e in single_shot]))

        drill = Exporter.load_drill(path)
        assert drill.name == "rally"
        assert len(drill.court_elements) == 2

    def test_load_malformed_elements(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"name": "bad", "courtElements": [{"type": "net", "id": 1}]}))
        with pytest.raises(InvalidElementError):
            Exporter.load_drill(path)

    def test_load_null_element_id(self, tmp_path):
        path = tmp_path / "null_id.json"
        path.write_text(json.dumps([{"type": "player", "id": None, "x": 10, "y": 10}]))
        with pytest.raises(InvalidElementError):
            Exporter.load_drill(path)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(PersistenceError):
            Exporter.load_drill(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError):
            Exporter.load_drill(path)

    def test_export_timeline(self, exporter, single_shot):
        path = exporter.export_timeline(compile_rally(single_shot))
        data = json.loads(path.read_text())
        assert data["total_duration_ms"] == 1000.0
        assert data["events"][0]["type"] == "shot"


class TestImagesAndVideo:

    def test_save_frame(self, exporter):
        path = exporter.save_frame(np.zeros((600, 300, 3), dtype=np.uint8), "court.png")
        assert path.exists()

    def test_collect_frames_single_pass(self, single_shot):
        frames = Exporter.collect_frames(single_shot)
        times = [f.elapsed_ms for f in frames]

        assert times[0] == 0
        assert times[-1] == 1000
        assert len(frames) == 21
        assert times == sorted(times)
        assert frames[-1].ball == (100, 300)

    def test_collect_frames_empty_drill(self):
        frames = Exporter.collect_frames([])
        assert frames[0].elapsed_ms == 0
        assert frames[-1].elapsed_ms == 3000

    def test_render_animation(self, exporter, single_shot, monkeypatch):
        writer = _RecordingWriter()
        monkeypatch.setattr(exporter, "create_video_writer", lambda *a, **k: writer)

        path = exporter.render_animation(single_shot, "rally.mp4", show_progress=False)

        assert path == exporter.output_dir / "rally.mp4"
        assert len(writer.frames) == 21
        assert writer.frames[0].shape == (600, 300, 3)
        assert writer.released
