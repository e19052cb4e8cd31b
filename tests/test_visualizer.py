"""
Tests for court drawing.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.playback.renderer import render_frame
from drill_planner.rally.compiler import compile_rally
from drill_planner.visualizer import CourtVisualizer, draw_static_court, position_sequence


class TestCourtVisualizer:
    """Tests for CourtVisualizer class."""

    @pytest.fixture
    def visualizer(self):
        return CourtVisualizer()

    def test_court_shape(self, visualizer):
        court = visualizer.draw_court()
        assert court.shape == (600, 300, 3)
        assert court.dtype == np.uint8

    def test_court_is_a_copy(self, visualizer):
        court = visualizer.draw_court()
        court[:] = 0
        assert visualizer.draw_court().any()

    def test_court_lines_drawn(self, visualizer):
        court = visualizer.draw_court()
        # Net across the middle, clay in the margin
        assert tuple(court[300, 150]) == (255, 255, 255)
        assert tuple(court[5, 5]) == (19, 69, 139)

    def test_static_annotations(self, visualizer, single_shot):
        plain = visualizer.draw_court()
        annotated = visualizer.draw_static_court(single_shot)
        suppressed = visualizer.draw_static_court(single_shot, suppress_annotations=True)

        assert not np.array_equal(annotated, plain)
        assert np.array_equal(suppressed, plain)

    def test_selection_changes_drawing(self, visualizer, single_shot):
        plain = visualizer.draw_static_court(single_shot)
        selected = visualizer.draw_static_court(single_shot, selected_player_id=1)
        assert not np.array_equal(plain, selected)

    def test_draw_frame(self, visualizer, single_shot):
        timeline = compile_rally(single_shot)
        start = visualizer.draw_frame(render_frame(0, timeline, single_shot))
        midway = visualizer.draw_frame(render_frame(500, timeline, single_shot), 1000)

        assert midway.shape == start.shape
        assert not np.array_equal(start, midway)

    def test_module_level_helper(self, single_shot):
        assert draw_static_court(single_shot).shape == (600, 300, 3)


class TestPositionSequence:

    def test_marks(self, move_then_shot):
        marks = position_sequence(move_then_shot)
        assert marks == {1: [
            ((100, 100), 0, "start"),
            ((100, 200), 1, "movement"),
            ((100, 200), 2, "shot"),
        ]}

    def test_unknown_players_ignored(self, single_shot):
        assert list(position_sequence(single_shot[1:])) == []
