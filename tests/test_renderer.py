"""
Tests for the frame renderer.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.models import Player, Movement, EventKind
from drill_planner.playback.renderer import FrameRenderer, render_frame
from drill_planner.rally.compiler import compile_rally


class TestBall:

    def test_in_flight_midway(self, single_shot):
        frame = render_frame(500, compile_rally(single_shot), single_shot)
        assert frame.ball == pytest.approx((100, 200))

    def test_pinned_at_landing(self, single_shot):
        timeline = compile_rally(single_shot)
        assert render_frame(1000, timeline, single_shot).ball == (100, 300)
        assert render_frame(1200, timeline, single_shot).ball == (100, 300)

    def test_hidden_before_first_shot(self, move_then_shot):
        frame = render_frame(100, compile_rally(move_then_shot), move_then_shot)
        assert frame.ball is None
        assert not frame.ball_visible

    def test_launched_from_walked_position(self, move_then_shot):
        timeline = compile_rally(move_then_shot)
        shot = timeline[1]
        frame = render_frame(shot.start_time_ms, timeline, move_then_shot)
        assert frame.ball == pytest.approx((100, 200))

    def test_pinned_at_last_completed_shot(self, two_player_rally):
        timeline = compile_rally(two_player_rally)
        frame = render_frame(timeline.total_duration_ms + 1, timeline, two_player_rally)
        assert frame.ball == (100, 120)


class TestPlayers:

    @pytest.fixture
    def walk(self):
        return [
            Player(id=1, x=100, y=100),
            Movement(id=2, player_id=1, start_x=100, start_y=100,
                     end_x=100, end_y=250, sequence=1),
        ]

    def test_interpolated_while_moving(self, walk):
        frame = render_frame(500, compile_rally(walk), walk)
        (p,) = frame.players
        assert p.position == pytest.approx((100, 175))
        assert p.moving

    def test_settles_at_movement_end(self, walk):
        frame = render_frame(1000, compile_rally(walk), walk)
        (p,) = frame.players
        assert p.position == (100, 250)
        assert not p.moving

    def test_static_player_keeps_start(self, single_shot):
        frame = render_frame(700, compile_rally(single_shot), single_shot)
        assert frame.player_positions() == {1: (100, 100)}

    def test_player_labels(self, two_player_rally):
        frame = render_frame(0, compile_rally(two_player_rally), two_player_rally)
        assert [p.label for p in frame.players] == ["P1", "P2"]


class TestTrails:

    def test_only_started_events(self, move_then_shot):
        frame = render_frame(100, compile_rally(move_then_shot), move_then_shot)
        assert [t.kind for t in frame.trails] == [EventKind.MOVEMENT]
        assert frame.trails[0].dashed

    def test_opacity_in_flight_and_done(self, single_shot):
        timeline = compile_rally(single_shot)
        (active,) = render_frame(500, timeline, single_shot).trails
        (done,) = render_frame(1000, timeline, single_shot).trails

        assert active.in_flight and active.opacity == 0.8
        assert not done.in_flight and done.opacity == 0.3

    def test_movement_opacity(self, move_then_shot):
        timeline = compile_rally(move_then_shot)
        moving = render_frame(10, timeline, move_then_shot).trails[0]
        settled = [t for t in render_frame(5000, timeline, move_then_shot).trails
                   if t.kind is EventKind.MOVEMENT][0]
        assert moving.opacity == 0.6
        assert settled.opacity == 0.2

    def test_shot_label(self, single_shot):
        (trail,) = render_frame(500, compile_rally(single_shot), single_shot).trails
        assert trail.label == "P1: forehand"

    def test_custom_alphas(self, single_shot):
        renderer = FrameRenderer(shot_active_alpha=0.5)
        (trail,) = renderer.render_frame(500, compile_rally(single_shot), single_shot).trails
        assert trail.opacity == 0.5

    def test_frame_to_dict(self, single_shot):
        d = render_frame(500, compile_rally(single_shot), single_shot).to_dict()
        assert d["ball"] == [100.0, 200.0]
        assert d["players"] == {"P1": [100.0, 100.0]}
        assert d["trails"] == 1
