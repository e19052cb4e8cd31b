"""
Tests for the rally compiler.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.models import Player, Shot, Movement, EventKind
from drill_planner.rally.compiler import RallyCompiler, compile_rally, travel_time_ms


class TestTravelTime:

    def test_distance_over_speed(self):
        assert travel_time_ms((0, 0), (300, 400), 250.0) == pytest.approx(2000.0)

    def test_zero_distance(self):
        assert travel_time_ms((5, 5), (5, 5), 200.0) == 0.0


class TestRallyCompiler:

    def test_single_shot(self, single_shot):
        timeline = compile_rally(single_shot)

        assert len(timeline) == 1
        event = timeline[0]
        assert event.kind is EventKind.SHOT
        assert event.start_time_ms == 0
        assert event.duration_ms == pytest.approx(1000.0)
        assert timeline.total_duration_ms == pytest.approx(1000.0)

    def test_shot_starts_from_walked_position(self, move_then_shot):
        timeline = compile_rally(move_then_shot)
        move, shot = timeline

        assert move.kind is EventKind.MOVEMENT
        assert move.duration_ms == pytest.approx(100 / 150 * 1000)
        assert shot.origin == (100, 200)
        assert shot.start_time_ms == pytest.approx(move.end_time_ms)
        assert shot.duration_ms == pytest.approx(1000.0)

    def test_shot_delay_between_actions(self, two_player_rally):
        timeline = compile_rally(two_player_rally)
        serve, recovery, reply = timeline

        assert recovery.start_time_ms == pytest.approx(serve.end_time_ms + 300)
        assert reply.start_time_ms == pytest.approx(recovery.end_time_ms)

    def test_causal_order(self, two_player_rally):
        events = list(compile_rally(two_player_rally))
        starts = [e.start_time_ms for e in events]
        sequences = [e.element.sequence for e in events]

        assert sequences == sorted(sequences)
        assert starts == sorted(starts)

    def test_zero_distance_actions(self, player):
        elements = [
            player,
            Shot(id=2, player_id=1, shot_type="drop",
                 start_x=100, start_y=100, end_x=100, end_y=100, sequence=1),
            Movement(id=3, player_id=1, start_x=100, start_y=100,
                     end_x=100, end_y=100, sequence=2),
        ]
        shot, move = compile_rally(elements)

        assert shot.duration_ms == 0
        assert move.duration_ms == 0
        assert move.start_time_ms == pytest.approx(300)

    def test_unknown_player_uses_recorded_start(self):
        shot = Shot(id=1, player_id=99, shot_type="lob",
                    start_x=0, start_y=0, end_x=0, end_y=200, sequence=1)
        (event,) = compile_rally([shot])

        assert event.origin == (0, 0)
        assert event.duration_ms == pytest.approx(1000.0)

    def test_empty_drill_has_default_duration(self, player):
        assert compile_rally([]).total_duration_ms == 3000
        assert compile_rally([player]).total_duration_ms == 3000

    def test_custom_speeds(self, single_shot):
        timeline = RallyCompiler(ball_speed_px_s=400).compile(single_shot)
        assert timeline[0].duration_ms == pytest.approx(500.0)

    def test_rejects_non_positive_speed(self):
        with pytest.raises(ValueError):
            RallyCompiler(ball_speed_px_s=0)

    def test_event_lookup(self, move_then_shot):
        timeline = compile_rally(move_then_shot)
        assert timeline.event_for(3).kind is EventKind.SHOT
        assert timeline.event_for(1) is None
        assert len(timeline.shots) == 1
        assert len(timeline.movements) == 1
