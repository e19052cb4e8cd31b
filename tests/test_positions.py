"""
Tests for the position resolver.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.models import Player, Movement
from drill_planner.rally.positions import resolve_positions, player_numbers


class TestResolvePositions:

    def test_players_only(self, player):
        assert resolve_positions([player]) == {1: (100, 100)}

    def test_movements_applied_in_sequence_order(self, player):
        second = Movement(id=3, player_id=1, start_x=0, start_y=0,
                          end_x=50, end_y=50, sequence=2)
        first = Movement(id=2, player_id=1, start_x=0, start_y=0,
                         end_x=10, end_y=10, sequence=1)
        assert resolve_positions([player, second, first]) == {1: (50, 50)}

    def test_shots_do_not_move_players(self, single_shot):
        assert resolve_positions(single_shot) == {1: (100, 100)}

    def test_unknown_player_skipped(self, player):
        stray = Movement(id=5, player_id=42, start_x=0, start_y=0,
                         end_x=10, end_y=10, sequence=1)
        assert resolve_positions([player, stray]) == {1: (100, 100)}

    def test_idempotent(self, two_player_rally):
        assert resolve_positions(two_player_rally) == resolve_positions(two_player_rally)
        assert resolve_positions(two_player_rally) == {1: (150, 150), 2: (150, 520)}


class TestPlayerNumbers:

    def test_ascending_id_order(self):
        elements = [Player(id=9, x=0, y=0), Player(id=4, x=0, y=0), Player(id=6, x=0, y=0)]
        assert player_numbers(elements) == {4: 1, 6: 2, 9: 3}

    def test_empty(self):
        assert player_numbers([]) == {}
