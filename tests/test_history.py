"""
Tests for the annotation store, id allocation and undo/redo history.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.editor.history import EditHistory
from drill_planner.editor.ids import IdGenerator
from drill_planner.editor.store import AnnotationStore
from drill_planner.models import Player, Movement


@pytest.fixture
def store():
    return AnnotationStore()


@pytest.fixture
def history(store):
    return EditHistory(store)


class TestIdGenerator:

    def test_monotonic(self):
        ids = IdGenerator()
        assert [ids.next_id() for _ in range(3)] == [1, 2, 3]

    def test_observe_skips_used_ids(self):
        ids = IdGenerator()
        ids.observe([4, 17, 2])
        assert ids.next_id() == 18

    def test_observe_never_goes_back(self):
        ids = IdGenerator(start=10)
        ids.observe([3])
        assert ids.peek == 10


class TestAnnotationStore:

    def test_new_shot_starts_at_current_position(self, store):
        p = store.add(store.new_player(100, 100))
        store.add(store.new_movement(p.id, (120, 180)))
        shot = store.new_shot(p.id, (100, 400), "lob")

        assert shot.start == (120, 180)
        assert shot.sequence == 2
        assert store.positions[p.id] == (120, 180)

    def test_new_action_for_unknown_player(self, store):
        with pytest.raises(KeyError):
            store.new_movement(5, (0, 0))

    def test_player_at_uses_current_position(self, store):
        p = store.add(store.new_player(100, 100))
        store.add(store.new_movement(p.id, (200, 300)))

        assert store.player_at(100, 100) is None
        assert store.player_at(205, 310) == p
        assert store.player_at(200, 316) is None

    def test_replace_advances_ids(self, store, move_then_shot):
        store.replace(move_then_shot)
        assert store.new_player(0, 0).id == 4
        assert store.positions[1] == (100, 200)

    def test_flip_horizontal(self, store, single_shot):
        store.replace(single_shot)
        store.flip_horizontal()
        player, shot = store.elements
        assert player.x == 200
        assert (shot.start_x, shot.end_x) == (200, 200)
        assert store.positions[1] == (200, 100)

    def test_positions_view_is_read_only(self, store, player):
        store.add(player)
        with pytest.raises(TypeError):
            store.positions[1] = (0, 0)


class TestEditHistory:

    def test_undo_redo_round_trip(self, store, history, player):
        store.add(player)
        before = store.snapshot()

        history.save_state("add_movement")
        store.add(Movement(id=2, player_id=1, start_x=100, start_y=100,
                           end_x=50, end_y=50, sequence=1))
        after = store.snapshot()

        assert history.undo()
        assert store.snapshot() == before
        assert history.redo()
        assert store.snapshot() == after

    def test_undo_empty_is_noop(self, store, history):
        assert history.undo() is False
        assert history.redo() is False
        assert store.is_empty

    def test_bounded_at_fifty(self, history):
        for i in range(60):
            history.save_state(f"s{i}")

        entries = history.undo_entries()
        assert len(entries) == 50
        assert entries[0].label == "s10"
        assert entries[-1].label == "s59"

    def test_new_edit_clears_redo(self, store, history, player):
        history.save_state("add_player")
        store.add(player)
        history.undo()
        assert history.can_redo

        history.save_state("add_player")
        assert not history.can_redo

    def test_snapshots_do_not_alias_store(self, store, history, player):
        store.add(player)
        history.save_state("edit")
        store.add(Movement(id=2, player_id=1, start_x=100, start_y=100,
                           end_x=10, end_y=10, sequence=1))

        entry = history.undo_entries()[-1]
        assert len(entry.elements) == 1
        assert entry.positions[1] == (100, 100)

    def test_apply_failure_rolls_back(self, store, history, player):
        store.add(player)
        history.save_state("first")
        before = store.snapshot()

        def broken():
            store.add(Player(id=9, x=1, y=1))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            history.apply("broken", broken)

        assert store.snapshot() == before
        assert history.undo_depth == 1

    def test_apply_returns_mutation_result(self, store, history, player):
        assert history.apply("add_player", lambda: store.add(player)) is player
        assert history.undo_depth == 1

    def test_clear(self, history):
        history.save_state()
        history.clear_history()
        assert not history.can_undo
