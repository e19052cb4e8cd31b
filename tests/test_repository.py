"""
Tests for SQLite drill and routine persistence.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import drill_planner
from drill_planner import config
from drill_planner.errors import PersistenceError
from drill_planner.models import Drill, Routine
from drill_planner.storage.repository import DrillRepository


class TestDrills:

    def test_create_and_get(self, repository, sample_drill):
        saved = repository.create_drill(sample_drill)

        assert saved.id is not None
        assert saved.created_at is not None
        loaded = repository.get_drill(saved.id)
        assert loaded.name == "Down the line"
        assert loaded.duration_minutes == 5
        assert loaded.court_elements == sample_drill.court_elements

    def test_get_missing(self, repository):
        assert repository.get_drill(404) is None

    def test_list_newest_first(self, repository):
        first = repository.create_drill(Drill(name="A", duration_minutes=5))
        second = repository.create_drill(Drill(name="B", duration_minutes=5))
        assert [d.id for d in repository.list_drills()] == [second.id, first.id]

    def test_update(self, repository, sample_drill):
        saved = repository.create_drill(sample_drill)
        saved.name = "Inside out"
        saved.court_elements = []
        repository.update_drill(saved)

        loaded = repository.get_drill(saved.id)
        assert loaded.name == "Inside out"
        assert loaded.court_elements == []

    def test_update_missing(self, repository):
        with pytest.raises(PersistenceError):
            repository.update_drill(Drill(name="ghost", duration_minutes=1, id=99))
        with pytest.raises(PersistenceError):
            repository.update_drill(Drill(name="new", duration_minutes=1))

    def test_delete_prunes_routines(self, repository):
        a = repository.create_drill(Drill(name="A", duration_minutes=5))
        b = repository.create_drill(Drill(name="B", duration_minutes=5))
        routine = repository.create_routine(Routine(name="R", drill_ids=[a.id, b.id, a.id]))

        assert repository.delete_drill(a.id)
        assert repository.get_drill(a.id) is None
        assert repository.get_routine(routine.id).drill_ids == [b.id]

    def test_delete_missing(self, repository):
        assert repository.delete_drill(404) is False

    def test_persists_across_instances(self, tmp_path, sample_drill):
        path = tmp_path / "shared.db"
        saved = DrillRepository(path).create_drill(sample_drill)
        assert DrillRepository(path).get_drill(saved.id).name == sample_drill.name


class TestRoutines:

    def test_create_update_delete(self, repository):
        routine = repository.create_routine(Routine(name="Warmup", drill_ids=[1, 2]))
        routine.drill_ids = [2]
        routine.description = "short"
        repository.update_routine(routine)

        loaded = repository.get_routine(routine.id)
        assert loaded.drill_ids == [2]
        assert loaded.description == "short"
        assert repository.delete_routine(routine.id)
        assert repository.list_routines() == []

    def test_replicate(self, repository):
        routine = repository.create_routine(Routine(name="Warmup", drill_ids=[3, 1]))
        copy = repository.replicate_routine(routine.id)

        assert copy.id != routine.id
        assert copy.name == "Warmup (Copy)"
        assert copy.drill_ids == [3, 1]

    def test_replicate_missing(self, repository):
        with pytest.raises(PersistenceError):
            repository.replicate_routine(404)


class TestErrors:

    def test_unopenable_database(self, tmp_path):
        with pytest.raises(PersistenceError):
            DrillRepository(tmp_path / "no_such_dir" / "drills.db")


class TestDefaultLocations:

    def test_defaults_live_outside_the_package(self):
        package_dir = Path(drill_planner.__file__).resolve().parent
        for path in (config.DATABASE_PATH, config.RESULTS_DIR):
            assert package_dir not in path.resolve().parents
            assert path.parent == config.WORKING_DIR
