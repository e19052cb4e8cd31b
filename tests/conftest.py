"""
Pytest fixtures for tennis drill planner tests.
"""
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from drill_planner.models import Player, Shot, Movement, Drill
from drill_planner.playback.scheduler import ManualScheduler
from drill_planner.storage.repository import DrillRepository


@pytest.fixture
def player():
    """Single player near the top baseline."""
    return Player(id=1, x=100, y=100)


@pytest.fixture
def single_shot(player):
    """One straight 200 px shot down the court: 1000 ms of ball flight."""
    return [
        player,
        Shot(id=2, player_id=1, shot_type="forehand",
             start_x=100, start_y=100, end_x=100, end_y=300, sequence=1),
    ]


@pytest.fixture
def move_then_shot(player):
    """Player moves 100 px, then hits from the new spot."""
    return [
        player,
        Movement(id=2, player_id=1, start_x=100, start_y=100,
                 end_x=100, end_y=200, sequence=1),
        Shot(id=3, player_id=1, shot_type="volley",
             start_x=100, start_y=100, end_x=100, end_y=400, sequence=2),
    ]


@pytest.fixture
def two_player_rally():
    """Two players trading shots with a recovery movement in between."""
    return [
        Player(id=1, x=150, y=80),
        Player(id=2, x=150, y=520),
        Shot(id=3, player_id=1, shot_type="serve",
             start_x=150, start_y=80, end_x=150, end_y=480, sequence=1),
        Movement(id=4, player_id=1, start_x=150, start_y=80,
                 end_x=150, end_y=150, sequence=2),
        Shot(id=5, player_id=2, shot_type="backhand",
             start_x=150, start_y=520, end_x=100, end_y=120, sequence=3),
    ]


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def repository(tmp_path):
    return DrillRepository(tmp_path / "drills.db")


@pytest.fixture
def sample_drill(single_shot):
    return Drill(
        name="Down the line",
        duration_minutes=5,
        description="Forehand down the line",
        court_elements=[e.to_dict() for e in single_shot],
    )
