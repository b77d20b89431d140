"""Pytest configuration and fixtures."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from gtbfit_core.db import make_engine, make_session_factory
from gtbfit_core.init_db import init_db
from gtbfit_core.models import ExerciseLogEntry, FoodLogEntry
from gtbfit_core.store import RecordStore


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def session_factory(temp_db_path):
    engine = make_engine(f"sqlite:///{temp_db_path}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    with RecordStore(session_factory) as record_store:
        yield record_store


@pytest.fixture
def sample_foods():
    """Apple and Banana on Jan 1, Toast on Jan 2."""
    return [
        FoodLogEntry(food="Apple", calories=95, protein=0, timestamp=datetime(2025, 1, 1, 8, 0)),
        FoodLogEntry(food="Banana", calories=105, protein=1, timestamp=datetime(2025, 1, 1, 12, 30)),
        FoodLogEntry(food="Toast", calories=120, protein=4, timestamp=datetime(2025, 1, 2, 7, 15)),
    ]


@pytest.fixture
def sample_exercises():
    return [
        ExerciseLogEntry(
            muscle_group="Chest",
            exercise_name="Bench Press",
            weight=135.0,
            reps=10,
            time=0,
            timestamp=datetime(2025, 1, 1, 17, 0),
        ),
        ExerciseLogEntry(
            muscle_group="Chest",
            exercise_name="Bench Press",
            weight=155.0,
            reps=5,
            time=0,
            timestamp=datetime(2025, 1, 1, 17, 10),
        ),
        ExerciseLogEntry(
            muscle_group="Legs",
            exercise_name="Squat",
            weight=185.0,
            reps=8,
            time=2,
            timestamp=datetime(2025, 1, 3, 18, 0),
        ),
    ]
