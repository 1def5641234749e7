"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from fittrack.db import DocumentStore, WeekRepository, init_db
from fittrack.models import EntityRef
from fittrack.services import import_program_tree

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_program_data(
    weeks: int = 1,
    workouts: int = 2,
    exercises: int = 2,
    sets: int = 3,
    exercise_type: str = "strength",
) -> dict:
    """Build a nested program document with the given fan-out."""
    return {
        "name": "Test Program",
        "description": "Program used in tests",
        "weeks": [
            {
                "name": f"Week {w + 1}",
                "notes": None,
                "workouts": [
                    {
                        "name": f"Workout {i + 1}",
                        "dayOfWeek": (i % 7) + 1,
                        "exercises": [
                            {
                                "name": f"Exercise {e + 1}",
                                "exerciseType": exercise_type,
                                "sets": [
                                    {"reps": 10, "weight": 100.0, "duration": 60, "checked": True}
                                    for _ in range(sets)
                                ],
                            }
                            for e in range(exercises)
                        ],
                    }
                    for i in range(workouts)
                ],
            }
            for w in range(weeks)
        ],
    }


class RecordingStore(DocumentStore):
    """Document store that records every committed batch."""

    def __init__(self, db_path, fail_on_commit: int | None = None):
        super().__init__(db_path)
        self.fail_on_commit = fail_on_commit
        self.commit_calls = 0
        self.batches: list[list] = []

    async def commit_batch(self, ops):
        self.commit_calls += 1
        if self.fail_on_commit == self.commit_calls:
            raise RuntimeError("backend unavailable")
        await super().commit_batch(ops)
        self.batches.append(list(ops))

    @property
    def ops(self) -> list:
        return [op for batch in self.batches for op in batch]


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def store(temp_db_path):
    """An initialized, empty document store."""
    await init_db(temp_db_path)
    return DocumentStore(temp_db_path)


@pytest.fixture
def seed_program(store):
    """Factory importing a program; returns (program ref, week refs)."""

    async def _seed(user_id: str = USER_ID, **fan_out):
        program_id, _ = await import_program_tree(store, user_id, make_program_data(**fan_out))
        program_ref = EntityRef(user_id=user_id, program_id=program_id)
        weeks = await WeekRepository(store=store).list_children(program_ref)
        return program_ref, [week.ref for week in weeks]

    return _seed
