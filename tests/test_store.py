"""Tests for the document store and its write schema."""

import pytest

from fittrack.db import MAX_BATCH_OPERATIONS, WriteOp
from fittrack.db.schema import validate_document
from fittrack.errors import (
    BatchLimitExceededError,
    InvalidArgumentError,
    NotFoundError,
    SchemaValidationError,
)
from fittrack.models import EntityRef, Program, Week, Workout

from .conftest import USER_ID

PROGRAM_PATH = f"users/{USER_ID}/programs/p1"
WEEK_PATH = f"{PROGRAM_PATH}/weeks/w1"
SET_PATH = f"{WEEK_PATH}/workouts/wo1/exercises/e1/sets/s1"


def program_data(**overrides) -> dict:
    data = Program(id="p1", name="Block", user_id=USER_ID).to_dict()
    data.update(overrides)
    return data


def week_data(**overrides) -> dict:
    data = Week(id="w1", name="Week 1", order=1, user_id=USER_ID, program_id="p1").to_dict()
    data.update(overrides)
    return data


def set_data(**overrides) -> dict:
    data = {
        "setNumber": 1,
        "reps": 10,
        "weight": None,
        "duration": None,
        "distance": None,
        "restTime": None,
        "checked": False,
        "notes": None,
        "createdAt": "2024-01-01T00:00:00+00:00",
        "updatedAt": "2024-01-01T00:00:00+00:00",
        "userId": USER_ID,
        "programId": "p1",
        "weekId": "w1",
        "workoutId": "wo1",
        "exerciseId": "e1",
    }
    data.update(overrides)
    return data


class TestDocumentStore:
    """Tests for basic store reads and writes."""

    async def test_add_and_get(self, store):
        doc_id = await store.add(f"users/{USER_ID}/programs", program_data())

        doc = await store.get(f"users/{USER_ID}/programs/{doc_id}")
        assert doc is not None
        assert doc.id == doc_id
        assert doc.data["name"] == "Block"
        assert len(doc_id) == 20

    async def test_get_missing(self, store):
        assert await store.get(PROGRAM_PATH) is None

    async def test_list_collection_ordered(self, store):
        batch = store.batch()
        batch.set(PROGRAM_PATH, program_data())
        for week_id, order in (("wa", 3), ("wb", 1), ("wc", 2)):
            ref = EntityRef(user_id=USER_ID, program_id="p1", week_id=week_id)
            batch.set(ref.path, week_data(order=order))
        await batch.commit()

        docs = await store.list_collection(f"{PROGRAM_PATH}/weeks", order_by="order")
        assert [d.id for d in docs] == ["wb", "wc", "wa"]

        docs = await store.list_collection(f"{PROGRAM_PATH}/weeks")
        assert [d.id for d in docs] == ["wa", "wb", "wc"]

    async def test_list_collection_only_direct_children(self, store):
        batch = store.batch()
        batch.set(PROGRAM_PATH, program_data())
        batch.set(WEEK_PATH, week_data())
        await batch.commit()

        docs = await store.list_collection(f"users/{USER_ID}/programs")
        assert [d.id for d in docs] == ["p1"]

    async def test_update_merges_fields(self, store):
        await store.batch().set(PROGRAM_PATH, program_data()).commit()

        await store.batch().update(PROGRAM_PATH, {"description": "Heavy"}).commit()

        doc = await store.get(PROGRAM_PATH)
        assert doc.data["description"] == "Heavy"
        assert doc.data["name"] == "Block"

    async def test_update_missing_document(self, store):
        with pytest.raises(NotFoundError):
            await store.batch().update(PROGRAM_PATH, {"name": "X"}).commit()

    async def test_delete_missing_is_noop(self, store):
        await store.batch().delete(PROGRAM_PATH).commit()
        assert await store.get(PROGRAM_PATH) is None

    async def test_batch_cannot_commit_twice(self, store):
        batch = store.batch().set(PROGRAM_PATH, program_data())
        await batch.commit()

        with pytest.raises(InvalidArgumentError):
            await batch.commit()


class TestBatchLimits:
    """Tests for atomic batch application."""

    async def test_oversized_batch_rejected(self, store):
        ops = [
            WriteOp("set", f"users/{USER_ID}/programs/p{i}", program_data())
            for i in range(MAX_BATCH_OPERATIONS + 1)
        ]

        with pytest.raises(BatchLimitExceededError):
            await store.commit_batch(ops)

        assert await store.list_collection(f"users/{USER_ID}/programs") == []

    async def test_batch_at_limit_accepted(self, store):
        ops = [
            WriteOp("set", f"users/{USER_ID}/programs/p{i}", program_data())
            for i in range(MAX_BATCH_OPERATIONS)
        ]
        await store.commit_batch(ops)

        docs = await store.list_collection(f"users/{USER_ID}/programs")
        assert len(docs) == MAX_BATCH_OPERATIONS

    async def test_invalid_write_aborts_whole_batch(self, store):
        batch = store.batch()
        batch.set(PROGRAM_PATH, program_data())
        batch.set(WEEK_PATH, week_data(weekId=None, programId=None))

        with pytest.raises(SchemaValidationError):
            await batch.commit()

        assert await store.get(PROGRAM_PATH) is None


class TestSchema:
    """Tests for write validation."""

    def test_valid_documents(self):
        validate_document(PROGRAM_PATH, program_data())
        validate_document(WEEK_PATH, week_data())
        validate_document(SET_PATH, set_data())

    def test_missing_hierarchical_id(self):
        data = set_data()
        del data["weekId"]

        with pytest.raises(SchemaValidationError) as exc_info:
            validate_document(SET_PATH, data)
        assert exc_info.value.field == "weekId"

    def test_null_hierarchical_id(self):
        with pytest.raises(SchemaValidationError):
            validate_document(SET_PATH, set_data(workoutId=None))

    def test_hierarchical_id_must_match_path(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_document(SET_PATH, set_data(exerciseId="other"))
        assert exc_info.value.field == "exerciseId"

    def test_owner_must_match_path(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_document(PROGRAM_PATH, program_data(userId="someone-else"))
        assert exc_info.value.field == "userId"

    def test_required_field_missing(self):
        data = week_data()
        del data["order"]

        with pytest.raises(SchemaValidationError):
            validate_document(WEEK_PATH, data)

    def test_optional_field_null_or_missing(self):
        data = week_data(notes=None)
        validate_document(WEEK_PATH, data)
        del data["notes"]
        validate_document(WEEK_PATH, data)

    def test_wrong_type(self):
        with pytest.raises(SchemaValidationError):
            validate_document(WEEK_PATH, week_data(order="1"))

    def test_bool_is_not_int(self):
        with pytest.raises(SchemaValidationError):
            validate_document(SET_PATH, set_data(reps=True))

    def test_bad_timestamp(self):
        with pytest.raises(SchemaValidationError):
            validate_document(WEEK_PATH, week_data(createdAt="yesterday"))

    def test_set_needs_a_metric(self):
        with pytest.raises(SchemaValidationError):
            validate_document(SET_PATH, set_data(reps=None, weight=80.0))

    def test_set_with_duration_only(self):
        validate_document(SET_PATH, set_data(reps=None, duration=60))

    def test_day_of_week_range(self):
        ref = EntityRef(user_id=USER_ID, program_id="p1", week_id="w1", workout_id="wo1")
        data = Workout(
            id="wo1", name="Push", order_index=0, day_of_week=8,
            user_id=USER_ID, program_id="p1", week_id="w1",
        ).to_dict()

        with pytest.raises(SchemaValidationError):
            validate_document(ref.path, data)

    def test_unknown_exercise_type(self):
        path = f"{WEEK_PATH}/workouts/wo1/exercises/e1"
        data = {
            "name": "Row",
            "exerciseType": "yoga",
            "orderIndex": 0,
            "createdAt": "2024-01-01T00:00:00+00:00",
            "updatedAt": "2024-01-01T00:00:00+00:00",
            "userId": USER_ID,
            "programId": "p1",
            "weekId": "w1",
            "workoutId": "wo1",
        }
        with pytest.raises(SchemaValidationError):
            validate_document(path, data)

    def test_auxiliary_collection_checks_owner(self):
        path = f"users/{USER_ID}/duplicationLogs/log1"
        validate_document(path, {"userId": USER_ID, "type": "week"})

        with pytest.raises(SchemaValidationError):
            validate_document(path, {"userId": "someone-else"})

    def test_non_user_path_rejected(self):
        with pytest.raises(InvalidArgumentError):
            validate_document("programs/p1", program_data())
