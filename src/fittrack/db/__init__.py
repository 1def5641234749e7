"""Database layer for fittrack."""

from .engine import get_db_path, init_db
from .repositories import (
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
)
from .store import MAX_BATCH_OPERATIONS, Document, DocumentStore, WriteBatch, WriteOp

__all__ = [
    "Document",
    "DocumentStore",
    "ExerciseRepository",
    "get_db_path",
    "init_db",
    "MAX_BATCH_OPERATIONS",
    "ProgramRepository",
    "SetRepository",
    "WeekRepository",
    "WorkoutRepository",
    "WriteBatch",
    "WriteOp",
]
