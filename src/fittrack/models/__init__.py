"""Data models for fittrack."""

from .cascade import (
    CascadeDeleteCounts,
    DuplicationMapping,
    ExerciseMapping,
    SetMapping,
    WorkoutMapping,
)
from .hierarchy import EntityLevel, EntityRef
from .program import Exercise, ExerciseSet, ExerciseType, Program, Week, Workout

__all__ = [
    "CascadeDeleteCounts",
    "DuplicationMapping",
    "EntityLevel",
    "EntityRef",
    "Exercise",
    "ExerciseMapping",
    "ExerciseSet",
    "ExerciseType",
    "Program",
    "SetMapping",
    "Week",
    "Workout",
    "WorkoutMapping",
]
