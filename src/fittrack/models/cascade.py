"""Result models for cascade operations."""

from dataclasses import dataclass, field

from .hierarchy import EntityLevel


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


@dataclass(frozen=True)
class CascadeDeleteCounts:
    """Descendants removed (or about to be removed) along with a deleted entity."""

    weeks: int = 0
    workouts: int = 0
    exercises: int = 0
    sets: int = 0

    @property
    def total_items(self) -> int:
        return self.weeks + self.workouts + self.exercises + self.sets

    @property
    def has_items(self) -> bool:
        return self.total_items > 0

    def get_summary(self) -> str:
        """Comma-separated summary, e.g. "3 workouts, 9 exercises, 27 sets"."""
        parts = []
        if self.weeks > 0:
            parts.append(_plural(self.weeks, "week"))
        if self.workouts > 0:
            parts.append(_plural(self.workouts, "workout"))
        if self.exercises > 0:
            parts.append(_plural(self.exercises, "exercise"))
        if self.sets > 0:
            parts.append(_plural(self.sets, "set"))
        return ", ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "weeks": self.weeks,
            "workouts": self.workouts,
            "exercises": self.exercises,
            "sets": self.sets,
            "totalItems": self.total_items,
        }

    @classmethod
    def from_levels(cls, counts: dict[EntityLevel, int]) -> "CascadeDeleteCounts":
        """Build from a per-level tally."""
        return cls(
            weeks=counts.get(EntityLevel.WEEK, 0),
            workouts=counts.get(EntityLevel.WORKOUT, 0),
            exercises=counts.get(EntityLevel.EXERCISE, 0),
            sets=counts.get(EntityLevel.SET, 0),
        )


@dataclass
class SetMapping:
    """Source set id and its copy."""

    old_set_id: str
    new_set_id: str

    def to_dict(self) -> dict:
        return {"oldSetId": self.old_set_id, "newSetId": self.new_set_id}


@dataclass
class ExerciseMapping:
    """Source exercise id, its copy and its sets' mappings."""

    old_exercise_id: str
    new_exercise_id: str
    sets: list[SetMapping] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "oldExerciseId": self.old_exercise_id,
            "newExerciseId": self.new_exercise_id,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class WorkoutMapping:
    """Source workout id, its copy and its exercises' mappings."""

    old_workout_id: str
    new_workout_id: str
    exercises: list[ExerciseMapping] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "oldWorkoutId": self.old_workout_id,
            "newWorkoutId": self.new_workout_id,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class DuplicationMapping:
    """Every source id of a duplicated week mapped to its new counterpart."""

    old_week_id: str
    new_week_id: str
    new_week_name: str
    workouts: list[WorkoutMapping] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to the callable response shape."""
        return {
            "oldWeekId": self.old_week_id,
            "newWeekId": self.new_week_id,
            "newWeekName": self.new_week_name,
            "workouts": [w.to_dict() for w in self.workouts],
        }

    def id_map(self) -> dict[str, str]:
        """Flatten to {source id: new id} over the whole subtree."""
        ids = {self.old_week_id: self.new_week_id}
        for workout in self.workouts:
            ids[workout.old_workout_id] = workout.new_workout_id
            for exercise in workout.exercises:
                ids[exercise.old_exercise_id] = exercise.new_exercise_id
                for s in exercise.sets:
                    ids[s.old_set_id] = s.new_set_id
        return ids

    @property
    def total_documents(self) -> int:
        """Number of documents created, the week included."""
        return len(self.id_map())
