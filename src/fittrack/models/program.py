"""Training hierarchy data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .hierarchy import EntityRef

DAY_NAMES = ["", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(value)
    return utc_now()


def _format_timestamp(value: datetime) -> str:
    return value.isoformat()


class ExerciseType(str, Enum):
    """How an exercise's sets are measured."""

    STRENGTH = "strength"
    CARDIO = "cardio"
    TIME_BASED = "time-based"
    BODYWEIGHT = "bodyweight"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return {
            ExerciseType.STRENGTH: "Strength",
            ExerciseType.CARDIO: "Cardio",
            ExerciseType.TIME_BASED: "Time-based",
            ExerciseType.BODYWEIGHT: "Bodyweight",
            ExerciseType.CUSTOM: "Custom",
        }[self]

    @classmethod
    def parse(cls, value: str | None) -> "ExerciseType":
        """Parse a stored value; unknown values fall back to custom."""
        normalized = (value or "").strip().lower()
        if normalized in ("timebased", "time_based"):
            return cls.TIME_BASED
        try:
            return cls(normalized)
        except ValueError:
            return cls.CUSTOM


@dataclass
class Program:
    """A training program, the root of a user's hierarchy."""

    name: str
    user_id: str
    description: str | None = None
    is_archived: bool = False
    id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def ref(self) -> EntityRef:
        """Reference to this program's document."""
        return EntityRef(user_id=self.user_id, program_id=self.id)

    @property
    def is_valid_name(self) -> bool:
        stripped = self.name.strip()
        return 0 < len(stripped) <= 100

    @property
    def is_valid_description(self) -> bool:
        return self.description is None or len(self.description) <= 500

    def to_dict(self) -> dict:
        """Convert to document fields."""
        return {
            "name": self.name,
            "description": self.description,
            "isArchived": self.is_archived,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
            "userId": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Program":
        """Create from document fields."""
        return cls(
            id=id,
            name=data["name"],
            user_id=data["userId"],
            description=data.get("description"),
            is_archived=data.get("isArchived", False),
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class Week:
    """A week within a program."""

    name: str
    order: int
    user_id: str
    program_id: str
    notes: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def ref(self) -> EntityRef:
        """Reference to this week's document."""
        return EntityRef(user_id=self.user_id, program_id=self.program_id, week_id=self.id)

    @property
    def is_valid_name(self) -> bool:
        return bool(self.name.strip())

    @property
    def is_valid_order(self) -> bool:
        return self.order > 0

    def duplicate(self, name: str, new_id: str | None = None) -> "Week":
        """Copy into the same program under a new name with fresh timestamps."""
        now = utc_now()
        return Week(
            id=new_id,
            name=name,
            order=self.order,
            notes=self.notes,
            user_id=self.user_id,
            program_id=self.program_id,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to document fields."""
        return {
            "name": self.name,
            "order": self.order,
            "notes": self.notes,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
            "userId": self.user_id,
            "programId": self.program_id,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Week":
        """Create from document fields."""
        return cls(
            id=id,
            name=data["name"],
            order=data["order"],
            notes=data.get("notes"),
            user_id=data["userId"],
            program_id=data["programId"],
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class Workout:
    """A training session within a week."""

    name: str
    order_index: int
    user_id: str
    program_id: str
    week_id: str
    day_of_week: int | None = None  # 1-7, Monday-Sunday
    notes: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def ref(self) -> EntityRef:
        """Reference to this workout's document."""
        return EntityRef(
            user_id=self.user_id,
            program_id=self.program_id,
            week_id=self.week_id,
            workout_id=self.id,
        )

    @property
    def is_valid_name(self) -> bool:
        stripped = self.name.strip()
        return 0 < len(stripped) <= 200

    @property
    def is_valid_day_of_week(self) -> bool:
        return self.day_of_week is None or 1 <= self.day_of_week <= 7

    @property
    def day_of_week_name(self) -> str:
        """Weekday name, or an empty string when unscheduled."""
        if self.day_of_week is None or not self.is_valid_day_of_week:
            return ""
        return DAY_NAMES[self.day_of_week]

    def duplicate(self, week: EntityRef, new_id: str | None = None) -> "Workout":
        """Copy under another week, keeping scalar fields."""
        now = utc_now()
        return Workout(
            id=new_id,
            name=self.name,
            order_index=self.order_index,
            day_of_week=self.day_of_week,
            notes=self.notes,
            user_id=week.user_id,
            program_id=week.program_id,
            week_id=week.week_id,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to document fields."""
        return {
            "name": self.name,
            "dayOfWeek": self.day_of_week,
            "orderIndex": self.order_index,
            "notes": self.notes,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
            "userId": self.user_id,
            "programId": self.program_id,
            "weekId": self.week_id,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Workout":
        """Create from document fields."""
        return cls(
            id=id,
            name=data["name"],
            order_index=data["orderIndex"],
            day_of_week=data.get("dayOfWeek"),
            notes=data.get("notes"),
            user_id=data["userId"],
            program_id=data["programId"],
            week_id=data["weekId"],
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class Exercise:
    """An exercise within a workout."""

    name: str
    exercise_type: ExerciseType
    order_index: int
    user_id: str
    program_id: str
    week_id: str
    workout_id: str
    notes: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def ref(self) -> EntityRef:
        """Reference to this exercise's document."""
        return EntityRef(
            user_id=self.user_id,
            program_id=self.program_id,
            week_id=self.week_id,
            workout_id=self.workout_id,
            exercise_id=self.id,
        )

    def duplicate(self, workout: EntityRef, new_id: str | None = None) -> "Exercise":
        """Copy under another workout, keeping scalar fields."""
        now = utc_now()
        return Exercise(
            id=new_id,
            name=self.name,
            exercise_type=self.exercise_type,
            order_index=self.order_index,
            notes=self.notes,
            user_id=workout.user_id,
            program_id=workout.program_id,
            week_id=workout.week_id,
            workout_id=workout.workout_id,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to document fields."""
        return {
            "name": self.name,
            "exerciseType": self.exercise_type.value,
            "orderIndex": self.order_index,
            "notes": self.notes,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
            "userId": self.user_id,
            "programId": self.program_id,
            "weekId": self.week_id,
            "workoutId": self.workout_id,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Exercise":
        """Create from document fields."""
        return cls(
            id=id,
            name=data["name"],
            exercise_type=ExerciseType.parse(data.get("exerciseType")),
            order_index=data["orderIndex"],
            notes=data.get("notes"),
            user_id=data["userId"],
            program_id=data["programId"],
            week_id=data["weekId"],
            workout_id=data["workoutId"],
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


@dataclass
class ExerciseSet:
    """A single set of an exercise."""

    set_number: int
    user_id: str
    program_id: str
    week_id: str
    workout_id: str
    exercise_id: str
    reps: int | None = None
    weight: float | None = None  # kg
    duration: int | None = None  # seconds
    distance: float | None = None  # meters
    rest_time: int | None = None  # seconds
    checked: bool = False
    notes: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def ref(self) -> EntityRef:
        """Reference to this set's document."""
        return EntityRef(
            user_id=self.user_id,
            program_id=self.program_id,
            week_id=self.week_id,
            workout_id=self.workout_id,
            exercise_id=self.exercise_id,
            set_id=self.id,
        )

    @property
    def has_at_least_one_metric(self) -> bool:
        """Whether reps, duration or distance holds a positive value."""
        return any(
            value is not None and value > 0
            for value in (self.reps, self.duration, self.distance)
        )

    @property
    def has_valid_numeric_values(self) -> bool:
        return all(
            value is None or value >= 0
            for value in (self.reps, self.weight, self.duration, self.distance, self.rest_time)
        )

    def is_valid_for_exercise_type(self, exercise_type: ExerciseType) -> bool:
        """Check the metric the exercise type requires."""
        if exercise_type in (ExerciseType.STRENGTH, ExerciseType.BODYWEIGHT):
            return self.reps is not None and self.reps > 0
        if exercise_type in (ExerciseType.CARDIO, ExerciseType.TIME_BASED):
            return self.duration is not None and self.duration > 0
        return self.has_at_least_one_metric

    def is_valid(self, exercise_type: ExerciseType) -> bool:
        return (
            self.has_valid_numeric_values
            and self.set_number > 0
            and self.is_valid_for_exercise_type(exercise_type)
        )

    def duplicate(
        self,
        exercise: EntityRef,
        exercise_type: ExerciseType,
        new_id: str | None = None,
    ) -> "ExerciseSet":
        """Copy under another exercise as a fresh, unperformed set.

        Strength sets lose their weight so it is entered again; every
        other type keeps all metrics.
        """
        now = utc_now()
        weight = None if exercise_type is ExerciseType.STRENGTH else self.weight
        return ExerciseSet(
            id=new_id,
            set_number=self.set_number,
            reps=self.reps,
            weight=weight,
            duration=self.duration,
            distance=self.distance,
            rest_time=self.rest_time,
            checked=False,
            notes=self.notes,
            user_id=exercise.user_id,
            program_id=exercise.program_id,
            week_id=exercise.week_id,
            workout_id=exercise.workout_id,
            exercise_id=exercise.exercise_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def display_string(self) -> str:
        """Short summary, e.g. "12 reps × 100kg"."""
        parts = []
        if self.reps is not None:
            parts.append(f"{self.reps} reps")
        if self.weight is not None:
            decimals = 0 if self.weight == round(self.weight) else 1
            parts.append(f"{self.weight:.{decimals}f}kg")
        if self.duration is not None:
            minutes, seconds = divmod(self.duration, 60)
            parts.append(f"{minutes}m {seconds}s" if minutes > 0 else f"{seconds}s")
        if self.distance is not None:
            if self.distance >= 1000:
                parts.append(f"{self.distance / 1000:.2f}km")
            else:
                parts.append(f"{self.distance:.0f}m")
        if self.rest_time is not None:
            parts.append(f"rest: {self.rest_time}s")
        return " × ".join(parts) if parts else "Empty set"

    def to_dict(self) -> dict:
        """Convert to document fields."""
        return {
            "setNumber": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "duration": self.duration,
            "distance": self.distance,
            "restTime": self.rest_time,
            "checked": self.checked,
            "notes": self.notes,
            "createdAt": _format_timestamp(self.created_at),
            "updatedAt": _format_timestamp(self.updated_at),
            "userId": self.user_id,
            "programId": self.program_id,
            "weekId": self.week_id,
            "workoutId": self.workout_id,
            "exerciseId": self.exercise_id,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "ExerciseSet":
        """Create from document fields."""
        return cls(
            id=id,
            set_number=data.get("setNumber", 1),
            reps=data.get("reps"),
            weight=data.get("weight"),
            duration=data.get("duration"),
            distance=data.get("distance"),
            rest_time=data.get("restTime"),
            checked=data.get("checked", False),
            notes=data.get("notes"),
            user_id=data["userId"],
            program_id=data["programId"],
            week_id=data["weekId"],
            workout_id=data["workoutId"],
            exercise_id=data["exerciseId"],
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )
