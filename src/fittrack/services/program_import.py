"""Create a whole program tree from a nested JSON document."""

import logging

from ..db.store import DocumentStore
from ..errors import InvalidArgumentError
from ..models.program import Exercise, ExerciseSet, ExerciseType, Program, Week, Workout
from .cascade import BATCH_SAFETY_THRESHOLD, BatchWriter

logger = logging.getLogger(__name__)


async def import_program_tree(
    store: DocumentStore,
    user_id: str,
    data: dict,
    batch_threshold: int = BATCH_SAFETY_THRESHOLD,
) -> tuple[str, int]:
    """Write a program and all nested weeks, workouts, exercises and sets.

    Missing ordering fields default to the item's position. Returns the
    new program id and the number of documents written.
    """
    if not data.get("name"):
        raise InvalidArgumentError("Program name is required")

    writer = BatchWriter(store, batch_threshold)
    program = Program(
        id=store.new_id(),
        name=data["name"],
        description=data.get("description"),
        user_id=user_id,
    )
    await writer.set(program.ref.path, program.to_dict())
    written = 1

    for week_pos, week_data in enumerate(data.get("weeks", [])):
        week = Week(
            id=store.new_id(),
            name=week_data.get("name") or f"Week {week_pos + 1}",
            order=week_data.get("order", week_pos + 1),
            notes=week_data.get("notes"),
            user_id=user_id,
            program_id=program.id,
        )
        await writer.set(week.ref.path, week.to_dict())
        written += 1

        for workout_pos, workout_data in enumerate(week_data.get("workouts", [])):
            workout = Workout(
                id=store.new_id(),
                name=workout_data.get("name") or f"Workout {workout_pos + 1}",
                order_index=workout_data.get("orderIndex", workout_pos),
                day_of_week=workout_data.get("dayOfWeek"),
                notes=workout_data.get("notes"),
                user_id=user_id,
                program_id=program.id,
                week_id=week.id,
            )
            await writer.set(workout.ref.path, workout.to_dict())
            written += 1

            for exercise_pos, exercise_data in enumerate(workout_data.get("exercises", [])):
                exercise = Exercise(
                    id=store.new_id(),
                    name=exercise_data.get("name") or f"Exercise {exercise_pos + 1}",
                    exercise_type=ExerciseType.parse(exercise_data.get("exerciseType")),
                    order_index=exercise_data.get("orderIndex", exercise_pos),
                    notes=exercise_data.get("notes"),
                    user_id=user_id,
                    program_id=program.id,
                    week_id=week.id,
                    workout_id=workout.id,
                )
                await writer.set(exercise.ref.path, exercise.to_dict())
                written += 1

                exercise_ref = exercise.ref
                for set_pos, set_data in enumerate(exercise_data.get("sets", [])):
                    exercise_set = ExerciseSet(
                        id=store.new_id(),
                        set_number=set_data.get("setNumber", set_pos + 1),
                        reps=set_data.get("reps"),
                        weight=set_data.get("weight"),
                        duration=set_data.get("duration"),
                        distance=set_data.get("distance"),
                        rest_time=set_data.get("restTime"),
                        checked=set_data.get("checked", False),
                        notes=set_data.get("notes"),
                        user_id=user_id,
                        program_id=exercise_ref.program_id,
                        week_id=exercise_ref.week_id,
                        workout_id=exercise_ref.workout_id,
                        exercise_id=exercise_ref.exercise_id,
                    )
                    await writer.set(exercise_set.ref.path, exercise_set.to_dict())
                    written += 1

    await writer.flush()
    logger.info(
        "Imported program %s (%d documents, %d batch(es))", program.id, written, writer.commits
    )
    return program.id, written

