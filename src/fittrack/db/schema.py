"""Write validation at the storage boundary.

Every document written under ``users/{userId}`` is checked here before a
batch is applied. Required fields must be present, non-null and of the
right type; optional fields may be missing or null but never of the wrong
type. Entity documents must carry ``userId`` and each hierarchical id
field, all matching the path being written.
"""

from datetime import datetime

from ..errors import InvalidArgumentError, SchemaValidationError
from ..models.hierarchy import USERS_COLLECTION, EntityLevel, EntityRef

EXERCISE_TYPES = {"strength", "cardio", "time-based", "bodyweight", "custom"}

# field -> (type name, required)
FIELD_RULES: dict[EntityLevel, dict[str, tuple[str, bool]]] = {
    EntityLevel.PROGRAM: {
        "name": ("string", True),
        "description": ("string", False),
        "isArchived": ("bool", True),
        "createdAt": ("timestamp", True),
        "updatedAt": ("timestamp", True),
    },
    EntityLevel.WEEK: {
        "name": ("string", True),
        "order": ("int", True),
        "notes": ("string", False),
        "createdAt": ("timestamp", True),
        "updatedAt": ("timestamp", True),
    },
    EntityLevel.WORKOUT: {
        "name": ("string", True),
        "dayOfWeek": ("int", False),
        "orderIndex": ("int", True),
        "notes": ("string", False),
        "createdAt": ("timestamp", True),
        "updatedAt": ("timestamp", True),
    },
    EntityLevel.EXERCISE: {
        "name": ("string", True),
        "exerciseType": ("string", True),
        "orderIndex": ("int", True),
        "notes": ("string", False),
        "createdAt": ("timestamp", True),
        "updatedAt": ("timestamp", True),
    },
    EntityLevel.SET: {
        "setNumber": ("int", True),
        "reps": ("int", False),
        "weight": ("number", False),
        "duration": ("int", False),
        "distance": ("number", False),
        "restTime": ("int", False),
        "checked": ("bool", True),
        "notes": ("string", False),
        "createdAt": ("timestamp", True),
        "updatedAt": ("timestamp", True),
    },
}

SET_METRICS = ("reps", "duration", "distance")


def _is_type(value, type_name: str) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "timestamp":
        if not isinstance(value, str):
            return False
        try:
            datetime.fromisoformat(value)
        except ValueError:
            return False
        return True
    raise ValueError(f"Unknown field type: {type_name}")


def entity_ref_for_path(path: str) -> EntityRef | None:
    """Parse an entity document path; None for other per-user collections."""
    segments = path.strip("/").split("/")
    if len(segments) < 4 or len(segments) % 2 or segments[0] != USERS_COLLECTION:
        raise InvalidArgumentError(f"Not a user document path: {path}")
    if segments[2] != EntityLevel.PROGRAM.collection:
        return None
    return EntityRef.from_path(path)


def validate_document(path: str, data: dict) -> None:
    """Validate a full document about to be stored at ``path``.

    Raises:
        SchemaValidationError: If the document violates the schema.
    """
    segments = path.strip("/").split("/")
    ref = entity_ref_for_path(path)

    if ref is None:
        # Auxiliary per-user collections only need a matching owner.
        if data.get("userId") != segments[1]:
            raise SchemaValidationError(path, "userId", "must match the path owner")
        return

    for key, expected in ref.ancestor_fields().items():
        value = data.get(key)
        if value is None:
            raise SchemaValidationError(path, key, "is required")
        if value != expected:
            raise SchemaValidationError(path, key, f"does not match path ('{value}' != '{expected}')")

    for key, (type_name, required) in FIELD_RULES[ref.level].items():
        value = data.get(key)
        if value is None:
            if required:
                raise SchemaValidationError(path, key, "is required")
            continue
        if not _is_type(value, type_name):
            raise SchemaValidationError(path, key, f"must be of type {type_name}")

    if ref.level is EntityLevel.WORKOUT:
        day = data.get("dayOfWeek")
        if day is not None and not 1 <= day <= 7:
            raise SchemaValidationError(path, "dayOfWeek", "must be between 1 and 7")

    if ref.level is EntityLevel.EXERCISE and data["exerciseType"] not in EXERCISE_TYPES:
        raise SchemaValidationError(path, "exerciseType", "is not a known exercise type")

    if ref.level is EntityLevel.SET and all(data.get(m) is None for m in SET_METRICS):
        raise SchemaValidationError(path, "reps", "at least one of reps, duration, distance is required")
