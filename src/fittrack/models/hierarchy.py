"""Entity levels and hierarchical document references."""

from dataclasses import dataclass, replace
from enum import Enum

from ..errors import InvalidArgumentError

USERS_COLLECTION = "users"


class EntityLevel(str, Enum):
    """Levels of the Program → Week → Workout → Exercise → Set tree."""

    PROGRAM = "program"
    WEEK = "week"
    WORKOUT = "workout"
    EXERCISE = "exercise"
    SET = "set"

    @property
    def collection(self) -> str:
        """Collection name holding documents of this level."""
        return _COLLECTIONS[self]

    @property
    def id_field(self) -> str:
        """Field descendants use to reference an entity of this level."""
        return f"{self.value}Id"

    @property
    def child(self) -> "EntityLevel | None":
        """The level directly below, or None for sets."""
        index = _ORDER.index(self)
        return _ORDER[index + 1] if index + 1 < len(_ORDER) else None

    @property
    def parent(self) -> "EntityLevel | None":
        """The level directly above, or None for programs."""
        index = _ORDER.index(self)
        return _ORDER[index - 1] if index > 0 else None

    @property
    def order_field(self) -> str | None:
        """Field siblings are ordered by."""
        return _ORDER_FIELDS[self]

    @property
    def depth(self) -> int:
        """Zero-based depth below the user root."""
        return _ORDER.index(self)

    @classmethod
    def from_collection(cls, collection: str) -> "EntityLevel":
        """Look up a level by its collection name."""
        for level, name in _COLLECTIONS.items():
            if name == collection:
                return level
        raise InvalidArgumentError(f"Unknown collection: {collection}")


_ORDER = [
    EntityLevel.PROGRAM,
    EntityLevel.WEEK,
    EntityLevel.WORKOUT,
    EntityLevel.EXERCISE,
    EntityLevel.SET,
]

_COLLECTIONS = {
    EntityLevel.PROGRAM: "programs",
    EntityLevel.WEEK: "weeks",
    EntityLevel.WORKOUT: "workouts",
    EntityLevel.EXERCISE: "exercises",
    EntityLevel.SET: "sets",
}

_ORDER_FIELDS = {
    EntityLevel.PROGRAM: None,
    EntityLevel.WEEK: "order",
    EntityLevel.WORKOUT: "orderIndex",
    EntityLevel.EXERCISE: "orderIndex",
    EntityLevel.SET: "setNumber",
}

# Attribute names on EntityRef, top-down
_ID_ATTRS = ["program_id", "week_id", "workout_id", "exercise_id", "set_id"]


@dataclass(frozen=True)
class EntityRef:
    """Reference to one entity: owner id plus the full ancestor chain.

    The deepest id that is set determines the level. Ids must be given
    contiguously from the program down.
    """

    user_id: str
    program_id: str
    week_id: str | None = None
    workout_id: str | None = None
    exercise_id: str | None = None
    set_id: str | None = None

    def __post_init__(self):
        if not self.user_id:
            raise InvalidArgumentError("user_id is required")
        ids = self._ids()
        for attr, value in zip(["user_id", *_ID_ATTRS], [self.user_id, *ids]):
            # An id is exactly one path segment
            if value and (not value.strip() or "/" in value):
                raise InvalidArgumentError(f"Invalid {attr}: {value!r}")
        if not ids[0]:
            raise InvalidArgumentError("program_id is required")
        seen_gap = False
        for attr, value in zip(_ID_ATTRS, ids):
            if not value:
                seen_gap = True
            elif seen_gap:
                raise InvalidArgumentError(f"{attr} given without its ancestors")

    def _ids(self) -> list[str | None]:
        return [getattr(self, attr) for attr in _ID_ATTRS]

    @property
    def level(self) -> EntityLevel:
        """Level of the referenced entity."""
        depth = sum(1 for value in self._ids() if value) - 1
        return _ORDER[depth]

    @property
    def entity_id(self) -> str:
        """Id of the referenced entity."""
        return getattr(self, _ID_ATTRS[self.level.depth])

    @property
    def path(self) -> str:
        """Full document path."""
        return f"{self.collection_path}/{self.entity_id}"

    @property
    def collection_path(self) -> str:
        """Path of the collection holding this entity."""
        if self.parent is None:
            return f"{USERS_COLLECTION}/{self.user_id}/{self.level.collection}"
        return f"{self.parent.path}/{self.level.collection}"

    @property
    def parent(self) -> "EntityRef | None":
        """Reference to the parent entity, or None for programs."""
        if self.level is EntityLevel.PROGRAM:
            return None
        return replace(self, **{_ID_ATTRS[self.level.depth]: None})

    def child(self, entity_id: str) -> "EntityRef":
        """Reference to a child of this entity."""
        if self.level is EntityLevel.SET:
            raise InvalidArgumentError("Sets have no children")
        return replace(self, **{_ID_ATTRS[self.level.depth + 1]: entity_id})

    def child_collection_path(self) -> str:
        """Path of the collection holding this entity's children."""
        child = self.level.child
        if child is None:
            raise InvalidArgumentError("Sets have no children")
        return f"{self.path}/{child.collection}"

    def hierarchy_fields(self) -> dict:
        """Owner and hierarchical id fields a child of this entity must carry."""
        fields = {"userId": self.user_id}
        for level, value in zip(_ORDER, self._ids()):
            if level is EntityLevel.SET or not value:
                break
            fields[level.id_field] = value
        return fields

    def ancestor_fields(self) -> dict:
        """Owner and hierarchical id fields this entity's own document carries."""
        if self.parent is None:
            return {"userId": self.user_id}
        return self.parent.hierarchy_fields()

    @classmethod
    def from_path(cls, path: str) -> "EntityRef":
        """Parse a document path into a reference."""
        segments = [s for s in path.strip("/").split("/") if s]
        if len(segments) < 4 or len(segments) % 2 or segments[0] != USERS_COLLECTION:
            raise InvalidArgumentError(f"Not an entity document path: {path}")
        kwargs = {"user_id": segments[1]}
        pairs = list(zip(segments[2::2], segments[3::2]))
        if len(pairs) > len(_ORDER):
            raise InvalidArgumentError(f"Path too deep: {path}")
        for index, (collection, entity_id) in enumerate(pairs):
            level = EntityLevel.from_collection(collection)
            if level is not _ORDER[index]:
                raise InvalidArgumentError(f"Unexpected collection '{collection}' in {path}")
            kwargs[_ID_ATTRS[index]] = entity_id
        return cls(**kwargs)

    def __str__(self) -> str:
        return self.path
