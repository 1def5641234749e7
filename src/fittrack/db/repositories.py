"""Data access layer for fittrack."""

from pathlib import Path

from ..errors import InvalidArgumentError
from ..models.hierarchy import EntityLevel, EntityRef
from ..models.program import Exercise, ExerciseSet, Program, Week, Workout, utc_now
from .store import DocumentStore

# Fields callers may not change through a partial update
_PROTECTED_FIELDS = {
    "userId", "programId", "weekId", "workoutId", "exerciseId", "createdAt", "updatedAt",
}


class _EntityRepository:
    """Shared CRUD over one level of the hierarchy."""

    level: EntityLevel
    model = None

    def __init__(self, db_path: Path | None = None, store: DocumentStore | None = None):
        self.store = store or DocumentStore(db_path)

    def _check_level(self, ref: EntityRef, level: EntityLevel) -> None:
        if ref.level is not level:
            raise InvalidArgumentError(
                f"Expected a {level.value} reference, got a {ref.level.value}"
            )

    async def create(self, entity) -> str:
        """Create a new entity; allocates an id when none is set."""
        if entity.id is None:
            entity.id = self.store.new_id()
        batch = self.store.batch()
        batch.set(entity.ref.path, entity.to_dict())
        await batch.commit()
        return entity.id

    async def get(self, ref: EntityRef):
        """Get an entity by reference."""
        self._check_level(ref, self.level)
        doc = await self.store.get(ref.path)
        if doc is None:
            return None
        return self.model.from_dict(doc.data, id=doc.id)

    async def list_children(self, parent: EntityRef) -> list:
        """List the children of ``parent`` in display order."""
        self._check_level(parent, self.level.parent)
        docs = await self.store.list_collection(
            parent.child_collection_path(), order_by=self.level.order_field
        )
        return [self.model.from_dict(doc.data, id=doc.id) for doc in docs]

    async def update_fields(self, ref: EntityRef, **fields) -> None:
        """Apply a partial update and refresh ``updatedAt``.

        Fields use their document names (e.g. ``orderIndex``).
        """
        self._check_level(ref, self.level)
        protected = _PROTECTED_FIELDS.intersection(fields)
        if protected:
            raise InvalidArgumentError(f"Cannot update fields: {', '.join(sorted(protected))}")
        fields["updatedAt"] = utc_now().isoformat()

        batch = self.store.batch()
        batch.update(ref.path, fields)
        await batch.commit()

    async def delete(self, ref: EntityRef) -> None:
        """Delete a single document.

        Descendants are left in place; use ``CascadeOperator.delete`` to
        remove an entity together with its subtree.
        """
        self._check_level(ref, self.level)
        batch = self.store.batch()
        batch.delete(ref.path)
        await batch.commit()

    async def reorder(self, parent: EntityRef, ordered_ids: list[str]) -> None:
        """Renumber siblings in the given order in a single batch."""
        self._check_level(parent, self.level.parent)
        # orderIndex is zero-based, order and setNumber start at 1
        start = 0 if self.level.order_field == "orderIndex" else 1
        now = utc_now().isoformat()

        batch = self.store.batch()
        for position, entity_id in enumerate(ordered_ids, start=start):
            batch.update(
                parent.child(entity_id).path,
                {self.level.order_field: position, "updatedAt": now},
            )
        await batch.commit()


class ProgramRepository(_EntityRepository):
    """Repository for programs."""

    level = EntityLevel.PROGRAM
    model = Program

    async def list_for_user(self, user_id: str, include_archived: bool = False) -> list[Program]:
        """List a user's programs, newest first."""
        docs = await self.store.list_collection(f"users/{user_id}/programs")
        programs = [Program.from_dict(doc.data, id=doc.id) for doc in docs]
        if not include_archived:
            programs = [p for p in programs if not p.is_archived]
        return sorted(programs, key=lambda p: p.created_at, reverse=True)

    async def list_children(self, parent: EntityRef) -> list:
        raise InvalidArgumentError("Programs have no parent entity; use list_for_user")

    async def reorder(self, parent: EntityRef, ordered_ids: list[str]) -> None:
        raise InvalidArgumentError("Programs are not ordered")

    async def archive(self, ref: EntityRef) -> None:
        """Archive a program (soft delete)."""
        await self.update_fields(ref, isArchived=True)


class WeekRepository(_EntityRepository):
    """Repository for weeks."""

    level = EntityLevel.WEEK
    model = Week


class WorkoutRepository(_EntityRepository):
    """Repository for workouts."""

    level = EntityLevel.WORKOUT
    model = Workout


class ExerciseRepository(_EntityRepository):
    """Repository for exercises."""

    level = EntityLevel.EXERCISE
    model = Exercise


class SetRepository(_EntityRepository):
    """Repository for exercise sets."""

    level = EntityLevel.SET
    model = ExerciseSet

    async def set_checked(self, ref: EntityRef, checked: bool = True) -> None:
        """Mark a set as performed (or not)."""
        await self.update_fields(ref, checked=checked)

