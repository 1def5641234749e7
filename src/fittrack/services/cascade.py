"""Cascading delete and duplicate over the training hierarchy.

Both operations walk the subtree below a root entity and issue one write
per document through a ``BatchWriter``, which commits and rotates batches
so that none carries more than the safety threshold. Batches are committed
one after another. There is no atomicity across batches: if batch K fails,
batches 1..K-1 stay applied and the caller gets a ``CascadeCommitError``.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable

from ..db.store import MAX_BATCH_OPERATIONS, Document, DocumentStore, WriteOp
from ..errors import (
    CascadeCommitError,
    FitTrackError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
)
from ..models.cascade import (
    CascadeDeleteCounts,
    DuplicationMapping,
    ExerciseMapping,
    SetMapping,
    WorkoutMapping,
)
from ..models.hierarchy import USERS_COLLECTION, EntityLevel, EntityRef
from ..models.program import Exercise, ExerciseSet, Week, Workout, utc_now
from ..utils.copy_naming import generate_copy_name

logger = logging.getLogger(__name__)

# Kept below the store's 500-operation ceiling
BATCH_SAFETY_THRESHOLD = 450

DUPLICATION_LOGS_COLLECTION = "duplicationLogs"


class BatchWriter:
    """Explicit batching state: the open batch and its operation count.

    An operation that would push the open batch past the threshold first
    flushes it. ``flush`` commits whatever is pending and starts a new
    batch; it must be called once more after the last write.
    """

    def __init__(self, store: DocumentStore, threshold: int = BATCH_SAFETY_THRESHOLD):
        if not 1 <= threshold <= MAX_BATCH_OPERATIONS:
            raise InvalidArgumentError(
                f"Batch threshold must be between 1 and {MAX_BATCH_OPERATIONS}"
            )
        self.store = store
        self.threshold = threshold
        self.batch = store.batch()
        self.op_count = 0
        self.commits = 0

    async def write(self, op: WriteOp) -> None:
        """Append a write, committing the open batch first if it is full."""
        if self.op_count >= self.threshold:
            await self.flush()
        self.batch.ops.append(op)
        self.op_count += 1

    async def set(self, path: str, data: dict) -> None:
        await self.write(WriteOp("set", path, dict(data)))

    async def update(self, path: str, fields: dict) -> None:
        await self.write(WriteOp("update", path, dict(fields)))

    async def delete(self, path: str) -> None:
        await self.write(WriteOp("delete", path))

    async def flush(self) -> None:
        """Commit the open batch and start a fresh one."""
        if self.op_count == 0:
            return
        await self.batch.commit()
        self.commits += 1
        logger.debug("Committed batch %d (%d operations)", self.commits, self.op_count)
        self.batch = self.store.batch()
        self.op_count = 0


@dataclass
class SubtreeEntry:
    """A descendant document found while walking a subtree."""

    level: EntityLevel
    document: Document
    parent_path: str


async def collect_descendants(store: DocumentStore, ref: EntityRef) -> list[SubtreeEntry]:
    """List every descendant of ``ref``, breadth-first.

    Siblings come back in their display order (``order``, ``orderIndex`` or
    ``setNumber``, then id), so the result is deterministic. A parent always
    precedes its children.
    """
    entries = []
    queue: deque[tuple[EntityLevel, str]] = deque()
    if ref.level.child is not None:
        queue.append((ref.level.child, ref.path))

    while queue:
        level, parent_path = queue.popleft()
        docs = await store.list_collection(
            f"{parent_path}/{level.collection}", order_by=level.order_field
        )
        for doc in docs:
            entries.append(SubtreeEntry(level=level, document=doc, parent_path=parent_path))
            if level.child is not None:
                queue.append((level.child, doc.path))

    return entries


def _entity_data(doc: Document) -> dict:
    """Document fields with owner and hierarchical ids taken from its path."""
    return {**doc.data, **EntityRef.from_path(doc.path).ancestor_fields()}


def count_by_level(entries: Iterable[SubtreeEntry]) -> CascadeDeleteCounts:
    """Tally subtree entries per level."""
    tally: dict[EntityLevel, int] = {}
    for entry in entries:
        tally[entry.level] = tally.get(entry.level, 0) + 1
    return CascadeDeleteCounts.from_levels(tally)


class CascadeOperator:
    """Deletes and duplicates entities together with their descendants."""

    def __init__(self, store: DocumentStore, batch_threshold: int = BATCH_SAFETY_THRESHOLD):
        if not 1 <= batch_threshold <= MAX_BATCH_OPERATIONS:
            raise InvalidArgumentError(
                f"Batch threshold must be between 1 and {MAX_BATCH_OPERATIONS}"
            )
        self.store = store
        self.batch_threshold = batch_threshold

    async def _load_root(self, caller_id: str | None, ref: EntityRef) -> Document:
        """Check identity, ownership and existence before any write."""
        if not caller_id:
            raise UnauthenticatedError("User must be authenticated.")
        if ref.user_id != caller_id:
            raise PermissionDeniedError(f"You do not own this {ref.level.value}.")

        doc = await self.store.get(ref.path)
        if doc is None:
            raise NotFoundError(f"Source {ref.level.value} not found.")

        owner = doc.data.get("userId")
        if owner and owner != caller_id:
            raise PermissionDeniedError(f"You do not own this {ref.level.value}.")
        return doc

    async def _apply(self, ops: list[WriteOp]) -> int:
        """Push writes through a BatchWriter; returns the number of commits."""
        writer = BatchWriter(self.store, self.batch_threshold)
        total_batches = math.ceil(len(ops) / self.batch_threshold)
        try:
            for op in ops:
                await writer.write(op)
            await writer.flush()
        except FitTrackError as exc:
            logger.error(
                "Cascade write rejected after %d of %d batches: %s",
                writer.commits, total_batches, exc,
            )
            raise
        except Exception as exc:
            logger.exception(
                "Cascade write failed after %d of %d batches", writer.commits, total_batches
            )
            raise CascadeCommitError(
                f"Cascade failed after {writer.commits} of {total_batches} batches: {exc}",
                committed_batches=writer.commits,
                total_batches=total_batches,
            ) from exc
        return writer.commits

    async def get_cascade_delete_counts(
        self, caller_id: str | None, ref: EntityRef
    ) -> CascadeDeleteCounts:
        """Count the descendants a delete of ``ref`` would remove."""
        await self._load_root(caller_id, ref)
        return count_by_level(await collect_descendants(self.store, ref))

    async def delete(self, caller_id: str | None, ref: EntityRef) -> CascadeDeleteCounts:
        """Delete an entity and every descendant.

        Deletes are issued leaf-to-root. Returns the number of descendants
        removed per level (the root itself is not counted).
        """
        await self._load_root(caller_id, ref)
        descendants = await collect_descendants(self.store, ref)

        ops = [WriteOp("delete", entry.document.path) for entry in reversed(descendants)]
        ops.append(WriteOp("delete", ref.path))

        commits = await self._apply(ops)
        counts = count_by_level(descendants)
        logger.info(
            "Deleted %s %s with %d descendants in %d batch(es)",
            ref.level.value, ref.entity_id, counts.total_items, commits,
        )
        return counts

    async def duplicate_week(
        self,
        caller_id: str | None,
        program_id: str | None,
        week_id: str | None,
        namer: Callable[[str, list[str]], str] = generate_copy_name,
        owner_id: str | None = None,
    ) -> DuplicationMapping:
        """Copy a week with all its workouts, exercises and sets.

        The copy is named by ``namer`` against every week name in the
        program. Copies keep their scalar fields and order; parent
        references are rewritten to the new ids at every level. The week
        is looked up under ``owner_id`` (the caller by default).
        """
        if not caller_id:
            raise UnauthenticatedError("User must be authenticated.")
        if not program_id or not week_id:
            raise InvalidArgumentError("programId and weekId are required.")

        week_ref = EntityRef(
            user_id=owner_id or caller_id, program_id=program_id, week_id=week_id
        )
        root = await self._load_root(caller_id, week_ref)
        source_week = Week.from_dict(_entity_data(root), id=root.id)

        siblings = await self.store.list_collection(week_ref.collection_path)
        new_name = namer(source_week.name, [doc.data.get("name", "") for doc in siblings])

        descendants = await collect_descendants(self.store, week_ref)

        new_week = source_week.duplicate(new_name, new_id=self.store.new_id())
        mapping = DuplicationMapping(
            old_week_id=root.id, new_week_id=new_week.id, new_week_name=new_name
        )
        ops = [WriteOp("set", new_week.ref.path, new_week.to_dict())]

        # Breadth-first order guarantees a parent's copy exists before its children
        new_refs: dict[str, EntityRef] = {root.path: new_week.ref}
        nodes: dict[str, object] = {root.path: mapping}
        exercise_types = {}

        for entry in descendants:
            doc = entry.document
            parent_ref = new_refs[entry.parent_path]
            parent_node = nodes[entry.parent_path]
            new_id = self.store.new_id()

            if entry.level is EntityLevel.WORKOUT:
                copy = Workout.from_dict(_entity_data(doc), id=doc.id).duplicate(parent_ref, new_id)
                node = WorkoutMapping(old_workout_id=doc.id, new_workout_id=new_id)
                parent_node.workouts.append(node)
            elif entry.level is EntityLevel.EXERCISE:
                exercise = Exercise.from_dict(_entity_data(doc), id=doc.id)
                exercise_types[doc.path] = exercise.exercise_type
                copy = exercise.duplicate(parent_ref, new_id)
                node = ExerciseMapping(old_exercise_id=doc.id, new_exercise_id=new_id)
                parent_node.exercises.append(node)
            else:
                source_set = ExerciseSet.from_dict(_entity_data(doc), id=doc.id)
                copy = source_set.duplicate(
                    parent_ref, exercise_types[entry.parent_path], new_id
                )
                node = SetMapping(old_set_id=doc.id, new_set_id=new_id)
                parent_node.sets.append(node)

            new_refs[doc.path] = copy.ref
            nodes[doc.path] = node
            ops.append(WriteOp("set", copy.ref.path, copy.to_dict()))

        commits = await self._apply(ops)
        logger.info(
            "Duplicated week %s as %s (%d documents, %d batch(es))",
            week_id, new_week.id, len(ops), commits,
        )

        await self._record_duplication(caller_id, program_id, week_id, new_week.id)
        return mapping

    async def _record_duplication(
        self, user_id: str, program_id: str, source_week_id: str, new_week_id: str
    ) -> None:
        """Append an audit record; failures are logged and swallowed."""
        try:
            await self.store.add(
                f"{USERS_COLLECTION}/{user_id}/{DUPLICATION_LOGS_COLLECTION}",
                {
                    "type": "duplicateWeek",
                    "sourceWeekId": source_week_id,
                    "newWeekId": new_week_id,
                    "programId": program_id,
                    "userId": user_id,
                    "createdAt": utc_now().isoformat(),
                },
            )
        except Exception:
            logger.warning("Duplication log failed for week %s", source_week_id, exc_info=True)
