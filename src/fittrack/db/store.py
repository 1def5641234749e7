"""Hierarchical document store backed by SQLite."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

import aiosqlite

from ..errors import BatchLimitExceededError, InvalidArgumentError, NotFoundError
from .engine import get_db_path
from .schema import validate_document

logger = logging.getLogger(__name__)

# Hard ceiling on operations per atomic batch
MAX_BATCH_OPERATIONS = 500


def split_path(path: str) -> tuple[str, str]:
    """Split a document path into (collection path, document id)."""
    path = path.strip("/")
    collection, _, doc_id = path.rpartition("/")
    if not collection or not doc_id:
        raise InvalidArgumentError(f"Not a document path: {path}")
    return collection, doc_id


@dataclass
class Document:
    """A stored document snapshot."""

    path: str
    id: str
    data: dict

    @property
    def collection(self) -> str:
        return split_path(self.path)[0]


@dataclass
class WriteOp:
    """One pending write inside a batch."""

    kind: str  # "set", "update" or "delete"
    path: str
    data: dict = field(default_factory=dict)


class WriteBatch:
    """Collects writes and applies them atomically on commit."""

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self.ops: list[WriteOp] = []
        self.committed = False

    def __len__(self) -> int:
        return len(self.ops)

    def set(self, path: str, data: dict) -> "WriteBatch":
        """Create or overwrite a document."""
        self.ops.append(WriteOp("set", path, dict(data)))
        return self

    def update(self, path: str, fields: dict) -> "WriteBatch":
        """Merge fields into an existing document."""
        self.ops.append(WriteOp("update", path, dict(fields)))
        return self

    def delete(self, path: str) -> "WriteBatch":
        """Delete a document (no-op if missing)."""
        self.ops.append(WriteOp("delete", path))
        return self

    async def commit(self) -> None:
        """Apply every collected write in one transaction."""
        if self.committed:
            raise InvalidArgumentError("Batch already committed")
        await self._store.commit_batch(self.ops)
        self.committed = True


class DocumentStore:
    """Document store with per-user hierarchical collections."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    def new_id(self) -> str:
        """Allocate a fresh document id."""
        return uuid4().hex[:20]

    def batch(self) -> WriteBatch:
        """Start a new write batch."""
        return WriteBatch(self)

    async def get(self, path: str) -> Document | None:
        """Get a document by path."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT path, doc_id, data FROM documents WHERE path = ?",
                (path.strip("/"),),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Document(path=row[0], id=row[1], data=json.loads(row[2]))

    async def list_collection(
        self, collection_path: str, order_by: str | None = None
    ) -> list[Document]:
        """List a collection's documents, ordered by a field then by id."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT path, doc_id, data FROM documents WHERE collection = ?",
                (collection_path.strip("/"),),
            )
            rows = await cursor.fetchall()

        docs = [Document(path=row[0], id=row[1], data=json.loads(row[2])) for row in rows]
        if order_by is None:
            return sorted(docs, key=lambda d: d.id)

        # Missing values sort first, like an ascending query
        return sorted(
            docs,
            key=lambda d: (
                d.data.get(order_by) is not None,
                d.data.get(order_by) if d.data.get(order_by) is not None else 0,
                d.id,
            ),
        )

    async def add(self, collection_path: str, data: dict) -> str:
        """Create a document with a generated id."""
        doc_id = self.new_id()
        await self.commit_batch([WriteOp("set", f"{collection_path.strip('/')}/{doc_id}", dict(data))])
        return doc_id

    async def commit_batch(self, ops: list[WriteOp]) -> None:
        """Validate and apply writes atomically.

        Raises:
            BatchLimitExceededError: If the batch is over the operation limit.
            SchemaValidationError: If any write violates the schema.
            NotFoundError: If an update targets a missing document.
        """
        if len(ops) > MAX_BATCH_OPERATIONS:
            raise BatchLimitExceededError(len(ops), MAX_BATCH_OPERATIONS)
        if not ops:
            return

        async with aiosqlite.connect(self.db_path) as db:
            # Resolve final document states, validating before anything is written
            pending: dict[str, dict | None] = {}
            for op in ops:
                path = op.path.strip("/")
                split_path(path)
                if op.kind == "set":
                    validate_document(path, op.data)
                    pending[path] = op.data
                elif op.kind == "update":
                    if path in pending:
                        current = pending[path]
                    else:
                        cursor = await db.execute(
                            "SELECT data FROM documents WHERE path = ?", (path,)
                        )
                        row = await cursor.fetchone()
                        current = json.loads(row[0]) if row else None
                    if current is None:
                        raise NotFoundError(f"No document to update at {path}")
                    merged = {**current, **op.data}
                    validate_document(path, merged)
                    pending[path] = merged
                elif op.kind == "delete":
                    pending[path] = None
                else:
                    raise InvalidArgumentError(f"Unknown write kind: {op.kind}")

            try:
                for path, data in pending.items():
                    if data is None:
                        await db.execute("DELETE FROM documents WHERE path = ?", (path,))
                        continue
                    collection, doc_id = split_path(path)
                    await db.execute(
                        """
                        INSERT INTO documents (path, collection, doc_id, data, updated_at)
                        VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                        ON CONFLICT(path) DO UPDATE SET
                            data = excluded.data,
                            updated_at = CURRENT_TIMESTAMP
                        """,
                        (path, collection, doc_id, json.dumps(data)),
                    )
                await db.commit()
            except aiosqlite.Error:
                await db.rollback()
                raise

        logger.debug("Committed batch of %d operations", len(ops))
