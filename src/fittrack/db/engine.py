"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "fittrack.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the document store schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # One row per document; collection is the path minus the document id
        await db.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                path TEXT PRIMARY KEY,
                collection TEXT NOT NULL,
                doc_id TEXT NOT NULL,
                data TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_collection
            ON documents(collection)
        """)

        await db.commit()
