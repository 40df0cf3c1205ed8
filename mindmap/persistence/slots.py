"""Named storage slots backed by SQLite.

A slot holds one opaque blob. The mind map lives in a single slot; the
codec decides what the blob means.
"""

from datetime import UTC, datetime

from mindmap.db.connection import Database


class SlotStore:
    """Read and write whole blobs by slot name."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def read(self, name: str) -> str | None:
        """The blob stored under ``name``, or None if the slot is empty."""
        row = await self._db.fetchone("SELECT blob FROM slots WHERE name = ?", (name,))
        if row is None:
            return None
        return row["blob"]

    async def write(self, name: str, blob: str) -> None:
        """Replace the blob stored under ``name``."""
        await self._db.execute(
            """
            INSERT INTO slots (name, blob, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                blob = excluded.blob,
                updated_at = excluded.updated_at
            """,
            (name, blob, datetime.now(UTC).isoformat()),
        )
