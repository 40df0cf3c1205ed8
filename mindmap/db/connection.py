"""SQLite access for the slot store: one aiosqlite connection per service."""

import logging
from pathlib import Path

import aiosqlite

from mindmap.db.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class Database:
    """Owns the aiosqlite connection the SlotStore reads and writes through."""

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection

    @classmethod
    async def connect(cls, path: str | Path = "mindmap.db") -> "Database":
        """Open ``path``, creating its directory, and make sure the slots table exists.

        File databases run in WAL mode so a reader never blocks a save.
        """
        if str(path) != MEMORY:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(path)
        conn.row_factory = aiosqlite.Row
        if str(path) != MEMORY:
            await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=5000")
        db = cls(conn)
        await db._ensure_schema()
        logger.info("Opened slot database %s", path)
        return db

    async def _ensure_schema(self) -> None:
        await self._conn.executescript(SCHEMA_SQL)
        await self._conn.commit()

    async def execute(self, sql: str, params: tuple = ()) -> None:
        """Run one write statement and commit it."""
        await self._conn.execute(sql, params)
        await self._conn.commit()

    async def fetchone(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        cursor = await self._conn.execute(sql, params)
        return await cursor.fetchone()

    async def close(self) -> None:
        await self._conn.close()
