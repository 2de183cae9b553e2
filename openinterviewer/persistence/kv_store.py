"""
Key-value store over SQLite.

A small document store with index sets, covering what the services need:
point lookup by key, "all ids in a set" lookup, and an availability check.
Values are JSON documents.

Errors:
    - StorageUnavailableError: the database cannot be opened
    - StorageError: a statement failed on an open database
"""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Union

import aiosqlite
import structlog

from openinterviewer.core.exceptions import StorageError, StorageUnavailableError

log = structlog.get_logger(__name__)


class KeyValueStore:
    """Async JSON document store with set indexes."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = str(db_path)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            db = await aiosqlite.connect(self.db_path)
        except (aiosqlite.Error, OSError) as e:
            log.error("kv_store_unavailable", path=self.db_path, error=str(e))
            raise StorageUnavailableError(f"Storage unavailable: {e}") from e

        try:
            yield db
        except aiosqlite.Error as e:
            log.error("kv_store_error", path=self.db_path, error=str(e))
            raise StorageError(f"Storage operation failed: {e}") from e
        finally:
            await db.close()

    async def ping(self) -> bool:
        """Availability check. Never raises."""
        try:
            async with self._connect() as db:
                cursor = await db.execute("SELECT 1 FROM kv_entries LIMIT 1")
                await cursor.fetchone()
            return True
        except StorageError:
            return False

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT value FROM kv_entries WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def set(self, key: str, value: Dict[str, Any]) -> None:
        payload = json.dumps(value)
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO kv_entries (key, value, updated_at) "
                "VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                (key, payload),
            )
            await db.commit()

    async def delete(self, key: str) -> bool:
        """Delete a document. Returns whether it existed."""
        async with self._connect() as db:
            cursor = await db.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            await db.commit()
            return cursor.rowcount > 0

    async def sadd(self, set_key: str, member: str) -> bool:
        """Add a member to a set. Returns whether it was newly added."""
        async with self._connect() as db:
            cursor = await db.execute(
                "INSERT OR IGNORE INTO kv_set_members (set_key, member) VALUES (?, ?)",
                (set_key, member),
            )
            await db.commit()
            return cursor.rowcount > 0

    async def srem(self, set_key: str, member: str) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(
                "DELETE FROM kv_set_members WHERE set_key = ? AND member = ?",
                (set_key, member),
            )
            await db.commit()
            return cursor.rowcount > 0

    async def smembers(self, set_key: str) -> List[str]:
        """Members of a set in insertion order."""
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT member FROM kv_set_members WHERE set_key = ? ORDER BY rowid",
                (set_key,),
            )
            rows = await cursor.fetchall()
        return [row[0] for row in rows]
