"""SQLiteStore — durable, single-file remote backend using aiosqlite."""

from __future__ import annotations

import json
from typing import Any

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteStore requires the 'aiosqlite' package. "
        "Install it with: pip install aiosqlite"
    ) from exc

from datastore_helper.exceptions import RemoteStoreError
from datastore_helper.result import Key
from datastore_helper.stores.base import RemoteStore

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS datastore (
    namespace TEXT NOT NULL,
    key       TEXT NOT NULL,
    value     TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
)
"""


class SQLiteStore(RemoteStore):
    """Persistent store backed by a single SQLite file.

    Keys are stored JSON-encoded so that ``42`` and ``"42"`` remain
    distinct entries.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "datastore.db") -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            await self._db.execute(_CREATE_TABLE)
            await self._db.commit()
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── RemoteStore protocol ─────────────────────────────────

    async def get(self, namespace: str, key: Key) -> Any:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT value FROM datastore WHERE namespace = ? AND key = ?",
                (namespace, json.dumps(key)),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise RemoteStoreError("get", str(e)) from e
        if row is None:
            return None
        return json.loads(row[0])

    async def put(self, namespace: str, key: Key, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise RemoteStoreError("put", f"value for key {key!r} is not serializable: {e}") from e

        db = await self._connect()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO datastore (namespace, key, value) VALUES (?, ?, ?)",
                (namespace, json.dumps(key), payload),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise RemoteStoreError("put", str(e)) from e
