from __future__ import annotations

import asyncio
import json
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from ...core.sqlite_utils import connect_sqlite

DISCORD_STATE_SCHEMA_VERSION = 1


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DiscordStateStore:
    """Key/value records in a SQLite file, served from a single worker thread.

    Values are stored as JSON text. The connection is opened lazily by
    `initialize()` (or the first call) and reused until `close()`.

    Sessions are handed the store but only read from it; the write methods
    are for dialogues that keep records of their own.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="discord-state"
        )
        self._connection: Optional[sqlite3.Connection] = None
        self._closed = False

    @property
    def path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        await self._run(self._ensure_initialized_sync)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._run(self._close_sync)
        self._executor.shutdown(wait=True)

    async def put(self, key: str, value: Any) -> None:
        await self._run(self._put_sync, key, json.dumps(value))

    async def get(self, key: str, default: Any = None) -> Any:
        raw = await self._run(self._get_sync, key)
        if raw is None:
            return default
        return json.loads(raw)

    async def delete(self, key: str) -> bool:
        return await self._run(self._delete_sync, key)

    async def keys(self, prefix: str = "") -> list[str]:
        return await self._run(self._keys_sync, prefix)

    async def schema_version(self) -> int:
        return await self._run(self._schema_version_sync)

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def _connection_sync(self) -> sqlite3.Connection:
        if self._connection is None:
            self._connection = connect_sqlite(self._db_path)
            self._ensure_schema(self._connection)
        return self._connection

    def _ensure_initialized_sync(self) -> None:
        self._connection_sync()

    def _close_sync(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
                """
            )
            row = conn.execute(
                "SELECT version FROM schema_info ORDER BY version DESC LIMIT 1"
            ).fetchone()
            if row is None:
                conn.execute(
                    "INSERT INTO schema_info(version) VALUES (?)",
                    (DISCORD_STATE_SCHEMA_VERSION,),
                )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def _schema_version_sync(self) -> int:
        conn = self._connection_sync()
        row = conn.execute(
            "SELECT version FROM schema_info ORDER BY version DESC LIMIT 1"
        ).fetchone()
        return int(row["version"]) if row is not None else 0

    def _put_sync(self, key: str, value_json: str) -> None:
        conn = self._connection_sync()
        with conn:
            conn.execute(
                """
                INSERT INTO kv(key, value_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json=excluded.value_json,
                    updated_at=excluded.updated_at
                """,
                (key, value_json, now_iso()),
            )

    def _get_sync(self, key: str) -> Optional[str]:
        conn = self._connection_sync()
        row = conn.execute("SELECT value_json FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row["value_json"])

    def _delete_sync(self, key: str) -> bool:
        conn = self._connection_sync()
        with conn:
            cursor = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        return cursor.rowcount > 0

    def _keys_sync(self, prefix: str) -> list[str]:
        conn = self._connection_sync()
        if prefix:
            # LIKE is case-insensitive in SQLite; compare the prefix exactly.
            rows = conn.execute(
                "SELECT key FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        else:
            rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        return [str(row["key"]) for row in rows]
