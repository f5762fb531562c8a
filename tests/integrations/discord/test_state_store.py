from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from director_bot.integrations.discord.state import (
    DISCORD_STATE_SCHEMA_VERSION,
    DiscordStateStore,
)


@pytest.mark.anyio
async def test_kv_crud(tmp_path: Path) -> None:
    store = DiscordStateStore(tmp_path / "state" / "director.sqlite3")
    try:
        await store.initialize()
        assert await store.get("missing") is None
        assert await store.get("missing", default={}) == {}

        await store.put("session:m1", {"owner": "user-1", "count": 2})
        await store.put("session:m2", ["a", "b"])
        await store.put("other", "value")
        assert await store.get("session:m1") == {"owner": "user-1", "count": 2}

        await store.put("session:m1", {"owner": "user-1", "count": 3})
        assert await store.get("session:m1") == {"owner": "user-1", "count": 3}

        assert await store.keys() == ["other", "session:m1", "session:m2"]
        assert await store.keys("session:") == ["session:m1", "session:m2"]
        assert await store.keys("SESSION:") == []

        assert await store.delete("session:m2") is True
        assert await store.delete("session:m2") is False
        assert await store.keys("session:") == ["session:m1"]
    finally:
        await store.close()


@pytest.mark.anyio
async def test_initialize_creates_versioned_schema(tmp_path: Path) -> None:
    db_path = tmp_path / "director.sqlite3"
    store = DiscordStateStore(db_path)
    try:
        await store.initialize()
        assert store.path == db_path
        assert await store.schema_version() == DISCORD_STATE_SCHEMA_VERSION
    finally:
        await store.close()

    with sqlite3.connect(db_path) as conn:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
    assert {"schema_info", "kv"} <= tables


@pytest.mark.anyio
async def test_values_survive_reopen(tmp_path: Path) -> None:
    db_path = tmp_path / "director.sqlite3"
    store = DiscordStateStore(db_path)
    await store.initialize()
    await store.put("greeting", "hello")
    await store.close()

    reopened = DiscordStateStore(db_path)
    try:
        await reopened.initialize()
        assert await reopened.get("greeting") == "hello"
        assert await reopened.schema_version() == DISCORD_STATE_SCHEMA_VERSION
    finally:
        await reopened.close()


@pytest.mark.anyio
async def test_close_is_idempotent(tmp_path: Path) -> None:
    store = DiscordStateStore(tmp_path / "director.sqlite3")
    await store.initialize()
    await store.close()
    await store.close()


@pytest.mark.anyio
async def test_initialize_fails_for_unusable_path(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = DiscordStateStore(blocker / "director.sqlite3")
    try:
        with pytest.raises(OSError):
            await store.initialize()
    finally:
        await store.close()
