from __future__ import annotations

import sqlite3
from pathlib import Path

STORE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=5000;",
)


def connect_sqlite(path: Path) -> sqlite3.Connection:
    """Open `path` (creating parent directories) with row access by column name."""

    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    for pragma in STORE_PRAGMAS:
        conn.execute(pragma)
    return conn
