"""SQLite database layer: the durable string store behind habit persistence.

One table of string keys to string values. Created automatically on first run.
"""

import sqlite3
import logging
from datetime import datetime, timezone, timedelta

from habitdeck.config import DB_PATH, TIMEZONE_OFFSET_HOURS

logger = logging.getLogger(__name__)

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))


def _connect() -> sqlite3.Connection:
    """Return a connection with row_factory set."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db() -> None:
    """Create tables if they don't exist."""
    conn = _connect()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key        TEXT PRIMARY KEY,
            value      TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """)
    conn.close()
    logger.info("Database initialized at %s", DB_PATH)


def get_value(key: str) -> str | None:
    conn = _connect()
    row = conn.execute(
        "SELECT value FROM kv_store WHERE key = ?", (key,)
    ).fetchone()
    conn.close()
    return row["value"] if row else None


def set_value(key: str, value: str) -> None:
    """Write `value` under `key`, replacing any previous value in one statement."""
    now = datetime.now(TZ).isoformat()
    conn = _connect()
    try:
        conn.execute(
            """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
            (key, value, now),
        )
        conn.commit()
    finally:
        conn.close()


def delete_value(key: str) -> bool:
    conn = _connect()
    cur = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()
    deleted = cur.rowcount > 0
    conn.close()
    return deleted
