from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from vocabdeck.config import settings

def _connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn

@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    conn = _connect(settings.DB_PATH)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

def init_db() -> None:
    settings.DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    with get_conn() as conn:
        # ---- Vocabulary ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS vocabulary (
                vocab_id INTEGER PRIMARY KEY AUTOINCREMENT,
                english TEXT,
                furigana TEXT,
                japanese TEXT,
                times_seen INTEGER NOT NULL DEFAULT 0,
                recently_missed_percent REAL NOT NULL DEFAULT 0,
                flag INTEGER NOT NULL DEFAULT 0 CHECK (flag IN (0, 1)),
                public_notes TEXT,
                personal_notes TEXT,
                book TEXT,
                chapter INTEGER NOT NULL DEFAULT 0,
                section INTEGER NOT NULL DEFAULT 0,
                word_category TEXT
            );
            """
        )

        # ---- Durable UI state (row selection etc.) ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ui_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
