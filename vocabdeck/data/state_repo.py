from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from vocabdeck.db.database import get_conn

class StateRepo:
    """Durable string values under string keys (UI state that outlives a view)."""

    def get_value(self, key: str) -> Optional[str]:
        with get_conn() as conn:
            row = conn.execute("SELECT value FROM ui_state WHERE key = ?", (key,)).fetchone()
        if not row:
            return None
        return row["value"]

    def set_value(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO ui_state (key, value, updated_at)
                     VALUES (?, ?, ?)
                     ON CONFLICT(key)
                     DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at""",
                (key, value, now),
            )
