from __future__ import annotations

import sqlite3
from typing import Any, Iterable, List, Mapping, Optional

from vocabdeck.db.database import get_conn
from vocabdeck.models.vocab import VocabularyEntry

_SELECT = """SELECT vocab_id, english, furigana, japanese, times_seen, recently_missed_percent,
                    flag, public_notes, personal_notes, book, chapter, section, word_category
             FROM vocabulary"""

_INSERT_COLUMNS = (
    "english", "furigana", "japanese", "times_seen", "recently_missed_percent", "flag",
    "public_notes", "personal_notes", "book", "chapter", "section", "word_category",
)


def _row_to_entry(r: sqlite3.Row) -> VocabularyEntry:
    return VocabularyEntry(
        vocab_id=r["vocab_id"], english=r["english"], furigana=r["furigana"], japanese=r["japanese"],
        times_seen=r["times_seen"], recently_missed_percent=r["recently_missed_percent"], flag=r["flag"],
        public_notes=r["public_notes"], personal_notes=r["personal_notes"], book=r["book"],
        chapter=r["chapter"], section=r["section"], word_category=r["word_category"],
    )


class VocabRepo:
    def list_entries(self) -> List[VocabularyEntry]:
        with get_conn() as conn:
            rows = conn.execute(_SELECT + " ORDER BY vocab_id ASC").fetchall()
        return [_row_to_entry(r) for r in rows]

    def get_entry(self, vocab_id: int) -> Optional[VocabularyEntry]:
        with get_conn() as conn:
            r = conn.execute(_SELECT + " WHERE vocab_id = ?", (vocab_id,)).fetchone()
        if not r:
            return None
        return _row_to_entry(r)

    def set_flag(self, vocab_id: int, flag: int) -> bool:
        """Returns False when no row has this id."""
        with get_conn() as conn:
            cur = conn.execute("UPDATE vocabulary SET flag = ? WHERE vocab_id = ?", (flag, vocab_id))
        return cur.rowcount > 0

    def insert_entries(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Insert all rows in one transaction; nothing is stored if any insert fails."""
        placeholders = ", ".join("?" for _ in _INSERT_COLUMNS)
        sql = f"INSERT INTO vocabulary ({', '.join(_INSERT_COLUMNS)}) VALUES ({placeholders})"
        count = 0
        with get_conn() as conn:
            for row in rows:
                conn.execute(sql, tuple(row.get(c) for c in _INSERT_COLUMNS))
                count += 1
        return count
