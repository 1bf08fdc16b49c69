from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class VocabularyEntry:
    """One row of the vocabulary table.

    The backend owns the rows; views only hold copies. The dataclass is not
    frozen because a study session flips ``flag`` in place while a flag
    request is in flight.
    """
    vocab_id: int
    english: str | None = None
    furigana: str | None = None
    japanese: str | None = None
    times_seen: int = 0
    recently_missed_percent: float = 0.0
    flag: int = 0
    public_notes: str | None = None
    personal_notes: str | None = None
    book: str | None = None
    chapter: int = 0
    section: int = 0
    word_category: str | None = None

    @property
    def display_name(self) -> str:
        return self.english or f"Item {self.vocab_id}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
