from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

@dataclass(frozen=True)
class Settings:
    DB_PATH: Path = Path(__file__).resolve().parent.parent / "vocabdeck.db"
    SELECTION_STORAGE_KEY: str = "vocab_row_selection"
    FILTER_DEBOUNCE_SECONDS: float = 0.3
    FEEDBACK_SECONDS: float = 1.5
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path | None = None

settings = Settings()
