import pytest

from vocabdeck.config import Settings
from vocabdeck.data.state_repo import StateRepo
from vocabdeck.data.vocab_repo import VocabRepo
from vocabdeck.db import database
from vocabdeck.models.vocab import VocabularyEntry
from vocabdeck.service.selection_store import SelectionStore
from vocabdeck.service.table_view import TableView
from vocabdeck.service.vocab_service import VocabService, VocabServiceError


@pytest.fixture(autouse=True)
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "test.db"
    monkeypatch.setattr(database, "settings", Settings(DB_PATH=path))
    database.init_db()
    return path


@pytest.fixture
def vocab_repo():
    return VocabRepo()


@pytest.fixture
def vocab_service(vocab_repo):
    return VocabService(vocab_repo)


@pytest.fixture
def state_repo():
    return StateRepo()


@pytest.fixture
def selection_store(state_repo):
    store = SelectionStore(state_repo)
    store.load()
    return store


SAMPLE_ROWS = [
    {"english": "cat", "japanese": "猫", "furigana": "ねこ", "chapter": 1, "section": 1,
     "word_category": "noun", "book": "Genki I", "times_seen": 4, "recently_missed_percent": 25.0},
    {"english": "to eat", "japanese": "食べる", "furigana": "たべる", "chapter": 3, "section": 2,
     "word_category": "verb", "book": "Genki I", "times_seen": 10, "recently_missed_percent": 0.0},
    {"english": "dog", "japanese": "犬", "furigana": "いぬ", "chapter": 1, "section": 2,
     "word_category": "noun", "book": "Genki I", "times_seen": 2, "recently_missed_percent": 50.0},
    {"english": "quiet", "japanese": "静か", "furigana": "しずか", "chapter": 6, "section": 1,
     "word_category": "adjective", "book": "Genki II", "times_seen": 0, "recently_missed_percent": 0.0,
     "public_notes": "na-adjective"},
    {"english": None, "japanese": "あの", "furigana": None, "chapter": 8, "section": 3,
     "word_category": None, "book": None, "times_seen": 1, "recently_missed_percent": 100.0},
]


@pytest.fixture
def seeded(vocab_repo):
    """Five entries with ids 1..5."""
    rows = [dict({"flag": 0, "public_notes": None, "personal_notes": None}, **r) for r in SAMPLE_ROWS]
    vocab_repo.insert_entries(rows)
    return vocab_repo.list_entries()


@pytest.fixture
def table_view(seeded, vocab_service, selection_store):
    view = TableView(vocab_service, selection_store)
    view.mount()
    return view


def make_entry(vocab_id, **fields):
    return VocabularyEntry(vocab_id=vocab_id, **fields)


class FailingVocabService:
    """Backend double whose flag writes always fail."""

    def __init__(self):
        self.calls = []

    def set_flag(self, vocab_id, value):
        self.calls.append((vocab_id, value))
        raise VocabServiceError("database is locked")

    def fetch_entries(self):
        raise VocabServiceError("backend unavailable")


class RecordingVocabService:
    """Backend double that accepts every flag write."""

    def __init__(self):
        self.calls = []

    def set_flag(self, vocab_id, value):
        self.calls.append((vocab_id, value))
