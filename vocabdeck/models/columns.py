from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from vocabdeck.models.vocab import VocabularyEntry

TEXT = "text"
INT = "int"
FLOAT = "float"

SUBSTRING = "substring"
MEMBERSHIP = "membership"
INTEGER_SET = "integer_set"


@dataclass(frozen=True)
class ColumnDef:
    """A table column bound to one VocabularyEntry attribute."""
    id: str
    header: str
    kind: str = TEXT
    filter_kind: str | None = None
    size: int = 150
    min_size: int = 20

    def value(self, entry: VocabularyEntry) -> Any:
        return getattr(entry, self.id)

    def display(self, entry: VocabularyEntry) -> str:
        raw = self.value(entry)
        if raw is None:
            return "N/A"
        if self.kind == FLOAT:
            return f"{float(raw):.2f}"
        return str(raw)


COLUMNS: tuple[ColumnDef, ...] = (
    ColumnDef("english", "English", TEXT, SUBSTRING, size=100, min_size=30),
    ColumnDef("japanese", "Japanese", TEXT, SUBSTRING, size=100, min_size=30),
    ColumnDef("furigana", "Furigana", TEXT, SUBSTRING, size=100),
    ColumnDef("chapter", "Chapter", INT, INTEGER_SET, size=80),
    ColumnDef("word_category", "Category", TEXT, MEMBERSHIP, size=100),
    ColumnDef("times_seen", "Seen", INT, INTEGER_SET, size=80),
    ColumnDef("recently_missed_percent", "Missed %", FLOAT, None, size=100),
    ColumnDef("flag", "Flag", INT, MEMBERSHIP, size=50),
    ColumnDef("book", "Book", TEXT, MEMBERSHIP, size=120),
    ColumnDef("section", "Section", INT, INTEGER_SET, size=80),
    ColumnDef("public_notes", "Public Notes", TEXT, SUBSTRING, size=200),
    ColumnDef("personal_notes", "Personal Notes", TEXT, SUBSTRING, size=200),
)

# Column order of a TSV import row (every stored field except vocab_id).
TSV_FIELDS: tuple[str, ...] = (
    "english",
    "furigana",
    "japanese",
    "chapter",
    "word_category",
    "times_seen",
    "recently_missed_percent",
    "flag",
    "public_notes",
    "personal_notes",
    "book",
    "section",
)


def columns_by_id(columns: tuple[ColumnDef, ...] = COLUMNS) -> dict[str, ColumnDef]:
    return {c.id: c for c in columns}


# ----------------------------
# Column finder hierarchy
# ----------------------------

@dataclass(frozen=True)
class ColumnLeaf:
    """A finder node bound to exactly one column."""
    id: str
    label: str
    column_id: str
    multi_select: bool = False


@dataclass(frozen=True)
class ColumnGroup:
    """A finder node with children; it may also be bound to a column itself."""
    id: str
    label: str
    children: tuple["ColumnNode", ...] = field(default_factory=tuple)
    column_id: str | None = None


ColumnNode = Union[ColumnGroup, ColumnLeaf]


COLUMN_HIERARCHY: tuple[ColumnNode, ...] = (
    ColumnLeaf("col-english", "English", "english"),
    ColumnLeaf("col-japanese", "Japanese", "japanese"),
    ColumnLeaf("col-furigana", "Furigana", "furigana"),
    ColumnLeaf("col-word_category", "Category", "word_category"),
    ColumnGroup(
        "col-book",
        "Book",
        children=(ColumnLeaf("col-chapter", "Chapter", "chapter", multi_select=True),),
        column_id="book",
    ),
    ColumnLeaf("col-chapter", "Chapter", "chapter"),
    ColumnLeaf("col-section", "Section", "section"),
    ColumnLeaf("col-times_seen", "Times Seen", "times_seen"),
    ColumnLeaf("col-recently_missed_percent", "Missed %", "recently_missed_percent"),
    ColumnLeaf("col-flag", "Flag", "flag"),
    ColumnLeaf("col-public_notes", "Public Notes", "public_notes"),
    ColumnLeaf("col-personal_notes", "Personal Notes", "personal_notes"),
)
