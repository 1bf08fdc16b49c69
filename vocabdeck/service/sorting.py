from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, List

from vocabdeck.models.columns import COLUMNS, FLOAT, INT, ColumnDef
from vocabdeck.models.vocab import VocabularyEntry


@dataclass(frozen=True)
class SortKey:
    column_id: str
    descending: bool = False

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"


def _compare_values(a: Any, b: Any, kind: str) -> int:
    if kind in (INT, FLOAT):
        a, b = float(a), float(b)
    else:
        a, b = str(a).casefold(), str(b).casefold()
    return (a > b) - (a < b)


class SortSpec:
    """Ordered list of sort keys. Empty means input order."""

    def __init__(self, keys: Iterable[SortKey] = (), columns: Iterable[ColumnDef] = COLUMNS):
        self.columns = {c.id: c for c in columns}
        self.keys: List[SortKey] = []
        self.set(keys)

    def set(self, keys: Iterable[SortKey]) -> None:
        keys = list(keys)
        for k in keys:
            if k.column_id not in self.columns:
                raise ValueError(f"Unknown column: {k.column_id}")
        self.keys = keys

    def clear(self) -> None:
        self.keys = []

    def direction_of(self, column_id: str) -> str | None:
        for k in self.keys:
            if k.column_id == column_id:
                return k.direction
        return None

    def toggle(self, column_id: str, multi: bool = False) -> None:
        """Header-click cycle: unsorted -> ascending -> descending -> unsorted.

        Without ``multi`` the clicked column replaces every other sort key.
        """
        if column_id not in self.columns:
            raise ValueError(f"Unknown column: {column_id}")
        current = self.direction_of(column_id)
        others = [k for k in self.keys if k.column_id != column_id] if multi else []
        if current is None:
            self.keys = others + [SortKey(column_id)]
        elif current == "asc":
            replaced = SortKey(column_id, descending=True)
            if multi:
                self.keys = [replaced if k.column_id == column_id else k for k in self.keys]
            else:
                self.keys = [replaced]
        else:
            self.keys = others

    def compare(self, a: VocabularyEntry, b: VocabularyEntry) -> int:
        for key in self.keys:
            column = self.columns[key.column_id]
            va, vb = column.value(a), column.value(b)
            # None sorts last whatever the direction
            if va is None or vb is None:
                if va is None and vb is None:
                    continue
                return 1 if va is None else -1
            result = _compare_values(va, vb, column.kind)
            if result:
                return -result if key.descending else result
        return 0

    def apply(self, entries: Iterable[VocabularyEntry]) -> list[VocabularyEntry]:
        if not self.keys:
            return list(entries)
        return sorted(entries, key=cmp_to_key(self.compare))

    def describe(self) -> list[dict[str, str]]:
        return [{"column": k.column_id, "direction": k.direction} for k in self.keys]
