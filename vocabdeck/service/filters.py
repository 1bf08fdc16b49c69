"""Column and global filter predicates for the vocabulary table.

A FilterPredicateSet holds at most one predicate per filterable column plus an
optional global text predicate. An entry is visible only if it passes every
active predicate. Empty input never produces a predicate, so clearing a text
box and "no filter" are the same state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from vocabdeck.models.columns import COLUMNS, INTEGER_SET, MEMBERSHIP, SUBSTRING, ColumnDef
from vocabdeck.models.vocab import VocabularyEntry

_SINGLE = re.compile(r"^\d+$")
_RANGE = re.compile(r"^(\d+)-(\d+)$")


@dataclass(frozen=True)
class IntegerSet:
    """Union of single integers and inclusive ranges, e.g. ``1-5, 8``."""
    singles: frozenset[int]
    ranges: tuple[tuple[int, int], ...]
    text: str = ""

    def __contains__(self, value: Any) -> bool:
        try:
            n = int(value)
        except (TypeError, ValueError):
            return False
        if n in self.singles:
            return True
        return any(lo <= n <= hi for lo, hi in self.ranges)


def parse_integer_set(text: str | None) -> Optional[IntegerSet]:
    """Parse ``"1-5, 8"`` style input.

    Tokens that are neither a number nor a ``lo-hi`` range are ignored, and
    so is a range whose lower bound is above its upper bound. Returns None
    when nothing usable is left, meaning "no constraint".
    """
    if not text:
        return None
    singles: set[int] = set()
    ranges: list[tuple[int, int]] = []
    for token in text.split(","):
        token = token.strip()
        if _SINGLE.match(token):
            singles.add(int(token))
            continue
        m = _RANGE.match(token)
        if m:
            lo, hi = int(m.group(1)), int(m.group(2))
            if lo <= hi:
                ranges.append((lo, hi))
    if not singles and not ranges:
        return None
    return IntegerSet(frozenset(singles), tuple(ranges), text)


def integer_set_of(values: Iterable[Any]) -> Optional[IntegerSet]:
    """Exact-value set from picked options, e.g. the chapter multi-select."""
    singles = frozenset(int(v) for v in values if _SINGLE.match(str(v).strip()))
    if not singles:
        return None
    return IntegerSet(singles, (), ", ".join(str(n) for n in sorted(singles)))


@dataclass(frozen=True)
class SubstringPredicate:
    needle: str

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        return self.needle.casefold() in str(value).casefold()


@dataclass(frozen=True)
class MembershipPredicate:
    accepted: frozenset[str]

    def matches(self, value: Any) -> bool:
        return value is not None and str(value) in self.accepted


@dataclass(frozen=True)
class IntegerSetPredicate:
    values: IntegerSet

    def matches(self, value: Any) -> bool:
        return value in self.values


Predicate = Union[SubstringPredicate, MembershipPredicate, IntegerSetPredicate]


def global_text(entry: VocabularyEntry, columns: Iterable[ColumnDef] = COLUMNS) -> str:
    """Concatenation of every display field, used by the global filter."""
    return " ".join(c.display(entry) for c in columns if c.value(entry) is not None)


class FilterPredicateSet:
    def __init__(self, columns: Iterable[ColumnDef] = COLUMNS):
        self.columns = {c.id: c for c in columns}
        self._predicates: dict[str, Predicate] = {}
        self._global: Optional[SubstringPredicate] = None

    def set_filter(self, column_id: str, value: Any) -> None:
        """Set or clear (empty value) the predicate for one column.

        ``value`` is text for substring columns and an iterable of accepted
        values for membership columns. Integer-set columns take either
        ``"1-5, 8"`` text or an iterable of picked integers.
        """
        column = self.columns.get(column_id)
        if column is None:
            raise ValueError(f"Unknown column: {column_id}")
        if column.filter_kind is None:
            raise ValueError(f"Column {column_id} cannot be filtered.")

        predicate: Optional[Predicate] = None
        if column.filter_kind == SUBSTRING:
            text = (value or "").strip() if isinstance(value, str) or value is None else str(value)
            if text:
                predicate = SubstringPredicate(text)
        elif column.filter_kind == INTEGER_SET:
            if value is None or isinstance(value, str):
                parsed = parse_integer_set(value)
            elif isinstance(value, int):
                parsed = integer_set_of([value])
            else:
                parsed = integer_set_of(value)
            if parsed is not None:
                predicate = IntegerSetPredicate(parsed)
        elif column.filter_kind == MEMBERSHIP:
            if isinstance(value, (str, int)):
                value = [value]
            accepted = frozenset(str(v) for v in (value or []))
            if accepted:
                predicate = MembershipPredicate(accepted)

        if predicate is None:
            self._predicates.pop(column_id, None)
        else:
            self._predicates[column_id] = predicate

    def clear_filter(self, column_id: str) -> None:
        self._predicates.pop(column_id, None)

    def set_global(self, text: str | None) -> None:
        text = (text or "").strip()
        self._global = SubstringPredicate(text) if text else None

    @property
    def global_filter(self) -> str:
        return self._global.needle if self._global else ""

    def get(self, column_id: str) -> Optional[Predicate]:
        return self._predicates.get(column_id)

    def active(self) -> dict[str, Predicate]:
        return dict(self._predicates)

    def describe(self) -> dict[str, Any]:
        """JSON-friendly view of the active filters."""
        out: dict[str, Any] = {}
        for column_id, p in self._predicates.items():
            if isinstance(p, SubstringPredicate):
                out[column_id] = p.needle
            elif isinstance(p, MembershipPredicate):
                out[column_id] = sorted(p.accepted)
            else:
                out[column_id] = p.values.text
        return out

    def passes_all(self, entry: VocabularyEntry) -> bool:
        for column_id, predicate in self._predicates.items():
            if not predicate.matches(self.columns[column_id].value(entry)):
                return False
        if self._global is not None:
            return self._global.matches(global_text(entry, self.columns.values()))
        return True

    def apply(self, entries: Iterable[VocabularyEntry]) -> list[VocabularyEntry]:
        return [e for e in entries if self.passes_all(e)]
