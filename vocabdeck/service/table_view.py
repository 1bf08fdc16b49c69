from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from vocabdeck.config import settings
from vocabdeck.models.columns import COLUMNS, INTEGER_SET, ColumnDef
from vocabdeck.models.vocab import VocabularyEntry
from vocabdeck.service.column_finder import ColumnFinder
from vocabdeck.service.debounce import Debouncer
from vocabdeck.service.filters import FilterPredicateSet
from vocabdeck.service.selection_store import SelectionStore
from vocabdeck.service.sorting import SortSpec
from vocabdeck.service.study_session import StudyQueueSession
from vocabdeck.service.vocab_service import VocabService, VocabServiceError

logger = logging.getLogger(__name__)


def visible_rows(
    entries: Iterable[VocabularyEntry],
    filters: FilterPredicateSet,
    sort_spec: SortSpec,
) -> List[VocabularyEntry]:
    """Rows to display: entries passing every filter, in stable sorted order."""
    return sort_spec.apply(filters.apply(entries))


class TableView:
    """State behind the vocabulary table page.

    Holds the fetched entries plus filter, sort, column and selection state.
    Column visibility is cosmetic only: a hidden column keeps filtering.
    """

    def __init__(
        self,
        vocab_service: VocabService,
        selection_store: SelectionStore,
        columns: Iterable[ColumnDef] = COLUMNS,
    ):
        self.vocab_service = vocab_service
        self.selection_store = selection_store
        self.columns: Dict[str, ColumnDef] = {c.id: c for c in columns}

        self.entries: List[VocabularyEntry] = []
        self.error: Optional[str] = None
        self.filters = FilterPredicateSet(self.columns.values())
        self.sort_spec = SortSpec(columns=self.columns.values())
        self.column_visibility: Dict[str, bool] = {cid: True for cid in self.columns}
        self.column_sizing: Dict[str, int] = {}
        self.finder = ColumnFinder(self.column_visibility, options_for=self.column_options)
        self._filter_inputs: Dict[str, Debouncer] = {}

    # -------------------------
    # Data
    # -------------------------
    def mount(self) -> None:
        self.selection_store.load()
        self.refresh()

    def refresh(self) -> bool:
        """Replace the entry collection with a fresh fetch."""
        try:
            self.entries = self.vocab_service.fetch_entries()
        except VocabServiceError as e:
            logger.error("Error fetching vocabulary: %s", e)
            self.error = str(e)
            self.entries = []
            return False
        self.error = None
        return True

    def visible_rows(self) -> List[VocabularyEntry]:
        return visible_rows(self.entries, self.filters, self.sort_spec)

    def column_options(self, column_id: str) -> List[Any]:
        """Distinct non-null values of a column, for membership filter pickers."""
        column = self.columns[column_id]
        values = {column.value(e) for e in self.entries}
        values.discard(None)
        return sorted(values, key=lambda v: (str(type(v)), v))

    # -------------------------
    # Filters
    # -------------------------
    def set_filter(self, column_id: str, value: Any) -> None:
        self.filters.set_filter(column_id, value)

    def type_filter_input(self, column_id: str, text: str) -> None:
        """Debounced text input for an integer-set filter (needs a running loop)."""
        column = self.columns.get(column_id)
        if column is None or column.filter_kind != INTEGER_SET:
            raise ValueError(f"Column {column_id} has no integer filter input.")
        debouncer = self._filter_inputs.get(column_id)
        if debouncer is None:
            debouncer = Debouncer(
                settings.FILTER_DEBOUNCE_SECONDS,
                lambda value, cid=column_id: self.filters.set_filter(cid, value),
            )
            self._filter_inputs[column_id] = debouncer
        debouncer.schedule(text)

    def pending_filter_inputs(self) -> List[str]:
        return [cid for cid, d in self._filter_inputs.items() if d.pending]

    def close(self) -> None:
        for debouncer in self._filter_inputs.values():
            debouncer.cancel()

    # -------------------------
    # Selection
    # -------------------------
    def is_selected(self, vocab_id: int) -> bool:
        return self.selection_store.is_selected(vocab_id)

    def set_row_selected(self, vocab_id: int, selected: bool) -> None:
        self.selection_store.set_selected(vocab_id, selected)

    def toggle_row(self, vocab_id: int) -> bool:
        selected = not self.selection_store.is_selected(vocab_id)
        self.selection_store.set_selected(vocab_id, selected)
        return selected

    def select_all_visible(self, selected: bool) -> None:
        self.selection_store.toggle_all([e.vocab_id for e in self.visible_rows()], selected)

    def all_visible_selected(self) -> bool:
        rows = self.visible_rows()
        return bool(rows) and all(self.is_selected(e.vocab_id) for e in rows)

    def some_visible_selected(self) -> bool:
        return any(self.is_selected(e.vocab_id) for e in self.visible_rows())

    def selected_entries(self) -> List[VocabularyEntry]:
        """Every selected entry in the collection, in the current sort order."""
        return [e for e in self.sort_spec.apply(self.entries) if self.is_selected(e.vocab_id)]

    def start_session(self) -> StudyQueueSession:
        session = StudyQueueSession(self.selection_store, self.vocab_service)
        session.start(self.selected_entries())
        return session

    # -------------------------
    # Columns
    # -------------------------
    def set_column_visibility(self, column_id: str, visible: bool) -> bool:
        return self.finder.toggle_visibility(column_id, visible)

    def visible_columns(self) -> List[ColumnDef]:
        return [c for cid, c in self.columns.items() if self.column_visibility[cid]]

    def column_size(self, column_id: str) -> int:
        return self.column_sizing.get(column_id, self.columns[column_id].size)

    def resize_column(self, column_id: str, width: int) -> int:
        column = self.columns.get(column_id)
        if column is None:
            raise ValueError(f"Unknown column: {column_id}")
        self.column_sizing[column_id] = max(column.min_size, int(width))
        return self.column_sizing[column_id]

    def reset_column_size(self, column_id: str) -> None:
        self.column_sizing.pop(column_id, None)

    # -------------------------
    # Serialisation
    # -------------------------
    def to_dict(self) -> dict[str, Any]:
        rows = self.visible_rows()
        return {
            "error": self.error,
            "total": len(self.entries),
            "rows": [dict(e.to_dict(), selected=self.is_selected(e.vocab_id)) for e in rows],
            "selected_ids": sorted(self.selection_store.selected_ids()),
            "all_visible_selected": self.all_visible_selected(),
            "some_visible_selected": self.some_visible_selected(),
            "filters": self.filters.describe(),
            "global_filter": self.filters.global_filter,
            "sorting": self.sort_spec.describe(),
            "columns": [
                {
                    "id": c.id,
                    "header": c.header,
                    "visible": self.column_visibility[c.id],
                    "size": self.column_size(c.id),
                    "filter_kind": c.filter_kind,
                    "sort": self.sort_spec.direction_of(c.id),
                }
                for c in self.columns.values()
            ],
        }
