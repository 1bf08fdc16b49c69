from __future__ import annotations

import logging
from typing import Any, List

from vocabdeck.data.vocab_repo import VocabRepo
from vocabdeck.models.columns import COLUMNS, FLOAT, INT, TSV_FIELDS, columns_by_id
from vocabdeck.models.vocab import VocabularyEntry

logger = logging.getLogger(__name__)


class VocabServiceError(Exception): pass

class TsvImportError(VocabServiceError): pass


_KINDS = {c.id: c.kind for c in COLUMNS}
_HEADER_CELL = columns_by_id()[TSV_FIELDS[0]].header.lower()


class VocabService:
    """Backend gateway for the vocabulary table.

    Keep validation/parsing here; keep SQL in VocabRepo.
    """

    def __init__(self, repo: VocabRepo):
        self.repo = repo

    def fetch_entries(self) -> List[VocabularyEntry]:
        try:
            return self.repo.list_entries()
        except Exception as e:
            raise VocabServiceError(f"Failed to fetch vocabulary: {e}") from e

    def set_flag(self, vocab_id: int, value: int) -> None:
        if value not in (0, 1):
            raise VocabServiceError("Flag must be 0 or 1.")
        try:
            updated = self.repo.set_flag(vocab_id, value)
        except Exception as e:
            raise VocabServiceError(f"Failed to set flag: {e}") from e
        if not updated:
            raise VocabServiceError(f"No vocabulary entry with id {vocab_id}.")

    def import_entries(self, tsv_data: str) -> str:
        """Bulk-create entries from tab-separated rows.

        Columns follow TSV_FIELDS. A leading header row is skipped. Every row
        is validated before anything is written, and the insert runs in one
        transaction, so a bad row aborts the whole import.
        """
        if not tsv_data or not tsv_data.strip():
            raise TsvImportError("Please paste some tab-separated data.")

        rows = []
        seen_first = False
        for line_no, line in enumerate(tsv_data.splitlines(), start=1):
            if not line.strip():
                continue
            cells = line.split("\t")
            if not seen_first:
                seen_first = True
                if cells[0].strip().lower() == _HEADER_CELL:
                    continue
            rows.append(_parse_row(cells, line_no))

        if not rows:
            raise TsvImportError("No data rows found.")

        try:
            count = self.repo.insert_entries(rows)
        except Exception as e:
            logger.exception("TSV import failed while inserting %d rows", len(rows))
            raise TsvImportError(f"Import failed: {e}") from e
        logger.info("Imported %d vocabulary entries", count)
        return f"Imported {count} entries"


def _parse_row(cells: list[str], line_no: int) -> dict[str, Any]:
    if len(cells) > len(TSV_FIELDS):
        raise TsvImportError(f"Line {line_no}: expected {len(TSV_FIELDS)} columns, got {len(cells)}.")
    cells = cells + [""] * (len(TSV_FIELDS) - len(cells))

    row: dict[str, Any] = {}
    for name, raw in zip(TSV_FIELDS, cells):
        raw = raw.strip()
        kind = _KINDS[name]
        if kind == INT:
            try:
                row[name] = int(raw) if raw else 0
            except ValueError:
                raise TsvImportError(f"Line {line_no}: {name} must be a whole number, got {raw!r}.")
        elif kind == FLOAT:
            try:
                row[name] = float(raw) if raw else 0.0
            except ValueError:
                raise TsvImportError(f"Line {line_no}: {name} must be a number, got {raw!r}.")
        else:
            row[name] = raw or None

    if row["flag"] not in (0, 1):
        raise TsvImportError(f"Line {line_no}: flag must be 0 or 1.")
    return row
