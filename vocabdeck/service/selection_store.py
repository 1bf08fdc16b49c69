from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, Set

from vocabdeck.config import settings
from vocabdeck.data.state_repo import StateRepo

logger = logging.getLogger(__name__)


class SelectionStore:
    """Which entries the user has selected, shared by the table and the study session.

    The durable form is one JSON object ``{"<vocab_id>": true, ...}`` under a
    single key. Unselected ids are deleted rather than stored as false. Every
    mutating call writes the whole mapping back synchronously, so the stored
    value always equals the in-memory mapping after the last call.
    """

    def __init__(self, state_repo: StateRepo, key: str | None = None):
        self.state_repo = state_repo
        self.key = key or settings.SELECTION_STORAGE_KEY
        self._selected: Dict[str, bool] = {}

    def load(self) -> Dict[str, bool]:
        """Read the durable selection. Never raises: bad state loads as empty."""
        try:
            raw = self.state_repo.get_value(self.key)
        except Exception:
            logger.exception("Could not read selection state %r; starting empty", self.key)
            raw = None

        self._selected = _parse_selection(raw, self.key) if raw else {}
        return dict(self._selected)

    def mapping(self) -> Dict[str, bool]:
        return dict(self._selected)

    def selected_ids(self) -> Set[int]:
        return {int(k) for k in self._selected}

    def is_selected(self, vocab_id: int) -> bool:
        return self._selected.get(str(vocab_id), False)

    def set_selected(self, vocab_id: int, selected: bool) -> None:
        if selected:
            self._selected[str(vocab_id)] = True
        else:
            self._selected.pop(str(vocab_id), None)
        self._save()

    def toggle_all(self, vocab_ids: Iterable[int], selected: bool) -> None:
        """Select or unselect exactly these ids; other selections are left alone."""
        for vocab_id in vocab_ids:
            if selected:
                self._selected[str(vocab_id)] = True
            else:
                self._selected.pop(str(vocab_id), None)
        self._save()

    def remove(self, vocab_id: int) -> None:
        self._selected.pop(str(vocab_id), None)
        self._save()

    def _save(self) -> None:
        self.state_repo.set_value(self.key, json.dumps(self._selected))


def _parse_selection(raw: str, key: str) -> Dict[str, bool]:
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Selection state %r is not valid JSON; starting empty", key)
        return {}
    if not isinstance(data, dict):
        logger.warning("Selection state %r is not a JSON object; starting empty", key)
        return {}

    cleaned = {}
    for k, v in data.items():
        if isinstance(k, str) and k.isascii() and k.isdigit() and v is True:
            cleaned[k] = True
    if len(cleaned) != len(data):
        logger.warning("Dropped %d malformed selection entries from %r", len(data) - len(cleaned), key)
    return cleaned
