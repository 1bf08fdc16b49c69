"""Flashcard study queue built from a snapshot of the selected entries.

The session copies the entries handed over by the table view when it starts
and never re-reads the backend. Removing a card only hides it from this
session's active list, but it also unselects the entry in the shared
SelectionStore so the table shows the removal when the user goes back.

Flag toggles are optimistic: the snapshot entry is flipped first, then the
backend is asked to persist it; a failed request puts the old value back.
Two quick toggles on the same card each send their own request and the last
one to land wins.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Set

from starlette.concurrency import run_in_threadpool

from vocabdeck.config import settings
from vocabdeck.models.vocab import VocabularyEntry
from vocabdeck.service.selection_store import SelectionStore
from vocabdeck.service.vocab_service import VocabService

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EMPTY = "empty"
    ACTIVE = "active"


class StudyQueueSession:
    def __init__(
        self,
        selection_store: SelectionStore,
        vocab_service: VocabService,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.selection_store = selection_store
        self.vocab_service = vocab_service
        self._clock = clock

        self.snapshot: List[VocabularyEntry] = []
        self.removed_ids: Set[int] = set()
        self.cursor = 0
        self.flipped = False
        self._feedback = ""
        self._feedback_until = 0.0

    # -------------------------
    # Derived state
    # -------------------------
    @property
    def active_items(self) -> List[VocabularyEntry]:
        return [e for e in self.snapshot if e.vocab_id not in self.removed_ids]

    @property
    def active_count(self) -> int:
        return len(self.active_items)

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self.active_count > 0 else SessionState.EMPTY

    @property
    def current(self) -> Optional[VocabularyEntry]:
        items = self.active_items
        if not items:
            return None
        return items[self.cursor]

    @property
    def feedback(self) -> str:
        if self._feedback and self._clock() >= self._feedback_until:
            self._feedback = ""
        return self._feedback

    def empty_message(self) -> str:
        if self.snapshot:
            return "All items removed from this session or session ended."
        return "No vocabulary items selected or passed to study."

    # -------------------------
    # Transitions
    # -------------------------
    def start(self, selected_entries: Iterable[VocabularyEntry]) -> None:
        """Seed the session with copies of the entries, keeping the caller's order."""
        self.snapshot = [replace(e) for e in selected_entries]
        self.removed_ids = set()
        self.cursor = 0
        self.flipped = False
        self._clear_feedback()
        logger.info("Study session started with %d entries", len(self.snapshot))

    def next(self) -> bool:
        if self.cursor >= self.active_count - 1:
            return False
        self.cursor += 1
        self.flipped = False
        self._clear_feedback()
        return True

    def previous(self) -> bool:
        if self.cursor <= 0:
            return False
        self.cursor -= 1
        self.flipped = False
        self._clear_feedback()
        return True

    def flip(self) -> bool:
        if self.active_count <= 0:
            return False
        self.flipped = not self.flipped
        self._clear_feedback()
        return True

    def remove(self, entry: Optional[VocabularyEntry] = None) -> bool:
        """Drop ``entry`` (default: the current card) from this session and from the selection."""
        target = self._resolve(entry)
        if target is None:
            return False

        self.removed_ids.add(target.vocab_id)
        self.selection_store.remove(target.vocab_id)
        self.flipped = False
        self._set_feedback(f'"{target.display_name}" removed from session.')

        new_count = self.active_count
        if new_count <= 0:
            self.cursor = 0
        elif self.cursor >= new_count:
            self.cursor = new_count - 1
        logger.debug("Removed %s from session; %d left", target.vocab_id, new_count)
        return True

    async def flag(self, entry: Optional[VocabularyEntry] = None) -> bool:
        """Toggle the flag of ``entry`` (default: the current card).

        Returns True when the backend accepted the new value.
        """
        target = self._resolve(entry)
        if target is None:
            return False

        previous = target.flag
        new_value = 0 if previous == 1 else 1
        action = "flagged" if new_value == 1 else "unflagged"

        target.flag = new_value
        self.flipped = False
        self._set_feedback(f'"{target.display_name}" {action}!')

        try:
            await run_in_threadpool(self.vocab_service.set_flag, target.vocab_id, new_value)
        except Exception as e:
            logger.warning("Failed to set flag on %s, reverting: %s", target.vocab_id, e)
            target.flag = previous
            self._set_feedback(f"Error {action} item: {e}")
            return False
        return True

    # -------------------------
    # Helpers
    # -------------------------
    def _resolve(self, entry: Optional[VocabularyEntry]) -> Optional[VocabularyEntry]:
        if entry is None:
            return self.current
        for e in self.active_items:
            if e.vocab_id == entry.vocab_id:
                return e
        return None

    def _set_feedback(self, message: str) -> None:
        self._feedback = message
        self._feedback_until = self._clock() + settings.FEEDBACK_SECONDS

    def _clear_feedback(self) -> None:
        self._feedback = ""
        self._feedback_until = 0.0

    def to_dict(self) -> dict[str, Any]:
        current = self.current
        return {
            "state": self.state.value,
            "cursor": self.cursor,
            "active_count": self.active_count,
            "snapshot_count": len(self.snapshot),
            "flipped": self.flipped,
            "current": current.to_dict() if current else None,
            "feedback": self.feedback,
            "message": self.empty_message() if current is None else None,
        }
