from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Apply only the last value scheduled within ``delay`` seconds.

    Scheduling needs a running event loop. Each ``schedule`` cancels the
    pending timer, so superseded keystrokes are never applied; ``cancel``
    drops the pending one (use on teardown).
    """

    def __init__(self, delay: float, callback: Callable[[Any], None]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, value: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        try:
            self.callback(value)
        except ValueError as e:
            logger.warning("Debounced value %r rejected: %s", value, e)
