"""Single-threaded dispatcher feeding events to the key field one at a time."""

from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import Callable, List, Optional

from api_key_input import APIKeyInput
from models import Event, Intent, UpdateResult

logger = logging.getLogger(__name__)

IntentCallback = Callable[[Intent], None]
UpdateCallback = Callable[[UpdateResult], None]


class EventLoop:
    """Owns the field; other threads may only ``post`` events to it."""

    def __init__(
        self,
        field: APIKeyInput,
        on_intent: Optional[IntentCallback] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> None:
        self.field = field
        self._on_intent = on_intent
        self._on_update = on_update
        self._events: Queue[Event] = Queue()

    def post(self, event: Event) -> None:
        self._events.put_nowait(event)

    @property
    def pending(self) -> int:
        return self._events.qsize()

    def dispatch(self, event: Event) -> Optional[UpdateResult]:
        try:
            result = self.field.update(event)
        except Exception:
            logger.exception("Key field failed to handle %s", type(event).__name__)
            return None
        if result.intent is not None and self._on_intent:
            self._on_intent(result.intent)
        if self._on_update:
            self._on_update(result)
        return result

    def run_pending(self, limit: Optional[int] = None) -> List[UpdateResult]:
        results: List[UpdateResult] = []
        handled = 0
        while limit is None or handled < limit:
            try:
                event = self._events.get_nowait()
            except Empty:
                break
            handled += 1
            result = self.dispatch(event)
            if result is not None:
                results.append(result)
        return results
