"""Focus freshness tracking for the key field."""

from __future__ import annotations

import logging
import time
from typing import Optional

from interfaces import Clock

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_THRESHOLD_S = 2.0


class FocusTracker:
    """Remembers whether the field holds focus and when that was last confirmed.

    This is a heuristic: the host terminal may drop focus without telling us,
    so a confirmation older than the threshold is treated as stale.
    """

    def __init__(self, clock: Optional[Clock] = None, focused: bool = True) -> None:
        self._clock = clock or time.monotonic
        self.focused = focused
        self.last_confirmed_at = self._clock()

    def on_focus_gained(self) -> None:
        self.confirm()
        logger.debug("Key field gained focus")

    def on_focus_lost(self) -> None:
        # The buffer stays editable; blurring here races with paste events.
        self.focused = False
        logger.warning("Key field lost focus, next clipboard paste may be refused")

    def on_keystroke(self) -> None:
        self.confirm()

    def confirm(self) -> None:
        self.focused = True
        self.last_confirmed_at = self._clock()

    def seconds_since_confirmed(self) -> float:
        return self._clock() - self.last_confirmed_at

    def is_fresh(self, threshold_s: float = DEFAULT_FOCUS_THRESHOLD_S) -> bool:
        return self.focused and self.seconds_since_confirmed() <= threshold_s
