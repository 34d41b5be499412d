"""Validation lifecycle of the key field."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from models import EDITABLE_STATES, InputState, Intent

logger = logging.getLogger(__name__)

StateCallback = Callable[[InputState, InputState], None]


class LifecycleState:
    def __init__(
        self,
        state: InputState = InputState.INITIAL,
        on_change: Optional[StateCallback] = None,
    ) -> None:
        self._state = state
        self._on_change = on_change

    @property
    def state(self) -> InputState:
        return self._state

    @property
    def editable(self) -> bool:
        return self._state in EDITABLE_STATES

    def transition(self, to_state: InputState) -> Optional[Intent]:
        """Set the state without checking legality; the caller owns that decision."""
        from_state = self._state
        self._state = to_state
        if from_state != to_state:
            logger.debug("Key field state %s -> %s", from_state.value, to_state.value)
            if self._on_change:
                self._on_change(from_state, to_state)
        if to_state == InputState.VERIFYING:
            return Intent.START_PROGRESS
        return None
