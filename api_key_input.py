"""The API key field: buffer, focus, lifecycle and paste handling behind one update()."""

from __future__ import annotations

import logging
from typing import Optional

from errors import STALE_FOCUS
from focus import FocusTracker
from interfaces import ClipboardGateway, Clock
from lifecycle import LifecycleState, StateCallback
from models import (
    Event,
    FocusGained,
    FocusLost,
    InputState,
    Intent,
    KeyPress,
    LifecycleStateChange,
    PasteDelivered,
    PasteResult,
    PasteSettings,
    TimerTick,
    UpdateResult,
)
from paste_coordinator import PasteCoordinator
from text_buffer import TextBuffer

logger = logging.getLogger(__name__)

PASTE_KEYS = frozenset({"ctrl+v", "ctrl+shift+v", "shift+insert"})


class APIKeyInput:
    def __init__(
        self,
        gateway: ClipboardGateway,
        settings: Optional[PasteSettings] = None,
        clock: Optional[Clock] = None,
        strict_offsets: bool = False,
        on_state_change: Optional[StateCallback] = None,
    ) -> None:
        self.buffer = TextBuffer(strict=strict_offsets)
        self.focus = FocusTracker(clock=clock)
        self.lifecycle = LifecycleState(on_change=on_state_change)
        self.paste = PasteCoordinator(
            buffer=self.buffer,
            focus=self.focus,
            lifecycle=self.lifecycle,
            gateway=gateway,
            settings=settings,
        )

    @property
    def value(self) -> str:
        return self.buffer.value

    @property
    def cursor(self) -> int:
        return self.buffer.cursor

    @property
    def state(self) -> InputState:
        return self.lifecycle.state

    @property
    def settings(self) -> PasteSettings:
        return self.paste.settings

    def set_value(self, value: str) -> None:
        self.buffer.set_value(value)

    def focus_is_stale(self) -> bool:
        return not self.focus.is_fresh(self.settings.focus_threshold_s)

    def snapshot(
        self,
        intent: Optional[Intent] = None,
        paste: Optional[PasteResult] = None,
    ) -> UpdateResult:
        return UpdateResult(
            value=self.buffer.value,
            cursor=self.buffer.cursor,
            state=self.lifecycle.state,
            focused=self.focus.focused,
            intent=intent,
            paste=paste,
        )

    def reset(self) -> None:
        self.lifecycle.transition(InputState.INITIAL)
        self.buffer.clear()
        self.focus.confirm()

    def update(self, event: Event) -> UpdateResult:
        logger.debug("APIKeyInput.update %s", type(event).__name__)

        if isinstance(event, FocusGained):
            self.focus.on_focus_gained()
            return self.snapshot()

        if isinstance(event, FocusLost):
            self.focus.on_focus_lost()
            return self.snapshot()

        if isinstance(event, KeyPress):
            self.focus.on_keystroke()
            if event.key in PASTE_KEYS:
                logger.debug("%s routed to clipboard paste", event.key)
                result = self.paste.paste_from_clipboard()
                intent = Intent.SHOW_FOCUS_HINT if result.reason == STALE_FOCUS else None
                return self.snapshot(intent=intent, paste=result)
            self._edit(event)
            return self.snapshot()

        if isinstance(event, PasteDelivered):
            return self.snapshot(paste=self.paste.paste_delivered(event.content))

        if isinstance(event, LifecycleStateChange):
            intent = self.lifecycle.transition(event.state)
            if event.state == InputState.ERROR:
                # Hand the field back to the user for another attempt.
                self.focus.confirm()
            return self.snapshot(intent=intent)

        if isinstance(event, TimerTick):
            if self.lifecycle.state == InputState.VERIFYING:
                return self.snapshot(intent=Intent.CONTINUE_PROGRESS)
            return self.snapshot()

        logger.debug("Ignoring unknown event %r", event)
        return self.snapshot()

    def _edit(self, event: KeyPress) -> None:
        if not self.lifecycle.editable:
            return
        key = event.key
        if key == "backspace":
            self.buffer.delete_before_cursor()
        elif key == "delete":
            self.buffer.delete_at_cursor()
        elif key == "left":
            self.buffer.move_left()
        elif key == "right":
            self.buffer.move_right()
        elif key in ("home", "ctrl+a"):
            self.buffer.move_home()
        elif key in ("end", "ctrl+e"):
            self.buffer.move_end()
        elif key == "ctrl+u":
            self.buffer.clear()
        elif event.text and event.text.isprintable():
            self.buffer.insert(event.text)
