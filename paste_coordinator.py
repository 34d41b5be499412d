"""Paste handling for the key field.

Two entry points exist. A paste the terminal already captured arrives with
its text and is applied directly. A paste shortcut has to pull from the system
clipboard, which may block forever on some platforms, so that read runs on a
daemon thread and the caller waits at most ``clipboard_timeout_s`` for it.
A read that misses the deadline is abandoned: its result lands in a queue
nobody reads anymore.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import Optional

from errors import (
    CLIPBOARD_ERROR,
    CLIPBOARD_TIMEOUT,
    EMPTY_PASTE,
    INPUT_LOCKED,
    OK,
    STALE_FOCUS,
)
from focus import FocusTracker
from interfaces import ClipboardGateway
from lifecycle import LifecycleState
from models import ClipboardRead, PasteResult, PasteSettings
from text_buffer import TextBuffer

logger = logging.getLogger(__name__)


def sanitize(text: str) -> str:
    """Drop newlines, then surrounding whitespace."""
    return text.replace("\n", "").strip()


class PasteCoordinator:
    def __init__(
        self,
        buffer: TextBuffer,
        focus: FocusTracker,
        lifecycle: LifecycleState,
        gateway: ClipboardGateway,
        settings: Optional[PasteSettings] = None,
    ) -> None:
        self._buffer = buffer
        self._focus = focus
        self._lifecycle = lifecycle
        self._gateway = gateway
        self._settings = settings or PasteSettings()

    @property
    def settings(self) -> PasteSettings:
        return self._settings

    def paste_delivered(self, content: str) -> PasteResult:
        if not self._lifecycle.editable:
            logger.debug("Delivered paste ignored in state %s", self._lifecycle.state.value)
            return PasteResult(success=False, reason=INPUT_LOCKED)
        return self._apply(content)

    def paste_from_clipboard(self) -> PasteResult:
        if not self._lifecycle.editable:
            logger.warning("Paste ignored, input not editable in state %s", self._lifecycle.state.value)
            return PasteResult(success=False, reason=INPUT_LOCKED)

        threshold = self._settings.focus_threshold_s
        if not self._focus.is_fresh(threshold):
            logger.warning(
                "Paste blocked, focus stale (focused=%s, %.2fs since confirmed)",
                self._focus.focused,
                self._focus.seconds_since_confirmed(),
            )
            self._focus.confirm()
            return PasteResult(success=False, reason=STALE_FOCUS)

        self._focus.confirm()
        try:
            read = self._read_with_deadline()
        except Exception:
            logger.exception("Clipboard paste failed")
            return PasteResult(success=False, reason=CLIPBOARD_ERROR)

        if read is None:
            logger.error(
                "Clipboard read timed out after %.2fs, abandoning it",
                self._settings.clipboard_timeout_s,
            )
            return PasteResult(success=False, reason=CLIPBOARD_TIMEOUT)
        if read.error:
            logger.error("Failed to read clipboard: %s", read.error)
            return PasteResult(success=False, reason=CLIPBOARD_ERROR)
        return self._apply(read.text)

    def _read_with_deadline(self) -> Optional[ClipboardRead]:
        results: Queue[ClipboardRead] = Queue(maxsize=1)
        gateway = self._gateway

        def _worker() -> None:
            try:
                text = gateway.read_all()
            except Exception as exc:
                results.put_nowait(ClipboardRead(error=str(exc) or type(exc).__name__))
                return
            if text is None:
                text = ""
            if not isinstance(text, str):
                results.put_nowait(ClipboardRead(error=f"clipboard returned {type(text).__name__}"))
                return
            results.put_nowait(ClipboardRead(text=text))

        threading.Thread(target=_worker, name="clipboard-read", daemon=True).start()
        try:
            return results.get(timeout=self._settings.clipboard_timeout_s)
        except Empty:
            return None

    def _apply(self, content: str) -> PasteResult:
        text = sanitize(content)
        if not text:
            logger.debug("Paste is empty after sanitizing")
            return PasteResult(success=False, reason=EMPTY_PASTE)
        self._buffer.insert_at(self._buffer.cursor, text)
        logger.info("Pasted %d characters into key field", len(text))
        return PasteResult(success=True, reason=OK, inserted=len(text))
