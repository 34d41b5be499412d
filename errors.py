"""Shared result codes, user-facing messages and exceptions."""

from __future__ import annotations

OK = "ok"
INPUT_LOCKED = "INPUT_LOCKED"
EMPTY_PASTE = "EMPTY_PASTE"
STALE_FOCUS = "STALE_FOCUS"
CLIPBOARD_ERROR = "CLIPBOARD_ERROR"
CLIPBOARD_TIMEOUT = "CLIPBOARD_TIMEOUT"

ERROR_MESSAGES = {
    INPUT_LOCKED: "The key cannot be edited right now.",
    EMPTY_PASTE: "Nothing to paste.",
    STALE_FOCUS: "Click here to focus before pasting.",
    CLIPBOARD_ERROR: "Clipboard is unavailable, try your terminal's paste instead.",
    CLIPBOARD_TIMEOUT: "Clipboard did not respond, try again.",
}


class ClipboardError(Exception):
    """Raised by clipboard gateways when the system clipboard cannot be read."""


class InvalidBufferOffset(ValueError):
    def __init__(self, offset: int, length: int) -> None:
        super().__init__(f"offset {offset} outside buffer of length {length}")
        self.offset = offset
        self.length = length
