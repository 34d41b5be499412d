"""System clipboard gateway backed by pyperclip."""

from __future__ import annotations

from errors import ClipboardError

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore


class PyperclipGateway:
    """Reads the system clipboard. May block; callers must bound the wait."""

    def read_all(self) -> str:
        if pyperclip is None:
            raise ClipboardError("clipboard dependency missing")
        try:
            content = pyperclip.paste()
        except Exception as exc:
            raise ClipboardError(f"clipboard read failed: {exc}") from exc
        if content is None:
            return ""
        return str(content)
