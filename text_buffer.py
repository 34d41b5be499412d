"""Single-line editable buffer holding the secret and its cursor."""

from __future__ import annotations

import logging

from errors import InvalidBufferOffset

logger = logging.getLogger(__name__)


class TextBuffer:
    """Content plus a cursor offset, ``0 <= cursor <= len(content)``.

    ``strict`` turns an out-of-range offset into ``InvalidBufferOffset``;
    otherwise the offset is clamped and a warning is logged.
    """

    def __init__(self, value: str = "", *, strict: bool = False) -> None:
        self._value = value
        self._cursor = len(value)
        self._strict = strict

    @property
    def value(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._value)

    def set_value(self, value: str) -> None:
        self._value = value
        self._cursor = len(value)

    def set_cursor(self, position: int) -> None:
        self._cursor = self._check_offset(position)

    def clear(self) -> None:
        self.set_value("")

    def insert_at(self, offset: int, text: str) -> int:
        offset = self._check_offset(offset)
        self._value = self._value[:offset] + text + self._value[offset:]
        self._cursor = offset + len(text)
        return self._cursor

    def insert(self, text: str) -> int:
        return self.insert_at(self._cursor, text)

    def delete_before_cursor(self) -> None:
        if self._cursor == 0:
            return
        self._value = self._value[: self._cursor - 1] + self._value[self._cursor :]
        self._cursor -= 1

    def delete_at_cursor(self) -> None:
        if self._cursor >= len(self._value):
            return
        self._value = self._value[: self._cursor] + self._value[self._cursor + 1 :]

    def move_left(self) -> None:
        self._cursor = max(0, self._cursor - 1)

    def move_right(self) -> None:
        self._cursor = min(len(self._value), self._cursor + 1)

    def move_home(self) -> None:
        self._cursor = 0

    def move_end(self) -> None:
        self._cursor = len(self._value)

    def _check_offset(self, offset: int) -> int:
        length = len(self._value)
        if 0 <= offset <= length:
            return offset
        if self._strict:
            raise InvalidBufferOffset(offset, length)
        logger.warning("Clamping buffer offset %d to [0, %d]", offset, length)
        return min(max(offset, 0), length)
