"""Protocol interfaces used by the key prompt core."""

from __future__ import annotations

from typing import Protocol


class ClipboardGateway(Protocol):
    def read_all(self) -> str: ...


class Clock(Protocol):
    def __call__(self) -> float: ...


class Verifier(Protocol):
    def __call__(self, api_key: str) -> bool: ...


class ConfigStore(Protocol):
    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...

    def get_focus_threshold_s(self) -> float: ...

    def get_clipboard_timeout_s(self) -> float: ...
