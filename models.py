"""Core data models for the key prompt."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class InputState(str, Enum):
    INITIAL = "INITIAL"
    VERIFYING = "VERIFYING"
    VERIFIED = "VERIFIED"
    ERROR = "ERROR"


EDITABLE_STATES = frozenset({InputState.INITIAL, InputState.ERROR})


class Intent(str, Enum):
    """Follow-up requests handed to the presentation layer."""

    START_PROGRESS = "start_progress"
    CONTINUE_PROGRESS = "continue_progress"
    SHOW_FOCUS_HINT = "show_focus_hint"


@dataclass(frozen=True)
class KeyPress:
    key: str
    text: str = ""


@dataclass(frozen=True)
class FocusGained:
    pass


@dataclass(frozen=True)
class FocusLost:
    pass


@dataclass(frozen=True)
class PasteDelivered:
    content: str


@dataclass(frozen=True)
class LifecycleStateChange:
    state: InputState


@dataclass(frozen=True)
class TimerTick:
    pass


Event = Union[KeyPress, FocusGained, FocusLost, PasteDelivered, LifecycleStateChange, TimerTick]


@dataclass
class ClipboardRead:
    text: str = ""
    error: str = ""


@dataclass
class PasteResult:
    success: bool
    reason: str
    inserted: int = 0


@dataclass
class UpdateResult:
    value: str
    cursor: int
    state: InputState
    focused: bool
    intent: Optional[Intent] = None
    paste: Optional[PasteResult] = None


@dataclass
class PasteSettings:
    focus_threshold_s: float = 2.0
    clipboard_timeout_s: float = 1.0
