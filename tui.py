"""Textual dialog hosting the API key field."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.timer import Timer
from textual.widgets import Static

from api_key_input import APIKeyInput
from config import env_key_name
from errors import CLIPBOARD_ERROR, CLIPBOARD_TIMEOUT, ERROR_MESSAGES, STALE_FOCUS
from event_loop import EventLoop
from interfaces import ConfigStore, Verifier
from models import (
    FocusGained,
    FocusLost,
    InputState,
    Intent,
    KeyPress,
    LifecycleStateChange,
    PasteDelivered,
    TimerTick,
    UpdateResult,
)

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL_S = 0.1
PUMP_INTERVAL_S = 0.05
NOTICE_REASONS = (CLIPBOARD_ERROR, CLIPBOARD_TIMEOUT)


@dataclass(frozen=True)
class Presentation:
    """Everything the view needs to draw the field; passed in, never global."""

    provider_name: str = "Provider"
    prompt: str = "> "
    placeholder: str = "Enter your API key..."
    mask_char: str = "•"
    check_icon: str = "✓"
    error_icon: str = "×"
    spinner_frames: Tuple[str, ...] = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
    primary: str = "cyan"
    accent: str = "bold green"
    error: str = "red"
    muted: str = "grey50"


def accept_any(api_key: str) -> bool:
    return bool(api_key)


def render_title(state: InputState, presentation: Presentation) -> Text:
    p = presentation
    key_label = (f"{p.provider_name} API Key", p.accent)
    if state == InputState.VERIFYING:
        return Text.assemble(("Verifying your ", p.primary), key_label, ("...", p.primary))
    if state == InputState.VERIFIED:
        return Text.assemble(key_label, (" validated.", p.primary))
    if state == InputState.ERROR:
        return Text.assemble(("Invalid ", p.error), key_label, (". Try again?", p.error))
    return Text.assemble(("Enter your ", p.primary), key_label, (".", p.primary))


def render_input(field: APIKeyInput, presentation: Presentation, spinner_frame: int = 0) -> Text:
    p = presentation
    state = field.state
    if state == InputState.VERIFYING:
        frame = p.spinner_frames[spinner_frame % len(p.spinner_frames)]
        prompt = Text(frame + " ", style=p.accent)
    elif state == InputState.VERIFIED:
        prompt = Text(p.check_icon + " ", style=p.accent)
    elif state == InputState.ERROR:
        prompt = Text(p.error_icon + " ", style=p.error)
    else:
        prompt = Text(p.prompt, style=p.primary)

    line = Text()
    line.append_text(prompt)
    value = field.value
    editable = field.lifecycle.editable
    if not value and editable:
        line.append(" ", style="reverse")
        line.append(p.placeholder, style=p.muted)
        return line
    masked = p.mask_char * len(value)
    if not editable:
        line.append(masked)
        return line
    cursor = field.cursor
    line.append(masked[:cursor])
    line.append(masked[cursor : cursor + 1] or " ", style="reverse")
    line.append(masked[cursor + 1 :])
    return line


def render_field(
    field: APIKeyInput,
    presentation: Presentation,
    *,
    spinner_frame: int = 0,
    config_path: str = "",
    notice: str = "",
) -> Text:
    p = presentation
    lines = [render_title(field.state, p), Text(), render_input(field, p, spinner_frame)]

    if notice:
        lines.append(Text(notice, style=p.error))

    if field.state == InputState.INITIAL:
        lines.append(Text())
        lines.append(Text("💡 Tips:", style=p.muted))
        if field.focus_is_stale():
            lines.append(Text("  ⚠ Click here to focus before pasting", style=p.error))
        lines.append(Text("  • Try Ctrl+Shift+V or Shift+Insert to paste", style=p.muted))
        env_name = env_key_name(p.provider_name)
        lines.append(Text(f"  • Set {env_name} environment variable to skip this step", style=p.muted))

    if config_path:
        lines.append(Text())
        lines.append(Text(f"This will be written to the global configuration: {config_path}", style=p.muted))

    return Text("\n").join(lines)


class KeyPromptApp(App[Optional[str]]):
    """Asks for an API key; returns it once verified and confirmed, None on cancel."""

    CSS = """
    Screen {
        align: center middle;
    }

    #dialog {
        width: 76;
        height: auto;
        border: round $accent;
        padding: 1 2;
    }
    """

    def __init__(
        self,
        field: APIKeyInput,
        *,
        presentation: Optional[Presentation] = None,
        config_store: Optional[ConfigStore] = None,
        config_path: str = "",
        verifier: Optional[Verifier] = None,
    ) -> None:
        super().__init__()
        self.field = field
        self.presentation = presentation or Presentation()
        self.dispatcher = EventLoop(field, on_intent=self._handle_intent, on_update=self._handle_update)
        self._config_store = config_store
        self._config_path = config_path
        self._verifier: Callable[[str], bool] = verifier or accept_any
        self._view: Optional[Static] = None
        self._progress_timer: Optional[Timer] = None
        self._spinner_frame = 0
        self._notice = ""
        self._last_state = field.state
        self._cancelled = False

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            self._view = Static("", id="key-field")
            yield self._view

    def on_mount(self) -> None:
        self.set_interval(PUMP_INTERVAL_S, self._drain_events)
        self._redraw()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        key = event.key
        if key == "escape":
            self._cancelled = True
            self.exit(None)
            return
        if key == "enter":
            self._submit_key()
            return
        self._notice = ""
        text = event.character if event.is_printable and event.character else ""
        self.dispatcher.dispatch(KeyPress(key=key, text=text))

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self._notice = ""
        self.dispatcher.dispatch(PasteDelivered(event.text))

    def on_app_focus(self, event: events.AppFocus) -> None:
        self.dispatcher.dispatch(FocusGained())

    def on_app_blur(self, event: events.AppBlur) -> None:
        self.dispatcher.dispatch(FocusLost())

    def _submit_key(self) -> None:
        if self.field.state == InputState.VERIFIED:
            self.exit(self.field.value)
            return
        if not self.field.lifecycle.editable:
            return
        api_key = self.field.value
        if not api_key:
            self._notice = "Enter or paste a key first."
            self._redraw()
            return
        self._notice = ""
        self.dispatcher.dispatch(LifecycleStateChange(InputState.VERIFYING))
        self.run_worker(partial(self._run_verifier, api_key), thread=True, exclusive=True, group="verify")

    def _run_verifier(self, api_key: str) -> None:
        # Runs on a worker thread: only post back to the loop.
        try:
            ok = bool(self._verifier(api_key))
        except Exception:
            logger.exception("API key verification failed")
            ok = False
        self.dispatcher.post(LifecycleStateChange(InputState.VERIFIED if ok else InputState.ERROR))

    def _drain_events(self) -> None:
        self.dispatcher.run_pending()

    def _progress_tick(self) -> None:
        result = self.dispatcher.dispatch(TimerTick())
        if result is None or result.intent != Intent.CONTINUE_PROGRESS:
            self._stop_progress()

    def _stop_progress(self) -> None:
        if self._progress_timer is not None:
            self._progress_timer.stop()
            self._progress_timer = None

    def _handle_intent(self, intent: Intent) -> None:
        if intent == Intent.START_PROGRESS:
            self._spinner_frame = 0
            if self._progress_timer is None:
                self._progress_timer = self.set_interval(PROGRESS_INTERVAL_S, self._progress_tick)
        elif intent == Intent.CONTINUE_PROGRESS:
            self._spinner_frame += 1
        elif intent == Intent.SHOW_FOCUS_HINT:
            self._notice = ERROR_MESSAGES[STALE_FOCUS]

    def _handle_update(self, result: UpdateResult) -> None:
        entered_verified = (
            result.state == InputState.VERIFIED and self._last_state != InputState.VERIFIED
        )
        self._last_state = result.state
        if entered_verified:
            self._save_key(result.value)
        if result.paste is not None and result.paste.reason in NOTICE_REASONS:
            self._notice = ERROR_MESSAGES[result.paste.reason]
        self._redraw()

    def _save_key(self, api_key: str) -> None:
        # Only on the UI thread, and never once the prompt was cancelled.
        if self._cancelled or self._config_store is None:
            return
        try:
            self._config_store.set_api_key(api_key)
        except OSError:
            logger.exception("Could not save API key")
            self.dispatcher.post(LifecycleStateChange(InputState.ERROR))

    def _redraw(self) -> None:
        if self._view is None:
            return
        self._view.update(
            render_field(
                self.field,
                self.presentation,
                spinner_frame=self._spinner_frame,
                config_path=self._config_path,
                notice=self._notice,
            )
        )
