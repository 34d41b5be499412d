from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest
from textual import events

from api_key_input import APIKeyInput
from config import JsonConfigStore
from models import FocusLost, InputState, LifecycleStateChange, PasteSettings
from tui import KeyPromptApp, Presentation, render_field, render_title


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeGateway:
    def __init__(self, text: str = "") -> None:
        self.text = text

    def read_all(self) -> str:
        return self.text


# ---------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------

@pytest.mark.parametrize(
    ("state", "expected"),
    [
        (InputState.INITIAL, "Enter your Acme API Key."),
        (InputState.VERIFYING, "Verifying your Acme API Key..."),
        (InputState.VERIFIED, "Acme API Key validated."),
        (InputState.ERROR, "Invalid Acme API Key. Try again?"),
    ],
)
def test_title_per_state(state: InputState, expected: str) -> None:
    assert render_title(state, Presentation(provider_name="Acme")).plain == expected


def test_secret_is_masked() -> None:
    field = APIKeyInput(gateway=FakeGateway())
    field.set_value("sk-secret")

    text = render_field(field, Presentation()).plain

    assert "sk-secret" not in text
    assert "•" * 9 in text


def test_tips_and_help_text() -> None:
    field = APIKeyInput(gateway=FakeGateway())

    text = render_field(
        field,
        Presentation(provider_name="Open Router"),
        config_path="~/.config/keyprompt/config.json",
    ).plain

    assert "OPEN_ROUTER_API_KEY" in text
    assert "Shift+Insert" in text
    assert "global configuration: ~/.config/keyprompt/config.json" in text
    assert "focus before pasting" not in text


def test_stale_focus_warning_is_shown() -> None:
    clock = FakeClock()
    field = APIKeyInput(gateway=FakeGateway(), clock=clock)
    field.update(FocusLost())

    text = render_field(field, Presentation()).plain

    assert "Click here to focus before pasting" in text


def test_tips_hidden_outside_initial_state() -> None:
    field = APIKeyInput(gateway=FakeGateway())
    field.update(LifecycleStateChange(InputState.VERIFYING))

    text = render_field(field, Presentation(), spinner_frame=3).plain

    assert "Tips" not in text
    assert Presentation().spinner_frames[3] in text


# ---------------------------------------------------------------
# App
# ---------------------------------------------------------------

def _make_app(tmp_path: Path, verifier=None) -> tuple[KeyPromptApp, JsonConfigStore]:  # noqa: ANN001
    store = JsonConfigStore(path=tmp_path / "config.json")
    field = APIKeyInput(
        gateway=FakeGateway(text="sk-from-clipboard"),
        settings=PasteSettings(focus_threshold_s=2.0, clipboard_timeout_s=0.5),
    )
    app = KeyPromptApp(field, config_store=store, verifier=verifier)
    return app, store


async def test_typing_and_delivered_paste(tmp_path: Path) -> None:
    app, _ = _make_app(tmp_path)
    async with app.run_test() as pilot:
        await pilot.press("s", "k", "-")
        app.post_message(events.Paste("abc\n123 "))
        await pilot.pause()

        assert app.field.value == "sk-abc123"
        assert app.field.cursor == 9


async def test_submit_verifies_saves_and_returns_key(tmp_path: Path) -> None:
    app, store = _make_app(tmp_path)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+v")
        assert app.field.value == "sk-from-clipboard"

        await pilot.press("enter")
        for _ in range(50):
            await pilot.pause(0.05)
            if app.field.state == InputState.VERIFIED:
                break
        assert app.field.state == InputState.VERIFIED

        await pilot.press("enter")

    assert app.return_value == "sk-from-clipboard"
    assert store.get_api_key() == "sk-from-clipboard"


async def test_rejected_key_returns_to_error_state(tmp_path: Path) -> None:
    app, store = _make_app(tmp_path, verifier=lambda key: False)
    async with app.run_test() as pilot:
        await pilot.press("x")
        await pilot.press("enter")
        for _ in range(50):
            await pilot.pause(0.05)
            if app.field.state == InputState.ERROR:
                break

        assert app.field.state == InputState.ERROR
        await pilot.press("y")
        assert app.field.value == "xy"

    assert store.get_api_key() == ""


async def test_escape_cancels(tmp_path: Path) -> None:
    app, _ = _make_app(tmp_path)
    async with app.run_test() as pilot:
        await pilot.press("a")
        await pilot.press("escape")

    assert app.return_value is None


async def test_cancel_during_verification_does_not_save(tmp_path: Path) -> None:
    release = threading.Event()

    def slow_verifier(api_key: str) -> bool:
        release.wait(timeout=5)
        return True

    app, store = _make_app(tmp_path, verifier=slow_verifier)
    async with app.run_test() as pilot:
        await pilot.press("x")
        await pilot.press("enter")
        assert app.field.state == InputState.VERIFYING

        await pilot.press("escape")
        release.set()

    time.sleep(0.1)

    assert app.return_value is None
    assert store.get_api_key() == ""


async def test_save_failure_returns_to_error_state(tmp_path: Path) -> None:
    class ReadOnlyStore:
        def set_api_key(self, key: str) -> None:
            raise OSError("read-only file system")

    field = APIKeyInput(gateway=FakeGateway())
    app = KeyPromptApp(field, config_store=ReadOnlyStore())  # type: ignore[arg-type]
    async with app.run_test() as pilot:
        await pilot.press("x")
        await pilot.press("enter")
        for _ in range(50):
            await pilot.pause(0.05)
            if app.field.state == InputState.ERROR:
                break

        assert app.field.state == InputState.ERROR
