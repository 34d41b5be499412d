"""Simple JSON-based config store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from models import PasteSettings

logger = logging.getLogger(__name__)

ENV_FOCUS_THRESHOLD = "KEYPROMPT_FOCUS_THRESHOLD_S"
ENV_CLIPBOARD_TIMEOUT = "KEYPROMPT_CLIPBOARD_TIMEOUT_S"

DEFAULT_SETTINGS = PasteSettings()


def env_key_name(provider: str) -> str:
    return provider.upper().replace(" ", "_") + "_API_KEY"


def _env_float(key: str) -> float | None:
    value = os.environ.get(key)
    if value is None:
        return None
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Ignoring %s=%r, not a number", key, value)
        return None
    if parsed <= 0:
        logger.warning("Ignoring %s=%r, must be positive", key, value)
        return None
    return parsed


def _positive_float(value: object, fallback: float) -> float:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    return parsed if parsed > 0 else fallback


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "keyprompt" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def display_path(self) -> str:
        text = str(self._path)
        home = str(Path.home())
        if text.startswith(home):
            return "~" + text[len(home):]
        return text

    def get_api_key(self) -> str:
        data = self._read_all()
        return str(data.get("api_key", ""))

    def set_api_key(self, key: str) -> None:
        data = self._read_all()
        data["api_key"] = key
        self._write_all(data)

    def get_focus_threshold_s(self) -> float:
        override = _env_float(ENV_FOCUS_THRESHOLD)
        if override is not None:
            return override
        data = self._read_all()
        return _positive_float(data.get("focus_threshold_s"), DEFAULT_SETTINGS.focus_threshold_s)

    def get_clipboard_timeout_s(self) -> float:
        override = _env_float(ENV_CLIPBOARD_TIMEOUT)
        if override is not None:
            return override
        data = self._read_all()
        return _positive_float(data.get("clipboard_timeout_s"), DEFAULT_SETTINGS.clipboard_timeout_s)

    def load_settings(self) -> PasteSettings:
        return PasteSettings(
            focus_threshold_s=self.get_focus_threshold_s(),
            clipboard_timeout_s=self.get_clipboard_timeout_s(),
        )

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.warning("Config at %s is unreadable, using defaults", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
