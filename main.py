"""Application entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from api_key_input import APIKeyInput
from clipboard import PyperclipGateway
from config import JsonConfigStore, env_key_name
from models import InputState, PasteSettings
from tui import KeyPromptApp, Presentation

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path.home() / ".cache" / "keyprompt" / "keyprompt.log"


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Prompt for an API key in the terminal.")
    parser.add_argument("--provider", default="Provider", help="Provider name shown in the dialog")
    parser.add_argument("--config", type=Path, default=None, help="Path of the JSON config file")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path(os.environ.get("KEYPROMPT_LOG_FILE", str(DEFAULT_LOG_FILE))),
        help="Where to write logs (the terminal belongs to the dialog)",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("KEYPROMPT_LOG_LEVEL", "INFO"),
        help="Logging level, e.g. DEBUG to trace paste handling",
    )
    parser.add_argument(
        "--focus-threshold",
        type=float,
        default=None,
        help="Seconds a focus confirmation stays fresh for clipboard pastes",
    )
    parser.add_argument(
        "--clipboard-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the system clipboard before giving up",
    )
    return parser.parse_args(argv)


def _configure_logging(log_file: Path, level: str) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_settings(store: JsonConfigStore, args: argparse.Namespace) -> PasteSettings:
    settings = store.load_settings()
    if args.focus_threshold is not None and args.focus_threshold > 0:
        settings.focus_threshold_s = args.focus_threshold
    if args.clipboard_timeout is not None and args.clipboard_timeout > 0:
        settings.clipboard_timeout_s = args.clipboard_timeout
    return settings


def log_state_change(from_state: InputState, to_state: InputState) -> None:
    logger.info("Key prompt %s -> %s", from_state.value, to_state.value)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.log_file, args.log_level)

    if os.environ.get(env_key_name(args.provider)):
        logger.info("%s is set, skipping the prompt", env_key_name(args.provider))
        return 0

    store = JsonConfigStore(path=args.config)
    settings = build_settings(store, args)
    logger.info(
        "Starting key prompt (focus threshold %.2fs, clipboard timeout %.2fs)",
        settings.focus_threshold_s,
        settings.clipboard_timeout_s,
    )
    field = APIKeyInput(
        gateway=PyperclipGateway(),
        settings=settings,
        on_state_change=log_state_change,
    )
    app = KeyPromptApp(
        field,
        presentation=Presentation(provider_name=args.provider),
        config_store=store,
        config_path=store.display_path(),
    )
    api_key = app.run()
    if not api_key:
        logger.info("Key prompt cancelled")
        return 1
    logger.info("API key saved to %s", store.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
