# src/taskboard/cli/console.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..core.errors import TaskboardError
from ..core.models import BootstrapStatus
from .bootstrap import App
from .commands import registry as command_registry
from .commands import render_board

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def sign_in(app: App) -> bool:
    """
    Get a user into the state: settings user_id/user_name, else prompt for a name.
    Returns False when the user gave up (EOF / Ctrl+C).
    """
    settings = app.settings
    user_id = getattr(settings, "user_id", None)
    user_name = getattr(settings, "user_name", None)

    if user_id is not None:
        asyncio.run(app.controller.bootstrap(user_id, user_name or f"user {user_id}"))
        return True

    while True:
        if not user_name:
            try:
                user_name = input("Your name: ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                return False
        try:
            asyncio.run(app.controller.sign_in(user_name))
            return True
        except (TaskboardError, ValueError) as e:
            _print_ts(f"[SIGN-IN] {e}")
            user_name = None


def run_console_loop(app: App) -> None:
    logger.info("Console started (api=%s).", getattr(app.settings, "api_base_url", "?"))

    if not sign_in(app):
        logger.info("Sign-in aborted, exiting.")
        return

    state = app.store.state
    if state.status == BootstrapStatus.ERRORED:
        _print_ts(f"[LOAD] {state.error}. Use /refresh to retry.")
    else:
        _print_ts(f"Hello, {state.user_name}. Use /help for commands, /exit to quit.\n")
        print(render_board(state))

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(app, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        _print_ts(reply)

    logger.info("Console finished.")
