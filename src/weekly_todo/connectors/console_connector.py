# src/weekly_todo/connectors/console_connector.py

from __future__ import annotations

import logging

from ..checklist.view import build_snapshot
from ..cli.commands import ALL_DONE_MESSAGE, registry as command_registry, render_snapshot
from ..core.state import AppState

logger = logging.getLogger(__name__)

NEW_WEEK_MESSAGE = "New week! Checkmarks have been reset. 🎉"


def run_command(state: AppState, line: str, emit=print) -> str:
    """Run one slash command and return the reply text (never raises)."""
    try:
        reply = command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."
    if reply is None:
        return "Commands start with /. Use /help to list them, /add <text> to add a to-do."
    return reply


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")

    if state.week_was_reset:
        print(NEW_WEEK_MESSAGE)

    snapshot = build_snapshot(state.store, state.links)
    print(render_snapshot(snapshot))
    if snapshot.all_complete:
        print(ALL_DONE_MESSAGE)
    print("\nUse /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        print(run_command(state, user_input))

    logger.info("Console connector finished.")
