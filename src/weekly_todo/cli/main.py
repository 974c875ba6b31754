# src/weekly_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (which runs the weekly reset check),
then either runs the single command given on the command line
(`weekly-todo /list`) or starts the interactive console.
"""

from __future__ import annotations

import logging
import shlex
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import NEW_WEEK_MESSAGE, run_command, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def console_log_level(settings) -> int:
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)
    return level if isinstance(level, int) else logging.WARNING


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()

    console_level = console_log_level(settings)

    log_dir = getattr(settings, "data_dir", ".local/weekly-todo")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "weekly-todo"))

    state = create_initial_state(settings=settings)

    if argv:
        if state.week_was_reset:
            print(NEW_WEEK_MESSAGE)
        line = shlex.join(argv)
        if not line.startswith("/"):
            line = "/" + line
        print(run_command(state, line))
        return 0

    run_console_loop(state)
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
