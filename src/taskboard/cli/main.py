# src/taskboard/cli/main.py

"""
`taskboard` console script.

Logging first, then the App (store + board API + controller), then the REPL.
The HTTP session is closed on the way out, whatever happened in between.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..logging_setup import level_from_name, setup_logging
from .bootstrap import create_app
from .console import run_console_loop

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=level_from_name(settings.log_level),
    )
    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)

    app = create_app(settings=settings)
    try:
        run_console_loop(app)
    finally:
        app.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
