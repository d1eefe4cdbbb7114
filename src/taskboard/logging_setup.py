# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskboard.log"

# Per-action chatter; shown on the console only when something goes wrong.
_CHATTY = frozenset({"taskboard.core.store", "taskboard.core.reducer", "taskboard.api.transport"})

# Third-party loggers that talk a lot at DEBUG/INFO.
_QUIET = ("urllib3", "asyncio")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable:
    - taskboard.* logs pass, except store/reducer/transport chatter below WARNING
    - captured Python warnings ('py.warnings') and third-party logs need ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskboard."):
            if record.name in _CHATTY:
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """'debug' -> logging.DEBUG; unknown names give `default`."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 2_000_000,
    backups: int = 3,
) -> Path:
    """
    Install two handlers on the root logger and return the log file path.

    Console (stderr): short lines, filtered by _ConsoleNoiseFilter.
    File (<log_dir>/taskboard.log, rotated): everything at file_level and above.

    Call once at startup; calling again replaces the previous handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    to_file = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(to_file)

    logging.captureWarnings(True)
    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.INFO)

    return log_file
