# src/daily_plan/logging_setup.py

"""
Logging for the console app.

Three destinations:
- stderr: app records, kept short so they do not bury the REPL prompt
- daily_plan.log: everything down to file_level
- notifications.log: scheduling, cancellation and delivery history only
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .notifications.dispatcher import DISPATCHER_THREAD_NAME

APP_LOGGER = "daily_plan"
NOTIFICATIONS_LOGGER = "daily_plan.notifications"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ConsolePromptFilter(logging.Filter):
    """
    Decide what reaches stderr while the REPL owns the terminal.

    The dispatcher thread prints deliveries through its sink, so its own
    records only show at WARNING+. Anything outside the app shows at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.threadName == DISPATCHER_THREAD_NAME:
            return record.levelno >= logging.WARNING
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def notification_history_handler(path: str | Path, level: int = logging.INFO) -> logging.Handler:
    """File handler that keeps only records from the notifications package."""
    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
    handler.addFilter(logging.Filter(NOTIFICATIONS_LOGGER))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/daily_plan",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the handlers on the root logger. Call once at start-up; returns the main log path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "daily_plan.log"

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level, logging.INFO))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(_FORMAT, _DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(ConsolePromptFilter())

    full = logging.FileHandler(str(log_file), encoding="utf-8")
    full.setLevel(file_level)
    full.setFormatter(fmt)

    for handler in (console, full, notification_history_handler(log_dir / "notifications.log")):
        root.addHandler(handler)

    logging.captureWarnings(True)
    return log_file
