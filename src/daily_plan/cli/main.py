# src/daily_plan/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the notification dispatcher in a background thread,
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state, prepare_notifications
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotificationSink, run_console_loop
from ..logging_setup import setup_logging
from ..notifications.dispatcher import start_dispatcher_in_background

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    prepare_notifications(state)

    dispatcher = start_dispatcher_in_background(
        state.notification_center,
        ConsoleNotificationSink(),
        state.coordinator,
        interval_seconds=settings.dispatch_interval_seconds,
    )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
        if not settings.console_enabled:
            signal.signal(signal.SIGINT, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM, etc.
        logger.debug("Signal handlers not installed.", exc_info=True)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled. Delivering notifications only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if dispatcher is not None:
            dispatcher.stop()
            dispatcher.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
