# src/daily_plan/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..notifications.notification_models import NotificationRequest, PresentationOptions

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


@dataclass
class ConsoleNotificationSink:
    """NotificationSink that prints fired notifications to the terminal."""

    stream: TextIO = field(default_factory=lambda: sys.stdout)

    async def deliver(self, request: NotificationRequest, options: PresentationOptions) -> None:
        parts: list[str] = []
        if PresentationOptions.BANNER in options:
            parts.append(f"[{request.title}] {request.body}")
        if PresentationOptions.BADGE in options and request.badge:
            parts.append(f"(badge {request.badge})")
        if not parts:
            return

        bell = "\a" if PresentationOptions.SOUND in options and request.sound else ""
        self.stream.write(f"\n[{_ts_local()}] {' '.join(parts)}{bell}\n")
        self.stream.flush()


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "DailyPlan"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

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
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list them."

        _print_ts(response)

    logger.info("Console connector finished.")
