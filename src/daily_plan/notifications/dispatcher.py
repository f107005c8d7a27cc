# src/daily_plan/notifications/dispatcher.py

from __future__ import annotations

"""
Notification dispatcher.

A small polling loop that:
- takes due requests from the local notification center,
- asks the presentation delegate how to show each one,
- hands them to an injected sink (console, ...) unless suppressed.

Delivery (formatting, transport) belongs to the sink, not the dispatcher.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import Clock, NotificationSink, PresentationDelegate
from .local_center import LocalNotificationCenter
from .notification_models import PresentationOptions

logger = logging.getLogger(__name__)

DISPATCHER_THREAD_NAME = "notification-dispatcher"


async def run_notification_dispatcher(
        center: LocalNotificationCenter,
        sink: NotificationSink,
        delegate: PresentationDelegate,
        *,
        interval_seconds: float = 15.0,
        clock: Clock = datetime.now,
) -> None:
    """
    Every interval_seconds:
    - take due requests (fire_at <= now); they stop being pending
    - ask delegate.will_present(...) for presentation options
    - deliver via sink.deliver(...) unless the options are empty

    A failed delivery is logged and dropped; single-shot requests are not retried.

    To stop the dispatcher, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            due = center.take_due(clock())
        except Exception:
            logger.exception("take_due failed")
            due = []

        for request in due:
            try:
                options = delegate.will_present(request)
            except Exception:
                logger.exception("will_present failed id=%s; using full presentation", request.identifier)
                options = PresentationOptions.full()

            if not options:
                logger.info("Notification suppressed id=%s", request.identifier)
                continue

            try:
                await sink.deliver(request, options)
                logger.info("Notification delivered id=%s", request.identifier)
            except Exception:
                logger.exception("Notification delivery failed id=%s", request.identifier)

        await asyncio.sleep(sleep_s)


@dataclass
class DispatcherBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal dispatcher stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _run_until_stopped(stop_event: asyncio.Event, make_dispatcher: Callable[[], Awaitable[None]]) -> None:
    task = asyncio.ensure_future(make_dispatcher())
    try:
        await stop_event.wait()
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


def start_dispatcher_in_background(
        center: LocalNotificationCenter,
        sink: NotificationSink,
        delegate: PresentationDelegate,
        *,
        interval_seconds: float = 15.0,
) -> DispatcherBackgroundRunner | None:
    """
    Start the dispatcher on its own event loop in a background thread,
    so the blocking console REPL can run in the main thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                _run_until_stopped(
                    stop_event,
                    lambda: run_notification_dispatcher(
                        center,
                        sink,
                        delegate,
                        interval_seconds=interval_seconds,
                    ),
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=DISPATCHER_THREAD_NAME, daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Dispatcher thread did not initialize properly.")
        return None

    logger.info("Notification dispatcher started (interval=%ss).", interval_seconds)
    return DispatcherBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
