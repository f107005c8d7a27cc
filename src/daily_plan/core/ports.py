# src/daily_plan/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller and coordinator depend on Protocols instead of concrete implementations.
This keeps storage and notification delivery swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Awaitable, Protocol

from ..notifications.notification_models import (
    NotificationRequest,
    PresentationOptions,
    TriggerComponents,
)
from ..tasks.task_models import Task

Clock = Callable[[], datetime]


class TaskRepo(Protocol):
    """Durable task collection. Writes raise PersistenceError on failure."""

    def insert(self, task: Task) -> Task: ...
    def update(self, task: Task) -> None: ...
    def delete(self, task: Task) -> None: ...
    def get(self, task_id: str) -> Task | None: ...
    def find_by_prefix(self, prefix: str) -> list[Task]: ...
    def query(self, *, archived: bool | None = None, category: str | None = None) -> list[Task]: ...


class NotificationCenter(Protocol):
    """
    Host-side local notification capability.

    Requests are keyed by identifier; scheduling an identifier that is
    already pending replaces it. Failures raise NotificationSchedulingError.
    """

    def request_permission(self) -> bool: ...

    def schedule_at(
            self,
            identifier: str,
            *,
            title: str,
            body: str,
            trigger: TriggerComponents,
    ) -> None: ...

    def cancel(self, identifiers: Iterable[str]) -> None: ...
    def list_pending(self) -> list[str]: ...


class PresentationDelegate(Protocol):
    """Decides how a notification is shown while the app is in the foreground."""

    def will_present(self, request: NotificationRequest) -> PresentationOptions: ...


class NotificationSink(Protocol):
    """
    Connector-side port: where fired notifications end up (console, etc.).
    """

    def deliver(
            self,
            request: NotificationRequest,
            options: PresentationOptions,
    ) -> Awaitable[None]: ...
