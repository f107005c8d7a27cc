# src/daily_plan/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task store, notification center, coordinator and controller into AppState,
- asks for notification permission and reconciles pending notifications on start-up.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import get_settings
from ..core.ports import Clock
from ..core.state import AppState
from ..notifications.coordinator import NotificationCoordinator
from ..notifications.local_center import LocalNotificationCenter
from ..tasks.errors import PersistenceError
from ..tasks.task_controller import TaskListController
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.notifications_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: Clock = datetime.now) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    center = LocalNotificationCenter(
        settings.notifications_db_path,
        permission_granted=settings.notifications_enabled,
    )
    coordinator = NotificationCoordinator(center, clock=clock)
    controller = TaskListController(task_store, coordinator, clock=clock)

    return AppState(
        settings=settings,
        task_store=task_store,
        notification_center=center,
        coordinator=coordinator,
        controller=controller,
    )


def prepare_notifications(state: AppState) -> None:
    """Request notification permission, then line pending notifications up with the store."""
    state.notifications_authorized = state.coordinator.request_authorization()
    if not state.notifications_authorized:
        return

    try:
        active = state.controller.active_tasks()
    except PersistenceError:
        logger.exception("Cannot read tasks for notification reconcile")
        return

    state.coordinator.reconcile(active)
