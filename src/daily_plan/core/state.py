# src/daily_plan/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..notifications.coordinator import NotificationCoordinator
from ..notifications.local_center import LocalNotificationCenter
from ..tasks.task_controller import TaskListController
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same attributes).
    settings: object

    task_store: TaskStore
    notification_center: LocalNotificationCenter
    coordinator: NotificationCoordinator
    controller: TaskListController

    notifications_authorized: bool = False
