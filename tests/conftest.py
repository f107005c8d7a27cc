# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_plan.cli.bootstrap import create_initial_state
from daily_plan.core.state import AppState
from daily_plan.notifications.coordinator import NotificationCoordinator
from daily_plan.tasks.task_controller import TaskListController

from .fakes import FakeNotificationCenter, FixedClock, FlakyTaskStore

NOW = datetime(2026, 10, 19, 9, 0)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="DailyPlan",
        log_level="INFO",
        console_enabled=False,
        notifications_enabled=True,
        dispatch_interval_seconds=0.01,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        notifications_db_path=tmp_path / "notifications.sqlite3",
    )


@pytest.fixture()
def center() -> FakeNotificationCenter:
    return FakeNotificationCenter()


@pytest.fixture()
def store(tmp_path: Path) -> FlakyTaskStore:
    return FlakyTaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def coordinator(center: FakeNotificationCenter, clock: FixedClock) -> NotificationCoordinator:
    coordinator = NotificationCoordinator(center, clock=clock)
    coordinator.request_authorization()
    return coordinator


@pytest.fixture()
def controller(
    store: FlakyTaskStore,
    coordinator: NotificationCoordinator,
    clock: FixedClock,
) -> TaskListController:
    """
    Controller wired with a real SQLite store and an in-memory notification center.
    """
    return TaskListController(store, coordinator, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FixedClock) -> AppState:
    """AppState built by the real composition root (SQLite store + local center)."""
    return create_initial_state(settings=settings, clock=clock)
