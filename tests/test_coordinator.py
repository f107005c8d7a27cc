# tests/test_coordinator.py

from __future__ import annotations

from datetime import datetime, timedelta

from daily_plan.notifications.coordinator import NotificationCoordinator
from daily_plan.notifications.notification_models import (
    NOTIFICATION_TITLE,
    NotificationRequest,
    PresentationOptions,
    TriggerComponents,
)
from daily_plan.tasks.task_models import Task

from .conftest import NOW
from .fakes import FakeNotificationCenter


def _task(start: datetime, **kw) -> Task:
    return Task(title="Buy milk", start_date=start, category="Home", **kw)


def test_schedule_future_task_registers_one_request(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter
) -> None:
    task = _task(NOW + timedelta(hours=1))

    assert coordinator.schedule(task) is True

    request = center.pending[task.id]
    assert request.title == NOTIFICATION_TITLE
    assert "Buy milk" in request.body
    assert request.fire_at == NOW + timedelta(hours=1)


def test_trigger_drops_seconds() -> None:
    trigger = TriggerComponents.from_datetime(datetime(2026, 10, 19, 10, 5, 42))
    assert trigger.to_datetime() == datetime(2026, 10, 19, 10, 5)


def test_past_or_now_start_is_a_silent_no_op(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter
) -> None:
    assert coordinator.schedule(_task(NOW)) is False
    assert coordinator.schedule(_task(NOW - timedelta(minutes=5))) is False
    assert center.pending == {}
    assert center.schedule_calls == []


def test_rescheduling_replaces_instead_of_stacking(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter
) -> None:
    task = _task(NOW + timedelta(hours=1))
    coordinator.schedule(task)

    task.start_date = NOW + timedelta(hours=3)
    coordinator.schedule(task)

    assert list(center.pending) == [task.id]
    assert center.pending[task.id].fire_at == NOW + timedelta(hours=3)
    assert task.id in center.cancel_calls


def test_archived_task_is_never_scheduled(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter
) -> None:
    assert coordinator.schedule(_task(NOW + timedelta(hours=1), is_archived=True)) is False
    assert center.pending == {}


def test_cancel_is_idempotent(coordinator: NotificationCoordinator, center: FakeNotificationCenter) -> None:
    task = _task(NOW + timedelta(hours=1))
    coordinator.schedule(task)

    coordinator.cancel(task)
    coordinator.cancel(task)

    assert center.pending == {}


def test_center_failures_are_logged_not_raised(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter, caplog
) -> None:
    center.fail = True
    task = _task(NOW + timedelta(hours=1))

    assert coordinator.schedule(task) is False
    coordinator.cancel(task)
    assert coordinator.pending_ids() == []
    assert "Error scheduling notification" in caplog.text


def test_denied_permission_is_reported(clock) -> None:
    coordinator = NotificationCoordinator(FakeNotificationCenter(granted=False), clock=clock)
    assert coordinator.request_authorization() is False


def test_foreground_presentation_is_always_full(coordinator: NotificationCoordinator) -> None:
    request = NotificationRequest(
        identifier="x",
        title=NOTIFICATION_TITLE,
        body="b",
        trigger=TriggerComponents.from_datetime(NOW),
    )
    options = coordinator.will_present(request)
    assert options == PresentationOptions.BANNER | PresentationOptions.SOUND | PresentationOptions.BADGE


def test_reconcile_cancels_orphans_and_schedules_missing(
    coordinator: NotificationCoordinator, center: FakeNotificationCenter
) -> None:
    kept = _task(NOW + timedelta(hours=1))
    missing = _task(NOW + timedelta(hours=2))
    past = _task(NOW - timedelta(hours=2))
    coordinator.schedule(kept)
    center.pending["orphan"] = center.pending[kept.id]

    result = coordinator.reconcile([kept, missing, past])

    assert result.cancelled == 1
    assert result.scheduled == 1
    assert set(center.pending) == {kept.id, missing.id}
