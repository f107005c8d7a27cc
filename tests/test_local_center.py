# tests/test_local_center.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from daily_plan.notifications.local_center import LocalNotificationCenter
from daily_plan.notifications.notification_models import TriggerComponents
from daily_plan.tasks.errors import NotificationSchedulingError


def _trigger(hour: int, minute: int = 0) -> TriggerComponents:
    return TriggerComponents(year=2026, month=10, day=19, hour=hour, minute=minute)


def test_schedule_requires_permission(tmp_path: Path) -> None:
    center = LocalNotificationCenter(tmp_path / "n.sqlite3", permission_granted=False)

    assert center.request_permission() is False
    with pytest.raises(NotificationSchedulingError):
        center.schedule_at("t1", title="T", body="B", trigger=_trigger(10))
    assert center.list_pending() == []


def test_schedule_replaces_and_cancel_is_idempotent(tmp_path: Path) -> None:
    center = LocalNotificationCenter(tmp_path / "n.sqlite3")
    assert center.request_permission() is True

    center.schedule_at("t1", title="T", body="first", trigger=_trigger(10))
    center.schedule_at("t1", title="T", body="second", trigger=_trigger(11, 15))

    assert center.list_pending() == ["t1"]
    request = center.get_pending("t1")
    assert request is not None
    assert request.body == "second"
    assert request.fire_at == datetime(2026, 10, 19, 11, 15)

    center.cancel(["t1"])
    center.cancel(["t1", "unknown"])
    assert center.list_pending() == []


def test_take_due_removes_only_due_requests(tmp_path: Path) -> None:
    center = LocalNotificationCenter(tmp_path / "n.sqlite3")
    center.request_permission()
    center.schedule_at("early", title="T", body="early", trigger=_trigger(9, 30))
    center.schedule_at("late", title="T", body="late", trigger=_trigger(12))

    due = center.take_due(datetime(2026, 10, 19, 9, 30, 5))

    assert [r.identifier for r in due] == ["early"]
    assert center.list_pending() == ["late"]
    assert center.take_due(datetime(2026, 10, 19, 9, 31)) == []


def test_pending_requests_survive_restart(tmp_path: Path) -> None:
    db = tmp_path / "n.sqlite3"
    center = LocalNotificationCenter(db)
    center.request_permission()
    center.schedule_at("t1", title="T", body="B", trigger=_trigger(10))

    reopened = LocalNotificationCenter(db)
    assert reopened.list_pending() == ["t1"]


def test_take_due_keeps_a_request_rescheduled_while_taking(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    center = LocalNotificationCenter(tmp_path / "n.sqlite3")
    center.request_permission()
    center.schedule_at("t1", title="T", body="old", trigger=_trigger(9, 30))

    to_request = LocalNotificationCenter._row_to_request

    def reschedule_while_reading(row):
        request = to_request(row)
        if request.body == "old":
            # the console thread moves the task to tomorrow between SELECT and DELETE
            tomorrow = TriggerComponents(year=2026, month=10, day=20, hour=9, minute=30)
            center.schedule_at("t1", title="T", body="new", trigger=tomorrow)
        return request

    monkeypatch.setattr(LocalNotificationCenter, "_row_to_request", staticmethod(reschedule_while_reading))

    due = center.take_due(datetime(2026, 10, 19, 9, 31))

    assert due == []
    assert center.list_pending() == ["t1"]
    pending = center.get_pending("t1")
    assert pending is not None
    assert pending.body == "new"
    assert pending.fire_at == datetime(2026, 10, 20, 9, 30)
