# src/daily_plan/notifications/coordinator.py

from __future__ import annotations

"""
Notification coordinator.

Keeps at most one pending notification per task, keyed by task id:
- schedule() replaces whatever is pending for the id (never stacks),
- past-dated or archived tasks never get a notification,
- cancel() is idempotent.

Notifications are a best-effort side effect: center failures are logged and
swallowed here so they never block or roll back a task mutation.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from ..core.ports import Clock, NotificationCenter
from ..tasks.task_models import Task
from .notification_models import (
    NOTIFICATION_TITLE,
    NotificationRequest,
    PresentationOptions,
    TriggerComponents,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ReconcileResult:
    cancelled: int
    scheduled: int


class NotificationCoordinator:
    def __init__(self, center: NotificationCenter, *, clock: Clock = datetime.now) -> None:
        self._center = center
        self._clock = clock

    def request_authorization(self) -> bool:
        try:
            granted = bool(self._center.request_permission())
        except Exception:
            logger.exception("Notification permission request failed")
            return False

        if granted:
            logger.info("Notification permission granted")
        else:
            logger.warning("Notification permission denied")
        return granted

    def schedule(self, task: Task) -> bool:
        """
        Register a single-shot notification at task.start_date.

        Returns True if a notification is now pending for the task.
        """
        if task.is_archived:
            logger.debug("Not scheduling notification for archived task id=%s", task.id)
            return False

        now = self._clock()
        if not task.is_due_in_future(now):
            logger.info("Cannot schedule notification for past date task id=%s start=%s", task.id, task.start_date)
            return False

        self.cancel(task)

        trigger = TriggerComponents.from_datetime(task.start_date)
        try:
            self._center.schedule_at(
                task.id,
                title=NOTIFICATION_TITLE,
                body=task.title,
                trigger=trigger,
            )
        except Exception:
            logger.exception("Error scheduling notification task id=%s", task.id)
            return False

        logger.info("Scheduled notification task id=%s at %s", task.id, trigger.to_datetime())
        return True

    def cancel(self, task: Task) -> None:
        self.cancel_id(task.id)

    def cancel_id(self, task_id: str) -> None:
        try:
            self._center.cancel([task_id])
        except Exception:
            logger.exception("Error cancelling notification task id=%s", task_id)
            return
        logger.debug("Cancelled notification task id=%s", task_id)

    def pending_ids(self) -> list[str]:
        try:
            return list(self._center.list_pending())
        except Exception:
            logger.exception("Listing pending notifications failed")
            return []

    def will_present(self, request: NotificationRequest) -> PresentationOptions:
        # Foreground notifications are always shown in full.
        return PresentationOptions.full()

    def reconcile(self, active_tasks: Iterable[Task]) -> ReconcileResult:
        """
        Bring pending notifications in line with the active tasks.

        Pending ids without an active task are cancelled (orphans left by
        deletes or archives that happened while the center was unreachable);
        active future tasks with nothing pending are scheduled.
        """
        active = {t.id: t for t in active_tasks if not t.is_archived}
        pending = set(self.pending_ids())

        cancelled = 0
        for task_id in sorted(pending - set(active)):
            self.cancel_id(task_id)
            cancelled += 1

        scheduled = 0
        for task_id, task in active.items():
            if task_id in pending:
                continue
            if self.schedule(task):
                scheduled += 1

        if cancelled or scheduled:
            logger.info("Reconciled notifications: cancelled=%s scheduled=%s", cancelled, scheduled)
        return ReconcileResult(cancelled=cancelled, scheduled=scheduled)
