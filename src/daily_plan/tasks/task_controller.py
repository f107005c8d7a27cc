# src/daily_plan/tasks/task_controller.py

from __future__ import annotations

"""
Task list controller.

Turns user intents into ordered store + notification calls:

    validate -> mutate store -> reconcile notification -> (error) roll back

In-memory Task objects are updated optimistically. When the store write
fails the in-memory change is reverted and PersistenceError is re-raised to
the caller. Notification failures never reach the caller (see coordinator).
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime

from ..core.ports import Clock, TaskRepo
from ..notifications.coordinator import NotificationCoordinator
from .errors import PersistenceError
from .task_models import Task, TaskDraft
from .task_views import CategoryGroup, group_by_category

logger = logging.getLogger(__name__)


class TaskListController:
    def __init__(
        self,
        store: TaskRepo,
        coordinator: NotificationCoordinator,
        *,
        clock: Clock = datetime.now,
    ) -> None:
        self._store = store
        self._coordinator = coordinator
        self._clock = clock
        # One intent (including its notification side effect) at a time.
        self._lock = threading.RLock()

    # ---- views ----

    def active_tasks(self) -> list[Task]:
        return self._store.query(archived=False)

    def archived_tasks(self) -> list[Task]:
        return self._store.query(archived=True)

    def active_groups(self) -> list[CategoryGroup]:
        return group_by_category(self.active_tasks())

    def archived_groups(self) -> list[CategoryGroup]:
        return group_by_category(self.archived_tasks())

    def find(self, ref: str) -> Task | None:
        """Look a task up by full id or unambiguous id prefix."""
        task = self._store.get(ref)
        if task is not None:
            return task
        matches = self._store.find_by_prefix(ref)
        if len(matches) == 1:
            return matches[0]
        return None

    # ---- intents ----

    def create(self, draft: TaskDraft) -> Task:
        draft.validate()
        task = Task(
            title=draft.title.strip(),
            start_date=draft.combined_start(),
            category=draft.final_category(),
            priority=draft.priority,
        )

        with self._lock:
            try:
                self._store.insert(task)
            except PersistenceError:
                logger.exception("Error saving new task title=%r", task.title)
                raise
            self._coordinator.schedule(task)

        logger.info("Task created id=%s category=%s start=%s", task.id, task.category, task.start_date)
        return task

    def edit(self, task: Task, draft: TaskDraft) -> Task:
        draft.validate()

        with self._lock:
            before = replace(task)
            self._coordinator.cancel(task)

            task.title = draft.title.strip()
            task.category = draft.final_category()
            task.start_date = draft.combined_start()
            task.priority = draft.priority

            try:
                self._store.update(task)
            except PersistenceError:
                logger.exception("Error saving edited task id=%s; reverting", task.id)
                _copy_fields(before, task)
                self._coordinator.schedule(task)
                raise

            self._coordinator.schedule(task)

        logger.info("Task edited id=%s start=%s", task.id, task.start_date)
        return task

    def archive(self, task: Task) -> None:
        with self._lock:
            self._coordinator.cancel(task)
            task.is_archived = True
            try:
                self._store.update(task)
            except PersistenceError:
                logger.exception("Error archiving task id=%s; reverting", task.id)
                task.is_archived = False
                self._coordinator.schedule(task)
                raise

        logger.info("Task archived id=%s", task.id)

    def restore(self, task: Task) -> None:
        with self._lock:
            task.is_archived = False
            try:
                self._store.update(task)
            except PersistenceError:
                logger.exception("Error restoring task id=%s; rolling back", task.id)
                task.is_archived = True
                try:
                    self._store.update(task)
                except PersistenceError:
                    logger.exception("Re-saving archived state failed task id=%s", task.id)
                raise

            if task.is_due_in_future(self._clock()):
                self._coordinator.schedule(task)

        logger.info("Task restored id=%s", task.id)

    def delete(self, task: Task) -> None:
        with self._lock:
            # The id is gone from the store after this, so cancel first.
            self._coordinator.cancel(task)
            try:
                self._store.delete(task)
            except PersistenceError:
                logger.exception("Error deleting task id=%s", task.id)
                self._coordinator.schedule(task)
                raise

        logger.info("Task deleted id=%s", task.id)

    def delete_all_archived(self) -> int:
        with self._lock:
            archived = self.archived_tasks()
            for task in archived:
                self._coordinator.cancel(task)
                try:
                    self._store.delete(task)
                except PersistenceError:
                    logger.exception("Error deleting archived task id=%s", task.id)
                    raise

        logger.info("Deleted %d archived tasks", len(archived))
        return len(archived)


def _copy_fields(src: Task, dst: Task) -> None:
    dst.title = src.title
    dst.category = src.category
    dst.start_date = src.start_date
    dst.priority = src.priority
    dst.is_archived = src.is_archived
