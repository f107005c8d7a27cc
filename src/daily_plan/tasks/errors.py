# src/daily_plan/tasks/errors.py

from __future__ import annotations


class DailyPlanError(Exception):
    """Base class for errors raised by task and notification operations."""


class ValidationError(DailyPlanError):
    """The form input cannot be saved (empty title, empty custom category)."""


class PersistenceError(DailyPlanError):
    """A write to the task store failed."""


class NotificationSchedulingError(DailyPlanError):
    """The notification center refused or failed a request."""
