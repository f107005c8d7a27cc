# src/daily_plan/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum

from .errors import ValidationError

SUGGESTED_CATEGORIES: tuple[str, ...] = ("General", "Home", "Academy", "Work", "University")
OTHER_CATEGORY = "Other"
DEFAULT_CATEGORY = "General"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


_PRIORITY_COLORS = {
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
}


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class Task:
    title: str
    start_date: datetime
    category: str
    priority: Priority = Priority.MEDIUM
    is_archived: bool = False
    id: str = field(default_factory=new_task_id)

    def is_due_in_future(self, now: datetime) -> bool:
        return self.start_date > now

    @property
    def short_id(self) -> str:
        return self.id[:8]


def combine_date_time(day: date, at: time) -> datetime:
    """Merge the date picker and the time picker into one instant (minute resolution)."""
    return datetime(day.year, day.month, day.day, at.hour, at.minute)


@dataclass(slots=True)
class TaskDraft:
    """
    Editing form state for a Task.

    Date and time are edited separately and only combined on save; the
    "Other" category switches to a free-form custom category.
    """

    title: str = ""
    category: str = DEFAULT_CATEGORY
    custom_category: str = ""
    start_date: date | None = None
    start_time: time | None = None
    priority: Priority = Priority.LOW

    def __post_init__(self) -> None:
        # Fill both pickers from one clock read so they agree on the day.
        if self.start_date is None or self.start_time is None:
            now = datetime.now()
            if self.start_date is None:
                self.start_date = now.date()
            if self.start_time is None:
                self.start_time = now.time()

    @classmethod
    def blank(cls, now: datetime | None = None) -> TaskDraft:
        now = now or datetime.now()
        return cls(start_date=now.date(), start_time=now.time())

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        if task.category in SUGGESTED_CATEGORIES:
            category, custom = task.category, ""
        else:
            category, custom = OTHER_CATEGORY, task.category
        return cls(
            title=task.title,
            category=category,
            custom_category=custom,
            start_date=task.start_date.date(),
            start_time=task.start_date.time(),
            priority=task.priority,
        )

    @property
    def uses_custom_category(self) -> bool:
        return self.category == OTHER_CATEGORY

    def validate(self) -> None:
        if not self.title.strip():
            raise ValidationError("title is required")
        if self.uses_custom_category and not self.custom_category.strip():
            raise ValidationError("custom category is required when category is 'Other'")

    def final_category(self) -> str:
        if self.uses_custom_category:
            return self.custom_category.strip()
        return self.category

    def combined_start(self) -> datetime:
        return combine_date_time(self.start_date, self.start_time)
