# src/daily_plan/tasks/task_views.py

"""
Grouped views over task lists.

Grouping is derived on every read, never stored. Group keys are sorted
lexicographically; tasks inside a group keep the order they were given in.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .task_models import Task


@dataclass(slots=True, frozen=True)
class CategoryGroup:
    category: str
    tasks: tuple[Task, ...]

    def __len__(self) -> int:
        return len(self.tasks)


def group_by_category(tasks: Iterable[Task]) -> list[CategoryGroup]:
    buckets: dict[str, list[Task]] = {}
    for task in tasks:
        buckets.setdefault(task.category, []).append(task)
    return [CategoryGroup(category=name, tasks=tuple(buckets[name])) for name in sorted(buckets)]
