# tests/test_task_views.py

from __future__ import annotations

from datetime import datetime

from daily_plan.tasks.task_models import Task
from daily_plan.tasks.task_views import group_by_category


def _task(title: str, category: str, archived: bool = False) -> Task:
    return Task(title=title, start_date=datetime(2026, 10, 20, 8, 0), category=category, is_archived=archived)


def test_groups_sorted_by_category_and_keep_order_within() -> None:
    tasks = [_task("h1", "Home"), _task("w1", "Work"), _task("h2", "Home")]

    groups = group_by_category(tasks)

    assert [g.category for g in groups] == ["Home", "Work"]
    assert [t.title for t in groups[0].tasks] == ["h1", "h2"]
    assert len(groups[1]) == 1


def test_empty_input_has_no_groups() -> None:
    assert group_by_category([]) == []
