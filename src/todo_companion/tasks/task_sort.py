# src/todo_companion/tasks/task_sort.py

"""
Sort pipeline for the derived view.

Every mode is one stable sort whose leading key is `completed`, so open tasks
always come before finished ones and ties keep their input order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from .task_models import Task


class SortMode(StrEnum):
    NONE = "none"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"
    CREATED_AT = "createdAt"

    @classmethod
    def coerce(cls, raw: Any) -> SortMode:
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            s = raw.strip()
            for mode in cls:
                if s.lower() in (mode.value.lower(), mode.name.lower()):
                    return mode
        return cls.NONE


def _key_none(t: Task) -> tuple:
    return (t.completed,)


def _key_priority(t: Task) -> tuple:
    return (t.completed, -t.priority.rank)


def _key_due_date(t: Task) -> tuple:
    # Tasks without a deadline go after every task that has one.
    if t.due_date is None:
        return (t.completed, 1, 0)
    return (t.completed, 0, t.due_date)


def _key_created_at(t: Task) -> tuple:
    return (t.completed, -t.created_at)


_KEYS: dict[SortMode, Callable[[Task], tuple]] = {
    SortMode.NONE: _key_none,
    SortMode.PRIORITY: _key_priority,
    SortMode.DUE_DATE: _key_due_date,
    SortMode.CREATED_AT: _key_created_at,
}


def sort_tasks(tasks: Iterable[Task], mode: SortMode | str = SortMode.NONE) -> list[Task]:
    return sorted(tasks, key=_KEYS[SortMode.coerce(mode)])
