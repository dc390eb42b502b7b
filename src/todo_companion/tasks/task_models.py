# src/todo_companion/tasks/task_models.py

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from ..core.errors import FormatError


class Category(StrEnum):
    """
    Closed set of task categories.

    Values are the labels stored in the database and in export files;
    member names are the English aliases accepted by the console.
    """

    WORK = "工作"
    STUDY = "学习"
    LIFE = "生活"
    OTHER = "其他"

    @classmethod
    def coerce(cls, raw: Any) -> Category:
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            s = raw.strip()
            try:
                return cls(s)
            except ValueError:
                pass
            member = cls.__members__.get(s.upper())
            if member is not None:
                return member
        return cls.OTHER


class Priority(StrEnum):
    """Closed ordered set of priorities (HIGH > MEDIUM > LOW)."""

    HIGH = "高"
    MEDIUM = "中"
    LOW = "低"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def coerce(cls, raw: Any) -> Priority:
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            s = raw.strip()
            try:
                return cls(s)
            except ValueError:
                pass
            member = cls.__members__.get(s.upper())
            if member is not None:
                return member
        return cls.MEDIUM


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    created_at: int  # epoch milliseconds
    completed: bool = False
    category: Category = Category.OTHER
    priority: Priority = Priority.MEDIUM

    description: str | None = None
    due_date: int | None = None  # epoch milliseconds, None = no deadline

    def toggled(self) -> Task:
        return replace(self, completed=not self.completed)

    def is_overdue(self, now_ms: int) -> bool:
        """Display-only: has a deadline in the past and is still open."""
        return self.due_date is not None and not self.completed and self.due_date < now_ms

    def to_record(self) -> dict[str, Any]:
        """JSON record as stored and exported (optional fields omitted when absent)."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
        }
        if self.description is not None:
            out["description"] = self.description
        out["completed"] = self.completed
        out["createdAt"] = self.created_at
        out["category"] = self.category.value
        out["priority"] = self.priority.value
        if self.due_date is not None:
            out["dueDate"] = self.due_date
        return out


def _is_number(v: Any) -> bool:
    # JSON Infinity/NaN (and overflowing literals like 1e400) decode to non-finite floats.
    if isinstance(v, float):
        return math.isfinite(v)
    return isinstance(v, int) and not isinstance(v, bool)


def task_from_record(raw: Any) -> Task:
    """
    Validate a task-shaped record and apply field defaults.

    This is the single ingress point for external data (load and import).
    Structural problems raise FormatError; unknown category/priority values
    are coerced to their defaults instead.
    """
    if isinstance(raw, Task):
        return raw
    if not isinstance(raw, Mapping):
        raise FormatError(f"expected an object, got {type(raw).__name__}")

    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
        raise FormatError("missing or invalid 'id'")
    task_id = str(raw_id).strip()
    if not task_id:
        raise FormatError("empty 'id'")

    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise FormatError("missing or empty 'title'")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise FormatError("'completed' must be true or false")

    created_at = raw.get("createdAt", 0)
    if not _is_number(created_at):
        raise FormatError("'createdAt' must be a number")

    due_date = raw.get("dueDate")
    if due_date is not None and not _is_number(due_date):
        raise FormatError("'dueDate' must be a number")

    description = raw.get("description")
    if description is not None and not isinstance(description, str):
        raise FormatError("'description' must be a string")

    return Task(
        id=task_id,
        title=title,
        created_at=int(created_at),
        completed=completed,
        category=Category.coerce(raw.get("category")),
        priority=Priority.coerce(raw.get("priority")),
        description=description or None,
        # 0 means "no deadline", as the stored data has always treated it.
        due_date=int(due_date) if due_date else None,
    )
