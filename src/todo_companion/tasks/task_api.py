# src/todo_companion/tasks/task_api.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Collection

from ..core.errors import ValidationError
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


class IdFactory:
    """
    Time-based task ids ("1718000000000").

    Two tasks created within the same millisecond would get the same id, so a
    repeated id (already issued by this factory, or present in `taken`) gets a
    counter suffix: "1718000000000-1", "1718000000000-2", ...
    """

    def __init__(self, clock: Clock = now_ms) -> None:
        self._clock = clock
        self._issued: set[str] = set()

    def new_id(self, taken: Collection[str] = ()) -> str:
        base = str(self._clock())
        candidate = base
        n = 0
        while candidate in self._issued or candidate in taken:
            n += 1
            candidate = f"{base}-{n}"
        self._issued.add(candidate)
        return candidate


def normalize_title(title: str | None) -> str:
    t = (title or "").strip()
    if not t:
        raise ValidationError("title is required")
    return t


def create_task(
    title: str | None,
    description: str | None = None,
    category: Category | str | None = Category.OTHER,
    priority: Priority | str | None = Priority.MEDIUM,
    due_date: int | None = None,
    *,
    id_factory: IdFactory | None = None,
    taken: Collection[str] = (),
    clock: Clock = now_ms,
) -> Task | None:
    """
    Build a new open task stamped with id and created_at.

    Returns None when the title is blank; the caller decides whether to tell the user.
    """
    try:
        clean_title = normalize_title(title)
    except ValidationError:
        logger.debug("create_task rejected: blank title")
        return None

    factory = id_factory or IdFactory(clock)
    return Task(
        id=factory.new_id(taken),
        title=clean_title,
        created_at=clock(),
        completed=False,
        category=Category.coerce(category),
        priority=Priority.coerce(priority),
        description=(description or "").strip() or None,
        due_date=due_date or None,
    )
