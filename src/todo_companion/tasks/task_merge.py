# src/todo_companion/tasks/task_merge.py

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..core.errors import FormatError
from .task_models import Task, task_from_record


def validate_incoming(incoming: Any) -> list[Task]:
    """
    Validate a whole incoming batch before anything is merged.

    Raises FormatError naming the first bad item; nothing is returned partially.
    """
    if isinstance(incoming, (str, bytes, Mapping)) or not isinstance(incoming, Sequence):
        raise FormatError("Import data must be a JSON array of tasks.")

    out: list[Task] = []
    for i, raw in enumerate(incoming, start=1):
        try:
            out.append(task_from_record(raw))
        except FormatError as e:
            raise FormatError(f"Item #{i} is not a valid task: {e}") from e
    return out


def merge_tasks(current: Sequence[Task], incoming: Any) -> list[Task]:
    """
    Merge `incoming` into `current` by id.

    - known id: replaced in place (whole task, not field-by-field)
    - new id: appended
    - later duplicates inside `incoming` win
    """
    batch = validate_incoming(incoming)

    merged = list(current)
    index = {t.id: i for i, t in enumerate(merged)}

    for task in batch:
        pos = index.get(task.id)
        if pos is None:
            index[task.id] = len(merged)
            merged.append(task)
        else:
            merged[pos] = task
    return merged
