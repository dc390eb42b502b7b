# src/todo_companion/tasks/task_controller.py

from __future__ import annotations

"""
Collection controller.

Owns the canonical task sequence. Every effective mutation replaces the
sequence and then hands it to the injected TaskRepo; every read goes through
filter -> sort and is recomputed on each call.
"""

import logging
from typing import Any

from ..core.errors import FormatError, StorageError
from ..core.ports import TaskRepo
from .task_api import Clock, IdFactory, create_task, now_ms
from .task_filter import ALL_CATEGORIES, filter_by_category
from .task_merge import merge_tasks
from .task_models import Category, Priority, Task, task_from_record
from .task_sort import SortMode, sort_tasks

logger = logging.getLogger(__name__)


class TaskController:
    def __init__(
        self,
        store: TaskRepo,
        *,
        id_factory: IdFactory | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._clock = clock
        self._ids = id_factory or IdFactory(clock)
        self._tasks: list[Task] = self._load()

    # ---- persistence ----

    def _load(self) -> list[Task]:
        try:
            raw = self._store.load()
        except StorageError:
            logger.exception("Failed to load tasks; starting with an empty list.")
            return []

        good: list[Task] = []
        for i, rec in enumerate(raw, start=1):
            try:
                good.append(task_from_record(rec))
            except FormatError as e:
                logger.warning("Skipping stored task #%d: %s", i, e)

        # Collapse duplicate ids (last one wins) so ids are unique from here on.
        tasks = merge_tasks([], good)
        logger.info("Loaded %d tasks", len(tasks))
        return tasks

    def _commit(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        try:
            self._store.save(tasks)
        except StorageError:
            logger.exception("Failed to save tasks; keeping in-memory state.")

    # ---- reads ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def view(
        self,
        selector: Category | str | None = ALL_CATEGORIES,
        mode: SortMode | str = SortMode.NONE,
    ) -> list[Task]:
        return sort_tasks(filter_by_category(self._tasks, selector), mode)

    # ---- mutations ----

    def add(
        self,
        title: str | None,
        description: str | None = None,
        category: Category | str | None = None,
        priority: Priority | str | None = None,
        due_date: int | None = None,
    ) -> Task | None:
        task = create_task(
            title,
            description,
            category,
            priority,
            due_date,
            id_factory=self._ids,
            taken={t.id for t in self._tasks},
            clock=self._clock,
        )
        if task is None:
            return None
        self._commit([*self._tasks, task])
        logger.debug("Task added id=%s", task.id)
        return task

    def toggle(self, task_id: str) -> Task | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                flipped = t.toggled()
                tasks = list(self._tasks)
                tasks[i] = flipped
                self._commit(tasks)
                logger.debug("Task toggled id=%s completed=%s", task_id, flipped.completed)
                return flipped
        return None

    def remove(self, task_id: str) -> bool:
        tasks = [t for t in self._tasks if t.id != task_id]
        if len(tasks) == len(self._tasks):
            return False
        self._commit(tasks)
        logger.debug("Task removed id=%s", task_id)
        return True

    def import_merge(self, raw_tasks: Any) -> int:
        """
        Merge an imported batch by id. Returns the number of incoming tasks.

        Raises FormatError (state untouched) if any item is malformed.
        """
        merged = merge_tasks(self._tasks, raw_tasks)
        self._commit(merged)
        count = len(raw_tasks)
        logger.info("Imported %d tasks (collection now %d)", count, len(merged))
        return count
