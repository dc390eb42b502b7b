# src/todo_companion/tasks/task_filter.py

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Category, Task

ALL_CATEGORIES = "全部"

_ALL_ALIASES = {ALL_CATEGORIES, "all", "*", ""}


def normalize_selector(selector: Category | str | None) -> Category | str | None:
    """
    Map user input to a Category or the ALL_CATEGORIES sentinel.

    Strings are matched against category values and member names
    (case-insensitive). Anything else returns None, which matches no task.
    """
    if selector is None:
        return ALL_CATEGORIES
    if isinstance(selector, Category):
        return selector
    s = selector.strip()
    if s.lower() in _ALL_ALIASES:
        return ALL_CATEGORIES
    try:
        return Category(s)
    except ValueError:
        return Category.__members__.get(s.upper())


def filter_by_category(tasks: Iterable[Task], selector: Category | str | None) -> list[Task]:
    sel = normalize_selector(selector)
    if sel == ALL_CATEGORIES:
        return list(tasks)
    if sel is None:
        return []
    return [t for t in tasks if t.category == sel]
