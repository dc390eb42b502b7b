# tests/test_task_view.py

from __future__ import annotations

import random

import pytest

from todo_companion.tasks.task_filter import ALL_CATEGORIES, filter_by_category
from todo_companion.tasks.task_models import Category, Priority, task_from_record
from todo_companion.tasks.task_sort import SortMode, sort_tasks

from .fakes import make_task


def _ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def test_priority_sort_scenario() -> None:
    tasks = [
        task_from_record({"id": 1, "title": "A", "priority": "低", "completed": False}),
        task_from_record({"id": 2, "title": "B", "priority": "高", "completed": False}),
        task_from_record({"id": 3, "title": "C", "priority": "中", "completed": True}),
    ]
    assert _ids(sort_tasks(tasks, SortMode.PRIORITY)) == ["2", "1", "3"]


def test_due_date_sort_scenario() -> None:
    tasks = [
        make_task("1", due_date=None),
        make_task("2", due_date=100),
        make_task("3", due_date=50),
    ]
    assert _ids(sort_tasks(tasks, "dueDate")) == ["3", "2", "1"]


def test_created_at_sort_is_newest_first_within_open_tasks() -> None:
    tasks = [
        make_task("old", created_at=1),
        make_task("done-new", created_at=99, completed=True),
        make_task("new", created_at=50),
    ]
    assert _ids(sort_tasks(tasks, SortMode.CREATED_AT)) == ["new", "old", "done-new"]


def test_none_mode_is_a_stable_partition() -> None:
    tasks = [
        make_task("a", completed=True),
        make_task("b"),
        make_task("c", completed=True),
        make_task("d"),
    ]
    assert _ids(sort_tasks(tasks)) == ["b", "d", "a", "c"]


def test_unknown_mode_falls_back_to_none() -> None:
    tasks = [make_task("a", completed=True), make_task("b")]
    assert _ids(sort_tasks(tasks, "bogus")) == ["b", "a"]


def test_sort_returns_a_new_list_and_leaves_input_alone() -> None:
    tasks = [make_task("a", completed=True), make_task("b")]
    before = list(tasks)
    out = sort_tasks(tasks, SortMode.PRIORITY)
    assert out is not tasks
    assert tasks == before


@pytest.mark.parametrize("mode", list(SortMode))
def test_completion_dominates_and_ties_keep_input_order(mode: SortMode) -> None:
    rng = random.Random(7)
    tasks = [
        make_task(
            str(i),
            completed=rng.random() < 0.5,
            priority=rng.choice(list(Priority)),
            created_at=rng.choice([10, 20]),
            due_date=rng.choice([None, 100, 200]),
        )
        for i in range(40)
    ]
    out = sort_tasks(tasks, mode)

    # Every open task precedes every completed task.
    flags = [t.completed for t in out]
    assert flags == sorted(flags)

    # Tasks with identical keys keep their relative input order.
    position = {t.id: i for i, t in enumerate(tasks)}

    def key(t):
        return (t.completed, t.priority, t.created_at, t.due_date)

    for i, a in enumerate(out):
        for b in out[i + 1 :]:
            if mode is SortMode.NONE:
                same = a.completed == b.completed
            elif mode is SortMode.PRIORITY:
                same = (a.completed, a.priority) == (b.completed, b.priority)
            elif mode is SortMode.DUE_DATE:
                same = (a.completed, a.due_date) == (b.completed, b.due_date)
            else:
                same = (a.completed, a.created_at) == (b.completed, b.created_at)
            if same:
                assert position[a.id] < position[b.id], (mode, key(a), key(b))


def test_filter_all_is_identity() -> None:
    tasks = [make_task("a", category=Category.WORK), make_task("b", category=Category.LIFE)]
    out = filter_by_category(tasks, ALL_CATEGORIES)
    assert out == tasks
    assert filter_by_category(tasks, "all") == tasks


def test_filter_keeps_matching_category_in_order() -> None:
    tasks = [
        make_task("a", category=Category.WORK),
        make_task("b", category=Category.LIFE),
        make_task("c", category=Category.WORK),
    ]
    assert _ids(filter_by_category(tasks, Category.WORK)) == ["a", "c"]
    assert _ids(filter_by_category(tasks, "生活")) == ["b"]


def test_filter_accepts_names_and_rejects_unknown_selectors() -> None:
    tasks = [make_task("a", category=Category.WORK), make_task("b", category=Category.OTHER)]
    assert _ids(filter_by_category(tasks, "work")) == ["a"]
    assert _ids(filter_by_category(tasks, " Other ")) == ["b"]
    assert filter_by_category(tasks, "bogus") == []
