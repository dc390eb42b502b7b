# tests/test_task_controller.py

from __future__ import annotations

import logging

import pytest

from todo_companion.core.errors import FormatError
from todo_companion.tasks.task_controller import TaskController
from todo_companion.tasks.task_models import Category, Priority
from todo_companion.tasks.task_sort import SortMode

from .fakes import FakeClock, FakeTaskRepo


def test_add_appends_and_saves(controller: TaskController, repo: FakeTaskRepo) -> None:
    task = controller.add("Write report", category="work", priority=Priority.HIGH)
    assert task is not None
    assert controller.tasks == (task,)
    assert repo.saved[-1] == [task]
    assert task.category is Category.WORK


def test_whitespace_title_adds_nothing(controller: TaskController, repo: FakeTaskRepo) -> None:
    assert controller.add("   ") is None
    assert controller.tasks == ()
    assert repo.saved == []


def test_same_millisecond_adds_get_distinct_ids(repo: FakeTaskRepo) -> None:
    ctl = TaskController(repo, clock=FakeClock(start=5, step=0))
    a = ctl.add("A")
    b = ctl.add("B")
    assert a is not None and b is not None
    assert a.id != b.id
    assert len({t.id for t in ctl.tasks}) == 2


def test_toggle_flips_and_unknown_id_is_noop(controller: TaskController, repo: FakeTaskRepo) -> None:
    task = controller.add("A")
    assert task is not None

    flipped = controller.toggle(task.id)
    assert flipped is not None and flipped.completed
    assert controller.get(task.id).completed  # type: ignore[union-attr]

    saves = len(repo.saved)
    assert controller.toggle("missing") is None
    assert len(repo.saved) == saves


def test_remove(controller: TaskController, repo: FakeTaskRepo) -> None:
    a = controller.add("A")
    b = controller.add("B")
    assert a is not None and b is not None

    assert controller.remove(a.id) is True
    assert [t.id for t in controller.tasks] == [b.id]
    saves = len(repo.saved)
    assert controller.remove(a.id) is False
    assert len(repo.saved) == saves


def test_view_filters_then_sorts(controller: TaskController) -> None:
    controller.add("low work", category=Category.WORK, priority=Priority.LOW)
    high = controller.add("high work", category=Category.WORK, priority=Priority.HIGH)
    controller.add("life", category=Category.LIFE, priority=Priority.HIGH)
    assert high is not None
    controller.toggle(high.id)

    titles = [t.title for t in controller.view(Category.WORK, SortMode.PRIORITY)]
    assert titles == ["low work", "high work"]
    assert len(controller.view()) == 3


def test_import_merge_replaces_and_appends(controller: TaskController, repo: FakeTaskRepo) -> None:
    a = controller.add("A")
    assert a is not None
    count = controller.import_merge([{"id": a.id, "title": "A2"}, {"id": "new", "title": "N"}])
    assert count == 2
    assert [(t.id, t.title) for t in controller.tasks] == [(a.id, "A2"), ("new", "N")]
    assert [t.title for t in repo.saved[-1]] == ["A2", "N"]


def test_import_merge_failure_leaves_state_untouched(
    controller: TaskController, repo: FakeTaskRepo
) -> None:
    controller.add("A")
    before = controller.tasks
    saves = len(repo.saved)

    with pytest.raises(FormatError):
        controller.import_merge([{"id": "ok", "title": "fine"}, {"id": "bad"}])

    assert controller.tasks == before
    assert len(repo.saved) == saves


def test_load_coerces_defaults_and_skips_bad_records(caplog: pytest.LogCaptureFixture) -> None:
    repo = FakeTaskRepo(
        [
            {"id": "1", "title": "A", "category": "??", "createdAt": 1},
            {"title": "no id"},
            {"id": "1", "title": "A again", "priority": "高", "createdAt": 1},
            {"id": "2", "title": "B", "createdAt": 2},
        ]
    )
    with caplog.at_level(logging.WARNING):
        ctl = TaskController(repo)
    assert [(t.id, t.title) for t in ctl.tasks] == [("1", "A again"), ("2", "B")]
    assert ctl.tasks[0].priority is Priority.HIGH
    assert "Skipping stored task #2" in caplog.text


def test_load_failure_starts_empty() -> None:
    ctl = TaskController(FakeTaskRepo(fail_load=True))
    assert ctl.tasks == ()


def test_save_failure_is_logged_and_state_kept(caplog: pytest.LogCaptureFixture) -> None:
    ctl = TaskController(FakeTaskRepo(fail_save=True))
    with caplog.at_level(logging.ERROR):
        task = ctl.add("A")
    assert task is not None
    assert ctl.tasks == (task,)
    assert "Failed to save tasks" in caplog.text


def test_reload_from_store_reproduces_collection(repo: FakeTaskRepo, clock: FakeClock) -> None:
    ctl = TaskController(repo, clock=clock)
    ctl.add("A", description="d", due_date=99)
    ctl.add("B", category=Category.STUDY)
    reloaded = TaskController(repo, clock=clock)
    assert reloaded.tasks == ctl.tasks
