# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_companion.core.state import AppState
from todo_companion.dictation.session import DictationSession
from todo_companion.tasks.task_controller import TaskController

from .fakes import FakeClock, FakeSpeechBackend, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        data_dir=tmp_path,
        todos_db_path=tmp_path / "todos.sqlite3",
        storage_key="todos",
        export_dir=tmp_path / "exports",
        dictation_enabled=False,
        dictation_max_seconds=1,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def controller(repo: FakeTaskRepo, clock: FakeClock) -> TaskController:
    return TaskController(repo, clock=clock)


@pytest.fixture()
def speech() -> FakeSpeechBackend:
    return FakeSpeechBackend()


@pytest.fixture()
def state(settings: SimpleNamespace, controller: TaskController, speech: FakeSpeechBackend) -> AppState:
    """AppState wired with in-memory fakes."""
    return AppState(
        settings=settings,
        controller=controller,
        dictation=DictationSession(speech),
    )
