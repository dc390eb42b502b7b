# src/todo_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/controller/dictation).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..dictation.openai_backend import OpenAIDictationBackend
from ..dictation.session import DictationSession
from ..tasks.task_controller import TaskController
from ..tasks.task_store import SqliteTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.todos_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SqliteTaskStore(settings.todos_db_path, key=settings.storage_key)
    controller = TaskController(store)
    dictation = DictationSession(OpenAIDictationBackend(settings))

    return AppState(
        settings=settings,
        controller=controller,
        dictation=dictation,
    )
