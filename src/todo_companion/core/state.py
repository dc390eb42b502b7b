# src/todo_companion/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..dictation.session import DictationSession
from ..tasks.task_controller import TaskController
from ..tasks.task_filter import ALL_CATEGORIES
from ..tasks.task_models import Category
from ..tasks.task_sort import SortMode


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    controller: TaskController
    dictation: DictationSession

    # Current view options (what /list shows).
    sort_mode: SortMode = SortMode.NONE
    filter_selector: Category | str = ALL_CATEGORIES

    # Task ids in the order of the last printed view, so "/done 2" works.
    last_view_ids: list[str] = field(default_factory=list)
