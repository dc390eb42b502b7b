# src/todo_companion/tasks/task_io.py

"""
Import/export file format: a UTF-8 JSON array of task records.

Parsing here only checks the envelope (valid JSON, top-level array).
Per-item validation happens in the merge engine so the import stays atomic.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Iterable
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from ..core.errors import FormatError
from .task_models import Task

logger = logging.getLogger(__name__)


def export_filename(today: date | None = None) -> str:
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"todos-{today.isoformat()}.json"


def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False, indent=2)


def parse_import_payload(data: bytes | str) -> list[Any]:
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FormatError("The import file is not valid UTF-8 text.") from e
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        raise FormatError(f"The import file is not valid JSON (line {e.lineno}).") from e
    if not isinstance(payload, list):
        raise FormatError("The import file must contain a JSON array of tasks.")
    return payload


def write_export_file(
    tasks: Iterable[Task],
    directory: str | Path,
    today: date | None = None,
) -> Path:
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)

    tmp = path.with_suffix(".tmp")
    tmp.write_text(dump_tasks(tasks), "utf-8")
    os.replace(tmp, path)
    logger.info("Exported tasks to %s", path)
    return path


async def read_import_file(path: str | Path) -> list[Any]:
    """Read and parse an import file without blocking the event loop."""
    p = Path(path).expanduser()
    try:
        data = await asyncio.to_thread(p.read_bytes)
    except OSError as e:
        logger.info("Import read failed path=%s: %s", p, e)
        raise FormatError(f"Failed to read the import file: {p}") from e
    return parse_import_payload(data)
