# src/todo_companion/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Console thresholds for third-party loggers (prefix match); anything unlisted needs ERROR+.
_THIRD_PARTY_LEVELS: dict[str, int] = {
    "openai": logging.WARNING,
    "sounddevice": logging.WARNING,
    "httpx": logging.ERROR,
    "httpcore": logging.ERROR,
    "py.warnings": logging.ERROR,
}


def _console_threshold(name: str) -> int:
    for prefix, level in _THIRD_PARTY_LEVELS.items():
        if name == prefix or name.startswith(prefix + "."):
            return level
    return logging.ERROR


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - allow todo_companion logs
    - openai/sounddevice warnings are shown (auth and device problems)
    - httpx/httpcore and captured Python warnings only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("todo_companion.") or name == "todo_companion":
            return True

        return record.levelno >= _console_threshold(name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "todo.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
