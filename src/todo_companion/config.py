# src/todo_companion/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (dictation is opt-in).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    todos_db_path: Path
    storage_key: str
    export_dir: Path

    # ---- Dictation ----
    dictation_enabled: bool
    openai_api_key: Optional[str]
    openai_base_url: str
    transcribe_model: str
    dictation_language: str
    dictation_max_seconds: int
    dictation_sample_rate: int
    dictation_stream: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo").strip() or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        todos_db_path = _env_path(_k("DB_PATH"), data_dir / "todos.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "todos").strip() or "todos"
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        dictation_enabled = _env_bool(_k("DICTATION_ENABLED"), False)
        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        transcribe_model = _env(_k("TRANSCRIBE_MODEL"), "whisper-1")
        dictation_language = _env(_k("DICTATION_LANGUAGE"), "zh")

        # Keep capture bounded: the backend records at most this many seconds per /voice.
        dictation_max_seconds = max(1, _env_int(_k("DICTATION_MAX_SECONDS"), 10))
        dictation_sample_rate = _env_int(_k("DICTATION_SAMPLE_RATE"), 16000)
        dictation_stream = _env_bool(_k("DICTATION_STREAM"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            todos_db_path=todos_db_path,
            storage_key=storage_key,
            export_dir=export_dir,
            dictation_enabled=dictation_enabled,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            transcribe_model=transcribe_model,
            dictation_language=dictation_language,
            dictation_max_seconds=dictation_max_seconds,
            dictation_sample_rate=dictation_sample_rate,
            dictation_stream=dictation_stream,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
