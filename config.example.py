# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory, also holds todo.log (default: .local/todo).",
    "TODO_DB_PATH": "SQLite task database (default: <data_dir>/todos.sqlite3).",
    "TODO_STORAGE_KEY": "Key the task list is stored under (default: todos).",
    "TODO_EXPORT_DIR": "Default directory for /export (default: current directory).",
    # Dictation
    "TODO_DICTATION_ENABLED": "Enable /voice (true/false, default: false). Needs the 'voice' extra.",
    "TODO_OPENAI_API_KEY": "API key for the transcription endpoint (OPENAI_API_KEY also works).",
    "TODO_OPENAI_BASE_URL": "OpenAI-compatible base URL (default: https://api.openai.com/v1).",
    "TODO_TRANSCRIBE_MODEL": "Transcription model (default: whisper-1).",
    "TODO_DICTATION_LANGUAGE": "Spoken language hint, ISO-639-1 (default: zh).",
    "TODO_DICTATION_MAX_SECONDS": "Longest recording per /voice (default: 10).",
    "TODO_DICTATION_SAMPLE_RATE": "Microphone sample rate (default: 16000).",
    "TODO_DICTATION_STREAM": "Stream partial transcripts (true/false, needs a streaming-capable model).",
}
