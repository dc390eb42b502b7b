"""Personal to-do list with local storage, JSON import/export and voice input."""

__version__ = "0.1.0"
