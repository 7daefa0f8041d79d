"""taskman - a task manager with persistent local storage."""

__version__ = "0.1.0"
