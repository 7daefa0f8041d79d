"""Data models for taskman.

A Task is the only durable record. The Draft pairs the text of the single
input field with the mode that decides what submitting it means: adding a
new task, or saving an edit to an existing one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, TypeAdapter


class Task(BaseModel):
    """A single to-do item."""

    id: int
    name: str
    completed: bool = False


TaskList = TypeAdapter(list[Task])
"""Validator for the persisted form of the collection: a JSON array of tasks."""


class Outcome(Enum):
    """Result of a TaskStore operation.

    Only APPLIED changes state. Everything else is a silent no-op from the
    presentation's point of view.
    """

    APPLIED = "applied"
    """The operation took effect."""

    EMPTY_NAME = "empty_name"
    """The name or draft was empty after trimming."""

    UNKNOWN_ID = "unknown_id"
    """No task in the collection has the requested id."""

    NOT_EDITING = "not_editing"
    """A save was requested but no edit is in progress."""

    EDITING = "editing"
    """An add was requested while an edit is in progress."""

    @property
    def applied(self) -> bool:
        return self is Outcome.APPLIED


@dataclass(frozen=True)
class NewTask:
    """Draft mode: submitting the draft adds a new task."""


@dataclass(frozen=True)
class Editing:
    """Draft mode: submitting the draft renames the task with this id."""

    task_id: int


DraftMode = NewTask | Editing


@dataclass
class Draft:
    """Contents of the shared input field and what it is for."""

    mode: DraftMode = field(default_factory=NewTask)
    text: str = ""

    @property
    def editing_id(self) -> int | None:
        """Id of the task under edit, or None when entering a new task."""
        if isinstance(self.mode, Editing):
            return self.mode.task_id
        return None

    def clear(self) -> None:
        """Return to new-task mode with empty text."""
        self.mode = NewTask()
        self.text = ""
