"""View filter - read-only projections of the task collection.

Views are recomputed from the collection on every call. Each returns a new
list in the collection's order and never mutates its input.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from taskman.models import Task


class View(str, Enum):
    """Named subsets of the task collection."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


ROUTES: dict[str, View] = {
    "/": View.ALL,
    "/active": View.ACTIVE,
    "/completed": View.COMPLETED,
}

VIEW_TITLES: dict[View, str] = {
    View.ALL: "All Tasks",
    View.ACTIVE: "Active Tasks",
    View.COMPLETED: "Completed Tasks",
}


def all_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Every task."""
    return list(tasks)


def active_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Tasks not yet completed."""
    return [task for task in tasks if not task.completed]


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Completed tasks."""
    return [task for task in tasks if task.completed]


_FILTERS = {
    View.ALL: all_tasks,
    View.ACTIVE: active_tasks,
    View.COMPLETED: completed_tasks,
}


def filter_tasks(tasks: Iterable[Task], view: View | str = View.ALL) -> list[Task]:
    """Project tasks through the named view.

    Raises:
        ValueError: If view is not one of all, active, completed.
    """
    return _FILTERS[View(view)](tasks)


def view_from_route(path: str) -> View:
    """Map a route path to its view, falling back to all tasks."""
    normalised = "/" + path.strip().strip("/")
    return ROUTES.get(normalised, View.ALL)
