"""Presentation helpers: wording that depends on the draft, and task tables."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from taskman.models import Draft, Outcome, Task
from taskman.views import VIEW_TITLES, View

OUTCOME_NOTES: dict[Outcome, str] = {
    Outcome.EMPTY_NAME: "Nothing to save: the task name is empty.",
    Outcome.UNKNOWN_ID: "No task with that id.",
    Outcome.NOT_EDITING: "No edit in progress.",
    Outcome.EDITING: "Finish the current edit first.",
}


def input_label(draft: Draft) -> str:
    """Label for the input field."""
    return "New Task" if draft.editing_id is None else "Edit Task"


def submit_label(draft: Draft) -> str:
    """Label for the submit button."""
    return "Add Task" if draft.editing_id is None else "Save Edit"


def outcome_note(outcome: Outcome) -> str | None:
    """Short note explaining a no-op, or None if the operation applied."""
    return OUTCOME_NOTES.get(outcome)


def task_table(tasks: list[Task], view: View = View.ALL, editing_id: int | None = None) -> Table:
    """Build a table of tasks for one view."""
    table = Table(title=VIEW_TITLES[view], show_header=True)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Done", width=4)
    table.add_column("Task", style="white")

    for task in tasks:
        mark = "[green]✓[/green]" if task.completed else "[dim]○[/dim]"
        name = escape(task.name)
        if task.completed:
            name = f"[strike dim]{name}[/strike dim]"
        if task.id == editing_id:
            name = f"{name} [yellow](editing)[/yellow]"
        table.add_row(str(task.id), mark, name)

    return table
