"""CLI interface for taskman."""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from taskman import __version__
from taskman.config import TaskmanConfig
from taskman.logging_setup import setup_logging
from taskman.models import Outcome
from taskman.render import input_label, outcome_note, submit_label, task_table
from taskman.storage import LocalStorage
from taskman.store import TaskStore
from taskman.views import (
    View,
    active_tasks,
    completed_tasks,
    filter_tasks,
    view_from_route,
)

console = Console()

VIEW_CHOICE = click.Choice([view.value for view in View])

SHELL_HELP = """\
Type a task name and press Enter to submit it.
  :edit ID      edit a task (Enter keeps the current name)
  :toggle ID    mark a task done / not done
  :rm ID        remove a task
  :view VIEW    show all, active or completed tasks (or /, /active, /completed)
  :help         show this help
  :quit         leave the shell"""


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="taskman")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.json (default: .taskman/config.json)",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None) -> None:
    """taskman - a task list that remembers.

    \b
    Examples:
      taskman add Buy milk
      taskman toggle 1
      taskman list active
      taskman shell
    """
    ctx.ensure_object(dict)

    try:
        config = TaskmanConfig.load(config_path)
    except (ValidationError, json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        ctx.exit(1)

    setup_logging(config.logging.level, config.logging.file)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _open_store(ctx: click.Context) -> TaskStore:
    """Create the task store from config and restore its collection."""
    config: TaskmanConfig = ctx.obj["config"]

    store = TaskStore(
        LocalStorage(config.storage.directory),
        storage_key=config.storage.key,
        id_policy=config.ids.policy,
    )
    store.initialize()
    return store


def _report(store: TaskStore, outcome: Outcome, message: str | None = None) -> None:
    """Print the result of a store operation.

    No-ops get a dim note. Applied changes that could not be saved get a
    warning after the message.
    """
    if not outcome.applied:
        console.print(f"[dim]{outcome_note(outcome)}[/dim]")
        return

    if message:
        console.print(message)
    if store.last_error is not None:
        console.print(f"[yellow]Warning:[/yellow] changes were not saved ({store.last_error})")


@main.command()
@click.argument("name", nargs=-1, required=True)
@click.pass_context
def add(ctx: click.Context, name: tuple[str, ...]) -> None:
    """Add a new task.

    Example:

        taskman add Write the report
    """
    store = _open_store(ctx)
    store.set_draft_text(" ".join(name))
    outcome = store.submit_draft()

    message = ""
    if outcome.applied:
        task = store.tasks[-1]
        message = f"[green]Added task {task.id}:[/green] {escape(task.name)}"
    _report(store, outcome, message)


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def toggle(ctx: click.Context, task_id: int) -> None:
    """Mark a task done, or not done if it already is."""
    store = _open_store(ctx)
    outcome = store.toggle_complete(task_id)

    message = ""
    task = store.get(task_id)
    if task is not None:
        state = "[green]done[/green]" if task.completed else "[cyan]active[/cyan]"
        message = f"Task {task_id} is now {state}"
    _report(store, outcome, message)


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def remove(ctx: click.Context, task_id: int) -> None:
    """Remove a task."""
    store = _open_store(ctx)
    outcome = store.remove_task(task_id)
    _report(store, outcome, f"[green]Removed task {task_id}[/green]")


@main.command()
@click.argument("task_id", type=int)
@click.argument("name", nargs=-1, required=True)
@click.pass_context
def edit(ctx: click.Context, task_id: int, name: tuple[str, ...]) -> None:
    """Rename a task.

    Example:

        taskman edit 2 Write the final report
    """
    store = _open_store(ctx)

    outcome = store.begin_edit(task_id)
    if outcome.applied:
        store.set_draft_text(" ".join(name))
        outcome = store.submit_draft()

    new_name = escape(" ".join(name).strip())
    _report(store, outcome, f"[green]Saved task {task_id}:[/green] {new_name}")


@main.command("list")
@click.argument("view", type=VIEW_CHOICE, default=View.ALL.value)
@click.pass_context
def list_command(ctx: click.Context, view: str) -> None:
    """Show tasks in a view: all, active or completed."""
    store = _open_store(ctx)
    _show(store, View(view))


def _show(store: TaskStore, view: View) -> None:
    """Render one view of the store."""
    tasks = store.tasks
    shown = filter_tasks(tasks, view)

    if not shown:
        label = "" if view is View.ALL else f"{view.value} "
        console.print(f"[dim]No {label}tasks.[/dim]")
    else:
        console.print(task_table(shown, view, editing_id=store.editing_id))

    console.print(
        f"[dim]{len(active_tasks(tasks))} active, {len(completed_tasks(tasks))} completed[/dim]"
    )


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive session with a single input line.

    Plain text is submitted as a new task, or as the new name while an
    edit is in progress. Commands start with a colon; type :help.
    """
    store = _open_store(ctx)
    view = View.ALL

    console.print(f"[bold]taskman[/bold] {__version__} - type [cyan]:help[/cyan] for commands")
    _show(store, view)

    while True:
        draft = store.draft
        try:
            line = click.prompt(
                f"{input_label(draft)} ({submit_label(draft)})",
                default=draft.text,
                show_default=bool(draft.text),
                prompt_suffix=": ",
            )
        except click.Abort:
            console.print()
            break

        next_view = _shell_command(store, line, view)
        if next_view is None:
            break
        view = next_view
        _show(store, view)


def _shell_command(store: TaskStore, line: str, view: View) -> View | None:
    """Run one line of shell input. Returns the view to show, or None to quit."""
    if not line.startswith(":"):
        store.set_draft_text(line)
        _report(store, store.submit_draft())
        return view

    command, _, arg = line[1:].strip().partition(" ")
    arg = arg.strip()

    if command in ("q", "quit", "exit"):
        return None

    if command in ("h", "help"):
        console.print(SHELL_HELP)
        return view

    if command == "view":
        if arg.startswith("/"):
            return view_from_route(arg)
        try:
            return View(arg or View.ALL.value)
        except ValueError:
            console.print(f"[red]Unknown view:[/red] {escape(arg)}")
            return view

    actions = {
        "edit": store.begin_edit,
        "toggle": store.toggle_complete,
        "rm": store.remove_task,
        "remove": store.remove_task,
    }
    if command not in actions:
        console.print(f"[red]Unknown command:[/red] :{escape(command)} (try [cyan]:help[/cyan])")
        return view

    try:
        task_id = int(arg)
    except ValueError:
        console.print(f"[red]Expected a task id:[/red] :{escape(command)} ID")
        return view

    _report(store, actions[command](task_id))
    return view


if __name__ == "__main__":
    main()
