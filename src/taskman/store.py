"""Task store - owner of the task collection and the input draft.

Every change to the collection goes through TaskStore. After each applied
mutation the collection is written to durable storage as a JSON array of
``{id, name, completed}`` objects. An empty collection is never written, so
removing the last task leaves the previous snapshot in storage and a restart
brings it back.

Invalid input (empty names, unknown ids) never raises. Each operation returns
an Outcome instead, which the presentation layer is free to ignore.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import ValidationError

from taskman.errors import StorageError, StoreNotInitializedError
from taskman.models import Draft, Editing, Outcome, Task, TaskList
from taskman.storage import LocalStorage

logger = logging.getLogger(__name__)

IdPolicy = Literal["counter", "size"]

DEFAULT_STORAGE_KEY = "tasks"


class TaskStore:
    """In-memory task collection synchronised with a LocalStorage entry.

    Args:
        storage: Durable storage holding the persisted collection.
        storage_key: Name of the storage entry.
        id_policy: ``"counter"`` issues ids that are never reused, even after
            deletions or a restart. The highest id issued is kept under
            ``<storage_key>.last_id``. ``"size"`` issues ``len(tasks) + 1``,
            which can repeat an id once a task has been removed.
    """

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        id_policy: IdPolicy = "counter",
    ) -> None:
        self._storage = storage
        self._key = storage_key
        self._counter_key = f"{storage_key}.last_id"
        self._id_policy = id_policy
        self._tasks: list[Task] = []
        self._draft = Draft()
        self._last_id = 0
        self._initialized = False
        self.last_error: StorageError | None = None

    # ---- state ----

    @property
    def tasks(self) -> list[Task]:
        """Copy of the collection in insertion order."""
        return [task.model_copy() for task in self._tasks]

    @property
    def draft(self) -> Draft:
        """Copy of the current draft."""
        return Draft(mode=self._draft.mode, text=self._draft.text)

    @property
    def draft_text(self) -> str:
        return self._draft.text

    @property
    def editing_id(self) -> int | None:
        return self._draft.editing_id

    def get(self, task_id: int) -> Task | None:
        """Get a copy of the task with this id."""
        for task in self._tasks:
            if task.id == task_id:
                return task.model_copy()
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- lifecycle ----

    def initialize(self) -> None:
        """Adopt the persisted collection, if any. Runs once per store."""
        if self._initialized:
            logger.debug("TaskStore already initialized, ignoring")
            return

        self._tasks = self._restore()
        self._last_id = max((task.id for task in self._tasks), default=0)
        if self._id_policy == "counter":
            self._last_id = max(self._last_id, self._restore_last_id())
        self._initialized = True
        logger.info("TaskStore ready key=%s total=%d", self._key, len(self._tasks))

    def _restore(self) -> list[Task]:
        try:
            raw = self._storage.get_item(self._key)
        except StorageError as e:
            logger.error("Could not read stored tasks, starting empty: %s", e)
            self.last_error = e
            return []

        if not raw:
            return []

        try:
            return TaskList.validate_json(raw)
        except ValidationError as e:
            logger.error(
                "Stored tasks under %r are malformed, starting empty (%d errors)",
                self._key,
                e.error_count(),
            )
            self.last_error = StorageError(f"Malformed value under {self._key!r}")
            return []

    def _restore_last_id(self) -> int:
        try:
            raw = self._storage.get_item(self._counter_key)
        except StorageError as e:
            logger.warning("Could not read last issued id: %s", e)
            return 0

        if not raw:
            return 0

        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring malformed last issued id %r", raw[:20])
            return 0

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StoreNotInitializedError("TaskStore.initialize() must run before mutations")

    # ---- mutations ----

    def add_task(self, raw_name: str) -> Outcome:
        """Append a new, incomplete task named raw_name (trimmed).

        Only valid in new-task mode. Clears the draft on success.
        """
        self._require_initialized()

        if isinstance(self._draft.mode, Editing):
            return Outcome.EDITING

        name = raw_name.strip()
        if not name:
            return Outcome.EMPTY_NAME

        task = Task(id=self._next_id(), name=name)
        self._tasks.append(task)
        self._last_id = max(self._last_id, task.id)
        self._draft.clear()

        logger.debug("Added task id=%d", task.id)
        self._persist()
        return Outcome.APPLIED

    def toggle_complete(self, task_id: int) -> Outcome:
        """Flip the completed flag of the task with this id."""
        self._require_initialized()

        matches = [task for task in self._tasks if task.id == task_id]
        if not matches:
            return Outcome.UNKNOWN_ID

        for task in matches:
            task.completed = not task.completed

        self._persist()
        return Outcome.APPLIED

    def remove_task(self, task_id: int) -> Outcome:
        """Remove the task with this id.

        The draft is left alone, even when it targets the removed task.
        """
        self._require_initialized()

        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return Outcome.UNKNOWN_ID

        self._tasks = remaining

        logger.debug("Removed task id=%d", task_id)
        self._persist()
        return Outcome.APPLIED

    def begin_edit(self, task_id: int, current_name: str | None = None) -> Outcome:
        """Switch the draft to editing task_id, seeded with its current name.

        Replaces whatever the draft held before. Nothing is persisted.
        """
        self._require_initialized()

        task = self.get(task_id)
        if task is None:
            return Outcome.UNKNOWN_ID

        self._draft.mode = Editing(task_id)
        self._draft.text = task.name if current_name is None else current_name
        return Outcome.APPLIED

    def set_draft_text(self, text: str) -> Outcome:
        """Replace the draft text without changing its mode."""
        self._draft.text = text
        return Outcome.APPLIED

    def save_edit(self) -> Outcome:
        """Rename the task under edit to the trimmed draft text.

        With an empty draft the edit stays open and nothing changes. If the
        task under edit has since been removed, the edit is closed without
        touching the collection.
        """
        self._require_initialized()

        task_id = self._draft.editing_id
        if task_id is None:
            return Outcome.NOT_EDITING

        name = self._draft.text.strip()
        if not name:
            return Outcome.EMPTY_NAME

        matches = [task for task in self._tasks if task.id == task_id]
        self._draft.clear()
        if not matches:
            logger.debug("Task id=%d under edit no longer exists", task_id)
            return Outcome.UNKNOWN_ID

        for task in matches:
            task.name = name

        self._persist()
        return Outcome.APPLIED

    def submit_draft(self) -> Outcome:
        """Submit the draft: save the edit in editing mode, otherwise add a task."""
        if isinstance(self._draft.mode, Editing):
            return self.save_edit()
        return self.add_task(self._draft.text)

    # ---- persistence ----

    def _next_id(self) -> int:
        if self._id_policy == "size":
            return len(self._tasks) + 1
        return self._last_id + 1

    def _persist(self) -> None:
        if not self._tasks:
            logger.debug("Collection is empty, keeping previous snapshot")
            return

        payload = TaskList.dump_json(self._tasks).decode("utf-8")
        try:
            self._storage.set_item(self._key, payload)
            if self._id_policy == "counter":
                self._storage.set_item(self._counter_key, str(self._last_id))
        except StorageError as e:
            logger.error("Could not persist %d tasks: %s", len(self._tasks), e)
            self.last_error = e
            return

        self.last_error = None
