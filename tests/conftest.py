"""Shared fixtures for taskman tests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from taskman.storage import LocalStorage
from taskman.store import TaskStore


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_taskman_dir(temp_project: Path) -> Path:
    """Create a temporary .taskman directory."""
    taskman_dir = temp_project / ".taskman"
    taskman_dir.mkdir()
    return taskman_dir


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Directory backing a LocalStorage."""
    return tmp_path / "storage"


@pytest.fixture
def storage(storage_dir: Path) -> LocalStorage:
    """Empty local storage."""
    return LocalStorage(storage_dir)


@pytest.fixture
def store(storage: LocalStorage) -> TaskStore:
    """Initialized store over empty storage."""
    task_store = TaskStore(storage)
    task_store.initialize()
    return task_store


@pytest.fixture
def sample_tasks_data() -> list[dict]:
    """Sample persisted task collection."""
    return [
        {"id": 1, "name": "buy milk", "completed": True},
        {"id": 2, "name": "write report", "completed": False},
        {"id": 3, "name": "call mum", "completed": False},
    ]


@pytest.fixture
def saved_storage(storage: LocalStorage, sample_tasks_data: list[dict]) -> LocalStorage:
    """Storage already holding the sample collection under the default key."""
    storage.set_item("tasks", json.dumps(sample_tasks_data))
    return storage


@pytest.fixture(autouse=True)
def reset_taskman_logger() -> Generator[None, None, None]:
    """Undo handlers installed by setup_logging so caplog sees records."""
    yield
    logger = logging.getLogger("taskman")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
