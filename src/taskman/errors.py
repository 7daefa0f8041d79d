"""Exceptions raised by taskman."""

from __future__ import annotations


class TaskmanError(Exception):
    """Base class for taskman errors."""


class StorageError(TaskmanError):
    """Durable storage could not be read or written."""


class StoreNotInitializedError(TaskmanError):
    """A TaskStore was used before initialize() restored its collection."""
