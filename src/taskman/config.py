"""Configuration models for taskman."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Configuration for durable task storage."""

    directory: str = ".taskman/storage"
    key: str = "tasks"


class IdsConfig(BaseModel):
    """Configuration for task id assignment."""

    policy: Literal["counter", "size"] = "counter"


class LoggingConfig(BaseModel):
    """Configuration for logging output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file: str | None = None


class TaskmanConfig(BaseModel):
    """Main configuration for taskman."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> TaskmanConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)


# Default config directory
TASKMAN_DIR = Path(".taskman")
CONFIG_FILE = TASKMAN_DIR / "config.json"
