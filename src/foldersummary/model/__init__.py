"""Model module - Queries against the sync engine."""

from foldersummary.model.memory import (
    FolderData,
    InMemoryModel,
    InMemorySnapshot,
    folder_data_from_dict,
    load_model,
)
from foldersummary.model.types import (
    Completion,
    Counts,
    FileError,
    FolderMissingError,
    FolderNotRunningError,
    FolderPausedError,
    Model,
    ModelError,
    Snapshot,
)

__all__ = [
    # Protocol and types
    "Completion",
    "Counts",
    "FileError",
    "FolderMissingError",
    "FolderNotRunningError",
    "FolderPausedError",
    "Model",
    "ModelError",
    "Snapshot",
    # In-memory model
    "FolderData",
    "InMemoryModel",
    "InMemorySnapshot",
    "folder_data_from_dict",
    "load_model",
]
