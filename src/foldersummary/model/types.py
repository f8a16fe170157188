"""Query interface of the sync model consumed by the summary service.

This module provides:
- ModelError and subclasses: Errors raised by model queries
- Counts: File/directory/symlink/deleted/byte aggregates
- Completion: Completion of a folder on a remote device
- FileError: A pull error on a single file
- Snapshot, Model: Protocols implemented by the sync engine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime


class ModelError(Exception):
    """Base exception for model query errors."""


class FolderMissingError(ModelError):
    """Folder is not known to the model."""

    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f"no such folder: {folder}")


class FolderPausedError(ModelError):
    """Folder is paused."""

    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f"folder is paused: {folder}")


class FolderNotRunningError(ModelError):
    """Folder exists but has not been started yet."""

    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f"folder is not running: {folder}")


@dataclass(frozen=True)
class Counts:
    """Aggregate sizes of a set of files."""

    files: int = 0
    directories: int = 0
    symlinks: int = 0
    deleted: int = 0
    bytes: int = 0

    def total_items(self) -> int:
        """Total number of items of any kind."""
        return self.files + self.directories + self.symlinks + self.deleted


@dataclass(frozen=True)
class Completion:
    """Completion of a folder on a remote device."""

    completion_pct: float = 100.0
    global_bytes: int = 0
    need_bytes: int = 0
    global_items: int = 0
    need_items: int = 0
    need_deletes: int = 0
    sequence: int = 0

    def to_dict(self) -> dict[str, float | int]:
        """Convert to the wire representation."""
        return {
            "completion": self.completion_pct,
            "globalBytes": self.global_bytes,
            "needBytes": self.need_bytes,
            "globalItems": self.global_items,
            "needItems": self.need_items,
            "needDeletes": self.need_deletes,
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class FileError:
    """A pull error on a single file."""

    path: str
    error: str


class Snapshot(Protocol):
    """Read-only snapshot of a folder's database."""

    def global_size(self) -> Counts: ...

    def local_size(self) -> Counts: ...

    def need_size(self) -> Counts: ...

    def receive_only_changed_size(self) -> Counts: ...

    def sequence(self, device_id: str) -> int: ...


class Model(Protocol):
    """Queries the summary service makes against the sync engine.

    All methods are read-only. Methods documented as raising ModelError
    may do so for any folder-scoped failure.
    """

    def db_snapshot(self, folder: str) -> Snapshot:
        """Get a database snapshot. Raises ModelError."""
        ...

    def folder_errors(self, folder: str) -> list[FileError]:
        """Get current pull errors. Raises ModelError."""
        ...

    def folder_progress_bytes_completed(self, folder: str) -> int:
        """Bytes already pulled for files still in progress."""
        ...

    def state(self, folder: str) -> tuple[str, datetime | None]:
        """Get the folder state and when it last changed. Raises ModelError."""
        ...

    def get_ignores(self, folder: str) -> list[str]:
        """Get the ignore pattern lines. Raises ModelError."""
        ...

    def watch_error(self, folder: str) -> str | None:
        """Get the filesystem watcher error, if any."""
        ...

    def connected(self, device_id: str) -> bool:
        """Whether a device currently has a connection."""
        ...

    def completion(self, device_id: str, folder: str) -> Completion:
        """Completion of folder on the given remote device."""
        ...
