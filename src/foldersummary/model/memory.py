"""In-memory implementation of the Model protocol.

This module provides:
- FolderData: Mutable per-folder statistics
- InMemorySnapshot: Frozen copy of a folder's counts and sequences
- InMemoryModel: Thread-safe model backed by FolderData
- load_model: Build an InMemoryModel from a JSON state file

The in-memory model stands in for the sync engine when the service runs
standalone (CLI server) and in tests. Query failures can be injected per
folder to exercise the error paths of the summary service.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from foldersummary.core.types import FolderState, normalize_device_id
from foldersummary.model.types import (
    Completion,
    Counts,
    FileError,
    FolderMissingError,
    ModelError,
)

logger = logging.getLogger(__name__)


@dataclass
class FolderData:
    """Statistics of one folder as the sync engine would report them."""

    global_size: Counts = field(default_factory=Counts)
    local_size: Counts = field(default_factory=Counts)
    need_size: Counts = field(default_factory=Counts)
    receive_only_changed: Counts = field(default_factory=Counts)
    sequences: dict[str, int] = field(default_factory=dict)
    progress_bytes_completed: int = 0
    errors: list[FileError] = field(default_factory=list)
    state: str = FolderState.IDLE.value
    state_changed: datetime | None = None
    ignores: list[str] = field(default_factory=list)
    watch_error: str | None = None
    completions: dict[str, Completion] = field(default_factory=dict)

    # Injected failures
    snapshot_error: ModelError | None = None
    errors_error: ModelError | None = None
    state_error: ModelError | None = None


@dataclass(frozen=True)
class InMemorySnapshot:
    """Snapshot of a folder taken from an InMemoryModel."""

    global_counts: Counts
    local_counts: Counts
    need_counts: Counts
    receive_only_counts: Counts
    sequences: dict[str, int]

    def global_size(self) -> Counts:
        return self.global_counts

    def local_size(self) -> Counts:
        return self.local_counts

    def need_size(self) -> Counts:
        return self.need_counts

    def receive_only_changed_size(self) -> Counts:
        return self.receive_only_counts

    def sequence(self, device_id: str) -> int:
        return self.sequences.get(device_id, 0)


class InMemoryModel:
    """Model backed by in-memory FolderData.

    Usage:
        model = InMemoryModel()
        model.set_folder("docs", FolderData(global_size=Counts(files=3)))
        model.set_connected("DEVICE-A", True)
        snap = model.db_snapshot("docs")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._folders: dict[str, FolderData] = {}
        self._connected: set[str] = set()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_folder(self, folder: str, data: FolderData) -> None:
        """Add or replace a folder's data."""
        with self._lock:
            self._folders[folder] = data

    def update_folder(self, folder: str, **changes: Any) -> None:
        """Replace some fields of a folder's data.

        Raises:
            FolderMissingError: If the folder is not known.
        """
        with self._lock:
            data = self._folders.get(folder)
            if data is None:
                raise FolderMissingError(folder)
            self._folders[folder] = replace(data, **changes)

    def remove_folder(self, folder: str) -> None:
        """Forget a folder."""
        with self._lock:
            self._folders.pop(folder, None)

    def set_state(self, folder: str, state: str) -> None:
        """Set the folder state and stamp the change time."""
        self.update_folder(folder, state=state, state_changed=datetime.now(UTC))

    def set_connected(self, device_id: str, connected: bool) -> None:
        """Mark a device as connected or disconnected."""
        key = normalize_device_id(device_id)
        with self._lock:
            if connected:
                self._connected.add(key)
            else:
                self._connected.discard(key)

    # -------------------------------------------------------------------------
    # Model protocol
    # -------------------------------------------------------------------------

    def db_snapshot(self, folder: str) -> InMemorySnapshot:
        data = self._get(folder)
        if data.snapshot_error is not None:
            raise data.snapshot_error
        return InMemorySnapshot(
            global_counts=data.global_size,
            local_counts=data.local_size,
            need_counts=data.need_size,
            receive_only_counts=data.receive_only_changed,
            sequences=dict(data.sequences),
        )

    def folder_errors(self, folder: str) -> list[FileError]:
        data = self._get(folder)
        if data.errors_error is not None:
            raise data.errors_error
        return list(data.errors)

    def folder_progress_bytes_completed(self, folder: str) -> int:
        with self._lock:
            data = self._folders.get(folder)
            return data.progress_bytes_completed if data else 0

    def state(self, folder: str) -> tuple[str, datetime | None]:
        data = self._get(folder)
        if data.state_error is not None:
            raise data.state_error
        return data.state, data.state_changed

    def get_ignores(self, folder: str) -> list[str]:
        return list(self._get(folder).ignores)

    def watch_error(self, folder: str) -> str | None:
        with self._lock:
            data = self._folders.get(folder)
            return data.watch_error if data else None

    def connected(self, device_id: str) -> bool:
        with self._lock:
            return normalize_device_id(device_id) in self._connected

    def completion(self, device_id: str, folder: str) -> Completion:
        data = self._get(folder)
        for dev, comp in data.completions.items():
            if normalize_device_id(dev) == normalize_device_id(device_id):
                return comp
        # Without remote index data the device is assumed to need everything.
        global_size = data.global_size
        return Completion(
            completion_pct=0.0 if global_size.bytes else 100.0,
            global_bytes=global_size.bytes,
            need_bytes=global_size.bytes,
            global_items=global_size.total_items(),
            need_items=global_size.total_items(),
        )

    def _get(self, folder: str) -> FolderData:
        with self._lock:
            data = self._folders.get(folder)
        if data is None:
            raise FolderMissingError(folder)
        return data


# =============================================================================
# JSON loading
# =============================================================================


def _counts(data: dict[str, int] | None) -> Counts:
    data = data or {}
    return Counts(
        files=int(data.get("files", 0)),
        directories=int(data.get("directories", 0)),
        symlinks=int(data.get("symlinks", 0)),
        deleted=int(data.get("deleted", 0)),
        bytes=int(data.get("bytes", 0)),
    )


def _completion(data: dict[str, Any]) -> Completion:
    return Completion(
        completion_pct=float(data.get("completion", 100.0)),
        global_bytes=int(data.get("globalBytes", 0)),
        need_bytes=int(data.get("needBytes", 0)),
        global_items=int(data.get("globalItems", 0)),
        need_items=int(data.get("needItems", 0)),
        need_deletes=int(data.get("needDeletes", 0)),
        sequence=int(data.get("sequence", 0)),
    )


def folder_data_from_dict(data: dict[str, Any]) -> FolderData:
    """Build FolderData from its JSON representation."""
    state_changed = data.get("stateChanged")
    return FolderData(
        global_size=_counts(data.get("global")),
        local_size=_counts(data.get("local")),
        need_size=_counts(data.get("need")),
        receive_only_changed=_counts(data.get("receiveOnlyChanged")),
        sequences={k: int(v) for k, v in data.get("sequences", {}).items()},
        progress_bytes_completed=int(data.get("progressBytesCompleted", 0)),
        errors=[FileError(path=e["path"], error=e["error"]) for e in data.get("errors", [])],
        state=data.get("state", FolderState.IDLE.value),
        state_changed=datetime.fromisoformat(state_changed) if state_changed else None,
        ignores=list(data.get("ignores", [])),
        watch_error=data.get("watchError"),
        completions={dev: _completion(c) for dev, c in data.get("completion", {}).items()},
    )


def load_model(path: Path) -> InMemoryModel:
    """Load an InMemoryModel from a JSON state file.

    Expected format:
        {
            "connected": ["DEVICE-A"],
            "folders": {"docs": {"global": {"files": 3, "bytes": 100}, ...}}
        }
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    model = InMemoryModel()
    for folder, data in raw.get("folders", {}).items():
        model.set_folder(folder, folder_data_from_dict(data))
    for device in raw.get("connected", []):
        model.set_connected(device, True)
    logger.info("Loaded state for %d folders from %s", len(raw.get("folders", {})), path)
    return model
