"""Configuration classes for foldersummary.

This module provides:
- FolderDeviceConfiguration, FolderConfiguration: per-folder settings
- Configuration: thread-safe view of the folder list and our own device id
- SummaryServiceConfig: timing knobs for the summary service
- load_configuration: build a Configuration from a JSON file
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foldersummary.core.types import FolderType, same_device

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FolderDeviceConfiguration:
    """A device a folder is shared with."""

    device_id: str


@dataclass(frozen=True)
class FolderConfiguration:
    """Configuration of a single synchronized folder.

    Attributes:
        id: Unique folder id.
        label: Human readable label.
        type: Folder type (send-receive, send-only, receive-only).
        devices: Devices this folder is shared with (may include ourselves).
        ignore_delete: Do not apply remote deletes locally.
        paused: Folder is paused.
    """

    id: str
    label: str = ""
    type: FolderType = FolderType.SEND_RECEIVE
    devices: tuple[FolderDeviceConfiguration, ...] = ()
    ignore_delete: bool = False
    paused: bool = False

    def shared_with(self, device_id: str) -> bool:
        """Check whether the folder is shared with the given device."""
        return any(same_device(d.device_id, device_id) for d in self.devices)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FolderConfiguration:
        """Create a folder configuration from its JSON representation."""
        return cls(
            id=data["id"],
            label=data.get("label", ""),
            type=FolderType(data.get("type", FolderType.SEND_RECEIVE.value)),
            devices=tuple(
                FolderDeviceConfiguration(device_id=d["deviceID"] if isinstance(d, dict) else d)
                for d in data.get("devices", [])
            ),
            ignore_delete=bool(data.get("ignoreDelete", False)),
            paused=bool(data.get("paused", False)),
        )


@dataclass
class SummaryServiceConfig:
    """Timing configuration for the folder summary service.

    Attributes:
        pump_interval: Nominal seconds between two summary passes.
        min_summary_interval: Summaries are only computed if an event
            request was seen within this many seconds.
        restart_delay: Seconds the supervisor waits before restarting
            a task that exited unexpectedly.
    """

    pump_interval: float = 2.0
    min_summary_interval: float = 60.0
    restart_delay: float = 1.0


class Configuration:
    """Folder configuration shared by the service and the model.

    Reads and replacements are guarded by a lock so the folder list can be
    swapped while the summary service is running.
    """

    def __init__(
        self,
        my_id: str,
        folders: list[FolderConfiguration] | None = None,
    ) -> None:
        """Initialize the configuration.

        Args:
            my_id: Our own device id.
            folders: Configured folders.
        """
        self._my_id = my_id
        self._lock = threading.Lock()
        self._folders: dict[str, FolderConfiguration] = {
            f.id: f for f in folders or []
        }

    @property
    def my_id(self) -> str:
        """Our own device id."""
        return self._my_id

    def folders(self) -> dict[str, FolderConfiguration]:
        """Get a copy of the configured folders keyed by id."""
        with self._lock:
            return dict(self._folders)

    def folder(self, folder_id: str) -> FolderConfiguration | None:
        """Get a single folder configuration, or None if not configured."""
        with self._lock:
            return self._folders.get(folder_id)

    def replace_folders(self, folders: list[FolderConfiguration]) -> None:
        """Atomically replace the folder list."""
        with self._lock:
            self._folders = {f.id: f for f in folders}
        logger.debug("Configuration now has %d folders", len(folders))


def load_configuration(path: Path) -> Configuration:
    """Load a Configuration from a JSON file.

    Expected format:
        {"myID": "...", "folders": [{"id": "docs", "devices": ["..."]}]}

    Args:
        path: Path to the JSON file.

    Returns:
        The loaded configuration.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    folders = [FolderConfiguration.from_dict(f) for f in data.get("folders", [])]
    logger.info("Loaded %d folders from %s", len(folders), path)
    return Configuration(my_id=data["myID"], folders=folders)
