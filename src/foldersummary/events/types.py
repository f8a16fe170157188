"""Event types for the in-process event bus.

This module provides:
- EventType: Bit-flag of event kinds, combinable into subscription masks
- One payload dataclass per event kind (the payload class is the tag)
- Event: An event as delivered to subscribers

Every payload class declares the EventType it belongs to, so an event's
kind is always derived from its payload and subscribers can dispatch on
the payload class without casting untyped dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntFlag
from typing import Any, ClassVar


class EventType(IntFlag):
    """Kinds of events. Values are bits so they can be OR-ed into masks."""

    STARTING = 1 << 0
    DEVICE_CONNECTED = 1 << 1
    DEVICE_DISCONNECTED = 1 << 2
    LOCAL_INDEX_UPDATED = 1 << 3
    REMOTE_INDEX_UPDATED = 1 << 4
    ITEM_FINISHED = 1 << 5
    STATE_CHANGED = 1 << 6
    DOWNLOAD_PROGRESS = 1 << 7
    REMOTE_DOWNLOAD_PROGRESS = 1 << 8
    FOLDER_SUMMARY = 1 << 9
    FOLDER_COMPLETION = 1 << 10
    FOLDER_ERRORS = 1 << 11
    FOLDER_WATCH_STATE_CHANGED = 1 << 12

    @classmethod
    def all(cls) -> EventType:
        """Mask matching every event kind."""
        mask = cls(0)
        for member in cls:
            mask |= member
        return mask

    @classmethod
    def parse_mask(cls, names: str) -> EventType:
        """Parse a comma separated list of event names into a mask.

        Names are matched case-insensitively against both the member name
        ("STATE_CHANGED") and its CamelCase form ("StateChanged").
        An empty string yields the mask of all events.

        Raises:
            ValueError: If a name is not a known event kind.
        """
        if not names.strip():
            return cls.all()
        lookup = {}
        for member in cls:
            lookup[member.name.lower()] = member
            lookup[member.name.replace("_", "").lower()] = member
        mask = cls(0)
        for raw in names.split(","):
            name = raw.strip().lower()
            if not name:
                continue
            if name not in lookup:
                raise ValueError(f"Unknown event type: {raw.strip()}")
            mask |= lookup[name]
        return mask

    @property
    def display_name(self) -> str:
        """CamelCase name as shown to external consumers."""
        return "".join(part.capitalize() for part in (self.name or "").split("_"))


# =============================================================================
# Payloads
# =============================================================================


@dataclass(frozen=True)
class Starting:
    """The process is starting up."""

    event_type: ClassVar[EventType] = EventType.STARTING

    home: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"home": self.home}


@dataclass(frozen=True)
class DeviceConnected:
    """A remote device has connected."""

    event_type: ClassVar[EventType] = EventType.DEVICE_CONNECTED

    id: str
    device_name: str = ""
    client_name: str = ""
    client_version: str = ""
    addr: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "deviceName": self.device_name,
            "clientName": self.client_name,
            "clientVersion": self.client_version,
            "addr": self.addr,
        }


@dataclass(frozen=True)
class DeviceDisconnected:
    """A remote device has disconnected."""

    event_type: ClassVar[EventType] = EventType.DEVICE_DISCONNECTED

    id: str
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "error": self.error}


@dataclass(frozen=True)
class LocalIndexUpdated:
    """The local index of a folder changed after a scan or pull."""

    event_type: ClassVar[EventType] = EventType.LOCAL_INDEX_UPDATED

    folder: str
    items: int = 0
    filenames: tuple[str, ...] = ()
    sequence: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": self.folder,
            "items": self.items,
            "filenames": list(self.filenames),
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class RemoteIndexUpdated:
    """A remote device sent an index update for a folder."""

    event_type: ClassVar[EventType] = EventType.REMOTE_INDEX_UPDATED

    folder: str
    device: str = ""
    items: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"folder": self.folder, "device": self.device, "items": self.items}


@dataclass(frozen=True)
class ItemFinished:
    """A single item finished syncing."""

    event_type: ClassVar[EventType] = EventType.ITEM_FINISHED

    folder: str
    item: str
    action: str = "update"
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "folder": self.folder,
            "item": self.item,
            "action": self.action,
            "error": self.error,
        }


@dataclass(frozen=True)
class StateChanged:
    """A folder moved from one sync state to another."""

    event_type: ClassVar[EventType] = EventType.STATE_CHANGED

    folder: str
    from_state: str
    to_state: str
    duration: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "folder": self.folder,
            "from": self.from_state,
            "to": self.to_state,
            "duration": self.duration,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class PullerProgress:
    """Progress of pulling one file."""

    total: int = 0
    reused: int = 0
    copied_from_origin: int = 0
    copied_from_elsewhere: int = 0
    pulled: int = 0
    pulling: int = 0
    bytes_done: int = 0
    bytes_total: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "reused": self.reused,
            "copiedFromOrigin": self.copied_from_origin,
            "copiedFromElsewhere": self.copied_from_elsewhere,
            "pulled": self.pulled,
            "pulling": self.pulling,
            "bytesDone": self.bytes_done,
            "bytesTotal": self.bytes_total,
        }


@dataclass(frozen=True)
class DownloadProgress:
    """Pull progress for all folders currently pulling, keyed by folder then file."""

    event_type: ClassVar[EventType] = EventType.DOWNLOAD_PROGRESS

    folders: dict[str, dict[str, PullerProgress]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            folder: {name: p.to_dict() for name, p in files.items()}
            for folder, files in self.folders.items()
        }


@dataclass(frozen=True)
class RemoteDownloadProgress:
    """A remote device reported its download progress on a folder."""

    event_type: ClassVar[EventType] = EventType.REMOTE_DOWNLOAD_PROGRESS

    folder: str
    device: str = ""
    state: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"folder": self.folder, "device": self.device, "state": dict(self.state)}


@dataclass(frozen=True)
class FolderWatchStateChanged:
    """The filesystem watcher of a folder started or stopped failing."""

    event_type: ClassVar[EventType] = EventType.FOLDER_WATCH_STATE_CHANGED

    folder: str
    from_error: str | None = None
    to_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"folder": self.folder}
        if self.from_error is not None:
            data["from"] = self.from_error
        if self.to_error is not None:
            data["to"] = self.to_error
        return data


@dataclass(frozen=True)
class FolderErrors:
    """A folder reported pull errors."""

    event_type: ClassVar[EventType] = EventType.FOLDER_ERRORS

    folder: str
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"folder": self.folder, "errors": list(self.errors)}


@dataclass(frozen=True)
class FolderSummary:
    """Summary record computed for a folder."""

    event_type: ClassVar[EventType] = EventType.FOLDER_SUMMARY

    folder: str
    summary: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"folder": self.folder, "summary": dict(self.summary)}


@dataclass(frozen=True)
class FolderCompletion:
    """Completion of a folder on one remote device."""

    event_type: ClassVar[EventType] = EventType.FOLDER_COMPLETION

    folder: str
    device: str
    completion: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.completion)
        data["folder"] = self.folder
        data["device"] = self.device
        return data


EventData = (
    Starting
    | DeviceConnected
    | DeviceDisconnected
    | LocalIndexUpdated
    | RemoteIndexUpdated
    | ItemFinished
    | StateChanged
    | DownloadProgress
    | RemoteDownloadProgress
    | FolderWatchStateChanged
    | FolderErrors
    | FolderSummary
    | FolderCompletion
)


@dataclass(frozen=True)
class Event:
    """An event as delivered by the bus.

    Attributes:
        id: Monotonically increasing id, unique per bus.
        time: When the event was logged (UTC).
        data: Typed payload; its class determines the event kind.
    """

    id: int
    time: datetime
    data: EventData

    @property
    def type(self) -> EventType:
        """Kind of this event, derived from the payload."""
        return self.data.event_type

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "type": self.type.display_name,
            "time": self.time.isoformat(),
            "data": self.data.to_dict(),
        }

    def __repr__(self) -> str:
        return f"Event({self.id}, {self.type.display_name})"
