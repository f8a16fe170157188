"""Event bus and typed event payloads."""

from foldersummary.events.bus import EventLogger, Subscription
from foldersummary.events.types import (
    DeviceConnected,
    DeviceDisconnected,
    DownloadProgress,
    Event,
    EventData,
    EventType,
    FolderCompletion,
    FolderErrors,
    FolderSummary,
    FolderWatchStateChanged,
    ItemFinished,
    LocalIndexUpdated,
    PullerProgress,
    RemoteDownloadProgress,
    RemoteIndexUpdated,
    StateChanged,
    Starting,
)

__all__ = [
    # Bus
    "EventLogger",
    "Subscription",
    # Types
    "DeviceConnected",
    "DeviceDisconnected",
    "DownloadProgress",
    "Event",
    "EventData",
    "EventType",
    "FolderCompletion",
    "FolderErrors",
    "FolderSummary",
    "FolderWatchStateChanged",
    "ItemFinished",
    "LocalIndexUpdated",
    "PullerProgress",
    "RemoteDownloadProgress",
    "RemoteIndexUpdated",
    "StateChanged",
    "Starting",
]
