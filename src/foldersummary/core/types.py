"""Shared types for foldersummary.

This module defines enums and identifiers used by the model, the event
bus and the summary service.
"""

from __future__ import annotations

from enum import Enum


class FolderState(str, Enum):
    """Sync state of a folder as reported by the model."""

    IDLE = "idle"
    SCANNING = "scanning"
    SCAN_WAITING = "scan-waiting"
    SYNC_WAITING = "sync-waiting"
    SYNC_PREPARING = "sync-preparing"
    SYNCING = "syncing"
    CLEANING = "cleaning"
    CLEAN_WAITING = "clean-waiting"
    ERROR = "error"
    UNKNOWN = "unknown"


class FolderType(str, Enum):
    """Type of a synchronized folder."""

    SEND_RECEIVE = "sendreceive"
    SEND_ONLY = "sendonly"
    RECEIVE_ONLY = "receiveonly"


# Pseudo device ids used to look up sequence numbers in a snapshot.
LOCAL_DEVICE_ID = "local"
GLOBAL_DEVICE_ID = "global"


def normalize_device_id(device_id: str) -> str:
    """Normalize a device id for comparison.

    Device ids are case-insensitive and may be written with or without
    the dash separators.
    """
    return device_id.strip().replace("-", "").upper()


def same_device(a: str, b: str) -> bool:
    """Check whether two device id strings refer to the same device."""
    return normalize_device_id(a) == normalize_device_id(b)
