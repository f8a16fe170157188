"""Core module - Shared configuration and types."""

from foldersummary.core.config import (
    Configuration,
    FolderConfiguration,
    FolderDeviceConfiguration,
    SummaryServiceConfig,
    load_configuration,
)
from foldersummary.core.types import (
    GLOBAL_DEVICE_ID,
    LOCAL_DEVICE_ID,
    FolderState,
    FolderType,
    normalize_device_id,
    same_device,
)

__all__ = [
    # Config
    "Configuration",
    "FolderConfiguration",
    "FolderDeviceConfiguration",
    "SummaryServiceConfig",
    "load_configuration",
    # Types
    "FolderState",
    "FolderType",
    "GLOBAL_DEVICE_ID",
    "LOCAL_DEVICE_ID",
    "normalize_device_id",
    "same_device",
]
