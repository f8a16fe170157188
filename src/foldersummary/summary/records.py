"""Pydantic models for the records published by the summary service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    """Base for published records: camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FolderSummaryRecord(_Record):
    """Aggregate size and state metrics of one folder."""

    errors: int = 0
    pull_errors: int = 0  # deprecated, same value as errors
    invalid: str = ""  # deprecated, always empty

    global_files: int = 0
    global_directories: int = 0
    global_symlinks: int = 0
    global_deleted: int = 0
    global_bytes: int = 0
    global_total_items: int = 0

    local_files: int = 0
    local_directories: int = 0
    local_symlinks: int = 0
    local_deleted: int = 0
    local_bytes: int = 0
    local_total_items: int = 0

    need_files: int = 0
    need_directories: int = 0
    need_symlinks: int = 0
    need_deletes: int = 0
    need_bytes: int = 0
    need_total_items: int = 0

    # Only set for receive-only folders
    receive_only_changed_files: int | None = None
    receive_only_changed_directories: int | None = None
    receive_only_changed_symlinks: int | None = None
    receive_only_changed_deletes: int | None = None
    receive_only_changed_bytes: int | None = None
    receive_only_total_items: int | None = None

    in_sync_files: int = 0
    in_sync_bytes: int = 0

    state: str = ""
    state_changed: datetime | None = None
    error: str | None = None

    version: int = 0  # legacy name of sequence
    sequence: int = 0

    ignore_patterns: bool = False
    watch_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict.

        stateChanged is always present; it is null when the model has no
        timestamp or the state query failed.
        """
        data = super().to_dict()
        data.setdefault("stateChanged", None)
        return data


class FolderCompletionRecord(_Record):
    """Completion of one folder on one remote device."""

    completion: float = 100.0
    global_bytes: int = 0
    need_bytes: int = 0
    global_items: int = 0
    need_items: int = 0
    need_deletes: int = 0
    sequence: int = 0
    folder: str
    device: str
