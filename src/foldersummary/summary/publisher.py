"""Folder summary and completion computation.

This module provides:
- SummaryError, FolderUnavailableError: Errors raised by summary()
- SummaryPublisher: Computes the records for a folder and logs them on the bus

All queries against the model are read-only. A failure to read the folder's
database snapshot, or its error list for any reason other than the folder
being paused or not yet running, makes the folder unavailable: no partial
summary is produced. Failures of the state or watcher queries are reported
inside the summary instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from foldersummary.core.types import (
    GLOBAL_DEVICE_ID,
    LOCAL_DEVICE_ID,
    FolderState,
    FolderType,
    same_device,
)
from foldersummary.events.types import FolderCompletion, FolderSummary
from foldersummary.model.types import (
    FolderNotRunningError,
    FolderPausedError,
    ModelError,
)
from foldersummary.summary.records import FolderCompletionRecord, FolderSummaryRecord

if TYPE_CHECKING:
    from foldersummary.core.config import Configuration
    from foldersummary.events.bus import EventLogger
    from foldersummary.model.types import Model

logger = logging.getLogger(__name__)


class SummaryError(Exception):
    """Base exception for summary errors."""


class FolderUnavailableError(SummaryError):
    """The folder's database data cannot be trusted right now.

    Attributes:
        folder: Folder id.
        cause: The model error that made the folder unavailable.
    """

    def __init__(self, folder: str, cause: ModelError) -> None:
        self.folder = folder
        self.cause = cause
        super().__init__(f"folder {folder} unavailable: {cause}")


def has_ignore_patterns(lines: list[str]) -> bool:
    """Check for at least one non-empty, non-comment ignore line."""
    return any(line and not line.startswith("//") for line in lines)


class SummaryPublisher:
    """Computes and publishes folder summaries and completions.

    Usage:
        publisher = SummaryPublisher(config, model, bus)
        record = publisher.summary("docs")   # on demand
        publisher.publish("docs")            # summary + completions on the bus
    """

    def __init__(
        self,
        config: Configuration,
        model: Model,
        bus: EventLogger,
    ) -> None:
        self._config = config
        self._model = model
        self._bus = bus

    def summary(self, folder: str) -> dict[str, Any]:
        """Compute the summary record of a folder.

        Args:
            folder: Folder id.

        Returns:
            The summary as a dict with camelCase keys.

        Raises:
            FolderUnavailableError: If the snapshot or error list cannot be read.
        """
        return self.summary_record(folder).to_dict()

    def summary_record(self, folder: str) -> FolderSummaryRecord:
        """Compute the summary of a folder as a record model."""
        try:
            snap = self._model.db_snapshot(folder)
        except ModelError as e:
            raise FolderUnavailableError(folder, e) from e

        try:
            errors = self._model.folder_errors(folder)
        except (FolderPausedError, FolderNotRunningError):
            # Stats from the db are still valid if the folder is just paused
            # or being started.
            errors = []
        except ModelError as e:
            raise FolderUnavailableError(folder, e) from e

        global_size = snap.global_size()
        local_size = snap.local_size()
        need = snap.need_size()

        # Bytes of files being pulled right now are no longer needed. The
        # difference goes negative if files were deleted globally after the
        # pull started.
        need_bytes = need.bytes - self._model.folder_progress_bytes_completed(folder)
        if need_bytes < 0:
            need_bytes = 0

        fcfg = self._config.folder(folder)
        need_deletes = need.deleted
        if fcfg is not None and fcfg.ignore_delete:
            need_deletes = 0

        record = FolderSummaryRecord(
            errors=len(errors),
            pull_errors=len(errors),
            global_files=global_size.files,
            global_directories=global_size.directories,
            global_symlinks=global_size.symlinks,
            global_deleted=global_size.deleted,
            global_bytes=global_size.bytes,
            global_total_items=global_size.total_items(),
            local_files=local_size.files,
            local_directories=local_size.directories,
            local_symlinks=local_size.symlinks,
            local_deleted=local_size.deleted,
            local_bytes=local_size.bytes,
            local_total_items=local_size.total_items(),
            need_files=need.files,
            need_directories=need.directories,
            need_symlinks=need.symlinks,
            need_deletes=need_deletes,
            need_bytes=need_bytes,
            need_total_items=need.total_items(),
            in_sync_files=global_size.files - need.files,
            in_sync_bytes=global_size.bytes - need_bytes,
        )

        if fcfg is not None and fcfg.type == FolderType.RECEIVE_ONLY:
            ro = snap.receive_only_changed_size()
            record.receive_only_changed_files = ro.files
            record.receive_only_changed_directories = ro.directories
            record.receive_only_changed_symlinks = ro.symlinks
            record.receive_only_changed_deletes = ro.deleted
            record.receive_only_changed_bytes = ro.bytes
            record.receive_only_total_items = ro.total_items()

        try:
            record.state, record.state_changed = self._model.state(folder)
        except ModelError as e:
            record.state = FolderState.UNKNOWN.value
            record.error = str(e)

        sequence = snap.sequence(LOCAL_DEVICE_ID) + snap.sequence(GLOBAL_DEVICE_ID)
        record.version = sequence
        record.sequence = sequence

        try:
            record.ignore_patterns = has_ignore_patterns(self._model.get_ignores(folder))
        except ModelError as e:
            logger.debug("Could not read ignores for %s: %s", folder, e)

        record.watch_error = self._model.watch_error(folder)

        return record

    def completion(self, folder: str, device_id: str) -> dict[str, Any]:
        """Compute the completion record of a folder on a remote device.

        Raises:
            ModelError: If the model cannot compute the completion.
        """
        comp = self._model.completion(device_id, folder)
        record = FolderCompletionRecord(
            completion=comp.completion_pct,
            global_bytes=comp.global_bytes,
            need_bytes=comp.need_bytes,
            global_items=comp.global_items,
            need_items=comp.need_items,
            need_deletes=comp.need_deletes,
            sequence=comp.sequence,
            folder=folder,
            device=device_id,
        )
        return record.to_dict()

    def publish(self, folder: str) -> bool:
        """Publish the summary of a folder and its completion per remote device.

        The summary is always logged before the folder's completions.

        Returns:
            True if a summary was published, False if the folder was skipped.
        """
        try:
            data = self.summary(folder)
        except FolderUnavailableError as e:
            logger.debug("Skipping summary of %s: %s", folder, e.cause)
            return False

        self._bus.log(FolderSummary(folder=folder, summary=data))

        fcfg = self._config.folder(folder)
        if fcfg is None:
            return True

        for dev in fcfg.devices:
            if same_device(dev.device_id, self._config.my_id):
                # We already know about ourselves.
                continue
            if not self._model.connected(dev.device_id):
                continue
            try:
                comp = self.completion(folder, dev.device_id)
            except ModelError as e:
                logger.debug(
                    "No completion for %s on %s: %s", folder, dev.device_id, e
                )
                continue
            self._bus.log(
                FolderCompletion(folder=folder, device=dev.device_id, completion=comp)
            )

        return True
