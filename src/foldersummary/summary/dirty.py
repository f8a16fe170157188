"""Shared state between the event classifier and the summary scheduler.

This module provides:
- DirtySet: Lock-guarded set of folders awaiting a summary
- LastEventRequest: Lock-guarded timestamp of the last event consumer poll

Each container owns its own lock, held only for a single read, write or
drain. Neither is ever held across a model query or an event publish.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class DirtySet:
    """Set of folder ids needing recomputation.

    Adding a folder that is already present is a no-op, so a burst of
    events for one folder results in a single summary.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._folders: set[str] = set()

    def add(self, folder: str) -> None:
        """Mark a folder dirty."""
        with self._lock:
            self._folders.add(folder)

    def add_many(self, folders: Iterable[str]) -> None:
        """Mark several folders dirty under a single lock acquisition."""
        with self._lock:
            self._folders.update(folders)

    def discard(self, folder: str) -> None:
        """Remove a folder if present."""
        with self._lock:
            self._folders.discard(folder)

    def drain(self) -> list[str]:
        """Return all dirty folders and clear the set atomically."""
        with self._lock:
            folders = list(self._folders)
            self._folders.clear()
        return folders

    def __contains__(self, folder: object) -> bool:
        with self._lock:
            return folder in self._folders

    def __len__(self) -> int:
        with self._lock:
            return len(self._folders)


class LastEventRequest:
    """Time of the most recent event request from an external consumer.

    Starts out as "never", so nothing is considered to be listening until
    the first touch().
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the tracker.

        Args:
            clock: Monotonic clock returning seconds.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._last: float | None = None

    def touch(self) -> None:
        """Record that a consumer asked for events now."""
        now = self._clock()
        with self._lock:
            self._last = now

    def age(self) -> float | None:
        """Seconds since the last request, or None if there was none."""
        with self._lock:
            last = self._last
        if last is None:
            return None
        return self._clock() - last

    def is_recent(self, window: float) -> bool:
        """Whether a request happened within the last window seconds."""
        age = self.age()
        return age is not None and age <= window
