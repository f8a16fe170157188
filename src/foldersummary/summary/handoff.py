"""Single-slot, non-blocking hand-off of a folder id between two threads.

The classifier uses try_send() to pass a folder straight to the scheduler
when a sync run has just finished. A send only succeeds if the scheduler
is blocked in receive() at that moment; otherwise it returns False at once
and the caller falls back to the dirty set.
"""

from __future__ import annotations

import threading


class ImmediateChannel:
    """Rendezvous channel carrying one folder id at a time."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._slot: str | None = None
        self._receivers = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called since the last open()."""
        return self._closed

    def try_send(self, folder: str) -> bool:
        """Hand a folder to a waiting receiver without blocking.

        Returns:
            True if a receiver was waiting and took the folder, False if
            nobody is ready (or the channel is closed).
        """
        with self._cond:
            if self._closed or self._receivers == 0 or self._slot is not None:
                return False
            self._slot = folder
            self._cond.notify_all()
            return True

    def receive(self, timeout: float | None = None) -> str | None:
        """Wait for a folder.

        Args:
            timeout: Seconds to wait; None waits until a send or close().

        Returns:
            The folder id, or None on timeout or close.
        """
        with self._cond:
            if self._slot is None and not self._closed:
                self._receivers += 1
                try:
                    self._cond.wait_for(
                        lambda: self._slot is not None or self._closed,
                        timeout=timeout,
                    )
                finally:
                    self._receivers -= 1
            folder, self._slot = self._slot, None
            return folder

    def close(self) -> None:
        """Wake any receiver and refuse further sends."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def open(self) -> None:
        """Accept sends again after close()."""
        with self._cond:
            self._closed = False
            self._slot = None
