"""Summary scheduler.

Periodically recalculates folder summaries and completions for the folders
in the dirty set, and publishes folders handed over on the immediate
channel as soon as they arrive.

Timing:
    A pass runs every pump interval T. After a pass that took d seconds the
    next one is scheduled 2*d + T later, so summary work takes up at most
    about a third of the scheduler's time no matter how many folders are
    dirty or how slow the model is.

Passes are skipped (and the dirty set discarded) while no consumer has
requested events within the liveness window.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable

    from foldersummary.core.config import SummaryServiceConfig
    from foldersummary.summary.dirty import DirtySet, LastEventRequest
    from foldersummary.summary.handoff import ImmediateChannel

logger = logging.getLogger(__name__)


@dataclass
class SchedulerStats:
    """Statistics for the scheduler."""

    passes: int = 0
    summaries_published: int = 0
    immediate_published: int = 0
    folders_discarded: int = 0
    errors: int = 0
    last_pass_duration: float = 0.0


class SummaryScheduler:
    """Drives the publisher from the dirty set and the immediate channel.

    Usage:
        scheduler = SummaryScheduler(dirty, last_request, channel, publisher.publish, cfg)
        scheduler.run(stop_event)  # blocks until stop_event is set
    """

    def __init__(
        self,
        dirty: DirtySet,
        last_request: LastEventRequest,
        immediate: ImmediateChannel,
        publish: Callable[[str], bool],
        config: SummaryServiceConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the scheduler.

        Args:
            dirty: Folders awaiting a summary.
            last_request: Liveness of event consumers.
            immediate: Channel carrying folders to publish right away.
            publish: Publishes one folder; returns False if it was skipped.
            config: Pump interval and liveness window.
            clock: Monotonic clock returning seconds.
        """
        self._dirty = dirty
        self._last_request = last_request
        self._immediate = immediate
        self._publish = publish
        self._config = config
        self._clock = clock
        self._stats = SchedulerStats()

    @property
    def stats(self) -> SchedulerStats:
        """Get scheduler statistics."""
        return self._stats

    def next_interval(self, elapsed: float) -> float:
        """Delay before the next pass, given how long the last one took."""
        return 2 * elapsed + self._config.pump_interval

    def run(self, stop: threading.Event) -> None:
        """Run passes and immediate publishes until stop is set."""
        logger.debug("Summary scheduler loop started")
        deadline = self._clock() + self._config.pump_interval

        while not stop.is_set():
            folder = self._immediate.receive(timeout=max(0.0, deadline - self._clock()))
            if stop.is_set():
                break

            if folder is not None:
                # Finished syncs are reported regardless of liveness.
                if self._publish_one(folder):
                    self._stats.immediate_published += 1
                continue

            if self._clock() < deadline:
                continue

            started = self._clock()
            self.run_pass()
            elapsed = self._clock() - started
            self._stats.last_pass_duration = elapsed
            deadline = self._clock() + self.next_interval(elapsed)

        logger.debug("Summary scheduler loop ended")

    def run_pass(self) -> int:
        """Publish every folder currently in the dirty set.

        Returns:
            Number of summaries published.
        """
        self._stats.passes += 1
        published = 0
        for folder in self.folders_to_handle():
            if self._publish_one(folder):
                published += 1
        if published:
            logger.debug("Published %d folder summaries", published)
        return published

    def folders_to_handle(self) -> list[str]:
        """Drain the dirty set.

        Returns an empty list, and drops whatever was dirty, if nobody has
        requested events recently.
        """
        folders = self._dirty.drain()
        if not self._last_request.is_recent(self._config.min_summary_interval):
            if folders:
                self._stats.folders_discarded += len(folders)
                logger.debug(
                    "No recent event requests, discarding %d dirty folders",
                    len(folders),
                )
            return []
        return folders

    def _publish_one(self, folder: str) -> bool:
        try:
            published = self._publish(folder)
        except Exception:
            self._stats.errors += 1
            logger.exception("Error publishing summary for %s", folder)
            return False
        if published:
            self._stats.summaries_published += 1
        return published
