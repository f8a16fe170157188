"""Folder summary service.

This module provides:
- FolderSummaryService: Adds FolderSummary and FolderCompletion events to
  the event stream at rate-limited intervals

Architecture:
    EventLogger ─► EventClassifier ─► DirtySet ─► SummaryScheduler ─► SummaryPublisher ─► EventLogger
                          │                              ▲
                          └──── ImmediateChannel ────────┘

The classifier and the scheduler run as two supervised threads. All
summary computation happens on the scheduler thread, one folder at a time.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from foldersummary.core.config import SummaryServiceConfig
from foldersummary.summary.classifier import EventClassifier
from foldersummary.summary.dirty import DirtySet, LastEventRequest
from foldersummary.summary.handoff import ImmediateChannel
from foldersummary.summary.publisher import SummaryPublisher
from foldersummary.summary.scheduler import SchedulerStats, SummaryScheduler
from foldersummary.summary.supervisor import ServiceState, Supervisor

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from foldersummary.core.config import Configuration
    from foldersummary.events.bus import EventLogger
    from foldersummary.model.types import Model

logger = logging.getLogger(__name__)


class FolderSummaryService:
    """Keeps event consumers informed about folder summaries.

    Usage:
        service = FolderSummaryService(config, model, bus)
        service.start()

        # From the API handler serving events:
        service.on_event_request()

        # On demand:
        data = service.summary("docs")

        service.stop()
    """

    def __init__(
        self,
        config: Configuration,
        model: Model,
        bus: EventLogger,
        service_config: SummaryServiceConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the service.

        Args:
            config: Folder configuration and our own device id.
            model: Query interface of the sync engine.
            bus: Event bus to listen on and publish to.
            service_config: Timing configuration.
            clock: Monotonic clock returning seconds.
        """
        self._service_config = service_config or SummaryServiceConfig()

        self._dirty = DirtySet()
        self._last_request = LastEventRequest(clock=clock)
        self._immediate = ImmediateChannel()

        self._publisher = SummaryPublisher(config, model, bus)
        self._classifier = EventClassifier(config, bus, self._dirty, self._immediate)
        self._scheduler = SummaryScheduler(
            self._dirty,
            self._last_request,
            self._immediate,
            self._publisher.publish,
            self._service_config,
            clock=clock,
        )

        self._supervisor = Supervisor(
            f"FolderSummaryService@{id(self):x}",
            restart_delay=self._service_config.restart_delay,
        )
        self._supervisor.add("listenForUpdates", self._classifier.run)
        self._supervisor.add(
            "calculateSummaries",
            self._scheduler.run,
            on_stop=self._immediate.close,
        )

    @property
    def state(self) -> ServiceState:
        """Get current service state."""
        return self._supervisor.state

    @property
    def stats(self) -> SchedulerStats:
        """Get scheduler statistics."""
        return self._scheduler.stats

    @property
    def dirty(self) -> DirtySet:
        """Folders currently awaiting a summary."""
        return self._dirty

    @property
    def publisher(self) -> SummaryPublisher:
        """The publisher used for summaries and completions."""
        return self._publisher

    def summary(self, folder: str) -> dict[str, Any]:
        """Compute a folder summary on demand.

        Raises:
            FolderUnavailableError: If the folder's database data is unavailable.
        """
        return self._publisher.summary(folder)

    def on_event_request(self) -> None:
        """Record that an external consumer is polling for events."""
        self._last_request.touch()

    def start(self) -> None:
        """Start listening for events and calculating summaries."""
        if self._supervisor.state != ServiceState.STOPPED:
            logger.warning("Folder summary service already running")
            return
        self._immediate.open()
        # Subscribe before the threads start so no event logged right after
        # start() is missed.
        self._classifier.subscribe()
        self._supervisor.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Stop both loops. Folders still dirty are not processed."""
        self._supervisor.stop(timeout=timeout)

    def __enter__(self) -> FolderSummaryService:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
