"""Event classifier for the folder summary service.

Listens to the event bus and makes note of folders whose summary needs to
be recalculated:

    | Event                      | Folders marked dirty                     |
    |----------------------------|------------------------------------------|
    | DEVICE_CONNECTED           | every folder shared with the device      |
    | DOWNLOAD_PROGRESS          | every folder in the payload              |
    | STATE_CHANGED (sync→idle)  | the folder, unless handed off immediately|
    | STATE_CHANGED (other)      | none                                     |
    | LOCAL_INDEX_UPDATED,       | the event's folder                       |
    | REMOTE_INDEX_UPDATED,      |                                          |
    | REMOTE_DOWNLOAD_PROGRESS,  |                                          |
    | FOLDER_WATCH_STATE_CHANGED |                                          |

The loop must stay fast so the subscription buffer never fills up: it only
touches the dirty set and the immediate channel, never the model.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from foldersummary.core.types import FolderState
from foldersummary.events.types import (
    DeviceConnected,
    DownloadProgress,
    EventType,
    FolderWatchStateChanged,
    LocalIndexUpdated,
    RemoteDownloadProgress,
    RemoteIndexUpdated,
    StateChanged,
)

if TYPE_CHECKING:
    import threading

    from foldersummary.core.config import Configuration
    from foldersummary.events.bus import EventLogger, Subscription
    from foldersummary.events.types import Event
    from foldersummary.summary.dirty import DirtySet
    from foldersummary.summary.handoff import ImmediateChannel

logger = logging.getLogger(__name__)

SUBSCRIPTION_MASK = (
    EventType.LOCAL_INDEX_UPDATED
    | EventType.REMOTE_INDEX_UPDATED
    | EventType.STATE_CHANGED
    | EventType.REMOTE_DOWNLOAD_PROGRESS
    | EventType.DEVICE_CONNECTED
    | EventType.FOLDER_WATCH_STATE_CHANGED
    | EventType.DOWNLOAD_PROGRESS
)

# A transition from one of these states to idle means a sync run finished.
SYNC_STATES = frozenset({FolderState.SYNCING.value, FolderState.SYNC_PREPARING.value})

# Events whose payload names the single folder they affect.
FOLDER_EVENTS = (
    LocalIndexUpdated,
    RemoteIndexUpdated,
    RemoteDownloadProgress,
    FolderWatchStateChanged,
)


class EventClassifier:
    """Maps events to dirty folders.

    Usage:
        classifier = EventClassifier(config, bus, dirty, channel)
        classifier.subscribe()
        classifier.run(stop_event)  # blocks until stop_event is set
    """

    def __init__(
        self,
        config: Configuration,
        bus: EventLogger,
        dirty: DirtySet,
        immediate: ImmediateChannel,
        poll_interval: float = 0.1,
    ) -> None:
        """Initialize the classifier.

        Args:
            config: Folder configuration, used to resolve device connections.
            bus: Event bus to subscribe to.
            dirty: Dirty set to record folders in.
            immediate: Channel for handing finished folders to the scheduler.
            poll_interval: Seconds between checks of the stop event.
        """
        self._config = config
        self._bus = bus
        self._dirty = dirty
        self._immediate = immediate
        self._poll_interval = poll_interval
        self._subscription: Subscription | None = None
        self.events_processed = 0
        self.immediate_dispatches = 0

    def subscribe(self) -> Subscription:
        """Subscribe to the bus if not already subscribed."""
        if self._subscription is None or self._subscription.closed:
            self._subscription = self._bus.subscribe(SUBSCRIPTION_MASK)
        return self._subscription

    def run(self, stop: threading.Event) -> None:
        """Process events until stop is set, then release the subscription."""
        sub = self.subscribe()
        logger.debug("Event classifier loop started")
        try:
            while not stop.is_set():
                event = sub.poll(timeout=self._poll_interval)
                if event is not None:
                    self.process(event)
        finally:
            sub.unsubscribe()
            self._subscription = None
            logger.debug("Event classifier loop ended")

    def process(self, event: Event) -> None:
        """Record the folders affected by one event."""
        self.events_processed += 1
        data = event.data

        if isinstance(data, DeviceConnected):
            # A newly connected device needs a fresh completion for every
            # folder we share with it.
            folders = [
                f.id for f in self._config.folders().values() if f.shared_with(data.id)
            ]
            self._dirty.add_many(folders)
            return

        if isinstance(data, DownloadProgress):
            self._dirty.add_many(data.folders.keys())
            return

        if isinstance(data, StateChanged):
            if data.to_state != FolderState.IDLE.value:
                return
            if data.from_state not in SYNC_STATES:
                return
            # The folder finished syncing; refresh it right away if the
            # scheduler is free. Otherwise it goes with the next pass.
            if self._immediate.try_send(data.folder):
                self.immediate_dispatches += 1
                self._dirty.discard(data.folder)
                return
            self._dirty.add(data.folder)
            return

        if isinstance(data, FOLDER_EVENTS):
            self._dirty.add(data.folder)
            return

        logger.debug("Ignoring event %r", event)
