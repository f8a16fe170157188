"""In-process event bus.

This module provides:
- EventLogger: Publishes events to subscribers and keeps a short history
- Subscription: A bitmask-filtered, bounded stream of events

Architecture:
    producers ─log()─► EventLogger ─► Subscription (queue per subscriber)
                             │
                       (recent events) ─► since() for polling consumers

Each subscription has its own bounded queue so a slow subscriber cannot
stall the others. If a subscriber's queue stays full for longer than the
delivery timeout the event is dropped for that subscriber only.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from foldersummary.events.types import Event, EventType

if TYPE_CHECKING:
    from foldersummary.events.types import EventData

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1000
DEFAULT_HISTORY_SIZE = 1000
DELIVERY_TIMEOUT = 0.05  # seconds


class Subscription:
    """A stream of events matching a mask.

    Usage:
        sub = bus.subscribe(EventType.STATE_CHANGED | EventType.DEVICE_CONNECTED)
        while running:
            event = sub.poll(timeout=0.1)
            if event is not None:
                handle(event)
        sub.unsubscribe()
    """

    def __init__(
        self,
        bus: EventLogger,
        mask: EventType,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._bus = bus
        self._mask = mask
        self._events: queue.Queue[Event] = queue.Queue(maxsize=buffer_size)
        self._closed = False
        self.dropped = 0

    @property
    def mask(self) -> EventType:
        """Event kinds delivered to this subscription."""
        return self._mask

    @property
    def closed(self) -> bool:
        """Whether unsubscribe() has been called."""
        return self._closed

    def matches(self, event: Event) -> bool:
        """Check whether an event kind is part of this subscription."""
        return bool(event.type & self._mask)

    def poll(self, timeout: float | None = None) -> Event | None:
        """Get the next event.

        Args:
            timeout: Seconds to wait; None blocks until an event arrives.

        Returns:
            The next event, or None if the timeout expired.
        """
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def pending(self) -> int:
        """Number of events waiting to be polled."""
        return self._events.qsize()

    def unsubscribe(self) -> None:
        """Stop receiving events."""
        if self._closed:
            return
        self._closed = True
        self._bus._remove(self)

    def _deliver(self, event: Event, timeout: float) -> bool:
        try:
            self._events.put(event, timeout=timeout)
        except queue.Full:
            self.dropped += 1
            return False
        return True


class EventLogger:
    """Thread-safe event bus.

    Usage:
        bus = EventLogger()
        sub = bus.subscribe(EventType.FOLDER_SUMMARY)
        bus.log(FolderSummary(folder="docs", summary={...}))
        event = sub.poll(timeout=1.0)
    """

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        delivery_timeout: float = DELIVERY_TIMEOUT,
    ) -> None:
        """Initialize the bus.

        Args:
            history_size: Number of recent events kept for since().
            delivery_timeout: Seconds to wait on a full subscriber queue
                before dropping the event for that subscriber.
        """
        self._lock = threading.Lock()
        self._new_event = threading.Condition(self._lock)
        self._subscriptions: list[Subscription] = []
        self._history: deque[Event] = deque(maxlen=history_size)
        self._next_id = 1
        self._delivery_timeout = delivery_timeout

    def subscribe(
        self,
        mask: EventType,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> Subscription:
        """Subscribe to the events matching mask."""
        sub = Subscription(self, mask, buffer_size=buffer_size)
        with self._lock:
            self._subscriptions.append(sub)
        logger.debug("New subscription for %s", mask)
        return sub

    def log(self, data: EventData) -> Event:
        """Publish an event.

        Args:
            data: Event payload; its class determines the event kind.

        Returns:
            The event as delivered to subscribers.
        """
        with self._lock:
            event = Event(id=self._next_id, time=datetime.now(UTC), data=data)
            self._next_id += 1
            self._history.append(event)
            targets = [s for s in self._subscriptions if s.matches(event)]
            self._new_event.notify_all()

        # Delivery happens outside the lock so a full subscriber queue does
        # not block other producers from logging.
        for sub in targets:
            if not sub._deliver(event, self._delivery_timeout):
                logger.warning(
                    "Dropped %s event %d for slow subscriber",
                    event.type.display_name,
                    event.id,
                )
        return event

    def since(
        self,
        last_id: int,
        mask: EventType | None = None,
        timeout: float = 0.0,
        limit: int = 0,
    ) -> list[Event]:
        """Get buffered events newer than last_id.

        Args:
            last_id: Only events with a greater id are returned.
            mask: Optional filter on event kinds.
            timeout: Seconds to wait for a matching event if none is buffered.
            limit: Maximum number of (most recent) events to return; 0 = all.

        Returns:
            Matching events in id order.
        """
        wanted = mask if mask is not None else EventType.all()

        def collect() -> list[Event]:
            return [e for e in self._history if e.id > last_id and e.type & wanted]

        with self._lock:
            events = collect()
            if not events and timeout > 0:
                self._new_event.wait_for(lambda: bool(collect()), timeout=timeout)
                events = collect()

        if limit > 0:
            events = events[-limit:]
        return events

    @property
    def subscriber_count(self) -> int:
        """Number of active subscriptions."""
        with self._lock:
            return len(self._subscriptions)

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
        logger.debug("Subscription for %s removed", sub.mask)
