"""Tests for the in-process event bus."""

from __future__ import annotations

import threading
import time

from foldersummary.events.bus import EventLogger
from foldersummary.events.types import (
    EventType,
    FolderSummary,
    LocalIndexUpdated,
    StateChanged,
)


class TestSubscription:
    """Tests for subscriptions."""

    def test_receives_matching_events(self) -> None:
        """Should deliver events matching the mask."""
        bus = EventLogger()
        sub = bus.subscribe(EventType.LOCAL_INDEX_UPDATED)

        bus.log(LocalIndexUpdated(folder="docs"))

        event = sub.poll(timeout=1.0)
        assert event is not None
        assert event.data == LocalIndexUpdated(folder="docs")

    def test_filters_other_events(self) -> None:
        """Should not deliver events outside the mask."""
        bus = EventLogger()
        sub = bus.subscribe(EventType.FOLDER_SUMMARY)

        bus.log(LocalIndexUpdated(folder="docs"))

        assert sub.poll(timeout=0.05) is None

    def test_poll_timeout(self) -> None:
        """Should return None when nothing arrives."""
        bus = EventLogger()
        sub = bus.subscribe(EventType.all())
        start = time.monotonic()
        assert sub.poll(timeout=0.05) is None
        assert time.monotonic() - start >= 0.04

    def test_unsubscribe(self) -> None:
        """Should stop delivery after unsubscribe."""
        bus = EventLogger()
        sub = bus.subscribe(EventType.all())
        assert bus.subscriber_count == 1

        sub.unsubscribe()
        sub.unsubscribe()  # Should not raise
        bus.log(LocalIndexUpdated(folder="docs"))

        assert bus.subscriber_count == 0
        assert sub.closed
        assert sub.poll(timeout=0.01) is None

    def test_full_buffer_drops_for_slow_subscriber(self) -> None:
        """A full subscriber should lose events without blocking others forever."""
        bus = EventLogger(delivery_timeout=0.01)
        slow = bus.subscribe(EventType.all(), buffer_size=1)
        fast = bus.subscribe(EventType.all())

        for i in range(3):
            bus.log(LocalIndexUpdated(folder=f"f{i}"))

        assert slow.pending() == 1
        assert slow.dropped == 2
        assert fast.pending() == 3

    def test_full_buffer_does_not_stall_producer(self) -> None:
        """With the default timeout a full subscriber should cost the producer only milliseconds."""
        bus = EventLogger()
        slow = bus.subscribe(EventType.all(), buffer_size=1)
        bus.log(LocalIndexUpdated(folder="docs"))

        started = time.monotonic()
        for _ in range(5):
            bus.log(LocalIndexUpdated(folder="docs"))
        elapsed = time.monotonic() - started

        assert slow.dropped == 5
        assert elapsed < 1.0


class TestEventLogger:
    """Tests for EventLogger."""

    def test_ids_increase(self) -> None:
        """Event ids should be unique and increasing."""
        bus = EventLogger()
        first = bus.log(LocalIndexUpdated(folder="a"))
        second = bus.log(LocalIndexUpdated(folder="b"))
        assert second.id == first.id + 1

    def test_since(self) -> None:
        """Should return buffered events newer than the given id."""
        bus = EventLogger()
        first = bus.log(LocalIndexUpdated(folder="a"))
        bus.log(StateChanged(folder="a", from_state="idle", to_state="scanning"))
        bus.log(FolderSummary(folder="a"))

        events = bus.since(first.id)
        assert [e.type for e in events] == [
            EventType.STATE_CHANGED,
            EventType.FOLDER_SUMMARY,
        ]

    def test_since_with_mask_and_limit(self) -> None:
        """Should filter by mask and keep only the most recent events."""
        bus = EventLogger()
        for i in range(5):
            bus.log(FolderSummary(folder=f"f{i}"))
        bus.log(LocalIndexUpdated(folder="x"))

        events = bus.since(0, mask=EventType.FOLDER_SUMMARY, limit=2)
        assert [e.data.folder for e in events] == ["f3", "f4"]  # type: ignore[union-attr]

    def test_since_waits_for_new_event(self) -> None:
        """Should wait up to timeout for a matching event."""
        bus = EventLogger()
        timer = threading.Timer(0.05, lambda: bus.log(FolderSummary(folder="docs")))
        timer.start()
        try:
            events = bus.since(0, timeout=2.0)
        finally:
            timer.cancel()
        assert len(events) == 1

    def test_since_timeout_returns_empty(self) -> None:
        """Should return an empty list when nothing arrives in time."""
        bus = EventLogger()
        assert bus.since(0, timeout=0.05) == []

    def test_history_is_bounded(self) -> None:
        """Only the most recent events should be kept."""
        bus = EventLogger(history_size=3)
        for i in range(10):
            bus.log(LocalIndexUpdated(folder=f"f{i}"))
        events = bus.since(0)
        assert [e.id for e in events] == [8, 9, 10]
