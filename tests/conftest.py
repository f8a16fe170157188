"""Shared fixtures for foldersummary tests."""

from __future__ import annotations

import time
from collections.abc import Callable, Generator

import pytest

from foldersummary.core.config import (
    Configuration,
    FolderConfiguration,
    FolderDeviceConfiguration,
    SummaryServiceConfig,
)
from foldersummary.core.types import FolderType
from foldersummary.events.bus import EventLogger
from foldersummary.model.memory import FolderData, InMemoryModel
from foldersummary.model.types import Completion, Counts
from foldersummary.summary.service import FolderSummaryService

SELF_ID = "SELF-0000"
DEVICE_A = "AAAA-1111"
DEVICE_B = "BBBB-2222"


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll predicate until it is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def _devices(*ids: str) -> tuple[FolderDeviceConfiguration, ...]:
    return tuple(FolderDeviceConfiguration(device_id=i) for i in ids)


@pytest.fixture
def config() -> Configuration:
    """Three folders: docs (A, B, self), photos (receive-only, A), music (B, ignore deletes)."""
    return Configuration(
        my_id=SELF_ID,
        folders=[
            FolderConfiguration(id="docs", devices=_devices(DEVICE_A, DEVICE_B, SELF_ID)),
            FolderConfiguration(
                id="photos",
                type=FolderType.RECEIVE_ONLY,
                devices=_devices(DEVICE_A, SELF_ID),
            ),
            FolderConfiguration(
                id="music",
                ignore_delete=True,
                devices=_devices(DEVICE_B, SELF_ID),
            ),
        ],
    )


@pytest.fixture
def model() -> InMemoryModel:
    """Model with data for docs, photos and music; A and B connected."""
    m = InMemoryModel()
    m.set_folder(
        "docs",
        FolderData(
            global_size=Counts(files=10, directories=2, symlinks=1, deleted=3, bytes=1000),
            local_size=Counts(files=8, directories=2, symlinks=1, deleted=3, bytes=800),
            need_size=Counts(files=2, bytes=200),
            sequences={"local": 5, "global": 7},
            ignores=["// comment", "", "*.tmp"],
            completions={DEVICE_A: Completion(completion_pct=50.0, global_bytes=1000, need_bytes=500)},
        ),
    )
    m.set_folder(
        "photos",
        FolderData(
            global_size=Counts(files=4, bytes=400),
            local_size=Counts(files=5, bytes=450),
            receive_only_changed=Counts(files=1, bytes=50),
        ),
    )
    m.set_folder(
        "music",
        FolderData(
            global_size=Counts(files=20, bytes=2000),
            need_size=Counts(files=1, deleted=7, bytes=10),
        ),
    )
    m.set_connected(DEVICE_A, True)
    m.set_connected(DEVICE_B, True)
    return m


@pytest.fixture
def bus() -> EventLogger:
    """Create an event bus."""
    return EventLogger()


@pytest.fixture
def fast_config() -> SummaryServiceConfig:
    """Service timing suitable for tests."""
    return SummaryServiceConfig(pump_interval=0.05, min_summary_interval=60.0, restart_delay=0.01)


@pytest.fixture
def service(
    config: Configuration,
    model: InMemoryModel,
    bus: EventLogger,
    fast_config: SummaryServiceConfig,
) -> Generator[FolderSummaryService, None, None]:
    """Create a (not yet started) service; stopped after the test."""
    svc = FolderSummaryService(config, model, bus, service_config=fast_config)
    yield svc
    svc.stop()
