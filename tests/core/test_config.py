"""Tests for configuration classes."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from foldersummary.core.config import (
    Configuration,
    FolderConfiguration,
    FolderDeviceConfiguration,
    SummaryServiceConfig,
    load_configuration,
)
from foldersummary.core.types import FolderState, FolderType, normalize_device_id, same_device


class TestTypes:
    """Tests for shared enums and device id helpers."""

    def test_folder_state_values(self) -> None:
        """Should use the wire names of folder states."""
        assert FolderState.IDLE.value == "idle"
        assert FolderState.SYNCING.value == "syncing"
        assert FolderState.SYNC_PREPARING.value == "sync-preparing"

    def test_normalize_device_id(self) -> None:
        """Should ignore case and dashes."""
        assert normalize_device_id("abcd-efgh") == "ABCDEFGH"
        assert same_device("abcd-efgh", "ABCDEFGH")
        assert not same_device("abcd", "abce")


class TestSummaryServiceConfig:
    """Tests for SummaryServiceConfig."""

    def test_default_values(self) -> None:
        """Should default to a 2s pump and a one minute liveness window."""
        config = SummaryServiceConfig()
        assert config.pump_interval == 2.0
        assert config.min_summary_interval == 60.0


class TestFolderConfiguration:
    """Tests for FolderConfiguration."""

    def test_shared_with(self) -> None:
        """Should match devices regardless of formatting."""
        folder = FolderConfiguration(
            id="docs",
            devices=(FolderDeviceConfiguration("AAAA-1111"),),
        )
        assert folder.shared_with("aaaa1111")
        assert not folder.shared_with("BBBB-2222")

    def test_from_dict(self) -> None:
        """Should parse the JSON representation."""
        folder = FolderConfiguration.from_dict(
            {
                "id": "photos",
                "type": "receiveonly",
                "ignoreDelete": True,
                "devices": ["AAAA", {"deviceID": "BBBB"}],
            }
        )
        assert folder.type == FolderType.RECEIVE_ONLY
        assert folder.ignore_delete
        assert [d.device_id for d in folder.devices] == ["AAAA", "BBBB"]

    def test_from_dict_defaults(self) -> None:
        """Should default to a send-receive folder without devices."""
        folder = FolderConfiguration.from_dict({"id": "docs"})
        assert folder.type == FolderType.SEND_RECEIVE
        assert folder.devices == ()
        assert not folder.ignore_delete


class TestConfiguration:
    """Tests for Configuration."""

    def test_folder_lookup(self) -> None:
        """Should return configured folders and None for unknown ones."""
        config = Configuration("SELF", [FolderConfiguration(id="docs")])
        assert config.folder("docs") is not None
        assert config.folder("missing") is None
        assert list(config.folders()) == ["docs"]

    def test_folders_returns_copy(self) -> None:
        """Mutating the returned dict should not affect the configuration."""
        config = Configuration("SELF", [FolderConfiguration(id="docs")])
        config.folders().clear()
        assert config.folder("docs") is not None

    def test_replace_folders(self) -> None:
        """Should swap the folder list."""
        config = Configuration("SELF", [FolderConfiguration(id="docs")])
        config.replace_folders([FolderConfiguration(id="music")])
        assert config.folder("docs") is None
        assert config.folder("music") is not None

    def test_concurrent_reads_and_replaces(self) -> None:
        """Reads during replacements should always see a full folder list."""
        config = Configuration("SELF", [FolderConfiguration(id="a"), FolderConfiguration(id="b")])
        seen: list[int] = []

        def reader() -> None:
            for _ in range(500):
                seen.append(len(config.folders()))

        thread = threading.Thread(target=reader)
        thread.start()
        for i in range(500):
            config.replace_folders(
                [FolderConfiguration(id=f"a{i}"), FolderConfiguration(id=f"b{i}")]
            )
        thread.join()

        assert set(seen) == {2}


class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_load(self, tmp_path: Path) -> None:
        """Should load our id and folders from JSON."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "myID": "SELF",
                    "folders": [
                        {"id": "docs", "devices": ["SELF", "AAAA"]},
                        {"id": "music", "ignoreDelete": True},
                    ],
                }
            )
        )

        config = load_configuration(path)

        assert config.my_id == "SELF"
        assert set(config.folders()) == {"docs", "music"}
        assert config.folder("music").ignore_delete  # type: ignore[union-attr]
