"""Tests for the in-memory model."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from foldersummary.model.memory import FolderData, InMemoryModel, load_model
from foldersummary.model.types import (
    Completion,
    Counts,
    FolderMissingError,
    FolderPausedError,
)


class TestCounts:
    """Tests for Counts."""

    def test_total_items(self) -> None:
        """Should sum every kind of item but not bytes."""
        counts = Counts(files=1, directories=2, symlinks=3, deleted=4, bytes=1000)
        assert counts.total_items() == 10


class TestCompletion:
    """Tests for Completion."""

    def test_to_dict(self) -> None:
        """Should use camelCase keys."""
        data = Completion(completion_pct=42.5, need_bytes=10, need_deletes=1).to_dict()
        assert data["completion"] == 42.5
        assert data["needBytes"] == 10
        assert data["needDeletes"] == 1


class TestInMemoryModel:
    """Tests for InMemoryModel."""

    def test_snapshot(self) -> None:
        """Should return the folder's counts and sequences."""
        model = InMemoryModel()
        model.set_folder(
            "docs",
            FolderData(global_size=Counts(files=3), sequences={"local": 2}),
        )

        snap = model.db_snapshot("docs")

        assert snap.global_size().files == 3
        assert snap.sequence("local") == 2
        assert snap.sequence("unknown") == 0

    def test_missing_folder(self) -> None:
        """Queries on unknown folders should raise FolderMissingError."""
        model = InMemoryModel()
        with pytest.raises(FolderMissingError):
            model.db_snapshot("nope")
        with pytest.raises(FolderMissingError):
            model.state("nope")
        assert model.folder_progress_bytes_completed("nope") == 0
        assert model.watch_error("nope") is None

    def test_injected_failures(self) -> None:
        """Injected errors should be raised by the matching query."""
        model = InMemoryModel()
        model.set_folder("docs", FolderData(errors_error=FolderPausedError("docs")))
        with pytest.raises(FolderPausedError):
            model.folder_errors("docs")
        model.db_snapshot("docs")  # Unaffected

    def test_update_folder(self) -> None:
        """Should replace selected fields only."""
        model = InMemoryModel()
        model.set_folder("docs", FolderData(ignores=["*.tmp"]))
        model.update_folder("docs", watch_error="too many files")
        assert model.watch_error("docs") == "too many files"
        assert model.get_ignores("docs") == ["*.tmp"]

    def test_update_missing_folder(self) -> None:
        """Updating an unknown folder should raise."""
        model = InMemoryModel()
        with pytest.raises(FolderMissingError):
            model.update_folder("nope", state="idle")

    def test_set_state_stamps_time(self) -> None:
        """Should record when the state changed."""
        model = InMemoryModel()
        model.set_folder("docs", FolderData())
        model.set_state("docs", "syncing")
        state, changed = model.state("docs")
        assert state == "syncing"
        assert changed is not None

    def test_connected(self) -> None:
        """Should track device connections regardless of id formatting."""
        model = InMemoryModel()
        model.set_connected("aaaa-1111", True)
        assert model.connected("AAAA1111")
        model.set_connected("AAAA-1111", False)
        assert not model.connected("aaaa-1111")

    def test_completion_default(self) -> None:
        """Without remote data a device should need everything."""
        model = InMemoryModel()
        model.set_folder("docs", FolderData(global_size=Counts(files=2, bytes=100)))
        comp = model.completion("AAAA", "docs")
        assert comp.completion_pct == 0.0
        assert comp.need_bytes == 100
        assert comp.need_items == 2

    def test_completion_known(self) -> None:
        """Should return configured completion for the device."""
        model = InMemoryModel()
        model.set_folder(
            "docs",
            FolderData(completions={"AAAA-1111": Completion(completion_pct=75.0)}),
        )
        assert model.completion("aaaa1111", "docs").completion_pct == 75.0


class TestLoadModel:
    """Tests for load_model."""

    def test_load(self, tmp_path: Path) -> None:
        """Should build folders and connections from JSON."""
        path = tmp_path / "state.json"
        path.write_text(
            json.dumps(
                {
                    "connected": ["AAAA"],
                    "folders": {
                        "docs": {
                            "global": {"files": 3, "bytes": 300},
                            "need": {"files": 1, "bytes": 100},
                            "sequences": {"local": 4, "global": 6},
                            "state": "syncing",
                            "stateChanged": "2024-01-01T00:00:00+00:00",
                            "errors": [{"path": "a.txt", "error": "permission denied"}],
                            "ignores": ["*.tmp"],
                            "completion": {"AAAA": {"completion": 80.0}},
                        }
                    },
                }
            )
        )

        model = load_model(path)

        assert model.connected("AAAA")
        snap = model.db_snapshot("docs")
        assert snap.global_size().bytes == 300
        assert snap.sequence("global") == 6
        state, changed = model.state("docs")
        assert state == "syncing"
        assert changed is not None and changed.year == 2024
        assert len(model.folder_errors("docs")) == 1
        assert model.completion("AAAA", "docs").completion_pct == 80.0
