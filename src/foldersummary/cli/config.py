"""Configuration utilities for the foldersummary CLI."""

from __future__ import annotations

from pathlib import Path


def get_config_dir() -> Path:
    """Get the configuration directory.

    Returns:
        Path to ~/.foldersummary.
    """
    return Path.home() / ".foldersummary"


def get_config_file() -> Path:
    """Get the default folder configuration file."""
    return get_config_dir() / "config.json"


def get_state_file() -> Path:
    """Get the default model state file."""
    return get_config_dir() / "state.json"


def resolve_path(value: str | None, default: Path) -> Path:
    """Use the given path if any, else the default, expanding ~."""
    if value:
        return Path(value).expanduser().resolve()
    return default
