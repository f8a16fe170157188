"""Command-line interface for foldersummary.

Commands:
- serve: Run the summary service and its REST API
- summary: Print one folder summary
"""

from __future__ import annotations

import click

from foldersummary.cli.config import get_config_dir, get_config_file, get_state_file
from foldersummary.cli.serve import serve
from foldersummary.cli.summary import summary


@click.group()
@click.version_option(package_name="foldersummary")
def cli() -> None:
    """foldersummary - Rate-limited folder summaries for a sync engine."""


cli.add_command(serve)
cli.add_command(summary)

__all__ = [
    "cli",
    "get_config_dir",
    "get_config_file",
    "get_state_file",
]
