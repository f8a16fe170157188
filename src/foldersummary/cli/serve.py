"""Serve command: run the summary service behind the REST API."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from foldersummary.cli.config import get_config_file, get_state_file, resolve_path


@click.command()
@click.option("--config", "config_path", help="Folder configuration JSON file.")
@click.option("--state", "state_path", help="Model state JSON file.")
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=8384, show_default=True, type=int, help="Bind port.")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file.")
@click.option("--pump-interval", default=2.0, show_default=True, type=float,
              help="Seconds between summary passes.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def serve(
    config_path: str | None,
    state_path: str | None,
    host: str,
    port: int,
    log_file: str | None,
    pump_interval: float,
    verbose: bool,
) -> None:
    """Run the folder summary service and its REST API."""
    import uvicorn

    from foldersummary.core.config import SummaryServiceConfig
    from foldersummary.server.app import build_app, setup_logging

    config_file = resolve_path(config_path, get_config_file())
    state_file = resolve_path(state_path, get_state_file())

    for path in (config_file, state_file):
        if not path.exists():
            click.echo(f"Error: File not found: {path}", err=True)
            raise SystemExit(1)

    setup_logging(
        Path(log_file) if log_file else None,
        level=logging.DEBUG if verbose else logging.INFO,
    )

    app = build_app(
        config_file,
        state_file,
        service_config=SummaryServiceConfig(pump_interval=pump_interval),
    )
    click.echo(f"Serving folder summaries on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)
