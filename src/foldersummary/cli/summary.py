"""Summary command: print one folder summary."""

from __future__ import annotations

import json

import click

from foldersummary.cli.config import get_config_file, get_state_file, resolve_path


@click.command()
@click.argument("folder")
@click.option("--config", "config_path", help="Folder configuration JSON file.")
@click.option("--state", "state_path", help="Model state JSON file.")
@click.option("--completion", is_flag=True, help="Also print completion per remote device.")
def summary(
    folder: str,
    config_path: str | None,
    state_path: str | None,
    completion: bool,
) -> None:
    """Print the summary of FOLDER as JSON."""
    from foldersummary.core.config import load_configuration
    from foldersummary.core.types import same_device
    from foldersummary.events.bus import EventLogger
    from foldersummary.model.memory import load_model
    from foldersummary.model.types import ModelError
    from foldersummary.summary.publisher import FolderUnavailableError, SummaryPublisher

    config_file = resolve_path(config_path, get_config_file())
    state_file = resolve_path(state_path, get_state_file())

    for path in (config_file, state_file):
        if not path.exists():
            click.echo(f"Error: File not found: {path}", err=True)
            raise SystemExit(1)

    config = load_configuration(config_file)
    model = load_model(state_file)
    publisher = SummaryPublisher(config, model, EventLogger())

    try:
        output: dict[str, object] = {"folder": folder, "summary": publisher.summary(folder)}
    except FolderUnavailableError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    if completion:
        completions = []
        fcfg = config.folder(folder)
        for dev in fcfg.devices if fcfg else ():
            if same_device(dev.device_id, config.my_id):
                continue
            try:
                completions.append(publisher.completion(folder, dev.device_id))
            except ModelError as e:
                click.echo(f"Warning: no completion for {dev.device_id}: {e}", err=True)
        output["completion"] = completions

    click.echo(json.dumps(output, indent=2))
