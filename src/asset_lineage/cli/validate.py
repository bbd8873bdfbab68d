"""Validate command: check a listener configuration file.

Example:
    $ asset-lineage validate-config --config asset-lineage.yaml
"""

from __future__ import annotations

from pathlib import Path

import click

from asset_lineage.cli.utils import ExitCode, error_exit
from asset_lineage.config import load_config
from asset_lineage.errors import ConfigurationError


@click.command(
    name="validate-config",
    help="Validate a listener configuration file.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="Listener configuration YAML.",
)
def validate_config_command(config_path: Path) -> None:
    """Load the configuration and print a short summary."""
    if not config_path.exists():
        error_exit("File not found", ExitCode.FILE_NOT_FOUND, path=str(config_path))

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR)

    click.echo(f"Configuration valid: {config_path}")
    click.echo(f"  server: {config.server_name} (user {config.server_user_id})")
    click.echo(f"  transport: {config.transport.type}")
    click.echo(f"  lineage types: {len(config.lineage_types)}")


__all__ = ["validate_config_command"]
