"""Main entry point for the asset-lineage CLI.

Commands:
    asset-lineage validate-config: Check a listener configuration file
    asset-lineage replay: Dispatch recorded notifications offline

Example:
    $ asset-lineage --help
    $ asset-lineage replay --config asset-lineage.yaml --events events.jsonl
"""

from __future__ import annotations

import sys
from importlib.metadata import version as get_version

import click

from asset_lineage.cli.replay import replay_command
from asset_lineage.cli.validate import validate_config_command


def _get_version() -> str:
    """Get the asset-lineage package version.

    Returns:
        Version string from package metadata, or 'unknown' if not installed.
    """
    try:
        return get_version("asset-lineage")
    except Exception:
        return "unknown"


@click.group(
    name="asset-lineage",
    help="asset-lineage - Lineage event dispatch for metadata repository cohorts.",
    epilog="Use 'asset-lineage <command> --help' for command-specific help.",
    context_settings={
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(
    version=_get_version(),
    prog_name="asset-lineage",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Root command group for the asset-lineage CLI."""
    ctx.ensure_object(dict)


cli.add_command(validate_config_command)
cli.add_command(replay_command)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the asset-lineage CLI.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
