"""Command-line interface for asset-lineage."""

from asset_lineage.cli.main import cli, main

__all__ = ["cli", "main"]
