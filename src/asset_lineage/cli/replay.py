"""Replay command: dispatch recorded notifications offline.

Reads a JSON Lines file of change notifications, dispatches each through a
listener built from the configuration, and resolves context from a static
context store instead of a live repository.

Example:
    $ asset-lineage replay --config asset-lineage.yaml --events events.jsonl \\
        --contexts contexts.yaml --print-events
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
import structlog
from pydantic import ValidationError

from asset_lineage.cli.utils import ExitCode, error, error_exit, warn
from asset_lineage.config import create_listener, load_config
from asset_lineage.errors import ConfigurationError
from asset_lineage.listener.executor import OriginatorOrderedExecutor
from asset_lineage.listener.static import StaticContextStore
from asset_lineage.listener.transport import InMemoryLineageTransport
from asset_lineage.listener.types import ChangeNotification
from asset_lineage.telemetry.logging import configure_logging

if TYPE_CHECKING:
    from concurrent.futures import Future

logger = structlog.get_logger(__name__)


def read_notifications(path: Path) -> list[ChangeNotification]:
    """Parse a JSON Lines file of change notifications.

    Blank lines are skipped.

    Raises:
        ConfigurationError: If a line is not a valid notification.
    """
    notifications: list[ChangeNotification] = []
    with path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                notifications.append(ChangeNotification.model_validate_json(line))
            except ValidationError as e:
                raise ConfigurationError(
                    f"line {line_number}: {e.error_count()} validation error(s)",
                    source=str(path),
                    errors=[dict(err) for err in e.errors()],
                ) from e
    return notifications


@click.command(
    name="replay",
    help="Dispatch a JSON Lines file of change notifications.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="Listener configuration YAML.",
)
@click.option(
    "--events",
    "events_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="JSON Lines file of change notifications.",
)
@click.option(
    "--contexts",
    "contexts_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Static context store YAML (empty contexts if omitted).",
)
@click.option(
    "--print-events",
    is_flag=True,
    default=False,
    help="Capture published events and print them to stdout instead of "
    "using the configured transport.",
)
def replay_command(
    config_path: Path,
    events_path: Path,
    contexts_path: Path | None,
    print_events: bool,
) -> None:
    """Replay recorded notifications through a configured listener."""
    for path in (config_path, events_path, contexts_path):
        if path is not None and not path.exists():
            error_exit("File not found", ExitCode.FILE_NOT_FOUND, path=str(path))

    try:
        config = load_config(config_path)
        if contexts_path is not None:
            store = StaticContextStore.from_yaml(contexts_path)
        else:
            warn("No context store given, contexts resolve empty")
            store = StaticContextStore()
        notifications = read_notifications(events_path)
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR)

    configure_logging(log_level=config.logging.level, json_output=config.logging.json_output)

    capture = InMemoryLineageTransport() if print_events else None
    listener = create_listener(
        config,
        process_resolver=store.process_resolver,
        asset_resolver=store.asset_resolver,
        glossary_resolver=store.glossary_resolver,
        classification_resolver=store.classification_resolver,
        transport=capture,
    )

    failures = 0
    try:
        with OriginatorOrderedExecutor(listener, max_workers=config.max_workers) as executor:
            futures: list[Future[None]] = [executor.submit(n) for n in notifications]
        for index, future in enumerate(futures, start=1):
            exc = future.exception()
            if exc is not None:
                failures += 1
                error(str(exc), notification=index)
    finally:
        listener.publisher.close()

    if capture is not None:
        for payload in capture.payloads:
            click.echo(payload)

    click.echo(
        f"Replayed {len(notifications)} notification(s): "
        f"{len(notifications) - failures} succeeded, {failures} failed",
        err=True,
    )
    if failures:
        raise SystemExit(ExitCode.DISPATCH_ERROR)


__all__ = ["read_notifications", "replay_command"]
