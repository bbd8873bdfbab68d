"""Listener configuration models (Pydantic v2) and factories.

Configuration is read from a YAML file:

    server_name: lineage-server
    server_user_id: lineage-user
    lineage_types: [Process, RelationalTable, RelationalColumn]   # optional
    max_workers: 4
    transport:
      type: http            # noop | console | memory | http
      url: https://lineage.example.com/api/v1/events
      timeout: 5.0
      api_key: ...          # optional
    logging:
      level: INFO
      json_output: true

Example:
    >>> config = load_config(Path("asset-lineage.yaml"))
    >>> listener = create_listener(config, *store_resolvers)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator

from asset_lineage.errors import ConfigurationError
from asset_lineage.listener.builder import LineageEventBuilder
from asset_lineage.listener.dispatcher import AssetLineageListener
from asset_lineage.listener.executor import DEFAULT_MAX_WORKERS
from asset_lineage.listener.publisher import LineagePublisher
from asset_lineage.listener.resolution import ContextResolver
from asset_lineage.listener.transport import (
    ConsoleLineageTransport,
    HttpLineageTransport,
    InMemoryLineageTransport,
    NoOpLineageTransport,
    validate_endpoint_url,
)
from asset_lineage.listener.validator import DEFAULT_LINEAGE_TYPES, TypeNameValidator

if TYPE_CHECKING:
    from typing_extensions import Self

    from asset_lineage.listener.protocols import (
        AssetContextResolver,
        ClassificationContextResolver,
        GlossaryContextResolver,
        LineageTransport,
        ProcessContextResolver,
    )


class TransportConfig(BaseModel):
    """Out-channel transport selection.

    Attributes:
        type: Transport kind
        url: Endpoint URL (required for http)
        timeout: Request timeout in seconds (http only)
        api_key: Bearer credential (http only)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["noop", "console", "memory", "http"] = Field(
        default="console",
        description="Transport kind",
    )
    url: str | None = Field(default=None, description="Endpoint URL for http transport")
    timeout: float = Field(default=5.0, gt=0, le=300, description="Request timeout (s)")
    api_key: SecretStr | None = Field(default=None, description="Bearer credential")

    @model_validator(mode="after")
    def _check_http_url(self) -> Self:
        if self.type != "http":
            return self
        if not self.url:
            raise ValueError("transport.url is required when transport.type is 'http'")
        validate_endpoint_url(self.url)
        return self


class LoggingConfig(BaseModel):
    """Structured logging options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True


class ListenerConfig(BaseModel):
    """Top-level listener configuration.

    Attributes:
        server_name: Name of this server, passed to classification resolvers
        server_user_id: Identity used for all resolver calls
        lineage_types: Entity types whose notifications are dispatched
        max_workers: Originators dispatched in parallel
        producer: Producer identifier stamped on lineage events
        transport: Out-channel transport
        logging: Logging options
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    server_name: str = Field(..., min_length=1, max_length=128)
    server_user_id: str = Field(..., min_length=1, max_length=128)
    lineage_types: frozenset[str] = Field(default=DEFAULT_LINEAGE_TYPES)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1, le=64)
    producer: str = Field(default="asset-lineage", min_length=1)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def parse_config(data: dict[str, Any], source: str | None = None) -> ListenerConfig:
    """Validate a configuration document.

    Raises:
        ConfigurationError: If validation fails.
    """
    try:
        return ListenerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            ),
            source=source,
            errors=[dict(err) for err in e.errors()],
        ) from e


def load_config(path: Path) -> ListenerConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read file: {e}", source=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("top level must be a mapping", source=str(path))
    return parse_config(data, source=str(path))


def create_transport(config: TransportConfig) -> LineageTransport:
    """Create the transport selected by the configuration."""
    if config.type == "http":
        assert config.url is not None  # enforced by TransportConfig
        api_key = config.api_key.get_secret_value() if config.api_key else None
        return HttpLineageTransport(url=config.url, timeout=config.timeout, api_key=api_key)
    if config.type == "console":
        return ConsoleLineageTransport()
    if config.type == "memory":
        return InMemoryLineageTransport()
    return NoOpLineageTransport()


def create_listener(
    config: ListenerConfig,
    process_resolver: ProcessContextResolver,
    asset_resolver: AssetContextResolver,
    glossary_resolver: GlossaryContextResolver,
    classification_resolver: ClassificationContextResolver,
    transport: LineageTransport | None = None,
) -> AssetLineageListener:
    """Wire a listener from configuration and resolver collaborators.

    Args:
        config: Validated listener configuration.
        process_resolver: Process context resolver.
        asset_resolver: Asset context resolver.
        glossary_resolver: Glossary context resolver.
        classification_resolver: Classification context resolver.
        transport: Transport override; built from ``config.transport`` if None.

    Returns:
        Configured AssetLineageListener.
    """
    validator = TypeNameValidator(config.lineage_types)
    context_resolver = ContextResolver(
        server_name=config.server_name,
        user_id=config.server_user_id,
        validator=validator,
        process_resolver=process_resolver,
        asset_resolver=asset_resolver,
        glossary_resolver=glossary_resolver,
        classification_resolver=classification_resolver,
    )
    publisher = LineagePublisher(
        transport if transport is not None else create_transport(config.transport)
    )
    return AssetLineageListener(
        validator=validator,
        context_resolver=context_resolver,
        publisher=publisher,
        event_builder=LineageEventBuilder(producer=config.producer),
    )


__all__ = [
    "ListenerConfig",
    "LoggingConfig",
    "TransportConfig",
    "create_listener",
    "create_transport",
    "load_config",
    "parse_config",
]
