"""asset-lineage: lineage event dispatch for metadata repository cohorts.

This package provides:
- AssetLineageListener: Consumes cohort change notifications and publishes
  lineage events
- Resolver and transport protocols for plugging in context computation and
  out-channel delivery
- ListenerConfig: YAML-backed configuration with create_listener() factory
- Errors: AssetLineageError hierarchy

Example:
    >>> from asset_lineage import load_config, create_listener
    >>> config = load_config(Path("asset-lineage.yaml"))
    >>> listener = create_listener(config, process, asset, glossary, classification)
    >>> listener.process_instance_event(notification)

See Also:
    - asset_lineage.listener: Listener pipeline stages
    - asset_lineage.telemetry: structlog and OpenTelemetry integration
    - asset_lineage.cli: Command-line replay tooling
"""

from __future__ import annotations

__version__ = "0.1.0"

from asset_lineage.config import (
    ListenerConfig,
    LoggingConfig,
    TransportConfig,
    create_listener,
    create_transport,
    load_config,
)
from asset_lineage.errors import (
    AssetLineageError,
    ConfigurationError,
    DeliveryError,
    DispatchError,
    InvalidParameterError,
    ResolverError,
)
from asset_lineage.listener import (
    AssetLineageListener,
    ChangeNotification,
    EntityDetail,
    EventOriginator,
    InstanceEventType,
    LineageEvent,
)

__all__ = [
    "__version__",
    "AssetLineageError",
    "AssetLineageListener",
    "ChangeNotification",
    "ConfigurationError",
    "DeliveryError",
    "DispatchError",
    "EntityDetail",
    "EventOriginator",
    "InstanceEventType",
    "InvalidParameterError",
    "LineageEvent",
    "ListenerConfig",
    "LoggingConfig",
    "ResolverError",
    "TransportConfig",
    "create_listener",
    "create_transport",
    "load_config",
]
