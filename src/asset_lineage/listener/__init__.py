"""Asset lineage listener for cohort change notifications.

The listener filters instance notifications, classifies them into routes,
resolves context graphs through pluggable resolvers and publishes one
normalized lineage event per relevant notification.
"""

from asset_lineage.listener.builder import LineageEventBuilder, to_lineage_entity, to_wire_format
from asset_lineage.listener.dispatcher import AssetLineageListener
from asset_lineage.listener.executor import OriginatorOrderedExecutor
from asset_lineage.listener.intake import accept_notification
from asset_lineage.listener.protocols import (
    AssetContextResolver,
    ClassificationContextResolver,
    GlossaryContextResolver,
    LineageTransport,
    LineageValidator,
    ProcessContextResolver,
)
from asset_lineage.listener.publisher import LineagePublisher
from asset_lineage.listener.resolution import ContextResolver, glossary_or_asset_context
from asset_lineage.listener.routing import Route, classify
from asset_lineage.listener.static import StaticContextStore
from asset_lineage.listener.transport import (
    ConsoleLineageTransport,
    HttpLineageTransport,
    InMemoryLineageTransport,
    NoOpLineageTransport,
)
from asset_lineage.listener.types import (
    AssetContext,
    AssetLineageEventType,
    ChangeNotification,
    ContextMap,
    EntityDetail,
    EventOriginator,
    GraphContext,
    InstanceEventType,
    LineageEntity,
    LineageEvent,
    LineageVertex,
    RegistryEvent,
    TypeDefEvent,
)
from asset_lineage.listener.validator import DEFAULT_LINEAGE_TYPES, TypeNameValidator

__all__ = [
    "DEFAULT_LINEAGE_TYPES",
    "AssetContext",
    "AssetContextResolver",
    "AssetLineageEventType",
    "AssetLineageListener",
    "ChangeNotification",
    "ClassificationContextResolver",
    "ConsoleLineageTransport",
    "ContextMap",
    "ContextResolver",
    "EntityDetail",
    "EventOriginator",
    "GlossaryContextResolver",
    "GraphContext",
    "HttpLineageTransport",
    "InMemoryLineageTransport",
    "InstanceEventType",
    "LineageEntity",
    "LineageEvent",
    "LineageEventBuilder",
    "LineagePublisher",
    "LineageTransport",
    "LineageValidator",
    "LineageVertex",
    "NoOpLineageTransport",
    "OriginatorOrderedExecutor",
    "ProcessContextResolver",
    "RegistryEvent",
    "Route",
    "StaticContextStore",
    "TypeDefEvent",
    "TypeNameValidator",
    "accept_notification",
    "classify",
    "glossary_or_asset_context",
    "to_lineage_entity",
    "to_wire_format",
]
