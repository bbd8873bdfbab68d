"""Lineage event construction and wire-format conversion.

LineageEventBuilder turns entities and resolved context maps into
LineageEvent instances. It performs no I/O and never mutates its inputs.
to_wire_format() converts a LineageEvent into the JSON-ready dictionary
published on the out channel.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from asset_lineage.listener.types import (
    AssetLineageEventType,
    LineageEntity,
    LineageEvent,
)

if TYPE_CHECKING:
    from asset_lineage.listener.types import (
        ContextMap,
        EntityDetail,
        GraphContext,
        LineageVertex,
    )


def to_lineage_entity(entity: EntityDetail) -> LineageEntity:
    """Copy an entity into a normalized lineage snapshot.

    Classifications are dropped; properties are copied into a new dict.
    """
    return LineageEntity(
        guid=entity.guid,
        type_name=entity.type_name,
        status=entity.status,
        version=entity.version,
        created_by=entity.created_by,
        updated_by=entity.updated_by,
        create_time=entity.create_time,
        update_time=entity.update_time,
        properties=dict(entity.properties),
    )


class LineageEventBuilder:
    """Builder for the five kinds of LineageEvent.

    Attributes:
        producer: Producer identifier stamped on every event

    Example:
        >>> builder = LineageEventBuilder(producer="asset-lineage")
        >>> event = builder.delete_entity(entity)
        >>> event.event_type
        <AssetLineageEventType.DELETE_ENTITY_EVENT: 'DELETE_ENTITY_EVENT'>
    """

    def __init__(self, producer: str = "asset-lineage") -> None:
        self.producer = producer

    def update_entity(self, entity: EntityDetail) -> LineageEvent:
        """Create an UPDATE_ENTITY_EVENT carrying an entity snapshot."""
        return self._entity_event(AssetLineageEventType.UPDATE_ENTITY_EVENT, entity)

    def delete_entity(self, entity: EntityDetail) -> LineageEvent:
        """Create a DELETE_ENTITY_EVENT carrying an entity snapshot."""
        return self._entity_event(AssetLineageEventType.DELETE_ENTITY_EVENT, entity)

    def process_context(self, context: ContextMap) -> LineageEvent:
        """Create a PROCESS_CONTEXT_EVENT carrying a process context map."""
        return self._context_event(AssetLineageEventType.PROCESS_CONTEXT_EVENT, context)

    def technical_element_context(self, context: ContextMap) -> LineageEvent:
        """Create a TECHNICAL_ELEMENT_CONTEXT_EVENT carrying an asset or glossary map."""
        return self._context_event(AssetLineageEventType.TECHNICAL_ELEMENT_CONTEXT_EVENT, context)

    def classification_context(self, context: ContextMap) -> LineageEvent:
        """Create a CLASSIFICATION_CONTEXT_EVENT carrying a classification map."""
        return self._context_event(AssetLineageEventType.CLASSIFICATION_CONTEXT_EVENT, context)

    def _entity_event(
        self,
        event_type: AssetLineageEventType,
        entity: EntityDetail,
    ) -> LineageEvent:
        return LineageEvent(
            event_type=event_type,
            lineage_entity=to_lineage_entity(entity),
            producer=self.producer,
        )

    def _context_event(
        self,
        event_type: AssetLineageEventType,
        context: ContextMap,
    ) -> LineageEvent:
        return LineageEvent(
            event_type=event_type,
            asset_context=context,
            producer=self.producer,
        )


def _format_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _vertex_to_wire(vertex: LineageVertex) -> dict[str, Any]:
    return {
        "guid": vertex.guid,
        "typeDefName": vertex.type_name,
        "qualifiedName": vertex.qualified_name,
        "displayName": vertex.display_name,
    }


def _edge_sort_key(edge: GraphContext) -> tuple[str, str, str, str]:
    return (
        edge.relationship_type,
        edge.from_vertex.guid,
        edge.to_vertex.guid,
        edge.relationship_guid or "",
    )


def _entity_to_wire(entity: LineageEntity) -> dict[str, Any]:
    return {
        "guid": entity.guid,
        "typeDefName": entity.type_name,
        "status": entity.status,
        "version": entity.version,
        "createdBy": entity.created_by,
        "updatedBy": entity.updated_by,
        "createTime": _format_time(entity.create_time),
        "updateTime": _format_time(entity.update_time),
        "properties": entity.properties,
    }


def to_wire_format(event: LineageEvent) -> dict[str, Any]:
    """Convert a LineageEvent to its out-channel wire format.

    Edges within each relationship type are emitted in a stable order so
    identical context maps always serialize identically.

    Args:
        event: The LineageEvent to convert

    Returns:
        Dictionary with keys:
        - assetLineageEventType: Event type as string
        - eventTime: ISO 8601 timestamp
        - producer: Producer identifier
        - lineageEntity: Entity snapshot (entity events only)
        - assetContext: Relationship type to edge list (context events only)

    Example:
        >>> wire = to_wire_format(builder.delete_entity(entity))
        >>> wire["assetLineageEventType"]
        'DELETE_ENTITY_EVENT'
    """
    wire: dict[str, Any] = {
        "assetLineageEventType": event.event_type.value,
        "eventTime": _format_time(event.event_time),
        "producer": event.producer,
    }
    if event.lineage_entity is not None:
        wire["lineageEntity"] = _entity_to_wire(event.lineage_entity)
    if event.asset_context is not None:
        wire["assetContext"] = {
            relationship_type: [
                {
                    "relationshipType": edge.relationship_type,
                    "relationshipGuid": edge.relationship_guid,
                    "fromVertex": _vertex_to_wire(edge.from_vertex),
                    "toVertex": _vertex_to_wire(edge.to_vertex),
                }
                for edge in sorted(edges, key=_edge_sort_key)
            ]
            for relationship_type, edges in sorted(event.asset_context.items())
        }
    return wire


__all__ = ["LineageEventBuilder", "to_lineage_entity", "to_wire_format"]
