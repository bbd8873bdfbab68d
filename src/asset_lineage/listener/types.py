"""Core types for the asset lineage listener.

Inbound types describe the change notifications a cohort delivers (instance,
registry and type-definition events). Outbound types describe the lineage
events republished to the out channel. All of them are frozen, validated
Pydantic models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

PROCESS_TYPE_NAME = "Process"
ACTIVE_STATUS = "Active"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


class InstanceEventType(str, Enum):
    """Kinds of instance change notification a cohort member can emit.

    The three relationship kinds are recognised but carry no lineage
    handling yet.
    """

    NEW_ENTITY_EVENT = "NEW_ENTITY_EVENT"
    UPDATED_ENTITY_EVENT = "UPDATED_ENTITY_EVENT"
    DELETED_ENTITY_EVENT = "DELETED_ENTITY_EVENT"
    CLASSIFIED_ENTITY_EVENT = "CLASSIFIED_ENTITY_EVENT"
    RECLASSIFIED_ENTITY_EVENT = "RECLASSIFIED_ENTITY_EVENT"
    DECLASSIFIED_ENTITY_EVENT = "DECLASSIFIED_ENTITY_EVENT"
    NEW_RELATIONSHIP_EVENT = "NEW_RELATIONSHIP_EVENT"
    UPDATED_RELATIONSHIP_EVENT = "UPDATED_RELATIONSHIP_EVENT"
    DELETED_RELATIONSHIP_EVENT = "DELETED_RELATIONSHIP_EVENT"


class AssetLineageEventType(str, Enum):
    """Kinds of lineage event published to the out channel.

    Attributes:
        UPDATE_ENTITY_EVENT: Snapshot of an updated entity
        DELETE_ENTITY_EVENT: Snapshot of a deleted entity
        PROCESS_CONTEXT_EVENT: Context graph of a Process
        CLASSIFICATION_CONTEXT_EVENT: Context graph affected by a classification
        TECHNICAL_ELEMENT_CONTEXT_EVENT: Context graph of a technical asset
    """

    UPDATE_ENTITY_EVENT = "UPDATE_ENTITY_EVENT"
    DELETE_ENTITY_EVENT = "DELETE_ENTITY_EVENT"
    PROCESS_CONTEXT_EVENT = "PROCESS_CONTEXT_EVENT"
    CLASSIFICATION_CONTEXT_EVENT = "CLASSIFICATION_CONTEXT_EVENT"
    TECHNICAL_ELEMENT_CONTEXT_EVENT = "TECHNICAL_ELEMENT_CONTEXT_EVENT"

    @property
    def carries_entity(self) -> bool:
        """Whether events of this kind carry an entity snapshot."""
        return self in _ENTITY_EVENT_TYPES


_ENTITY_EVENT_TYPES = frozenset(
    {
        AssetLineageEventType.UPDATE_ENTITY_EVENT,
        AssetLineageEventType.DELETE_ENTITY_EVENT,
    }
)


class EventOriginator(BaseModel):
    """Identifies the repository that emitted a notification.

    Attributes:
        metadata_collection_id: Unique id of the source metadata collection
        server_name: Name of the source server
        server_type: Type of the source server
        organization_name: Organization owning the source server
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    metadata_collection_id: str = Field(..., min_length=1)
    server_name: str | None = None
    server_type: str | None = None
    organization_name: str | None = None


class EntityDetail(BaseModel):
    """Snapshot of a metadata element at the moment of a notification.

    Only guid, type_name and status are interpreted by the listener; the
    remaining fields are copied through to lineage entity snapshots.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    guid: str = Field(..., min_length=1, description="Stable unique identity")
    type_name: str = Field(..., min_length=1, description="Metadata type name")
    status: str | None = Field(default=None, description="Lifecycle status, e.g. 'Active'")
    version: int | None = None
    created_by: str | None = None
    updated_by: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None
    classifications: tuple[str, ...] = ()
    properties: dict[str, Any] = Field(default_factory=dict)


class ChangeNotification(BaseModel):
    """An instance event received from the cohort.

    originator and entity are optional here so that malformed notifications
    can still be represented and dropped by the intake filter.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    event_type: InstanceEventType
    originator: EventOriginator | None = None
    entity: EntityDetail | None = None


class RegistryEvent(BaseModel):
    """A cohort registry event. Carries no lineage meaning."""

    model_config = ConfigDict(frozen=True)

    event_type: str
    originator: EventOriginator | None = None


class TypeDefEvent(BaseModel):
    """A type-definition event. Carries no lineage meaning."""

    model_config = ConfigDict(frozen=True)

    event_type: str
    type_def_name: str | None = None
    originator: EventOriginator | None = None


class LineageEntity(BaseModel):
    """Normalized entity snapshot carried by entity lineage events."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    guid: str = Field(..., min_length=1)
    type_name: str = Field(..., min_length=1)
    status: str | None = None
    version: int | None = None
    created_by: str | None = None
    updated_by: str | None = None
    create_time: datetime | None = None
    update_time: datetime | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class LineageVertex(BaseModel):
    """A node of a lineage context graph."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    guid: str = Field(..., min_length=1)
    type_name: str = Field(..., min_length=1)
    qualified_name: str | None = None
    display_name: str | None = None


class GraphContext(BaseModel):
    """One edge of a lineage context graph.

    Frozen and hashable so edges can be collected in sets.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    relationship_type: str = Field(..., min_length=1)
    relationship_guid: str | None = None
    from_vertex: LineageVertex
    to_vertex: LineageVertex


ContextMap = dict[str, set[GraphContext]]
"""Relationship-type name to the edges of that type touching an entity."""


class AssetContext(BaseModel):
    """Neighbor graph of a technical asset as computed by an asset resolver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_entity: LineageVertex | None = None
    neighbors: ContextMap = Field(default_factory=dict)


class LineageEvent(BaseModel):
    """A lineage event published to the out channel.

    Exactly one payload is set: ``lineage_entity`` for UPDATE/DELETE entity
    events, ``asset_context`` for the three context events.

    Attributes:
        event_type: Kind of lineage event
        lineage_entity: Entity snapshot (entity events only)
        asset_context: Context graph (context events only)
        event_time: Timestamp the event was built
        producer: Producer identifier
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    event_type: AssetLineageEventType
    lineage_entity: LineageEntity | None = None
    asset_context: ContextMap | None = None
    event_time: datetime = Field(default_factory=_utc_now)
    producer: str = Field(default="asset-lineage", min_length=1)

    @model_validator(mode="after")
    def _check_payload_matches_type(self) -> LineageEvent:
        if self.event_type.carries_entity:
            if self.lineage_entity is None or self.asset_context is not None:
                raise ValueError(
                    f"{self.event_type.value} requires lineage_entity and no asset_context"
                )
        elif self.asset_context is None or self.lineage_entity is not None:
            raise ValueError(
                f"{self.event_type.value} requires asset_context and no lineage_entity"
            )
        return self


__all__ = [
    "ACTIVE_STATUS",
    "PROCESS_TYPE_NAME",
    "AssetContext",
    "AssetLineageEventType",
    "ChangeNotification",
    "ContextMap",
    "EntityDetail",
    "EventOriginator",
    "GraphContext",
    "InstanceEventType",
    "LineageEntity",
    "LineageEvent",
    "LineageVertex",
    "RegistryEvent",
    "TypeDefEvent",
]
