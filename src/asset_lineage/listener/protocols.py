"""Protocols for the listener's collaborators.

The listener never computes context graphs or delivers messages itself.
These protocols define the resolvers, validator and transport it is wired
with, so each can be replaced by a real backend or a test double.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from asset_lineage.listener.types import AssetContext, ContextMap, EntityDetail


@runtime_checkable
class LineageValidator(Protocol):
    """Decides whether an entity type takes part in lineage."""

    def is_lineage_relevant(self, type_name: str) -> bool:
        """Return True if entities of ``type_name`` are lineage-relevant."""
        ...


@runtime_checkable
class ProcessContextResolver(Protocol):
    """Computes the context graph of a Process."""

    def resolve(self, user_id: str, entity_guid: str) -> ContextMap:
        """Return the process context keyed by relationship type.

        Raises:
            ResolverError: If the context cannot be computed.
        """
        ...


@runtime_checkable
class AssetContextResolver(Protocol):
    """Computes the neighbor graph of a technical asset."""

    def resolve(self, user_id: str, entity_guid: str, type_name: str) -> AssetContext:
        """Return the asset context of an entity.

        Raises:
            InvalidParameterError: If the guid or type name is malformed.
            ResolverError: For any other failure.
        """
        ...


@runtime_checkable
class GlossaryContextResolver(Protocol):
    """Computes glossary-term context for a technical asset."""

    def resolve(
        self,
        entity_guid: str,
        user_id: str,
        entity: EntityDetail,
        asset_context: AssetContext,
        validator: LineageValidator,
    ) -> ContextMap:
        """Return the glossary context, or an empty map if there is none."""
        ...


@runtime_checkable
class ClassificationContextResolver(Protocol):
    """Computes the lineage context affected by a classification change."""

    def resolve(self, server_name: str, user_id: str, entity: EntityDetail) -> ContextMap:
        """Return the classification context, or an empty map if there is none."""
        ...


@runtime_checkable
class LineageTransport(Protocol):
    """Delivers serialized lineage events to the out channel.

    Example:
        >>> class StdoutTransport:
        ...     def send(self, payload: str) -> None:
        ...         print(payload)
        ...     def close(self) -> None:
        ...         pass
    """

    def send(self, payload: str) -> None:
        """Hand a JSON payload to the out channel.

        Must raise if the payload could not be handed off.
        """
        ...

    def close(self) -> None:
        """Close the transport and clean up resources."""
        ...


__all__ = [
    "AssetContextResolver",
    "ClassificationContextResolver",
    "GlossaryContextResolver",
    "LineageTransport",
    "LineageValidator",
    "ProcessContextResolver",
]
