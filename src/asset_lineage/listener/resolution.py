"""Context resolution for the three context routes.

ContextResolver fans a notification out to the resolver collaborators its
route needs and returns the context map to publish. Resolver failures are
not caught here; they propagate to the listener.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from asset_lineage.listener.routing import Route

if TYPE_CHECKING:
    from asset_lineage.listener.protocols import (
        AssetContextResolver,
        ClassificationContextResolver,
        GlossaryContextResolver,
        LineageValidator,
        ProcessContextResolver,
    )
    from asset_lineage.listener.types import AssetContext, ContextMap, EntityDetail

logger = structlog.get_logger(__name__)


def glossary_or_asset_context(
    glossary_context: ContextMap,
    asset_context: AssetContext,
) -> ContextMap:
    """Pick the context published for a technical element.

    Glossary context replaces the asset's structural neighbors whenever it
    is non-empty. The two are never merged.

    Args:
        glossary_context: Output of the glossary resolver.
        asset_context: Output of the asset resolver.

    Returns:
        ``glossary_context`` if non-empty, else ``asset_context.neighbors``.
    """
    if glossary_context:
        return glossary_context
    return asset_context.neighbors


class ContextResolver:
    """Resolves the context map for a context route.

    Attributes:
        server_name: Name of this server, passed to the classification resolver.
        user_id: Identity used for all resolver calls.

    Example:
        >>> resolver = ContextResolver(
        ...     server_name="lineage-server",
        ...     user_id="lineage-user",
        ...     validator=TypeNameValidator(),
        ...     process_resolver=process_resolver,
        ...     asset_resolver=asset_resolver,
        ...     glossary_resolver=glossary_resolver,
        ...     classification_resolver=classification_resolver,
        ... )
        >>> context = resolver.resolve(Route.PROCESS_CONTEXT, entity)
    """

    def __init__(
        self,
        server_name: str,
        user_id: str,
        validator: LineageValidator,
        process_resolver: ProcessContextResolver,
        asset_resolver: AssetContextResolver,
        glossary_resolver: GlossaryContextResolver,
        classification_resolver: ClassificationContextResolver,
    ) -> None:
        self.server_name = server_name
        self.user_id = user_id
        self._validator = validator
        self._process_resolver = process_resolver
        self._asset_resolver = asset_resolver
        self._glossary_resolver = glossary_resolver
        self._classification_resolver = classification_resolver

    def resolve(self, route: Route, entity: EntityDetail) -> ContextMap:
        """Resolve the context map for ``entity`` along ``route``.

        Args:
            route: One of the three context routes.
            entity: Entity of the notification being dispatched.

        Returns:
            The context map to publish. May be empty for classification.

        Raises:
            ValueError: If ``route`` is not a context route.
            ResolverError: If a resolver fails.
        """
        if route is Route.PROCESS_CONTEXT:
            return self.process_context(entity)
        if route is Route.TECHNICAL_ELEMENT_CONTEXT:
            return self.technical_element_context(entity)
        if route is Route.CLASSIFICATION_CONTEXT:
            return self.classification_context(entity)
        raise ValueError(f"Route {route.value} does not resolve context")

    def process_context(self, entity: EntityDetail) -> ContextMap:
        """Resolve the context graph of a Process."""
        logger.debug("resolving_process_context", entity_guid=entity.guid)
        return self._process_resolver.resolve(self.user_id, entity.guid)

    def technical_element_context(self, entity: EntityDetail) -> ContextMap:
        """Resolve the context graph of a technical element.

        Raises:
            InvalidParameterError: If the asset resolver rejects the entity.
        """
        logger.debug(
            "resolving_asset_context",
            entity_guid=entity.guid,
            type_name=entity.type_name,
        )
        asset_context = self._asset_resolver.resolve(self.user_id, entity.guid, entity.type_name)
        glossary_context = self._glossary_resolver.resolve(
            entity.guid,
            self.user_id,
            entity,
            asset_context,
            self._validator,
        )
        return glossary_or_asset_context(glossary_context, asset_context)

    def classification_context(self, entity: EntityDetail) -> ContextMap:
        """Resolve the lineage context affected by a classification change."""
        logger.debug("resolving_classification_context", entity_guid=entity.guid)
        return self._classification_resolver.resolve(self.server_name, self.user_id, entity)


__all__ = ["ContextResolver", "glossary_or_asset_context"]
