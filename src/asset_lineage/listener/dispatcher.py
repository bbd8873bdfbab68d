"""Asset lineage listener: the entry point for cohort change notifications.

Each instance notification is processed to completion in one call:
intake filter, route classification, context resolution (for context
routes), event building and publishing. The listener holds no mutable
state between calls, so one instance may serve many threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from asset_lineage.errors import DispatchError, InvalidParameterError
from asset_lineage.listener.builder import LineageEventBuilder
from asset_lineage.listener.intake import accept_notification
from asset_lineage.listener.routing import Route, classify
from asset_lineage.telemetry.tracing import create_span

if TYPE_CHECKING:
    from asset_lineage.listener.protocols import LineageValidator
    from asset_lineage.listener.publisher import LineagePublisher
    from asset_lineage.listener.resolution import ContextResolver
    from asset_lineage.listener.types import (
        ChangeNotification,
        EntityDetail,
        LineageEvent,
        RegistryEvent,
        TypeDefEvent,
    )

logger = structlog.get_logger(__name__)


class AssetLineageListener:
    """Turns cohort change notifications into published lineage events.

    Attributes:
        validator: Lineage relevance check used by the intake filter.
        context_resolver: Resolves context maps for context routes.
        publisher: Delivers built events to the out channel.
        event_builder: Builds lineage events.

    Example:
        >>> listener = AssetLineageListener(validator, context_resolver, publisher)
        >>> listener.process_instance_event(notification)
    """

    def __init__(
        self,
        validator: LineageValidator,
        context_resolver: ContextResolver,
        publisher: LineagePublisher,
        event_builder: LineageEventBuilder | None = None,
    ) -> None:
        self.validator = validator
        self.context_resolver = context_resolver
        self.publisher = publisher
        self.event_builder = event_builder if event_builder is not None else LineageEventBuilder()

    def process_registry_event(self, event: RegistryEvent) -> None:
        """Acknowledge a registry event. Registry events carry no lineage."""
        logger.debug("ignoring_registry_event", event_type=event.event_type)

    def process_type_def_event(self, event: TypeDefEvent) -> None:
        """Acknowledge a type-definition event. Type events carry no lineage."""
        logger.debug(
            "ignoring_type_def_event",
            event_type=event.event_type,
            type_def_name=event.type_def_name,
        )

    def process_instance_event(self, notification: ChangeNotification | None) -> None:
        """Dispatch one instance change notification.

        Filtered notifications return without publishing. RECLASSIFIED,
        DECLASSIFIED and relationship notifications are acknowledged without
        publishing. Everything else publishes at most one lineage event.

        Args:
            notification: The inbound notification, possibly None.

        Raises:
            DispatchError: If a resolver rejected the entity's guid or type.
            ResolverError: If a resolver failed for any other reason.
            DeliveryError: If the built event could not be published.
        """
        if not accept_notification(notification, self.validator):
            return
        # accept_notification guarantees both are present
        assert notification is not None
        assert notification.originator is not None
        assert notification.entity is not None

        entity = notification.entity
        originator = notification.originator.metadata_collection_id
        event_type = notification.event_type
        route = classify(event_type, entity.type_name, entity.status)

        log = logger.bind(
            originator=originator,
            entity_guid=entity.guid,
            event_type=event_type.value,
            route=route.value,
        )
        log.debug("processing_instance_event", type_name=entity.type_name)

        with create_span(
            "asset_lineage.dispatch",
            {
                "asset_lineage.originator": originator,
                "asset_lineage.entity_guid": entity.guid,
                "asset_lineage.type_name": entity.type_name,
                "asset_lineage.event_type": event_type.value,
                "asset_lineage.route": route.value,
            },
        ):
            try:
                event = self._build_event(route, entity)
                if event is None:
                    return
                self.publisher.publish(event)
            except InvalidParameterError as e:
                log.error("invalid_parameter", parameter=e.parameter, error=str(e))
                raise DispatchError(
                    f"Resolver rejected entity: {e}",
                    event_type=event_type.value,
                    entity_guid=entity.guid,
                    originator=originator,
                ) from e
            except Exception as e:
                log.error("dispatch_failed", error=str(e), error_type=type(e).__name__)
                raise

        log.info("lineage_event_dispatched", lineage_event_type=event.event_type.value)

    on_change_notification = process_instance_event

    def _build_event(self, route: Route, entity: EntityDetail) -> LineageEvent | None:
        """Build the lineage event for a route, or None if nothing is published."""
        builder = self.event_builder

        if route is Route.NO_OP:
            logger.debug("no_op_route", entity_guid=entity.guid)
            return None
        if route is Route.PLAIN_UPDATE:
            return builder.update_entity(entity)
        if route is Route.PLAIN_DELETE:
            return builder.delete_entity(entity)

        context = self.context_resolver.resolve(route, entity)
        if route is Route.PROCESS_CONTEXT:
            return builder.process_context(context)
        if route is Route.TECHNICAL_ELEMENT_CONTEXT:
            return builder.technical_element_context(context)
        if route is Route.CLASSIFICATION_CONTEXT:
            if not context:
                logger.debug("empty_classification_context", entity_guid=entity.guid)
                return None
            return builder.classification_context(context)
        raise ValueError(f"Unhandled route: {route.value}")


__all__ = ["AssetLineageListener"]
