"""Classification of accepted notifications into handling routes.

Every InstanceEventType has exactly one entry in the routing table. Within
an event type, the entity's type name and status refine the route.

Routes:
    NEW on a Process                    -> PROCESS_CONTEXT
    NEW on anything else                -> TECHNICAL_ELEMENT_CONTEXT
    UPDATED on an Active Process        -> PROCESS_CONTEXT
    UPDATED on anything else            -> PLAIN_UPDATE
    DELETED                             -> PLAIN_DELETE
    CLASSIFIED                          -> CLASSIFICATION_CONTEXT
    RECLASSIFIED, DECLASSIFIED          -> NO_OP
    NEW/UPDATED/DELETED relationship    -> NO_OP

A Process only contributes to lineage once it is running, so an update that
leaves it Active is handled like a creation. There is no memory of earlier
updates: every such update re-resolves the full process context.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from asset_lineage.listener.types import (
    ACTIVE_STATUS,
    PROCESS_TYPE_NAME,
    InstanceEventType,
)


class Route(str, Enum):
    """Handling route for an accepted notification."""

    PROCESS_CONTEXT = "PROCESS_CONTEXT"
    TECHNICAL_ELEMENT_CONTEXT = "TECHNICAL_ELEMENT_CONTEXT"
    PLAIN_UPDATE = "PLAIN_UPDATE"
    PLAIN_DELETE = "PLAIN_DELETE"
    CLASSIFICATION_CONTEXT = "CLASSIFICATION_CONTEXT"
    NO_OP = "NO_OP"


RouteRule = Callable[[str, str | None], Route]


def _route_new(type_name: str, status: str | None) -> Route:  # noqa: ARG001
    if type_name == PROCESS_TYPE_NAME:
        return Route.PROCESS_CONTEXT
    return Route.TECHNICAL_ELEMENT_CONTEXT


def _route_updated(type_name: str, status: str | None) -> Route:
    if type_name == PROCESS_TYPE_NAME and status == ACTIVE_STATUS:
        return Route.PROCESS_CONTEXT
    return Route.PLAIN_UPDATE


def _always(route: Route) -> RouteRule:
    def rule(type_name: str, status: str | None) -> Route:  # noqa: ARG001
        return route

    return rule


ROUTING_TABLE: dict[InstanceEventType, RouteRule] = {
    InstanceEventType.NEW_ENTITY_EVENT: _route_new,
    InstanceEventType.UPDATED_ENTITY_EVENT: _route_updated,
    InstanceEventType.DELETED_ENTITY_EVENT: _always(Route.PLAIN_DELETE),
    InstanceEventType.CLASSIFIED_ENTITY_EVENT: _always(Route.CLASSIFICATION_CONTEXT),
    InstanceEventType.RECLASSIFIED_ENTITY_EVENT: _always(Route.NO_OP),
    InstanceEventType.DECLASSIFIED_ENTITY_EVENT: _always(Route.NO_OP),
    InstanceEventType.NEW_RELATIONSHIP_EVENT: _always(Route.NO_OP),
    InstanceEventType.UPDATED_RELATIONSHIP_EVENT: _always(Route.NO_OP),
    InstanceEventType.DELETED_RELATIONSHIP_EVENT: _always(Route.NO_OP),
}


def classify(event_type: InstanceEventType, type_name: str, status: str | None) -> Route:
    """Map an accepted notification to its handling route.

    Args:
        event_type: Instance event type of the notification.
        type_name: Type name of the notification's entity.
        status: Lifecycle status of the notification's entity.

    Returns:
        The route for this notification.

    Raises:
        KeyError: If the event type has no routing rule.

    Example:
        >>> classify(InstanceEventType.UPDATED_ENTITY_EVENT, "Process", "Active")
        <Route.PROCESS_CONTEXT: 'PROCESS_CONTEXT'>
    """
    return ROUTING_TABLE[event_type](type_name, status)


__all__ = ["ROUTING_TABLE", "Route", "classify"]
