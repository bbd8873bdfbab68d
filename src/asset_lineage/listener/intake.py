"""Intake filter for change notifications.

Decides whether a notification proceeds to classification. Rejected
notifications are dropped silently: a debug log entry is the only side
effect, nothing is raised and nothing is published.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from asset_lineage.listener.protocols import LineageValidator
    from asset_lineage.listener.types import ChangeNotification

logger = structlog.get_logger(__name__)


def accept_notification(
    notification: ChangeNotification | None,
    validator: LineageValidator,
) -> bool:
    """Return True if the notification should be dispatched.

    A notification is dropped when it is missing, has no originator, has no
    entity, or its entity type is not lineage-relevant.

    Args:
        notification: The inbound notification, possibly None.
        validator: Lineage relevance check for entity type names.

    Returns:
        True to proceed, False to drop.
    """
    if notification is None:
        logger.debug("notification_filtered", reason="null_notification")
        return False

    if notification.originator is None:
        logger.debug(
            "notification_filtered",
            reason="missing_originator",
            event_type=notification.event_type.value,
        )
        return False

    entity = notification.entity
    if entity is None:
        logger.debug(
            "notification_filtered",
            reason="missing_entity",
            event_type=notification.event_type.value,
            originator=notification.originator.metadata_collection_id,
        )
        return False

    if not validator.is_lineage_relevant(entity.type_name):
        logger.debug(
            "notification_filtered",
            reason="not_lineage_relevant",
            event_type=notification.event_type.value,
            originator=notification.originator.metadata_collection_id,
            entity_guid=entity.guid,
            type_name=entity.type_name,
        )
        return False

    return True


__all__ = ["accept_notification"]
