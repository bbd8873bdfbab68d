"""Publisher adapter between the listener and its out-channel transport."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

from asset_lineage.errors import DeliveryError
from asset_lineage.listener.builder import to_wire_format

if TYPE_CHECKING:
    from asset_lineage.listener.protocols import LineageTransport
    from asset_lineage.listener.types import LineageEvent

logger = structlog.get_logger(__name__)


class LineagePublisher:
    """Serializes lineage events and hands them to a transport.

    This is the single place where delivery failures surface. The publisher
    does not wait for downstream consumers, but a failure to serialize or
    hand off an event is raised as DeliveryError and never swallowed.

    Attributes:
        transport: The transport used for delivery.

    Example:
        >>> publisher = LineagePublisher(ConsoleLineageTransport())
        >>> publisher.publish(event)
    """

    def __init__(self, transport: LineageTransport) -> None:
        self.transport = transport

    def publish(self, event: LineageEvent) -> None:
        """Serialize and deliver one lineage event.

        Args:
            event: The event to deliver.

        Raises:
            DeliveryError: If the event cannot be serialized or delivered.
        """
        event_type = event.event_type.value
        try:
            payload = json.dumps(to_wire_format(event))
        except (TypeError, ValueError) as e:
            raise DeliveryError(event_type, f"serialization failed: {e}") from e

        try:
            self.transport.send(payload)
        except Exception as e:
            raise DeliveryError(event_type, str(e) or type(e).__name__) from e

        logger.debug("lineage_event_published", event_type=event_type)

    def close(self) -> None:
        """Close the underlying transport and release resources."""
        self.transport.close()


__all__ = ["LineagePublisher"]
