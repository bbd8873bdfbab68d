"""Exception hierarchy for asset-lineage.

All exceptions raised by the listener, its collaborators and its transports
inherit from AssetLineageError so callers can catch them with one clause.

Exception Hierarchy:
    AssetLineageError (base)
    ├── ConfigurationError        # Config file missing or invalid
    ├── ResolverError             # Context resolver failed (auth, backend)
    │   └── InvalidParameterError # Resolver rejected a malformed guid/type
    ├── DeliveryError             # Lineage event could not be handed off
    └── DispatchError             # Dispatch cycle failed on a bad parameter

Filtered notifications are not errors and never raise.

Example:
    >>> from asset_lineage.errors import InvalidParameterError
    >>> raise InvalidParameterError("guid", "not-a-guid")
    Traceback (most recent call last):
        ...
    InvalidParameterError: Invalid parameter guid: 'not-a-guid'
"""

from __future__ import annotations

from typing import Any


class AssetLineageError(Exception):
    """Base exception for all asset-lineage errors."""

    pass


class ConfigurationError(AssetLineageError):
    """Raised when listener configuration cannot be loaded or validated.

    Attributes:
        source: Where the configuration came from (usually a file path).
        errors: Validation error details, if any.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable description of the problem.
            source: Where the configuration came from.
            errors: Validation error details.
        """
        self.source = source
        self.errors = errors or []
        prefix = f"Configuration error in {source}" if source else "Configuration error"
        super().__init__(f"{prefix}: {message}")


class ResolverError(AssetLineageError):
    """Raised when a context resolver fails.

    Covers authorization denials and backend unavailability. The listener
    propagates these unchanged and performs no retry.

    Attributes:
        resolver: Name of the resolver that failed, if known.
    """

    def __init__(self, message: str, resolver: str | None = None) -> None:
        """Initialize ResolverError.

        Args:
            message: Description of the failure.
            resolver: Name of the resolver that failed.
        """
        self.resolver = resolver
        super().__init__(message)


class InvalidParameterError(ResolverError):
    """Raised by a resolver when an entity guid or type name is malformed.

    Attributes:
        parameter: Name of the offending parameter.
        value: The rejected value.
    """

    def __init__(self, parameter: str, value: Any, resolver: str | None = None) -> None:
        """Initialize InvalidParameterError.

        Args:
            parameter: Name of the offending parameter.
            value: The rejected value.
            resolver: Name of the resolver reporting the problem.
        """
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid parameter {parameter}: {value!r}", resolver=resolver)


class DeliveryError(AssetLineageError):
    """Raised when a built lineage event cannot be handed to the out channel.

    Attributes:
        event_type: The lineage event type that failed to deliver.
    """

    def __init__(self, event_type: str, message: str) -> None:
        """Initialize DeliveryError.

        Args:
            event_type: The lineage event type that failed to deliver.
            message: Description of the failure.
        """
        self.event_type = event_type
        super().__init__(f"Failed to deliver {event_type}: {message}")


class DispatchError(AssetLineageError):
    """Raised when a dispatch cycle fails because a resolver rejected its input.

    The wrapped InvalidParameterError is available as ``__cause__``.

    Attributes:
        event_type: Instance event type of the failed notification.
        entity_guid: Guid of the entity in the failed notification.
        originator: Metadata collection id of the notification source.
    """

    def __init__(
        self,
        message: str,
        event_type: str,
        entity_guid: str,
        originator: str,
    ) -> None:
        """Initialize DispatchError.

        Args:
            message: Description of the failure.
            event_type: Instance event type of the failed notification.
            entity_guid: Guid of the entity in the failed notification.
            originator: Metadata collection id of the notification source.
        """
        self.event_type = event_type
        self.entity_guid = entity_guid
        self.originator = originator
        super().__init__(
            f"{message} (event_type={event_type}, entity_guid={entity_guid}, "
            f"originator={originator})"
        )


__all__ = [
    "AssetLineageError",
    "ConfigurationError",
    "DeliveryError",
    "DispatchError",
    "InvalidParameterError",
    "ResolverError",
]
