"""Shared pytest configuration and fixtures for asset-lineage tests.

NOTE: Do NOT add __init__.py to test directories - pytest uses importlib mode
which can cause namespace collisions with __init__.py files.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest
import structlog

from asset_lineage.listener.builder import LineageEventBuilder
from asset_lineage.listener.dispatcher import AssetLineageListener
from asset_lineage.listener.publisher import LineagePublisher
from asset_lineage.listener.resolution import ContextResolver
from asset_lineage.listener.transport import InMemoryLineageTransport
from asset_lineage.listener.types import (
    AssetContext,
    ChangeNotification,
    EntityDetail,
    EventOriginator,
    GraphContext,
    InstanceEventType,
    LineageVertex,
)
from asset_lineage.listener.validator import TypeNameValidator
from asset_lineage.telemetry.tracing import reset_tracer

if TYPE_CHECKING:
    from collections.abc import Generator

TEST_LINEAGE_TYPES = frozenset({"Process", "Table", "RelationalTable", "RelationalColumn"})


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "requirement(id): Mark test as covering a specific requirement",
    )


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None, None, None]:
    """Reset structlog and tracer state between tests."""
    structlog.reset_defaults()
    reset_tracer()
    yield
    structlog.reset_defaults()
    reset_tracer()


@pytest.fixture
def make_entity() -> Callable[..., EntityDetail]:
    """Factory for EntityDetail instances."""

    def _make(
        guid: str = "g1",
        type_name: str = "Process",
        status: str | None = "Active",
        **kwargs: Any,
    ) -> EntityDetail:
        return EntityDetail(guid=guid, type_name=type_name, status=status, **kwargs)

    return _make


@pytest.fixture
def make_notification(
    make_entity: Callable[..., EntityDetail],
) -> Callable[..., ChangeNotification]:
    """Factory for ChangeNotification instances from repository ``repoA``."""

    def _make(
        event_type: InstanceEventType,
        entity: EntityDetail | None = None,
        originator: str | None = "repoA",
    ) -> ChangeNotification:
        return ChangeNotification(
            event_type=event_type,
            originator=(
                EventOriginator(metadata_collection_id=originator)
                if originator is not None
                else None
            ),
            entity=entity if entity is not None else make_entity(),
        )

    return _make


@pytest.fixture
def make_edge() -> Callable[..., GraphContext]:
    """Factory for GraphContext edges."""

    def _make(
        from_guid: str,
        to_guid: str,
        relationship_type: str = "ProcessInput",
        from_type: str = "Process",
        to_type: str = "RelationalTable",
    ) -> GraphContext:
        return GraphContext(
            relationship_type=relationship_type,
            relationship_guid=f"{from_guid}-{to_guid}",
            from_vertex=LineageVertex(guid=from_guid, type_name=from_type),
            to_vertex=LineageVertex(guid=to_guid, type_name=to_type),
        )

    return _make


@pytest.fixture
def validator() -> TypeNameValidator:
    """Validator accepting the test lineage types."""
    return TypeNameValidator(TEST_LINEAGE_TYPES)


@pytest.fixture
def resolvers() -> dict[str, MagicMock]:
    """Resolver test doubles returning empty contexts by default."""
    process = MagicMock()
    process.resolve.return_value = {}
    asset = MagicMock()
    asset.resolve.return_value = AssetContext()
    glossary = MagicMock()
    glossary.resolve.return_value = {}
    classification = MagicMock()
    classification.resolve.return_value = {}
    return {
        "process": process,
        "asset": asset,
        "glossary": glossary,
        "classification": classification,
    }


@pytest.fixture
def transport() -> InMemoryLineageTransport:
    """In-memory transport capturing published payloads."""
    return InMemoryLineageTransport()


@pytest.fixture
def publisher(transport: InMemoryLineageTransport) -> MagicMock:
    """Publisher spy wrapping a real LineagePublisher."""
    return MagicMock(wraps=LineagePublisher(transport))


@pytest.fixture
def context_resolver(
    validator: TypeNameValidator,
    resolvers: dict[str, MagicMock],
) -> ContextResolver:
    """ContextResolver wired with resolver test doubles."""
    return ContextResolver(
        server_name="lineage-server",
        user_id="lineage-user",
        validator=validator,
        process_resolver=resolvers["process"],
        asset_resolver=resolvers["asset"],
        glossary_resolver=resolvers["glossary"],
        classification_resolver=resolvers["classification"],
    )


@pytest.fixture
def listener(
    validator: TypeNameValidator,
    context_resolver: ContextResolver,
    publisher: MagicMock,
) -> AssetLineageListener:
    """Listener wired with test doubles."""
    return AssetLineageListener(
        validator=validator,
        context_resolver=context_resolver,
        publisher=publisher,
        event_builder=LineageEventBuilder(producer="test"),
    )
