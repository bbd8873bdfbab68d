"""Resolvers backed by precomputed context graphs.

A StaticContextStore holds context maps keyed by entity guid, typically
loaded from a YAML file, and exposes one resolver per resolver protocol.
It is used to replay recorded notifications offline.

File format::

    process_contexts:
      <process guid>:
        <relationship type>:
          - from_vertex: {guid: ..., type_name: ...}
            to_vertex: {guid: ..., type_name: ...}
            relationship_guid: ...        # optional
    asset_contexts:
      <asset guid>:
        base_entity: {guid: ..., type_name: ...}   # optional
        neighbors:
          <relationship type>: [<edge>, ...]
    glossary_contexts:
      <asset guid>: {<relationship type>: [<edge>, ...]}
    classification_contexts:
      <entity guid>: {<relationship type>: [<edge>, ...]}

Unknown guids resolve to empty contexts.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from asset_lineage.errors import ConfigurationError, InvalidParameterError
from asset_lineage.listener.types import (
    AssetContext,
    ContextMap,
    GraphContext,
    LineageVertex,
)

if TYPE_CHECKING:
    from asset_lineage.listener.protocols import LineageValidator
    from asset_lineage.listener.types import EntityDetail


class _EdgeSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    from_vertex: LineageVertex
    to_vertex: LineageVertex
    relationship_guid: str | None = None


_ContextSpec = dict[str, list[_EdgeSpec]]


class _AssetContextSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    base_entity: LineageVertex | None = None
    neighbors: _ContextSpec = Field(default_factory=dict)


class _StoreSpec(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    process_contexts: dict[str, _ContextSpec] = Field(default_factory=dict)
    asset_contexts: dict[str, _AssetContextSpec] = Field(default_factory=dict)
    glossary_contexts: dict[str, _ContextSpec] = Field(default_factory=dict)
    classification_contexts: dict[str, _ContextSpec] = Field(default_factory=dict)


def _to_context_map(spec: _ContextSpec) -> ContextMap:
    return {
        relationship_type: {
            GraphContext(
                relationship_type=relationship_type,
                relationship_guid=edge.relationship_guid,
                from_vertex=edge.from_vertex,
                to_vertex=edge.to_vertex,
            )
            for edge in edges
        }
        for relationship_type, edges in spec.items()
    }


def _check_guid(guid: str, resolver: str) -> None:
    if not guid or not guid.strip():
        raise InvalidParameterError("entity_guid", guid, resolver=resolver)


class StaticContextStore:
    """Precomputed context graphs keyed by entity guid.

    Example:
        >>> store = StaticContextStore.from_yaml(Path("contexts.yaml"))
        >>> store.process_resolver.resolve("user", "g1")
        {'ProcessInput': {...}}
    """

    def __init__(
        self,
        process_contexts: dict[str, ContextMap] | None = None,
        asset_contexts: dict[str, AssetContext] | None = None,
        glossary_contexts: dict[str, ContextMap] | None = None,
        classification_contexts: dict[str, ContextMap] | None = None,
    ) -> None:
        self.process_contexts = process_contexts or {}
        self.asset_contexts = asset_contexts or {}
        self.glossary_contexts = glossary_contexts or {}
        self.classification_contexts = classification_contexts or {}
        self.process_resolver = StaticProcessContextResolver(self)
        self.asset_resolver = StaticAssetContextResolver(self)
        self.glossary_resolver = StaticGlossaryContextResolver(self)
        self.classification_resolver = StaticClassificationContextResolver(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str | None = None) -> StaticContextStore:
        """Build a store from a parsed document.

        Raises:
            ConfigurationError: If the document does not match the file format.
        """
        try:
            spec = _StoreSpec.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                "invalid context store",
                source=source,
                errors=[dict(err) for err in e.errors()],
            ) from e

        return cls(
            process_contexts={
                guid: _to_context_map(ctx) for guid, ctx in spec.process_contexts.items()
            },
            asset_contexts={
                guid: AssetContext(
                    base_entity=ctx.base_entity,
                    neighbors=_to_context_map(ctx.neighbors),
                )
                for guid, ctx in spec.asset_contexts.items()
            },
            glossary_contexts={
                guid: _to_context_map(ctx) for guid, ctx in spec.glossary_contexts.items()
            },
            classification_contexts={
                guid: _to_context_map(ctx) for guid, ctx in spec.classification_contexts.items()
            },
        )

    @classmethod
    def from_yaml(cls, path: Path) -> StaticContextStore:
        """Load a store from a YAML file.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid.
        """
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"cannot read file: {e}", source=str(path)) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML: {e}", source=str(path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError("top level must be a mapping", source=str(path))
        return cls.from_dict(data, source=str(path))


class StaticProcessContextResolver:
    """Process resolver reading from a StaticContextStore."""

    def __init__(self, store: StaticContextStore) -> None:
        self._store = store

    def resolve(self, user_id: str, entity_guid: str) -> ContextMap:  # noqa: ARG002
        _check_guid(entity_guid, "process")
        return self._store.process_contexts.get(entity_guid, {})


class StaticAssetContextResolver:
    """Asset resolver reading from a StaticContextStore."""

    def __init__(self, store: StaticContextStore) -> None:
        self._store = store

    def resolve(
        self,
        user_id: str,  # noqa: ARG002
        entity_guid: str,
        type_name: str,
    ) -> AssetContext:
        _check_guid(entity_guid, "asset")
        if not type_name:
            raise InvalidParameterError("type_name", type_name, resolver="asset")
        return self._store.asset_contexts.get(entity_guid, AssetContext())


class StaticGlossaryContextResolver:
    """Glossary resolver reading from a StaticContextStore."""

    def __init__(self, store: StaticContextStore) -> None:
        self._store = store

    def resolve(
        self,
        entity_guid: str,
        user_id: str,  # noqa: ARG002
        entity: EntityDetail,  # noqa: ARG002
        asset_context: AssetContext,  # noqa: ARG002
        validator: LineageValidator,  # noqa: ARG002
    ) -> ContextMap:
        return self._store.glossary_contexts.get(entity_guid, {})


class StaticClassificationContextResolver:
    """Classification resolver reading from a StaticContextStore."""

    def __init__(self, store: StaticContextStore) -> None:
        self._store = store

    def resolve(
        self,
        server_name: str,  # noqa: ARG002
        user_id: str,  # noqa: ARG002
        entity: EntityDetail,
    ) -> ContextMap:
        return self._store.classification_contexts.get(entity.guid, {})


__all__ = [
    "StaticAssetContextResolver",
    "StaticClassificationContextResolver",
    "StaticContextStore",
    "StaticGlossaryContextResolver",
    "StaticProcessContextResolver",
]
