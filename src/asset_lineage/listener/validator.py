"""Type-name based lineage relevance check."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_LINEAGE_TYPES: frozenset[str] = frozenset(
    {
        "Process",
        "Port",
        "PortAlias",
        "PortImplementation",
        "GlossaryTerm",
        "Database",
        "DeployedDatabaseSchema",
        "RelationalDBSchemaType",
        "RelationalTable",
        "RelationalTableType",
        "RelationalColumn",
        "DataFile",
        "CSVFile",
        "AvroFile",
        "JSONFile",
        "ParquetFile",
        "FileFolder",
        "DataFolder",
        "TabularSchemaType",
        "TabularColumn",
        "TabularColumnType",
        "Connection",
        "ConnectorType",
        "Endpoint",
        "SoftwareServerCapability",
    }
)
"""Entity types whose changes are published as lineage events by default."""


class TypeNameValidator:
    """Lineage validator backed by a fixed set of type names.

    Example:
        >>> validator = TypeNameValidator({"Process", "RelationalTable"})
        >>> validator.is_lineage_relevant("Process")
        True
        >>> validator.is_lineage_relevant("Person")
        False
    """

    def __init__(self, lineage_types: Iterable[str] | None = None) -> None:
        types = DEFAULT_LINEAGE_TYPES if lineage_types is None else lineage_types
        self._lineage_types = frozenset(types)
        logger.debug("lineage_validator_initialized", type_count=len(self._lineage_types))

    @property
    def lineage_types(self) -> frozenset[str]:
        """Return the accepted type names."""
        return self._lineage_types

    def is_lineage_relevant(self, type_name: str) -> bool:
        return type_name in self._lineage_types


__all__ = ["DEFAULT_LINEAGE_TYPES", "TypeNameValidator"]
