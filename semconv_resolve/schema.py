"""The resolved telemetry schema: registries, catalog and signals, self-contained."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .catalog import Catalog, CatalogStats
from .registry import Registry, RegistryStats
from .signals import InstrumentationLibrary, Resource

OTEL_REGISTRY_ID = "OTEL"
"""Registry id reserved for the OpenTelemetry semantic conventions."""


@dataclass
class SchemaStats:
    """Statistics on a resolved telemetry schema."""

    registry_count: int
    registry_stats: list[RegistryStats]
    catalog_stats: CatalogStats


@dataclass
class ResolvedTelemetrySchema:
    """A telemetry schema with every reference resolved."""

    file_format: str
    schema_url: str
    catalog: Catalog = field(default_factory=Catalog)
    registries: dict[str, Registry] = field(default_factory=dict)
    resource: Resource | None = None
    instrumentation_library: InstrumentationLibrary | None = None
    dependencies: list[InstrumentationLibrary] = field(default_factory=list)
    versions: Any = None

    def registry(self, registry_id: str) -> Registry | None:
        """The registry with ``registry_id``, or None."""
        return self.registries.get(registry_id)

    def stats(self) -> SchemaStats:
        """Statistics on the schema, its registries and its catalog."""
        return SchemaStats(
            registry_count=len(self.registries),
            registry_stats=[registry.stats() for registry in self.registries.values()],
            catalog_stats=self.catalog.stats(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty and absent fields are left out."""
        data: dict[str, Any] = {"file_format": self.file_format, "schema_url": self.schema_url}
        if self.registries:
            data["registries"] = {
                reg_id: registry.to_dict() for reg_id, registry in self.registries.items()
            }
        data["catalog"] = self.catalog.to_dict()
        if self.resource is not None:
            data["resource"] = self.resource.to_dict()
        if self.instrumentation_library is not None:
            data["instrumentation_library"] = self.instrumentation_library.to_dict()
        if self.dependencies:
            data["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        if self.versions is not None:
            data["versions"] = self.versions
        return data