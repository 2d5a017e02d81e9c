"""Resolution of semantic convention registries into a resolved telemetry schema."""

__version__ = "0.1.0"

__all__ = [
    "attribute_catalog",
    "catalog",
    "errors",
    "inheritance",
    "lineage",
    "model",
    "registry",
    "resolution",
    "schema",
    "signals",
    "spec",
]