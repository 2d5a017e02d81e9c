from semconv_resolve.catalog import Catalog
from semconv_resolve.model import Attribute, AttributeRef
from semconv_resolve.registry import Group, Registry
from semconv_resolve.schema import OTEL_REGISTRY_ID, ResolvedTelemetrySchema
from semconv_resolve.signals import InstrumentationLibrary, Resource
from semconv_resolve.spec import AttributeType, GroupType


def _schema():
    registry = Registry(
        registry_url="https://registry.example.com",
        groups=[
            Group(id="span.a", type=GroupType.SPAN, attributes=[AttributeRef(0)]),
            Group(id="attrs.b", type=GroupType.ATTRIBUTE_GROUP),
        ],
    )
    catalog = Catalog([Attribute(name="a.one", type=AttributeType("string"))])
    return ResolvedTelemetrySchema(
        file_format="1.0.0",
        schema_url="",
        catalog=catalog,
        registries={OTEL_REGISTRY_ID: registry},
    ), registry


def test_registry_lookup():
    schema, registry = _schema()
    assert schema.registry(OTEL_REGISTRY_ID) is registry
    assert schema.registry("missing") is None


def test_stats_cover_registries_and_catalog():
    schema, registry = _schema()
    stats = schema.stats()
    assert stats.registry_count == len(schema.registries)
    assert len(stats.registry_stats) == len(schema.registries)
    assert stats.registry_stats[0].url == registry.registry_url
    assert stats.registry_stats[0].group_count == len(registry.groups)
    assert stats.catalog_stats.attribute_count == len(schema.catalog.attributes)


def test_to_dict_includes_parts():
    schema, registry = _schema()
    data = schema.to_dict()
    assert data["file_format"] == "1.0.0"
    assert data["schema_url"] == ""
    assert data["registries"][OTEL_REGISTRY_ID] == registry.to_dict()
    assert data["catalog"] == schema.catalog.to_dict()
    assert "resource" not in data
    assert "dependencies" not in data
    assert "versions" not in data


def test_to_dict_of_empty_schema_leaves_out_empty_fields():
    schema = ResolvedTelemetrySchema(file_format="1.0.0", schema_url="")
    assert schema.to_dict() == {"file_format": "1.0.0", "schema_url": "", "catalog": {}}


def test_to_dict_with_resource_and_libraries():
    schema = ResolvedTelemetrySchema(
        file_format="1.0.0",
        schema_url="",
        resource=Resource([AttributeRef(2)]),
        instrumentation_library=InstrumentationLibrary(name="lib"),
        dependencies=[InstrumentationLibrary(name="dep")],
    )
    data = schema.to_dict()
    assert data["resource"] == {"attributes": [2]}
    assert data["instrumentation_library"] == {"name": "lib"}
    assert data["dependencies"] == [{"name": "dep"}]