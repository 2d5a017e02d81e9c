import pytest

from semconv_resolve.catalog import Catalog
from semconv_resolve.errors import AttributeNotFoundError, CompoundError
from semconv_resolve.lineage import AttributeLineage, GroupLineage
from semconv_resolve.model import Attribute, AttributeRef
from semconv_resolve.registry import (
    CommonGroupStats,
    Constraint,
    Group,
    GroupStats,
    Registry,
)
from semconv_resolve.spec import (
    AttributeType,
    GroupType,
    InstrumentSpec,
    SpanKindSpec,
    Stability,
)


def _span(group_id, attrs=(), kind=None, **kwargs):
    return Group(
        id=group_id,
        type=GroupType.SPAN,
        attributes=[AttributeRef(i) for i in attrs],
        span_kind=kind,
        **kwargs,
    )


def _metric(group_id, name="m", instrument=InstrumentSpec.COUNTER, unit="s"):
    return Group(
        id=group_id,
        type=GroupType.METRIC,
        metric_name=name,
        instrument=instrument,
        unit=unit,
    )


def test_groups_of_type_filters_in_order():
    registry = Registry(
        groups=[_span("a"), _metric("b"), _span("c"), Group("d", GroupType.EVENT)]
    )
    assert [g.id for g in registry.groups_of_type(GroupType.SPAN)] == ["a", "c"]
    assert [g.id for g in registry.groups_of_type(GroupType.METRIC)] == ["b"]
    assert list(registry.groups_of_type(GroupType.RESOURCE)) == []


def test_resolved_attributes_from_catalog():
    attrs = [Attribute("x", AttributeType("string")), Attribute("y", AttributeType("int"))]
    catalog = Catalog(attrs)
    group = _span("g", attrs=(1, 0))
    assert group.resolved_attributes(catalog) == [attrs[1], attrs[0]]


def test_resolved_attributes_collects_missing_refs():
    catalog = Catalog([Attribute("x", AttributeType("string"))])
    group = _span("g", attrs=(0, 5, 7))
    with pytest.raises(CompoundError) as info:
        group.resolved_attributes(catalog)
    errors = info.value.errors
    assert all(isinstance(e, AttributeNotFoundError) for e in errors)
    assert [e.attr_ref for e in errors] == [AttributeRef(5), AttributeRef(7)]
    assert {e.group_id for e in errors} == {"g"}


def test_has_include():
    group = _span("g", constraints=[Constraint(any_of=["a"])])
    assert not group.has_include()
    group.constraints.append(Constraint(include="other"))
    assert group.has_include()


def test_import_attributes_from_skips_existing():
    group = _span("g", attrs=(2, 0))
    group.import_attributes_from([AttributeRef(0), AttributeRef(3), AttributeRef(3)])
    assert group.attributes == [AttributeRef(2), AttributeRef(0), AttributeRef(3)]


def test_update_constraints_adds_and_removes_includes():
    group = _span(
        "g",
        constraints=[Constraint(include="a"), Constraint(include="b"), Constraint(any_of=["x"])],
    )
    group.update_constraints([Constraint(any_of=["y"]), Constraint(include="a")], {"a"})
    assert group.constraints == [
        Constraint(include="b"),
        Constraint(any_of=("x",)),
        Constraint(any_of=("y",)),
    ]


def test_provenance():
    assert _span("g").provenance() == "unknown"
    group = _span("g", lineage=GroupLineage("dir\\file.yaml"))
    assert group.provenance() == "dir/file.yaml"


def test_constraint_is_hashable_and_normalised():
    first = Constraint(any_of=["a", "b"], include=None)
    second = Constraint(any_of=("a", "b"))
    assert first == second
    assert len({first, second}) == 1
    assert first.to_dict() == {"any_of": ["a", "b"], "include": None}


def test_constraint_from_dict_rejects_unknown_field():
    with pytest.raises(ValueError):
        Constraint.from_dict({"any_of": [], "bogus": 1})


def test_group_round_trip():
    lineage = GroupLineage("registry/http.yaml")
    lineage.add_attribute_lineage("http.method", AttributeLineage("http.common"))
    group = Group(
        id="http.client",
        type=GroupType.SPAN,
        brief="HTTP client",
        note="details",
        prefix="http",
        stability=Stability.STABLE,
        deprecated="use other",
        constraints=[Constraint(any_of=["http.url"])],
        attributes=[AttributeRef(0), AttributeRef(4)],
        span_kind=SpanKindSpec.CLIENT,
        events=["e1"],
        name="client",
        lineage=lineage,
        display_name="HTTP",
    )
    assert Group.from_dict(group.to_dict()) == group


def test_group_to_dict_leaves_out_empty_fields():
    data = Group("g", GroupType.ATTRIBUTE_GROUP).to_dict()
    assert data == {"id": "g", "type": "attribute_group", "attributes": []}


def test_group_from_dict_ignores_unknown_and_requires_id():
    group = Group.from_dict({"id": "g", "type": "event", "extra": True})
    assert group.type is GroupType.EVENT
    with pytest.raises(ValueError):
        Group.from_dict({"type": "event"})


def test_registry_round_trip_and_unknown_fields():
    registry = Registry("https://127.0.0.1", [_span("a", attrs=(1,)), _metric("b")])
    data = registry.to_dict()
    assert data["registry_url"] == "https://127.0.0.1"
    assert Registry.from_dict(data) == registry
    with pytest.raises(ValueError):
        Registry.from_dict({"groups": [], "unexpected": 1})


def test_registry_without_url_omits_it():
    assert "registry_url" not in Registry(groups=[]).to_dict()


def test_common_stats_update():
    stats = CommonGroupStats()
    stats.update_stats(_span("a", attrs=(0, 1), prefix="p", stability=Stability.STABLE))
    stats.update_stats(_span("b", note="n", deprecated="d"))
    stats.update_stats(_span("c", attrs=(4, 5)))
    assert stats.count == 3
    assert stats.total_attribute_count == 4
    assert stats.total_with_prefix == 1
    assert stats.total_with_note == 1
    assert stats.deprecated_count == 1
    assert stats.stability_breakdown == {Stability.STABLE: 1}
    assert stats.attribute_card_breakdown == {0: 1, 2: 2}
    assert list(stats.attribute_card_breakdown) == sorted(stats.attribute_card_breakdown)


def test_registry_stats_breakdown():
    spans = [
        _span("s1", kind=SpanKindSpec.CLIENT),
        _span("s2", kind=SpanKindSpec.SERVER),
        _span("s3", kind=SpanKindSpec.SERVER),
    ]
    metrics = [_metric("m1", name="a"), _metric("m2", name="b"), _metric("m3", name="c")]
    registry = Registry("url", spans + metrics)
    stats = registry.stats()
    assert stats.url == "url"
    assert stats.group_count == len(spans) + len(metrics)
    span_stats = stats.group_breakdown[GroupType.SPAN]
    metric_stats = stats.group_breakdown[GroupType.METRIC]
    assert span_stats.common_stats.count == len(spans) - 1
    assert span_stats.span_kind_breakdown == {SpanKindSpec.SERVER: 2}
    assert metric_stats.metric_names == {"b", "c"}
    assert metric_stats.instrument_breakdown == {InstrumentSpec.COUNTER: 2}
    assert metric_stats.unit_breakdown == {"s": 2}
    assert set(stats.group_breakdown) == {GroupType.SPAN, GroupType.METRIC}


def test_metric_stats_require_metric_fields():
    stats = GroupStats(GroupType.METRIC)
    with pytest.raises(ValueError):
        stats.update(_metric("m", unit=None))
    registry = Registry(groups=[_metric("a"), _metric("b", name=None)])
    with pytest.raises(ValueError):
        registry.stats()