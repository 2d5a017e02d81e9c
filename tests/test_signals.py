import pytest

from semconv_resolve.model import AttributeRef, Tags
from semconv_resolve.signals import (
    Event,
    Instrument,
    InstrumentationLibrary,
    Metric,
    MetricRef,
    Resource,
    Span,
    SpanEvent,
    SpanKind,
    SpanLink,
    UnivariateMetric,
)


def test_metric_to_dict_keeps_null_unit_and_drops_missing_tags():
    metric = Metric(name="http.duration", brief="b", note="n", instrument=Instrument.HISTOGRAM)
    data = metric.to_dict()
    assert data == {
        "name": "http.duration",
        "brief": "b",
        "note": "n",
        "instrument": "Histogram",
        "unit": None,
    }


def test_metric_to_dict_with_tags():
    metric = Metric("m", "b", "n", Instrument.UP_DOWN_COUNTER, unit="s", tags=Tags({"k": "v"}))
    data = metric.to_dict()
    assert data["instrument"] == "UpDownCounter"
    assert data["tags"] == {"k": "v"}
    assert data["unit"] == "s"


def test_resource_to_dict_lists_indices():
    resource = Resource([AttributeRef(3), AttributeRef(7)])
    assert resource.to_dict() == {"attributes": [3, 7]}


def test_span_to_dict_omits_empty_collections():
    span = Span(name="GET", kind=SpanKind.CLIENT)
    data = span.to_dict()
    assert data == {"name": "GET", "kind": "Client", "brief": None, "note": None}


def test_span_to_dict_with_events_and_links():
    span = Span(
        name="op",
        attributes=[AttributeRef(1)],
        events=[SpanEvent(event_name="ev", attributes=[AttributeRef(2)])],
        links=[SpanLink(link_name="ln")],
        brief="brief",
    )
    data = span.to_dict()
    assert data["attributes"] == [1]
    assert data["events"][0]["event_name"] == "ev"
    assert data["events"][0]["attributes"] == [2]
    assert data["links"][0]["link_name"] == "ln"
    assert "attributes" not in data["links"][0]
    assert "kind" not in data


def test_empty_instrumentation_library_serializes_to_empty_dict():
    assert InstrumentationLibrary().to_dict() == {}


def test_instrumentation_library_to_dict_with_signals():
    lib = InstrumentationLibrary(
        name="lib",
        version="1.2",
        univariate_metrics=[UnivariateMetric(metric=MetricRef(4))],
        events=[Event(name="e", domain="d")],
        spans=[Span(name="s")],
    )
    data = lib.to_dict()
    assert data["name"] == "lib"
    assert data["version"] == "1.2"
    assert data["univariate_metrics"] == [{"metric": 4}]
    assert data["events"][0]["domain"] == "d"
    assert data["spans"][0]["name"] == "s"
    assert "multivariate_metrics" not in data


def test_metric_ref_rejects_out_of_range():
    with pytest.raises(ValueError):
        MetricRef(-1)
    with pytest.raises(TypeError):
        MetricRef(True)