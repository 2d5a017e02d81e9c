"""Metrics, resources, signals and instrumentation libraries of a resolved schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .model import AttributeRef, Tags

_U32_MAX = 0xFFFF_FFFF


def _refs(refs: list[AttributeRef]) -> list[int]:
    return [ref.index for ref in refs]


def _put_tags(data: dict[str, Any], tags: Tags | None) -> None:
    if tags is not None:
        data["tags"] = tags.to_dict()


@dataclass(frozen=True, order=True)
class MetricRef:
    """An index into the metric catalog."""

    index: int

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError("a metric reference is an integer")
        if not 0 <= self.index <= _U32_MAX:
            raise ValueError(f"metric reference out of range: {self.index}")


class Instrument(str, Enum):
    """The type of a metric."""

    UP_DOWN_COUNTER = "UpDownCounter"
    COUNTER = "Counter"
    GAUGE = "Gauge"
    HISTOGRAM = "Histogram"


@dataclass
class Metric:
    """A metric definition."""

    name: str
    brief: str
    note: str
    instrument: Instrument
    unit: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; absent tags are left out."""
        data: dict[str, Any] = {
            "name": self.name,
            "brief": self.brief,
            "note": self.note,
            "instrument": Instrument(self.instrument).value,
            "unit": self.unit,
        }
        _put_tags(data, self.tags)
        return data


@dataclass
class Resource:
    """Attributes associated with a resource."""

    attributes: list[AttributeRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        return {"attributes": _refs(self.attributes)}


class SpanKind(str, Enum):
    """The kind of a span."""

    INTERNAL = "Internal"
    CLIENT = "Client"
    SERVER = "Server"
    PRODUCER = "Producer"
    CONSUMER = "Consumer"


@dataclass
class UnivariateMetric:
    """A signal made of one metric."""

    metric: MetricRef
    attributes: list[AttributeRef] = field(default_factory=list)
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        data: dict[str, Any] = {}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        data["metric"] = self.metric.index
        _put_tags(data, self.tags)
        return data


@dataclass
class MultivariateMetric:
    """A signal made of several metrics sharing attributes."""

    name: str
    metrics: list[MetricRef] = field(default_factory=list)
    attributes: list[AttributeRef] = field(default_factory=list)
    brief: str | None = None
    note: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        data: dict[str, Any] = {"name": self.name}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        data["metrics"] = [m.index for m in self.metrics]
        data["brief"] = self.brief
        data["note"] = self.note
        _put_tags(data, self.tags)
        return data


@dataclass
class Event:
    """An event signal."""

    name: str
    domain: str
    attributes: list[AttributeRef] = field(default_factory=list)
    brief: str | None = None
    note: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        data: dict[str, Any] = {"name": self.name}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        data["domain"] = self.domain
        data["brief"] = self.brief
        data["note"] = self.note
        _put_tags(data, self.tags)
        return data


@dataclass
class SpanEvent:
    """An event attached to a span."""

    event_name: str
    attributes: list[AttributeRef] = field(default_factory=list)
    brief: str | None = None
    note: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        data: dict[str, Any] = {"event_name": self.event_name}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        data["brief"] = self.brief
        data["note"] = self.note
        _put_tags(data, self.tags)
        return data


@dataclass
class SpanLink:
    """A link attached to a span."""

    link_name: str
    attributes: list[AttributeRef] = field(default_factory=list)
    brief: str | None = None
    note: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        data: dict[str, Any] = {"link_name": self.link_name}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        data["brief"] = self.brief
        data["note"] = self.note
        _put_tags(data, self.tags)
        return data


@dataclass
class Span:
    """A span signal."""

    name: str
    attributes: list[AttributeRef] = field(default_factory=list)
    kind: SpanKind | None = None
    events: list[SpanEvent] = field(default_factory=list)
    links: list[SpanLink] = field(default_factory=list)
    brief: str | None = None
    note: str | None = None
    tags: Tags | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty lists and absent kind and tags are left out."""
        data: dict[str, Any] = {"name": self.name}
        if self.attributes:
            data["attributes"] = _refs(self.attributes)
        if self.kind is not None:
            data["kind"] = SpanKind(self.kind).value
        if self.events:
            data["events"] = [e.to_dict() for e in self.events]
        if self.links:
            data["links"] = [link.to_dict() for link in self.links]
        data["brief"] = self.brief
        data["note"] = self.note
        _put_tags(data, self.tags)
        return data


@dataclass
class InstrumentationLibrary:
    """An instrumentation library and the signals it produces."""

    name: str | None = None
    version: str | None = None
    tags: Tags | None = None
    univariate_metrics: list[UnivariateMetric] = field(default_factory=list)
    multivariate_metrics: list[MultivariateMetric] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    spans: list[Span] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty and absent fields are left out."""
        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        if self.version is not None:
            data["version"] = self.version
        _put_tags(data, self.tags)
        if self.univariate_metrics:
            data["univariate_metrics"] = [m.to_dict() for m in self.univariate_metrics]
        if self.multivariate_metrics:
            data["multivariate_metrics"] = [m.to_dict() for m in self.multivariate_metrics]
        if self.events:
            data["events"] = [e.to_dict() for e in self.events]
        if self.spans:
            data["spans"] = [s.to_dict() for s in self.spans]
        return data