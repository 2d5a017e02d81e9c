"""Semantic convention specification types consumed by the resolver."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

_SCALAR_TYPES = ("boolean", "int", "double", "string")
_PRIMITIVE_TYPES = frozenset(
    [*_SCALAR_TYPES]
    + [f"{name}[]" for name in _SCALAR_TYPES]
    + [f"template[{name}]" for name in _SCALAR_TYPES]
    + [f"template[{name}[]]" for name in _SCALAR_TYPES]
)


class GroupType(str, Enum):
    """The kind of a semantic convention group."""

    ATTRIBUTE_GROUP = "attribute_group"
    SPAN = "span"
    EVENT = "event"
    METRIC = "metric"
    METRIC_GROUP = "metric_group"
    RESOURCE = "resource"
    SCOPE = "scope"


class SpanKindSpec(str, Enum):
    """The kind of a span."""

    CLIENT = "client"
    SERVER = "server"
    PRODUCER = "producer"
    CONSUMER = "consumer"
    INTERNAL = "internal"


class InstrumentSpec(str, Enum):
    """The instrument used to record a metric."""

    UPDOWNCOUNTER = "updowncounter"
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


class Stability(str, Enum):
    """Stability level of a convention."""

    STABLE = "stable"
    EXPERIMENTAL = "experimental"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class AttributeType:
    """A primitive, array or template type, or an enum with its members.

    Enum members are ``(id, value)`` pairs.
    """

    name: str
    members: tuple[tuple[str, Union[str, int, float]], ...] = ()
    allow_custom_values: bool | None = None

    def __post_init__(self) -> None:
        if self.name == "enum":
            object.__setattr__(
                self, "members", tuple((str(ident), value) for ident, value in self.members)
            )
            return
        if self.name not in _PRIMITIVE_TYPES:
            raise ValueError(f"unknown attribute type: {self.name!r}")
        if self.members or self.allow_custom_values is not None:
            raise ValueError(f"type {self.name!r} cannot have enum members")

    def display(self) -> str:
        """Human readable form of the type."""
        if self.name == "enum":
            return "enum {" + ", ".join(ident for ident, _ in self.members) + "}"
        return self.name


class BasicRequirementLevel(str, Enum):
    """Requirement levels that carry no explanatory text."""

    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPT_IN = "opt_in"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class RequirementLevel:
    """A requirement level: a basic level or one qualified by a text.

    When nothing is given the level is ``recommended``.
    """

    basic: BasicRequirementLevel | None = None
    conditionally_required: str | None = None
    recommended: str | None = None

    def __post_init__(self) -> None:
        given = [
            v for v in (self.basic, self.conditionally_required, self.recommended) if v is not None
        ]
        if not given:
            object.__setattr__(self, "basic", BasicRequirementLevel.RECOMMENDED)
        elif len(given) > 1:
            raise ValueError("a requirement level takes exactly one form")
        elif self.basic is not None:
            object.__setattr__(self, "basic", BasicRequirementLevel(self.basic))

    def label(self) -> str:
        """The name of the level, without any qualifying text."""
        if self.basic is not None:
            return self.basic.value
        if self.conditionally_required is not None:
            return "conditionally_required"
        return "recommended"


@dataclass
class AttributeRefSpec:
    """A reference to an attribute defined elsewhere, with local overrides."""

    ref: str
    brief: str | None = None
    examples: Any = None
    tag: str | None = None
    requirement_level: RequirementLevel | None = None
    sampling_relevant: bool | None = None
    note: str | None = None
    stability: Stability | None = None
    deprecated: str | None = None
    prefix: bool = False

    def id(self) -> str:
        """The id of the referenced attribute."""
        return self.ref


@dataclass
class AttributeIdSpec:
    """The definition of an attribute."""

    name: str
    type: AttributeType
    brief: str | None = None
    examples: Any = None
    tag: str | None = None
    requirement_level: RequirementLevel = field(default_factory=RequirementLevel)
    sampling_relevant: bool | None = None
    note: str = ""
    stability: Stability | None = None
    deprecated: str | None = None

    def id(self) -> str:
        """The id of the defined attribute."""
        return self.name


@dataclass
class ConstraintSpec:
    """An ``any_of`` and/or ``include`` constraint on a group."""

    any_of: list[str] = field(default_factory=list)
    include: str | None = None


@dataclass
class GroupSpec:
    """A semantic convention group as written in a specification file."""

    id: str
    type: GroupType
    brief: str = ""
    note: str = ""
    prefix: str = ""
    extends: str | None = None
    stability: Stability | None = None
    deprecated: str | None = None
    constraints: list[ConstraintSpec] = field(default_factory=list)
    attributes: list[Union[AttributeRefSpec, AttributeIdSpec]] = field(default_factory=list)
    span_kind: SpanKindSpec | None = None
    events: list[str] = field(default_factory=list)
    metric_name: str | None = None
    instrument: InstrumentSpec | None = None
    unit: str | None = None
    name: str | None = None
    display_name: str | None = None


@dataclass
class GroupSpecWithProvenance:
    """A group specification together with the file or URL it came from."""

    spec: GroupSpec
    provenance: str


@dataclass
class SemConvRegistry:
    """A named collection of unresolved semantic convention groups."""

    id: str
    _groups: list[GroupSpecWithProvenance] = field(default_factory=list, init=False, repr=False)

    def add_group(self, group: GroupSpec, provenance: str) -> None:
        """Add a group specification coming from ``provenance``."""
        self._groups.append(GroupSpecWithProvenance(spec=group, provenance=provenance))

    def groups_with_provenance(self) -> Iterator[GroupSpecWithProvenance]:
        """Iterate over the groups in the order they were added."""
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)