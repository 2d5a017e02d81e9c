"""A resolved semantic convention registry: groups, constraints and statistics."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .catalog import Catalog
from .errors import AttributeNotFoundError, handle_errors
from .lineage import GroupLineage
from .model import Attribute, AttributeRef, _check_fields
from .spec import GroupType, InstrumentSpec, SpanKindSpec, Stability


@dataclass(frozen=True)
class Constraint:
    """An ``any_of`` requirement and/or an ``include`` of another group."""

    any_of: tuple[str, ...] = ()
    include: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "any_of", tuple(self.any_of))

    def to_dict(self) -> dict[str, Any]:
        """Serialized form."""
        return {"any_of": list(self.any_of), "include": self.include}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Constraint:
        """Build a constraint from its serialized form."""
        _check_fields(data, required=set(), allowed={"any_of", "include"})
        return cls(any_of=tuple(data.get("any_of") or ()), include=data.get("include"))


@dataclass
class Group:
    """A resolved semantic convention group."""

    id: str
    type: GroupType
    brief: str = ""
    note: str = ""
    prefix: str = ""
    extends: str | None = None
    stability: Stability | None = None
    deprecated: str | None = None
    constraints: list[Constraint] = field(default_factory=list)
    attributes: list[AttributeRef] = field(default_factory=list)
    span_kind: SpanKindSpec | None = None
    events: list[str] = field(default_factory=list)
    metric_name: str | None = None
    instrument: InstrumentSpec | None = None
    unit: str | None = None
    name: str | None = None
    lineage: GroupLineage | None = None
    display_name: str | None = None

    def resolved_attributes(self, catalog: Catalog) -> list[Attribute]:
        """The group's attributes looked up in ``catalog``.

        Raises a compound error listing every reference missing from the catalog.
        """
        found: list[Attribute] = []
        errors: list[AttributeNotFoundError] = []
        for attr_ref in self.attributes:
            attr = catalog.attribute(attr_ref)
            if attr is None:
                errors.append(AttributeNotFoundError(self.id, attr_ref))
            else:
                found.append(attr)
        handle_errors(errors)
        return found

    def has_include(self) -> bool:
        """True if at least one constraint is an ``include``."""
        return any(c.include is not None for c in self.constraints)

    def import_attributes_from(self, attributes: Iterable[AttributeRef]) -> None:
        """Append the references not already present in the group."""
        for attr in attributes:
            if attr not in self.attributes:
                self.attributes.append(attr)

    def update_constraints(
        self, constraints_to_add: Iterable[Constraint], include_to_remove: Iterable[str]
    ) -> None:
        """Add constraints, then drop the ``include`` constraints named for removal."""
        removed = set(include_to_remove)
        self.constraints.extend(constraints_to_add)
        self.constraints = [
            c for c in self.constraints if c.include is None or c.include not in removed
        ]

    def provenance(self) -> str:
        """The file or URL the group came from, or ``unknown``."""
        return self.lineage.source_file() if self.lineage is not None else "unknown"

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty and absent fields are left out."""
        data: dict[str, Any] = {"id": self.id, "type": self.type.value}
        if self.brief:
            data["brief"] = self.brief
        if self.note:
            data["note"] = self.note
        if self.prefix:
            data["prefix"] = self.prefix
        if self.extends is not None:
            data["extends"] = self.extends
        if self.stability is not None:
            data["stability"] = self.stability.value
        if self.deprecated is not None:
            data["deprecated"] = self.deprecated
        if self.constraints:
            data["constraints"] = [c.to_dict() for c in self.constraints]
        data["attributes"] = [ref.index for ref in self.attributes]
        if self.span_kind is not None:
            data["span_kind"] = self.span_kind.value
        if self.events:
            data["events"] = list(self.events)
        if self.metric_name is not None:
            data["metric_name"] = self.metric_name
        if self.instrument is not None:
            data["instrument"] = self.instrument.value
        if self.unit is not None:
            data["unit"] = self.unit
        if self.name is not None:
            data["name"] = self.name
        if self.lineage is not None:
            data["lineage"] = self.lineage.to_dict()
        if self.display_name is not None:
            data["display_name"] = self.display_name
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Group:
        """Build a group from its serialized form; unknown fields are ignored."""
        missing = {"id", "type"} - set(data)
        if missing:
            raise ValueError(f"missing field(s): {', '.join(sorted(missing))}")

        def optional(key: str, convert: Any) -> Any:
            value = data.get(key)
            return convert(value) if value is not None else None

        return cls(
            id=data["id"],
            type=GroupType(data["type"]),
            brief=data.get("brief") or "",
            note=data.get("note") or "",
            prefix=data.get("prefix") or "",
            extends=data.get("extends"),
            stability=optional("stability", Stability),
            deprecated=data.get("deprecated"),
            constraints=[Constraint.from_dict(c) for c in data.get("constraints") or ()],
            attributes=[AttributeRef(i) for i in data.get("attributes") or ()],
            span_kind=optional("span_kind", SpanKindSpec),
            events=list(data.get("events") or ()),
            metric_name=data.get("metric_name"),
            instrument=optional("instrument", InstrumentSpec),
            unit=data.get("unit"),
            name=data.get("name"),
            lineage=optional("lineage", GroupLineage.from_dict),
            display_name=data.get("display_name"),
        )


@dataclass
class CommonGroupStats:
    """Statistics shared by every type of group."""

    count: int = 0
    total_attribute_count: int = 0
    total_with_prefix: int = 0
    total_with_note: int = 0
    stability_breakdown: dict[Stability, int] = field(default_factory=dict)
    deprecated_count: int = 0
    attribute_card_breakdown: dict[int, int] = field(default_factory=dict)

    def update_stats(self, group: Group) -> None:
        """Account for ``group``."""
        self.count += 1
        self.total_attribute_count += len(group.attributes)
        self.total_with_prefix += bool(group.prefix)
        self.total_with_note += bool(group.note)
        if group.stability is not None:
            self.stability_breakdown[group.stability] = (
                self.stability_breakdown.get(group.stability, 0) + 1
            )
        self.deprecated_count += group.deprecated is not None
        card = len(group.attributes)
        breakdown = dict(self.attribute_card_breakdown)
        breakdown[card] = breakdown.get(card, 0) + 1
        self.attribute_card_breakdown = dict(sorted(breakdown.items()))


@dataclass
class GroupStats:
    """Statistics for one type of group.

    Metric groups also track names, instruments and units; span groups track
    span kinds.
    """

    group_type: GroupType
    common_stats: CommonGroupStats = field(default_factory=CommonGroupStats)
    metric_names: set[str] = field(default_factory=set)
    instrument_breakdown: dict[InstrumentSpec, int] = field(default_factory=dict)
    unit_breakdown: dict[str, int] = field(default_factory=dict)
    span_kind_breakdown: dict[SpanKindSpec, int] = field(default_factory=dict)

    def update(self, group: Group) -> None:
        """Account for ``group``, which must be of this type."""
        self.common_stats.update_stats(group)
        if self.group_type is GroupType.METRIC:
            if group.metric_name is None:
                raise ValueError("metric_name is required as we are in a metric group")
            if group.instrument is None:
                raise ValueError("instrument is required as we are in a metric group")
            if group.unit is None:
                raise ValueError("unit is required as we are in a metric group")
            self.metric_names.add(group.metric_name)
            self.instrument_breakdown[group.instrument] = (
                self.instrument_breakdown.get(group.instrument, 0) + 1
            )
            self.unit_breakdown[group.unit] = self.unit_breakdown.get(group.unit, 0) + 1
        elif self.group_type is GroupType.SPAN and group.span_kind is not None:
            self.span_kind_breakdown[group.span_kind] = (
                self.span_kind_breakdown.get(group.span_kind, 0) + 1
            )


@dataclass
class RegistryStats:
    """Statistics on a registry."""

    url: str
    group_count: int
    group_breakdown: dict[GroupType, GroupStats]


@dataclass
class Registry:
    """A resolved semantic convention registry."""

    registry_url: str = ""
    groups: list[Group] = field(default_factory=list)

    def groups_of_type(self, group_type: GroupType) -> Iterator[Group]:
        """Iterate over the groups of ``group_type``."""
        return (group for group in self.groups if group.type == group_type)

    def stats(self) -> RegistryStats:
        """Statistics on the registry.

        The first group met of each type only opens its entry in the
        breakdown; later groups of that type are counted into it.
        """
        breakdown: dict[GroupType, GroupStats] = {}
        for group in self.groups:
            stats = breakdown.get(group.type)
            if stats is None:
                breakdown[group.type] = GroupStats(group.type)
            else:
                stats.update(group)
        return RegistryStats(
            url=self.registry_url, group_count=len(self.groups), group_breakdown=breakdown
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; an empty URL is left out."""
        data: dict[str, Any] = {}
        if self.registry_url:
            data["registry_url"] = self.registry_url
        data["groups"] = [group.to_dict() for group in self.groups]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Registry:
        """Build a registry from its serialized form."""
        _check_fields(data, required={"groups"}, allowed={"registry_url", "groups"})
        return cls(
            registry_url=data.get("registry_url") or "",
            groups=[Group.from_dict(g) for g in data["groups"]],
        )