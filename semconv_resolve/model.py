"""Resolved attributes, attribute references, tags and values."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .spec import AttributeType, BasicRequirementLevel, RequirementLevel, Stability

_U32_MAX = 0xFFFF_FFFF
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


@dataclass(frozen=True, order=True)
class AttributeRef:
    """An index into the attribute catalog."""

    index: int

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError("an attribute reference is an integer")
        if not 0 <= self.index <= _U32_MAX:
            raise ValueError(f"attribute reference out of range: {self.index}")

    def __str__(self) -> str:
        return f"AttributeRef({self.index})"


@dataclass(frozen=True)
class Tags:
    """A set of key/value tags, kept sorted by key."""

    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        items = sorted((str(k), str(v)) for k, v in dict(self.tags).items())
        object.__setattr__(self, "tags", MappingProxyType(dict(items)))

    def __hash__(self) -> int:
        return hash(tuple(self.tags.items()))

    def to_dict(self) -> dict[str, str]:
        """The tags as a plain dictionary."""
        return dict(self.tags)


_VALUE_TYPES = ("Int", "Double", "String")


@dataclass(frozen=True, eq=False)
class Value:
    """An integer, double or string value; NaN doubles compare equal."""

    type: str
    value: Union[int, float, str]

    def __post_init__(self) -> None:
        if self.type not in _VALUE_TYPES:
            raise ValueError(f"unknown value type: {self.type!r}")
        if self.type == "Int":
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise TypeError("an Int value needs an integer")
            if not _I64_MIN <= self.value <= _I64_MAX:
                raise ValueError(f"integer out of range: {self.value}")
        elif self.type == "Double":
            if isinstance(self.value, (bool, str)):
                raise TypeError("a Double value needs a number")
            object.__setattr__(self, "value", float(self.value))
        elif not isinstance(self.value, str):
            raise TypeError("a String value needs a string")

    @classmethod
    def from_f64(cls, value: float) -> Value:
        """A double value."""
        return cls("Double", value)

    def _key(self) -> tuple[str, Any]:
        if self.type == "Double" and math.isnan(self.value):
            return (self.type, "nan")
        return (self.type, self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def to_dict(self) -> dict[str, Any]:
        """Serialized form, tagged by ``type``."""
        return {"type": self.type, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Value:
        """Build a value from its serialized form."""
        _check_fields(data, required={"type", "value"}, allowed={"type", "value"})
        return cls(data["type"], data["value"])


def _check_fields(data: Mapping[str, Any], *, required: set[str], allowed: set[str]) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"unknown field(s): {', '.join(sorted(unknown))}")
    missing = required - set(data)
    if missing:
        raise ValueError(f"missing field(s): {', '.join(sorted(missing))}")


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _type_to_json(attr_type: AttributeType) -> Any:
    if attr_type.name != "enum":
        return attr_type.name
    data: dict[str, Any] = {
        "members": [{"id": ident, "value": value} for ident, value in attr_type.members]
    }
    if attr_type.allow_custom_values is not None:
        data["allow_custom_values"] = attr_type.allow_custom_values
    return data


def _type_from_json(data: Any) -> AttributeType:
    if isinstance(data, str):
        return AttributeType(data)
    if not isinstance(data, Mapping):
        raise ValueError(f"invalid attribute type: {data!r}")
    _check_fields(data, required={"members"}, allowed={"members", "allow_custom_values"})
    members = []
    for member in data["members"]:
        _check_fields(member, required={"id", "value"}, allowed={"id", "value"})
        members.append((member["id"], member["value"]))
    return AttributeType(
        "enum", members=tuple(members), allow_custom_values=data.get("allow_custom_values")
    )


def _requirement_to_json(level: RequirementLevel) -> Any:
    if level.basic is not None:
        return level.basic.value
    if level.conditionally_required is not None:
        return {"conditionally_required": level.conditionally_required}
    return {"recommended": level.recommended}


def _requirement_from_json(data: Any) -> RequirementLevel:
    if isinstance(data, str):
        return RequirementLevel(BasicRequirementLevel(data))
    if isinstance(data, Mapping) and len(data) == 1:
        ((key, text),) = data.items()
        if key == "conditionally_required":
            return RequirementLevel(conditionally_required=text)
        if key == "recommended":
            return RequirementLevel(recommended=text)
    raise ValueError(f"invalid requirement level: {data!r}")


_ATTRIBUTE_FIELDS = {
    "name",
    "type",
    "brief",
    "examples",
    "tag",
    "requirement_level",
    "sampling_relevant",
    "note",
    "stability",
    "deprecated",
    "prefix",
    "tags",
    "value",
}


@dataclass(frozen=True)
class Attribute:
    """A fully resolved attribute definition."""

    name: str
    type: AttributeType
    brief: str = ""
    examples: Any = None
    tag: str | None = None
    requirement_level: RequirementLevel = field(default_factory=RequirementLevel)
    sampling_relevant: bool | None = None
    note: str = ""
    stability: Stability | None = None
    deprecated: str | None = None
    prefix: bool = False
    tags: Tags | None = None
    value: Value | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "examples", _freeze(self.examples))

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty and absent fields are left out."""
        data: dict[str, Any] = {"name": self.name, "type": _type_to_json(self.type)}
        if self.brief:
            data["brief"] = self.brief
        if self.examples is not None:
            data["examples"] = _thaw(self.examples)
        if self.tag is not None:
            data["tag"] = self.tag
        data["requirement_level"] = _requirement_to_json(self.requirement_level)
        if self.sampling_relevant is not None:
            data["sampling_relevant"] = self.sampling_relevant
        if self.note:
            data["note"] = self.note
        if self.stability is not None:
            data["stability"] = self.stability.value
        if self.deprecated is not None:
            data["deprecated"] = self.deprecated
        if self.prefix:
            data["prefix"] = True
        if self.tags is not None:
            data["tags"] = self.tags.to_dict()
        if self.value is not None:
            data["value"] = self.value.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Attribute:
        """Build an attribute from its serialized form."""
        _check_fields(
            data, required={"name", "type", "requirement_level"}, allowed=_ATTRIBUTE_FIELDS
        )
        stability = data.get("stability")
        tags = data.get("tags")
        value = data.get("value")
        return cls(
            name=data["name"],
            type=_type_from_json(data["type"]),
            brief=data.get("brief", ""),
            examples=data.get("examples"),
            tag=data.get("tag"),
            requirement_level=_requirement_from_json(data["requirement_level"]),
            sampling_relevant=data.get("sampling_relevant"),
            note=data.get("note", ""),
            stability=Stability(stability) if stability is not None else None,
            deprecated=data.get("deprecated"),
            prefix=bool(data.get("prefix", False)),
            tags=Tags(tags) if tags is not None else None,
            value=Value.from_dict(value) if value is not None else None,
        )