"""Lineage of resolved attributes and groups: where each field came from."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar, Union

from .spec import AttributeIdSpec, AttributeRefSpec, RequirementLevel, Stability

_T = TypeVar("_T")


@dataclass
class AttributeLineage:
    """Per-field lineage of an attribute: inherited or locally overridden."""

    source_group: str
    inherited_fields: set[str] = field(default_factory=set)
    locally_overridden_fields: set[str] = field(default_factory=set)

    @classmethod
    def inherit_from(
        cls, source_group: str, attr_spec: Union[AttributeRefSpec, AttributeIdSpec]
    ) -> AttributeLineage:
        """A lineage marking every field the spec carries as inherited."""
        lineage = cls(source_group)
        present: dict[str, bool]
        if isinstance(attr_spec, AttributeRefSpec):
            present = {
                "brief": attr_spec.brief is not None,
                "examples": attr_spec.examples is not None,
                "tag": attr_spec.tag is not None,
                "requirement_level": attr_spec.requirement_level is not None,
                "sampling_relevant": attr_spec.sampling_relevant is not None,
                "note": attr_spec.note is not None,
                "stability": attr_spec.stability is not None,
                "deprecated": attr_spec.deprecated is not None,
                "prefix": bool(attr_spec.prefix),
            }
        else:
            present = {
                "brief": attr_spec.brief is not None,
                "examples": attr_spec.examples is not None,
                "tag": attr_spec.tag is not None,
                "requirement_level": True,
                "sampling_relevant": attr_spec.sampling_relevant is not None,
                "note": True,
                "stability": attr_spec.stability is not None,
                "deprecated": attr_spec.deprecated is not None,
            }
        lineage.inherited_fields.update(name for name, is_set in present.items() if is_set)
        return lineage

    def is_empty(self) -> bool:
        """True when no field is recorded as inherited or overridden."""
        return not self.inherited_fields and not self.locally_overridden_fields

    def _mark_local(self, name: str) -> None:
        self.locally_overridden_fields.add(name)
        self.inherited_fields.discard(name)

    def _required(self, name: str, local_value: _T | None, parent_value: _T) -> _T:
        if local_value is not None:
            self._mark_local(name)
            return local_value
        self.inherited_fields.add(name)
        return parent_value

    def _optional(self, name: str, local_value: _T | None, parent_value: _T | None) -> _T | None:
        if local_value is not None:
            self._mark_local(name)
            return local_value
        if parent_value is not None:
            self.inherited_fields.add(name)
        return parent_value

    def brief(self, local_value: str | None, parent_value: str) -> str:
        """The local brief if given, else the parent's, recording which."""
        return self._required("brief", local_value, parent_value)

    def optional_brief(self, local_value: str | None, parent_value: str | None) -> str | None:
        """The local brief if given, else the parent's (which may be absent)."""
        return self._optional("brief", local_value, parent_value)

    def note(self, local_value: str | None, parent_value: str) -> str:
        """The local note if given, else the parent's, recording which."""
        return self._required("note", local_value, parent_value)

    def optional_note(self, local_value: str | None, parent_value: str | None) -> str | None:
        """The local note if given, else the parent's (which may be absent)."""
        return self._optional("note", local_value, parent_value)

    def requirement_level(
        self, local_value: RequirementLevel | None, parent_value: RequirementLevel
    ) -> RequirementLevel:
        """The local requirement level if given, else the parent's."""
        return self._required("requirement_level", local_value, parent_value)

    def optional_requirement_level(
        self, local_value: RequirementLevel | None, parent_value: RequirementLevel | None
    ) -> RequirementLevel | None:
        """The local requirement level if given, else the parent's (may be absent)."""
        return self._optional("requirement_level", local_value, parent_value)

    def examples(self, local_value: Any, parent_value: Any) -> Any:
        """The local examples if given, else the parent's."""
        return self._optional("examples", local_value, parent_value)

    def stability(
        self, local_value: Stability | None, parent_value: Stability | None
    ) -> Stability | None:
        """The local stability if given, else the parent's."""
        return self._optional("stability", local_value, parent_value)

    def deprecated(self, local_value: str | None, parent_value: str | None) -> str | None:
        """The local deprecation note if given, else the parent's."""
        return self._optional("deprecated", local_value, parent_value)

    def tag(self, local_value: str | None, parent_value: str | None) -> str | None:
        """The local tag if given, else the parent's."""
        return self._optional("tag", local_value, parent_value)

    def sampling_relevant(
        self, local_value: bool | None, parent_value: bool | None
    ) -> bool | None:
        """The local sampling flag if given, else the parent's."""
        return self._optional("sampling_relevant", local_value, parent_value)

    def prefix(self, local_value: bool, parent_value: bool) -> bool:
        """True if set locally or by the parent, recording which."""
        if local_value:
            self._mark_local("prefix")
            return local_value
        if parent_value:
            self.inherited_fields.add("prefix")
        return parent_value

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; empty field sets are left out."""
        data: dict[str, Any] = {"source_group": self.source_group}
        if self.inherited_fields:
            data["inherited_fields"] = sorted(self.inherited_fields)
        if self.locally_overridden_fields:
            data["locally_overridden_fields"] = sorted(self.locally_overridden_fields)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AttributeLineage:
        """Build a lineage from its serialized form."""
        if "source_group" not in data:
            raise ValueError("missing field(s): source_group")
        return cls(
            source_group=data["source_group"],
            inherited_fields=set(data.get("inherited_fields", ())),
            locally_overridden_fields=set(data.get("locally_overridden_fields", ())),
        )


class GroupLineage:
    """The source file of a group and the lineage of each of its attributes."""

    def __init__(self, provenance: str) -> None:
        self._source_file = provenance.replace("\\", "/")
        self.attributes: dict[str, AttributeLineage] = {}

    def add_attribute_lineage(self, attr_id: str, attribute_lineage: AttributeLineage) -> None:
        """Record (or replace) the lineage of an attribute."""
        self.attributes[attr_id] = attribute_lineage

    def source_file(self) -> str:
        """The path or URL the group was defined in."""
        return self._source_file

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupLineage):
            return NotImplemented
        return self._source_file == other._source_file and self.attributes == other.attributes

    def __repr__(self) -> str:
        return f"GroupLineage(source_file={self._source_file!r}, attributes={self.attributes!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialized form, attributes sorted by id."""
        data: dict[str, Any] = {"source_file": self._source_file}
        if self.attributes:
            data["attributes"] = {
                attr_id: self.attributes[attr_id].to_dict() for attr_id in sorted(self.attributes)
            }
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GroupLineage:
        """Build a group lineage from its serialized form."""
        if "source_file" not in data:
            raise ValueError("missing field(s): source_file")
        lineage = cls(data["source_file"])
        lineage._source_file = data["source_file"]
        for attr_id, attr_data in data.get("attributes", {}).items():
            lineage.add_attribute_lineage(attr_id, AttributeLineage.from_dict(attr_data))
        return lineage