"""The catalog of resolved attributes shared across groups and signals."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .model import Attribute, AttributeRef, _check_fields
from .spec import Stability


@dataclass
class CatalogStats:
    """Statistics on a catalog."""

    attribute_count: int
    attribute_type_breakdown: dict[str, int]
    requirement_level_breakdown: dict[str, int]
    stability_breakdown: dict[Stability, int]
    deprecated_count: int


def _sorted_counts(counter: Counter) -> dict[str, int]:
    return {key: counter[key] for key in sorted(counter)}


def _type_key(attr: Attribute) -> str:
    if attr.type.name == "enum":
        return f"enum(card:{len(attr.type.members):03})"
    return attr.type.display()


@dataclass
class Catalog:
    """Indexed attributes, referred to by :class:`AttributeRef`."""

    attributes: list[Attribute] = field(default_factory=list)

    def attribute(self, attribute_ref: AttributeRef) -> Attribute | None:
        """The attribute at ``attribute_ref``, or None if out of range."""
        if 0 <= attribute_ref.index < len(self.attributes):
            return self.attributes[attribute_ref.index]
        return None

    def attribute_name(self, attribute_ref: AttributeRef) -> str | None:
        """The name of the attribute at ``attribute_ref``, or None."""
        attr = self.attribute(attribute_ref)
        return attr.name if attr is not None else None

    def stats(self) -> CatalogStats:
        """Statistics on the catalog."""
        return CatalogStats(
            attribute_count=len(self.attributes),
            attribute_type_breakdown=_sorted_counts(Counter(map(_type_key, self.attributes))),
            requirement_level_breakdown=_sorted_counts(
                Counter(attr.requirement_level.label() for attr in self.attributes)
            ),
            stability_breakdown=dict(
                Counter(attr.stability for attr in self.attributes if attr.stability is not None)
            ),
            deprecated_count=sum(1 for attr in self.attributes if attr.deprecated is not None),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialized form; an empty attribute list is left out."""
        if not self.attributes:
            return {}
        return {"attributes": [attr.to_dict() for attr in self.attributes]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Catalog:
        """Build a catalog from its serialized form."""
        _check_fields(data, required=set(), allowed={"attributes"})
        return cls([Attribute.from_dict(item) for item in data.get("attributes", [])])