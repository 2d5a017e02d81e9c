"""Deduplicating catalog used while resolving attribute specifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .lineage import AttributeLineage, GroupLineage
from .model import Attribute, AttributeRef
from .spec import AttributeIdSpec, AttributeRefSpec


@dataclass
class _RootAttribute:
    attribute: Attribute
    group_id: str


class AttributeCatalog:
    """Resolved attributes, each stored once under a stable reference.

    Root attributes (those not inheriting from another) are also indexed by
    name so that later references can be resolved against them.
    """

    def __init__(self) -> None:
        self._refs: dict[Attribute, AttributeRef] = {}
        self._roots: dict[str, _RootAttribute] = {}

    def attribute_ref(self, attr: Attribute) -> AttributeRef:
        """The reference of ``attr``, created if the attribute is new."""
        ref = self._refs.get(attr)
        if ref is None:
            ref = AttributeRef(len(self._refs))
            self._refs[attr] = ref
        return ref

    def _ordered(self) -> list[Attribute]:
        return [attr for attr, _ in sorted(self._refs.items(), key=lambda item: item[1].index)]

    def drain_attributes(self) -> list[Attribute]:
        """Remove and return all attributes, ordered by reference."""
        attributes = self._ordered()
        self._refs.clear()
        self._roots.clear()
        return attributes

    def attribute_name_index(self) -> list[str]:
        """Attribute names ordered by reference."""
        return [attr.name for attr in self._ordered()]

    def resolve(
        self,
        group_id: str,
        group_prefix: str,
        attr: Union[AttributeRefSpec, AttributeIdSpec],
        lineage: GroupLineage | None = None,
    ) -> AttributeRef | None:
        """Resolve an attribute spec to a catalog reference.

        Returns None for a reference whose target is not known yet.
        """
        if isinstance(attr, AttributeIdSpec):
            resolved = Attribute(
                name=attr.name,
                type=attr.type,
                brief=attr.brief if attr.brief is not None else "",
                examples=attr.examples,
                tag=attr.tag,
                requirement_level=attr.requirement_level,
                sampling_relevant=attr.sampling_relevant,
                note=attr.note,
                stability=attr.stability,
                deprecated=attr.deprecated,
            )
            self._roots[attr.name] = _RootAttribute(resolved, group_id)
            return self.attribute_ref(resolved)

        root = self._roots.get(attr.ref)
        if root is None:
            return None

        parent = root.attribute
        attr_lineage = AttributeLineage(root.group_id)
        name = f"{group_prefix}.{attr.ref}" if attr.prefix else attr.ref
        resolved = Attribute(
            name=name,
            type=parent.type,
            brief=attr_lineage.brief(attr.brief, parent.brief),
            examples=attr_lineage.examples(attr.examples, parent.examples),
            tag=attr_lineage.tag(attr.tag, parent.tag),
            requirement_level=attr_lineage.requirement_level(
                attr.requirement_level, parent.requirement_level
            ),
            sampling_relevant=attr_lineage.sampling_relevant(
                attr.sampling_relevant, parent.sampling_relevant
            ),
            note=attr_lineage.note(attr.note, parent.note),
            stability=attr_lineage.stability(attr.stability, parent.stability),
            deprecated=attr_lineage.deprecated(attr.deprecated, parent.deprecated),
            prefix=attr.prefix,
            tags=parent.tags,
            value=parent.value,
        )
        ref = self.attribute_ref(resolved)
        if lineage is not None:
            lineage.add_attribute_lineage(name, attr_lineage)
        if attr.prefix:
            self._roots[name] = _RootAttribute(resolved, group_id)
        return ref