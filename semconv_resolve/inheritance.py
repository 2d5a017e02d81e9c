"""Building unresolved registries and resolving prefixes and ``extends`` clauses."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

from .errors import CompoundError, UnresolvedExtendsRefError
from .lineage import AttributeLineage, GroupLineage
from .registry import Constraint, Group, Registry
from .spec import (
    AttributeIdSpec,
    AttributeRefSpec,
    ConstraintSpec,
    GroupSpecWithProvenance,
    SemConvRegistry,
)

AttributeSpec = Union[AttributeRefSpec, AttributeIdSpec]


@dataclass
class UnresolvedAttribute:
    """An attribute specification not yet turned into a catalog reference."""

    spec: AttributeSpec


@dataclass
class UnresolvedGroup:
    """A group whose attributes are still being resolved."""

    group: Group
    attributes: list[UnresolvedAttribute] = field(default_factory=list)
    provenance: str = ""


@dataclass
class UnresolvedRegistry:
    """A registry together with the groups that still await resolution."""

    registry: Registry
    groups: list[UnresolvedGroup] = field(default_factory=list)


def resolve_constraint(constraint: ConstraintSpec) -> Constraint:
    """Turn a constraint specification into a resolved constraint."""
    return Constraint(any_of=tuple(constraint.any_of), include=constraint.include)


def resolve_constraints(constraints: Iterable[ConstraintSpec]) -> list[Constraint]:
    """Turn constraint specifications into resolved constraints."""
    return [resolve_constraint(c) for c in constraints]


def group_from_spec(group: GroupSpecWithProvenance) -> UnresolvedGroup:
    """Build an unresolved group from a group specification; references stay as is."""
    spec = group.spec
    return UnresolvedGroup(
        group=Group(
            id=spec.id,
            type=spec.type,
            brief=spec.brief,
            note=spec.note,
            prefix=spec.prefix,
            extends=spec.extends,
            stability=spec.stability,
            deprecated=spec.deprecated,
            constraints=resolve_constraints(spec.constraints),
            attributes=[],
            span_kind=spec.span_kind,
            events=list(spec.events),
            metric_name=spec.metric_name,
            instrument=spec.instrument,
            unit=spec.unit,
            name=spec.name,
            lineage=GroupLineage(group.provenance),
            display_name=spec.display_name,
        ),
        attributes=[UnresolvedAttribute(dataclasses.replace(attr)) for attr in spec.attributes],
        provenance=group.provenance,
    )


def unresolved_registry_from_specs(
    registry_url: str, registry: SemConvRegistry
) -> UnresolvedRegistry:
    """An unresolved registry holding every group of ``registry``."""
    return UnresolvedRegistry(
        registry=Registry(registry_url=registry_url, groups=[]),
        groups=[group_from_spec(g) for g in registry.groups_with_provenance()],
    )


def resolve_prefix_on_attributes(ureg: UnresolvedRegistry) -> None:
    """Prepend each group's prefix to the ids of the attributes it defines."""
    for unresolved in ureg.groups:
        prefix = unresolved.group.prefix
        if not prefix:
            continue
        for attribute in unresolved.attributes:
            if isinstance(attribute.spec, AttributeIdSpec):
                attribute.spec = dataclasses.replace(
                    attribute.spec, name=f"{prefix}.{attribute.spec.name}"
                )


def resolve_extends_references(ureg: UnresolvedRegistry) -> None:
    """Resolve every ``extends`` clause, repeating until none is left.

    Raises a compound error when a pass resolves nothing but some clauses remain.
    """
    while True:
        errors: list[UnresolvedExtendsRefError] = []
        resolved_count = 0

        index = {
            g.group.id: list(g.attributes) for g in ureg.groups if g.group.extends is None
        }

        for unresolved in ureg.groups:
            extends = unresolved.group.extends
            if extends is None:
                continue
            parent_attrs = index.get(extends)
            if parent_attrs is None:
                errors.append(
                    UnresolvedExtendsRefError(
                        group_id=unresolved.group.id,
                        extends_ref=extends,
                        provenance=unresolved.provenance,
                    )
                )
                continue
            unresolved.attributes = resolve_inheritance_attrs(
                unresolved.group.id,
                unresolved.attributes,
                extends,
                parent_attrs,
                unresolved.group.lineage,
            )
            unresolved.group.extends = None
            index[unresolved.group.id] = list(unresolved.attributes)
            resolved_count += 1

        if not errors:
            return
        if resolved_count == 0:
            raise CompoundError(errors)


def resolve_inheritance_attrs(
    group_id: str,
    attrs_group: Iterable[UnresolvedAttribute],
    parent_group_id: str,
    attrs_parent_group: Iterable[UnresolvedAttribute],
    group_lineage: GroupLineage | None,
) -> list[UnresolvedAttribute]:
    """Merge a group's attributes over its parent's, sorted by attribute id.

    Non-empty attribute lineages are recorded in ``group_lineage`` when given.
    """
    inherited: dict[str, tuple[AttributeSpec, AttributeLineage]] = {}

    for parent_attr in attrs_parent_group:
        inherited[parent_attr.spec.id()] = (
            parent_attr.spec,
            AttributeLineage.inherit_from(parent_group_id, parent_attr.spec),
        )

    for attr in attrs_group:
        spec = attr.spec
        if isinstance(spec, AttributeRefSpec) and spec.ref in inherited:
            parent_spec, lineage = inherited[spec.ref]
            inherited[spec.ref] = (resolve_inheritance_attr(spec, parent_spec, lineage), lineage)
        else:
            inherited[spec.id()] = (spec, AttributeLineage(group_id))

    result: list[UnresolvedAttribute] = []
    for attr_id in sorted(inherited):
        spec, lineage = inherited[attr_id]
        if group_lineage is not None and not lineage.is_empty():
            group_lineage.add_attribute_lineage(spec.id(), lineage)
        result.append(UnresolvedAttribute(spec))
    return result


def resolve_inheritance_attr(
    attr: AttributeSpec, parent_attr: AttributeSpec, lineage: AttributeLineage
) -> AttributeSpec:
    """Apply the overrides of reference ``attr`` on ``parent_attr``.

    A definition is returned unchanged. A reference over a definition becomes
    a definition under the referenced id.
    """
    if isinstance(attr, AttributeIdSpec):
        return attr
    if isinstance(parent_attr, AttributeRefSpec):
        return AttributeRefSpec(
            ref=attr.ref,
            brief=lineage.optional_brief(attr.brief, parent_attr.brief),
            examples=lineage.examples(attr.examples, parent_attr.examples),
            tag=lineage.tag(attr.tag, parent_attr.tag),
            requirement_level=lineage.optional_requirement_level(
                attr.requirement_level, parent_attr.requirement_level
            ),
            sampling_relevant=lineage.sampling_relevant(
                attr.sampling_relevant, parent_attr.sampling_relevant
            ),
            note=lineage.optional_note(attr.note, parent_attr.note),
            stability=lineage.stability(attr.stability, parent_attr.stability),
            deprecated=lineage.deprecated(attr.deprecated, parent_attr.deprecated),
            prefix=lineage.prefix(attr.prefix, parent_attr.prefix),
        )
    return AttributeIdSpec(
        name=attr.ref,
        type=parent_attr.type,
        brief=lineage.optional_brief(attr.brief, parent_attr.brief),
        examples=lineage.examples(attr.examples, parent_attr.examples),
        tag=lineage.tag(attr.tag, parent_attr.tag),
        requirement_level=lineage.requirement_level(
            attr.requirement_level, parent_attr.requirement_level
        ),
        sampling_relevant=lineage.sampling_relevant(
            attr.sampling_relevant, parent_attr.sampling_relevant
        ),
        note=lineage.note(attr.note, parent_attr.note),
        stability=lineage.stability(attr.stability, parent_attr.stability),
        deprecated=lineage.deprecated(attr.deprecated, parent_attr.deprecated),
    )