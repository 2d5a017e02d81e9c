"""Resolution of a semantic convention registry into a resolved telemetry schema."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .attribute_catalog import AttributeCatalog
from .catalog import Catalog
from .errors import (
    CompoundError,
    ResolutionError,
    UnresolvedAttributeRefError,
    UnresolvedIncludeRefError,
    UnsatisfiedAnyOfConstraintError,
    handle_errors,
)
from .inheritance import (
    UnresolvedRegistry,
    resolve_extends_references,
    resolve_prefix_on_attributes,
    unresolved_registry_from_specs,
)
from .model import AttributeRef
from .registry import Constraint, Registry
from .schema import ResolvedTelemetrySchema
from .spec import AttributeRefSpec, SemConvRegistry


def resolve_semconv_registry(
    attr_catalog: AttributeCatalog, registry_url: str, registry: SemConvRegistry
) -> Registry:
    """Resolve ``registry`` into a registry whose attributes live in ``attr_catalog``.

    Prefixes, ``extends`` clauses, attribute references and ``include``
    constraints are resolved in turn, then every ``any_of`` constraint is
    checked. Raises a compound error when any step fails.
    """
    ureg = unresolved_registry_from_specs(registry_url, registry)

    resolve_prefix_on_attributes(ureg)
    resolve_extends_references(ureg)
    resolve_attribute_references(ureg, attr_catalog)
    resolve_include_constraints(ureg)

    groups = []
    for unresolved in ureg.groups:
        unresolved.group.attributes.sort(key=lambda ref: ref.index)
        groups.append(unresolved.group)
    ureg.registry.groups = groups
    ureg.groups = []

    check_any_of_constraints(ureg.registry, attr_catalog.attribute_name_index())

    for group in ureg.registry.groups:
        group.constraints.clear()

    return ureg.registry


def check_any_of_constraints(registry: Registry, attr_name_index: Sequence[str]) -> None:
    """Check every group's ``any_of`` constraints against its attribute names.

    Raises a compound error listing unknown references and unsatisfied constraints.
    """
    errors: list[ResolutionError] = []

    for group in registry.groups:
        names: set[str] = set()
        for attr_ref in group.attributes:
            if 0 <= attr_ref.index < len(attr_name_index):
                names.add(attr_name_index[attr_ref.index])
            else:
                errors.append(
                    UnresolvedAttributeRefError(
                        group_id=group.id,
                        attribute_ref=str(attr_ref.index),
                        provenance=group.provenance(),
                    )
                )
        try:
            check_group_any_of_constraints(group.id, names, group.constraints)
        except ResolutionError as error:
            errors.append(error)

    handle_errors(errors)


def check_group_any_of_constraints(
    group_id: str, group_attr_names: Iterable[str], constraints: Iterable[Constraint]
) -> None:
    """Check the ``any_of`` constraints of one group.

    Raises a compound error with one entry per unsatisfied constraint.
    """
    names = set(group_attr_names)
    unsatisfied: dict[Constraint, list[str]] = {}

    for constraint in constraints:
        if not constraint.any_of:
            continue
        missing = next((name for name in constraint.any_of if name not in names), None)
        if missing is not None:
            unsatisfied.setdefault(constraint, []).append(missing)

    if unsatisfied:
        raise CompoundError(
            UnsatisfiedAnyOfConstraintError(
                group_id=group_id, any_of=constraint, missing_attributes=missing_attrs
            )
            for constraint, missing_attrs in unsatisfied.items()
        )


def resolve_attribute_references(
    ureg: UnresolvedRegistry, attr_catalog: AttributeCatalog
) -> None:
    """Resolve attribute specifications into catalog references, repeating passes.

    Raises a compound error when a pass resolves nothing but references remain.
    """
    while True:
        errors: list[UnresolvedAttributeRefError] = []
        resolved_count = 0

        for unresolved in ureg.groups:
            group = unresolved.group
            resolved: list[AttributeRef] = []
            remaining = []
            for attr in unresolved.attributes:
                attr_ref = attr_catalog.resolve(group.id, group.prefix, attr.spec, group.lineage)
                if attr_ref is not None:
                    resolved.append(attr_ref)
                    resolved_count += 1
                    continue
                if isinstance(attr.spec, AttributeRefSpec):
                    errors.append(
                        UnresolvedAttributeRefError(
                            group_id=group.id,
                            attribute_ref=attr.spec.ref,
                            provenance=unresolved.provenance,
                        )
                    )
                remaining.append(attr)
            unresolved.attributes = remaining
            group.attributes.extend(resolved)

        if not errors:
            return
        if resolved_count == 0:
            raise CompoundError(errors)


def resolve_include_constraints(ureg: UnresolvedRegistry) -> None:
    """Import attributes and ``any_of`` constraints of included groups, repeating passes.

    Raises a compound error when a pass resolves nothing but includes remain.
    """
    while True:
        errors: list[UnresolvedIncludeRefError] = []
        resolved_count = 0

        attrs_index: dict[str, list[AttributeRef]] = {}
        any_of_index: dict[str, list[Constraint]] = {}
        for unresolved in ureg.groups:
            group = unresolved.group
            if group.has_include():
                continue
            attrs_index[group.id] = list(group.attributes)
            any_of_index[group.id] = [
                Constraint(any_of=c.any_of, include=None) for c in group.constraints if c.any_of
            ]

        for unresolved in ureg.groups:
            group = unresolved.group
            attributes_to_import: list[AttributeRef] = []
            any_of_to_import: list[Constraint] = []
            resolved_includes: set[str] = set()

            for constraint in group.constraints:
                include = constraint.include
                if include is None:
                    continue
                attributes = attrs_index.get(include)
                if attributes is None:
                    errors.append(
                        UnresolvedIncludeRefError(
                            group_id=group.id,
                            include_ref=include,
                            provenance=unresolved.provenance,
                        )
                    )
                    continue
                attributes_to_import.extend(attributes)
                resolved_includes.add(include)
                any_of_to_import.extend(any_of_index.get(include, ()))
                resolved_count += 1

            if attributes_to_import:
                group.import_attributes_from(attributes_to_import)
                group.update_constraints(any_of_to_import, resolved_includes)

        if not errors:
            return
        if resolved_count == 0:
            raise CompoundError(errors)


def resolve_semantic_convention_registry(registry: SemConvRegistry) -> ResolvedTelemetrySchema:
    """Resolve ``registry`` into a self-contained telemetry schema."""
    attr_catalog = AttributeCatalog()
    resolved_registry = resolve_semconv_registry(attr_catalog, "", registry)
    catalog = Catalog(attributes=attr_catalog.drain_attributes())
    return ResolvedTelemetrySchema(
        file_format="1.0.0",
        schema_url="",
        catalog=catalog,
        registries={registry.id: resolved_registry},
        resource=None,
        instrumentation_library=None,
        dependencies=[],
        versions=None,
    )