# semconv-resolve

Resolve a registry of semantic convention groups into a self-contained
resolved telemetry schema. Group prefixes are applied to the attributes a
group defines, `extends` clauses are inherited, attribute references are
looked up, `include` constraints are merged, and `any_of` constraints are
checked. Every resolved attribute is deduplicated into a shared catalog and
referred to by an `AttributeRef`. The lineage of each group (its source file
and where each attribute field came from) is kept in a `GroupLineage`.

## Installation

```
pip install semconv-resolve
```

The package has no runtime dependencies.

## Usage

Build a `SemConvRegistry` from `GroupSpec` objects, then resolve it:

```python
from semconv_resolve.spec import (
    AttributeIdSpec, AttributeRefSpec, AttributeType, GroupSpec, GroupType,
    SemConvRegistry,
)
from semconv_resolve.resolution import resolve_semantic_convention_registry

registry = SemConvRegistry("local")
registry.add_group(
    GroupSpec(
        id="registry.http",
        type=GroupType.ATTRIBUTE_GROUP,
        brief="HTTP attributes",
        prefix="http",
        attributes=[AttributeIdSpec(name="method", type=AttributeType("string"), brief="Method")],
    ),
    "http.yaml",
)
registry.add_group(
    GroupSpec(
        id="span.http.client",
        type=GroupType.SPAN,
        brief="HTTP client span",
        attributes=[AttributeRefSpec(ref="http.method")],
    ),
    "http.yaml",
)

schema = resolve_semantic_convention_registry(registry)
resolved = schema.registry("local")
for span in resolved.groups_of_type(GroupType.SPAN):
    for attribute in span.resolved_attributes(schema.catalog):
        print(span.id, attribute.name)   # span.http.client http.method
```

`AttributeType` takes a primitive name (`"string"`, `"int[]"`,
`"template[double]"`, …) or `"enum"` with `(id, value)` members.
`RequirementLevel` is a basic level (`required`, `recommended`, `opt_in`,
`optional`) or one qualified by a `conditionally_required` or `recommended`
text; with nothing given it is `recommended`.

For finer control, `semconv_resolve.resolution.resolve_semconv_registry`
resolves into an `AttributeCatalog` you supply, and
`check_group_any_of_constraints` checks a set of attribute names against a
list of `Constraint` objects.

## Errors

A registry that cannot be resolved raises an error derived from
`semconv_resolve.errors.ResolutionError`. Problems found in one pass are
collected into a single `CompoundError`, whose `errors` attribute lists each
of them, for example `UnresolvedAttributeRefError`,
`UnresolvedExtendsRefError`, `UnresolvedIncludeRefError` or
`UnsatisfiedAnyOfConstraintError`. `Group.resolved_attributes` raises a
`CompoundError` of `AttributeNotFoundError` for references missing from the
catalog. `ResolutionError.log(logger)` passes each message to
`logger.error`.

## Statistics

`ResolvedTelemetrySchema.stats()` returns a `SchemaStats`: the number of
registries, a `RegistryStats` per registry (`Registry.stats()`, with a
`GroupStats` breakdown by group type), and a `CatalogStats`
(`Catalog.stats()`) counting attributes by type, requirement level and
stability, and the deprecated ones. In `Registry.stats()` the first group of
each type opens that type's entry; the groups of that type after it are the
ones counted into it.

## Serialisation

`Attribute`, `Catalog`, `Group`, `Registry`, `GroupLineage`,
`ResolvedTelemetrySchema` and the signal classes in
`semconv_resolve.signals` offer `to_dict()`, producing plain JSON-ready
data with empty and unset fields left out. `Attribute`, `Value`,
`Constraint`, `Catalog`, `Group`, `Registry`, `AttributeLineage` and
`GroupLineage` also offer a matching `from_dict()`.

## What it does not do

The package works on groups built in Python. It does not read semantic
convention YAML files or directories, does not fetch registries from git
or any other remote location, keeps no cache, and has no command-line
tool. Schema versions are not resolved: `ResolvedTelemetrySchema.versions`
is left as `None`.

## Running the tests

```
pip install -e ".[test]"
pytest
```