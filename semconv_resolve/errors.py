"""Errors raised while resolving semantic convention registries."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from typing import Any, Protocol, Union


class _Logger(Protocol):
    def error(self, message: str) -> Any: ...


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _quoted_list(items: Iterable[str]) -> str:
    return "[" + ", ".join(_quoted(item) for item in items) + "]"


class ResolutionError(Exception):
    """Base class of all resolution errors."""

    def log(self, logger: _Logger) -> None:
        """Log this error, or each contained error, through ``logger.error``."""
        logger.error(str(self))


class AttributeNotFoundError(ResolutionError):
    """An attribute reference is missing from the catalog."""

    def __init__(self, group_id: str, attr_ref: Any) -> None:
        self.group_id = group_id
        self.attr_ref = attr_ref
        super().__init__(
            f"Attribute reference {attr_ref} (group: {group_id}) not found in the catalog"
        )


class CompoundError(ResolutionError):
    """A container for several errors."""

    def __init__(self, errors: Iterable[ResolutionError]) -> None:
        self.errors = list(errors)
        super().__init__("Errors:\n" + "\n".join(str(e) for e in self.errors))

    def log(self, logger: _Logger) -> None:
        for error in self.errors:
            error.log(logger)


class InvalidUrlError(ResolutionError):
    """An invalid URL."""

    def __init__(self, url: str, error: str) -> None:
        self.url = url
        self.error = error
        super().__init__(f"Invalid URL `{_quoted(url)}`, error: {_quoted(error)})")


class SemConvError(ResolutionError):
    """An error reported while reading semantic conventions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FailToResolveAttributesError(ResolutionError):
    """A set of attributes could not be resolved."""

    def __init__(self, ids: Iterable[str], error: str) -> None:
        self.ids = list(ids)
        self.error = error
        super().__init__(f"Failed to resolve a set of attributes {_quoted_list(self.ids)}: {error}")


class FailToResolveMetricError(ResolutionError):
    """A metric reference could not be resolved."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Failed to resolve the metric '{ref}'")


class IncompatibleMetricAttributesError(ResolutionError):
    """Metric attributes disagree within a metric group."""

    def __init__(self, metric_group_ref: str, metric_ref: str, error: str) -> None:
        self.metric_group_ref = metric_group_ref
        self.metric_ref = metric_ref
        self.error = error
        super().__init__(
            "Metric attributes are incompatible within the metric group "
            f"'{metric_group_ref}' for metric '{metric_ref}' (error: {error})"
        )


class ConversionError(ResolutionError):
    """A generic conversion error."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Conversion error: {message}")


class UnresolvedAttributeRefError(ResolutionError):
    """An attribute reference that points nowhere."""

    def __init__(self, group_id: str, attribute_ref: str, provenance: str) -> None:
        self.group_id = group_id
        self.attribute_ref = attribute_ref
        self.provenance = provenance
        super().__init__(
            "The following attribute reference is not resolved for the group "
            f"'{group_id}'.\nAttribute reference: {attribute_ref}\nProvenance: {provenance}"
        )


class UnresolvedExtendsRefError(ResolutionError):
    """An ``extends`` clause that points nowhere."""

    def __init__(self, group_id: str, extends_ref: str, provenance: str) -> None:
        self.group_id = group_id
        self.extends_ref = extends_ref
        self.provenance = provenance
        super().__init__(
            "The following `extends` clause reference is not resolved for the group "
            f"'{group_id}'.\n`extends` clause reference: {extends_ref}\nProvenance: {provenance}"
        )


class UnresolvedIncludeRefError(ResolutionError):
    """An ``include`` constraint that points nowhere."""

    def __init__(self, group_id: str, include_ref: str, provenance: str) -> None:
        self.group_id = group_id
        self.include_ref = include_ref
        self.provenance = provenance
        super().__init__(
            "The following `include` reference is not resolved for the group "
            f"'{group_id}'.\n`include` reference: {include_ref}\nProvenance: {provenance}"
        )


class UnsatisfiedAnyOfConstraintError(ResolutionError):
    """An ``any_of`` constraint that a group does not satisfy."""

    def __init__(self, group_id: str, any_of: Any, missing_attributes: Iterable[str]) -> None:
        self.group_id = group_id
        self.any_of = any_of
        self.missing_attributes = list(missing_attributes)
        super().__init__(
            "The following `any_of` constraint is not satisfied for the group "
            f"'{group_id}'.\n`any_of` constraint: {any_of!r}\n"
            f"Missing attributes: {_quoted_list(self.missing_attributes)}"
        )


class InvalidSchemaPathError(ResolutionError):
    """An invalid schema path."""

    def __init__(self, path: Union[str, PathLike]) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid Schema path: {self.path}")


def compound_error(errors: Iterable[ResolutionError]) -> CompoundError:
    """Combine errors into one compound error, flattening nested ones."""
    flat: list[ResolutionError] = []
    for error in errors:
        if isinstance(error, CompoundError):
            flat.extend(error.errors)
        else:
            flat.append(error)
    return CompoundError(flat)


def handle_errors(errors: Iterable[ResolutionError]) -> None:
    """Raise a compound error if ``errors`` is not empty."""
    collected = list(errors)
    if collected:
        raise compound_error(collected)