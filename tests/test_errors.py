from pathlib import Path

import pytest

from semconv_resolve.errors import (
    AttributeNotFoundError,
    CompoundError,
    ConversionError,
    FailToResolveAttributesError,
    FailToResolveMetricError,
    IncompatibleMetricAttributesError,
    InvalidSchemaPathError,
    InvalidUrlError,
    ResolutionError,
    SemConvError,
    UnresolvedAttributeRefError,
    UnresolvedExtendsRefError,
    UnresolvedIncludeRefError,
    UnsatisfiedAnyOfConstraintError,
    compound_error,
    handle_errors,
)
from semconv_resolve.model import AttributeRef


class _RecordingLogger:
    def __init__(self):
        self.messages = []

    def error(self, message):
        self.messages.append(message)


def test_attribute_not_found_message():
    error = AttributeNotFoundError("g", AttributeRef(3))
    assert str(error) == "Attribute reference AttributeRef(3) (group: g) not found in the catalog"
    assert error.attr_ref == AttributeRef(3)


def test_unresolved_attribute_ref_message():
    error = UnresolvedAttributeRefError("span.one", "non.existent", "a.yaml")
    assert str(error) == (
        "The following attribute reference is not resolved for the group 'span.one'.\n"
        "Attribute reference: non.existent\nProvenance: a.yaml"
    )


def test_unresolved_extends_and_include_messages():
    extends = UnresolvedExtendsRefError("g", "parent", "p.yaml")
    include = UnresolvedIncludeRefError("g", "other", "p.yaml")
    assert "`extends` clause reference: parent" in str(extends)
    assert "`include` reference: other" in str(include)
    assert str(include).endswith("Provenance: p.yaml")


def test_simple_messages():
    assert str(SemConvError("bad file")) == "bad file"
    assert str(ConversionError("oops")) == "Conversion error: oops"
    assert str(FailToResolveMetricError("m")) == "Failed to resolve the metric 'm'"
    assert str(InvalidSchemaPathError(Path("x/y"))) == f"Invalid Schema path: {Path('x/y')}"


def test_quoted_messages():
    assert str(InvalidUrlError("u", "e")) == 'Invalid URL `"u"`, error: "e")'
    assert str(FailToResolveAttributesError(["a", "b"], "err")) == (
        'Failed to resolve a set of attributes ["a", "b"]: err'
    )


def test_incompatible_metric_attributes_message():
    error = IncompatibleMetricAttributesError("grp", "met", "boom")
    assert str(error) == (
        "Metric attributes are incompatible within the metric group 'grp' "
        "for metric 'met' (error: boom)"
    )


def test_unsatisfied_any_of_keeps_fields():
    error = UnsatisfiedAnyOfConstraintError("g", ["attr4"], ["attr4"])
    assert error.missing_attributes == ["attr4"]
    assert "group 'g'" in str(error)
    assert isinstance(error, ResolutionError)


def test_compound_error_flattens():
    first = SemConvError("one")
    second = SemConvError("two")
    third = SemConvError("three")
    combined = compound_error([CompoundError([first, second]), third])
    assert combined.errors == [first, second, third]


def test_handle_errors_empty_returns_none():
    assert handle_errors([]) is None


def test_handle_errors_raises_compound():
    errors = [SemConvError("one"), SemConvError("two")]
    with pytest.raises(CompoundError) as info:
        handle_errors(errors)
    assert info.value.errors == errors


def test_log_single_error():
    logger = _RecordingLogger()
    SemConvError("broken").log(logger)
    assert logger.messages == ["broken"]


def test_log_compound_error_logs_each():
    logger = _RecordingLogger()
    nested = CompoundError([SemConvError("a"), CompoundError([SemConvError("b")])])
    nested.log(logger)
    assert logger.messages == ["a", "b"]