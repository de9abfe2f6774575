import pytest
from pydantic import ValidationError

from docschema.models import (
    EnumOf,
    OneOf,
    ParsedAnnotation,
    Primitive,
    ResolvedParam,
    Unknown,
    all_of,
    one_of,
)


def test_one_of_never_empty():
    with pytest.raises(ValidationError):
        OneOf(variants=[])
    with pytest.raises(ValueError):
        all_of([])


def test_one_of_collapses_single_variant():
    assert one_of([Unknown(), Primitive(type="string")]) == Primitive(type="string")
    assert one_of([Unknown()]) == Unknown()


def test_one_of_merges_enums_keeping_order_and_duplicates():
    merged = one_of([
        EnumOf(base_type="string", values=["x"]),
        EnumOf(base_type="string", values=["a", "x"]),
    ])
    assert merged == EnumOf(base_type="string", values=["x", "a", "x"])


def test_one_of_keeps_mixed_enums_apart():
    variants = [EnumOf(base_type="string", values=["x"]), EnumOf(base_type="number", values=[1])]
    assert one_of(variants) == OneOf(variants=variants)


def test_fragment_description_is_serialized():
    assert Primitive(type="string", description="A name").to_schema() == {
        "type": "string",
        "description": "A name",
    }
    assert Unknown().to_schema() == {}


def test_parameter_names_are_unique():
    param = ResolvedParam(name="x", fragment=Primitive(type="string"))
    with pytest.raises(ValidationError):
        ParsedAnnotation(function_name="f", params=[param, param])


def test_annotation_is_immutable():
    annotation = ParsedAnnotation(function_name="f")
    with pytest.raises(ValidationError):
        annotation.function_name = "g"
