import pytest

from docschema.errors import InvalidTypeError
from docschema.vocabulary import (
    JSON_SCHEMA_TYPES,
    is_union_token,
    validate_type_token,
    validate_union_token,
)


@pytest.mark.parametrize("token", JSON_SCHEMA_TYPES)
def test_valid_tokens(token):
    assert validate_type_token(token) == token


def test_token_is_normalized():
    assert validate_type_token(" String ") == "string"


def test_invalid_token_lists_valid_set():
    with pytest.raises(InvalidTypeError) as excinfo:
        validate_type_token("obj")

    message = str(excinfo.value)
    assert "obj" in message
    for token in JSON_SCHEMA_TYPES:
        assert token in message
    assert excinfo.value.tokens == ["obj"]


def test_union_members_are_validated_together():
    assert validate_union_token("number | String") == ["number", "string"]

    with pytest.raises(InvalidTypeError) as excinfo:
        validate_union_token("str|number|int")
    assert excinfo.value.tokens == ["str", "int"]
    assert "Invalid type(s) in union: str, int." in str(excinfo.value)


def test_is_union_token():
    assert is_union_token("a|b")
    assert not is_union_token("string")
