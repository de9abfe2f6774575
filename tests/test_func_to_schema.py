import pytest
from docschema import function_to_json_schema
from pydantic import BaseModel, Field

# Test simple function
def test_basic_function():
    def test_func(name: str, age: int):
        """
        A test function.

        Args:
            name: The person's name
            age: The person's age
        """
        pass

    schema = function_to_json_schema(test_func)
    assert isinstance(schema, dict)
    assert schema["type"] == "function"
    assert schema["function"]["name"] == "test_func"
    assert schema["function"]["parameters"]["required"] == ["name", "age"]
    assert schema["function"]["parameters"]["properties"]["age"] == {
        "type": "integer",
        "description": "The person's age",
    }

# Test with default values
def test_function_with_defaults():
    def test_func(name: str = "John", age: int = 25):
        """Test function with defaults"""
        pass

    schema = function_to_json_schema(test_func)
    params = schema.get("function", {}).get("parameters", {})
    properties = params.get("properties", {})
    # check properties name and age
    assert properties == {
        'age': {'type': 'integer', 'description': ''},
        'name': {'type': 'string', 'description': ''},
    }
    assert params.get("required") == []

# Test with Pydantic model
def test_pydantic_model_parameter():
    class UserModel(BaseModel):
        name: str
        age: int
        email: str = Field(description="Where to send receipts")
        nickname: str | None = None

    def test_func(user: UserModel):
        """Test function with Pydantic model"""
        pass

    schema = function_to_json_schema(test_func)
    params = schema.get("function", {}).get("parameters", {})
    properties = params.get("properties", {})

    # check that the Pydantic model fields are correctly converted to properties
    assert "user" in properties
    assert properties["user"]["type"] == "object"

    # check the nested properties match the Pydantic model fields
    user_properties = properties["user"]["properties"]
    assert list(user_properties) == ["name", "age", "email", "nickname"]
    assert user_properties["name"]["type"] == "string"
    assert user_properties["age"]["type"] == "integer"
    assert user_properties["email"] == {"type": "string", "description": "Where to send receipts"}
    assert user_properties["nickname"] == {"type": "string"}

    # check that required fields are properly set
    assert set(properties["user"]["required"]) == {"name", "age", "email"}

# Test with lists and dicts
def test_complex_types():
    def test_func(names: list[str], data: dict[str, int], tags: tuple[str, ...], pairs: list):
        """Test function with complex types"""
        pass

    schema = function_to_json_schema(test_func)
    properties = schema["function"]["parameters"]["properties"]

    assert properties["names"]["type"] == "array"
    assert properties["names"]["items"]["type"] == "string"

    assert properties["data"]["type"] == "object"
    assert properties["tags"]["items"] == {"type": "string"}
    assert properties["pairs"]["items"] == {}

def test_function_description():
    def test_func(name: str):
        """
        This is a test function.

        It does testing things.

        Args:
            name: The name to test
        """
        pass

    schema = function_to_json_schema(test_func)
    # both long and short description are combined in single line
    assert schema["function"]["description"] == "This is a test function. It does testing things."

    properties = schema.get("function", {}).get("parameters", {}).get("properties", {})
    assert properties["name"]["description"] == "The name to test"

def test_untyped_parameter():
    def test_func(name):
        pass

    schema = function_to_json_schema(test_func)
    properties = schema["function"]["parameters"]["properties"]
    assert properties["name"] == {"description": ""}
    assert schema["function"]["parameters"]["required"] == ["name"]

def test_unsupported_type_hints():
    from typing import Callable

    def test_func(func: Callable):
        pass

    with pytest.warns(UserWarning, match="Unsupported type: typing.Callable. Treating as unknown."):
        schema = function_to_json_schema(test_func)
    assert schema["function"]["parameters"]["properties"]["func"] == {"description": ""}

def test_optional_parameter_is_not_required():
    def test_func(query: str, limit: int | None):
        pass

    schema = function_to_json_schema(test_func)
    parameters = schema["function"]["parameters"]
    assert parameters["properties"]["limit"] == {"type": "integer", "description": ""}
    assert parameters["required"] == ["query"]
