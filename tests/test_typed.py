import functools
import sys
import warnings
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Optional

import pytest
from typing_extensions import NotRequired, TypedDict, Unpack

from docschema import Intersection, generate_schema
from docschema.errors import SourceUnitNotFoundError
from docschema.models import EnumOf, OneOf, Primitive, Unknown
from docschema.typed import collect_functions, function_to_annotation, parse_python_annotations

SERVICES = Path(__file__).parent.parent / "services"


class User(TypedDict):
    name: str
    age: NotRequired[float]


class Query(TypedDict):
    user: User
    token: int


class Color(Enum):
    RED = "red"
    GREEN = "green"


@dataclass
class Paging:
    limit: int
    offset: int = 0
    tags: list[str] = field(default_factory=list)


def properties_of(func):
    return generate_schema(function_to_annotation(func))["function"]["parameters"]


def test_typeddict_with_not_required_member():
    def lookup(user: User):
        pass

    parameters = properties_of(lookup)
    assert parameters["properties"]["user"] == {
        "type": "object",
        "properties": {"name": {"type": "string"}, "age": {"type": "number"}},
        "required": ["name"],
        "description": "",
    }
    assert parameters["required"] == ["user"]


def test_optional_union_without_default():
    def rename(name: str | None):
        """Rename the account."""

    annotation = function_to_annotation(rename)
    param = annotation.params[0]
    assert param.fragment == Primitive(type="string")
    assert param.is_optional


def test_unpacked_keyword_arguments_become_parameters():
    def balance(**kwargs: Unpack[Query]):
        """
        Fetch a balance.

        Args:
            user: Who to look up.
            token: The token id.
        """

    annotation = function_to_annotation(balance)
    assert [p.name for p in annotation.params] == ["user", "token"]
    assert annotation.params[0].description == "Who to look up."
    assert generate_schema(annotation)["function"]["parameters"]["required"] == ["user", "token"]


def test_plain_varargs_are_skipped():
    def log(message: str, *args, **kwargs):
        pass

    assert [p.name for p in function_to_annotation(log).params] == ["message"]


def test_literal_union_with_none():
    def set_mode(mode: Optional[Literal["fast", "slow"]]):
        pass

    param = function_to_annotation(set_mode).params[0]
    assert param.fragment == EnumOf(base_type="string", values=["fast", "slow"])
    assert param.is_optional


def test_numeric_literals():
    def retry(times: Literal[1, 2, 3]):
        pass

    assert properties_of(retry)["properties"]["times"] == {
        "type": "number",
        "enum": [1, 2, 3],
        "description": "",
    }


def test_enum_class():
    def paint(color: Color):
        pass

    assert properties_of(paint)["properties"]["color"] == {
        "type": "string",
        "enum": ["red", "green"],
        "description": "",
    }


def test_dataclass_defaults_are_optional():
    def search(paging: Paging):
        pass

    paging = properties_of(search)["properties"]["paging"]
    assert paging["required"] == ["limit"]
    assert paging["properties"]["tags"] == {"type": "array", "items": {"type": "string"}}


def test_mixed_union_is_one_of():
    def find(key: int | str):
        pass

    fragment = function_to_annotation(find).params[0].fragment
    assert fragment == OneOf(variants=[Primitive(type="integer"), Primitive(type="string")])


def test_intersection():
    def update(profile: Intersection[User, Paging]):
        pass

    profile = properties_of(update)["properties"]["profile"]
    assert [variant["type"] for variant in profile["allOf"]] == ["object", "object"]


def test_annotated_description():
    def move(city: Annotated[str, "Where to move to"]):
        pass

    assert properties_of(move)["properties"]["city"] == {
        "type": "string",
        "description": "Where to move to",
    }


def test_docstring_description_wins_over_annotated():
    def move(city: Annotated[str, "Where to move to"]):
        """
        Args:
            city: Destination city.
        """

    assert properties_of(move)["properties"]["city"]["description"] == "Destination city."
    assert function_to_annotation(move).notice == ""


def test_decorated_function_is_unwrapped():
    def traced(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)
        return wrapper

    @traced
    def greet(name: str):
        """Say hello."""

    annotation = function_to_annotation(greet)
    assert annotation.function_name == "greet"
    assert [p.name for p in annotation.params] == ["name"]


def test_unnamed_lambda_is_anonymous():
    assert function_to_annotation(lambda x: x).function_name == "anonymous"


def test_collect_functions_skips_methods_and_nested():
    source = (
        "def outer():\n"
        "    def inner(): pass\n"
        "class Service:\n"
        "    def method(self): pass\n"
        "async def fetch(): pass\n"
        "shout = lambda text: text.upper()\n"
    )
    functions = collect_functions(source)
    assert [(f["name"], f["kind"]) for f in functions] == [
        ("outer", "function"),
        ("fetch", "async_function"),
        ("shout", "lambda"),
    ]


def test_parse_module(write_source):
    path = write_source("tools.py", '''
        from typing_extensions import TypedDict

        class Tree(TypedDict):
            value: int
            children: list["Tree"]

        def walk(tree: Tree) -> None:
            """Walk a tree."""

        shout = lambda text: text.upper()

        class Helper:
            def method(self, x: int): ...
    ''')

    with pytest.warns(UserWarning, match="Recursive type"):
        annotations = parse_python_annotations(path)

    assert [a.function_name for a in annotations] == ["walk", "shout"]
    tree = generate_schema(annotations[0])["function"]["parameters"]["properties"]["tree"]
    assert tree["properties"]["children"] == {"type": "array", "items": {}}
    assert annotations[1].params[0].name == "text"


def test_unresolvable_hint_warns(write_source):
    path = write_source("broken_hints.py", '''
        from __future__ import annotations

        def handle(event: MissingEvent) -> None:
            """Handle an event."""
    ''')

    with pytest.warns(UserWarning, match="Could not evaluate type hints of handle"):
        annotations = parse_python_annotations(path)
    assert annotations[0].params[0].name == "event"


def test_missing_file(tmp_path):
    with pytest.raises(SourceUnitNotFoundError):
        parse_python_annotations(tmp_path / "nope.py")


def test_import_error_is_reported(write_source):
    path = write_source("needs_module.py", "import not_a_real_module_for_docschema\n")
    with pytest.raises(SourceUnitNotFoundError, match="ModuleNotFoundError"):
        parse_python_annotations(path)


def test_syntax_error_is_reported(write_source):
    path = write_source("bad_syntax.py", "def broken(:\n")
    with pytest.raises(SourceUnitNotFoundError, match="SyntaxError"):
        parse_python_annotations(path)


def test_example_service():
    annotations = parse_python_annotations(SERVICES / "example_service.py")
    names = [a.function_name for a in annotations]
    assert names == ["get_user_token_balance", "this_is_a_new_function", "set_status"]

    balance = generate_schema(annotations[0])["function"]
    assert balance["description"] == (
        "Fetch the token balance for a user based on their username and token details."
    )
    user = balance["parameters"]["properties"]["user"]
    assert user["required"] == ["name", "age"]
    assert user["properties"]["address"]["required"] == ["street"]
    assert user["properties"]["address"]["properties"]["city"] == {
        "oneOf": [{"type": "string"}, {"type": "integer"}]
    }
    assert balance["parameters"]["required"] == ["user", "token"]

    status = generate_schema(annotations[2])["function"]["parameters"]
    assert status["properties"]["status"]["enum"] == ["active", "inactive"]
    assert status["required"] == ["status"]


def test_section_only_docstring_keeps_parameter_descriptions():
    def fetch(url: str, retries: int = 3):
        """
        Args:
            url: Where to fetch from.
            retries: How many times to try.
        """

    annotation = function_to_annotation(fetch)
    assert annotation.notice == ""
    assert [p.description for p in annotation.params] == [
        "Where to fetch from.",
        "How many times to try.",
    ]


def test_none_literal_in_union_is_absence():
    def tag(label: Literal["a", None]):
        pass

    param = function_to_annotation(tag).params[0]
    assert param.fragment == EnumOf(base_type="string", values=["a"])
    assert param.is_optional


def test_none_literal_alone_is_null():
    def clear(value: Literal[None]):
        pass

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        param = function_to_annotation(clear).params[0]
    assert param.fragment == Primitive(type="null")
    assert not param.is_optional


@pytest.mark.parametrize("hint", ['"os.NoSuchThing"', '"list["'])
def test_hints_failing_with_any_error_warn(write_source, hint):
    path = write_source("odd_hints.py", f'''
        import os

        def handle(event: {hint}, count: int) -> None:
            """Handle an event."""
    ''')

    with pytest.warns(UserWarning, match="Could not evaluate type hints of handle"):
        annotations = parse_python_annotations(path)

    event, count = annotations[0].params
    assert event.fragment == Unknown()
    # raw annotations are used for the rest of the signature
    assert count.fragment == Primitive(type="integer")


def test_sibling_module_import(write_source):
    write_source("svc/docschema_sibling_models.py", '''
        from typing_extensions import TypedDict

        class Account(TypedDict):
            owner: str
    ''')
    path = write_source("svc/tools.py", '''
        from docschema_sibling_models import Account

        def lookup(account: Account) -> None:
            """Look up an account."""
    ''')
    path_before = list(sys.path)

    try:
        annotations = parse_python_annotations(path)
    finally:
        sys.modules.pop("docschema_sibling_models", None)

    account = generate_schema(annotations[0])["function"]["parameters"]["properties"]["account"]
    assert account["properties"] == {"owner": {"type": "string"}}
    assert sys.path == path_before
