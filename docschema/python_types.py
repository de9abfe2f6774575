"""
A ``TypeGraph`` over Python type hints.

Handles:
    - str, int, float, bool, None  -> primitives
    - dict / Mapping[...]          -> object
    - Literal[...]                 -> enums (several values behave as a union)
    - enum.Enum subclasses         -> enums of their values
    - list / set / tuple / Sequence[...] -> arrays
    - TypedDict, dataclasses, pydantic models, NamedTuple -> objects
    - Union[...] / X | Y / Optional[X]  -> unions, None marks absence
    - Intersection[A, B]           -> intersections
    - Annotated[T, ...], Required[T], NotRequired[T] -> T
"""

import collections.abc
import dataclasses
import enum
import types
import typing
import warnings
from typing import Any, Union, get_args, get_origin, get_type_hints

import typing_extensions
from pydantic import BaseModel

from .resolver import TypeGraph

PRIMITIVE_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    type(None): "null",
}

OBJECT_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

ARRAY_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Iterable,
    collections.abc.Collection,
)

_LITERAL_FORMS = {typing.Literal, typing_extensions.Literal}
_ANY_FORMS = {typing.Any, typing_extensions.Any}
_ANNOTATED_FORMS = {typing.Annotated, typing_extensions.Annotated}
_REQUIRED_FORMS = {typing_extensions.Required, typing_extensions.NotRequired}
_NOT_REQUIRED_FORMS = {typing_extensions.NotRequired}
for _name in ("Required", "NotRequired"):
    if hasattr(typing, _name):
        _REQUIRED_FORMS.add(getattr(typing, _name))
        if _name == "NotRequired":
            _NOT_REQUIRED_FORMS.add(typing.NotRequired)


class _IntersectionAlias:
    def __init__(self, args: tuple):
        self.__args__ = args

    def __eq__(self, other):
        return isinstance(other, _IntersectionAlias) and self.__args__ == other.__args__

    def __hash__(self):
        return hash(("Intersection", self.__args__))

    def __repr__(self):
        return f"Intersection[{', '.join(type_repr(a) for a in self.__args__)}]"

    def __call__(self, *args, **kwargs):
        raise TypeError("Cannot instantiate an intersection type")


class Intersection:
    """
    Marks a value as satisfying every listed type at once.

    ```py
    def update(profile: Intersection[HasName, HasAge]): ...
    ```
    """

    def __class_getitem__(cls, items):
        if not isinstance(items, tuple):
            items = (items,)
        if not items:
            raise TypeError("Intersection needs at least one type")
        return _IntersectionAlias(items)


def is_class(t: Any) -> bool:
    # list[int] passes isinstance(..., type) on some Python versions
    return isinstance(t, type) and get_origin(t) is None


def type_repr(t: Any) -> str:
    if is_class(t):
        return t.__name__
    return str(t)


def strip_wrappers(t: Any) -> Any:
    """Removes Annotated/Required/NotRequired layers around a hint."""
    while True:
        origin = get_origin(t)
        if origin in _ANNOTATED_FORMS or origin in _REQUIRED_FORMS:
            t = get_args(t)[0]
        else:
            return t


def annotated_description(t: Any) -> str:
    """The first string found in the metadata of ``Annotated[T, "description"]``."""
    while True:
        origin = get_origin(t)
        if origin in _ANNOTATED_FORMS:
            for metadata in getattr(t, "__metadata__", ()):
                if isinstance(metadata, str):
                    return metadata
            t = get_args(t)[0]
        elif origin in _REQUIRED_FORMS:
            t = get_args(t)[0]
        else:
            return ""


def is_not_required(t: Any) -> bool:
    while True:
        origin = get_origin(t)
        if origin in _NOT_REQUIRED_FORMS:
            return True
        if origin in _ANNOTATED_FORMS or origin in _REQUIRED_FORMS:
            t = get_args(t)[0]
        else:
            return False


def _is_none_literal(t: Any) -> bool:
    return get_origin(t) in _LITERAL_FORMS and get_args(t) == (None,)


def is_typeddict(t: Any) -> bool:
    return typing_extensions.is_typeddict(t)


def is_pydantic_model(t: Any) -> bool:
    return is_class(t) and issubclass(t, BaseModel)


def is_namedtuple(t: Any) -> bool:
    return is_class(t) and issubclass(t, tuple) and hasattr(t, "_fields")


class PythonTypeGraph(TypeGraph):
    """Answers ``SchemaResolver`` questions about Python type hints."""

    def __init__(self):
        self._hints_cache: dict[Any, dict[str, Any]] = {}

    def identity(self, t):
        return super().identity(strip_wrappers(t))

    def describe(self, t):
        return type_repr(strip_wrappers(t))

    def is_any(self, t):
        t = strip_wrappers(t)
        return any(t is form for form in _ANY_FORMS) or t is object

    def literal_value(self, t):
        t = strip_wrappers(t)
        if get_origin(t) in _LITERAL_FORMS:
            args = get_args(t)
            if len(args) == 1:
                return args[0]
        return None

    def enum_values(self, t):
        t = strip_wrappers(t)
        if is_class(t) and issubclass(t, enum.Enum):
            return [member.value for member in t]
        return None

    def primitive(self, t):
        t = strip_wrappers(t)
        try:
            if t in PRIMITIVE_TYPES:
                return PRIMITIVE_TYPES[t]
        except TypeError:
            return None

        origin = get_origin(t)
        if t in OBJECT_ORIGINS or origin in OBJECT_ORIGINS:
            return "object"
        if origin in _LITERAL_FORMS:
            args = get_args(t)
            if args and all(isinstance(a, bool) for a in args):
                return "boolean"
            if _is_none_literal(t):
                return "null"
        return None

    def is_array_like(self, t):
        t = strip_wrappers(t)
        return t in ARRAY_ORIGINS or get_origin(t) in ARRAY_ORIGINS

    def element_type(self, t):
        t = strip_wrappers(t)
        args = get_args(t)
        if not args:
            return None
        if get_origin(t) is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            if args == ((),):
                return None
            if len(args) > 1:
                return Union[args]
        return args[0]

    def member_names(self, t):
        t = strip_wrappers(t)
        if not is_class(t):
            return []
        if is_pydantic_model(t):
            return list(t.model_fields)
        if is_typeddict(t) or dataclasses.is_dataclass(t) or is_namedtuple(t):
            if dataclasses.is_dataclass(t):
                return [f.name for f in dataclasses.fields(t)]
            return list(self._hints(t))
        return []

    def resolve_member_type(self, t, name):
        t = strip_wrappers(t)
        if is_pydantic_model(t):
            return t.model_fields[name].annotation
        return self._hints(t).get(name, Any)

    def is_optional_member(self, t, name):
        t = strip_wrappers(t)
        if is_pydantic_model(t):
            return not t.model_fields[name].is_required()
        if is_typeddict(t):
            return name in getattr(t, "__optional_keys__", ()) or is_not_required(
                self._hints(t).get(name)
            )
        if dataclasses.is_dataclass(t):
            for field in dataclasses.fields(t):
                if field.name == name:
                    return (
                        field.default is not dataclasses.MISSING
                        or field.default_factory is not dataclasses.MISSING
                    )
            return False
        if is_namedtuple(t):
            return name in getattr(t, "_field_defaults", {})
        return False

    def member_description(self, t, name):
        t = strip_wrappers(t)
        if is_pydantic_model(t):
            return t.model_fields[name].description
        return annotated_description(self._hints(t).get(name)) or None

    def is_union(self, t):
        t = strip_wrappers(t)
        origin = get_origin(t)
        if origin is Union or origin is types.UnionType:
            return True
        return origin in _LITERAL_FORMS and len(get_args(t)) > 1

    def union_members(self, t):
        t = strip_wrappers(t)
        if get_origin(t) in _LITERAL_FORMS:
            return [typing.Literal[value] for value in get_args(t)]
        return list(get_args(t))

    def is_intersection(self, t):
        return isinstance(strip_wrappers(t), _IntersectionAlias)

    def intersection_members(self, t):
        return list(strip_wrappers(t).__args__)

    def is_absent(self, t):
        t = strip_wrappers(t)
        return t is None or t is type(None) or _is_none_literal(t)

    def _hints(self, t: Any) -> dict[str, Any]:
        if t not in self._hints_cache:
            try:
                hints = get_type_hints(t, include_extras=True)
            except Exception as e:  # string hints are evaluated as arbitrary expressions
                warnings.warn(
                    f"Could not evaluate type hints of {type_repr(t)}: {e}", UserWarning
                )
                hints = dict(getattr(t, "__annotations__", {}))
            self._hints_cache[t] = hints
        return self._hints_cache[t]
