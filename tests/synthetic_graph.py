"""A tiny in-memory type system used to exercise the resolver."""

from dataclasses import dataclass, field
from typing import Any

from docschema.resolver import TypeGraph


@dataclass(eq=False)
class Node:
    kind: str
    value: Any = None
    element: Any = None
    members: list = field(default_factory=list)
    props: dict = field(default_factory=dict)


def string():
    return Node("string")


def number():
    return Node("number")


def boolean():
    return Node("boolean")


def literal(value):
    return Node("literal", value=value)


def array(element=None):
    return Node("array", element=element)


def obj(**props):
    """Each property is a node, or a (node, optional) tuple."""
    node = Node("object")
    for name, prop in props.items():
        node.props[name] = prop if isinstance(prop, tuple) else (prop, False)
    return node


def union(*members):
    return Node("union", members=list(members))


def intersection(*members):
    return Node("intersection", members=list(members))


def undefined():
    return Node("undefined")


def opaque():
    return Node("opaque")


class SyntheticGraph(TypeGraph):
    def describe(self, t):
        return f"<{t.kind}>"

    def literal_value(self, t):
        return t.value if t.kind == "literal" else None

    def primitive(self, t):
        return t.kind if t.kind in ("string", "number", "boolean") else None

    def is_array_like(self, t):
        return t.kind == "array"

    def element_type(self, t):
        return t.element

    def member_names(self, t):
        return list(t.props) if t.kind == "object" else []

    def resolve_member_type(self, t, name):
        return t.props[name][0]

    def is_optional_member(self, t, name):
        return t.props[name][1]

    def is_union(self, t):
        return t.kind == "union"

    def union_members(self, t):
        return t.members

    def is_intersection(self, t):
        return t.kind == "intersection"

    def intersection_members(self, t):
        return t.members

    def is_absent(self, t):
        return t.kind == "undefined"
