"""
Turns types into schema fragments.

The resolver never touches a concrete type system directly. It asks a
``TypeGraph`` questions about a type (is it a union? what are its members?) so
the same rules can run against Python type hints or against a synthetic graph
in tests.
"""

import warnings
from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional

from .models import (
    ArrayOf,
    EnumOf,
    Fragment,
    ObjectOf,
    Primitive,
    Unknown,
    all_of,
    one_of,
)


class TypeGraph(ABC):
    """Read-only view over a type system, as needed by ``SchemaResolver``."""

    def identity(self, t: Any) -> Hashable:
        """A key identifying ``t`` while it is being resolved."""
        try:
            hash(t)
        except TypeError:
            return id(t)
        return t

    def describe(self, t: Any) -> str:
        return repr(t)

    def is_any(self, t: Any) -> bool:
        """Types that are deliberately unconstrained resolve to unknown without a warning."""
        return False

    @abstractmethod
    def literal_value(self, t: Any) -> Optional[Any]:
        """The value of a single-value literal type, or None."""

    def enum_values(self, t: Any) -> Optional[list[Any]]:
        """The member values of an enumeration type, or None."""
        return None

    @abstractmethod
    def primitive(self, t: Any) -> Optional[str]:
        """The primitive schema type name of ``t``, or None."""

    @abstractmethod
    def is_array_like(self, t: Any) -> bool:
        ...

    @abstractmethod
    def element_type(self, t: Any) -> Optional[Any]:
        """The element type of an array-like type, or None if unknown."""

    @abstractmethod
    def member_names(self, t: Any) -> list[str]:
        """Named members of a structured type, in declaration order."""

    @abstractmethod
    def resolve_member_type(self, t: Any, name: str) -> Any:
        ...

    @abstractmethod
    def is_optional_member(self, t: Any, name: str) -> bool:
        """Whether the member's own declaration marks it as optional."""

    def member_description(self, t: Any, name: str) -> Optional[str]:
        return None

    @abstractmethod
    def is_union(self, t: Any) -> bool:
        ...

    @abstractmethod
    def union_members(self, t: Any) -> list[Any]:
        ...

    @abstractmethod
    def is_intersection(self, t: Any) -> bool:
        ...

    @abstractmethod
    def intersection_members(self, t: Any) -> list[Any]:
        ...

    @abstractmethod
    def is_absent(self, t: Any) -> bool:
        """Whether ``t`` is the absence marker (``None``/``undefined``) of the type system."""


class SchemaResolver:
    """
    Resolves types from a ``TypeGraph`` into schema fragments.

    Rules are tried in order and the first match wins:

    1. single-value literal -> enum with that value
    2. enumeration type -> enum of its values
    3. primitive -> primitive
    4. array-like -> array of the resolved element (unknown if no element type)
    5. structured type with named members -> object
    6. union -> members resolved and collapsed (see ``models.one_of``)
    7. intersection -> ``allOf`` of the resolved members
    8. anything else -> unknown

    A type that is reached again while it is still being resolved (a recursive
    type) resolves to unknown.
    """

    def __init__(self, graph: TypeGraph):
        self.graph = graph
        self._in_progress: list[Any] = []

    def resolve(self, t: Any) -> Fragment:
        key = self.graph.identity(t)
        if key in self._in_progress:
            warnings.warn(
                f"Recursive type: {self.graph.describe(t)}. Treating as unknown.",
                UserWarning,
            )
            return Unknown()

        self._in_progress.append(key)
        try:
            return self._resolve(t)
        finally:
            self._in_progress.pop()

    def resolve_optional(self, t: Any) -> tuple[Fragment, bool]:
        """
        Resolves ``t`` and reports whether it allows absence.

        A union containing the absence marker is optional; the marker is stripped
        before the remaining members are resolved.

        Returns:
            The resolved fragment and the optional flag.
        """
        if not self.graph.is_union(t):
            return self.resolve(t), False

        members = self.graph.union_members(t)
        present = [m for m in members if not self.graph.is_absent(m)]
        if len(present) == len(members):
            return self.resolve(t), False
        return self._resolve_union_members(present), True

    def _resolve(self, t: Any) -> Fragment:
        graph = self.graph

        if t is None or graph.is_any(t):
            return Unknown()

        literal = graph.literal_value(t)
        if isinstance(literal, str):
            return EnumOf(base_type="string", values=[literal])
        if isinstance(literal, (int, float)) and not isinstance(literal, bool):
            return EnumOf(base_type="number", values=[literal])

        values = graph.enum_values(t)
        if values:
            if all(isinstance(v, str) for v in values):
                return EnumOf(base_type="string", values=values)
            if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
                return EnumOf(base_type="number", values=values)

        primitive = graph.primitive(t)
        if primitive is not None:
            return Primitive(type=primitive)

        if graph.is_array_like(t):
            element = graph.element_type(t)
            if element is None:
                return ArrayOf(items=Unknown())
            return ArrayOf(items=self.resolve(element))

        names = graph.member_names(t)
        if names:
            return self._resolve_object(t, names)

        if graph.is_union(t):
            members = [m for m in graph.union_members(t) if not graph.is_absent(m)]
            return self._resolve_union_members(members)

        if graph.is_intersection(t):
            return all_of([self.resolve(m) for m in graph.intersection_members(t)])

        warnings.warn(
            f"Unsupported type: {graph.describe(t)}. Treating as unknown.", UserWarning
        )
        return Unknown()

    def _resolve_object(self, t: Any, names: list[str]) -> ObjectOf:
        properties = {}
        required = []
        for name in names:
            member_type = self.graph.resolve_member_type(t, name)
            fragment, optional_by_union = self.resolve_optional(member_type)
            description = self.graph.member_description(t, name)
            if description:
                fragment = fragment.model_copy(update={"description": description})
            properties[name] = fragment
            if not (self.graph.is_optional_member(t, name) or optional_by_union):
                required.append(name)
        return ObjectOf(properties=properties, required=required)

    def _resolve_union_members(self, members: list[Any]) -> Fragment:
        if len(members) == 1:
            return self.resolve(members[0])
        return one_of([self.resolve(m) for m in members])


def resolve_fragment(fragment: Fragment) -> Fragment:
    """
    Normalizes an already resolved fragment.

    Unions are re-collapsed; everything else, ``Unknown`` included, is returned unchanged.
    """
    if fragment.kind == "oneOf":
        return one_of([resolve_fragment(v) for v in fragment.variants])
    return fragment
