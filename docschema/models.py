"""
Data models shared by both extractors and the assembler.

Schema fragments are a tagged union (``kind``) of frozen pydantic models. Each
fragment knows how to serialize itself into the JSON structure used inside a
function-calling schema.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

EnumLiteral = Union[str, int, float]


class Fragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Nested properties may carry their own description
    description: Optional[str] = None

    def to_schema(self) -> Dict[str, Any]:
        schema = self._body()
        if self.description is not None:
            schema["description"] = self.description
        return schema

    def _body(self) -> Dict[str, Any]:
        raise NotImplementedError


class Primitive(Fragment):
    kind: Literal["primitive"] = "primitive"
    type: str

    def _body(self):
        return {"type": self.type}


class EnumOf(Fragment):
    kind: Literal["enum"] = "enum"
    base_type: Literal["string", "number"]
    values: list[EnumLiteral]

    def _body(self):
        return {"type": self.base_type, "enum": list(self.values)}


class ObjectOf(Fragment):
    """An object with named properties; ``required`` keeps declaration order."""

    kind: Literal["object"] = "object"
    properties: Dict[str, "SchemaFragment"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def _body(self):
        return {
            "type": "object",
            "properties": {name: prop.to_schema() for name, prop in self.properties.items()},
            "required": list(self.required),
        }


class ArrayOf(Fragment):
    kind: Literal["array"] = "array"
    items: "SchemaFragment"

    def _body(self):
        return {"type": "array", "items": self.items.to_schema()}


class OneOf(Fragment):
    kind: Literal["oneOf"] = "oneOf"
    variants: list["SchemaFragment"] = Field(min_length=1)

    def _body(self):
        return {"oneOf": [v.to_schema() for v in self.variants]}


class AllOf(Fragment):
    kind: Literal["allOf"] = "allOf"
    variants: list["SchemaFragment"] = Field(min_length=1)

    def _body(self):
        return {"allOf": [v.to_schema() for v in self.variants]}


class Unknown(Fragment):
    """A type that could not be classified. Serializes to the empty schema."""

    kind: Literal["unknown"] = "unknown"

    def _body(self):
        return {}


SchemaFragment = Annotated[
    Union[Primitive, EnumOf, ObjectOf, ArrayOf, OneOf, AllOf, Unknown],
    Field(discriminator="kind"),
]

ObjectOf.model_rebuild()
ArrayOf.model_rebuild()
OneOf.model_rebuild()
AllOf.model_rebuild()


def one_of(variants: list[Fragment]) -> Fragment:
    """
    Builds a union fragment, collapsing it where a simpler form is equivalent.

    - ``Unknown`` variants are dropped; if nothing is left the result is ``Unknown``.
    - A single remaining variant is returned as is.
    - If every remaining variant is an enum of the same base type, their values
      are concatenated (in order, duplicates kept) into one enum.
    - Otherwise the variants are wrapped in ``OneOf``.
    """
    effective = [v for v in variants if not isinstance(v, Unknown)]
    if not effective:
        return Unknown()
    if len(effective) == 1:
        return effective[0]

    if all(isinstance(v, EnumOf) for v in effective):
        base_types = {v.base_type for v in effective}
        if len(base_types) == 1:
            values = [value for v in effective for value in v.values]
            return EnumOf(base_type=effective[0].base_type, values=values)

    return OneOf(variants=effective)


def all_of(variants: list[Fragment]) -> AllOf:
    if not variants:
        raise ValueError("An intersection needs at least one member")
    return AllOf(variants=list(variants))


class ResolvedParam(BaseModel):
    """One parameter of a documented function, with its resolved schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    fragment: SchemaFragment = Field(default_factory=Unknown)
    enum_values: Optional[list[EnumLiteral]] = None
    is_optional: bool = False


class ParsedAnnotation(BaseModel):
    """The dialect independent description of one documented function."""

    model_config = ConfigDict(frozen=True)

    notice: str = ""
    function_name: str
    params: list[ResolvedParam] = Field(default_factory=list)

    @field_validator("params")
    @classmethod
    def _unique_names(cls, params: list[ResolvedParam]) -> list[ResolvedParam]:
        seen = set()
        for param in params:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter name: {param.name}")
            seen.add(param.name)
        return params


class RawParam(BaseModel):
    """A single @param/@property line of a JSDoc block, before folding."""

    is_property: bool
    type_token: str
    is_enum: bool = False
    enum_values: Optional[list[EnumLiteral]] = None
    union_sub_types: Optional[list[str]] = None
    name: str
    description: str = ""
    is_optional: bool = False


class Dialect(str, Enum):
    UNTYPED = "untyped"
    TYPED = "typed"


class SourceUnit(BaseModel):
    """A file handed to an extractor. ``text`` is only used by the untyped dialect."""

    path: str
    dialect: Dialect
    text: Optional[str] = None


class ExtractionResult(BaseModel):
    """
    The outcome of extracting one source unit.

    Extraction is all-or-nothing: a failed unit carries the error and no annotations.
    """

    source: str
    dialect: Dialect
    annotations: list[ParsedAnnotation] = Field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
