"""
This package turns documented functions into JSON schemas for Large Language
Models that support function calling.

Two documentation dialects are understood:

- untyped: JavaScript sources whose JSDoc blocks declare the parameter types
  (``@param {string} name``).
- typed: Python modules whose type hints carry the types, with descriptions
  taken from the docstrings.

Both produce ``ParsedAnnotation`` objects that ``generate_schema`` turns into
``{"type": "function", "function": {...}}`` documents.
"""

from .assembler import generate_schema
from .errors import (
    DocSchemaError,
    InvalidTypeError,
    MalformedDeclarationError,
    SourceUnitNotFoundError,
)
from .extractor import (
    Extractor,
    JsDocExtractor,
    PythonExtractor,
    extract_file,
    extract_source_unit,
    parse_annotations,
    source_unit_for,
)
from .jsdoc import parse_jsdoc_annotations
from .models import (
    AllOf,
    ArrayOf,
    Dialect,
    EnumOf,
    ExtractionResult,
    ObjectOf,
    OneOf,
    ParsedAnnotation,
    Primitive,
    ResolvedParam,
    SourceUnit,
    Unknown,
)
from .python_types import Intersection, PythonTypeGraph
from .resolver import SchemaResolver, TypeGraph
from .typed import function_to_annotation, parse_python_annotations
from .vocabulary import JSON_SCHEMA_TYPES


def function_to_json_schema(func) -> dict:
    """
    Converts a Python function to a JSON schema for LLM function calling.

    Args:
        func: The Python function to convert.

    Returns:
        A dictionary representing the JSON schema.
    """
    return generate_schema(function_to_annotation(func))
