"""
The closed set of type names accepted in ``@param {type}`` declarations.
"""

from .errors import InvalidTypeError

JSON_SCHEMA_TYPES: tuple[str, ...] = (
    "string",
    "number",
    "integer",
    "boolean",
    "object",
    "array",
    "null",
)

ENUM_TOKEN = "enum"


def is_union_token(token: str) -> bool:
    return "|" in token


def validate_type_token(token: str) -> str:
    """
    Normalizes a single type token and checks it against the vocabulary.

    Args:
        token: The raw token, e.g. ``"String"`` or ``" number "``.

    Returns:
        The lowercased token.

    Raises:
        InvalidTypeError: If the token is not one of ``JSON_SCHEMA_TYPES``.
    """
    normalized = token.strip().lower()
    if normalized not in JSON_SCHEMA_TYPES:
        raise InvalidTypeError([token.strip()], JSON_SCHEMA_TYPES)
    return normalized


def validate_union_token(token: str) -> list[str]:
    """
    Splits a pipe-delimited union token and validates every member.

    All invalid members are reported together in a single error.

    Args:
        token: The raw token, e.g. ``"number | string"``.

    Returns:
        The normalized members in declaration order.
    """
    members = [m.strip().lower() for m in token.split("|")]
    invalid = [m for m in members if m not in JSON_SCHEMA_TYPES]
    if invalid:
        raise InvalidTypeError(invalid, JSON_SCHEMA_TYPES, union=True)
    return members
