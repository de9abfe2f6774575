"""
Extracts annotations from JavaScript sources documented with JSDoc blocks.

Types are declared inside the comments, e.g.:

```js
/**
 * Fetch the token balance for a user.
 * @param {string} userName - The username of the user.
 * @param {number|string} token - The token to search for.
 * @param {enum} status [active, inactive] - The account status.
 * @param {object} [user] - An optional user object.
 * @property {string} user.name - The user's name.
 * @property {number} [user.age] - The user's age.
 */
export async function getUserTokenBalance({ userName, token, status, user }) {}
```
"""

import math
import re
from typing import Optional

from .errors import MalformedDeclarationError
from .models import (
    EnumLiteral,
    EnumOf,
    Fragment,
    ObjectOf,
    OneOf,
    ParsedAnnotation,
    Primitive,
    RawParam,
    ResolvedParam,
    Unknown,
)
from .vocabulary import (
    ENUM_TOKEN,
    is_union_token,
    validate_type_token,
    validate_union_token,
)

DOC_BLOCK_RE = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)

DECLARATION_SHAPES = (
    "@param {type} name description",
    "@property {type} parent.name description",
)

DECLARATION_START_RE = re.compile(r"^@(param|property)\b")

DECLARATION_RE = re.compile(
    r"^@(?P<tag>param|property)\s*"
    r"(?:\{(?P<braced>[^}]*)\}\s*|(?P<bare>[^\s\[{]+)\s+)"
    r"(?P<name>\[[^\]]+\]|[^\s\[\]]+)"
    r"\s*(?P<rest>.*)$"
)

ENUM_LIST_RE = re.compile(r"^\[\s*([^\]]*)\]\s*(.*)$")

NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

_IDENT = r"[A-Za-z_$][\w$]*"
_BINDING = rf"\b(?:export\s+)?(?:const|let|var)\s+({_IDENT})\s*=\s*"

# Function declaration shapes, highest priority first. The first capture group is the name.
FUNCTION_SHAPES: list[tuple[str, re.Pattern]] = [
    ("async arrow function, destructured parameters", re.compile(_BINDING + r"async\s*\(\s*\{[^}]*\}\s*\)\s*=>")),
    ("async arrow function", re.compile(_BINDING + r"async\s*\([^)]*\)\s*=>")),
    ("async arrow function, single parameter", re.compile(_BINDING + rf"async\s+{_IDENT}\s*=>")),
    ("arrow function, destructured parameters", re.compile(_BINDING + r"\(\s*\{[^}]*\}\s*\)\s*=>")),
    ("arrow function", re.compile(_BINDING + r"\([^)]*\)\s*=>")),
    ("arrow function, single parameter", re.compile(_BINDING + rf"{_IDENT}\s*=>")),
    ("arrow function, multi-line parameters", re.compile(_BINDING + r"(?:async\s*)?\(\s*(?:\{[^}]*)?$")),
    ("exported default async function", re.compile(rf"\bexport\s+default\s+async\s+function\s*\*?\s*({_IDENT})\s*\(")),
    ("exported default function", re.compile(rf"\bexport\s+default\s+function\s*\*?\s*({_IDENT})\s*\(")),
    ("exported async function", re.compile(rf"\bexport\s+async\s+function\s*\*?\s*({_IDENT})\s*\(")),
    ("exported function", re.compile(rf"\bexport\s+function\s*\*?\s*({_IDENT})\s*\(")),
    ("async function", re.compile(rf"\basync\s+function\s*\*?\s*({_IDENT})\s*\(")),
    ("function", re.compile(rf"\bfunction\s*\*?\s*({_IDENT})\s*\(")),
]


def parse_jsdoc_annotations(content: str) -> list[ParsedAnnotation]:
    """
    Parses every documented function of a JavaScript source.

    Doc blocks that are commented out, or that are not followed by a
    recognizable function, are skipped.

    Args:
        content: The source text.

    Returns:
        One annotation per documented function, in source order.

    Raises:
        InvalidTypeError: If a declaration uses a type outside the vocabulary.
        MalformedDeclarationError: If a @param/@property line cannot be parsed.
    """
    annotations = []

    for match in DOC_BLOCK_RE.finditer(content):
        if is_commented_out(content, match):
            continue

        description, raw_params = parse_doc_block(match.group(1))

        function_name = find_next_function_name(content[match.end():])
        if function_name is None:
            continue

        annotations.append(
            ParsedAnnotation(
                notice=description,
                function_name=function_name,
                params=build_params(raw_params),
            )
        )

    return annotations


def is_commented_out(content: str, match: re.Match) -> bool:
    line_start = content.rfind("\n", 0, match.start()) + 1
    if "//" in content[line_start:match.start()]:
        return True
    return any(line.lstrip().startswith("//") for line in match.group(0).splitlines())


def strip_decoration(line: str) -> str:
    """Removes the leading `` * `` of a doc block line."""
    return re.sub(r"^\s*\*\s?", "", line).strip()


def parse_doc_block(doc: str) -> tuple[str, list[RawParam]]:
    """Splits a doc block body into its description and its declarations."""
    lines = [strip_decoration(line) for line in doc.splitlines()]

    explicit = ""
    for line in lines:
        if line.startswith("@description"):
            explicit = line[len("@description"):].strip()
            break

    raw_params = [parse_declaration(line) for line in lines if DECLARATION_START_RE.match(line)]

    return explicit or extract_leading_description(lines), raw_params


def extract_leading_description(lines: list[str]) -> str:
    words = []
    for line in lines:
        if line.startswith("@"):
            break
        if line:
            words.append(line)
    return " ".join(words)


def parse_declaration(line: str) -> RawParam:
    m = DECLARATION_RE.match(line)
    if not m:
        raise MalformedDeclarationError(line, DECLARATION_SHAPES)

    raw_type = m.group("braced") if m.group("braced") is not None else m.group("bare")
    is_optional, name = extract_optional_name(m.group("name"))
    rest = m.group("rest").strip()

    type_token = raw_type.strip().lower()
    is_enum = False
    enum_values = None
    union_sub_types = None

    if is_union_token(type_token):
        union_sub_types = validate_union_token(raw_type)
    elif type_token == ENUM_TOKEN:
        is_enum = True
        list_match = ENUM_LIST_RE.match(rest)
        if list_match:
            values = [v.strip() for v in list_match.group(1).split(",")]
            rest = list_match.group(2)
            type_token, enum_values = classify_enum_values(values)
    else:
        type_token = validate_type_token(raw_type)

    return RawParam(
        is_property=m.group("tag") == "property",
        type_token=type_token,
        is_enum=is_enum,
        enum_values=enum_values,
        union_sub_types=union_sub_types,
        name=name,
        description=re.sub(r"^[-\s]+", "", rest),
        is_optional=is_optional,
    )


def extract_optional_name(bracketed: str) -> tuple[bool, str]:
    """``[user]`` and ``[user=default]`` are optional, ``user`` is not."""
    if bracketed.startswith("[") and bracketed.endswith("]"):
        name = bracketed[1:-1].split("=", 1)[0].strip()
        return True, name
    return False, bracketed


def parse_number(value: str) -> Optional[EnumLiteral]:
    if not NUMBER_RE.match(value):
        return None
    if re.fullmatch(r"[+-]?\d+", value):
        return int(value)
    number = float(value)
    return number if math.isfinite(number) else None


def classify_enum_values(values: list[str]) -> tuple[str, list[EnumLiteral]]:
    """An enum whose values are all numbers is a number enum, anything else a string enum."""
    numbers = [parse_number(v) for v in values]
    if all(n is not None for n in numbers):
        return "number", numbers
    return "string", values


def base_fragment(rp: RawParam) -> Fragment:
    if rp.union_sub_types:
        return OneOf(variants=[Primitive(type=t) for t in rp.union_sub_types])
    if rp.is_enum:
        if rp.enum_values is None:
            return Unknown()
        return EnumOf(base_type=rp.type_token, values=rp.enum_values)
    return Primitive(type=rp.type_token)


def fold(rp: RawParam, properties: list[RawParam]) -> Fragment:
    """
    Attaches the @property declarations below ``rp`` to its fragment.

    Only object-typed declarations receive properties. A property is a direct
    child when its name is ``<rp.name>.<field>``; deeper names are folded
    into the matching child recursively.
    """
    fragment = base_fragment(rp)
    if not (isinstance(fragment, Primitive) and fragment.type == "object"):
        return fragment

    prefix = rp.name + "."
    children: dict[str, RawParam] = {}
    for prop in properties:
        if prop.name.startswith(prefix):
            field = prop.name[len(prefix):]
            if field and "." not in field:
                children[field] = prop

    if not children:
        return fragment

    props = {}
    required = []
    for field, child in children.items():
        props[field] = fold(child, properties).model_copy(
            update={"description": child.description}
        )
        if not child.is_optional:
            required.append(field)

    return ObjectOf(properties=props, required=required)


def build_params(raw_params: list[RawParam]) -> list[ResolvedParam]:
    """
    Turns raw declarations into resolved parameters.

    A top-level name declared twice keeps its first position but takes the
    last declaration. A dotted @param (``options.name``) documents a nested
    field the same way @property does.
    """
    top_level: dict[str, RawParam] = {}
    properties = []
    for rp in raw_params:
        if rp.is_property or "." in rp.name:
            properties.append(rp)
        else:
            top_level[rp.name] = rp

    return [
        ResolvedParam(
            name=rp.name,
            description=rp.description,
            fragment=fold(rp, properties),
            enum_values=rp.enum_values if rp.is_enum else None,
            is_optional=rp.is_optional,
        )
        for rp in top_level.values()
    ]


def find_next_function_name(remaining: str) -> Optional[str]:
    """
    Finds the name of the first function declared after a doc block.

    Blank lines and ``//`` comments are skipped; the search stops at the next doc block.
    """
    for line in remaining.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue
        if stripped.startswith("/**"):
            return None

        for _shape, pattern in FUNCTION_SHAPES:
            m = pattern.search(line)
            if m:
                return m.group(1)

    return None
