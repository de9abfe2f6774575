"""
Errors raised while turning documented functions into schemas.

Every error here is fatal for the source unit being processed. Conditions that
are not fatal (a type that cannot be classified, a recursive type) are reported
with ``warnings.warn`` instead and resolve to an unknown schema.
"""


class DocSchemaError(Exception):
    """Base class for all fatal extraction errors."""

    kind = "DocSchemaError"


class InvalidTypeError(DocSchemaError):
    """A declared type token is outside the supported vocabulary."""

    kind = "InvalidTypeToken"

    def __init__(self, tokens: list[str], valid: tuple[str, ...], union: bool = False):
        self.tokens = list(tokens)
        self.valid = valid
        if not union:
            msg = f"Invalid type: {self.tokens[0]}."
        else:
            msg = f"Invalid type(s) in union: {', '.join(self.tokens)}."
        super().__init__(f"{msg} Valid types are: {', '.join(valid)}.")


class MalformedDeclarationError(DocSchemaError):
    """A @param/@property line does not match an accepted shape."""

    kind = "MalformedDeclaration"

    def __init__(self, line: str, shapes: tuple[str, ...]):
        self.line = line
        self.shapes = shapes
        super().__init__(
            f"Malformed declaration: {line!r}. Expected one of: {' or '.join(shapes)}"
        )


class SourceUnitNotFoundError(DocSchemaError):
    """A source file cannot be read or loaded."""

    kind = "SourceUnitNotFound"

    def __init__(self, path: str, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        msg = f"Source unit not found: {self.path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
