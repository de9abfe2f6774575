"""
Dispatches source files to the extractor of their dialect.

Each source unit is processed on its own: a fatal error in one unit produces
a failed ``ExtractionResult`` for that unit and nothing else.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from . import config as conf
from .errors import DocSchemaError, SourceUnitNotFoundError
from .jsdoc import parse_jsdoc_annotations
from .models import Dialect, ExtractionResult, ParsedAnnotation, SourceUnit
from .typed import parse_python_annotations

UNEXPECTED_ERROR_KIND = "UnexpectedError"


class Extractor(ABC):
    dialect: Dialect

    @abstractmethod
    def extract(self, unit: SourceUnit) -> list[ParsedAnnotation]:
        """Returns the annotations of every documented function of ``unit``."""


class JsDocExtractor(Extractor):
    """Untyped dialect: types are declared in JSDoc comments."""

    dialect = Dialect.UNTYPED

    def extract(self, unit):
        text = unit.text
        if text is None:
            text = read_source(unit.path)
        return parse_jsdoc_annotations(text)


class PythonExtractor(Extractor):
    """Typed dialect: types come from the module's type hints."""

    dialect = Dialect.TYPED

    def extract(self, unit):
        return parse_python_annotations(unit.path)


EXTRACTORS = {
    Dialect.UNTYPED: JsDocExtractor(),
    Dialect.TYPED: PythonExtractor(),
}


def detect_dialect(path: Union[str, Path]) -> Dialect | None:
    dialect = conf.DIALECT_BY_SUFFIX.get(Path(path).suffix.lower())
    return Dialect(dialect) if dialect else None


def read_source(path: Union[str, Path]) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnitNotFoundError(str(path), str(e)) from e


def source_unit_for(path: Union[str, Path]) -> SourceUnit:
    """
    Builds the source unit of a file.

    Raises:
        SourceUnitNotFoundError: If the suffix has no dialect or an untyped file cannot be read.
    """
    dialect = detect_dialect(path)
    if dialect is None:
        raise SourceUnitNotFoundError(str(path), f"unsupported file type {Path(path).suffix!r}")
    text = read_source(path) if dialect is Dialect.UNTYPED else None
    return SourceUnit(path=str(path), dialect=dialect, text=text)


def extract_source_unit(unit: SourceUnit) -> ExtractionResult:
    """
    Extracts one source unit without raising.

    Returns:
        The annotations, or the error that aborted the unit.
    """
    try:
        annotations = EXTRACTORS[unit.dialect].extract(unit)
    except DocSchemaError as e:
        return ExtractionResult(
            source=unit.path, dialect=unit.dialect, error=str(e), error_kind=e.kind
        )
    except Exception as e:
        # typed units run user code, so anything can surface while inspecting them
        if unit.dialect is not Dialect.TYPED:
            raise
        return ExtractionResult(
            source=unit.path,
            dialect=unit.dialect,
            error=f"{e.__class__.__name__}: {e}",
            error_kind=UNEXPECTED_ERROR_KIND,
        )
    return ExtractionResult(source=unit.path, dialect=unit.dialect, annotations=annotations)


def extract_file(path: Union[str, Path]) -> ExtractionResult:
    """Like ``extract_source_unit``, starting from a path."""
    try:
        unit = source_unit_for(path)
    except SourceUnitNotFoundError as e:
        dialect = detect_dialect(path) or Dialect.UNTYPED
        return ExtractionResult(source=str(path), dialect=dialect, error=str(e), error_kind=e.kind)
    return extract_source_unit(unit)


def parse_annotations(path: Union[str, Path]) -> list[ParsedAnnotation]:
    """
    Parses a file of either dialect.

    Raises:
        DocSchemaError: If the file fails to extract.
    """
    unit = source_unit_for(path)
    return EXTRACTORS[unit.dialect].extract(unit)
