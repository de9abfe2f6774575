"""
Extracts annotations from Python modules.

Types come from the module's own type hints, descriptions from docstrings
(Google, NumPy, reST and Epydoc styles are understood by ``docstring_parser``).

Keyword arguments typed with ``Unpack`` are expanded into one parameter per
field of the TypedDict:

```py
class Options(TypedDict):
    user: User
    token: NotRequired[int]

def get_balance(**kwargs: Unpack[Options]) -> None:
    ""\"
    Fetch the token balance for a user.

    Args:
        user: The user to look up.
        token: The token id.
    ""\"
```
"""

import ast
import importlib.util
import inspect
import re
import sys
import typing
import warnings
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union, get_args, get_origin, get_type_hints

import docstring_parser
import typing_extensions

from . import config as conf
from .errors import SourceUnitNotFoundError
from .models import ParsedAnnotation, ResolvedParam, Unknown
from .python_types import PythonTypeGraph, annotated_description, is_typeddict
from .resolver import SchemaResolver

FunctionInfo = Dict[str, Any]

_UNPACK_FORMS = {typing_extensions.Unpack}
if hasattr(typing, "Unpack"):
    _UNPACK_FORMS.add(typing.Unpack)


class FunctionCollector(ast.NodeVisitor):
    """
    Collects module-level function definitions and lambdas bound to a name,
    in source order. Methods and nested functions are not collected.
    """

    def __init__(self):
        self.functions: List[FunctionInfo] = []
        self._seen: set[str] = set()

    def _record(self, name: str, node: ast.AST, kind: str):
        if name in self._seen:
            return
        self._seen.add(name)
        self.functions.append({
            'name': name,
            'lineno': node.lineno,
            'end_lineno': getattr(node, 'end_lineno', None),
            'kind': kind,
        })

    def visit_FunctionDef(self, node: ast.FunctionDef):
        self._record(node.name, node, 'function')

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef):
        self._record(node.name, node, 'async_function')

    def visit_Assign(self, node: ast.Assign):
        if isinstance(node.value, ast.Lambda):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    self._record(target.id, node, 'lambda')

    def visit_AnnAssign(self, node: ast.AnnAssign):
        if isinstance(node.value, ast.Lambda) and isinstance(node.target, ast.Name):
            self._record(node.target.id, node, 'lambda')

    def visit_ClassDef(self, node: ast.ClassDef):
        pass


def collect_functions(source: str, filename: str = "<source>") -> List[FunctionInfo]:
    tree = ast.parse(source, filename=filename)
    collector = FunctionCollector()
    collector.visit(tree)
    return collector.functions


@contextmanager
def loaded_module(path: Union[str, Path]) -> Iterator[Any]:
    """
    Imports a Python file under a private module name.

    The module stays registered in ``sys.modules`` while the context is open so
    that forward references in its classes can be evaluated.

    Raises:
        SourceUnitNotFoundError: If the file does not exist or fails to import.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceUnitNotFoundError(str(path), "no such file")

    stem = re.sub(r"\W", "_", path.stem)
    module_name = f"_docschema_{stem}_{id(path)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SourceUnitNotFoundError(str(path), "cannot be loaded as a Python module")

    module = importlib.util.module_from_spec(spec)
    old_module = sys.modules.get(module_name)
    sys.modules[module_name] = module
    # sibling imports resolve against the file's own directory
    package_dir = str(path.resolve().parent)
    sys.path.insert(0, package_dir)
    try:
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise SourceUnitNotFoundError(str(path), f"{e.__class__.__name__}: {e}") from e
        yield module
    finally:
        if package_dir in sys.path:
            sys.path.remove(package_dir)
        if old_module is None:
            sys.modules.pop(module_name, None)
        else:
            sys.modules[module_name] = old_module


def parse_python_annotations(path: Union[str, Path]) -> List[ParsedAnnotation]:
    """
    Parses every module-level function of a Python source file.

    Args:
        path: The path of the ``.py`` file.

    Returns:
        One annotation per function, in source order.

    Raises:
        SourceUnitNotFoundError: If the file cannot be read, parsed or imported.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
        functions = collect_functions(source, filename=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnitNotFoundError(str(path), str(e)) from e
    except SyntaxError as e:
        raise SourceUnitNotFoundError(str(path), f"SyntaxError: {e}") from e

    graph = PythonTypeGraph()
    annotations = []
    with loaded_module(path) as module:
        for info in functions:
            func = getattr(module, info['name'], None)
            if not callable(func):
                continue
            annotations.append(function_to_annotation(func, graph, name=info['name']))
    return annotations


def function_to_annotation(
    func: Callable, graph: Optional[PythonTypeGraph] = None, name: Optional[str] = None
) -> ParsedAnnotation:
    """
    Converts a Python function into a parsed annotation.

    Args:
        func: The function to convert.
        graph: The type graph to resolve hints with. A new one is created if omitted.
        name: The name to register the function under. Defaults to ``func.__name__``.

    Returns:
        The annotation, with one parameter per argument (or per unpacked field).
    """
    graph = graph or PythonTypeGraph()
    resolver = SchemaResolver(graph)
    func = inspect.unwrap(func)

    function_name = name or getattr(func, "__name__", "")
    if not function_name or function_name == "<lambda>":
        function_name = conf.ANONYMOUS_FUNCTION_NAME

    docstring = parse_docstring(inspect.getdoc(func) or "")
    notice = collapse_whitespace(docstring.description or "")
    doc_params = {
        p.arg_name: collapse_whitespace(p.description)
        for p in docstring.params
        if p.description
    }

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return ParsedAnnotation(notice=notice, function_name=function_name)

    hints = function_hints(func)
    params: List[ResolvedParam] = []

    for param in signature.parameters.values():
        if param.name in ("self", "cls") or param.kind is inspect.Parameter.VAR_POSITIONAL:
            continue

        hint = hints.get(param.name, inspect.Parameter.empty)

        if param.kind is inspect.Parameter.VAR_KEYWORD:
            fields_type = unpacked_typeddict(hint)
            if fields_type is not None:
                params.extend(expand_fields(fields_type, doc_params, resolver))
            continue

        if hint is inspect.Parameter.empty:
            fragment, optional_by_union = Unknown(), False
        else:
            fragment, optional_by_union = resolver.resolve_optional(hint)

        params.append(ResolvedParam(
            name=param.name,
            description=doc_params.get(param.name) or annotated_description(hint),
            fragment=fragment,
            is_optional=param.default is not inspect.Parameter.empty or optional_by_union,
        ))

    return ParsedAnnotation(
        notice=notice,
        function_name=function_name,
        params=unique_params(params, function_name),
    )


def function_hints(func: Callable) -> Dict[str, Any]:
    try:
        return get_type_hints(func, include_extras=True)
    except Exception as e:  # string hints are evaluated as arbitrary expressions
        warnings.warn(
            f"Could not evaluate type hints of {getattr(func, '__name__', func)}: {e}",
            UserWarning,
        )
        return dict(getattr(func, "__annotations__", {}))


def unpacked_typeddict(hint: Any) -> Optional[Any]:
    """The TypedDict of a ``**kwargs: Unpack[TD]`` hint, or None."""
    if get_origin(hint) in _UNPACK_FORMS:
        args = get_args(hint)
        if args and is_typeddict(args[0]):
            return args[0]
    return None


def expand_fields(
    fields_type: Any, doc_params: Dict[str, str], resolver: SchemaResolver
) -> List[ResolvedParam]:
    graph = resolver.graph
    params = []
    for name in graph.member_names(fields_type):
        member_type = graph.resolve_member_type(fields_type, name)
        fragment, optional_by_union = resolver.resolve_optional(member_type)
        params.append(ResolvedParam(
            name=name,
            description=doc_params.get(name) or graph.member_description(fields_type, name) or "",
            fragment=fragment,
            is_optional=graph.is_optional_member(fields_type, name) or optional_by_union,
        ))
    return params


def unique_params(params: List[ResolvedParam], function_name: str) -> List[ResolvedParam]:
    seen = set()
    result = []
    for param in params:
        if param.name in seen:
            warnings.warn(
                f"Parameter {param.name!r} of {function_name} is declared twice; keeping the first.",
                UserWarning,
            )
            continue
        seen.add(param.name)
        result.append(param)
    return result


def collapse_whitespace(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


def parse_docstring(doc: str) -> docstring_parser.Docstring:
    """
    Parses a cleaned docstring (as returned by ``inspect.getdoc``).

    ``docstring_parser`` dedents everything after the first line on its own, which
    flattens the section body of a docstring that opens with ``Args:``. A leading
    blank line keeps the first line in the indentation computation.
    """
    return docstring_parser.parse("\n" + doc)
