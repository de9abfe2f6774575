"""
Finds the source files to extract.
"""

import glob
import os

from . import config as conf


def find_source_files(directory: str, patterns: list[str] | None = None) -> list[str]:
    """
    Finds files matching glob patterns under a directory.

    Args:
        directory: The directory to search in.
        patterns: Glob patterns relative to ``directory``. Defaults to ``config.SOURCE_PATTERNS``.

    Returns:
        Sorted, de-duplicated paths whose suffix maps to a known dialect.
    """
    patterns = patterns or conf.SOURCE_PATTERNS
    found = set()
    for pattern in patterns:
        for path in glob.glob(os.path.join(directory, pattern), recursive=True):
            suffix = os.path.splitext(path)[1].lower()
            if os.path.isfile(path) and suffix in conf.DIALECT_BY_SUFFIX:
                found.add(os.path.normpath(path))
    return sorted(found)
