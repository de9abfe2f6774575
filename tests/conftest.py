import sys
import textwrap
from pathlib import Path

import pytest

# Get the absolute path to the project root
project_root = str(Path(__file__).parent.parent.absolute())

# Add the project root to Python path
if project_root not in sys.path:
    sys.path.insert(0, project_root)


@pytest.fixture
def write_source(tmp_path):
    """Writes a dedented source file into tmp_path and returns its path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path
    return _write
