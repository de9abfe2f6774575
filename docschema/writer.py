import json
import os
from typing import Any


def write_schemas(output_path: str, schemas: list[dict[str, Any]], indent: int = 2) -> None:
    """Writes the schemas as a JSON array, creating parent directories if needed."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(schemas, f, indent=indent, ensure_ascii=False)
        f.write("\n")
