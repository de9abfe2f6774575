"""
All project configuration lives here.

Values can be overridden through environment variables (a ``.env`` file in the
working directory is loaded automatically).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Directory scanned for source files when no directory is given on the command line
SOURCE_DIR = os.getenv("DOCSCHEMA_SOURCE_DIR", "services")

# Where the collected schemas are written
OUTPUT_FILE = os.getenv("DOCSCHEMA_OUTPUT_FILE", "schemas.json")

# Glob patterns (relative to SOURCE_DIR) used for file discovery
SOURCE_PATTERNS = ["**/*.py", "**/*.js", "**/*.mjs", "**/*.cjs", "**/*.jsx"]

# File suffix -> documentation dialect.
# "untyped" files declare types inside JSDoc comments, "typed" files are
# Python modules whose type hints are read directly.
DIALECT_BY_SUFFIX = {
    ".js": "untyped",
    ".mjs": "untyped",
    ".cjs": "untyped",
    ".jsx": "untyped",
    ".py": "typed",
}

# Name given to typed-dialect functions whose name cannot be recovered
ANONYMOUS_FUNCTION_NAME = "anonymous"

# Indentation of the written JSON file
JSON_INDENT = 2

# Stop at the first source unit that fails instead of continuing with the rest
FAIL_FAST = os.getenv("DOCSCHEMA_FAIL_FAST", "").lower() in ("1", "true", "yes")
