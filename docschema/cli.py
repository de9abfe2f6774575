"""
Command line entry point: extract every source file of a directory and write
the collected function schemas to a JSON file.
"""

import argparse
import sys
import warnings

import colorama
from colorama import Fore, Style
from rich.console import Console

from . import config as conf
from .assembler import generate_schema
from .console import print_header, unit_error_print, unit_ok_print
from .discovery import find_source_files
from .extractor import extract_file
from .writer import write_schemas


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docschema",
        description="Generate LLM function-calling schemas from documented functions.",
    )
    parser.add_argument("--source-dir", default=conf.SOURCE_DIR, help="directory to scan (default: %(default)s)")
    parser.add_argument("--output", default=conf.OUTPUT_FILE, help="JSON file to write (default: %(default)s)")
    parser.add_argument("--fail-fast", action="store_true", default=conf.FAIL_FAST,
                        help="stop at the first file that fails")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    colorama.just_fix_windows_console()
    console = Console()

    print_header("SCHEMA GENERATION")

    files = find_source_files(args.source_dir)
    if not files:
        print(f"{Fore.YELLOW}No source files found in {args.source_dir}{Style.RESET_ALL}")

    schemas = []
    failed = 0
    for path in files:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = extract_file(path)

        if not result.ok:
            failed += 1
            unit_error_print(path, result.error_kind, result.error)
            if args.fail_fast:
                break
            continue

        unit_ok_print(path, len(result.annotations))
        for warning in caught:
            print(f"{Fore.YELLOW}    ! {warning.message}{Style.RESET_ALL}")
        schemas.extend(generate_schema(annotation) for annotation in result.annotations)

    write_schemas(args.output, schemas, indent=conf.JSON_INDENT)
    console.print(
        f"[bold green]Schema generation completed![/] {len(schemas)} schemas written to [blue]{args.output}[/]"
    )
    if failed:
        console.print(f"[bold red]{failed} file(s) failed[/]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
