"""Query command wiring for docquery CLI."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from core.errors import DocQueryError, DocumentIoError
from loading.document_reader import read_text_file
from versioned.client import DocQueryClient


def add_query_command(subparsers: Any) -> None:
    """Register query subcommand."""
    parser = subparsers.add_parser(
        "query",
        help="Run a query against one document, or a current/baseline pair",
    )
    parser.add_argument("--current", required=True, help="Export file being queried")
    parser.add_argument("--baseline", help="Export file to compare against")
    parser.add_argument(
        "--metadata",
        help="Dependency-graph metadata used to resolve the current package",
    )
    query_group = parser.add_mutually_exclusive_group(required=True)
    query_group.add_argument("--query", help="Query text")
    query_group.add_argument("--query-file", help="File containing query text")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Query variable; VALUE is parsed as JSON, else used as a string",
    )


def run_query_command(client: DocQueryClient, args: argparse.Namespace) -> int:
    """Execute a query and print one JSON object per result row."""
    try:
        variables = parse_variable_arguments(args.var)
        query_text = _query_text(args)
        rows = client.query(
            args.current,
            query_text,
            variables,
            baseline_path=args.baseline,
            metadata_path=args.metadata,
        )
        row_count = 0
        for row in rows:
            print(json.dumps(row, sort_keys=True))
            row_count += 1
    except DocQueryError as error:
        print(f"{_error_label(error)}={error}")
        return 1
    print(f"row_count={row_count}")
    return 0


def parse_variable_arguments(values: list[str]) -> dict[str, Any]:
    """Parse repeated NAME=VALUE arguments into query variables.

    Args:
        values: Raw argument values.

    Returns:
        Variable mapping.

    Raises:
        DocQueryError: If an argument lacks a name or separator.
    """
    variables: dict[str, Any] = {}
    for value in values:
        name, separator, raw_value = value.partition("=")
        if not separator or not name:
            raise DocQueryError(
                f"Invalid --var value {value!r}. Expected NAME=VALUE, e.g. --var kind=function."
            )
        try:
            variables[name] = json.loads(raw_value)
        except json.JSONDecodeError:
            variables[name] = raw_value
    return variables


def _query_text(args: argparse.Namespace) -> str:
    if args.query is not None:
        return str(args.query)
    return read_text_file(Path(args.query_file), "query file")


def _error_label(error: DocQueryError) -> str:
    if isinstance(error, DocumentIoError):
        return "io_error"
    return "query_error"
