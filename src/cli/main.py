"""Docquery CLI entry points.
This module exposes commands for revision detection, querying, and
dispatch source generation. It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from typing import Any, Sequence

from cli.generate_command import add_generate_command, run_generate_command
from cli.query_command import add_query_command, run_query_command
from core.config import DocQueryConfig
from core.errors import DocQueryError
from loading.document_reader import read_document
from versioned.client import DocQueryClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="docquery", description="Docquery CLI")
    parser.add_argument(
        "--target-triple",
        help="Override DOCQUERY_TARGET_TRIPLE for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_detect_command(subparsers)
    add_query_command(subparsers)
    add_generate_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the docquery CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "detect":
        return _run_detect_command(args)
    if args.command == "generate":
        return run_generate_command(args)
    if args.command == "query":
        try:
            client = _build_client(args.target_triple)
        except DocQueryError as error:
            print(f"config_error={error}")
            return 1
        return run_query_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(target_triple: str | None) -> DocQueryClient:
    """Build SDK client with optional target-triple override.

    Args:
        target_triple: Optional override value.

    Returns:
        Configured SDK client.

    Raises:
        DocQueryConfigError: If the effective configuration is invalid.
    """
    return DocQueryClient(DocQueryConfig.from_env(target_triple or None))


def _add_detect_command(subparsers: Any) -> None:
    parser = subparsers.add_parser("detect", help="Print a document's format revision")
    parser.add_argument("path", help="Documentation export file")


def _run_detect_command(args: argparse.Namespace) -> int:
    """Handle detect command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        document = read_document(args.path)
    except DocQueryError as error:
        print(f"detect_error={error}")
        return 1
    print(f"format_version={document.revision}")
    return 0
