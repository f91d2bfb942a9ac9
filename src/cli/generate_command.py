"""Generate command wiring for docquery CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from codegen.materializer import materialize_templates, parse_revision_arguments
from core.config import project_root_from_env
from core.errors import CodegenError


def add_generate_command(subparsers: Any) -> None:
    """Register generate subcommand."""
    parser = subparsers.add_parser(
        "generate",
        help="Regenerate revision dispatch sources from templates",
    )
    parser.add_argument(
        "revisions",
        nargs="*",
        help="Supported revisions in ascending order, e.g. 28 29 30",
    )
    parser.add_argument(
        "--project-root",
        help="Directory holding templates/ and the generated outputs",
    )


def run_generate_command(args: argparse.Namespace) -> int:
    """Render templates and print each written output path.

    Only the project root is read from the environment here.
    """
    project_root = Path(args.project_root) if args.project_root else project_root_from_env()
    try:
        revisions = parse_revision_arguments(args.revisions)
        outputs = materialize_templates(revisions, project_root)
    except CodegenError as error:
        print(f"generate_error={error}")
        return 1
    for output in outputs:
        print(f"written={output}")
    return 0
