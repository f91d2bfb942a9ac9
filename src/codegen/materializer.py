"""Template materialization for revision dispatch sources.

Every template is rendered in memory before anything is written. Outputs
are then staged as sibling temporary files and only moved over their
targets once all of them were written. If moving one of them fails, the
targets already replaced get their previous contents back, so a failed
run never leaves a mix of old and regenerated files behind.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, StrictUndefined, TemplateError

from codegen.filters import at_most, greater_than
from core.constants import (
    REGISTRY_OUTPUT_PATH,
    REGISTRY_TEMPLATE_PATH,
    SUPPORTED_REVISIONS_OUTPUT_PATH,
    SUPPORTED_REVISIONS_TEMPLATE_PATH,
    TEMPLATE_REVISIONS_VARIABLE,
    TEMPORARY_OUTPUT_SUFFIX,
)
from core.errors import CodegenError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class TemplatePair:
    """Template path and the output path it renders to, relative to the project root."""

    template: Path
    output: Path


DEFAULT_TEMPLATE_PAIRS: tuple[TemplatePair, ...] = (
    TemplatePair(template=REGISTRY_TEMPLATE_PATH, output=REGISTRY_OUTPUT_PATH),
    TemplatePair(
        template=SUPPORTED_REVISIONS_TEMPLATE_PATH,
        output=SUPPORTED_REVISIONS_OUTPUT_PATH,
    ),
)


def parse_revision_arguments(values: Sequence[str]) -> tuple[int, ...]:
    """Parse generator revision arguments.

    Args:
        values: Raw command-line values.

    Returns:
        Revisions in the given order.

    Raises:
        CodegenError: If a value is not an unsigned integer, the list is
            empty, or it is not strictly ascending.
    """
    if not values:
        raise CodegenError("No revisions given. Pass the supported revisions, e.g. '28 29 30'.")
    revisions: list[int] = []
    for value in values:
        if not (value.isascii() and value.isdigit()):
            raise CodegenError(f"invalid version \"{value}\": expected an unsigned integer.")
        revision = int(value)
        if revisions and revision <= revisions[-1]:
            raise CodegenError(
                f"invalid version \"{value}\": revisions must be strictly ascending, "
                f"got {revision} after {revisions[-1]}."
            )
        revisions.append(revision)
    return tuple(revisions)


def build_environment() -> Environment:
    """Create the template environment with strict variable resolution."""
    environment = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    environment.filters["at_most"] = at_most
    environment.filters["greater_than"] = greater_than
    return environment


def render_template(template_text: str, revisions: Sequence[int], name: str = "<template>") -> str:
    """Render one template with the revision list bound.

    Args:
        template_text: Jinja2 template source.
        revisions: Ascending supported revisions.
        name: Template label for error messages.

    Returns:
        Rendered text.

    Raises:
        CodegenError: If the template is invalid or references an
            undefined variable.
    """
    environment = build_environment()
    try:
        template = environment.from_string(template_text)
        return template.render({TEMPLATE_REVISIONS_VARIABLE: list(revisions)})
    except TemplateError as error:
        raise CodegenError(f"failed to render template {name}: {error}") from error


def materialize_templates(
    revisions: Sequence[int],
    project_root: Path,
    pairs: Sequence[TemplatePair] = DEFAULT_TEMPLATE_PAIRS,
) -> tuple[Path, ...]:
    """Render every template pair and overwrite the outputs.

    Args:
        revisions: Ascending supported revisions.
        project_root: Directory that pair paths are relative to.
        pairs: Template and output paths.

    Returns:
        Written output paths.

    Raises:
        CodegenError: On any read, render, or write failure. Outputs are
            left untouched in that case.
    """
    rendered: list[tuple[Path, str]] = []
    for pair in pairs:
        template_path = project_root / pair.template
        template_text = _read_template(template_path)
        output_text = render_template(template_text, revisions, str(template_path))
        rendered.append((project_root / pair.output, output_text))
    previous = _snapshot_outputs([output_path for output_path, _ in rendered])
    staged = _stage_outputs(rendered)
    for position, (staged_path, (output_path, _)) in enumerate(zip(staged, rendered)):
        try:
            os.replace(staged_path, output_path)
        except OSError as error:
            _restore_outputs(previous[:position])
            _remove_files(staged[position:])
            raise CodegenError(f"failed to write file {output_path}: {error}") from error
    outputs = tuple(output_path for output_path, _ in rendered)
    _LOGGER.info(
        "templates_materialized",
        revisions=list(revisions),
        outputs=[str(path) for path in outputs],
    )
    return outputs


def _read_template(template_path: Path) -> str:
    try:
        return template_path.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise CodegenError(f"failed to read file {template_path}: template not found.") from error
    except (OSError, UnicodeDecodeError) as error:
        raise CodegenError(f"failed to read file {template_path}: {error}") from error


def _snapshot_outputs(output_paths: Sequence[Path]) -> list[tuple[Path, bytes | None]]:
    snapshot: list[tuple[Path, bytes | None]] = []
    for output_path in output_paths:
        try:
            snapshot.append((output_path, output_path.read_bytes()))
        except FileNotFoundError:
            snapshot.append((output_path, None))
        except OSError as error:
            raise CodegenError(f"failed to read file {output_path}: {error}") from error
    return snapshot


def _stage_outputs(rendered: Sequence[tuple[Path, str]]) -> list[Path]:
    staged: list[Path] = []
    for output_path, text in rendered:
        staged_path = output_path.with_name(output_path.name + TEMPORARY_OUTPUT_SUFFIX)
        staged.append(staged_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            staged_path.write_text(text, encoding="utf-8")
        except OSError as error:
            _remove_files(staged)
            raise CodegenError(f"failed to write file {output_path}: {error}") from error
    return staged


def _restore_outputs(snapshot: Sequence[tuple[Path, bytes | None]]) -> None:
    """Put back the previous contents of outputs that were already replaced."""
    for output_path, content in snapshot:
        try:
            if content is None:
                output_path.unlink(missing_ok=True)
            else:
                output_path.write_bytes(content)
        except OSError as error:
            _LOGGER.error("output_restore_failed", path=str(output_path), error=str(error))


def _remove_files(paths: Sequence[Path]) -> None:
    for path in paths:
        path.unlink(missing_ok=True)
