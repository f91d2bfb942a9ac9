"""Runtime configuration model for docquery.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_PROJECT_ROOT, DEFAULT_TARGET_TRIPLE
from core.errors import DocQueryConfigError


@dataclass(frozen=True)
class DocQueryConfig:
    """Validated runtime configuration.

    Attributes:
        target_triple: Platform triple handed to revisions whose index
            builders still require one.
        project_root: Root directory that generator template and output
            paths are resolved against.
    """

    target_triple: str
    project_root: Path

    @classmethod
    def from_env(cls, target_triple: str | None = None) -> "DocQueryConfig":
        """Build config from process environment variables.

        Args:
            target_triple: Optional override used instead of
                DOCQUERY_TARGET_TRIPLE. It is validated the same way.

        Returns:
            A validated config object.

        Raises:
            DocQueryConfigError: If environment values are invalid.
        """
        if target_triple is None:
            target_triple = os.getenv("DOCQUERY_TARGET_TRIPLE", DEFAULT_TARGET_TRIPLE)
        return cls(
            target_triple=_parse_target_triple(target_triple),
            project_root=project_root_from_env(),
        )


def project_root_from_env() -> Path:
    """Return the resolved DOCQUERY_PROJECT_ROOT directory.

    Commands that only touch project files read this alone, so an invalid
    target triple in the environment does not affect them.
    """
    project_root_value = os.getenv("DOCQUERY_PROJECT_ROOT", str(DEFAULT_PROJECT_ROOT))
    return Path(project_root_value).expanduser().resolve()


def _parse_target_triple(raw_value: str) -> str:
    """Validate the target triple environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Stripped target triple.

    Raises:
        DocQueryConfigError: If value is empty or not hyphen-separated.
    """
    value = raw_value.strip()
    if not value or "-" not in value or any(part == "" for part in value.split("-")):
        raise DocQueryConfigError(
            "Invalid DOCQUERY_TARGET_TRIPLE value: "
            f"expected a triple like '{DEFAULT_TARGET_TRIPLE}', got '{raw_value}'. "
            "Set DOCQUERY_TARGET_TRIPLE to a hyphen-separated platform triple."
        )
    return value
