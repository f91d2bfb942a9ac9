"""Core constants used across docquery modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

FORMAT_VERSION_KEY = "format_version"
FORMAT_VERSION_TAIL_BYTES = 32
DEFAULT_TARGET_TRIPLE = "x86_64-unknown-linux-gnu"
DEFAULT_PROJECT_ROOT = Path(".")
LEGACY_REVISION_CUTOFF = 30
REGISTRY_TEMPLATE_PATH = Path("templates/registry.py.j2")
REGISTRY_OUTPUT_PATH = Path("src/versioned/registry.py")
SUPPORTED_REVISIONS_TEMPLATE_PATH = Path("templates/supported_revisions.md.j2")
SUPPORTED_REVISIONS_OUTPUT_PATH = Path("docs/supported_revisions.md")
TEMPLATE_REVISIONS_VARIABLE = "revisions"
TEMPORARY_OUTPUT_SUFFIX = ".tmp"
