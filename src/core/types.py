"""Shared typed models.

This module defines immutable data models used by loading, versioned
pipeline, query, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping

DependencyKind = Literal["path", "version"]
QueryRow = dict[str, Any]
QueryVariables = Mapping[str, Any]


@dataclass(frozen=True)
class Document:
    """One loaded documentation export.

    Attributes:
        source: Path or label the text was read from.
        text: Full raw document text.
        revision: Detected schema revision tag.
    """

    source: str
    text: str
    revision: int


@dataclass(frozen=True)
class PackageRecord:
    """One package entry from a dependency graph.

    Attributes:
        package_id: Opaque identifier unique within the graph.
        name: Published package name.
        version: Semantic version string when known.
        manifest_path: Filesystem path of the package manifest when known.
    """

    package_id: str
    name: str
    version: str | None = None
    manifest_path: Path | None = None


@dataclass(frozen=True)
class DependencySpec:
    """One dependency declared by the root package.

    Attributes:
        name: Dependency package name.
        kind: ``path`` for path references, ``version`` for requirements.
        path: Declared directory for path dependencies.
        requirement: Version requirement for registry dependencies.
    """

    name: str
    kind: DependencyKind
    path: Path | None = None
    requirement: str | None = None


@dataclass(frozen=True)
class DependencyGraph:
    """Parsed dependency-graph metadata.

    Attributes:
        root: Root package record.
        root_dependencies: Dependencies declared by the root package.
        packages: Every package record in the graph, root included.
    """

    root: PackageRecord
    root_dependencies: tuple[DependencySpec, ...]
    packages: tuple[PackageRecord, ...]
