"""Package record disambiguation.

The root package of a dependency graph declares exactly one dependency:
the package whose documentation is being loaded. Several records may share
that name, e.g. two versions of one published package pulled in
transitively, so candidates are narrowed by name and then by either the
declared path or the version requirement.
"""

from __future__ import annotations

from pathlib import PurePath

from core.errors import AmbiguousPackageError, MetadataParsingError, PackageNotFoundError
from core.logging_config import get_logger
from core.types import DependencyGraph, DependencySpec, PackageRecord
from loading.version_requirement import parse_requirement

_LOGGER = get_logger(__name__)


def resolve_package(graph: DependencyGraph) -> PackageRecord:
    """Pick the one package record matching the root's dependency.

    Args:
        graph: Parsed dependency graph.

    Returns:
        The unique matching package record.

    Raises:
        MetadataParsingError: If the root does not have exactly one dependency.
        PackageNotFoundError: If no record matches.
        AmbiguousPackageError: If more than one record matches.
    """
    dependency = target_dependency(graph)
    same_name = [record for record in graph.packages if record.name == dependency.name]
    if dependency.kind == "path":
        candidates = [record for record in same_name if _matches_path(record, dependency)]
    else:
        requirement = parse_requirement(dependency.requirement or "")
        candidates = [
            record
            for record in same_name
            if record.version is not None and requirement.matches(record.version)
        ]
    if not candidates:
        raise PackageNotFoundError(
            f"No package named '{dependency.name}' matches {_describe(dependency)} "
            f"among {len(same_name)} same-named record(s)."
        )
    if len(candidates) > 1:
        candidate_ids = [record.package_id for record in candidates]
        raise AmbiguousPackageError(
            f"Found {len(candidates)} packages named '{dependency.name}' matching "
            f"{_describe(dependency)}: {', '.join(candidate_ids)}.",
            candidate_ids,
        )
    package = candidates[0]
    _LOGGER.info(
        "package_resolved",
        package_id=package.package_id,
        name=package.name,
        version=package.version,
    )
    return package


def target_dependency(graph: DependencyGraph) -> DependencySpec:
    """Return the root package's single dependency.

    Raises:
        MetadataParsingError: If the root declares zero or several dependencies.
    """
    dependencies = graph.root_dependencies
    if len(dependencies) != 1:
        raise MetadataParsingError(
            f"Root package '{graph.root.package_id}' must declare exactly one dependency, "
            f"found {len(dependencies)}."
        )
    return dependencies[0]


def _matches_path(record: PackageRecord, dependency: DependencySpec) -> bool:
    if record.manifest_path is None or dependency.path is None:
        return False
    return PurePath(record.manifest_path).is_relative_to(PurePath(dependency.path))


def _describe(dependency: DependencySpec) -> str:
    if dependency.kind == "path":
        return f"path '{dependency.path}'"
    return f"requirement '{dependency.requirement}'"
