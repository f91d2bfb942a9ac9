"""Dependency-graph metadata parsing.

This module loads ``cargo metadata`` style JSON into typed package
records. Only the shape is consumed here; running the metadata provider
is left to callers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

from core.errors import MetadataParsingError
from core.types import DependencyGraph, DependencySpec, PackageRecord
from loading.document_reader import read_text_file


def load_dependency_graph(metadata_path: Path | str) -> DependencyGraph:
    """Read and parse a metadata JSON file.

    Args:
        metadata_path: Path to the metadata JSON file.

    Returns:
        Parsed dependency graph.

    Raises:
        DocumentIoError: If the file cannot be read.
        MetadataParsingError: If the payload has an unexpected shape.
    """
    path = Path(metadata_path).expanduser()
    text = read_text_file(path, "metadata")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise MetadataParsingError(
            f"Failed to parse metadata JSON at {path}: {error.msg}."
        ) from error
    return parse_dependency_graph(payload)


def parse_dependency_graph(payload: object) -> DependencyGraph:
    """Parse a decoded metadata payload.

    Args:
        payload: Decoded JSON object with ``packages`` and ``resolve.root``.

    Returns:
        Parsed dependency graph.

    Raises:
        MetadataParsingError: If required fields are missing or ill-typed,
            or the root package is not part of ``packages``.
    """
    root_mapping = _expect_mapping(payload, "metadata root")
    raw_packages = _expect_sequence(root_mapping.get("packages"), "metadata 'packages'")
    packages: list[PackageRecord] = []
    dependencies_by_id: dict[str, tuple[DependencySpec, ...]] = {}
    for index, raw_package in enumerate(raw_packages):
        package_mapping = _expect_mapping(raw_package, f"packages[{index}]")
        record = _parse_package(package_mapping, index)
        packages.append(record)
        dependencies_by_id[record.package_id] = _parse_dependencies(package_mapping, record)
    root_id = _parse_root_id(root_mapping)
    root = next((record for record in packages if record.package_id == root_id), None)
    if root is None:
        raise MetadataParsingError(
            f"Root package '{root_id}' is not listed in metadata 'packages'."
        )
    return DependencyGraph(
        root=root,
        root_dependencies=dependencies_by_id[root_id],
        packages=tuple(packages),
    )


def _parse_root_id(root_mapping: Mapping[str, object]) -> str:
    resolve = root_mapping.get("resolve")
    if resolve is None:
        raise MetadataParsingError(
            "Metadata has no 'resolve' section, so the root package is unknown."
        )
    resolve_mapping = _expect_mapping(resolve, "metadata 'resolve'")
    root_id = resolve_mapping.get("root")
    if not isinstance(root_id, str) or not root_id:
        raise MetadataParsingError("Metadata 'resolve.root' must name the root package id.")
    return root_id


def _parse_package(package_mapping: Mapping[str, object], index: int) -> PackageRecord:
    package_id = _expect_string(package_mapping.get("id"), f"packages[{index}].id")
    name = _expect_string(package_mapping.get("name"), f"packages[{index}].name")
    version = _optional_string(package_mapping.get("version"), f"packages[{index}].version")
    manifest = _optional_string(
        package_mapping.get("manifest_path"),
        f"packages[{index}].manifest_path",
    )
    return PackageRecord(
        package_id=package_id,
        name=name,
        version=version,
        manifest_path=Path(manifest) if manifest is not None else None,
    )


def _parse_dependencies(
    package_mapping: Mapping[str, object],
    record: PackageRecord,
) -> tuple[DependencySpec, ...]:
    raw_dependencies = package_mapping.get("dependencies", [])
    context = f"dependencies of '{record.package_id}'"
    dependencies: list[DependencySpec] = []
    for index, raw_dependency in enumerate(_expect_sequence(raw_dependencies, context)):
        item_context = f"{context}[{index}]"
        dependency = _expect_mapping(raw_dependency, item_context)
        name = _expect_string(dependency.get("name"), f"{item_context}.name")
        path = _optional_string(dependency.get("path"), f"{item_context}.path")
        if path is not None:
            dependencies.append(DependencySpec(name=name, kind="path", path=Path(path)))
            continue
        requirement = _expect_string(dependency.get("req"), f"{item_context}.req")
        dependencies.append(DependencySpec(name=name, kind="version", requirement=requirement))
    return tuple(dependencies)


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        return value
    raise MetadataParsingError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise MetadataParsingError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _expect_string(value: object, context: str) -> str:
    if isinstance(value, str) and value:
        return value
    raise MetadataParsingError(f"Invalid {context}: expected non-empty string.")


def _optional_string(value: object, context: str) -> str | None:
    if value is None:
        return None
    return _expect_string(value, context)
