"""Unit tests for dependency-graph metadata parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import DocumentIoError, MetadataParsingError
from loading.cargo_metadata import load_dependency_graph, parse_dependency_graph
from tests.fixture_paths import fixture_path


def test_load_dependency_graph_reads_path_dependency() -> None:
    """Path dependencies should keep their declared directory."""
    graph = load_dependency_graph(fixture_path("metadata/path_dependency.json"))

    dependency = graph.root_dependencies[0]
    assert graph.root.name == "placeholder" and len(graph.packages) == 3
    assert dependency.kind == "path" and dependency.path == Path("/work/crates/demo")


def test_load_dependency_graph_reads_version_requirement() -> None:
    """Registry dependencies should keep their requirement text."""
    graph = load_dependency_graph(fixture_path("metadata/version_dependency.json"))

    dependency = graph.root_dependencies[0]
    assert dependency.kind == "version" and dependency.requirement == "^1.2"


def test_missing_resolve_section_raises() -> None:
    """Metadata without a resolve root should be rejected."""
    with pytest.raises(MetadataParsingError, match="resolve"):
        load_dependency_graph(fixture_path("metadata/missing_resolve.json"))


def test_invalid_json_raises(tmp_path: Path) -> None:
    """Unparseable metadata should raise a parsing error."""
    path = tmp_path / "metadata.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MetadataParsingError, match="Failed to parse metadata JSON"):
        load_dependency_graph(path)


def test_missing_metadata_file_raises_io_error(tmp_path: Path) -> None:
    """A missing metadata file should raise an I/O error."""
    with pytest.raises(DocumentIoError):
        load_dependency_graph(tmp_path / "absent.json")


def test_root_not_in_packages_raises() -> None:
    """A resolve root without a package entry should be rejected."""
    payload = {"packages": [], "resolve": {"root": "ghost 0.1.0"}}

    with pytest.raises(MetadataParsingError, match="ghost"):
        parse_dependency_graph(payload)


def test_package_without_name_raises() -> None:
    """Packages must carry a non-empty name."""
    payload = {
        "packages": [{"id": "a 0.1.0", "name": "", "dependencies": []}],
        "resolve": {"root": "a 0.1.0"},
    }

    with pytest.raises(MetadataParsingError, match=r"packages\[0\]\.name"):
        parse_dependency_graph(payload)


def test_packages_must_be_a_list() -> None:
    """A non-list packages field should be rejected."""
    with pytest.raises(MetadataParsingError, match="expected list"):
        parse_dependency_graph({"packages": {"a": 1}, "resolve": {"root": "a"}})
