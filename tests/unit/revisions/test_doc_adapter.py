"""Unit tests for the revision-neutral query resolver."""

from __future__ import annotations

import pytest

from core.types import PackageRecord
from revisions.adapter import DocAdapter
from revisions.model import CrateDiff, PackageIndex
from revisions.modern import ModernRevision
from tests.document_builder import document_text


def _index(crate_version: str = "1.0.0", package: PackageRecord | None = None) -> PackageIndex:
    plugin = ModernRevision(36)
    document = plugin.parse(document_text(36, crate_version=crate_version))
    return plugin.build_index(plugin.build_storage(document, package))


def test_crate_entry_yields_current_index() -> None:
    """The Crate entry edge should start at the current index."""
    current = _index()
    adapter = DocAdapter(current)

    assert list(adapter.resolve_starting_vertices("Crate")) == [current]


def test_crate_diff_exposes_both_sides() -> None:
    """The CrateDiff entry should reach current and baseline indexes."""
    current, baseline = _index("2.0.0"), _index("1.0.0")
    adapter = DocAdapter(current, baseline)

    (diff,) = adapter.resolve_starting_vertices("CrateDiff")
    versions = [
        adapter.resolve_property(crate, "Crate", "crate_version")
        for edge in ("current", "baseline")
        for crate in adapter.resolve_neighbors(diff, "CrateDiff", edge)
    ]

    assert isinstance(diff, CrateDiff) and versions == ["2.0.0", "1.0.0"]


def test_crate_diff_without_baseline_has_no_baseline_neighbor() -> None:
    """A missing baseline should produce no neighbors on the baseline edge."""
    adapter = DocAdapter(_index())

    (diff,) = adapter.resolve_starting_vertices("CrateDiff")

    assert list(adapter.resolve_neighbors(diff, "CrateDiff", "baseline")) == []


def test_package_properties_come_from_resolved_record() -> None:
    """Package name and version should reflect the attached package record."""
    record = PackageRecord(package_id="demo 1.4.2", name="demo", version="1.4.2")
    index = _index(package=record)
    adapter = DocAdapter(index)

    assert adapter.resolve_property(index, "Crate", "package_name") == "demo"
    assert adapter.resolve_property(index, "Crate", "package_version") == "1.4.2"
    assert adapter.resolve_property(index, "Crate", "format_version") == 36


def test_root_module_and_item_edges() -> None:
    """Root module and item edges should walk the indexed items."""
    index = _index()
    adapter = DocAdapter(index)

    (root,) = adapter.resolve_neighbors(index, "Crate", "root_module")
    items = list(adapter.resolve_neighbors(index, "Crate", "item"))

    assert adapter.resolve_property(root, "Item", "name") == "demo"
    assert len(items) == 4
    assert adapter.resolve_property(items[1], "Item", "path") == ["demo", "parse"]


def test_span_edge_is_empty_without_span() -> None:
    """Items without a span should have no span neighbor."""
    index = _index()
    adapter = DocAdapter(index)
    helper = index.items_by_id["3"]
    parse_item = index.items_by_id["1"]

    (span,) = adapter.resolve_neighbors(parse_item, "Item", "span")

    assert list(adapter.resolve_neighbors(helper, "Item", "span")) == []
    assert adapter.resolve_property(span, "Span", "filename") == "src/lib.rs"


def test_unknown_edge_is_a_programming_error() -> None:
    """Names outside the schema should fail loudly."""
    index = _index()
    adapter = DocAdapter(index)

    with pytest.raises(AssertionError):
        list(adapter.resolve_neighbors(index, "Crate", "nonexistent"))
