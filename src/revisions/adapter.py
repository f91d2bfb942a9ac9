"""Query resolver over one or two package indexes.

The query interpreter only knows type, property, and edge names; this
adapter maps them onto the revision-neutral document model.
"""

from __future__ import annotations

from typing import Any, Iterator

from revisions.model import CrateDiff, ItemRecord, PackageIndex, Span


class DocAdapter:
    """Resolve query vertices for a current and optional baseline index."""

    def __init__(self, current: PackageIndex, baseline: PackageIndex | None = None) -> None:
        self._current = current
        self._baseline = baseline

    @property
    def current(self) -> PackageIndex:
        """Index of the document being checked."""
        return self._current

    @property
    def baseline(self) -> PackageIndex | None:
        """Index of the document compared against, if any."""
        return self._baseline

    def resolve_starting_vertices(self, edge_name: str) -> Iterator[Any]:
        """Yield vertices for a root entry edge."""
        if edge_name == "Crate":
            yield self._current
        elif edge_name == "CrateDiff":
            yield CrateDiff(current=self._current, baseline=self._baseline)
        else:
            raise AssertionError(f"unexpected entry edge {edge_name}")

    def resolve_property(self, vertex: Any, type_name: str, property_name: str) -> Any:
        """Return one property value of a vertex."""
        if type_name == "Crate":
            return _crate_property(vertex, property_name)
        if type_name == "Item":
            return _item_property(vertex, property_name)
        if type_name == "Span":
            return _span_property(vertex, property_name)
        raise AssertionError(f"type {type_name} has no property {property_name}")

    def resolve_neighbors(self, vertex: Any, type_name: str, edge_name: str) -> Iterator[Any]:
        """Yield the neighbors of a vertex along one edge."""
        if type_name == "CrateDiff" and edge_name == "current":
            yield vertex.current
        elif type_name == "CrateDiff" and edge_name == "baseline":
            if vertex.baseline is not None:
                yield vertex.baseline
        elif type_name == "Crate" and edge_name == "item":
            yield from vertex.items
        elif type_name == "Crate" and edge_name == "root_module":
            yield vertex.items_by_id[vertex.storage.document.root_id]
        elif type_name == "Item" and edge_name == "span":
            if vertex.span is not None:
                yield vertex.span
        else:
            raise AssertionError(f"type {type_name} has no edge {edge_name}")


def _crate_property(index: PackageIndex, property_name: str) -> Any:
    document = index.storage.document
    package = index.storage.package
    if property_name == "root":
        return document.root_id
    if property_name == "crate_version":
        return document.crate_version
    if property_name == "format_version":
        return document.revision
    if property_name == "includes_private":
        return document.includes_private
    if property_name == "target_triple":
        return index.target_triple
    if property_name == "package_name":
        return package.name if package is not None else None
    if property_name == "package_version":
        return package.version if package is not None else None
    raise AssertionError(f"type Crate has no property {property_name}")


def _item_property(item: ItemRecord, property_name: str) -> Any:
    if property_name == "id":
        return item.item_id
    if property_name in ("path", "attrs"):
        value = getattr(item, property_name)
        return list(value) if value is not None else None
    if property_name in ("name", "docs", "kind", "visibility_limit", "deprecated"):
        return getattr(item, property_name)
    raise AssertionError(f"type Item has no property {property_name}")


def _span_property(span: Span, property_name: str) -> Any:
    if property_name in ("filename", "begin_line", "end_line"):
        return getattr(span, property_name)
    raise AssertionError(f"type Span has no property {property_name}")
