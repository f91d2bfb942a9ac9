"""Revision-neutral document model.

Each revision family decodes its own JSON shape into these records, so
storage, index, and adapter code can be shared between families.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from core.types import PackageRecord


@dataclass(frozen=True)
class Span:
    """Source location of an item."""

    filename: str
    begin_line: int
    end_line: int


@dataclass(frozen=True)
class ItemRecord:
    """One documented item.

    Attributes:
        item_id: Document-local item id.
        name: Item name, absent for impls and similar items.
        kind: Item kind such as ``module`` or ``function``.
        visibility_limit: ``public``, ``crate``, ``restricted`` or ``default``.
        docs: Doc comment text.
        deprecated: Whether the item carries a deprecation marker.
        path: Canonical import path when the item has one.
        attrs: Attribute strings attached to the item.
        span: Source location when known.
        children: Ids of items contained in a module.
    """

    item_id: str
    name: str | None
    kind: str
    visibility_limit: str
    docs: str | None
    deprecated: bool
    path: tuple[str, ...] | None
    attrs: tuple[str, ...]
    span: Span | None
    children: tuple[str, ...]


@dataclass(frozen=True)
class RevisionDocument:
    """Decoded document content for one revision.

    Attributes:
        revision: Format revision the document was decoded with.
        root_id: Id of the crate root module item.
        crate_version: Version declared by the documented package.
        includes_private: Whether private items were documented.
        target_triple: Target recorded in the document, if any.
        items: Items keyed by id, in document order.
    """

    revision: int
    root_id: str
    crate_version: str | None
    includes_private: bool
    target_triple: str | None
    items: Mapping[str, ItemRecord]


@dataclass(frozen=True)
class PackageStorage:
    """Owning container for one decoded document and its package record."""

    document: RevisionDocument
    package: PackageRecord | None = None

    def crate_version(self) -> str | None:
        """Return the documented package version, not the format revision."""
        return self.document.crate_version


@dataclass(frozen=True)
class PackageIndex:
    """Read-only lookup tables built from one storage.

    Attributes:
        storage: Storage the index was built from.
        target_triple: Effective target triple for this index.
        items: Items in document order.
        items_by_id: Items keyed by id.
    """

    storage: PackageStorage
    target_triple: str | None
    items: tuple[ItemRecord, ...]
    items_by_id: Mapping[str, ItemRecord]

    @classmethod
    def from_storage(
        cls,
        storage: PackageStorage,
        target_triple: str | None = None,
    ) -> "PackageIndex":
        """Build an index over a storage's items.

        Args:
            storage: Source storage.
            target_triple: Overrides the document's own target when given.

        Returns:
            Index borrowing the storage.
        """
        document = storage.document
        return cls(
            storage=storage,
            target_triple=target_triple or document.target_triple,
            items=tuple(document.items.values()),
            items_by_id=dict(document.items),
        )


@dataclass(frozen=True)
class CrateDiff:
    """Pair of current and baseline indexes exposed as one query vertex."""

    current: PackageIndex
    baseline: PackageIndex | None
