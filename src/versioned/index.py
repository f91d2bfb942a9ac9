"""Revision-tagged read-only index over one storage."""

from __future__ import annotations

from dataclasses import dataclass

from revisions.model import PackageIndex
from versioned.storage import VersionedStorage


@dataclass(frozen=True)
class VersionedIndex:
    """Index built by the storage's own plugin; keeps the storage alive."""

    storage: VersionedStorage
    inner: PackageIndex

    @classmethod
    def from_storage(cls, storage: VersionedStorage) -> "VersionedIndex":
        """Build the index for a storage with the same revision."""
        return cls(storage=storage, inner=storage.plugin.build_index(storage.inner))

    def version(self) -> int:
        """Return the format revision tag."""
        return self.storage.revision
