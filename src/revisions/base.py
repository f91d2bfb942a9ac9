"""Capability interface every revision plugin implements."""

from __future__ import annotations

from typing import Protocol

from graphql import GraphQLSchema

from core.types import PackageRecord
from revisions.adapter import DocAdapter
from revisions.model import PackageIndex, PackageStorage, RevisionDocument


class RevisionPlugin(Protocol):
    """Parse, storage, index, adapter, and schema operations for one revision."""

    revision: int

    def parse(self, text: str) -> RevisionDocument:
        """Decode document text, raising RevisionParsingError on shape errors."""
        ...

    def build_storage(
        self,
        document: RevisionDocument,
        package: PackageRecord | None,
    ) -> PackageStorage:
        """Wrap a decoded document and optional package record."""
        ...

    def build_index(self, storage: PackageStorage) -> PackageIndex:
        """Build lookup tables over a storage."""
        ...

    def build_adapter(
        self,
        current: PackageIndex,
        baseline: PackageIndex | None,
    ) -> DocAdapter:
        """Bind a query adapter to one or two indexes."""
        ...

    def schema(self) -> GraphQLSchema:
        """Return the fixed schema queries are compiled against."""
        ...
