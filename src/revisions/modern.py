"""Revision family for format versions after the legacy cutoff.

Modern documents encode an item's kind as the single key of its ``inner``
object and may record their build target, so no target is passed in.
"""

from __future__ import annotations

from typing import Mapping

from graphql import GraphQLSchema

from core.types import PackageRecord
from revisions.adapter import DocAdapter
from revisions.decoding import DecodeError, decode_document, expect_mapping
from revisions.model import PackageIndex, PackageStorage, RevisionDocument
from revisions.schema import modern_schema


class ModernRevision:
    """Plugin for one modern format revision."""

    def __init__(self, revision: int) -> None:
        self.revision = revision

    def parse(self, text: str) -> RevisionDocument:
        return decode_document(text, self.revision, _read_modern_kind)

    def build_storage(
        self,
        document: RevisionDocument,
        package: PackageRecord | None,
    ) -> PackageStorage:
        return PackageStorage(document=document, package=package)

    def build_index(self, storage: PackageStorage) -> PackageIndex:
        return PackageIndex.from_storage(storage)

    def build_adapter(
        self,
        current: PackageIndex,
        baseline: PackageIndex | None,
    ) -> DocAdapter:
        return DocAdapter(current, baseline)

    def schema(self) -> GraphQLSchema:
        return modern_schema()


def _read_modern_kind(
    item: Mapping[str, object],
    context: str,
) -> tuple[str, Mapping[str, object]]:
    inner = expect_mapping(item.get("inner"), f"{context}.inner")
    if len(inner) != 1:
        raise DecodeError(f"{context}.inner must have exactly one kind key, got {len(inner)}")
    kind, payload = next(iter(inner.items()))
    if payload is None:
        return kind, {}
    return kind, expect_mapping(payload, f"{context}.inner.{kind}")
