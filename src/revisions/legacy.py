"""Revision family for format versions up to the legacy cutoff.

Legacy documents name an item's kind in a ``kind`` field next to an
``inner`` payload and do not record the target they were built for, so
index construction takes the target triple explicitly.
"""

from __future__ import annotations

from typing import Mapping

from graphql import GraphQLSchema

from core.types import PackageRecord
from revisions.adapter import DocAdapter
from revisions.decoding import DecodeError, decode_document, expect_mapping
from revisions.model import PackageIndex, PackageStorage, RevisionDocument
from revisions.schema import legacy_schema


class LegacyRevision:
    """Plugin for one legacy format revision."""

    def __init__(self, revision: int, target_triple: str) -> None:
        self.revision = revision
        self._target_triple = target_triple

    def parse(self, text: str) -> RevisionDocument:
        return decode_document(text, self.revision, _read_legacy_kind)

    def build_storage(
        self,
        document: RevisionDocument,
        package: PackageRecord | None,
    ) -> PackageStorage:
        return PackageStorage(document=document, package=package)

    def build_index(self, storage: PackageStorage) -> PackageIndex:
        return PackageIndex.from_storage(storage, target_triple=self._target_triple)

    def build_adapter(
        self,
        current: PackageIndex,
        baseline: PackageIndex | None,
    ) -> DocAdapter:
        return DocAdapter(current, baseline)

    def schema(self) -> GraphQLSchema:
        return legacy_schema()


def _read_legacy_kind(
    item: Mapping[str, object],
    context: str,
) -> tuple[str, Mapping[str, object]]:
    kind = item.get("kind")
    if not isinstance(kind, str) or not kind:
        raise DecodeError(f"{context}.kind must be a non-empty string")
    inner = expect_mapping(item.get("inner", {}), f"{context}.inner")
    return kind, inner
