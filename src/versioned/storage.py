"""Revision-tagged document storage.

Storage is the ownership root of the pipeline: it holds the decoded
document, and indexes and adapters built from it keep it alive.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import DocQueryConfig
from core.errors import RevisionParsingError
from core.types import Document, PackageRecord
from revisions.base import RevisionPlugin
from revisions.model import PackageStorage
from versioned.registry import plugin_for


@dataclass(frozen=True)
class VersionedStorage:
    """Decoded document paired with the plugin of its revision.

    Attributes:
        revision: Format revision tag.
        plugin: Plugin that decoded the document.
        inner: Revision-specific storage.
        source: Path or label the document was read from.
    """

    revision: int
    plugin: RevisionPlugin
    inner: PackageStorage
    source: str

    @classmethod
    def from_document(
        cls,
        document: Document,
        package: PackageRecord | None = None,
        config: DocQueryConfig | None = None,
    ) -> "VersionedStorage":
        """Decode a document with its revision's plugin.

        Args:
            document: Loaded document with detected revision.
            package: Resolved package record to attach, if any.
            config: Runtime configuration; read from env when omitted.

        Returns:
            Storage owning the decoded document.

        Raises:
            UnsupportedFormatError: If the revision has no compiled plugin.
            RevisionParsingError: If the text does not match the revision.
        """
        plugin = plugin_for(document.revision, config or DocQueryConfig.from_env())
        if plugin.revision != document.revision:
            raise AssertionError(
                f"registry returned v{plugin.revision} plugin for v{document.revision}"
            )
        try:
            decoded = plugin.parse(document.text)
        except RevisionParsingError as error:
            raise RevisionParsingError(error.revision, error.cause, document.source) from error
        return cls(
            revision=document.revision,
            plugin=plugin,
            inner=plugin.build_storage(decoded, package),
            source=document.source,
        )

    @property
    def package(self) -> PackageRecord | None:
        """Package record the document was matched to, if any."""
        return self.inner.package

    def crate_version(self) -> str | None:
        """Return the documented package version, not the format revision."""
        return self.inner.crate_version()

    def version(self) -> int:
        """Return the format revision tag."""
        return self.revision
