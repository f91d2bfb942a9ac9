"""Python SDK for document loading and querying.

This module exposes high-level APIs that chain loading, package
resolution, indexing, and adapter construction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from core.config import DocQueryConfig
from core.types import QueryRow, QueryVariables
from versioned.adapter import VersionedAdapter
from versioned.index import VersionedIndex
from versioned.loader import load_package_storage, load_storage
from versioned.storage import VersionedStorage


class DocQueryClient:
    """Primary SDK entry point."""

    def __init__(self, config: DocQueryConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or DocQueryConfig.from_env()

    @property
    def config(self) -> DocQueryConfig:
        """Runtime configuration used by this client."""
        return self._config

    def load(
        self,
        document_path: Path | str,
        metadata_path: Path | str | None = None,
    ) -> VersionedStorage:
        """Load a document, resolving its package when metadata is given.

        Args:
            document_path: Export file path.
            metadata_path: Optional dependency-graph metadata path.

        Returns:
            Storage for the document.
        """
        if metadata_path is None:
            return load_storage(document_path, config=self._config)
        return load_package_storage(document_path, metadata_path, config=self._config)

    def adapter(
        self,
        current_path: Path | str,
        baseline_path: Path | str | None = None,
        metadata_path: Path | str | None = None,
    ) -> VersionedAdapter:
        """Load one or two documents and bind an adapter over them.

        Args:
            current_path: Export file of the document being queried.
            baseline_path: Optional export file to compare against.
            metadata_path: Optional metadata used for the current document.

        Returns:
            Adapter over the loaded documents.

        Raises:
            VersionMismatchError: If the two documents use different revisions.
        """
        current = VersionedIndex.from_storage(self.load(current_path, metadata_path))
        baseline = None
        if baseline_path is not None:
            baseline = VersionedIndex.from_storage(self.load(baseline_path))
        return VersionedAdapter(current, baseline)

    def query(
        self,
        current_path: Path | str,
        query: str,
        variables: QueryVariables | None = None,
        baseline_path: Path | str | None = None,
        metadata_path: Path | str | None = None,
    ) -> Iterator[QueryRow]:
        """Run one query against freshly loaded documents.

        Args:
            current_path: Export file of the document being queried.
            query: GraphQL query text.
            variables: Filter operand values.
            baseline_path: Optional export file to compare against.
            metadata_path: Optional metadata used for the current document.

        Returns:
            Lazy row iterator.
        """
        adapter = self.adapter(current_path, baseline_path, metadata_path)
        return adapter.run_query(query, variables)
