"""Revision-tagged query adapter.

An adapter binds a current index, an optional baseline index of the same
revision, and that revision's fixed schema. Queries run through
:meth:`VersionedAdapter.run_query` regardless of the revision in play.
"""

from __future__ import annotations

from typing import Iterator

from graphql import GraphQLSchema

from core.errors import VersionMismatchError
from core.logging_config import get_logger
from core.types import QueryRow, QueryVariables
from query.compiler import compile_query
from query.interpreter import execute_query
from revisions.adapter import DocAdapter
from versioned.index import VersionedIndex

_LOGGER = get_logger(__name__)


class VersionedAdapter:
    """Query façade over one or two same-revision indexes."""

    def __init__(self, current: VersionedIndex, baseline: VersionedIndex | None = None) -> None:
        """Bind indexes to their revision's adapter and schema.

        Args:
            current: Index of the document being queried.
            baseline: Optional index of a document to compare against.

        Raises:
            VersionMismatchError: If the baseline revision differs from the
                current revision.
        """
        if baseline is not None and baseline.version() != current.version():
            raise VersionMismatchError(current.version(), baseline.version())
        plugin = current.storage.plugin
        if baseline is not None and baseline.storage.plugin.revision != plugin.revision:
            raise AssertionError("indexes with equal revision tags use different plugins")
        self._current = current
        self._baseline = baseline
        self._schema = plugin.schema()
        self._adapter = plugin.build_adapter(
            current.inner,
            baseline.inner if baseline is not None else None,
        )
        _LOGGER.info(
            "adapter_created",
            revision=current.version(),
            current=current.storage.source,
            baseline=baseline.storage.source if baseline is not None else None,
        )

    @property
    def current(self) -> VersionedIndex:
        """Index of the document being queried."""
        return self._current

    @property
    def baseline(self) -> VersionedIndex | None:
        """Index of the comparison document, if any."""
        return self._baseline

    @property
    def inner(self) -> DocAdapter:
        """Revision-specific resolver adapter."""
        return self._adapter

    def schema(self) -> GraphQLSchema:
        """Return the schema queries are compiled against."""
        return self._schema

    def version(self) -> int:
        """Return the format revision tag."""
        return self._current.version()

    def run_query(
        self,
        query: str,
        variables: QueryVariables | None = None,
    ) -> Iterator[QueryRow]:
        """Compile a query and return its lazy result rows.

        Args:
            query: GraphQL query text.
            variables: Filter operand values keyed by variable name.

        Returns:
            Single-pass row iterator; call again to re-evaluate.

        Raises:
            QueryCompilationError: If the query is rejected by the schema.
            QueryRuntimeError: If variables do not fit the query.
        """
        compiled = compile_query(self._schema, query)
        return execute_query(self._adapter, compiled, variables or {})
