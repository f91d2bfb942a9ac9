"""Docquery exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import Sequence


class DocQueryError(Exception):
    """Base exception for all docquery failures."""


class DocQueryConfigError(DocQueryError):
    """Raised for invalid runtime configuration."""


class MetadataParsingError(DocQueryError):
    """Raised when dependency-graph metadata has an unexpected shape."""


class PackageNotFoundError(DocQueryError):
    """Raised when no package record matches the target dependency."""


class AmbiguousPackageError(DocQueryError):
    """Raised when more than one package record matches the target dependency."""

    def __init__(self, message: str, candidates: Sequence[str]) -> None:
        super().__init__(message)
        self.candidates = tuple(candidates)


class DocumentIoError(DocQueryError):
    """Raised when a document or metadata file cannot be opened or read."""


class FormatDetectionError(DocQueryError):
    """Raised when a document's format version cannot be determined."""


class RevisionParsingError(DocQueryError):
    """Raised when a document fails to parse against its detected revision."""

    def __init__(self, revision: int, cause: str, source: str | None = None) -> None:
        location = f" for file {source}" if source is not None else ""
        super().__init__(f"unexpected parse error for v{revision} document{location}: {cause}")
        self.revision = revision
        self.cause = cause
        self.source = source


class UnsupportedFormatError(DocQueryError):
    """Raised for a detected revision outside the compiled-in set."""

    def __init__(self, revision: int, supported: Sequence[int]) -> None:
        supported_text = ", ".join(f"v{value}" for value in supported)
        super().__init__(
            f"document format v{revision} is not supported. "
            f"Supported formats: {supported_text}."
        )
        self.revision = revision
        self.supported = tuple(supported)


class VersionMismatchError(DocQueryError):
    """Raised when current and baseline indexes use different revisions."""

    def __init__(self, current: int, baseline: int) -> None:
        super().__init__(
            f"version mismatch between current (v{current}) and "
            f"baseline (v{baseline}) format versions"
        )
        self.current = current
        self.baseline = baseline


class QueryError(DocQueryError):
    """Base class for query compilation and execution failures."""


class QueryCompilationError(QueryError):
    """Raised when query text is rejected by the adapter schema."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        location = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


class QueryRuntimeError(QueryError):
    """Raised when a compiled query cannot be evaluated, e.g. bad variables."""


class CodegenError(DocQueryError):
    """Raised when dispatch source generation fails."""
