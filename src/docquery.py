"""Public SDK surface for docquery.

This module provides a stable import path for library users.
It re-exports the primary client, pipeline stages, and error types.
"""

from __future__ import annotations

from codegen.materializer import materialize_templates, parse_revision_arguments
from core.config import DocQueryConfig
from core.errors import (
    AmbiguousPackageError,
    CodegenError,
    DocQueryError,
    DocumentIoError,
    FormatDetectionError,
    MetadataParsingError,
    PackageNotFoundError,
    QueryCompilationError,
    QueryRuntimeError,
    RevisionParsingError,
    UnsupportedFormatError,
    VersionMismatchError,
)
from core.types import Document, PackageRecord
from loading.cargo_metadata import load_dependency_graph
from loading.document_reader import read_document
from loading.format_detection import detect_format_version
from loading.package_resolver import resolve_package
from versioned.adapter import VersionedAdapter
from versioned.client import DocQueryClient
from versioned.index import VersionedIndex
from versioned.loader import load_package_storage, load_storage
from versioned.registry import SUPPORTED_REVISIONS
from versioned.storage import VersionedStorage

__all__ = [
    "AmbiguousPackageError",
    "CodegenError",
    "DocQueryClient",
    "DocQueryConfig",
    "DocQueryError",
    "Document",
    "DocumentIoError",
    "FormatDetectionError",
    "MetadataParsingError",
    "PackageNotFoundError",
    "PackageRecord",
    "QueryCompilationError",
    "QueryRuntimeError",
    "RevisionParsingError",
    "SUPPORTED_REVISIONS",
    "UnsupportedFormatError",
    "VersionMismatchError",
    "VersionedAdapter",
    "VersionedIndex",
    "VersionedStorage",
    "detect_format_version",
    "load_dependency_graph",
    "load_package_storage",
    "load_storage",
    "materialize_templates",
    "parse_revision_arguments",
    "read_document",
    "resolve_package",
]
