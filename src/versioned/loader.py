"""File-level entry points into the versioned pipeline."""

from __future__ import annotations

from pathlib import Path

from core.config import DocQueryConfig
from core.logging_config import get_logger
from core.types import PackageRecord
from loading.cargo_metadata import load_dependency_graph
from loading.document_reader import read_document
from loading.package_resolver import resolve_package
from versioned.storage import VersionedStorage

_LOGGER = get_logger(__name__)


def load_storage(
    document_path: Path | str,
    package: PackageRecord | None = None,
    config: DocQueryConfig | None = None,
) -> VersionedStorage:
    """Read, detect, and decode one documentation export.

    Args:
        document_path: Export file path.
        package: Resolved package record to attach, if any.
        config: Runtime configuration; read from env when omitted.

    Returns:
        Storage for the document.

    Raises:
        DocumentIoError: If the file cannot be read.
        FormatDetectionError: If the revision cannot be detected.
        UnsupportedFormatError: If the revision is not supported.
        RevisionParsingError: If decoding fails.
    """
    document = read_document(document_path)
    storage = VersionedStorage.from_document(document, package=package, config=config)
    _LOGGER.info(
        "document_loaded",
        source=document.source,
        revision=storage.version(),
        crate_version=storage.crate_version(),
        package=package.package_id if package is not None else None,
    )
    return storage


def load_package_storage(
    document_path: Path | str,
    metadata_path: Path | str,
    config: DocQueryConfig | None = None,
) -> VersionedStorage:
    """Load a document together with its resolved package record.

    Args:
        document_path: Export file path.
        metadata_path: Dependency-graph metadata JSON path.
        config: Runtime configuration; read from env when omitted.

    Returns:
        Storage with the matching package record attached.

    Raises:
        MetadataParsingError: If the metadata shape is invalid.
        PackageNotFoundError: If no package record matches.
        AmbiguousPackageError: If several package records match.
    """
    package = resolve_package(load_dependency_graph(metadata_path))
    return load_storage(document_path, package=package, config=config)
