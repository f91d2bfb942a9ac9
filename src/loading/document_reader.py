"""Documentation export file reader.

This module reads a whole export file into memory before any parsing,
since revision detection and revision-specific parsing both need the
complete text.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import DocumentIoError
from core.types import Document
from loading.format_detection import detect_format_version


def read_document(path: Path | str) -> Document:
    """Read a documentation export and detect its revision.

    Args:
        path: Export file path.

    Returns:
        Loaded document with its revision tag.

    Raises:
        DocumentIoError: If the file cannot be opened or read.
        FormatDetectionError: If the revision cannot be detected.
    """
    document_path = Path(path).expanduser()
    text = read_text_file(document_path, "document")
    return document_from_text(text, str(document_path))


def document_from_text(text: str, source: str) -> Document:
    """Build a document from already loaded text.

    Args:
        text: Full document text.
        source: Path or label used in error messages.

    Returns:
        Loaded document with its revision tag.
    """
    revision = detect_format_version(text, source)
    return Document(source=source, text=text, revision=revision)


def read_text_file(file_path: Path, description: str) -> str:
    """Read a UTF-8 file with traceable errors.

    Args:
        file_path: File to read.
        description: Human label for error messages.

    Returns:
        File contents.

    Raises:
        DocumentIoError: If the file is missing, unreadable, or not UTF-8.
    """
    try:
        return file_path.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise DocumentIoError(
            f"failed to open {description} file {file_path}: file does not exist."
        ) from error
    except UnicodeDecodeError as error:
        raise DocumentIoError(
            f"failed to read {description} file {file_path}: not valid UTF-8 ({error.reason})."
        ) from error
    except OSError as error:
        raise DocumentIoError(f"failed to read {description} file {file_path}: {error}.") from error
