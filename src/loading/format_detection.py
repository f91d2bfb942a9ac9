"""Document format revision detection.

Exports always end with ``,"format_version":N}`` in practice, so the
revision is first read from the trailing characters alone. When the tail
does not match that shape the whole document is parsed as JSON instead.
"""

from __future__ import annotations

import json

from core.constants import FORMAT_VERSION_KEY, FORMAT_VERSION_TAIL_BYTES
from core.errors import FormatDetectionError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)
_QUOTED_KEY = f'"{FORMAT_VERSION_KEY}"'


def detect_format_version(text: str, source: str) -> int:
    """Detect the schema revision of a document.

    Args:
        text: Full document text.
        source: Path or label used in error messages.

    Returns:
        The document's ``format_version`` value.

    Raises:
        FormatDetectionError: If neither the trailing pattern nor a full
            parse yields a format version.
    """
    revision = detect_from_tail(text)
    if revision is not None:
        return revision
    _LOGGER.debug("format_version_fast_path_miss", source=source)
    return detect_from_payload(text, source)


def detect_from_tail(text: str) -> int | None:
    """Read the format version from the trailing characters only.

    Args:
        text: Full document text.

    Returns:
        Parsed revision, or ``None`` when the tail has an unexpected shape.
    """
    if len(text) < FORMAT_VERSION_TAIL_BYTES:
        return None
    tail = text[-FORMAT_VERSION_TAIL_BYTES:]
    comma_index = tail.rfind(",")
    if comma_index == -1:
        return None
    colon_index = tail.rfind(":", comma_index)
    brace_index = tail.rfind("}", comma_index)
    if colon_index == -1 or brace_index == -1 or brace_index < colon_index:
        return None
    if tail[comma_index + 1 : colon_index] != _QUOTED_KEY:
        return None
    digits = tail[colon_index + 1 : brace_index]
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)


def detect_from_payload(text: str, source: str) -> int:
    """Read the format version by parsing the whole document.

    Args:
        text: Full document text.
        source: Path or label used in error messages.

    Returns:
        Top-level ``format_version`` value.

    Raises:
        FormatDetectionError: If the text is not a JSON object with an
            unsigned integer ``format_version`` field.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise FormatDetectionError(
            f"unrecognized document format for file {source}: {error.msg}."
        ) from error
    if not isinstance(payload, dict):
        raise FormatDetectionError(
            f"unrecognized document format for file {source}: "
            f"expected a JSON object, got {type(payload).__name__}."
        )
    revision = payload.get(FORMAT_VERSION_KEY)
    if isinstance(revision, bool) or not isinstance(revision, int) or revision < 0:
        raise FormatDetectionError(
            f"unrecognized document format for file {source}: "
            f"missing or invalid '{FORMAT_VERSION_KEY}' field."
        )
    return revision
