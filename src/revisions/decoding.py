"""Shared JSON decoding for revision families.

Families differ in how an item's kind and kind-specific payload are laid
out; everything else is decoded here.
"""

from __future__ import annotations

import json
from typing import Callable, Mapping, Sequence

from core.constants import FORMAT_VERSION_KEY
from core.errors import RevisionParsingError
from revisions.model import ItemRecord, RevisionDocument, Span

KindReader = Callable[[Mapping[str, object], str], tuple[str, Mapping[str, object]]]


class DecodeError(ValueError):
    """Internal signal for a shape mismatch, converted at the boundary."""


def decode_document(text: str, revision: int, read_kind: KindReader) -> RevisionDocument:
    """Decode document text for one revision.

    Args:
        text: Full document text.
        revision: Revision the text is expected to follow.
        read_kind: Family-specific reader returning ``(kind, inner)``.

    Returns:
        Decoded document.

    Raises:
        RevisionParsingError: If the text does not match the revision's shape.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise RevisionParsingError(revision, f"invalid JSON: {error.msg}") from error
    try:
        return _decode_payload(payload, revision, read_kind)
    except DecodeError as error:
        raise RevisionParsingError(revision, str(error)) from error


def _decode_payload(payload: object, revision: int, read_kind: KindReader) -> RevisionDocument:
    root = expect_mapping(payload, "document root")
    declared = root.get(FORMAT_VERSION_KEY)
    if declared != revision:
        raise DecodeError(f"'{FORMAT_VERSION_KEY}' is {declared!r}, expected {revision}")
    root_id = _normalize_id(root.get("root"), "root")
    index = expect_mapping(root.get("index"), "index")
    paths = expect_mapping(root.get("paths", {}), "paths")
    items: dict[str, ItemRecord] = {}
    for raw_id, raw_item in index.items():
        item_id = _normalize_id(raw_id, "index key")
        item_mapping = expect_mapping(raw_item, f"index[{item_id}]")
        items[item_id] = _decode_item(item_id, item_mapping, paths, read_kind)
    if root_id not in items:
        raise DecodeError(f"root item '{root_id}' is missing from index")
    return RevisionDocument(
        revision=revision,
        root_id=root_id,
        crate_version=_optional_str(root.get("crate_version"), "crate_version"),
        includes_private=bool(root.get("includes_private", False)),
        target_triple=_decode_target(root.get("target")),
        items=items,
    )


def _decode_item(
    item_id: str,
    item: Mapping[str, object],
    paths: Mapping[str, object],
    read_kind: KindReader,
) -> ItemRecord:
    context = f"index[{item_id}]"
    kind, inner = read_kind(item, context)
    children: tuple[str, ...] = ()
    if kind == "module":
        raw_children = expect_sequence(inner.get("items", []), f"{context}.inner.items")
        children = tuple(_normalize_id(child, f"{context}.inner.items") for child in raw_children)
    raw_attrs = expect_sequence(item.get("attrs", []), f"{context}.attrs")
    return ItemRecord(
        item_id=item_id,
        name=_optional_str(item.get("name"), f"{context}.name"),
        kind=kind,
        visibility_limit=_decode_visibility(item.get("visibility"), context),
        docs=_optional_str(item.get("docs"), f"{context}.docs"),
        deprecated=item.get("deprecation") is not None,
        path=_decode_path(paths.get(item_id), context),
        attrs=tuple(str(attr) for attr in raw_attrs),
        span=_decode_span(item.get("span"), context),
        children=children,
    )


def _decode_visibility(value: object, context: str) -> str:
    if value in ("public", "crate", "default"):
        return str(value)
    if isinstance(value, Mapping) and "restricted" in value:
        return "restricted"
    raise DecodeError(f"{context}.visibility has unknown value {value!r}")


def _decode_path(value: object, context: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    summary = expect_mapping(value, f"paths[{context}]")
    segments = expect_sequence(summary.get("path"), f"paths[{context}].path")
    return tuple(str(segment) for segment in segments)


def _decode_span(value: object, context: str) -> Span | None:
    if value is None:
        return None
    span = expect_mapping(value, f"{context}.span")
    filename = _optional_str(span.get("filename"), f"{context}.span.filename")
    begin = expect_sequence(span.get("begin"), f"{context}.span.begin")
    end = expect_sequence(span.get("end"), f"{context}.span.end")
    if filename is None or not begin or not end:
        raise DecodeError(f"{context}.span is incomplete")
    if not isinstance(begin[0], int) or not isinstance(end[0], int):
        raise DecodeError(f"{context}.span lines must be integers")
    return Span(filename=filename, begin_line=begin[0], end_line=end[0])


def _decode_target(value: object) -> str | None:
    if value is None:
        return None
    target = expect_mapping(value, "target")
    return _optional_str(target.get("triple"), "target.triple")


def _normalize_id(value: object, context: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DecodeError(f"{context} must be a string or integer id, got {value!r}")
    return str(value)


def _optional_str(value: object, context: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise DecodeError(f"{context} must be a string, got {type(value).__name__}")


def expect_mapping(value: object, context: str) -> Mapping[str, object]:
    """Return ``value`` as a mapping or raise a decode error."""
    if isinstance(value, Mapping):
        return value
    raise DecodeError(f"{context} must be an object, got {type(value).__name__}")


def expect_sequence(value: object, context: str) -> Sequence[object]:
    """Return ``value`` as a list or raise a decode error."""
    if isinstance(value, list):
        return value
    raise DecodeError(f"{context} must be a list, got {type(value).__name__}")
