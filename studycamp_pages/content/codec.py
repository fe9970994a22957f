"""Decode and encode content documents stored as JSON blobs.

Documents arrive from the content store as opaque JSON values. Decoding is
lenient about individual blocks (malformed blocks are dropped) and about the
shapes older editors produced, but strict about section identity: every
section needs an id and ids must be unique, because they double as DOM
anchors and navigation keys.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import msgspec

from .blocks import ContentBlock, decode_block, decode_blocks
from .document import (
    ContentDocument,
    ContentDocumentError,
    ContentSection,
    DocumentKind,
)
from .markdown_parser import parse_blocks

_DIVIDER_STYLES = {"none", "dots", "line", "asterisk"}


def decode_document(
    payload: cabc.Mapping[str, typ.Any] | str | bytes,
    *,
    default_kind: DocumentKind,
) -> ContentDocument:
    """Build a :class:`ContentDocument` from a stored payload.

    Parameters
    ----------
    payload : Mapping or str or bytes
        Either the decoded JSON object or its raw JSON text.
    default_kind : DocumentKind
        Kind to use when the payload does not declare ``kind`` itself. The
        caller knows which collection the document came from, so the kind is
        never guessed from the section shapes.

    Returns
    -------
    ContentDocument
        The typed document with malformed blocks removed.

    Raises
    ------
    ContentDocumentError
        If the payload is not a JSON object, declares an unknown ``kind``,
        or contains sections with missing or duplicate ids.
    """
    raw = _load(payload)
    kind = _resolve_kind(raw.get("kind"), default_kind)
    sections_raw = raw.get("sections") or []
    if not isinstance(sections_raw, list):
        msg = "Content document 'sections' must be a list."
        raise ContentDocumentError(msg)
    return ContentDocument(
        kind=kind,
        greeting=_optional_text(raw.get("greeting")),
        title=_optional_text(raw.get("title")),
        subtitle=_optional_text(raw.get("subtitle")),
        sections=_decode_sections(sections_raw),
    )


def encode_document(document: ContentDocument) -> bytes:
    """Serialize ``document`` to JSON bytes."""
    return msgspec.json.encode(document)


def document_to_builtins(document: ContentDocument) -> dict[str, typ.Any]:
    """Return ``document`` as plain dicts and lists for store transactions."""
    return typ.cast("dict[str, typ.Any]", msgspec.to_builtins(document))


def _load(payload: cabc.Mapping[str, typ.Any] | str | bytes) -> dict[str, typ.Any]:
    match payload:
        case str() | bytes():
            try:
                loaded = msgspec.json.decode(payload)
            except msgspec.DecodeError as exc:
                msg = f"Content document is not valid JSON: {exc}"
                raise ContentDocumentError(msg) from exc
        case cabc.Mapping():
            loaded = payload
        case _:
            loaded = None
    if not isinstance(loaded, cabc.Mapping):
        msg = "Content document must be a JSON object."
        raise ContentDocumentError(msg)
    return dict(loaded)


def _resolve_kind(value: object, default_kind: DocumentKind) -> DocumentKind:
    if value is None:
        return default_kind
    try:
        return DocumentKind(str(value))
    except ValueError as exc:
        msg = f"Unknown content document kind '{value}'."
        raise ContentDocumentError(msg) from exc


def _optional_text(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _decode_sections(entries: list[typ.Any]) -> tuple[ContentSection, ...]:
    """Decode section entries, grouping bare legacy blocks into sections."""
    sections: list[ContentSection] = []
    loose: list[ContentBlock] = []

    def _flush_loose() -> None:
        if loose:
            sections.append(
                ContentSection(id=f"legacy-{len(sections) + 1}", content=tuple(loose))
            )
            loose.clear()

    for entry in entries:
        if not isinstance(entry, cabc.Mapping):
            continue
        if "id" not in entry:
            block = decode_block(entry)
            if block is not None:
                loose.append(block)
            continue
        _flush_loose()
        sections.append(_decode_section(entry))
    _flush_loose()
    return tuple(sections)


def _decode_section(entry: cabc.Mapping[str, typ.Any]) -> ContentSection:
    section_id = str(entry.get("id") or "").strip()
    if not section_id:
        msg = "Content sections require a non-empty 'id'."
        raise ContentDocumentError(msg)
    nav_label = str(entry.get("navLabel") or entry.get("title") or "").strip()
    divider_style = entry.get("dividerStyle")
    if divider_style not in _DIVIDER_STYLES:
        divider_style = None

    content = entry.get("content")
    match content:
        case str() as markdown_body:
            blocks = parse_blocks(markdown_body)
        case list() as block_payloads:
            blocks = decode_blocks(block_payloads)
        case _:
            blocks = ()
    return ContentSection(
        id=section_id,
        nav_label=nav_label,
        divider_style=divider_style,
        content=blocks,
    )


__all__ = ["decode_document", "document_to_builtins", "encode_document"]
