"""Derive section navigation entries from a content document.

Example
-------
>>> from studycamp_pages.content import DocumentKind, decode_document
>>> document = decode_document(
...     {"sections": [
...         {"id": "intro", "content": [
...             {"type": "heading", "level": 2, "content": "Intro"}]},
...         {"id": "aside", "content": [{"type": "paragraph", "content": "..."}]},
...     ]},
...     default_kind=DocumentKind.HEADING_DERIVED,
... )
>>> extract_navigation(document)
[NavigationSection(id='intro', nav_label='Intro')]
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from studycamp_pages._constants import NAV_LABEL_MAX_LENGTH
from studycamp_pages.content import ContentDocument, DocumentKind

NAVIGABLE_HEADING_LEVEL = 2


@dc.dataclass(slots=True, frozen=True)
class NavigationSection:
    """Navigation entry projected from a content section."""

    id: str
    nav_label: str


def _from_headings(document: ContentDocument) -> list[NavigationSection]:
    entries: list[NavigationSection] = []
    for section in document.sections:
        heading = section.first_heading(NAVIGABLE_HEADING_LEVEL)
        if heading is not None:
            entries.append(NavigationSection(id=section.id, nav_label=heading.text))
    return entries


def _from_labels(document: ContentDocument) -> list[NavigationSection]:
    return [
        NavigationSection(id=section.id, nav_label=section.nav_label)
        for section in document.sections
        if section.id and section.nav_label
    ]


def extract_navigation(document: ContentDocument) -> list[NavigationSection]:
    """Return navigation entries for ``document`` in reading order.

    Heading-derived documents contribute one entry per section that holds a
    level-2 heading, labelled with that heading's text. Explicitly labelled
    documents contribute every section that declares a ``navLabel``. An empty
    list means no navigation should be rendered.
    """
    match document.kind:
        case DocumentKind.HEADING_DERIVED:
            return _from_headings(document)
        case DocumentKind.EXPLICIT_LABELED:
            return _from_labels(document)
        case _ as unreachable:
            typ.assert_never(unreachable)


class NavigationExtractor:
    """Memoise :func:`extract_navigation` on document identity.

    Documents are replaced wholesale on every fetch, so an identity check is
    enough to detect a new document and avoids deep comparisons on every
    render.
    """

    def __init__(self) -> None:
        self._document: ContentDocument | None = None
        self._entries: list[NavigationSection] = []

    def extract(self, document: ContentDocument) -> list[NavigationSection]:
        """Return cached entries unless ``document`` is a different object."""
        if document is not self._document:
            self._entries = extract_navigation(document)
            self._document = document
        return list(self._entries)


def truncate_label(label: str, limit: int = NAV_LABEL_MAX_LENGTH) -> str:
    """Shorten ``label`` to ``limit`` characters followed by an ellipsis.

    >>> truncate_label("What Vibe Coding Really Is About", 25)
    'What Vibe Coding Really I...'
    """
    if len(label) <= limit:
        return label
    return f"{label[:limit]}..."


__all__ = [
    "NavigationExtractor",
    "NavigationSection",
    "extract_navigation",
    "truncate_label",
]
