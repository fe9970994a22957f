"""Sections and documents built from content blocks."""

from __future__ import annotations

import enum

import msgspec

from .blocks import ContentBlock, DividerStyle, Heading


class ContentDocumentError(ValueError):
    """Raised when a stored content document is structurally invalid."""


class DocumentKind(enum.StrEnum):
    """How navigation is derived for a document.

    ``HEADING_DERIVED`` documents (essays) expose one navigation entry per
    section that opens with a level-2 heading. ``EXPLICIT_LABELED`` documents
    (course letters) carry their own ``navLabel`` on each section.
    """

    HEADING_DERIVED = "heading-derived"
    EXPLICIT_LABELED = "explicit-labeled"


class ContentSection(
    msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True, rename="camel"
):
    """An identified, ordered group of blocks.

    Attributes
    ----------
    id : str
        Stable identifier, unique within the document. Used as the DOM
        anchor (``section-<id>``) and as the navigation key.
    nav_label : str
        Label shown in section navigation; may be empty.
    divider_style : DividerStyle | None
        Divider drawn before this section when it is not the first one.
    content : tuple[ContentBlock, ...]
        Blocks in reading order.
    """

    id: str
    nav_label: str = ""
    divider_style: DividerStyle | None = None
    content: tuple[ContentBlock, ...] = ()

    def first_heading(self, level: int) -> Heading | None:
        """Return the first heading block at ``level``, if any."""
        for block in self.content:
            if isinstance(block, Heading) and block.level == level:
                return block
        return None


class ContentDocument(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True):
    """Ordered sections plus document-level copy."""

    kind: DocumentKind
    greeting: str | None = None
    title: str | None = None
    subtitle: str | None = None
    sections: tuple[ContentSection, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for section in self.sections:
            if not section.id:
                msg = "Content sections require a non-empty 'id'."
                raise ContentDocumentError(msg)
            if section.id in seen:
                msg = f"Duplicate section id '{section.id}' in content document."
                raise ContentDocumentError(msg)
            seen.add(section.id)

    def get_section(self, section_id: str) -> ContentSection | None:
        """Return the section with ``section_id`` or ``None``."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


__all__ = [
    "ContentDocument",
    "ContentDocumentError",
    "ContentSection",
    "DocumentKind",
]
