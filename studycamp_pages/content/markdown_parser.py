r"""Parse authored Markdown into sectioned content documents.

This module powers the essay authoring flow by splitting Markdown into
ordered sections at level-two headings, turning each section body into typed
content blocks, and returning a ``heading-derived``
:class:`~studycamp_pages.content.ContentDocument` that the renderer and the
navigation extractor consume.

Example
-------
>>> from studycamp_pages.content.markdown_parser import parse_markdown
>>> parsed = parse_markdown("# Title\n\n## Intro\nBody text\n\n## Details\nMore")
>>> [section.id for section in parsed.document.sections]
['intro', 'details']
>>> parsed.document.title
'Title'
"""

from __future__ import annotations

import dataclasses as dc
import re

from studycamp_pages._constants import MAIN_CONTENT_SECTION_ID

from .blocks import (
    Callout,
    CalloutItem,
    CodeBlock,
    ContentBlock,
    Divider,
    DividerStyle,
    Gallery,
    GalleryImage,
    Heading,
    Image,
    ListBlock,
    Paragraph,
)
from .document import ContentDocument, ContentSection, DocumentKind

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
IMAGE_PATTERN = re.compile(r"^!\[([^\]]*)\]\(([^)\s]+)(?:\s+\"([^\"]*)\")?\)$")
CAPTION_PATTERN = re.compile(r"^\*([^*]+)\*$")
BOLD_LINE_PATTERN = re.compile(r"^\*\*(.+?)\*\*$")
UNORDERED_ITEM_PATTERN = re.compile(r"^[-*+]\s+")
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.\s+")
DIVIDER_STYLES: dict[str, DividerStyle] = {
    "---": "line",
    "***": "asterisk",
    "___": "dots",
}
IMAGE_ALIGNMENTS = {"left", "center", "right", "full"}


@dc.dataclass(slots=True)
class ParsedMetadata:
    """Summary facts gathered while parsing.

    Attributes
    ----------
    word_count : int
        Number of whitespace-separated words across paragraphs.
    has_images : bool
        Whether any image or gallery block was produced.
    headings : list[str]
        Every heading text in document order, titles included.
    """

    word_count: int = 0
    has_images: bool = False
    headings: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class ParsedMarkdown:
    """Result of :func:`parse_markdown`."""

    document: ContentDocument
    metadata: ParsedMetadata


@dc.dataclass(slots=True)
class _SectionDraft:
    id: str
    nav_label: str
    divider_style: DividerStyle | None = None
    blocks: list[ContentBlock] = dc.field(default_factory=list)


def _clean_heading(text: str) -> str:
    """Return a cleaned heading, removing escapes and whitespace."""
    return text.replace("\\", "").strip()


def _slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "section"


def _unique_slug(base: str, used: set[str]) -> str:
    """Generate a unique slug, appending numeric suffixes when needed."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


class _BlockScanner:
    """Line-oriented scanner that turns Markdown into content blocks."""

    def __init__(self, metadata: ParsedMetadata) -> None:
        self.metadata = metadata
        self._paragraph: list[str] = []

    def scan(self, lines: list[str]) -> list[ContentBlock]:
        blocks: list[ContentBlock] = []
        idx = 0
        while idx < len(lines):
            line = lines[idx]
            stripped = line.strip()
            if stripped.startswith("```"):
                blocks.extend(self._flush())
                idx = self._scan_code(lines, idx, blocks)
                continue
            if stripped in DIVIDER_STYLES:
                blocks.extend(self._flush())
                blocks.append(Divider(style=DIVIDER_STYLES[stripped]))
            elif heading := HEADING_PATTERN.match(stripped):
                blocks.extend(self._flush())
                text = _clean_heading(heading.group(2))
                self.metadata.headings.append(text)
                level = 2 if len(heading.group(1)) <= 2 else 3
                blocks.append(Heading(text=text, level=level))
            elif IMAGE_PATTERN.match(stripped):
                blocks.extend(self._flush())
                idx = self._scan_images(lines, idx, blocks)
                continue
            elif stripped.startswith(">"):
                blocks.extend(self._flush())
                idx = self._scan_quote(lines, idx, blocks)
                continue
            elif UNORDERED_ITEM_PATTERN.match(stripped) or ORDERED_ITEM_PATTERN.match(
                stripped
            ):
                blocks.extend(self._flush())
                idx = self._scan_list(lines, idx, blocks)
                continue
            elif not stripped:
                blocks.extend(self._flush())
            else:
                self._paragraph.append(line)
            idx += 1
        blocks.extend(self._flush())
        return blocks

    def _flush(self) -> list[ContentBlock]:
        text = "\n".join(self._paragraph).strip()
        self._paragraph = []
        if not text:
            return []
        self.metadata.word_count += len(text.split())
        return [Paragraph(text=text)]

    def _scan_code(self, lines: list[str], idx: int, blocks: list[ContentBlock]) -> int:
        language = lines[idx].strip()[3:].strip().split(",", 1)[0] or "text"
        body: list[str] = []
        idx += 1
        while idx < len(lines) and not lines[idx].strip().startswith("```"):
            body.append(lines[idx])
            idx += 1
        blocks.append(CodeBlock(text="\n".join(body), language=language))
        return idx + 1

    def _scan_images(
        self, lines: list[str], idx: int, blocks: list[ContentBlock]
    ) -> int:
        images: list[GalleryImage] = []
        hints: list[str | None] = []
        while idx < len(lines):
            match = IMAGE_PATTERN.match(lines[idx].strip())
            if not match:
                break
            alt, src, hint = match.groups()
            idx += 1
            caption = None
            if idx < len(lines):
                caption_match = CAPTION_PATTERN.match(lines[idx].strip())
                if caption_match:
                    caption = caption_match.group(1)
                    idx += 1
            images.append(GalleryImage(src=src, alt=alt or None, caption=caption))
            hints.append(hint)
        self.metadata.has_images = True
        if len(images) > 1:
            blocks.append(Gallery(images=images))
        else:
            only = images[0]
            alignment = hints[0] if hints[0] in IMAGE_ALIGNMENTS else "center"
            blocks.append(
                Image(
                    src=only.src,
                    alt=only.alt or "Image",
                    caption=only.caption,
                    alignment=alignment,
                )
            )
        return idx

    def _scan_quote(self, lines: list[str], idx: int, blocks: list[ContentBlock]) -> int:
        quoted: list[str] = []
        while idx < len(lines) and lines[idx].strip().startswith(">"):
            quoted.append(lines[idx].strip()[1:].strip())
            idx += 1
        items: list[CalloutItem] = []
        for line in quoted:
            if not line:
                continue
            bold = BOLD_LINE_PATTERN.match(line)
            if bold:
                items.append(CalloutItem(kind="strong", text=bold.group(1)))
            else:
                items.append(CalloutItem(kind="plain", text=line))
        if any(item.kind == "strong" for item in items):
            blocks.append(Callout(content=items))
        else:
            blocks.append(Callout(content="\n".join(item.text for item in items)))
        return idx

    def _scan_list(self, lines: list[str], idx: int, blocks: list[ContentBlock]) -> int:
        ordered = bool(ORDERED_ITEM_PATTERN.match(lines[idx].strip()))
        pattern = ORDERED_ITEM_PATTERN if ordered else UNORDERED_ITEM_PATTERN
        items: list[str] = []
        while idx < len(lines) and pattern.match(lines[idx].strip()):
            items.append(pattern.sub("", lines[idx].strip(), count=1))
            idx += 1
        blocks.append(ListBlock(items=items, ordered=ordered))
        return idx


def parse_blocks(markdown_text: str) -> tuple[ContentBlock, ...]:
    """Parse a Markdown fragment into blocks without splitting sections.

    Headings keep their level mapping (``#``/``##`` to 2, deeper to 3) but
    do not open new sections. Used for legacy stored sections whose body is a
    Markdown string.
    """
    scanner = _BlockScanner(ParsedMetadata())
    return tuple(scanner.scan(markdown_text.splitlines()))


def _extract_title(lines: list[str], metadata: ParsedMetadata) -> str | None:
    """Pop a leading ``#`` heading off ``lines`` and return its text."""
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        match = HEADING_PATTERN.match(line.strip())
        if match and len(match.group(1)) == 1:
            title = _clean_heading(match.group(2))
            metadata.headings.append(title)
            del lines[: idx + 1]
            return title
        return None
    return None


def _split_sections(lines: list[str]) -> list[tuple[str | None, list[str]]]:
    """Group lines into ``(heading, body_lines)`` chunks at level 1-2 headings."""
    chunks: list[tuple[str | None, list[str]]] = [(None, [])]
    in_code = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("```"):
            in_code = not in_code
        match = None if in_code else HEADING_PATTERN.match(stripped)
        if match and len(match.group(1)) <= 2:
            chunks.append((_clean_heading(match.group(2)), []))
            continue
        chunks[-1][1].append(line)
    return chunks


def parse_markdown(markdown_text: str) -> ParsedMarkdown:
    """Split markdown into a heading-derived content document.

    Parameters
    ----------
    markdown_text : str
        Raw markdown with ``##`` section headings. A leading ``#`` heading is
        treated as the document title.

    Returns
    -------
    ParsedMarkdown
        The parsed document plus word-count and heading metadata. Content
        preceding the first section heading is kept in a ``main-content``
        section that carries no navigation label.
    """
    metadata = ParsedMetadata()
    lines = markdown_text.splitlines()
    title = _extract_title(lines, metadata)
    scanner = _BlockScanner(metadata)

    drafts: list[_SectionDraft] = []
    used_ids: set[str] = set()
    for heading, body in _split_sections(lines):
        if heading is None:
            blocks = scanner.scan(body)
            if not blocks:
                continue
            draft = _SectionDraft(
                id=_unique_slug(MAIN_CONTENT_SECTION_ID, used_ids), nav_label=""
            )
        else:
            metadata.headings.append(heading)
            blocks = scanner.scan(body)
            draft = _SectionDraft(
                id=_unique_slug(_slugify(heading), used_ids), nav_label=heading
            )
            draft.blocks.append(Heading(text=heading, level=2))
            if drafts and isinstance(drafts[-1].blocks[-1], Divider):
                trailing = drafts[-1].blocks.pop()
                draft.divider_style = trailing.style
                if not drafts[-1].blocks:
                    drafts.pop()
        draft.blocks.extend(blocks)
        drafts.append(draft)

    sections = tuple(
        ContentSection(
            id=draft.id,
            nav_label=draft.nav_label,
            divider_style=draft.divider_style,
            content=tuple(draft.blocks),
        )
        for draft in drafts
    )
    document = ContentDocument(
        kind=DocumentKind.HEADING_DERIVED, title=title, sections=sections
    )
    return ParsedMarkdown(document=document, metadata=metadata)


__all__ = ["ParsedMarkdown", "ParsedMetadata", "parse_blocks", "parse_markdown"]
