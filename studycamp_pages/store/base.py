"""Records, protocol, and shared decoding for content stores.

Both store backends hand back the same records. Course pages carry an
explicit-labeled letter document; essays keep their raw content fields so
:func:`resolve_essay_document` can apply the precedence the site uses:
letter content first, then structured sections, then markdown.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ

import msgspec

from studycamp_pages.content import (
    ContentDocument,
    ContentDocumentError,
    DocumentKind,
    decode_document,
    document_to_builtins,
    parse_markdown,
)

logger = logging.getLogger(__name__)


class ContentStoreError(RuntimeError):
    """Raised when the content store cannot be reached or returns bad data."""


@dc.dataclass(slots=True, frozen=True)
class CoursePage:
    """Active ``coursePageContent`` record for a course landing page."""

    page_id: str
    record_id: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    letter_content: ContentDocument | None = None


@dc.dataclass(slots=True, frozen=True)
class Essay:
    """Stored essay with its raw content fields left undecoded."""

    slug: str
    title: str
    record_id: str | None = None
    subtitle: str | None = None
    excerpt: str | None = None
    content: typ.Any = None
    sections: list[typ.Any] | None = None
    letter_content: typ.Any = None
    tags: tuple[str, ...] = ()
    cover_image: str | None = None
    featured: bool = False
    published: bool = False
    read_time: int | None = None
    created_at: dt.datetime | None = None
    published_at: dt.datetime | None = None

    @property
    def summary(self) -> str | None:
        """Return the subtitle, falling back to the excerpt."""
        return self.subtitle or self.excerpt


class ContentStore(typ.Protocol):
    """Read and write access to sectioned content documents."""

    def get_course_page(self, page_id: str) -> CoursePage | None: ...

    def list_essays(self) -> list[Essay]: ...

    def get_essay(self, slug: str) -> Essay | None: ...

    def replace_course_sections(
        self, page_id: str, document: ContentDocument
    ) -> None: ...

    def replace_essay_sections(self, slug: str, document: ContentDocument) -> None: ...


def resolve_essay_document(essay: Essay) -> ContentDocument:
    """Return the document an essay page renders.

    Parameters
    ----------
    essay : Essay
        Essay record as returned by a content store.

    Returns
    -------
    ContentDocument
        ``letter_content`` decoded as an explicit-labeled document when
        present; otherwise non-empty ``sections`` in the same shape;
        otherwise ``content`` parsed as markdown into a heading-derived
        document. Essays with no content at all yield an empty document.

    Raises
    ------
    ContentDocumentError
        If the stored structure has missing or duplicate section ids.
    """
    if essay.letter_content:
        document = decode_document(
            essay.letter_content, default_kind=DocumentKind.EXPLICIT_LABELED
        )
        return _with_title(document, essay)
    if essay.sections:
        return decode_document(
            {
                "title": essay.title,
                "subtitle": essay.subtitle,
                "sections": essay.sections,
            },
            default_kind=DocumentKind.EXPLICIT_LABELED,
        )
    match essay.content:
        case str() as markdown if markdown.strip():
            document = parse_markdown(markdown).document
            return _with_title(document, essay)
        case cabc.Mapping() as payload:
            document = decode_document(
                payload, default_kind=DocumentKind.HEADING_DERIVED
            )
            return _with_title(document, essay)
        case _:
            return ContentDocument(
                kind=DocumentKind.HEADING_DERIVED,
                title=essay.title,
                subtitle=essay.subtitle,
            )


def stored_essay_sections(document: ContentDocument) -> list[typ.Any]:
    """Return ``document``'s sections in the shape essays store them.

    Stored essay sections are read back as explicit-labeled, so each section
    of a heading-derived document is labelled with the text of its first
    level-2 heading. Sections without one are stored unlabelled and stay out
    of the navigation, as they would have before the write.
    """
    if document.kind is DocumentKind.HEADING_DERIVED:
        sections = []
        for section in document.sections:
            heading = section.first_heading(2)
            sections.append(
                msgspec.structs.replace(
                    section, nav_label=heading.text if heading else ""
                )
            )
        document = ContentDocument(
            kind=DocumentKind.EXPLICIT_LABELED, sections=tuple(sections)
        )
    return list(document_to_builtins(document).get("sections", []))


def _with_title(document: ContentDocument, essay: Essay) -> ContentDocument:
    """Fill missing document copy from the essay record."""
    return ContentDocument(
        kind=document.kind,
        greeting=document.greeting,
        title=document.title or essay.title,
        subtitle=document.subtitle or essay.subtitle,
        sections=document.sections,
    )


def course_page_from_record(record: cabc.Mapping[str, typ.Any]) -> CoursePage:
    """Build a :class:`CoursePage` from a stored ``coursePageContent`` record."""
    page_id = _text(record.get("pageId"))
    if not page_id:
        msg = "Course page record is missing 'pageId'."
        raise ContentStoreError(msg)
    letter = record.get("letterContent")
    document = None
    if letter:
        try:
            document = decode_document(
                letter, default_kind=DocumentKind.EXPLICIT_LABELED
            )
        except ContentDocumentError as exc:
            msg = f"Course page '{page_id}' has invalid letter content: {exc}"
            raise ContentStoreError(msg) from exc
    return CoursePage(
        page_id=page_id,
        record_id=_text(record.get("id")),
        hero_title=_text(record.get("heroTitle")),
        hero_subtitle=_text(record.get("heroSubtitle")),
        letter_content=document,
    )


def essay_from_record(record: cabc.Mapping[str, typ.Any]) -> Essay:
    """Build an :class:`Essay` from a stored ``essays`` record."""
    slug = _text(record.get("slug"))
    if not slug:
        msg = "Essay record is missing 'slug'."
        raise ContentStoreError(msg)
    sections = record.get("sections")
    tags = record.get("tags") or ()
    read_time = record.get("readTime")
    return Essay(
        slug=slug,
        title=_text(record.get("title")) or slug,
        record_id=_text(record.get("id")),
        subtitle=_text(record.get("subtitle")),
        excerpt=_text(record.get("excerpt")),
        content=record.get("content"),
        sections=list(sections) if isinstance(sections, list) else None,
        letter_content=record.get("letterContent"),
        tags=tuple(str(tag) for tag in tags) if isinstance(tags, list) else (),
        cover_image=_text(record.get("coverImage")),
        featured=bool(record.get("featured", False)),
        published=bool(record.get("published", False)),
        read_time=int(read_time) if isinstance(read_time, int | float) else None,
        created_at=parse_timestamp(record.get("createdAt")),
        published_at=parse_timestamp(record.get("publishedAt")),
    )


def sort_essays(essays: cabc.Iterable[Essay]) -> list[Essay]:
    """Return published essays, newest ``published_at`` then ``created_at`` first."""
    floor = dt.datetime.min.replace(tzinfo=dt.UTC)
    published = [essay for essay in essays if essay.published]
    return sorted(
        published,
        key=lambda essay: (essay.published_at or floor, essay.created_at or floor),
        reverse=True,
    )


def parse_timestamp(value: object) -> dt.datetime | None:
    """Parse epoch milliseconds or ISO-8601 text into an aware UTC datetime."""
    match value:
        case None | "":
            return None
        case bool():
            return None
        case int() | float():
            return dt.datetime.fromtimestamp(value / 1000, tz=dt.UTC)
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)
        case str():
            try:
                parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                logger.warning("Ignoring unparseable timestamp %r", value)
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "ContentStore",
    "ContentStoreError",
    "CoursePage",
    "Essay",
    "course_page_from_record",
    "essay_from_record",
    "parse_timestamp",
    "resolve_essay_document",
    "sort_essays",
    "stored_essay_sections",
]
